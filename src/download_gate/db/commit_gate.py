"""Commit gating for store calls that run past their deadline.

A store call runs in a worker thread with its own session. When the waiting
request gives up, the gate is closed and any later commit on that session
raises instead of writing. Once a commit has started the gate can no longer
be closed, so the waiter must collect the real outcome.
"""

from __future__ import annotations

import threading

from sqlalchemy import event
from sqlalchemy.orm import Session


class StoreCallAbandoned(RuntimeError):
    """Raised inside a worker whose caller stopped waiting before any commit."""


class CommitGate:
    """Decides, exactly once, whether an in-flight store call may commit."""

    def __init__(self) -> None:
        # Guards the two flags only; never held across I/O.
        self._lock = threading.Lock()
        self._abandoned = False
        self._committing = False

    def attach(self, session: Session) -> None:
        event.listen(session, "before_commit", self._before_commit)

    def _before_commit(self, session: Session) -> None:
        with self._lock:
            if self._abandoned:
                raise StoreCallAbandoned("Store call abandoned before commit")
            self._committing = True

    def abandon(self) -> bool:
        """Close the gate.

        Returns:
            True if no commit has started, so nothing will be written.
            False if a commit is already under way.
        """
        with self._lock:
            if self._committing:
                return False
            self._abandoned = True
            return True
