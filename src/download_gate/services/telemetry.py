"""Public download counter with an anonymized, best-effort log."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol

from download_gate.core.security import hash_client_ip
from download_gate.db.time import utcnow

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"


class DownloadCounterStore(Protocol):
    """Single logical counter.

    ``increment`` may be a plain read-modify-write on stores without an atomic
    primitive, in which case concurrent increments can be lost.
    """

    def read(self) -> int: ...

    def increment(self) -> int: ...


class DownloadLogStore(Protocol):
    """Append-only sink for anonymized download rows."""

    def append(self, *, ip_hash: str, user_agent: str, downloaded_at: datetime) -> None: ...


class DailyCountSource(Protocol):
    def daily_counts(self, days: int, *, today: date | None = None) -> list[tuple[date, int]]: ...


@dataclass(frozen=True)
class DownloadLogEntry:
    """Row appended for each recorded download."""

    ip_hash: str
    user_agent: str
    downloaded_at: datetime


def client_ip_from_headers(headers: Mapping[str, str]) -> str:
    """Return the caller address as reported by the proxy chain.

    Uses the first ``X-Forwarded-For`` hop, then ``X-Real-IP``, then ``"unknown"``.
    """
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = (headers.get("x-real-ip") or "").strip()
    if real_ip:
        return real_ip
    return UNKNOWN


class TelemetryRecorder:
    """Reads and bumps the download counter and logs each download.

    The counter is the authoritative metric. The log write is independent:
    if it fails the error is logged and the increment still stands.
    """

    def __init__(
        self,
        counter: DownloadCounterStore,
        log_store: DownloadLogStore,
        *,
        ip_hash_salt: str | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.counter = counter
        self.log_store = log_store
        self._ip_hash_salt = ip_hash_salt
        self._clock = clock

    def current_total(self) -> int:
        return self.counter.read()

    def anonymize(self, ip: str) -> str:
        return hash_client_ip(ip, self._ip_hash_salt)

    def build_entry(self, client_ip: str, user_agent: str | None) -> DownloadLogEntry:
        return DownloadLogEntry(
            ip_hash=self.anonymize(client_ip),
            user_agent=user_agent or UNKNOWN,
            downloaded_at=self._clock(),
        )

    def record_download(self, client_ip: str, user_agent: str | None) -> int:
        """Increment the counter, append a log row, and return the new total."""
        total = self.counter.increment()

        entry = self.build_entry(client_ip, user_agent)
        try:
            self.log_store.append(
                ip_hash=entry.ip_hash,
                user_agent=entry.user_agent,
                downloaded_at=entry.downloaded_at,
            )
        except Exception:
            logger.exception("Download log insert failed (ip_hash=%s...)", entry.ip_hash[:12])
        return total


def daily_series(source: DailyCountSource, days: int) -> list[dict[str, object]]:
    """Return zero-filled ``{"date", "count"}`` rows, oldest first."""
    return [
        {"date": day.isoformat(), "count": count}
        for day, count in source.daily_counts(days)
    ]
