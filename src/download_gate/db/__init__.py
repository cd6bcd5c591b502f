"""Database configuration and utilities."""

from .commit_gate import CommitGate, StoreCallAbandoned
from .session import get_session_factory

__all__ = ["CommitGate", "StoreCallAbandoned", "get_session_factory"]
