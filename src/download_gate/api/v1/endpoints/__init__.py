"""API endpoint modules for version 1."""

from .downloads import router as downloads_router
from .gate import router as gate_router
from .system import router as system_router

__all__ = ["downloads_router", "gate_router", "system_router"]
