"""Version 1 API endpoints."""

from .endpoints import downloads_router, gate_router, system_router

__all__ = ["downloads_router", "gate_router", "system_router"]
