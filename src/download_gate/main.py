"""Main entry point for the Download Gate application."""

from __future__ import annotations

import logging

import httpx
from fastapi import FastAPI

from download_gate import __version__
from download_gate.api.errors import install_error_handling
from download_gate.api.v1 import downloads_router, gate_router, system_router
from download_gate.core.settings import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Download Gate API",
    description="CAPTCHA-gated download catalog and anonymized download counter",
    version=__version__,
)

install_error_handling(app)

app.include_router(gate_router)
app.include_router(downloads_router)
app.include_router(system_router)


@app.on_event("startup")
async def on_startup() -> None:
    app.state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(settings.captcha_timeout_seconds),
    )
    if settings.allow_recaptcha_bypass:
        logger.warning("reCAPTCHA bypass is enabled; gate tokens are issued without verification")


@app.on_event("shutdown")
async def on_shutdown() -> None:
    client: httpx.AsyncClient | None = getattr(app.state, "http_client", None)
    if client is not None:
        await client.aclose()
        app.state.http_client = None


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("download_gate.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
