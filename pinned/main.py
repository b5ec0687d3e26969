"""
pinned - service entry point

Wires the version catalog, error handlers and catalog endpoint into a
FastAPI application.
"""

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI

from pinned import __version__
from pinned.api import register_exception_handlers, set_version_manager, versions_router
from pinned.core.config import get_settings
from pinned.core.versioning import VersionManager
from pinned.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(manager: Optional[VersionManager] = None) -> FastAPI:
    """Create the application, optionally with a prebuilt catalog."""
    if manager is not None:
        set_version_manager(manager)

    app = FastAPI(
        title="pinned",
        description="Date-pinned API version negotiation",
        version=__version__,
    )
    register_exception_handlers(app)
    app.include_router(versions_router)

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "version": __version__}

    return app


if __name__ == "__main__":
    setup_logging()
    settings = get_settings()
    logger.info("Starting pinned...")
    uvicorn.run(
        create_app(),
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
