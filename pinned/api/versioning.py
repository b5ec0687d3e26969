"""FastAPI integration for date-pinned versions.

Features:
- Version resolution as a route dependency
- Error responses per failure kind (400 / 410)
- Resolved version echoed in a response header
- Catalog listing endpoint
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse

from pinned.core.config import get_settings
from pinned.core.errors import VersioningError
from pinned.core.versioning import Version, VersionManager

logger = logging.getLogger(__name__)


# Global version manager
_version_manager: Optional[VersionManager] = None


def get_version_manager() -> VersionManager:
    """Get the global version manager instance."""
    global _version_manager
    if _version_manager is None:
        _version_manager = VersionManager.from_settings()
    return _version_manager


def set_version_manager(manager: Optional[VersionManager]) -> None:
    """Replace the global version manager (``None`` resets it)."""
    global _version_manager
    _version_manager = manager


def version_error_response(exc: VersioningError) -> JSONResponse:
    """Build the JSON response for a versioning failure."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def _versioning_error_handler(request: Request, exc: VersioningError) -> JSONResponse:
    logger.info(
        f"Rejected API version for {request.url.path}: {exc.message}",
        extra={"error_code": exc.code.value, "version": exc.value},
    )
    return version_error_response(exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Map versioning errors to HTTP responses."""
    app.add_exception_handler(VersioningError, _versioning_error_handler)


def require_version(
    request: Request,
    response: Response,
    manager: VersionManager = Depends(get_version_manager),
) -> Version:
    """FastAPI dependency resolving the version a request is pinned to."""
    version = manager.parse(request)
    response.headers[get_settings().VERSION_RESPONSE_HEADER] = version.date
    return version


versions_router = APIRouter(tags=["versions"])


@versions_router.get("/versions")
def list_versions(manager: VersionManager = Depends(get_version_manager)) -> dict:
    """List all registered versions, newest first."""
    return manager.to_dict()
