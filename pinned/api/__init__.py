"""API routing for version negotiation."""

from pinned.api.versioning import (
    get_version_manager,
    register_exception_handlers,
    require_version,
    set_version_manager,
    version_error_response,
    versions_router,
)

__all__ = [
    "get_version_manager",
    "register_exception_handlers",
    "require_version",
    "set_version_manager",
    "version_error_response",
    "versions_router",
]
