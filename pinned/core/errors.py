"""Versioning errors and shared error codes.

Each failure kind is its own exception class so request handlers can
branch on the cause (400 vs 410) without matching error text.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    VERSION_PARSE_FAILED = "VERSION_PARSE_FAILED"  # Malformed version date
    VERSION_DUPLICATE = "VERSION_DUPLICATE"  # Date already registered
    VERSION_REQUIRED = "VERSION_REQUIRED"  # Neither header nor query supplied
    VERSION_INVALID = "VERSION_INVALID"  # Not in the catalog
    VERSION_DEPRECATED = "VERSION_DEPRECATED"  # Found but disallowed


class VersioningError(Exception):
    """Base class for version catalog and resolution failures."""

    code: ErrorCode = ErrorCode.VERSION_INVALID
    status_code: int = 400

    def __init__(self, message: str = "", value: Optional[str] = None):
        self.message = message or (self.__class__.__doc__ or "").strip()
        self.value = value
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.code.value, "detail": self.message}


class ParseError(VersioningError, ValueError):
    """Version date is not a valid calendar date."""

    code = ErrorCode.VERSION_PARSE_FAILED
    status_code = 500


class DuplicateVersionError(VersioningError):
    """A version with this date is already registered."""

    code = ErrorCode.VERSION_DUPLICATE
    status_code = 500


class NoVersionSuppliedError(VersioningError):
    """No API version supplied in the request."""

    code = ErrorCode.VERSION_REQUIRED
    status_code = 400


class InvalidVersionError(VersioningError):
    """Unknown API version."""

    code = ErrorCode.VERSION_INVALID
    status_code = 400


class VersionDeprecatedError(VersioningError):
    """API version is deprecated."""

    code = ErrorCode.VERSION_DEPRECATED
    status_code = 410


# Sentinel-style aliases
ErrNoVersionSupplied = NoVersionSuppliedError
ErrInvalidVersion = InvalidVersionError
ErrVersionDeprecated = VersionDeprecatedError


__all__ = [
    "ErrorCode",
    "VersioningError",
    "ParseError",
    "DuplicateVersionError",
    "NoVersionSuppliedError",
    "InvalidVersionError",
    "VersionDeprecatedError",
    "ErrNoVersionSupplied",
    "ErrInvalidVersion",
    "ErrVersionDeprecated",
]
