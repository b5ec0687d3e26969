"""Version Manager.

Owns the dated version catalog and exposes:
- Registration with date validation (newest-first ordering)
- Request version resolution (query parameter vs header)
- Forward migration of object payloads to the canonical shape

The catalog is built at startup and read-only afterwards; ``add`` and
``deprecate`` must not run concurrently with ``parse`` or ``apply``.
"""

from __future__ import annotations

import bisect
import logging
from typing import Any, Dict, List, Optional

from pinned.core.errors import (
    DuplicateVersionError,
    InvalidVersionError,
    NoVersionSuppliedError,
    VersionDeprecatedError,
)
from pinned.core.versioning.migration import migrate, select_actions
from pinned.core.versioning.router import (
    HeaderVersionExtractor,
    QueryParamVersionExtractor,
    VersionExtractor,
)
from pinned.core.versioning.version import DATE_FORMAT, Action, FieldMap, Version, parse_version_date

logger = logging.getLogger(__name__)


class VersionManager:
    """Catalog of dated API versions."""

    def __init__(
        self,
        header_name: str = "Version",
        query_param: str = "v",
        date_format: str = DATE_FORMAT,
    ):
        self.date_format = date_format
        self._versions: List[Version] = []
        # Negated ordinals, ascending, aligned with _versions (newest first)
        self._keys: List[int] = []
        self._query_extractor: VersionExtractor = QueryParamVersionExtractor(query_param)
        self._header_extractor: VersionExtractor = HeaderVersionExtractor(header_name)

    @classmethod
    def from_settings(cls, settings: Any = None) -> "VersionManager":
        """Create a manager using configured source names and date format."""
        if settings is None:
            from pinned.core.config import get_settings

            settings = get_settings()
        return cls(
            header_name=settings.VERSION_HEADER,
            query_param=settings.VERSION_QUERY_PARAM,
            date_format=settings.VERSION_DATE_FORMAT,
        )

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def add(self, version: Version) -> Version:
        """Register a version.

        Raises:
            ParseError: If the version date is malformed.
            DuplicateVersionError: If the date is already registered.
        """
        key = -parse_version_date(version.date, self.date_format).toordinal()
        index = bisect.bisect_left(self._keys, key)
        if index < len(self._keys) and self._keys[index] == key:
            raise DuplicateVersionError(
                f"Version {version.date} is already registered", value=version.date
            )

        self._keys.insert(index, key)
        self._versions.insert(index, version)

        logger.info(
            f"Registered API version: {version}",
            extra={"version": version.date},
        )
        return version

    def versions(self) -> List[str]:
        """Get all version dates, newest first."""
        return [v.date for v in self._versions]

    def latest(self) -> Optional[Version]:
        """Get the most recent version (including deprecated)."""
        return self._versions[0] if self._versions else None

    def find(self, date: str) -> Optional[Version]:
        """Get a version by its exact date string."""
        for v in self._versions:
            if v.date == date:
                return v
        return None

    def deprecate(self, date: str) -> Version:
        """Mark a version as deprecated."""
        version = self.find(date)
        if version is None:
            raise InvalidVersionError(f"Unknown API version: {date}", value=date)
        version.deprecated = True
        logger.info(f"Deprecated API version: {date}", extra={"version": date})
        return version

    def supported_versions(self) -> List[Version]:
        """Get non-deprecated versions, newest first."""
        return [v for v in self._versions if not v.deprecated]

    def __len__(self) -> int:
        return len(self._versions)

    def __contains__(self, date: object) -> bool:
        return isinstance(date, str) and self.find(date) is not None

    # ------------------------------------------------------------------
    # Request resolution
    # ------------------------------------------------------------------

    def parse(self, request: Any) -> Version:
        """Resolve the version a request is pinned to.

        The query parameter is checked before the header. When both name
        known versions, the more recent one wins.

        Raises:
            NoVersionSuppliedError: Neither source carries a value.
            InvalidVersionError: A supplied value is not in the catalog.
            VersionDeprecatedError: The selected version is deprecated.
        """
        query_value = self._query_extractor.extract(request)
        header_value = self._header_extractor.extract(request)

        if query_value is None and header_value is None:
            raise NoVersionSuppliedError("API version is required")

        selected: Optional[Version] = None
        for value in (query_value, header_value):
            if value is None:
                continue
            candidate = self.find(value)
            if candidate is None:
                raise InvalidVersionError(f"Unknown API version: {value}", value=value)
            if selected is None or self._index(candidate) < self._index(selected):
                selected = candidate

        if selected.deprecated:
            raise VersionDeprecatedError(
                f"API version {selected.date} is deprecated",
                value=selected.date,
            )

        logger.debug(
            f"Resolved API version: {selected.date}",
            extra={
                "version": selected.date,
                "query_version": query_value,
                "header_version": header_value,
            },
        )
        return selected

    # ------------------------------------------------------------------
    # Migration
    # ------------------------------------------------------------------

    def newer_than(self, version: Version) -> List[Version]:
        """Get versions strictly newer than ``version``, oldest first."""
        index = self._index(version)
        return list(reversed(self._versions[:index]))

    def migration_chain(self, version: Version, type_name: str) -> List[Action]:
        """Get the transforms ``apply`` would run for a type, in order."""
        return select_actions(self.newer_than(version), type_name)

    def apply(self, version: Version, obj: Any) -> FieldMap:
        """Migrate an object's data from ``version`` to the canonical shape.

        Raises:
            InvalidVersionError: If ``version`` is not in this catalog.
        """
        return migrate(self.newer_than(version), obj)

    def _index(self, version: Version) -> int:
        for i, v in enumerate(self._versions):
            if v is version or v.date == version.date:
                return i
        raise InvalidVersionError(f"Unknown API version: {version.date}", value=version.date)

    def to_dict(self) -> Dict[str, Any]:
        latest = self.latest()
        return {
            "latest": latest.date if latest else None,
            "versions": [v.to_dict() for v in self._versions],
        }
