"""Request Version Extraction.

Provides the request-level sources of a pinned version:
- Header versioning (Version: 2018-01-02)
- Query parameter versioning (?v=2018-01-02)

Any request object exposing ``headers`` and ``query_params`` mappings is
accepted, so a Starlette/FastAPI ``Request`` works as well as
``VersionedRequest``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


@dataclass
class VersionedRequest:
    """Request carrying version candidates."""
    headers: Dict[str, str] = field(default_factory=dict)
    query_params: Dict[str, str] = field(default_factory=dict)


class VersionExtractor(ABC):
    """Base class for version extraction strategies."""

    @abstractmethod
    def extract(self, request: Any) -> Optional[str]:
        """Extract the raw version string from a request, if present."""
        pass


def _lookup(mapping: Optional[Mapping[str, str]], name: str, case_insensitive: bool) -> Optional[str]:
    if not mapping:
        return None
    value = mapping.get(name)
    if value is None and case_insensitive:
        lowered = name.lower()
        for key, candidate in mapping.items():
            if key.lower() == lowered:
                value = candidate
                break
    if value is None:
        return None
    value = value.strip()
    return value or None


class HeaderVersionExtractor(VersionExtractor):
    """Extract version from HTTP header."""

    def __init__(self, header_name: str = "Version"):
        self.header_name = header_name

    def extract(self, request: Any) -> Optional[str]:
        return _lookup(getattr(request, "headers", None), self.header_name, case_insensitive=True)


class QueryParamVersionExtractor(VersionExtractor):
    """Extract version from query parameter."""

    def __init__(self, param_name: str = "v"):
        self.param_name = param_name

    def extract(self, request: Any) -> Optional[str]:
        return _lookup(getattr(request, "query_params", None), self.param_name, case_insensitive=False)
