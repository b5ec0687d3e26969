"""API Versioning Module.

Provides date-pinned API versioning:
- Dated version catalog
- Version resolution from header or query parameter
- Deprecation gating
- Payload migration to the canonical shape
"""

from pinned.core.versioning.version import (
    DATE_FORMAT,
    Action,
    FieldMap,
    Change,
    Version,
    parse_version_date,
)
from pinned.core.versioning.router import (
    VersionedRequest,
    VersionExtractor,
    HeaderVersionExtractor,
    QueryParamVersionExtractor,
)
from pinned.core.versioning.migration import (
    Migratable,
    type_name_of,
    select_actions,
    run_chain,
    migrate,
    SchemaTransformBuilder,
    rename,
)
from pinned.core.versioning.manager import VersionManager

__all__ = [
    # Version
    "DATE_FORMAT",
    "Action",
    "FieldMap",
    "Change",
    "Version",
    "parse_version_date",
    # Router
    "VersionedRequest",
    "VersionExtractor",
    "HeaderVersionExtractor",
    "QueryParamVersionExtractor",
    # Migration
    "Migratable",
    "type_name_of",
    "select_actions",
    "run_chain",
    "migrate",
    "SchemaTransformBuilder",
    "rename",
    # Manager
    "VersionManager",
]
