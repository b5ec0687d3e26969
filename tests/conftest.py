import os
import pytest


# List of environment variables that may be modified by tests
_ENV_VARS_TO_ISOLATE = [
    "VERSION_HEADER",
    "VERSION_QUERY_PARAM",
    "VERSION_DATE_FORMAT",
    "VERSION_RESPONSE_HEADER",
    "LOG_LEVEL",
    "LOG_JSON",
]


@pytest.fixture(autouse=True)
def env_isolation():
    """Isolate environment variables and cached settings between tests."""
    from pinned.core.config import reset_settings

    backup = {k: os.environ.get(k) for k in _ENV_VARS_TO_ISOLATE}
    reset_settings()
    try:
        yield
    finally:
        for k, v in backup.items():
            if v is None:
                os.environ.pop(k, None)
            else:
                os.environ[k] = v
        reset_settings()


@pytest.fixture(autouse=True)
def version_manager_isolation():
    """Reset the global version manager between tests."""
    from pinned.api.versioning import set_version_manager

    set_version_manager(None)
    try:
        yield
    finally:
        set_version_manager(None)


def rename_b_to_a(m):
    m["A"] = m["B"]
    del m["B"]
    return m


@pytest.fixture
def catalog():
    """Catalog with three dated versions; the latest renames B to A."""
    from pinned.core.versioning import Change, Version, VersionManager

    vm = VersionManager()
    vm.add(Version(date="2016-01-02"))
    vm.add(Version(date="2017-01-02"))
    vm.add(
        Version(
            date="2018-01-02",
            changes=[Change(description="Rename B to A.", actions={"TestObject": rename_b_to_a})],
        )
    )
    return vm
