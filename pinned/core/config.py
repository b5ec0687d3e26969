"""Runtime settings for version negotiation.

Source names and the date format are configurable so deployments can
rename the header or query parameter without code changes.
"""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    # Request sources for the pinned version
    VERSION_HEADER: str = "Version"
    VERSION_QUERY_PARAM: str = "v"
    VERSION_DATE_FORMAT: str = "%Y-%m-%d"

    # Response header carrying the resolved version
    VERSION_RESPONSE_HEADER: str = "X-API-Version"

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }


_settings_cache: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings_cache
    if _settings_cache is None:
        _settings_cache = Settings()
    return _settings_cache


def reset_settings() -> None:
    """Drop the cached settings (used by tests after env changes)."""
    global _settings_cache
    _settings_cache = None
