"""Structured logging setup for version negotiation."""

import json
import logging
import sys

from pinned.core.config import get_settings


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        data = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        # Structured fields emitted by the catalog, resolver and migrator
        for attr in [
            "version",
            "type_name",
            "header_version",
            "query_version",
            "error_code",
            "steps",
        ]:
            if hasattr(record, attr):
                data[attr] = getattr(record, attr)
        return json.dumps(data, ensure_ascii=False, default=str)


def setup_logging() -> None:
    settings = get_settings()
    root = logging.getLogger()
    root.setLevel(settings.LOG_LEVEL.upper())
    handler = logging.StreamHandler(sys.stdout)
    if settings.LOG_JSON:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.handlers = [handler]
