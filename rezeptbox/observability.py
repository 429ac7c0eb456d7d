"""Logging for the API and the CLI.

setup_logging() configures the root logger through dictConfig, which replaces
the root handlers instead of adding to them, so calling it again (every app
startup, every CLI run) never duplicates output.
"""

import json
import logging
import logging.config
from datetime import datetime, timezone

# fields passed with `extra=` that are copied into JSON records
EXTRA_FIELDS = ("error_code", "path", "file", "count")

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, str(getattr(record, key)))
            for key in EXTRA_FIELDS
            if getattr(record, key, None) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def logging_config(level: str = "INFO", fmt: str = "text") -> dict:
    level = level.upper()
    if not isinstance(logging.getLevelName(level), int):
        level = "INFO"
    formatter = (
        {"()": JSONFormatter} if fmt == "json" else {"format": TEXT_FORMAT}
    )
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": formatter},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
    }


def setup_logging(level: str = "INFO", fmt: str = "text"):
    logging.config.dictConfig(logging_config(level, fmt))
