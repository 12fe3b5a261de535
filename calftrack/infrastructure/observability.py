"""Structured Logging — JSON formatter and root-logger setup.

Invariants:
    - Every JSON line carries timestamp, level, logger and message
    - Ledger context passed via extra= (load_id, calf_id, ranch_id, ...) is
      copied onto the line only when set
    - setup_logging is idempotent: calling it again replaces its own handler
      instead of stacking a second one

Design Decisions:
    - Stdlib logging with a small JSONFormatter
    - SQLAlchemy engine chatter stays at WARNING unless log_sql is enabled
"""

import logging
import json
from datetime import datetime, timezone

LEDGER_CONTEXT_KEYS = (
    "load_id", "calf_id", "ranch_id", "acting_ranch_id", "registry",
    "record_count", "head_count", "excluded_count",
    "error_code", "path", "operation",
)

_HANDLER_NAME = "calftrack"


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log.update({
            key: record.__dict__[key]
            for key in LEDGER_CONTEXT_KEYS
            if record.__dict__.get(key) is not None
        })
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json", log_sql: bool = False):
    """Install the calftrack handler on the root logger."""
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if log_sql else logging.WARNING,
    )
