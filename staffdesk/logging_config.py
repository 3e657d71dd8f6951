"""
Logging setup for staffdesk.

Text output for local runs, one JSON object per line when ``json_logs`` is on
(container log collectors). Records logged with ``extra={"tool": ...}`` or
similar carry that context into the JSON output. A rotating file under
``logs_dir`` always receives plain text.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone

LOG_FILE_NAME = "staffdesk.log"
_MAX_BYTES = 10 * 1024 * 1024
_BACKUP_COUNT = 5

_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Keys callers may attach via ``extra=`` that are worth keeping in JSON lines
CONTEXT_FIELDS = ("tool", "collection", "doc_id", "action_type")

_QUIET_LOGGERS = ("httpx", "httpcore", "anthropic", "aiosqlite")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _console_handler(level: int, json_logs: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if json_logs:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt="%H:%M:%S"))
    return handler


def _file_handler(level: int, logs_dir: str) -> logging.Handler:
    os.makedirs(logs_dir, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        os.path.join(logs_dir, LOG_FILE_NAME),
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    log_level: str | None = None,
    logs_dir: str | None = None,
    json_logs: bool | None = None,
) -> None:
    """
    Configure the root logger. Arguments left as None come from settings.

    Calling it again replaces the handlers installed by the previous call.
    """
    if log_level is None or logs_dir is None or json_logs is None:
        from .config import settings
        log_level = settings.log_level if log_level is None else log_level
        logs_dir = settings.logs_dir if logs_dir is None else logs_dir
        json_logs = settings.json_logs if json_logs is None else json_logs

    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        level=level,
        handlers=[_console_handler(level, json_logs), _file_handler(level, logs_dir)],
        force=True,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
