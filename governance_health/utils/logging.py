"""
Root logger setup for the CLI and the MCP server.

``configure_logging`` runs once per process, from ``cli.py``, before the
analyzer is built.  Library modules only ask for ``logging.getLogger(__name__)``.

Every handler writes to stderr or to a file.  stdout carries MCP frames when
the server runs over stdio.

With ``json_format = true`` each record becomes a single JSON line::

    {"ts": "2026-01-15T12:00:00Z", "level": "INFO", "logger": "governance_health.analyzer",
     "msg": "analyzed uniswap", "score": 67}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from governance_health.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# HTTP and protocol libraries log every request at INFO.
QUIET_LOGGERS = ("httpx", "httpcore", "mcp")

_RESERVED_FIELDS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


class _JsonFormatter(logging.Formatter):
    """Single-line JSON records; ``extra=`` fields are merged in."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict = {
            "ts": created.strftime(LOG_DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RESERVED_FIELDS and not key.startswith("_")
        )
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def configure_logging(config: "LoggingConfig") -> None:
    """Install stderr (and optionally file) handlers on the root logger.

    Args:
        config: ``[logging]`` section of ``AppConfig``.  ``log_file`` parent
            directories are created on demand.
    """
    level = logging.getLevelNamesMapping()[config.level]

    formatter = (
        _JsonFormatter()
        if config.json_format
        else logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    )

    handlers = [_handler(logging.StreamHandler(sys.stderr), level, formatter)]
    if config.log_file:
        path = Path(config.log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            _handler(logging.FileHandler(path, encoding="utf-8"), level, formatter)
        )

    logging.basicConfig(level=level, handlers=handlers, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
