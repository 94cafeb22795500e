"""
Logging setup for the agro advisor CLI.

``configure_logging(config)`` is called once per CLI command, right after the
config is loaded and before the rule table is read. Library modules only
ever call ``logging.getLogger(__name__)``.

Console records go to stderr; ``advise --json`` writes the advisory alone to
stdout.

With ``json_format = true`` in the ``[logging]`` section each record is one
JSON object. Context passed through ``extra=`` is promoted to top-level keys,
so the rule store, weather client and translation overlay records can be
filtered by their fields::

    {"ts": "2026-10-19T09:00:00Z", "level": "WARNING",
     "logger": "agro_advisor.ingestion.weather_client",
     "msg": "Weather lookup failed [NETWORK_ERROR]: ...",
     "weather_error": "NETWORK_ERROR"}

Known context fields: ``rule_source``, ``rules_loaded``, ``weather_error``,
``target_language``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from agro_advisor.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Collaborator libraries that log every request at INFO.
QUIET_LOGGERS = ("httpx", "httpcore")

_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


class _JsonFormatter(logging.Formatter):
    """One JSON object per record; ``extra=`` context becomes top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
                LOG_DATE_FORMAT
            ),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(_context(record))
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        # Devanagari / Gurmukhi advice text stays readable in the log file.
        return json.dumps(payload, default=str, ensure_ascii=False)


def _context(record: logging.LogRecord) -> dict:
    return {
        key: val
        for key, val in record.__dict__.items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


def resolve_log_path(log_file: str, root: Optional[Path] = None) -> Optional[Path]:
    """Absolute log file path, or ``None`` when file logging is disabled.

    Relative paths resolve against the project root, so running the CLI from
    another directory still writes to ``<root>/data/logs``.
    """
    if not log_file:
        return None
    path = Path(log_file)
    if path.is_absolute():
        return path
    if root is None:
        from agro_advisor.config import _find_project_root
        root = _find_project_root()
    return root / path


def configure_logging(config: "LoggingConfig") -> None:
    """Install stderr (and optional file) handlers on the root logger.

    Args:
        config: ``[logging]`` section of ``AppConfig``.
    """
    level = getattr(logging, config.level.upper(), logging.INFO)
    formatter: logging.Formatter = (
        _JsonFormatter()
        if config.json_format
        else logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    log_path = resolve_log_path(config.log_file)
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
