"""Logging setup for the command-line surface."""
from __future__ import annotations

import json
import logging
import sys
from typing import Any

from flickercheck.core.engine import LogSink

ENGINE_LOGGER_NAME = "flickercheck.engine"


def configure_logging(level: str = "WARNING", json_format: bool = False) -> None:
    """Configure root logging with a deterministic format on stderr."""
    level_value = getattr(logging, level.upper(), logging.WARNING)

    handler = logging.StreamHandler(sys.stderr)
    if json_format:
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )

    logging.basicConfig(level=level_value, handlers=[handler], force=True)


def engine_log_sink(name: str = ENGINE_LOGGER_NAME) -> LogSink:
    """Engine sink writing each diagnostic line to ``name`` at INFO."""
    return logging.getLogger(name).info


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        return json.dumps(payload, sort_keys=True)


__all__ = ["ENGINE_LOGGER_NAME", "configure_logging", "engine_log_sink"]
