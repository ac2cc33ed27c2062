# sponsor_detector/logging_core/logger.py
"""
Centralized structured logging setup for the sponsor detector.

Provides a pre-configured logger that emits JSON lines with mandatory fields:
- timestamp (ISO)
- run_id
- stage_name (optional, filled by caller)
- event_type (pipeline_start/start/success/failure/pipeline_success/pipeline_failure)
- level
- message
- metadata (dict)

All logs in the system MUST use the logger obtained from get_logger().
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, MutableMapping, Tuple
from uuid import UUID


ROOT_LOGGER_NAME = "sponsor_detector"


class JSONFormatter(logging.Formatter):
    """Custom formatter that outputs structured JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        log_record: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "level": record.levelname,
            "message": record.getMessage(),
        }

        if hasattr(record, "run_id"):
            log_record["run_id"] = str(record.run_id)

        extra_fields = ["stage_name", "event_type", "metadata"]
        for field in extra_fields:
            value = getattr(record, field, None)
            if value is not None:
                log_record[field] = value

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_record, ensure_ascii=False, default=str)


class RunLoggerAdapter(logging.LoggerAdapter):
    """Binds run_id to every record while keeping per-call extra fields."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(kwargs.get("extra") or {}), **self.extra}
        return msg, kwargs


def _base_logger() -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.propagate = False

    # Avoid duplicate handlers
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        if logger.level == logging.NOTSET:
            logger.setLevel(logging.INFO)

    return logger


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Set the process-wide log level. Called once at startup."""
    logger = _base_logger()
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level = resolved if isinstance(resolved, int) else logging.INFO
    logger.setLevel(level)
    return logger


def get_logger(run_id: UUID) -> RunLoggerAdapter:
    """
    Return a logger bound to the given request run.

    Logs are emitted as JSON lines to stdout. All runs share one underlying
    logger, so nothing accumulates per request.
    """
    return RunLoggerAdapter(_base_logger(), {"run_id": str(run_id)})


def log_event(
    logger: logging.Logger | logging.LoggerAdapter,
    level: int,
    message: str,
    *,
    stage_name: str | None = None,
    event_type: str,
    metadata: Dict[str, Any] | None = None,
    exc_info: bool = False,
) -> None:
    """
    Convenience wrapper for structured logging.

    Use this inside stages for consistency.
    """
    extra: Dict[str, Any] = {"event_type": event_type}
    if stage_name:
        extra["stage_name"] = stage_name
    if metadata:
        extra["metadata"] = metadata

    logger.log(level, message, extra=extra, exc_info=exc_info)
