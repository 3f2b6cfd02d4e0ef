"""Centralized logging configuration with structured logging support."""

import json
import logging
import logging.config
import os
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

_log_context: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})

# Attributes every LogRecord carries; anything else was passed via ``extra``.
_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)


class ContextualFormatter(logging.Formatter):
    """Text formatter that prefixes the active session/tool context."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = _log_context.get()
        if not context:
            return message
        fields = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{message} [{fields}]"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        context = _log_context.get()
        if context:
            log_data["context"] = context

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def setup_logging(
    level: str = "INFO",
    format_type: str = "text",
    log_file: Optional[str] = None,
) -> None:
    """
    Setup centralized logging configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Format type ('json' or 'text')
        log_file: Optional file path for logging to file
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = "json" if format_type == "json" else "detailed"

    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "stream": sys.stderr,
            "level": log_level,
            "formatter": formatter,
        }
    }

    if log_file:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "filename": log_file,
            "level": log_level,
            "formatter": formatter,
        }

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": JSONFormatter,
            },
            "detailed": {
                "()": ContextualFormatter,
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": handlers,
        "loggers": {
            "scribe_agent": {
                "level": log_level,
                "handlers": list(handlers.keys()),
                "propagate": False,
            },
        },
    }

    logging.config.dictConfig(config)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def add_context(**kwargs: Any) -> None:
    """
    Add contextual fields to all subsequent log messages in this context.

    Args:
        **kwargs: Key-value pairs to add to log context
    """
    current_context = _log_context.get().copy()
    current_context.update(kwargs)
    _log_context.set(current_context)


def clear_context() -> None:
    """Clear all contextual fields."""
    _log_context.set({})


def get_context() -> Dict[str, Any]:
    """Get current log context."""
    return _log_context.get().copy()


def configure_from_env() -> None:
    """Configure logging from LOG_LEVEL, LOG_FORMAT and LOG_FILE."""
    setup_logging(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format_type=os.getenv("LOG_FORMAT", "text"),
        log_file=os.getenv("LOG_FILE"),
    )
