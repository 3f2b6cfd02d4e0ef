"""Observability module for structured logging."""

from .logging_config import (
    add_context,
    clear_context,
    configure_from_env,
    get_context,
    get_logger,
    setup_logging,
)

__all__ = [
    "add_context",
    "clear_context",
    "configure_from_env",
    "get_context",
    "get_logger",
    "setup_logging",
]
