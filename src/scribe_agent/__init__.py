"""Agent sessions, skills and tools for a markdown note vault."""

from .config import Config
from .models import ChatSession, SessionContext, SessionType, ToolCategory

__all__ = [
    "ChatSession",
    "Config",
    "SessionContext",
    "SessionType",
    "ToolCategory",
]
