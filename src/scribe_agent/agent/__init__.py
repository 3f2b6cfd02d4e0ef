"""Agent components: sessions, history, context assembly and the turn loop."""

from .agent_runner import AgentRunner
from .context_builder import ContextBuilder, extract_links
from .session_history import HistoryEntry, SessionHistory
from .session_manager import SessionManager, default_session_title, sanitize_file_name

__all__ = [
    "AgentRunner",
    "ContextBuilder",
    "HistoryEntry",
    "SessionHistory",
    "SessionManager",
    "default_session_title",
    "extract_links",
    "sanitize_file_name",
]
