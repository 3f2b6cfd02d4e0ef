"""Shared agent types: sessions, their context and tool categories."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from .vault.base import VaultFile


class SessionType(Enum):
    """Kinds of persisted conversation."""

    AGENT_SESSION = "agent-session"  # Free-standing, user-named
    NOTE_CHAT = "note-chat"  # Bound to one source document


class ToolCategory(Enum):
    """Policy grouping for tools. A tag, not a type hierarchy."""

    READ_ONLY = "read_only"
    VAULT_OPERATIONS = "vault_operations"
    SKILLS = "skills"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SessionContext:
    """What a session can see and do."""

    context_files: list[VaultFile] = field(default_factory=list)
    context_depth: int = 2
    enabled_tools: list[str] = field(default_factory=lambda: [ToolCategory.READ_ONLY.value])
    require_confirmation: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.context_depth < 0:
            raise ValueError("context_depth must be >= 0")
        self.context_files = dedupe_files(self.context_files)

    def add_file(self, file: VaultFile) -> bool:
        """Append file unless already present. Returns True if added."""
        if any(f.path == file.path for f in self.context_files):
            return False
        self.context_files.append(file)
        return True

    def remove_file(self, file: VaultFile) -> bool:
        """Remove file by path. Returns True if it was present."""
        remaining = [f for f in self.context_files if f.path != file.path]
        removed = len(remaining) != len(self.context_files)
        self.context_files = remaining
        return removed


@dataclass
class ChatSession:
    """A persisted unit of agent conversation."""

    id: str
    type: SessionType
    title: str
    context: SessionContext
    history_path: str
    created: datetime = field(default_factory=utc_now)
    last_active: datetime = field(default_factory=utc_now)
    source_note_path: Optional[str] = None

    def touch(self) -> None:
        """Mark the session as active now."""
        self.last_active = utc_now()


def dedupe_files(files: list[VaultFile]) -> list[VaultFile]:
    """Drop repeated paths, keeping first occurrence order."""
    seen: set[str] = set()
    unique = []
    for file in files:
        if file.path not in seen:
            seen.add(file.path)
            unique.append(file)
    return unique
