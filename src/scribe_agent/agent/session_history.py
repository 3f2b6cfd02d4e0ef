"""Conversation history kept in the body of a session record."""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

from ..models import ChatSession
from ..observability.logging_config import get_logger
from ..vault.base import Vault, VaultFile
from ..vault.frontmatter import split_frontmatter
from .session_manager import SessionManager

logger = get_logger(__name__)

ROLE_HEADINGS = {"user": "User", "model": "Model"}
ENTRY_HEADER = re.compile(r"^## (User|Model)[ \t]*\n\*([^*\n]+)\*[ \t]*\n", re.MULTILINE)


@dataclass
class HistoryEntry:
    """One message in a session's conversation."""

    role: str  # "user" or "model"
    content: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def format_entry(entry: HistoryEntry) -> str:
    heading = ROLE_HEADINGS[entry.role]
    return f"## {heading}\n*{entry.timestamp.isoformat()}*\n\n{entry.content.strip()}\n"


def parse_entries(body: str) -> list[HistoryEntry]:
    """Split a record body back into entries, oldest first."""
    matches = list(ENTRY_HEADER.finditer(body))
    entries = []
    for index, match in enumerate(matches):
        end = matches[index + 1].start() if index + 1 < len(matches) else len(body)
        try:
            timestamp = datetime.fromisoformat(match.group(2).strip())
        except ValueError:
            logger.debug(f"Unparsable history timestamp: {match.group(2)!r}")
            timestamp = datetime.now(timezone.utc)
        entries.append(
            HistoryEntry(
                role=match.group(1).lower(),
                content=body[match.end():end].strip(),
                timestamp=timestamp,
            )
        )
    return entries


class SessionHistory:
    """
    Appends and reads conversation entries in session records.

    The body stays plain markdown so users can read and edit it; each
    entry is a ``## User`` or ``## Model`` heading followed by an italic
    timestamp line.
    """

    def __init__(self, vault: Vault, session_manager: SessionManager):
        self.vault = vault
        self.session_manager = session_manager

    async def add_entry(self, session: ChatSession, role: str, content: str) -> HistoryEntry:
        """
        Append an entry and mark the session active.

        The record is created first if it does not exist yet.
        """
        if role not in ROLE_HEADINGS:
            raise ValueError(f"Unknown history role: {role}")

        entry = HistoryEntry(role=role, content=content)
        session.touch()
        record = await self.session_manager.save_session(session)

        text = await self.vault.read(record)
        await self.vault.modify(record, f"{text.rstrip()}\n\n{format_entry(entry)}")

        logger.debug(f"Added {role} entry to {record.path}")
        return entry

    async def get_history(self, session: ChatSession) -> list[HistoryEntry]:
        """Entries of a session, oldest first; [] if nothing was saved yet."""
        record = self.vault.get_by_path(session.history_path)
        if not isinstance(record, VaultFile):
            return []

        text = await self.vault.read(record)
        _, body = split_frontmatter(text)
        return parse_entries(body)
