"""Session manager: create, persist and reload agent sessions as notes."""

import posixpath
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from ..models import ChatSession, SessionContext, SessionType, ToolCategory, dedupe_files
from ..observability.logging_config import get_logger
from ..vault.base import Vault, VaultFile, VaultFolder, normalize_path
from ..vault.frontmatter import parse_frontmatter, render_frontmatter

logger = get_logger(__name__)

SESSIONS_FOLDER = "Agent-Sessions"
MAX_TITLE_LENGTH = 100
NOTE_CHAT_SUFFIX = " Chat"

FORBIDDEN_CHARACTERS = re.compile(r'[\\/:*?"<>|]')
WHITESPACE_RUN = re.compile(r"\s+")
WIKILINK = re.compile(r"^\[\[(.+?)\]\]$")

# Header keys written by save_session; stale ones are removed on update.
SESSION_HEADER_KEYS = (
    "session_id",
    "type",
    "title",
    "source_note_path",
    "context_files",
    "context_depth",
    "enabled_tools",
    "require_confirmation",
    "created",
    "last_active",
)


def sanitize_file_name(name: str) -> str:
    """
    Make a title safe to use as a file name.

    Forbidden characters become dashes, whitespace runs collapse to a
    single space, the ends are trimmed and the result is cut to 100
    characters.
    """
    sanitized = FORBIDDEN_CHARACTERS.sub("-", name)
    sanitized = WHITESPACE_RUN.sub(" ", sanitized).strip()
    return sanitized[:MAX_TITLE_LENGTH]


def default_session_title(now: Optional[datetime] = None) -> str:
    """Date-stamped title for sessions created without one."""
    now = now or datetime.now()
    return sanitize_file_name(f"Agent Session {now:%Y-%m-%d %H:%M}")


def _parse_timestamp(value: Any, fallback: float) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
        except ValueError:
            logger.debug(f"Unparsable timestamp in session header: {value!r}")
    if fallback:
        return datetime.fromtimestamp(fallback, timezone.utc)
    return datetime.now(timezone.utc)


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


class SessionManager:
    """
    Manages agent sessions stored as markdown notes.

    Each session is one note under ``<history folder>/Agent-Sessions``. The
    header holds the machine-readable state; the body is the conversation.
    Context files are stored as wikilinks and resolved again on every load
    so that renamed or moved notes are still found.
    """

    def __init__(
        self,
        vault: Vault,
        history_folder: Optional[str] = None,
        default_context_depth: Optional[int] = None,
    ):
        """
        Initialize SessionManager.

        Args:
            vault: Vault holding session records and context files
            history_folder: State folder (defaults to SCRIBE_HISTORY_FOLDER)
            default_context_depth: Link depth for new sessions
                (defaults to SCRIBE_CONTEXT_DEPTH)
        """
        from ..config import Config

        if history_folder is None:
            history_folder = Config.get_history_folder()
        if default_context_depth is None:
            default_context_depth = Config.get_context_depth()

        self.vault = vault
        self.history_folder = normalize_path(history_folder)
        self.default_context_depth = default_context_depth

    def get_sessions_folder_path(self) -> str:
        return normalize_path(f"{self.history_folder}/{SESSIONS_FOLDER}")

    def get_history_path(self, title: str) -> str:
        """Record path for a title; always inside the sessions folder."""
        return f"{self.get_sessions_folder_path()}/{sanitize_file_name(title)}.md"

    async def _ensure_sessions_folder(self) -> None:
        await self.vault.ensure_folder(self.get_sessions_folder_path())

    def _new_context(
        self,
        context_files: Optional[list[VaultFile]] = None,
        context_depth: Optional[int] = None,
        enabled_tools: Optional[list[str]] = None,
        require_confirmation: Optional[list[str]] = None,
    ) -> SessionContext:
        return SessionContext(
            context_files=list(context_files or []),
            context_depth=self.default_context_depth if context_depth is None else context_depth,
            enabled_tools=(
                list(enabled_tools) if enabled_tools is not None else [ToolCategory.READ_ONLY.value]
            ),
            require_confirmation=list(require_confirmation or []),
        )

    async def create_agent_session(
        self,
        title: Optional[str] = None,
        context_files: Optional[list[VaultFile]] = None,
        context_depth: Optional[int] = None,
        enabled_tools: Optional[list[str]] = None,
        require_confirmation: Optional[list[str]] = None,
    ) -> ChatSession:
        """
        Create a free-standing agent session.

        The record itself is written on first save; only the sessions
        folder is created here, and failures to create it propagate.

        Args:
            title: Display name; a date-stamped default when omitted or blank
            context_files: Documents to seed the context with
            context_depth: Link-following depth (default from config)
            enabled_tools: Tool names or categories (default read-only)
            require_confirmation: Tools that must always prompt
        """
        safe_title = sanitize_file_name(title) if title else ""
        if not safe_title:
            safe_title = default_session_title()

        await self._ensure_sessions_folder()
        safe_title = self._unique_title(safe_title)

        session = ChatSession(
            id=self._generate_session_id(),
            type=SessionType.AGENT_SESSION,
            title=safe_title,
            context=self._new_context(context_files, context_depth, enabled_tools, require_confirmation),
            history_path=self.get_history_path(safe_title),
        )
        logger.info(f"Created agent session {session.id}: {session.title}")
        return session

    def _unique_title(self, title: str) -> str:
        """Title whose record path is not taken yet, numbered " (2)", " (3)", ... on collision."""
        candidate = title
        counter = 2
        while self.vault.get_by_path(self.get_history_path(candidate)) is not None:
            suffix = f" ({counter})"
            candidate = sanitize_file_name(title[: MAX_TITLE_LENGTH - len(suffix)].rstrip() + suffix)
            counter += 1
        return candidate

    async def create_note_chat_session(self, file: VaultFile) -> ChatSession:
        """Create a session anchored to one document, which seeds its context."""
        title = sanitize_file_name(f"{sanitize_file_name(file.basename)}{NOTE_CHAT_SUFFIX}")

        await self._ensure_sessions_folder()

        session = ChatSession(
            id=self._generate_session_id(),
            type=SessionType.NOTE_CHAT,
            title=title,
            context=self._new_context(context_files=[file]),
            history_path=self.get_history_path(title),
            source_note_path=file.path,
        )
        logger.info(f"Created note chat session {session.id} for {file.path}")
        return session

    async def get_note_chat_session(self, file: VaultFile) -> Optional[ChatSession]:
        """Load the existing note chat for a document, if there is one."""
        title = f"{sanitize_file_name(file.basename)}{NOTE_CHAT_SUFFIX}"
        record = self.vault.get_by_path(self.get_history_path(title))
        if not isinstance(record, VaultFile):
            return None
        return await self.load_session_from_file(record)

    async def get_or_create_note_chat_session(self, file: VaultFile) -> ChatSession:
        """Reuse a document's note chat, creating it on first use."""
        existing = await self.get_note_chat_session(file)
        if existing:
            return existing
        return await self.create_note_chat_session(file)

    async def load_session_from_file(self, file: VaultFile) -> Optional[ChatSession]:
        """
        Rebuild a session from its record.

        Returns:
            The session, or None if the record is missing or its header is
            unusable. Context entries that no longer resolve are dropped.
        """
        try:
            content = await self.vault.read(file)
        except (OSError, ValueError) as e:
            logger.warning(f"Cannot read session record {file.path}: {e}")
            return None

        # Prefer the host's header index; fall back to parsing the text.
        header = self.vault.get_header(file)
        if header is None:
            header = parse_frontmatter(content)
        if not header or not header.get("session_id") or not header.get("type"):
            logger.warning(f"Session record {file.path} has no usable header")
            return None

        try:
            session_type = SessionType(header["type"])
        except ValueError:
            logger.warning(f"Unknown session type {header['type']!r} in {file.path}")
            return None

        context_files = []
        for entry in _string_list(header.get("context_files")):
            resolved = self._resolve_context_file(entry)
            if resolved is None:
                logger.debug(f"Dropping unresolved context file {entry!r} from {file.path}")
                continue
            context_files.append(resolved)

        depth = header.get("context_depth")
        if not isinstance(depth, int) or isinstance(depth, bool) or depth < 0:
            depth = self.default_context_depth

        enabled_tools = (
            _string_list(header["enabled_tools"])
            if "enabled_tools" in header
            else [ToolCategory.READ_ONLY.value]
        )

        return ChatSession(
            id=str(header["session_id"]),
            type=session_type,
            title=str(header.get("title") or file.basename),
            context=SessionContext(
                context_files=dedupe_files(context_files),
                context_depth=depth,
                enabled_tools=enabled_tools,
                require_confirmation=_string_list(header.get("require_confirmation")),
            ),
            history_path=file.path,
            created=_parse_timestamp(header.get("created"), file.ctime),
            last_active=_parse_timestamp(header.get("last_active"), file.mtime),
            source_note_path=header.get("source_note_path") or None,
        )

    def _resolve_context_file(self, entry: str) -> Optional[VaultFile]:
        """Resolve a stored reference: wikilink first, then a legacy path."""
        entry = entry.strip()
        if not entry:
            return None

        match = WIKILINK.match(entry)
        if match:
            link_text = match.group(1).split("|", 1)[0].strip()
            resolved = self.vault.resolve_link(link_text, "")
        else:
            resolved = self.vault.get_by_path(entry)

        return resolved if isinstance(resolved, VaultFile) else None

    def _build_header(self, session: ChatSession) -> dict[str, Any]:
        header: dict[str, Any] = {
            "session_id": session.id,
            "type": session.type.value,
            "title": session.title,
        }
        if session.source_note_path:
            header["source_note_path"] = session.source_note_path

        header["context_files"] = [
            f"[[{self.vault.generate_link_text(file)}]]" for file in session.context.context_files
        ]
        header["context_depth"] = session.context.context_depth
        header["enabled_tools"] = list(session.context.enabled_tools)
        if session.context.require_confirmation:
            header["require_confirmation"] = list(session.context.require_confirmation)
        header["created"] = session.created.isoformat()
        header["last_active"] = session.last_active.isoformat()
        return header

    def _owns_record(self, session: ChatSession, record: Any) -> bool:
        if not isinstance(record, VaultFile):
            return False
        header = self.vault.get_header(record) or {}
        return str(header.get("session_id")) == session.id

    async def save_session(self, session: ChatSession) -> VaultFile:
        """
        Write the session header to its record.

        An existing record keeps its body; a new one is created (with any
        missing parent folders) with an empty body. A record at the path that
        belongs to another session is left alone and this session moves to a
        numbered title.
        """
        record = self.vault.get_by_path(session.history_path)
        if record is not None and not self._owns_record(session, record):
            session.title = self._unique_title(session.title)
            session.history_path = self.get_history_path(session.title)
            logger.warning(f"Record for session {session.id} was taken; saving to {session.history_path}")
            record = None

        header = self._build_header(session)

        if isinstance(record, VaultFile):

            def apply(frontmatter: dict) -> None:
                for key in SESSION_HEADER_KEYS:
                    frontmatter.pop(key, None)
                frontmatter.update(header)

            await self.vault.update_header(record, apply)
            logger.debug(f"Updated session record {record.path}")
            return record

        parent = posixpath.dirname(session.history_path)
        if parent:
            await self.vault.ensure_folder(parent)
        record = await self.vault.create(session.history_path, render_frontmatter(header, ""))
        logger.info(f"Saved new session record {record.path}")
        return record

    async def get_recent_sessions(
        self, limit: int = 10, session_type: Optional[SessionType] = None
    ) -> list[ChatSession]:
        """Sessions in the sessions folder, most recently active first."""
        folder = self.vault.get_by_path(self.get_sessions_folder_path())
        if not isinstance(folder, VaultFolder):
            return []

        sessions = []
        for child in self.vault.list_folder(folder):
            if not isinstance(child, VaultFile) or child.extension != "md":
                continue
            session = await self.load_session_from_file(child)
            if session and (session_type is None or session.type == session_type):
                sessions.append(session)

        sessions.sort(key=lambda s: s.last_active, reverse=True)
        return sessions[:limit]

    async def add_context_file(self, session: ChatSession, file: VaultFile) -> bool:
        """Add a document to the session context and persist. False if present."""
        if not session.context.add_file(file):
            return False
        await self.save_session(session)
        return True

    async def remove_context_file(self, session: ChatSession, file: VaultFile) -> bool:
        """Remove a document from the session context and persist."""
        if not session.context.remove_file(file):
            return False
        await self.save_session(session)
        return True

    async def update_session_context(
        self,
        session: ChatSession,
        context_depth: Optional[int] = None,
        enabled_tools: Optional[list[str]] = None,
        require_confirmation: Optional[list[str]] = None,
    ) -> ChatSession:
        """Change context settings and persist."""
        if context_depth is not None:
            if context_depth < 0:
                raise ValueError("context_depth must be >= 0")
            session.context.context_depth = context_depth
        if enabled_tools is not None:
            session.context.enabled_tools = list(enabled_tools)
        if require_confirmation is not None:
            session.context.require_confirmation = list(require_confirmation)

        await self.save_session(session)
        return session

    def _generate_session_id(self) -> str:
        return f"session-{uuid.uuid4().hex[:12]}"
