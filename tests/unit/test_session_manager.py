"""Tests for SessionManager - titles, note chats and loading records."""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from scribe_agent.agent import SessionManager, default_session_title, sanitize_file_name
from scribe_agent.models import SessionType, ToolCategory
from scribe_agent.vault import Vault, VaultFile


@pytest.fixture
def mock_vault():
    """Vault double mirroring a host application's API."""
    vault = MagicMock(spec=Vault)
    vault.get_by_path.return_value = None
    vault.resolve_link.return_value = None
    vault.get_header.return_value = None
    vault.read = AsyncMock(return_value="test content")
    vault.ensure_folder = AsyncMock()
    return vault


@pytest.fixture
def manager(mock_vault) -> SessionManager:
    return SessionManager(mock_vault, history_folder="gemini-scribe", default_context_depth=2)


@pytest.fixture
def note() -> VaultFile:
    return VaultFile(path="notes/test.md")


class TestSanitizeFileName:
    """Test title sanitization rules."""

    def test_replaces_colon(self):
        assert sanitize_file_name("Agent: Test Mode") == "Agent- Test Mode"

    def test_replaces_every_forbidden_character(self):
        result = sanitize_file_name('Test\\File/Name:With*Forbidden?Chars"<>|')
        assert result == "Test-File-Name-With-Forbidden-Chars----"
        for char in '\\/:*?"<>|':
            assert char not in result

    def test_normalizes_whitespace(self):
        assert sanitize_file_name("  Test   Multiple   Spaces  ") == "Test Multiple Spaces"
        assert sanitize_file_name("Tabs\tand\nnewlines") == "Tabs and newlines"

    def test_limits_length(self):
        assert len(sanitize_file_name("A" * 150)) == 100

    def test_is_idempotent(self):
        once = sanitize_file_name(' Weird: "name" / here ')
        assert sanitize_file_name(once) == once

    def test_default_title_is_sanitized(self):
        title = default_session_title(datetime(2026, 3, 4, 9, 30))
        assert title == "Agent Session 2026-03-04 09-30"


class TestCreateAgentSession:
    """Test free-standing session creation."""

    @pytest.mark.asyncio
    async def test_sanitizes_title_and_history_path(self, manager):
        session = await manager.create_agent_session("Agent: Test Mode")

        assert session.title == "Agent- Test Mode"
        assert session.history_path == "gemini-scribe/Agent-Sessions/Agent- Test Mode.md"

    @pytest.mark.asyncio
    async def test_long_title_is_truncated(self, manager):
        session = await manager.create_agent_session("A" * 150)
        assert len(session.title) <= 100

    @pytest.mark.asyncio
    async def test_default_title_when_none_provided(self, manager):
        session = await manager.create_agent_session()

        assert session.title.startswith("Agent Session")
        assert session.type == SessionType.AGENT_SESSION
        assert ":" not in session.history_path

    @pytest.mark.asyncio
    async def test_blank_title_falls_back_to_default(self, manager):
        session = await manager.create_agent_session("   ")
        assert session.title.startswith("Agent Session")

    @pytest.mark.asyncio
    async def test_seeds_context_files_without_duplicates(self, manager, note):
        other = VaultFile(path="notes/other.md")
        session = await manager.create_agent_session(
            "Test Session", context_files=[note, other, VaultFile(path="notes/test.md")]
        )

        assert session.context.context_files == [note, other]

    @pytest.mark.asyncio
    async def test_defaults(self, manager):
        session = await manager.create_agent_session("Defaults")

        assert session.context.context_depth == 2
        assert session.context.enabled_tools == [ToolCategory.READ_ONLY.value]
        assert session.context.require_confirmation == []
        assert session.id.startswith("session-")

    @pytest.mark.asyncio
    async def test_ensures_sessions_folder(self, manager, mock_vault):
        await manager.create_agent_session("Folder")
        mock_vault.ensure_folder.assert_awaited_once_with("gemini-scribe/Agent-Sessions")

    @pytest.mark.asyncio
    async def test_folder_creation_error_propagates(self, manager, mock_vault):
        mock_vault.ensure_folder.side_effect = PermissionError("read-only vault")

        with pytest.raises(PermissionError):
            await manager.create_agent_session("Nope")

    @pytest.mark.asyncio
    async def test_taken_title_is_numbered(self, manager, mock_vault):
        taken = {
            "gemini-scribe/Agent-Sessions/Planning.md",
            "gemini-scribe/Agent-Sessions/Planning (2).md",
        }
        mock_vault.get_by_path.side_effect = lambda path: VaultFile(path=path) if path in taken else None

        session = await manager.create_agent_session("Planning")

        assert session.title == "Planning (3)"
        assert session.history_path == "gemini-scribe/Agent-Sessions/Planning (3).md"

    @pytest.mark.asyncio
    async def test_numbered_long_title_stays_within_limit(self, manager, mock_vault):
        first = "A" * 100
        mock_vault.get_by_path.side_effect = lambda path: (
            VaultFile(path=path) if path == f"gemini-scribe/Agent-Sessions/{first}.md" else None
        )

        session = await manager.create_agent_session("A" * 150)

        assert session.title == "A" * 96 + " (2)"
        assert len(session.title) == 100


class TestNoteChatSessions:
    """Test sessions bound to a document."""

    @pytest.mark.asyncio
    async def test_sanitizes_note_chat_title(self, manager):
        session = await manager.create_note_chat_session(VaultFile(path="Test:File*Name.md"))

        assert session.title == "Test-File-Name Chat"
        assert session.history_path.endswith("Test-File-Name Chat.md")

    @pytest.mark.asyncio
    async def test_note_chat_type_and_context(self, manager, note):
        session = await manager.create_note_chat_session(note)

        assert session.type == SessionType.NOTE_CHAT
        assert session.source_note_path == note.path
        assert note in session.context.context_files

    @pytest.mark.asyncio
    async def test_lookup_uses_sanitized_path(self, manager, mock_vault):
        result = await manager.get_note_chat_session(VaultFile(path="Test:File.md"))

        assert result is None
        mock_vault.get_by_path.assert_called_with("gemini-scribe/Agent-Sessions/Test-File Chat.md")

    @pytest.mark.asyncio
    async def test_lookup_loads_existing_record(self, manager, mock_vault, note):
        record = VaultFile(path="gemini-scribe/Agent-Sessions/test Chat.md")
        mock_vault.get_by_path.side_effect = lambda path: record if path == record.path else None
        mock_vault.get_header.return_value = {
            "session_id": "existing",
            "type": "note-chat",
            "title": "test Chat",
            "source_note_path": note.path,
        }

        session = await manager.get_note_chat_session(note)

        assert session is not None
        assert session.id == "existing"
        assert session.history_path == record.path

    @pytest.mark.asyncio
    async def test_get_or_create_creates_when_missing(self, manager, note):
        session = await manager.get_or_create_note_chat_session(note)
        assert session.type == SessionType.NOTE_CHAT
        assert session.title == "test Chat"


class TestLoadSessionFromFile:
    """Test rebuilding sessions from records."""

    @pytest.fixture
    def history_file(self) -> VaultFile:
        return VaultFile(path="gemini-scribe/Agent-Sessions/test.md", ctime=1.0, mtime=2.0)

    def _header(self, **overrides):
        header = {
            "session_id": "test-session",
            "type": "agent-session",
            "title": "Test Session",
            "context_files": [],
            "context_depth": 3,
            "enabled_tools": ["read_only"],
            "created": "2026-01-02T03:04:05+00:00",
            "last_active": "2026-01-03T03:04:05+00:00",
        }
        header.update(overrides)
        return header

    @pytest.mark.asyncio
    async def test_resolves_wikilinks_from_vault_root(self, manager, mock_vault, history_file):
        first = VaultFile(path="Test File.md")
        second = VaultFile(path="deep/Another File.md")
        mock_vault.get_header.return_value = self._header(
            context_files=["[[Test File]]", "[[Another File]]"]
        )
        mock_vault.resolve_link.side_effect = [first, second]

        session = await manager.load_session_from_file(history_file)

        mock_vault.resolve_link.assert_any_call("Test File", "")
        mock_vault.resolve_link.assert_any_call("Another File", "")
        assert session.context.context_files == [first, second]
        assert session.context.context_depth == 3
        assert session.context.enabled_tools == ["read_only"]

    @pytest.mark.asyncio
    async def test_alias_is_stripped_before_resolution(self, manager, mock_vault, history_file):
        mock_vault.get_header.return_value = self._header(context_files=["[[Plan|the plan]]"])
        mock_vault.resolve_link.return_value = VaultFile(path="Plan.md")

        session = await manager.load_session_from_file(history_file)

        mock_vault.resolve_link.assert_called_once_with("Plan", "")
        assert len(session.context.context_files) == 1

    @pytest.mark.asyncio
    async def test_legacy_paths_fall_back_to_path_lookup(self, manager, mock_vault, history_file):
        legacy = VaultFile(path="path/to/file.md")
        mock_vault.get_header.return_value = self._header(context_files=["path/to/file.md"])
        mock_vault.get_by_path.return_value = legacy

        session = await manager.load_session_from_file(history_file)

        mock_vault.get_by_path.assert_called_with("path/to/file.md")
        assert session.context.context_files == [legacy]

    @pytest.mark.asyncio
    async def test_mixed_forms_keep_order_and_drop_unresolved(self, manager, mock_vault, history_file):
        linked = VaultFile(path="A.md")
        legacy = VaultFile(path="folder/B.md")
        mock_vault.get_header.return_value = self._header(
            context_files=["[[A]]", "[[Gone]]", "folder/B.md", "missing.md"]
        )
        mock_vault.resolve_link.side_effect = lambda text, source: linked if text == "A" else None
        mock_vault.get_by_path.side_effect = lambda path: legacy if path == "folder/B.md" else None

        session = await manager.load_session_from_file(history_file)

        assert session.context.context_files == [linked, legacy]

    @pytest.mark.asyncio
    async def test_timestamps_parsed(self, manager, mock_vault, history_file):
        mock_vault.get_header.return_value = self._header()

        session = await manager.load_session_from_file(history_file)

        assert session.created.isoformat() == "2026-01-02T03:04:05+00:00"
        assert session.last_active.isoformat() == "2026-01-03T03:04:05+00:00"
        assert session.history_path == history_file.path

    @pytest.mark.asyncio
    async def test_missing_timestamps_fall_back_to_file_stat(self, manager, mock_vault, history_file):
        header = self._header()
        del header["created"]
        mock_vault.get_header.return_value = header

        session = await manager.load_session_from_file(history_file)

        assert session.created.timestamp() == 1.0

    @pytest.mark.asyncio
    async def test_record_without_header_is_not_found(self, manager, mock_vault, history_file):
        mock_vault.get_header.return_value = None
        assert await manager.load_session_from_file(history_file) is None

    @pytest.mark.asyncio
    async def test_record_missing_session_id_is_not_found(self, manager, mock_vault, history_file):
        mock_vault.get_header.return_value = self._header(session_id=None)
        assert await manager.load_session_from_file(history_file) is None

    @pytest.mark.asyncio
    async def test_unknown_type_is_not_found(self, manager, mock_vault, history_file):
        mock_vault.get_header.return_value = self._header(type="podcast")
        assert await manager.load_session_from_file(history_file) is None

    @pytest.mark.asyncio
    async def test_unreadable_record_is_not_found(self, manager, mock_vault, history_file):
        mock_vault.read.side_effect = FileNotFoundError("gone")
        assert await manager.load_session_from_file(history_file) is None
