"""Tests for PermissionManager - enablement and confirmation policy."""

from typing import Any

import pytest

from scribe_agent.core import PermissionManager, truncate_text
from scribe_agent.models import SessionContext, ToolCategory
from scribe_agent.tools import Tool, ToolResult


class DummyTool(Tool):
    name = "dummy"
    display_name = "Dummy Tool"
    category = ToolCategory.VAULT_OPERATIONS
    description = "Does nothing"
    parameters = {"type": "object", "properties": {}, "required": []}

    async def execute(self, params: dict[str, Any], context) -> ToolResult:
        return ToolResult(success=True)


class BrokenMessageTool(DummyTool):
    requires_confirmation = True

    def confirmation_message(self, params):
        return f"Write {params['missing']}"


class RejectingMessageTool(DummyTool):
    requires_confirmation = True

    def confirmation_message(self, params):
        raise ValueError("cannot preview binary content")


class TestPermissionManager:
    """Test PermissionManager"""

    @pytest.fixture
    def manager(self):
        return PermissionManager()

    @pytest.fixture
    def tool(self):
        return DummyTool()

    def test_enabled_by_category(self, manager, tool):
        """Test category value in enabled_tools enables the tool"""
        context = SessionContext(enabled_tools=["vault_operations"])
        assert manager.is_tool_enabled(tool, context) is True

    def test_enabled_by_name(self, manager, tool):
        context = SessionContext(enabled_tools=["dummy"])
        assert manager.is_tool_enabled(tool, context) is True

    def test_not_enabled(self, manager, tool):
        """Test default read-only context excludes a vault operation"""
        assert manager.is_tool_enabled(tool, SessionContext()) is False

    def test_confirmation_from_tool_default(self, manager):
        assert manager.requires_confirmation(BrokenMessageTool(), SessionContext()) is True

    def test_confirmation_forced_by_session(self, manager, tool):
        context = SessionContext(require_confirmation=["dummy"])
        assert manager.requires_confirmation(tool, context) is True

    def test_no_confirmation(self, manager, tool):
        assert manager.requires_confirmation(tool, SessionContext()) is False

    def test_default_confirmation_message(self, manager, tool):
        assert manager.get_confirmation_message(tool, {}) == "Allow Dummy Tool to run?"

    def test_broken_confirmation_message_falls_back(self, manager):
        """Test a failing message function does not block the prompt"""
        assert manager.get_confirmation_message(BrokenMessageTool(), {}) == "Allow Dummy Tool to run?"

    def test_value_error_in_confirmation_message_falls_back(self, manager):
        assert manager.get_confirmation_message(RejectingMessageTool(), {}) == "Allow Dummy Tool to run?"


class TestTruncateText:
    def test_short_text_unchanged(self):
        assert truncate_text("short") == "short"

    def test_exact_limit_unchanged(self):
        assert truncate_text("x" * 200) == "x" * 200

    def test_long_text_cut(self):
        assert truncate_text("x" * 201) == "x" * 200 + "..."

    def test_custom_limit(self):
        assert truncate_text("abcdef", limit=3) == "abc..."
