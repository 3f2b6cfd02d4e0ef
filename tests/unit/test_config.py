"""Tests for configuration management."""

import os
from pathlib import Path
from unittest.mock import patch

from scribe_agent.config import DEFAULT_HISTORY_FOLDER, Config


class TestConfig:
    """Test configuration loading."""

    def test_get_vault_dir_from_env(self, tmp_path: Path) -> None:
        """Test loading vault directory from SCRIBE_VAULT_DIR environment variable."""
        test_dir = tmp_path / "vault"
        test_dir.mkdir()

        with patch.dict(os.environ, {"SCRIBE_VAULT_DIR": str(test_dir)}):
            result = Config.get_vault_dir()

        assert result == test_dir.resolve()

    def test_get_vault_dir_with_explicit_default(self, tmp_path: Path) -> None:
        """Test providing explicit default path."""
        with patch.dict(os.environ, {}, clear=True):
            result = Config.get_vault_dir(default=tmp_path)

        assert result == tmp_path.resolve()

    def test_get_vault_dir_falls_back_to_cwd(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            result = Config.get_vault_dir()

        assert result == Path.cwd().resolve()

    def test_get_history_folder_default(self) -> None:
        """Test history folder defaults to gemini-scribe."""
        with patch.dict(os.environ, {}, clear=True):
            assert Config.get_history_folder() == DEFAULT_HISTORY_FOLDER == "gemini-scribe"

    def test_get_history_folder_strips_slashes(self) -> None:
        with patch.dict(os.environ, {"SCRIBE_HISTORY_FOLDER": "\\state\\agent\\"}):
            assert Config.get_history_folder() == "state/agent"

    def test_get_context_depth(self) -> None:
        with patch.dict(os.environ, {"SCRIBE_CONTEXT_DEPTH": "4"}):
            assert Config.get_context_depth() == 4

    def test_get_context_depth_invalid(self) -> None:
        """Test garbage and negative values fall back to something usable."""
        with patch.dict(os.environ, {"SCRIBE_CONTEXT_DEPTH": "lots"}):
            assert Config.get_context_depth() == 2
        with patch.dict(os.environ, {"SCRIBE_CONTEXT_DEPTH": "-3"}):
            assert Config.get_context_depth() == 0

    def test_get_search_grounding(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert Config.get_search_grounding() is False
        with patch.dict(os.environ, {"SCRIBE_SEARCH_GROUNDING": "True"}):
            assert Config.get_search_grounding() is True

    def test_get_max_tool_iterations(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert Config.get_max_tool_iterations() == 10
        with patch.dict(os.environ, {"SCRIBE_MAX_TOOL_ITERATIONS": "0"}):
            assert Config.get_max_tool_iterations() == 1

    def test_get_model_id(self) -> None:
        """Test loading model ID from environment."""
        with patch.dict(os.environ, {"MODEL_ID": "gemini-2.5-flash"}):
            assert Config.get_model_id() == "gemini-2.5-flash"

    def test_get_model_id_not_set(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert Config.get_model_id() is None
