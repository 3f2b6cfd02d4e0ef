"""Configuration management for scribe agent."""

import os
from pathlib import Path
from typing import Optional

DEFAULT_HISTORY_FOLDER = "gemini-scribe"


class Config:
    """Configuration loader for scribe agent."""

    @staticmethod
    def get_vault_dir(default: Optional[Path] = None) -> Path:
        """
        Get vault directory from environment or default.

        Checks SCRIBE_VAULT_DIR environment variable. If not set, uses provided
        default or falls back to the current working directory.

        Args:
            default: Optional default path if SCRIBE_VAULT_DIR not set

        Returns:
            Path to vault directory (absolute)
        """
        vault_dir_str = os.getenv("SCRIBE_VAULT_DIR")

        if vault_dir_str:
            vault_path = Path(vault_dir_str)
        elif default:
            vault_path = default
        else:
            vault_path = Path.cwd()

        return vault_path.resolve()

    @staticmethod
    def get_history_folder() -> str:
        """
        Get the vault-relative folder holding sessions and skills.

        Leading and trailing slashes are stripped so the value can be joined
        with other vault paths directly.
        """
        folder = os.getenv("SCRIBE_HISTORY_FOLDER", DEFAULT_HISTORY_FOLDER)
        return folder.replace("\\", "/").strip("/") or DEFAULT_HISTORY_FOLDER

    @staticmethod
    def get_context_depth() -> int:
        """Get default link-following depth for new sessions."""
        value = os.getenv("SCRIBE_CONTEXT_DEPTH", "2")
        try:
            return max(0, int(value))
        except ValueError:
            return 2

    @staticmethod
    def get_search_grounding() -> bool:
        """Whether the model's built-in search tool should be declared."""
        return os.getenv("SCRIBE_SEARCH_GROUNDING", "false").lower() in ("1", "true", "yes")

    @staticmethod
    def get_max_tool_iterations() -> int:
        """Get upper bound on tool round-trips per turn."""
        value = os.getenv("SCRIBE_MAX_TOOL_ITERATIONS", "10")
        try:
            return max(1, int(value))
        except ValueError:
            return 10

    @staticmethod
    def get_model_id() -> Optional[str]:
        """Get model ID from environment."""
        return os.getenv("MODEL_ID")
