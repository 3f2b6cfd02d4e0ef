"""Shared fixtures: a LocalVault on a temporary directory."""

from pathlib import Path

import pytest

from scribe_agent.vault import LocalVault


@pytest.fixture
def vault_root(tmp_path: Path) -> Path:
    """Empty vault directory."""
    root = tmp_path / "vault"
    root.mkdir()
    return root


@pytest.fixture
def vault(vault_root: Path) -> LocalVault:
    """LocalVault over the temporary vault directory."""
    return LocalVault(vault_root)
