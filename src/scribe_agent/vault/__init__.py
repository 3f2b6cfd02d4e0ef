"""Vault access: documents, folders, headers and link resolution."""

from .base import Vault, VaultFile, VaultFolder, VaultItem, normalize_path
from .frontmatter import frontmatter_end, parse_frontmatter, render_frontmatter, split_frontmatter
from .local import LocalVault

__all__ = [
    "LocalVault",
    "Vault",
    "VaultFile",
    "VaultFolder",
    "VaultItem",
    "frontmatter_end",
    "normalize_path",
    "parse_frontmatter",
    "render_frontmatter",
    "split_frontmatter",
]
