"""Vault abstraction consumed by sessions, skills and tools.

Paths are vault-relative, ``/``-separated, with no leading or trailing
slash. Lookups that a host application answers from its in-memory index are
synchronous; anything that touches document content is a coroutine.
"""

import posixpath
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Optional, Union


def normalize_path(path: str) -> str:
    """
    Normalize a vault path.

    Converts backslashes, collapses duplicate separators, resolves ``.`` and
    ``..`` segments and strips leading/trailing slashes. The vault root is "".
    """
    cleaned = path.replace("\\", "/").strip()
    if not cleaned:
        return ""
    normalized = posixpath.normpath(cleaned).strip("/")
    return "" if normalized == "." else normalized


@dataclass(frozen=True)
class VaultFile:
    """A document in the vault. Equality is by path only."""

    path: str
    ctime: float = field(default=0.0, compare=False)
    mtime: float = field(default=0.0, compare=False)

    @property
    def name(self) -> str:
        return posixpath.basename(self.path)

    @property
    def basename(self) -> str:
        stem, _ = posixpath.splitext(self.name)
        return stem

    @property
    def extension(self) -> str:
        return posixpath.splitext(self.name)[1].lstrip(".")

    @property
    def parent_path(self) -> str:
        return posixpath.dirname(self.path)


@dataclass(frozen=True)
class VaultFolder:
    """A folder in the vault."""

    path: str

    @property
    def name(self) -> str:
        return posixpath.basename(self.path)


VaultItem = Union[VaultFile, VaultFolder]
HeaderMutator = Callable[[dict], None]


class Vault(ABC):
    """File-system contract for the agent core."""

    @abstractmethod
    def get_by_path(self, path: str) -> Optional[VaultItem]:
        """Look up a file or folder, or None if nothing exists at path."""

    @abstractmethod
    def list_folder(self, folder: VaultFolder) -> list[VaultItem]:
        """Immediate children of a folder, in listing order."""

    @abstractmethod
    def get_markdown_files(self) -> list[VaultFile]:
        """Every markdown document in the vault."""

    @abstractmethod
    def get_header(self, file: VaultFile) -> Optional[dict]:
        """Structured header of a document, or None if it has none."""

    @abstractmethod
    def resolve_link(self, link_text: str, source_path: str) -> Optional[VaultFile]:
        """
        Resolve wikilink text to a document.

        Args:
            link_text: Link target without brackets, e.g. "Project Plan"
            source_path: Path of the linking document; "" resolves from
                the vault root
        """

    @abstractmethod
    async def read(self, file: VaultFile) -> str:
        """Read document text."""

    @abstractmethod
    async def create(self, path: str, text: str) -> VaultFile:
        """Create a new document. Raises FileExistsError if path is taken."""

    @abstractmethod
    async def create_folder(self, path: str) -> VaultFolder:
        """Create a folder. Raises FileExistsError if path is taken."""

    @abstractmethod
    async def modify(self, file: VaultFile, text: str) -> None:
        """Replace the text of an existing document."""

    @abstractmethod
    async def update_header(self, file: VaultFile, mutator: HeaderMutator) -> None:
        """Apply mutator to the document's header in place and write it back."""

    async def ensure_folder(self, path: str) -> VaultFolder:
        """Create path and any missing parents; existing folders are kept."""
        path = normalize_path(path)
        existing = self.get_by_path(path)
        if isinstance(existing, VaultFolder):
            return existing

        parent = posixpath.dirname(path)
        if parent:
            await self.ensure_folder(parent)
        return await self.create_folder(path)

    def generate_link_text(self, file: VaultFile) -> str:
        """
        Shortest link text that resolves back to file.

        The base name is used when it is unique in the vault, otherwise the
        full path without the markdown extension.
        """
        if file.extension != "md":
            return file.path
        same_name = [f for f in self.get_markdown_files() if f.basename == file.basename]
        if len(same_name) <= 1:
            return file.basename
        return file.path[: -len(".md")]
