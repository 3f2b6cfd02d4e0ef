"""Vault implementation backed by a directory on the local filesystem."""

import asyncio
import os
import posixpath
from pathlib import Path
from typing import Optional

from ..observability.logging_config import get_logger
from .base import HeaderMutator, Vault, VaultFile, VaultFolder, VaultItem, normalize_path
from .frontmatter import parse_frontmatter, render_frontmatter, split_frontmatter

logger = get_logger(__name__)


class LocalVault(Vault):
    """
    Vault rooted at a local directory.

    Hidden entries (names starting with ".") are invisible, matching how
    note applications keep their own configuration out of the document tree.
    """

    def __init__(self, root: Path):
        self.root = Path(root).resolve()

    def _abs(self, path: str) -> Path:
        """Absolute filesystem path for a vault path, confined to the root."""
        full_path = (self.root / normalize_path(path)).resolve()
        if full_path != self.root and self.root not in full_path.parents:
            raise ValueError(f"Path '{path}' is outside the vault")
        return full_path

    def _rel(self, full_path: Path) -> str:
        return full_path.relative_to(self.root).as_posix()

    def _to_file(self, full_path: Path) -> VaultFile:
        stat = full_path.stat()
        return VaultFile(path=self._rel(full_path), ctime=stat.st_ctime, mtime=stat.st_mtime)

    def _iter_files(self) -> list[VaultFile]:
        files = []
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
            for filename in sorted(filenames):
                if not filename.startswith("."):
                    files.append(self._to_file(Path(dirpath) / filename))
        return files

    def get_by_path(self, path: str) -> Optional[VaultItem]:
        try:
            full_path = self._abs(path)
        except ValueError:
            return None

        if full_path == self.root:
            return VaultFolder(path="")
        if full_path.is_file():
            return self._to_file(full_path)
        if full_path.is_dir():
            return VaultFolder(path=self._rel(full_path))
        return None

    def list_folder(self, folder: VaultFolder) -> list[VaultItem]:
        full_path = self._abs(folder.path)
        if not full_path.is_dir():
            return []

        children: list[VaultItem] = []
        for child in sorted(full_path.iterdir(), key=lambda p: p.name):
            if child.name.startswith("."):
                continue
            if child.is_dir():
                children.append(VaultFolder(path=self._rel(child)))
            elif child.is_file():
                children.append(self._to_file(child))
        return children

    def get_markdown_files(self) -> list[VaultFile]:
        return [f for f in self._iter_files() if f.extension == "md"]

    def get_header(self, file: VaultFile) -> Optional[dict]:
        try:
            content = self._abs(file.path).read_text(encoding="utf-8")
        except (OSError, ValueError) as e:
            logger.debug(f"Cannot read header of {file.path}: {e}")
            return None
        return parse_frontmatter(content)

    def resolve_link(self, link_text: str, source_path: str) -> Optional[VaultFile]:
        linkpath = link_text.split("|", 1)[0].split("#", 1)[0].strip()
        if not linkpath:
            return None

        candidates = [linkpath] if linkpath.endswith(".md") else [f"{linkpath}.md", linkpath]
        source_dir = posixpath.dirname(normalize_path(source_path)) if source_path else ""

        for candidate in candidates:
            paths = [normalize_path(candidate)]
            if source_dir:
                paths.insert(0, normalize_path(f"{source_dir}/{candidate}"))
            for path in paths:
                item = self.get_by_path(path)
                if isinstance(item, VaultFile):
                    return item

        # Fall back to matching by file name anywhere in the vault.
        all_files = self._iter_files()
        for candidate in candidates:
            suffix = "/" + normalize_path(candidate)
            matches = [f for f in all_files if f.path == suffix[1:] or f.path.endswith(suffix)]
            if matches:
                return min(matches, key=lambda f: (len(f.path), f.path))
        return None

    async def read(self, file: VaultFile) -> str:
        full_path = self._abs(file.path)
        return await asyncio.to_thread(full_path.read_text, encoding="utf-8")

    async def create(self, path: str, text: str) -> VaultFile:
        path = normalize_path(path)
        full_path = self._abs(path)
        if full_path.exists():
            raise FileExistsError(f"File already exists: {path}")

        full_path.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(full_path.write_text, text, encoding="utf-8")
        logger.debug(f"Created {path}")
        return self._to_file(full_path)

    async def create_folder(self, path: str) -> VaultFolder:
        path = normalize_path(path)
        full_path = self._abs(path)
        if full_path.exists():
            raise FileExistsError(f"Folder already exists: {path}")

        full_path.mkdir(parents=True)
        logger.debug(f"Created folder {path}")
        return VaultFolder(path=path)

    async def modify(self, file: VaultFile, text: str) -> None:
        full_path = self._abs(file.path)
        if not full_path.is_file():
            raise FileNotFoundError(f"File not found: {file.path}")
        await asyncio.to_thread(full_path.write_text, text, encoding="utf-8")

    async def update_header(self, file: VaultFile, mutator: HeaderMutator) -> None:
        content = await self.read(file)
        raw, body = split_frontmatter(content)

        if raw is None:
            data: dict = {}
            body = content
        else:
            parsed = parse_frontmatter(content)
            if parsed is None:
                raise ValueError(f"Invalid frontmatter in {file.path}")
            data = parsed

        mutator(data)
        await self.modify(file, render_frontmatter(data, body))
