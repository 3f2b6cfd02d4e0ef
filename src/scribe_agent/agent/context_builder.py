"""Assemble the documents a session sends to the model as context."""

import re

from ..integration.base_adapter import ContextDocument
from ..models import ChatSession
from ..observability.logging_config import get_logger
from ..vault.base import Vault, VaultFile

logger = get_logger(__name__)

LINK_PATTERN = re.compile(r"\[\[([^\[\]]+)\]\]")


def extract_links(content: str) -> list[str]:
    """Wikilink targets in a document, in order, without alias or heading."""
    links = []
    for match in LINK_PATTERN.finditer(content):
        target = match.group(1).split("|", 1)[0].split("#", 1)[0].strip()
        if target and target not in links:
            links.append(target)
    return links


class ContextBuilder:
    """
    Collects context documents for a session.

    Starts from the session's context files and follows wikilinks
    breadth-first, up to ``context_depth`` hops. Each document is included
    once, at the shallowest depth it was reached.
    """

    def __init__(self, vault: Vault):
        self.vault = vault

    async def collect(self, session: ChatSession) -> list[ContextDocument]:
        max_depth = session.context.context_depth
        queue: list[tuple[VaultFile, int]] = [(f, 0) for f in session.context.context_files]
        seen: set[str] = set()
        documents: list[ContextDocument] = []

        while queue:
            file, depth = queue.pop(0)
            if file.path in seen:
                continue
            seen.add(file.path)

            try:
                content = await self.vault.read(file)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Skipping unreadable context file {file.path}: {e}")
                continue

            documents.append(ContextDocument(path=file.path, content=content, depth=depth))

            if depth >= max_depth:
                continue
            for link in extract_links(content):
                target = self.vault.resolve_link(link, file.path)
                if target and target.extension == "md" and target.path not in seen:
                    queue.append((target, depth + 1))

        logger.debug(f"Collected {len(documents)} context documents for session {session.id}")
        return documents
