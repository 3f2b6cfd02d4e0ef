"""YAML frontmatter parsing and rendering for markdown documents."""

import re
from typing import Any, Optional

import yaml

from ..observability.logging_config import get_logger

logger = get_logger(__name__)

# Opening fence on the first line, closing fence on its own line.
FRONTMATTER_PATTERN = re.compile(r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE)


def frontmatter_end(content: str) -> Optional[int]:
    """
    Return the offset just past the closing ``---`` fence.

    Returns None when the document has no detectable frontmatter region.
    """
    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        return None
    return match.end()


def split_frontmatter(content: str) -> tuple[Optional[str], str]:
    """Split a document into raw frontmatter text and body."""
    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        return None, content
    return match.group(1), content[match.end():]


def parse_frontmatter(content: str) -> Optional[dict[str, Any]]:
    """
    Parse the YAML frontmatter of a document.

    Returns:
        Header mapping ({} for an empty block), or None if the document has
        no frontmatter or it is not a YAML mapping.
    """
    raw, _ = split_frontmatter(content)
    if raw is None:
        return None

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        logger.warning(f"Unparsable frontmatter: {e}")
        return None

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Frontmatter is not a mapping: {type(data).__name__}")
        return None
    return data


def render_frontmatter(data: dict[str, Any], body: str) -> str:
    """Render a header mapping and body back into a markdown document."""
    if not data:
        return f"---\n---\n{body}"
    header = yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)
    return f"---\n{header}---\n{body}"
