"""Skill manifest model, naming rules and SKILL.md parsing."""

import re
from dataclasses import dataclass
from typing import Any, Optional

SKILL_MD_FILENAME = "SKILL.md"
SKILL_NAME_MAX_LENGTH = 64
SKILL_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9-]*[a-z0-9]$|^[a-z]$")


@dataclass
class SkillMetadata:
    """Skill metadata from SKILL.md frontmatter."""

    name: str
    description: str
    path: str
    license: Optional[str] = None
    compatibility: Optional[str] = None
    metadata: Optional[dict[str, str]] = None


@dataclass
class SkillSummary:
    """Name and description only; what gets injected into every prompt."""

    name: str
    description: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "description": self.description}


@dataclass
class SkillNameValidation:
    """Outcome of checking a skill name."""

    valid: bool
    error: Optional[str] = None


def validate_skill_name(name: Any) -> SkillNameValidation:
    """
    Validate a skill name.

    Rules:
    - 1-64 characters
    - Lowercase alphanumeric and hyphens only
    - Must not start or end with a hyphen
    - Must not contain consecutive hyphens

    Returns:
        SkillNameValidation carrying a distinct error message per rule
    """
    if not name or not isinstance(name, str):
        return SkillNameValidation(valid=False, error="Skill name is required")

    if len(name) > SKILL_NAME_MAX_LENGTH:
        return SkillNameValidation(
            valid=False,
            error=f"Skill name must be {SKILL_NAME_MAX_LENGTH} characters or fewer",
        )

    if "--" in name:
        return SkillNameValidation(
            valid=False,
            error="Skill name must not contain consecutive hyphens (--)",
        )

    if not SKILL_NAME_PATTERN.fullmatch(name):
        return SkillNameValidation(
            valid=False,
            error=(
                "Skill name must contain only lowercase alphanumeric characters and hyphens, "
                "and must not start or end with a hyphen"
            ),
        )

    return SkillNameValidation(valid=True)


def metadata_from_frontmatter(
    frontmatter: dict[str, Any], dir_name: str, skill_path: str
) -> SkillMetadata:
    """
    Build SkillMetadata from a parsed header.

    The directory name is the canonical skill name regardless of what the
    header says; callers are expected to have checked required fields.
    """
    metadata = frontmatter.get("metadata")
    if metadata is not None and not isinstance(metadata, dict):
        metadata = None

    return SkillMetadata(
        name=dir_name,
        description=str(frontmatter["description"]),
        path=skill_path,
        license=frontmatter.get("license") or None,
        compatibility=frontmatter.get("compatibility") or None,
        metadata={str(k): str(v) for k, v in metadata.items()} if metadata else None,
    )
