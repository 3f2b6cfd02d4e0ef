"""Core components: skill store and tool permission policy."""

from .permission_manager import PermissionManager, truncate_text
from .skill_loader import (
    SKILL_MD_FILENAME,
    SkillMetadata,
    SkillNameValidation,
    SkillSummary,
    validate_skill_name,
)
from .skill_manager import SkillError, SkillManager

__all__ = [
    "PermissionManager",
    "SKILL_MD_FILENAME",
    "SkillError",
    "SkillManager",
    "SkillMetadata",
    "SkillNameValidation",
    "SkillSummary",
    "truncate_text",
    "validate_skill_name",
]
