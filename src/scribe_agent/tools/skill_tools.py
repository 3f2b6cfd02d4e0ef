"""Tools that let the model activate and author skills."""

from typing import Any

from ..core.permission_manager import truncate_text
from ..core.skill_manager import SkillError
from ..models import ToolCategory
from ..observability.logging_config import get_logger
from .types import Tool, ToolExecutionContext, ToolResult

logger = get_logger(__name__)


class ActivateSkillTool(Tool):
    """
    Load a skill's full instructions or one of its resources.

    - Without resource_path: SKILL.md body (level 2) plus a resource listing
    - With resource_path: that file's content (level 3)
    """

    name = "activate_skill"
    display_name = "Activate Skill"
    category = ToolCategory.SKILLS
    description = (
        "Load a skill's full instructions or a specific resource file. Use this when you need the "
        "detailed instructions from an available skill. Call with just the skill name to get the full "
        "SKILL.md instructions, or include a resource_path to read a specific file from the skill "
        'directory (e.g., "references/REFERENCE.md" or "assets/template.hbs").'
    )
    parameters = {
        "type": "object",
        "properties": {
            "name": {
                "type": "string",
                "description": 'The name of the skill to activate (e.g., "code-review", "data-analysis")',
            },
            "resource_path": {
                "type": "string",
                "description": (
                    "Optional path to a specific resource file within the skill directory, relative to "
                    'the skill root (e.g., "references/REFERENCE.md"). If omitted, returns the full '
                    "SKILL.md body content."
                ),
            },
        },
        "required": ["name"],
    }

    def get_progress_description(self, params: dict[str, Any]) -> str:
        if params.get("resource_path"):
            return f"Loading skill resource: {params.get('name')}/{params['resource_path']}"
        return f"Activating skill: {params.get('name')}"

    async def execute(self, params: dict[str, Any], context: ToolExecutionContext) -> ToolResult:
        skill_manager = context.skill_manager
        if skill_manager is None:
            return ToolResult(success=False, error="Skill manager service not available")

        name = params.get("name")
        if not name or not isinstance(name, str):
            return ToolResult(success=False, error="Skill name is required")

        resource_path = params.get("resource_path")

        try:
            if resource_path:
                content = await skill_manager.read_skill_resource(name, resource_path)
                if content is None:
                    resources = await skill_manager.list_skill_resources(name)
                    return ToolResult(
                        success=False,
                        error=f'Resource "{resource_path}" not found in skill "{name}"',
                        data={"availableResources": resources} if resources else None,
                    )

                return ToolResult(
                    success=True,
                    data={"skillName": name, "resourcePath": resource_path, "content": content},
                )

            content = await skill_manager.load_skill(name)
            if content is None:
                summaries = await skill_manager.get_skill_summaries()
                if summaries:
                    hint: dict[str, Any] = {"availableSkills": [s.name for s in summaries]}
                else:
                    hint = {"message": "No skills are currently installed"}
                return ToolResult(success=False, error=f'Skill "{name}" not found', data=hint)

            data: dict[str, Any] = {"skillName": name, "content": content}
            resources = await skill_manager.list_skill_resources(name)
            if resources:
                data["availableResources"] = resources

            logger.info(f"Skill activated: {name}")
            return ToolResult(success=True, data=data)

        except Exception as e:
            logger.error(f"Failed to activate skill '{name}': {e}")
            return ToolResult(success=False, error=f"Failed to activate skill: {e}")


class CreateSkillTool(Tool):
    """Author a new skill directory with a SKILL.md manifest."""

    name = "create_skill"
    display_name = "Create Skill"
    category = ToolCategory.SKILLS
    description = (
        "Create a new agent skill with a SKILL.md file. The skill will be saved in the skills "
        "directory and will be available for future use via activate_skill."
    )
    parameters = {
        "type": "object",
        "properties": {
            "name": {
                "type": "string",
                "description": (
                    "The name of the skill (1-64 chars, lowercase alphanumeric and hyphens only, "
                    'e.g., "code-review", "meeting-notes")'
                ),
            },
            "description": {
                "type": "string",
                "description": (
                    "A description of what this skill does and when to use it. Should include "
                    "keywords that help identify relevant tasks."
                ),
            },
            "content": {
                "type": "string",
                "description": (
                    "The full markdown body of the SKILL.md file: step-by-step instructions, "
                    "examples and edge cases."
                ),
            },
        },
        "required": ["name", "description", "content"],
    }
    requires_confirmation = True

    def confirmation_message(self, params: dict[str, Any]) -> str:
        description = str(params.get("description") or "")
        return f'Create new skill "{params.get("name")}":\n\n{truncate_text(description)}'

    def get_progress_description(self, params: dict[str, Any]) -> str:
        return f"Creating skill: {params.get('name')}"

    async def execute(self, params: dict[str, Any], context: ToolExecutionContext) -> ToolResult:
        skill_manager = context.skill_manager
        if skill_manager is None:
            return ToolResult(success=False, error="Skill manager service not available")

        name = _clean(params.get("name"))
        if not name:
            return ToolResult(success=False, error="Skill name is required and must be a non-empty string")

        description = _clean(params.get("description"))
        if not description:
            return ToolResult(
                success=False, error="Skill description is required and must be a non-empty string"
            )

        content = _clean(params.get("content"))
        if not content:
            return ToolResult(success=False, error="Skill content is required and must be a non-empty string")

        try:
            skill_path = await skill_manager.create_skill(name, description, content)
        except (SkillError, OSError) as e:
            logger.warning(f"Skill creation failed for '{name}': {e}")
            return ToolResult(success=False, error=f"Failed to create skill: {e}")

        return ToolResult(
            success=True,
            data={
                "path": skill_path,
                "name": name,
                "message": (
                    f'Skill "{name}" created successfully. '
                    "It will be available via activate_skill in future sessions."
                ),
            },
        )


def _clean(value: Any) -> str:
    """Trimmed string value, or "" for anything that is not a string."""
    return value.strip() if isinstance(value, str) else ""


def get_skill_tools() -> list[Tool]:
    """Get all skill-related tools."""
    return [ActivateSkillTool(), CreateSkillTool()]
