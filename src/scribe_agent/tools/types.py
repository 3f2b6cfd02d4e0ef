"""Tool capability contract shared by every tool implementation."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from ..models import ChatSession, ToolCategory
from ..vault.base import Vault

if TYPE_CHECKING:
    from ..core.skill_manager import SkillManager


@dataclass
class ToolResult:
    """Normalized outcome of a tool call."""

    success: bool
    data: Any = None
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Wire form: ``{success, data?, error?}``."""
        result: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            result["data"] = self.data
        if self.error is not None:
            result["error"] = self.error
        return result


@dataclass
class ToolExecutionContext:
    """Services and session state handed to a tool at call time."""

    vault: Vault
    session: Optional[ChatSession] = None
    skill_manager: Optional["SkillManager"] = None


class Tool(ABC):
    """
    A named capability exposed to the model.

    Subclasses declare their descriptor as class attributes; ``category``
    and ``requires_confirmation`` are data consumed by the permission
    policy, not behavior to override.
    """

    name: str
    display_name: str
    category: ToolCategory
    description: str
    parameters: dict[str, Any]
    requires_confirmation: bool = False

    def confirmation_message(self, params: dict[str, Any]) -> Optional[str]:
        """Prompt shown to the user before a confirmed call. None for default."""
        return None

    def get_progress_description(self, params: dict[str, Any]) -> str:
        """Short status line while the tool runs."""
        return f"Running {self.display_name}"

    @property
    def required_parameters(self) -> list[str]:
        return list(self.parameters.get("required", []))

    @abstractmethod
    async def execute(self, params: dict[str, Any], context: ToolExecutionContext) -> ToolResult:
        """Run the tool. Business failures return ToolResult(success=False)."""
