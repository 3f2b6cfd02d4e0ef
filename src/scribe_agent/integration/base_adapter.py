"""Base adapter interface for model transports."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ToolCall:
    """Represents a tool call from the model."""

    id: str
    name: str
    input: dict[str, Any]


@dataclass
class ContextDocument:
    """A vault document sent to the model as background."""

    path: str
    content: str
    depth: int = 0


@dataclass
class ModelRequest:
    """Everything the transport needs for one model call."""

    messages: list[dict[str, Any]] = field(default_factory=list)
    system_instruction: str = ""
    context_documents: list[ContextDocument] = field(default_factory=list)
    tools: list[dict[str, Any]] = field(default_factory=list)
    model: Optional[str] = None


@dataclass
class LLMResponse:
    """Standardized response from the model."""

    content: Optional[str] = None
    tool_calls: list[ToolCall] = field(default_factory=list)
    stop_reason: Optional[str] = None
    usage: Optional[dict[str, int]] = None
    raw_response: Optional[Any] = None

    @property
    def has_tool_calls(self) -> bool:
        """Check if response contains tool calls."""
        return len(self.tool_calls) > 0


class BaseLLMAdapter(ABC):
    """
    Abstract base class for model transports.

    The transport owns the network call and response parsing; the agent
    layer only builds ModelRequest objects and consumes LLMResponse.
    """

    @abstractmethod
    async def send_message(self, request: ModelRequest) -> LLMResponse:
        """
        Send a request to the model and get a response.

        Args:
            request: Conversation messages (newest last), system instruction,
                context documents and tool list

        Returns:
            Standardized LLMResponse
        """

    def format_tool_result(self, tool_call: ToolCall, result: dict[str, Any]) -> dict[str, Any]:
        """
        Format a tool result as a conversation message.

        Default implementation mirrors the function-response shape used by
        Gemini. Override for provider-specific formatting.

        Args:
            tool_call: The call being answered
            result: Wire form of the ToolResult

        Returns:
            Message appended before the follow-up request
        """
        return {
            "role": "tool",
            "id": tool_call.id,
            "name": tool_call.name,
            "content": result,
        }
