"""Model transport interface and tool-declaration adapter."""

from .base_adapter import BaseLLMAdapter, ContextDocument, LLMResponse, ModelRequest, ToolCall
from .tool_declarations import build_tool_declarations, to_genai_tools, tool_to_function_declaration

__all__ = [
    "BaseLLMAdapter",
    "ContextDocument",
    "LLMResponse",
    "ModelRequest",
    "ToolCall",
    "build_tool_declarations",
    "to_genai_tools",
    "tool_to_function_declaration",
]
