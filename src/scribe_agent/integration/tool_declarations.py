"""Translate registered tools into the model's wire-level tool list."""

from typing import Any, Iterable

from google.genai import types

from ..observability.logging_config import get_logger
from ..tools.types import Tool

logger = get_logger(__name__)

SEARCH_GROUNDING_KEY = "googleSearch"
FUNCTION_DECLARATIONS_KEY = "function_declarations"


def tool_to_function_declaration(tool: Tool) -> dict[str, Any]:
    """Function declaration for one tool with a normalized parameter schema."""
    schema = tool.parameters or {}
    return {
        "name": tool.name,
        "description": tool.description,
        "parameters": {
            "type": "object",
            "properties": schema.get("properties") or {},
            "required": schema.get("required") or [],
        },
    }


def build_tool_declarations(tools: Iterable[Tool], search_grounding: bool = False) -> list[dict[str, Any]]:
    """
    Build the tool list for a model call.

    Search grounding, when enabled, is its own first entry. All tools share
    a single function-declarations entry. Empty entries are never emitted.

    Args:
        tools: Tools active for the session
        search_grounding: Declare the model's built-in search tool

    Returns:
        Wire-level tool list, possibly empty
    """
    declarations: list[dict[str, Any]] = []

    if search_grounding:
        declarations.append({SEARCH_GROUNDING_KEY: {}})

    function_declarations = [tool_to_function_declaration(tool) for tool in tools]
    if function_declarations:
        declarations.append({FUNCTION_DECLARATIONS_KEY: function_declarations})

    logger.debug(
        f"Built tool declarations: search_grounding={search_grounding}, "
        f"functions={len(function_declarations)}"
    )
    return declarations


def to_genai_tools(declarations: list[dict[str, Any]]) -> list[types.Tool]:
    """
    Convert a wire-level tool list into google-genai Tool objects.

    Args:
        declarations: Output of build_tool_declarations

    Returns:
        Tools ready for ``types.GenerateContentConfig(tools=...)``
    """
    genai_tools: list[types.Tool] = []
    for entry in declarations:
        if SEARCH_GROUNDING_KEY in entry:
            genai_tools.append(types.Tool(google_search=types.GoogleSearch()))
        elif FUNCTION_DECLARATIONS_KEY in entry:
            genai_tools.append(
                types.Tool(
                    function_declarations=[
                        types.FunctionDeclaration(
                            name=declaration["name"],
                            description=declaration["description"],
                            parameters_json_schema=declaration["parameters"],
                        )
                        for declaration in entry[FUNCTION_DECLARATIONS_KEY]
                    ]
                )
            )
    return genai_tools
