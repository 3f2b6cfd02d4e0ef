"""Agent runner: one conversational turn from user message to final answer."""

from typing import Optional

from ..core.skill_manager import SkillManager
from ..integration.base_adapter import BaseLLMAdapter, LLMResponse, ModelRequest
from ..integration.tool_declarations import build_tool_declarations
from ..models import ChatSession
from ..observability.logging_config import add_context, clear_context, get_context, get_logger
from ..tools.execution_engine import ToolExecutionEngine
from ..tools.types import ToolExecutionContext
from .context_builder import ContextBuilder
from .session_history import SessionHistory
from .session_manager import SessionManager

logger = get_logger(__name__)

DEFAULT_INSTRUCTION = (
    "You are a note taking and writing assistant. Help the user stay organized, "
    "surface information from their notes and help them write. Use the available "
    "tools to read and change notes when needed."
)


class AgentRunner:
    """
    Runs agent turns for persisted sessions.

    Orchestrates:
    - History: user and model entries are appended to the session record
    - Context: context files and their links, up to the session's depth
    - Tools: declarations for the session's enabled tools
    - Dispatch: tool calls go through the execution engine and the results
      are sent back to the model until it answers in text
    """

    def __init__(
        self,
        adapter: BaseLLMAdapter,
        session_manager: SessionManager,
        engine: ToolExecutionEngine,
        skill_manager: Optional[SkillManager] = None,
        instruction: str = DEFAULT_INSTRUCTION,
        search_grounding: Optional[bool] = None,
        max_tool_iterations: Optional[int] = None,
    ):
        """
        Initialize agent runner.

        Args:
            adapter: Model transport
            session_manager: Persists sessions and their headers
            engine: Executes tool calls against the registry
            skill_manager: Skill store; enables the skills prompt section
            instruction: Base system instruction
            search_grounding: Declare built-in search (default from config)
            max_tool_iterations: Tool round-trips per turn (default from config)
        """
        from ..config import Config

        self.adapter = adapter
        self.session_manager = session_manager
        self.vault = session_manager.vault
        self.engine = engine
        self.registry = engine.registry
        self.skill_manager = skill_manager
        self.instruction = instruction
        self.search_grounding = (
            Config.get_search_grounding() if search_grounding is None else search_grounding
        )
        self.max_tool_iterations = (
            Config.get_max_tool_iterations() if max_tool_iterations is None else max_tool_iterations
        )
        self.model = Config.get_model_id()

        self.history = SessionHistory(self.vault, session_manager)
        self.context_builder = ContextBuilder(self.vault)

    async def build_system_instruction(self) -> str:
        """Base instruction plus the level-1 skills section, if any."""
        prompt = self.instruction
        if self.skill_manager:
            skills_section = await self.skill_manager.get_system_prompt_section()
            if skills_section:
                prompt += "\n\n" + skills_section
        return prompt

    async def run_turn(self, session: ChatSession, message: str) -> LLMResponse:
        """
        Send a user message and resolve tool calls until the model answers.

        Args:
            session: Session the turn belongs to
            message: User message

        Returns:
            Final model response
        """
        previous_context = get_context()
        add_context(session_id=session.id)
        try:
            return await self._run_turn(session, message)
        finally:
            clear_context()
            add_context(**previous_context)

    async def _run_turn(self, session: ChatSession, message: str) -> LLMResponse:
        previous = await self.history.get_history(session)
        messages = [{"role": entry.role, "content": entry.content} for entry in previous]
        messages.append({"role": "user", "content": message})
        await self.history.add_entry(session, "user", message)

        tools = self.registry.get_enabled_tools(session.context)
        request = ModelRequest(
            messages=messages,
            system_instruction=await self.build_system_instruction(),
            context_documents=await self.context_builder.collect(session),
            tools=build_tool_declarations(tools, self.search_grounding),
            model=self.model,
        )
        execution_context = ToolExecutionContext(
            vault=self.vault,
            session=session,
            skill_manager=self.skill_manager,
        )

        response = await self.adapter.send_message(request)
        iterations = 0

        while response.has_tool_calls and iterations < self.max_tool_iterations:
            iterations += 1
            messages.append(
                {
                    "role": "model",
                    "content": response.content or "",
                    "tool_calls": [
                        {"id": call.id, "name": call.name, "args": call.input}
                        for call in response.tool_calls
                    ],
                }
            )
            for call in response.tool_calls:
                result = await self.engine.execute_tool(call, execution_context)
                messages.append(self.adapter.format_tool_result(call, result.to_dict()))

            response = await self.adapter.send_message(request)

        if response.has_tool_calls:
            logger.warning(
                f"Tool iteration limit ({self.max_tool_iterations}) reached in session {session.id}"
            )

        if response.content:
            await self.history.add_entry(session, "model", response.content)

        logger.info(f"Turn completed in session {session.id}, tool_iterations={iterations}")
        return response
