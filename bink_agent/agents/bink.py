import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError
from termcolor import colored

from bink_agent.agents.plan_execute import PlanExecuteMixin
from bink_agent.agents.toolcall import ToolCallAgent
from bink_agent.errors import InvalidConfiguration
from bink_agent.llm.adapter import LLMAdapter
from bink_agent.memory.buffer import MEMORY_KEY, ChatMemory, history_to_messages
from bink_agent.output.parser import OutputParser
from bink_agent.plugins.base import BasePlugin
from bink_agent.prompts import PLAN_EXECUTE_PROTOCOL, TOOLS_AGENT_PROTOCOL
from bink_agent.schema import (
    AgentMode,
    AgentRunOptions,
    AgentState,
    GenerationParams,
    ImageContent,
    MemoryState,
    Message,
    MessageContent,
    TextContent,
)
from bink_agent.tools.base import BaseTool
from bink_agent.tools.tool_manager import ToolManager
from bink_agent.wallet.networks import NetworkConfig
from bink_agent.wallet.wallet import Wallet

logger = logging.getLogger(__name__)


def _resolve_mode(agent_type: Union[AgentMode, str]) -> AgentMode:
    try:
        return AgentMode(agent_type)
    except ValueError:
        supported = ", ".join(mode.value for mode in AgentMode)
        raise InvalidConfiguration(
            f"Unsupported agent type {agent_type!r}, expected one of: {supported}"
        ) from None


def _resolve_options(options: Union[AgentRunOptions, Dict[str, Any], None]) -> AgentRunOptions:
    if isinstance(options, AgentRunOptions):
        return options
    try:
        return AgentRunOptions.model_validate(options or {})
    except ValidationError as e:
        raise InvalidConfiguration(f"Invalid agent options: {e}") from e


class BinkAgent(PlanExecuteMixin, ToolCallAgent):
    """
    One agent run over a chat model, tools and plugins sharing one wallet.

    Build a fresh instance per run: register plugins while it is
    ``CONFIGURING``, then call ``execute`` exactly once.
    """

    name: str = "bink"
    description: str = "Blockchain agent with wallet-aware tools"

    def __init__(
        self,
        llm: Any,
        agent_type: Union[AgentMode, str],
        memory: Optional[ChatMemory] = None,
        tools: Optional[Iterable[BaseTool]] = None,
        output_parser: Optional[OutputParser] = None,
        gen_params: Union[GenerationParams, Dict[str, Any], None] = None,
        wallet: Optional[Wallet] = None,
        networks: Optional[NetworkConfig] = None,
        options: Union[AgentRunOptions, Dict[str, Any], None] = None,
    ):
        if llm is None:
            raise InvalidConfiguration("A chat model is required")
        mode = _resolve_mode(agent_type)
        if tools is None:
            raise InvalidConfiguration("tools must be a list (it may be empty)")
        tools = list(tools)
        for tool in tools:
            if not isinstance(tool, BaseTool):
                raise InvalidConfiguration(f"Expected a tool, got {type(tool).__name__}")
        options = _resolve_options(options)
        if isinstance(options.max_iterations, bool) or options.max_iterations <= 0:
            raise InvalidConfiguration("maxIterations must be a positive integer")
        if wallet is None or networks is None:
            raise InvalidConfiguration("A wallet and its network config are required")
        if wallet.networks is not networks:
            raise InvalidConfiguration("The wallet must be bound to the run's network config")
        if isinstance(gen_params, dict):
            gen_params = GenerationParams.model_validate(gen_params)

        try:
            adapter = llm if isinstance(llm, LLMAdapter) else LLMAdapter(llm)
        except ValueError as e:
            raise InvalidConfiguration(str(e)) from e

        super().__init__(
            llm=adapter,
            available_tools=ToolManager(tools),
            gen_params=gen_params,
            max_steps=options.max_iterations,
        )
        self.mode = mode
        self.memory = memory
        self.output_parser = output_parser
        self.wallet = wallet
        self.networks = networks
        self.options = options
        self.plugins: List[BasePlugin] = []
        self.plan: List[str] = []
        self.replans = 0
        self.transcript: List[Message] = []
        self.formatting_instructions = output_parser.get_format_instructions() if output_parser else ""
        self._images: List[ImageContent] = []

        self.transition_to(AgentState.CONFIGURING)
        logger.info(f"Agent {self.name} configured in {mode.value} mode with {len(tools)} tools")

    async def register_plugin(self, plugin: BasePlugin) -> None:
        """Bind a copy of ``plugin`` to the run's wallet and networks and activate its tools.

        Discovered tools that belong to ``plugin`` are swapped for the bound
        copy's tools, so calls made during this run reach this run's wallet.
        """
        self.require_state(AgentState.CONFIGURING, "register a plugin")
        if not isinstance(plugin, BasePlugin):
            raise InvalidConfiguration(f"Expected a plugin, got {type(plugin).__name__}")

        source = plugin.source or plugin
        if any(registered.source is source for registered in self.plugins):
            logger.debug(f"Plugin {plugin.name} is already registered")
            return
        bound = plugin.bind(wallet=self.wallet, networks=self.networks)
        await bound.initialize()
        self.plugins.append(bound)

        unbound = plugin.get_tools()
        added = []
        for tool in bound.get_tools():
            existing = self.available_tools.tool_map.get(tool.name)
            if existing is not None and any(existing is template for template in unbound):
                self.available_tools.replace_tool(tool)
            elif self.available_tools.add_tool(tool):
                added.append(tool.name)
        logger.info(f"Registered plugin {plugin.name} (new tools: {added or 'none'})")

    def build_user_content(self, text: str) -> MessageContent:
        if not self._images:
            return text
        return [TextContent(text=text), *self._images]

    def build_system_message(self) -> Message:
        sections = [self.options.system_message]
        if self.mode == AgentMode.TOOLS_AGENT:
            sections.append(TOOLS_AGENT_PROTOCOL)
        else:
            sections.append(PLAN_EXECUTE_PROTOCOL)

        if len(self.available_tools):
            sections.append("Available tools:\n" + "\n".join(
                f"- {tool.name}: {tool.description}" for tool in self.available_tools
            ))
        if self.plugins:
            sections.append("Active plugins: " + ", ".join(plugin.describe() for plugin in self.plugins))

        wallet_lines = []
        addresses = self.wallet.get_addresses()
        for symbol, network in self.networks.items():
            if not network.available:
                wallet_lines.append(f"- {symbol}: unavailable ({network.unavailable_reason})")
            elif symbol in addresses:
                chain = f", chain id {network.chain_id}" if network.chain_id else ""
                wallet_lines.append(f"- {symbol} ({network.name or symbol}{chain}): {addresses[symbol]}")
        if wallet_lines:
            sections.append("Your wallet:\n" + "\n".join(wallet_lines))

        if self.formatting_instructions and self.mode == AgentMode.TOOLS_AGENT:
            sections.append(self.formatting_instructions)
        return self.make_message("system", "\n\n".join(sections))

    async def execute(
        self,
        user_input: str,
        prior_memory: Optional[MemoryState] = None,
        images: Optional[List[ImageContent]] = None,
    ) -> Dict[str, Any]:
        """Run one conversational turn and return the raw agent response.

        Raises:
            InvalidState: If the agent already ran or is not configured.
            ToolExecutionError: If a tool failed and cannot recover.
            ModelError: If the chat model failed.
        """
        self.require_state(AgentState.CONFIGURING, "execute")
        self.transition_to(AgentState.RUNNING)

        scratchpad: List[Message] = []
        history: List[Message] = []
        try:
            if images and self.options.passthrough_binary_images:
                self._images = list(images)
            elif images:
                logger.info(f"Dropping {len(images)} image attachments (passthrough disabled)")
            if prior_memory:
                history = history_to_messages(prior_memory.get(MEMORY_KEY))

            system = self.build_system_message()
            user_message = self.make_message("user", self.build_user_content(user_input))

            if self.mode == AgentMode.TOOLS_AGENT:
                messages = [system, *history, user_message]
                outcome = await self.run_tool_loop(messages)
                scratchpad = messages[len(history) + 2:]
                answer, finished = outcome.answer, outcome.finished
            else:
                outcome = await self.run_plan_and_execute(system, history, user_input, scratchpad)
                answer, finished = outcome.answer, outcome.finished
        except (Exception, asyncio.CancelledError) as e:
            self.transition_to(AgentState.FAILED)
            logger.error(colored(f"❌ Agent {self.name} failed: {type(e).__name__}: {e}", "red"))
            raise

        if finished:
            self.transition_to(AgentState.COMPLETED)
        else:
            self.transition_to(AgentState.MAX_ITERATIONS_REACHED)
        logger.info(colored(f"🏁 Agent {self.name} finished as {self.state.value} after {self.current_step} steps", "green" if finished else "yellow"))

        self.transcript = [user_message, self.make_message("assistant", answer)]
        return self._build_response(answer, finished, user_input, system, history, scratchpad)

    def _build_response(
        self,
        answer: str,
        finished: bool,
        user_input: str,
        system: Message,
        history: List[Message],
        scratchpad: List[Message],
    ) -> Dict[str, Any]:
        response: Dict[str, Any] = {"output": answer, "truncated": not finished}
        if self.options.return_intermediate_steps:
            response["intermediateSteps"] = [step.model_dump() for step in self.intermediate_steps]
        else:
            self.intermediate_steps.clear()
        if self.mode == AgentMode.PLAN_AND_EXECUTE_AGENT:
            response["plan"] = list(self.plan)
        response.update({
            "system_message": system.text_content,
            "formatting_instructions": self.formatting_instructions,
            "input": user_input,
            "chat_history": [message.to_dict() for message in history],
            "agent_scratchpad": [message.to_dict() for message in scratchpad],
        })
        return response
