import logging
from typing import List, NamedTuple, Optional

from termcolor import colored

from bink_agent.agents.base import BaseAgent
from bink_agent.errors import ToolExecutionError
from bink_agent.llm.adapter import LLMAdapter
from bink_agent.schema import GenerationParams, IntermediateStep, Message, ToolCall
from bink_agent.tools.base import ToolResult
from bink_agent.tools.tool_manager import ToolManager

logger = logging.getLogger(__name__)


class LoopOutcome(NamedTuple):
    answer: str
    finished: bool
    tool_errors: int


class ToolCallAgent(BaseAgent):
    """Think/act loop: the model either answers or calls tools, until it answers
    or the shared step budget runs out."""

    name: str = "toolcall"
    description: str = "Useful when you need to call a tool"

    def __init__(
        self,
        llm: LLMAdapter,
        available_tools: ToolManager,
        gen_params: Optional[GenerationParams] = None,
        max_steps: int = 10,
    ):
        super().__init__(max_steps=max_steps)
        self.llm = llm
        self.available_tools = available_tools
        self.gen_params = gen_params or GenerationParams()
        self.tool_calls: List[ToolCall] = []
        self.intermediate_steps: List[IntermediateStep] = []
        self._last_content = ""

    @property
    def tool_error_count(self) -> int:
        return sum(1 for step in self.intermediate_steps if step.kind == "tool-error")

    async def think(self, messages: List[Message]) -> bool:
        """One model call. Returns True when the model asked for tools."""
        completion = await self.llm.generate(
            messages,
            tools=self.available_tools.to_params() or None,
            temperature=self.gen_params.temperature,
            max_tokens=self.gen_params.max_tokens,
        )
        self.tool_calls = completion.tool_calls
        self._last_content = completion.text

        logger.info(colored(f"🤔 {self.name}'s thoughts: {completion.text}", "cyan"))
        tool_count = len(self.tool_calls)
        logger.info(colored(f"🛠️ {self.name} selected {tool_count} tools: {[tc.function.name for tc in self.tool_calls]}", "green" if tool_count else "yellow"))

        messages.append(self.make_message("assistant", completion.text, tool_calls=self.tool_calls))
        return bool(self.tool_calls)

    async def act(self, messages: List[Message], step: Optional[str] = None) -> List[str]:
        results = []
        for tool_call in self.tool_calls:
            observation = await self.execute_tool(tool_call, step=step)
            messages.append(self.make_message(
                "tool", observation, tool_call_id=tool_call.id, tool_name=tool_call.function.name
            ))
            results.append(observation)
        return results

    async def execute_tool(self, tool_call: ToolCall, step: Optional[str] = None) -> str:
        name = tool_call.function.name
        try:
            args = tool_call.function.get_arguments_dict()
        except ValueError as e:
            return self._record_tool_error(name, {}, f"Invalid arguments for {name}: {e}", step)

        try:
            result = await self.available_tools.execute(name=name, tool_input=args)
        except ToolExecutionError as e:
            if not e.recoverable:
                logger.error(colored(f"❌ Tool {name} failed and cannot recover: {e}", "red"))
                raise
            return self._record_tool_error(name, args, str(e), step)

        if isinstance(result, ToolResult):
            if result.error:
                return self._record_tool_error(name, args, result.error, step)
            result = result.output

        output = "" if result is None else str(result)
        logger.info(f"Tool {name} executed with result: {output}")
        self.intermediate_steps.append(
            IntermediateStep(tool=name, tool_input=args, observation=output, kind="tool-result", step=step)
        )
        if output:
            return f"Observed output of cmd {name} execution: {output}"
        return f"cmd {name} execution without any output"

    def _record_tool_error(self, name: str, args: dict, message: str, step: Optional[str]) -> str:
        logger.warning(colored(f"⚠️ Tool {name} error: {message}", "yellow"))
        self.intermediate_steps.append(
            IntermediateStep(tool=name, tool_input=args, observation=message, kind="tool-error", step=step)
        )
        return f"Error: {message}"

    async def run_tool_loop(self, messages: List[Message], step: Optional[str] = None) -> LoopOutcome:
        errors_before = self.tool_error_count
        self._last_content = ""
        while self.current_step < self.max_steps:
            self.current_step += 1
            logger.info(f"Executing step {self.current_step}/{self.max_steps}")
            if not await self.think(messages):
                return LoopOutcome(self._last_content, True, self.tool_error_count - errors_before)
            await self.act(messages, step=step)

        logger.warning(f"Agent {self.name} reached max steps ({self.max_steps}) without a final answer")
        return LoopOutcome(self._last_content, False, self.tool_error_count - errors_before)
