"""
Plan-and-execute mode: plan sub-goals, run each through the tool loop, allow
a single re-plan, then synthesize the final answer.
"""

import json
import logging
import re
from typing import List, NamedTuple, Tuple

from termcolor import colored

from bink_agent.prompts import PLANNER_PROMPT, REPLANNER_PROMPT, STEP_PROMPT, SYNTHESIS_PROMPT
from bink_agent.schema import Message

logger = logging.getLogger(__name__)

_LIST_ITEM = re.compile(r"^\s*(?:\d+[.)]|[-*•])\s+(.+?)\s*$")
_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)

MAX_REPLANS = 1


class PlanOutcome(NamedTuple):
    answer: str
    finished: bool


def parse_plan(text: str) -> List[str]:
    """Read a plan from ``{"steps": [...]}``, a JSON list, or numbered/bulleted lines."""
    candidate = (text or "").strip()
    fenced = _CODE_FENCE.match(candidate)
    if fenced:
        candidate = fenced.group(1)

    try:
        parsed = json.loads(candidate)
    except ValueError:
        parsed = None
    if isinstance(parsed, dict):
        parsed = parsed.get("steps")
    if isinstance(parsed, list):
        return [str(step).strip() for step in parsed if str(step).strip()]

    steps = []
    for line in candidate.splitlines():
        match = _LIST_ITEM.match(line)
        if match:
            steps.append(match.group(1))
    return steps


def format_completed(completed: List[Tuple[str, str]]) -> str:
    if not completed:
        return "(none)"
    return "\n".join(f"{i}. {step}\n   Result: {result}" for i, (step, result) in enumerate(completed, 1))


class PlanExecuteMixin:
    """Needs a ToolCallAgent host providing ``llm``, ``gen_params``,
    ``run_tool_loop`` and ``build_user_content``."""

    plan: List[str]
    replans: int
    formatting_instructions: str

    async def _request_plan(self, messages: List[Message]) -> List[str]:
        completion = await self.llm.generate(
            messages,
            temperature=self.gen_params.temperature,
            max_tokens=self.gen_params.max_tokens,
        )
        steps = parse_plan(completion.text)
        logger.info(colored(f"📋 {self.name} plan: {steps}", "magenta"))
        return steps

    async def run_plan_and_execute(
        self,
        system: Message,
        history: List[Message],
        user_text: str,
        scratchpad: List[Message],
    ) -> PlanOutcome:
        plan = await self._request_plan([
            system,
            *history,
            self.make_message("user", self.build_user_content(PLANNER_PROMPT.format(input=user_text))),
        ])
        if not plan:
            logger.info("Planner returned no steps, treating the request as a single step")
            plan = [user_text]
        self.plan = list(plan)

        pending = list(plan)
        completed: List[Tuple[str, str]] = []
        while pending:
            if self.current_step >= self.max_steps:
                logger.warning(f"Agent {self.name} ran out of steps before sub-goal {pending[0]!r}")
                return PlanOutcome(format_completed(completed), False)
            step = pending.pop(0)
            logger.info(colored(f"▶️ Sub-goal: {step}", "blue"))
            step_messages = [
                system,
                self.make_message("user", self.build_user_content(STEP_PROMPT.format(
                    input=user_text, completed=format_completed(completed), step=step,
                ))),
            ]
            outcome = await self.run_tool_loop(step_messages, step=step)
            scratchpad.extend(step_messages[1:])

            if not outcome.finished:
                completed.append((step, outcome.answer or "(incomplete)"))
                return PlanOutcome(format_completed(completed), False)

            if outcome.tool_errors and self.replans < MAX_REPLANS:
                self.replans += 1
                failure = next(
                    (s.observation for s in reversed(self.intermediate_steps) if s.kind == "tool-error"),
                    "a tool reported an error",
                )
                logger.info(colored(f"🔁 Re-planning after sub-goal {step!r} failed: {failure}", "magenta"))
                pending = await self._request_plan([
                    system,
                    self.make_message("user", REPLANNER_PROMPT.format(
                        plan="\n".join(f"{i}. {s}" for i, s in enumerate(self.plan, 1)),
                        completed=format_completed(completed),
                        failed_step=step,
                        failure=failure,
                        input=user_text,
                    )),
                ])
                self.plan = [done for done, _ in completed] + pending
                continue

            completed.append((step, outcome.answer))

        synthesis_prompt = SYNTHESIS_PROMPT.format(input=user_text, completed=format_completed(completed))
        if self.formatting_instructions:
            synthesis_prompt = f"{synthesis_prompt}\n\n{self.formatting_instructions}"
        completion = await self.llm.generate(
            [system, *history, self.make_message("user", synthesis_prompt)],
            temperature=self.gen_params.temperature,
            max_tokens=self.gen_params.max_tokens,
        )
        return PlanOutcome(completion.text, True)
