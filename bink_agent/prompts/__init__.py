from .system import SYSTEM_MESSAGE
from .toolcall import TOOLS_AGENT_PROTOCOL
from .plan_execute import PLAN_EXECUTE_PROTOCOL, PLANNER_PROMPT, REPLANNER_PROMPT, STEP_PROMPT, SYNTHESIS_PROMPT

__all__ = [
    "SYSTEM_MESSAGE",
    "TOOLS_AGENT_PROTOCOL",
    "PLAN_EXECUTE_PROTOCOL",
    "PLANNER_PROMPT",
    "REPLANNER_PROMPT",
    "STEP_PROMPT",
    "SYNTHESIS_PROMPT",
]
