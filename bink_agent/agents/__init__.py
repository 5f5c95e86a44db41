from .base import BaseAgent
from .bink import BinkAgent
from .plan_execute import PlanExecuteMixin, parse_plan
from .toolcall import ToolCallAgent

__all__ = [
    "BaseAgent",
    "BinkAgent",
    "PlanExecuteMixin",
    "parse_plan",
    "ToolCallAgent",
]
