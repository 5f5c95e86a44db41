import datetime
import logging
from abc import ABC
from typing import Any, Dict, List, Literal, Optional

from bink_agent.errors import InvalidState
from bink_agent.schema import AgentState, Message, MessageContent, Role, ToolCall

logger = logging.getLogger(__name__)

# Every state a run can move to from a given state.
_TRANSITIONS = {
    AgentState.IDLE: {AgentState.CONFIGURING},
    AgentState.CONFIGURING: {AgentState.RUNNING},
    AgentState.RUNNING: {
        AgentState.COMPLETED,
        AgentState.MAX_ITERATIONS_REACHED,
        AgentState.FAILED,
    },
}


class BaseAgent(ABC):
    """
    Single-use agent run: ``IDLE -> CONFIGURING -> RUNNING -> terminal``.
    """

    name: str = "agent"
    description: Optional[str] = None

    def __init__(self, max_steps: int = 10):
        self.state = AgentState.IDLE
        self.max_steps = max_steps
        self.current_step = 0
        self._state_transition_history: List[Dict[str, Any]] = []

    @property
    def state_history(self) -> List[Dict[str, Any]]:
        return list(self._state_transition_history)

    def transition_to(self, new_state: AgentState) -> None:
        if new_state not in _TRANSITIONS.get(self.state, set()):
            raise InvalidState(
                f"Agent {self.name} cannot move from {self.state.value} to {new_state.value}"
            )
        self._record_state_transition({
            "from": self.state,
            "to": new_state,
            "timestamp": datetime.datetime.now().isoformat(),
            "step": self.current_step,
        })
        logger.debug(f"Agent {self.name}: State {self.state} -> {new_state}")
        self.state = new_state

    def require_state(self, expected: AgentState, action: str) -> None:
        if self.state != expected:
            raise InvalidState(
                f"Cannot {action} while agent {self.name} is {self.state.value}"
                f" (expected {expected.value})"
            )

    def _record_state_transition(self, transition: Dict[str, Any]) -> None:
        self._state_transition_history.append(transition)

    @staticmethod
    def make_message(
        role: Literal["system", "user", "assistant", "tool"],
        content: MessageContent,
        tool_call_id: Optional[str] = None,
        tool_calls: Optional[List[ToolCall]] = None,
        tool_name: Optional[str] = None,
    ) -> Message:
        if role == "tool":
            return Message(role=Role.TOOL.value, content=content, tool_call_id=tool_call_id, name=tool_name)
        if role == "assistant":
            return Message(role=Role.ASSISTANT.value, content=content, tool_calls=tool_calls or None)
        if role in ("user", "system"):
            return Message(role=role, content=content)
        raise ValueError(f"Invalid role: {role}")
