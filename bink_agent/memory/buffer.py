"""Conversation memory handles consumed by the node driver."""

import logging
from typing import Any, Dict, List, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from bink_agent.schema import MemoryState, Message, Role

logger = logging.getLogger(__name__)

MEMORY_KEY = "chat_history"


@runtime_checkable
class ChatMemory(Protocol):
    """What the driver needs from a memory collaborator."""

    async def load_memory_variables(self, inputs: Dict[str, Any] = None) -> MemoryState: ...

    async def save_context(self, inputs: Dict[str, Any], outputs: Dict[str, Any]) -> None: ...


class ConversationBufferMemory(BaseModel):
    """In-process window of the last ``max_messages`` chat messages."""

    messages: List[Message] = Field(default_factory=list)
    max_messages: int = 100
    memory_key: str = MEMORY_KEY

    def add_message(self, message: Message) -> None:
        self.messages.append(message)
        if len(self.messages) > self.max_messages:
            self.messages.pop(0)

    async def load_memory_variables(self, inputs: Dict[str, Any] = None) -> MemoryState:
        return {self.memory_key: list(self.messages)}

    async def save_context(self, inputs: Dict[str, Any], outputs: Dict[str, Any]) -> None:
        user_text = inputs.get("input")
        output = outputs.get("output")
        if user_text:
            self.add_message(Message(role=Role.USER.value, content=str(user_text)))
        if output is not None:
            self.add_message(Message(role=Role.ASSISTANT.value, content=output if isinstance(output, str) else str(output)))
        logger.debug(f"Memory now holds {len(self.messages)} messages")


def history_to_messages(history: Any) -> List[Message]:
    """Coerce a ``chat_history`` value (messages, dicts or a string) into messages."""
    if not history:
        return []
    if isinstance(history, str):
        return [Message(role=Role.SYSTEM.value, content=f"Conversation so far:\n{history}")]

    messages = []
    for entry in history:
        if isinstance(entry, Message):
            messages.append(entry)
        elif isinstance(entry, dict):
            messages.append(Message.model_validate(entry))
        elif hasattr(entry, "type") and hasattr(entry, "content"):
            role = {"human": "user", "ai": "assistant"}.get(entry.type, entry.type)
            messages.append(Message(role=role, content=entry.content))
        else:
            raise ValueError(f"Unsupported chat history entry: {entry!r}")
    # Tool traffic from earlier turns cannot be replayed without its tool calls.
    return [message for message in messages if message.role in (Role.USER.value, Role.ASSISTANT.value, Role.SYSTEM.value) and not message.tool_calls]
