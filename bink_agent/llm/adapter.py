"""
Uniform completion capability over a host-resolved chat model handle.
"""

import json
import logging
import uuid
from typing import Any, Dict, List, Optional

from bink_agent.errors import ModelError
from bink_agent.schema import Completion, Function, Message, ToolCall

logger = logging.getLogger(__name__)


def _to_tool_call(raw: Any) -> ToolCall:
    if isinstance(raw, ToolCall):
        return raw
    if hasattr(raw, "model_dump"):
        raw = raw.model_dump()
    if not isinstance(raw, dict):
        raise ModelError(f"Unrecognised tool call from model: {raw!r}")

    function = raw.get("function") or {"name": raw.get("name"), "arguments": raw.get("arguments", raw.get("args"))}
    arguments = function.get("arguments")
    if isinstance(arguments, dict):
        arguments = json.dumps(arguments)
    return ToolCall(
        id=raw.get("id") or f"call_{uuid.uuid4().hex[:12]}",
        type=raw.get("type") or "function",
        function=Function(name=function.get("name") or "", arguments=arguments or ""),
    )


def to_completion(result: Any) -> Completion:
    """Normalise whatever a chat model returned into a ``Completion``."""
    if isinstance(result, Completion):
        return result
    if isinstance(result, str):
        return Completion(text=result)
    if isinstance(result, dict):
        text = result.get("text")
        if text is None:
            text = result.get("content")
        tool_calls = result.get("tool_calls") or []
        usage = result.get("usage")
        finish_reason = result.get("finish_reason")
    elif hasattr(result, "content") or hasattr(result, "text"):
        text = getattr(result, "content", None)
        if text is None:
            text = getattr(result, "text", None)
        tool_calls = getattr(result, "tool_calls", None) or []
        usage = getattr(result, "usage", None)
        finish_reason = getattr(result, "finish_reason", None)
    else:
        raise ModelError(f"Unrecognised model response type: {type(result).__name__}")

    return Completion(
        text=text or "",
        tool_calls=[_to_tool_call(tool_call) for tool_call in tool_calls],
        usage=usage if isinstance(usage, dict) else None,
        finish_reason=finish_reason,
    )


class LLMAdapter:
    """Wraps a chat model handle behind ``generate``.

    The handle needs an async ``chat(messages, tools=..., **kwargs)`` or
    ``ask_tool(messages, tools=..., **kwargs)`` method. There is no retry here:
    any exception from the handle is raised as ``ModelError``.
    """

    def __init__(self, model: Any):
        if model is None:
            raise ValueError("A chat model is required")
        self.model = model
        if hasattr(model, "chat"):
            self._call = model.chat
        elif hasattr(model, "ask_tool"):
            self._call = model.ask_tool
        else:
            raise ValueError(f"{type(model).__name__} has no chat() or ask_tool() method")

    @property
    def model_name(self) -> str:
        return getattr(self.model, "model", None) or type(self.model).__name__

    async def generate(
        self,
        messages: List[Message],
        *,
        tools: Optional[List[Dict[str, Any]]] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> Completion:
        kwargs: Dict[str, Any] = {}
        if tools:
            kwargs["tools"] = tools
        if temperature is not None:
            kwargs["temperature"] = temperature
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens

        try:
            result = await self._call([message.to_dict() for message in messages], **kwargs)
        except ModelError:
            raise
        except Exception as e:
            logger.error(f"Model {self.model_name} failed: {e}")
            raise ModelError(f"Model call failed: {e}", cause=e) from e
        return to_completion(result)
