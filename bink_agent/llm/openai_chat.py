"""
OpenAI-compatible chat model handle.
"""

import os
from logging import getLogger
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion

from bink_agent.schema import Completion, Function, ToolCall

logger = getLogger(__name__)


class OpenAIChatModel:
    """Chat model handle backed by ``AsyncOpenAI``."""

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 60,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model = model or os.getenv("OPENAI_MODEL", "gpt-4.1")
        self.client = client or AsyncOpenAI(
            api_key=api_key or os.getenv("OPENAI_API_KEY"),
            base_url=base_url or os.getenv("OPENAI_BASE_URL") or None,
            timeout=timeout,
        )
        logger.info(f"OpenAI chat model initialized with model: {self.model}")

    def _convert_response(self, response: ChatCompletion) -> Completion:
        choice = response.choices[0]
        message = choice.message

        tool_calls = []
        for tool_call in message.tool_calls or []:
            tool_calls.append(ToolCall(
                id=tool_call.id,
                type=tool_call.type,
                function=Function(
                    name=tool_call.function.name,
                    arguments=tool_call.function.arguments,
                ),
            ))

        usage = None
        if response.usage:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

        return Completion(
            text=message.content or "",
            tool_calls=tool_calls,
            usage=usage,
            finish_reason=choice.finish_reason,
        )

    async def chat(self, messages: List[Dict[str, Any]], tools: Optional[List[Dict]] = None, **kwargs) -> Completion:
        params: Dict[str, Any] = {"model": self.model, "messages": messages, **kwargs}
        if tools:
            params["tools"] = tools
            params["tool_choice"] = "auto"
        response = await self.client.chat.completions.create(**params)
        return self._convert_response(response)

    async def close(self) -> None:
        await self.client.close()
