import asyncio
import inspect
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field


class BaseTool(ABC, BaseModel):
    name: str = Field(description="The name of the tool")
    description: str = Field(description="A description of the tool")
    parameters: dict = Field(
        default_factory=lambda: {"type": "object", "properties": {}},
        description="JSON schema of the tool arguments",
    )

    model_config = {
        "arbitrary_types_allowed": True
    }

    async def __call__(self, *args, **kwargs) -> Any:
        return await self.execute(*args, **kwargs)

    @abstractmethod
    async def execute(self, *args, **kwargs) -> Any:
        raise NotImplementedError("Subclasses must implement this method")

    def to_param(self) -> dict:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


class FunctionTool(BaseTool):
    """Wrap a plain (sync or async) callable as a tool."""

    func: Callable[..., Any]

    async def execute(self, **kwargs) -> Any:
        if inspect.iscoroutinefunction(self.func):
            return await self.func(**kwargs)
        result = await asyncio.to_thread(self.func, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result


class ToolResult(BaseModel):
    """What a tool may return instead of a bare value; a set ``error`` counts as a failed call."""

    output: Any = None
    error: Optional[str] = None

    def __bool__(self):
        return self.output is not None or bool(self.error)

    def __str__(self) -> str:
        return f"Error: {self.error}" if self.error else f"Output: {self.output}"
