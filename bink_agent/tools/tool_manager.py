import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional

from bink_agent.errors import ToolExecutionError
from bink_agent.tools.base import BaseTool

logger = logging.getLogger(__name__)


class ToolManager:
    """Ordered, name-indexed set of tools available to a run."""

    def __init__(self, tools: Optional[Iterable[BaseTool]] = None):
        self.tools: List[BaseTool] = []
        self.tool_map: Dict[str, BaseTool] = {}
        self.add_tools(*(tools or []))

    def __getitem__(self, name: str) -> BaseTool:
        return self.tool_map[name]

    def __iter__(self) -> Iterator[BaseTool]:
        return iter(self.tools)

    def __len__(self) -> int:
        return len(self.tools)

    def __contains__(self, name: str) -> bool:
        return name in self.tool_map

    def to_params(self) -> List[Dict[str, Any]]:
        return [tool.to_param() for tool in self.tools]

    async def execute(self, *, name: str, tool_input: Dict[str, Any] = None) -> Any:
        """Run a tool by name.

        Unknown tools and tool exceptions are raised as ``ToolExecutionError``;
        errors the tool raised itself keep their ``recoverable`` flag.
        """
        tool = self.tool_map.get(name)
        if tool is None:
            raise ToolExecutionError(f"Tool {name} not found", tool_name=name)

        try:
            return await tool(**(tool_input or {}))
        except ToolExecutionError as e:
            if e.tool_name is None:
                e.tool_name = name
            raise
        except Exception as e:
            raise ToolExecutionError(str(e) or type(e).__name__, tool_name=name, cause=e) from e

    def add_tool(self, tool: BaseTool) -> bool:
        existing = self.tool_map.get(tool.name)
        if existing is tool:
            return False
        if existing is not None:
            logger.warning(f"Tool {tool.name} is already registered, keeping the first one")
            return False
        self.tools.append(tool)
        self.tool_map[tool.name] = tool
        return True

    def add_tools(self, *tools: BaseTool) -> None:
        for tool in tools:
            self.add_tool(tool)

    def replace_tool(self, tool: BaseTool) -> None:
        """Swap the registered tool of the same name for ``tool``, keeping its position."""
        existing = self.tool_map[tool.name]
        position = next(i for i, registered in enumerate(self.tools) if registered is existing)
        self.tools[position] = tool
        self.tool_map[tool.name] = tool
