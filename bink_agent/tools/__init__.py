from .base import BaseTool, FunctionTool, ToolResult
from .tool_manager import ToolManager

__all__ = [
    "BaseTool",
    "FunctionTool",
    "ToolResult",
    "ToolManager",
]
