from .context import ExecutionContext, NodeExecutionContext
from .driver import BinkAgentNode, extract_images, get_prompt_input

__all__ = [
    "ExecutionContext",
    "NodeExecutionContext",
    "BinkAgentNode",
    "extract_images",
    "get_prompt_input",
]
