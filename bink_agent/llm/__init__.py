from .adapter import LLMAdapter, to_completion
from .openai_chat import OpenAIChatModel

__all__ = ["LLMAdapter", "to_completion", "OpenAIChatModel"]
