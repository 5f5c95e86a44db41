from .buffer import MEMORY_KEY, ChatMemory, ConversationBufferMemory, history_to_messages

__all__ = ["MEMORY_KEY", "ChatMemory", "ConversationBufferMemory", "history_to_messages"]
