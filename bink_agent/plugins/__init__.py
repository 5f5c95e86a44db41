from .base import BasePlugin
from .balance import BalancePlugin, GetBalanceTool, GetWalletAddressTool

__all__ = [
    "BasePlugin",
    "BalancePlugin",
    "GetBalanceTool",
    "GetWalletAddressTool",
]
