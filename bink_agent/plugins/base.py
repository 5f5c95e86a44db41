import copy
import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from bink_agent.errors import InvalidState
from bink_agent.tools.base import BaseTool
from bink_agent.wallet.networks import NetworkConfig
from bink_agent.wallet.wallet import Wallet

logger = logging.getLogger(__name__)


class BasePlugin(ABC):
    """A bundle of chain-aware tools.

    A discovered plugin is a template: it never holds a wallet itself.
    ``bind`` returns a copy attached to one run's shared ``Wallet`` and
    ``NetworkConfig``, and only the tools of that copy can reach the chain.
    Chain clients are built lazily from the bound networks.
    """

    name: str = "plugin"
    supported_chains: Sequence[str] = ()

    def __init__(self):
        self._wallet: Optional[Wallet] = None
        self._networks: Optional[NetworkConfig] = None
        self._tools: Optional[List[BaseTool]] = None
        self.source: Optional["BasePlugin"] = None

    @property
    def initialized(self) -> bool:
        return self._wallet is not None

    @property
    def wallet(self) -> Wallet:
        if self._wallet is None:
            raise InvalidState(f"Plugin {self.name} is not bound to a run wallet")
        return self._wallet

    @property
    def networks(self) -> NetworkConfig:
        if self._networks is None:
            raise InvalidState(f"Plugin {self.name} is not bound to run networks")
        return self._networks

    def bind(self, *, wallet: Wallet, networks: NetworkConfig) -> "BasePlugin":
        """Return a copy of this plugin scoped to one run. ``self`` is left untouched."""
        bound = copy.copy(self)
        bound._wallet = wallet
        bound._networks = networks
        bound._tools = None
        bound.source = self.source or self
        return bound

    async def initialize(self) -> None:
        """Per-run setup, called once on the bound copy before its tools are used."""
        logger.debug(f"Plugin {self.name} initialized for networks {list(self.networks)}")

    def get_tools(self) -> List[BaseTool]:
        if self._tools is None:
            self._tools = self.create_tools()
        return list(self._tools)

    @abstractmethod
    def create_tools(self) -> List[BaseTool]:
        """Build this plugin's tools; each tool calls back into ``self``."""
        raise NotImplementedError("Subclasses must implement this method")

    def describe(self) -> str:
        chains = ", ".join(self.supported_chains) or "any chain"
        return f"{self.name} ({chains})"
