"""Per-chain network descriptors built from credential-sourced RPC URLs."""

import logging
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict

from bink_agent.errors import NetworkUnavailableError

logger = logging.getLogger(__name__)

# Plugins talk to RPC endpoints over HTTP only.
_RPC_SCHEMES = ("http", "https")


class ChainType(str, Enum):
    EVM = "evm"
    SOLANA = "solana"


class NetworkDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: str
    type: ChainType = ChainType.EVM
    rpc_url: Optional[str] = None
    chain_id: Optional[int] = None
    name: str = ""
    native_currency: str = ""
    decimals: int = 18
    explorer_url: Optional[str] = None
    unavailable_reason: Optional[str] = None

    @property
    def available(self) -> bool:
        return bool(self.rpc_url)


# Chain metadata for the symbols the node knows about. Any other symbol is
# treated as an EVM chain without a known chain id.
KNOWN_CHAINS: Dict[str, dict] = {
    "BNB": {
        "type": ChainType.EVM,
        "chain_id": 56,
        "name": "BNB Smart Chain",
        "native_currency": "BNB",
        "decimals": 18,
        "explorer_url": "https://bscscan.com",
    },
    "ETH": {
        "type": ChainType.EVM,
        "chain_id": 1,
        "name": "Ethereum",
        "native_currency": "ETH",
        "decimals": 18,
        "explorer_url": "https://etherscan.io",
    },
    "SOL": {
        "type": ChainType.SOLANA,
        "chain_id": None,
        "name": "Solana",
        "native_currency": "SOL",
        "decimals": 9,
        "explorer_url": "https://solscan.io",
    },
}


def validate_rpc_url(url) -> Optional[str]:
    """Return the reason ``url`` is unusable, or None when it is fine."""
    if url is None:
        return "no RPC URL configured"
    if not isinstance(url, str) or not url.strip():
        return "RPC URL is empty"
    parsed = urlparse(url.strip())
    if parsed.scheme in ("ws", "wss"):
        return f"websocket RPC URL {url!r} is not supported, use an http(s) endpoint"
    if parsed.scheme not in _RPC_SCHEMES or not parsed.netloc:
        return f"malformed RPC URL {url!r}"
    return None


class NetworkConfig(Mapping):
    """Read-only mapping of chain symbol to ``NetworkDescriptor``."""

    def __init__(self, networks: Mapping[str, NetworkDescriptor]):
        self._networks = MappingProxyType({symbol.upper(): desc for symbol, desc in networks.items()})

    def __getitem__(self, symbol: str) -> NetworkDescriptor:
        return self._networks[symbol.upper()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._networks)

    def __len__(self) -> int:
        return len(self._networks)

    def __contains__(self, symbol) -> bool:
        return isinstance(symbol, str) and symbol.upper() in self._networks

    def __repr__(self) -> str:
        return f"NetworkConfig({', '.join(self._networks)})"

    @property
    def available(self) -> Dict[str, NetworkDescriptor]:
        return {symbol: desc for symbol, desc in self._networks.items() if desc.available}

    def require(self, symbol: str) -> NetworkDescriptor:
        """Return the descriptor for ``symbol`` if it can actually be used.

        Raises:
            NetworkUnavailableError: If the chain is unknown or has no usable RPC URL.
        """
        key = (symbol or "").upper()
        descriptor = self._networks.get(key)
        if descriptor is None:
            raise NetworkUnavailableError(key or str(symbol), "chain is not configured")
        if not descriptor.available:
            raise NetworkUnavailableError(key, descriptor.unavailable_reason or "no RPC URL configured")
        return descriptor


def build_networks_config(rpc_urls: Mapping[str, Optional[str]]) -> NetworkConfig:
    """Build a ``NetworkConfig`` from a chain symbol to RPC URL mapping.

    Invalid URLs do not fail the build: the chain is kept without an endpoint
    and only errors when a plugin actually uses it.
    """
    networks = {}
    for symbol, url in (rpc_urls or {}).items():
        key = symbol.upper()
        metadata = KNOWN_CHAINS.get(key, {"type": ChainType.EVM, "native_currency": key, "name": key})
        reason = validate_rpc_url(url)
        if reason:
            logger.warning(f"Network {key} disabled: {reason}")
        networks[key] = NetworkDescriptor(
            symbol=key,
            rpc_url=None if reason else url.strip(),
            unavailable_reason=reason,
            **metadata,
        )
    return NetworkConfig(networks)
