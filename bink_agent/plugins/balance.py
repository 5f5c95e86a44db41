import asyncio
import logging
from decimal import Decimal
from typing import Dict, List

from pydantic import Field
from solana.rpc.async_api import AsyncClient
from solana.rpc.core import RPCException
from solders.pubkey import Pubkey
from web3 import Web3

from bink_agent.errors import ToolExecutionError
from bink_agent.plugins.base import BasePlugin
from bink_agent.tools.base import BaseTool
from bink_agent.wallet.networks import ChainType, NetworkDescriptor

logger = logging.getLogger(__name__)


class GetBalanceTool(BaseTool):
    name: str = "get_balance"
    description: str = "Get the native token balance of the agent's wallet (or of a given address) on a chain"
    parameters: dict = {
        "type": "object",
        "properties": {
            "chain": {
                "type": "string",
                "description": "Chain symbol, e.g. BNB, ETH or SOL"
            },
            "address": {
                "type": "string",
                "description": "Address to query. Defaults to the agent's own wallet address"
            }
        },
        "required": ["chain"]
    }
    plugin: "BalancePlugin" = Field(exclude=True)

    async def execute(self, chain: str, address: str = None) -> str:
        balance, symbol = await self.plugin.get_balance(chain, address)
        return f"{balance.normalize():f} {symbol}"


class GetWalletAddressTool(BaseTool):
    name: str = "get_wallet_address"
    description: str = "Get the agent's wallet address on a chain"
    parameters: dict = {
        "type": "object",
        "properties": {
            "chain": {
                "type": "string",
                "description": "Chain symbol, e.g. BNB, ETH or SOL"
            }
        },
        "required": ["chain"]
    }
    plugin: "BalancePlugin" = Field(exclude=True)

    async def execute(self, chain: str) -> str:
        return self.plugin.wallet.get_address(chain)


class BalancePlugin(BasePlugin):
    """Native balance lookups over each network's RPC endpoint."""

    name = "balance"
    supported_chains = ("BNB", "ETH", "SOL")

    def __init__(self, timeout: float = 15.0):
        super().__init__()
        self.timeout = timeout
        self._web3_clients: Dict[str, Web3] = {}

    async def initialize(self) -> None:
        await super().initialize()
        self._web3_clients = {}

    def create_tools(self) -> List[BaseTool]:
        return [GetBalanceTool(plugin=self), GetWalletAddressTool(plugin=self)]

    def _web3(self, network: NetworkDescriptor) -> Web3:
        client = self._web3_clients.get(network.symbol)
        if client is None:
            client = Web3(Web3.HTTPProvider(network.rpc_url, request_kwargs={"timeout": self.timeout}))
            self._web3_clients[network.symbol] = client
        return client

    async def get_balance(self, chain: str, address: str = None):
        """Return ``(balance, currency)`` for ``address`` (default: own wallet) on ``chain``."""
        network = self.networks.require(chain)
        address = address or self.wallet.get_address(network.symbol)
        if network.type == ChainType.SOLANA:
            lamports = await self._solana_balance(network, address)
            return Decimal(lamports) / Decimal(10) ** network.decimals, network.native_currency

        if not Web3.is_address(address):
            raise ToolExecutionError(f"Invalid {network.symbol} address: {address}")
        w3 = self._web3(network)
        wei = await asyncio.to_thread(w3.eth.get_balance, Web3.to_checksum_address(address))
        return Decimal(wei) / Decimal(10) ** network.decimals, network.native_currency

    async def _solana_balance(self, network: NetworkDescriptor, address: str) -> int:
        try:
            pubkey = Pubkey.from_string(address)
        except ValueError as e:
            raise ToolExecutionError(f"Invalid {network.symbol} address: {address}") from e
        async with AsyncClient(network.rpc_url, timeout=self.timeout) as client:
            try:
                response = await client.get_balance(pubkey)
            except RPCException as e:
                raise ToolExecutionError(f"Solana RPC error: {e}") from e
        return response.value


GetBalanceTool.model_rebuild()
GetWalletAddressTool.model_rebuild()
