from types import SimpleNamespace

import pytest
import pytest_asyncio
from solana.rpc.core import RPCException
from solders.pubkey import Pubkey

from bink_agent.errors import InvalidState, NetworkUnavailableError, ToolExecutionError
from bink_agent.plugins import BalancePlugin, balance
from bink_agent.wallet.builder import build_context

from stubs import DEV_EVM_ADDRESS

NETWORKS = {
    "BNB": "https://bsc.example",
    "SOL": "https://solana.example",
    "ETH": "",
}


class FakeEth:
    def __init__(self, wei):
        self.wei = wei
        self.queried = []

    def get_balance(self, address):
        self.queried.append(address)
        return self.wei


class FakeWeb3:
    def __init__(self, wei):
        self.eth = FakeEth(wei)


@pytest_asyncio.fixture
async def balance_plugin():
    networks, wallet = build_context(NETWORKS)
    plugin = BalancePlugin(timeout=5).bind(wallet=wallet, networks=networks)
    await plugin.initialize()
    return plugin


def tool(plugin, name):
    return next(t for t in plugin.get_tools() if t.name == name)


@pytest.mark.asyncio
async def test_evm_balance_uses_the_shared_wallet(balance_plugin, monkeypatch):
    fake = FakeWeb3(12_500_000_000_000_000_000)
    monkeypatch.setattr(balance_plugin, "_web3", lambda network: fake)

    result = await tool(balance_plugin, "get_balance").execute(chain="bnb")

    assert result == "12.5 BNB"
    assert fake.eth.queried == [DEV_EVM_ADDRESS]


@pytest.mark.asyncio
async def test_evm_balance_rejects_a_bad_address(balance_plugin):
    with pytest.raises(ToolExecutionError, match="Invalid BNB address"):
        await balance_plugin.get_balance("BNB", "0x123")


class FakeSolanaClient:
    """Stands in for ``solana.rpc.async_api.AsyncClient``."""

    def __init__(self, lamports=None, error=None):
        self.lamports = lamports
        self.error = error
        self.endpoints = []
        self.queried = []

    def __call__(self, endpoint, timeout=None):
        self.endpoints.append(endpoint)
        return self

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    async def get_balance(self, pubkey):
        self.queried.append(pubkey)
        if self.error:
            raise self.error
        return SimpleNamespace(value=self.lamports)


@pytest.mark.asyncio
async def test_solana_balance_uses_the_solana_client(balance_plugin, monkeypatch):
    fake = FakeSolanaClient(lamports=1_500_000_000)
    monkeypatch.setattr(balance, "AsyncClient", fake)

    result = await tool(balance_plugin, "get_balance").execute(chain="SOL")

    assert result == "1.5 SOL"
    assert fake.endpoints == ["https://solana.example"]
    assert fake.queried == [Pubkey.from_string(balance_plugin.wallet.get_address("SOL"))]


@pytest.mark.asyncio
async def test_solana_rpc_error_is_a_tool_error(balance_plugin, monkeypatch):
    monkeypatch.setattr(balance, "AsyncClient", FakeSolanaClient(error=RPCException("Invalid param")))

    with pytest.raises(ToolExecutionError, match="Invalid param"):
        await balance_plugin.get_balance("SOL", "11111111111111111111111111111111")


@pytest.mark.asyncio
async def test_solana_balance_rejects_a_bad_address(balance_plugin, monkeypatch):
    fake = FakeSolanaClient(lamports=0)
    monkeypatch.setattr(balance, "AsyncClient", fake)

    with pytest.raises(ToolExecutionError, match="Invalid SOL address"):
        await balance_plugin.get_balance("SOL", "not-base58!")
    assert fake.endpoints == []


@pytest.mark.asyncio
async def test_unconfigured_network_raises_only_when_used(balance_plugin):
    with pytest.raises(NetworkUnavailableError, match="ETH"):
        await tool(balance_plugin, "get_balance").execute(chain="ETH")


@pytest.mark.asyncio
async def test_wallet_address_tool(balance_plugin):
    assert await tool(balance_plugin, "get_wallet_address").execute(chain="BNB") == DEV_EVM_ADDRESS


def test_uninitialized_plugin_has_no_wallet():
    plugin = BalancePlugin()

    assert plugin.initialized is False
    with pytest.raises(InvalidState):
        plugin.wallet
    assert plugin.describe() == "balance (BNB, ETH, SOL)"


def test_bind_leaves_the_plugin_unbound():
    networks, wallet = build_context(NETWORKS)
    plugin = BalancePlugin()

    bound = plugin.bind(wallet=wallet, networks=networks)

    assert bound.wallet is wallet
    assert bound.source is plugin
    assert plugin.initialized is False
    assert all(t.plugin is bound for t in bound.get_tools())
    assert all(t.plugin is plugin for t in plugin.get_tools())
