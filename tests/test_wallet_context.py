import logging

import pytest

from bink_agent.errors import NetworkUnavailableError, ToolExecutionError
from bink_agent.wallet import (
    DEFAULT_TEST_MNEMONIC,
    ChainType,
    Wallet,
    build_context,
    build_networks_config,
)

from stubs import DEV_EVM_ADDRESS


def test_missing_mnemonic_falls_back_to_the_development_seed(caplog):
    with caplog.at_level(logging.WARNING):
        networks, wallet = build_context({"BNB": "https://bsc.example"}, "  ")

    assert wallet.seed_phrase == DEFAULT_TEST_MNEMONIC
    assert wallet.networks is networks
    assert "development mnemonic" in caplog.text


def test_evm_chains_share_one_address():
    _, wallet = build_context({"BNB": "https://bsc.example", "ETH": "https://eth.example"})

    assert wallet.get_address("BNB") == DEV_EVM_ADDRESS
    assert wallet.get_address("eth") == DEV_EVM_ADDRESS


def test_derivation_index_changes_the_address():
    _, first = build_context({"BNB": "https://bsc.example"}, DEFAULT_TEST_MNEMONIC, 0)
    _, second = build_context({"BNB": "https://bsc.example"}, DEFAULT_TEST_MNEMONIC, 1)

    assert second.index == 1
    assert second.get_address("BNB") != first.get_address("BNB")


def test_solana_address_is_derived_from_the_same_seed():
    _, wallet = build_context({"SOL": "https://api.mainnet-beta.solana.com", "BNB": "https://bsc.example"})

    sol_address = wallet.get_address("SOL")

    assert sol_address != wallet.get_address("BNB")
    assert 32 <= len(sol_address) <= 44
    assert wallet.get_addresses() == {"SOL": sol_address, "BNB": DEV_EVM_ADDRESS}


def test_invalid_rpc_url_is_deferred_until_use():
    networks = build_networks_config({"BNB": "bsc-node", "ETH": "https://eth.example", "SOL": None})

    assert set(networks) == {"BNB", "ETH", "SOL"}
    assert list(networks.available) == ["ETH"]
    assert networks["bnb"].rpc_url is None
    assert networks["SOL"].type == ChainType.SOLANA
    assert networks.require("eth").chain_id == 1

    with pytest.raises(NetworkUnavailableError, match="malformed RPC URL") as excinfo:
        networks.require("BNB")
    assert isinstance(excinfo.value, ToolExecutionError)
    assert excinfo.value.recoverable is True

    with pytest.raises(NetworkUnavailableError, match="not configured"):
        networks.require("ARB")


def test_websocket_rpc_url_is_unavailable():
    networks = build_networks_config({"BNB": "wss://bsc.example", "ETH": "ws://localhost:8546"})

    assert list(networks.available) == []
    assert networks["BNB"].rpc_url is None
    with pytest.raises(NetworkUnavailableError, match="websocket"):
        networks.require("ETH")


def test_unknown_symbol_is_treated_as_evm():
    networks = build_networks_config({"base": "https://base.example"})

    assert networks["BASE"].type == ChainType.EVM
    assert networks["BASE"].native_currency == "BASE"


def test_wallet_is_immutable_and_checks_chains():
    networks, wallet = build_context({"BNB": "https://bsc.example"})

    with pytest.raises(AttributeError):
        wallet.index = 3
    with pytest.raises(NetworkUnavailableError):
        wallet.get_address("SOL")
    with pytest.raises(ValueError):
        Wallet("", networks=networks)
    with pytest.raises(ValueError):
        Wallet(DEFAULT_TEST_MNEMONIC, -1, networks=networks)


def test_network_config_is_read_only():
    networks = build_networks_config({"BNB": "https://bsc.example"})

    with pytest.raises(TypeError):
        networks["BNB"] = None
