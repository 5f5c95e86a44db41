"""
HD wallet shared by every plugin of a run.

Addresses and signers are derived lazily per chain from one seed phrase:
EVM chains use ``m/44'/60'/0'/0/{index}`` and Solana uses
``m/44'/501'/{index}'/0'``.
"""

import logging
from typing import Dict

from eth_account import Account
from eth_account.hdaccount import seed_from_mnemonic
from solders.keypair import Keypair

from bink_agent.errors import NetworkUnavailableError
from bink_agent.wallet.networks import ChainType, NetworkConfig

logger = logging.getLogger(__name__)

Account.enable_unaudited_hdwallet_features()

EVM_DERIVATION_PATH = "m/44'/60'/0'/0/{index}"
SOLANA_DERIVATION_PATH = "m/44'/501'/{index}'/0'"


class Wallet:
    """Seed phrase + derivation index bound to a ``NetworkConfig``."""

    __slots__ = ("_seed_phrase", "_index", "_networks", "_accounts")

    def __init__(self, seed_phrase: str, index: int = 0, *, networks: NetworkConfig):
        if not isinstance(seed_phrase, str) or not seed_phrase.strip():
            raise ValueError("seed_phrase must be a non-empty string")
        if not isinstance(index, int) or index < 0:
            raise ValueError("index must be a non-negative integer")
        object.__setattr__(self, "_seed_phrase", " ".join(seed_phrase.split()))
        object.__setattr__(self, "_index", index)
        object.__setattr__(self, "_networks", networks)
        object.__setattr__(self, "_accounts", {})

    def __setattr__(self, name, value):
        raise AttributeError("Wallet is immutable")

    def __repr__(self) -> str:
        return f"Wallet(index={self._index}, networks={list(self._networks)})"

    @property
    def seed_phrase(self) -> str:
        return self._seed_phrase

    @property
    def index(self) -> int:
        return self._index

    @property
    def networks(self) -> NetworkConfig:
        return self._networks

    def _chain_type(self, symbol: str) -> ChainType:
        if symbol.upper() not in self._networks:
            raise NetworkUnavailableError(symbol.upper(), "chain is not configured")
        return self._networks[symbol].type

    def get_evm_account(self):
        """The ``eth_account`` LocalAccount shared by all EVM chains."""
        account = self._accounts.get(ChainType.EVM)
        if account is None:
            account = Account.from_mnemonic(
                self._seed_phrase,
                account_path=EVM_DERIVATION_PATH.format(index=self._index),
            )
            self._accounts[ChainType.EVM] = account
        return account

    def get_solana_keypair(self) -> Keypair:
        keypair = self._accounts.get(ChainType.SOLANA)
        if keypair is None:
            seed = seed_from_mnemonic(self._seed_phrase, "")
            keypair = Keypair.from_seed_and_derivation_path(
                seed, SOLANA_DERIVATION_PATH.format(index=self._index)
            )
            self._accounts[ChainType.SOLANA] = keypair
        return keypair

    def get_address(self, symbol: str) -> str:
        """Wallet address on ``symbol``; raises NetworkUnavailableError for unknown chains."""
        if self._chain_type(symbol) == ChainType.SOLANA:
            return str(self.get_solana_keypair().pubkey())
        return self.get_evm_account().address

    def get_addresses(self) -> Dict[str, str]:
        addresses = {}
        for symbol in self._networks:
            try:
                addresses[symbol] = self.get_address(symbol)
            except Exception as e:
                logger.warning(f"Could not derive {symbol} address: {e}")
        return addresses
