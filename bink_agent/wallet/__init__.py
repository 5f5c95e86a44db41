"""
Wallet and network context.

This module provides:
- NetworkConfig: read-only per-chain descriptors built from RPC URLs
- Wallet: HD wallet derived from one seed phrase, shared by every plugin of a run
- build_context: builds both, falling back to a public development mnemonic
"""

from .builder import DEFAULT_TEST_MNEMONIC, build_context, resolve_mnemonic
from .networks import (
    KNOWN_CHAINS,
    ChainType,
    NetworkConfig,
    NetworkDescriptor,
    build_networks_config,
)
from .wallet import Wallet

__all__ = [
    "DEFAULT_TEST_MNEMONIC",
    "build_context",
    "resolve_mnemonic",
    "KNOWN_CHAINS",
    "ChainType",
    "NetworkConfig",
    "NetworkDescriptor",
    "build_networks_config",
    "Wallet",
]
