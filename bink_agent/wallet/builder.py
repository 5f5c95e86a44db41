"""
Execution context factory: RPC URLs + seed phrase -> (NetworkConfig, Wallet).
"""

import logging
from typing import Mapping, Optional, Tuple

from bink_agent.wallet.networks import NetworkConfig, build_networks_config
from bink_agent.wallet.wallet import Wallet

logger = logging.getLogger(__name__)

# Well-known Hardhat/Foundry development mnemonic. Every derived account is
# public knowledge: development and tests only, never for funds.
DEFAULT_TEST_MNEMONIC = "test test test test test test test test test test test junk"


def resolve_mnemonic(mnemonic: Optional[str]) -> str:
    if isinstance(mnemonic, str) and mnemonic.strip():
        return mnemonic.strip()
    logger.warning(
        "⚠️ [Wallet] No mnemonic configured; using the public development mnemonic. "
        "Do not send funds to these addresses."
    )
    return DEFAULT_TEST_MNEMONIC


def build_context(
    rpc_urls: Mapping[str, Optional[str]],
    mnemonic: Optional[str] = None,
    derivation_index: int = 0,
) -> Tuple[NetworkConfig, Wallet]:
    """Build the network config and the single wallet shared by a run's plugins."""
    networks = build_networks_config(rpc_urls)
    wallet = Wallet(resolve_mnemonic(mnemonic), derivation_index, networks=networks)
    logger.info(
        f"✅ [Wallet] Context ready for {len(networks.available)}/{len(networks)} networks "
        f"(index {derivation_index})"
    )
    return networks, wallet
