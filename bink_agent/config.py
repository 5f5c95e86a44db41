from __future__ import annotations

import os
from typing import Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from bink_agent.utils.config_manager import ConfigManager


class BinkCredentials(BaseModel):
    """RPC endpoints and wallet seed used to build a run's execution context."""

    bnb_rpc_url: Optional[str] = Field(default=None, alias="bnbRpcUrl")
    eth_rpc_url: Optional[str] = Field(default=None, alias="ethRpcUrl")
    sol_rpc_url: Optional[str] = Field(default=None, alias="solRpcUrl")
    mnemonic: Optional[str] = Field(default=None, repr=False)

    model_config = {"populate_by_name": True}

    @property
    def rpc_urls(self) -> Dict[str, Optional[str]]:
        return {
            "BNB": self.bnb_rpc_url,
            "ETH": self.eth_rpc_url,
            "SOL": self.sol_rpc_url,
        }

    @classmethod
    def load(cls, config_manager: Optional[ConfigManager] = None) -> "BinkCredentials":
        """Load credentials from config.json with .env / environment overrides."""
        load_dotenv()
        manager = config_manager or ConfigManager()
        raw_config = manager.get("credentials", {}) or {}

        return cls(
            bnb_rpc_url=os.getenv("BNB_RPC_URL", raw_config.get("bnbRpcUrl")),
            eth_rpc_url=os.getenv("ETH_RPC_URL", raw_config.get("ethRpcUrl")),
            sol_rpc_url=os.getenv("SOL_RPC_URL", raw_config.get("solRpcUrl")),
            mnemonic=os.getenv("WALLET_MNEMONIC", raw_config.get("mnemonic")),
        )
