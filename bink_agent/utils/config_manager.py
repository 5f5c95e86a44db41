import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)


class ConfigManager:
    """Configuration management class for user settings like RPC URLs and API keys"""

    def __init__(self, config_file: Union[str, Path, None] = None):
        self.config_file = Path(config_file or os.getenv("BINK_CONFIG_FILE", "config.json"))
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration file, falling back to an empty default"""
        default_config: Dict[str, Any] = {"credentials": {}, "llm": {}}
        if not self.config_file.exists():
            return default_config
        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                loaded = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading config {self.config_file}: {e}")
            return default_config
        if not isinstance(loaded, dict):
            logger.error(f"Config {self.config_file} must contain a JSON object")
            return default_config
        return loaded

    def _save_config(self, config: Dict[str, Any]) -> None:
        try:
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(config, f, indent=2)
        except OSError as e:
            logger.error(f"Error saving config: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration item by dotted key"""
        value = self.config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """Set configuration item by dotted key and persist it"""
        keys = key.split(".")
        config = self.config
        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]
        config[keys[-1]] = value
        self._save_config(self.config)

    def get_llm_setting(self, name: str) -> Optional[str]:
        return self.get(f"llm.{name}")
