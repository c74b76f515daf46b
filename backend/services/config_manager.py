"""
Configuration Manager - Handle backend settings persistence
"""

from __future__ import annotations

import copy
import json
import os
import tempfile
from pathlib import Path
from typing import Any

# Environment variables that fill an empty apiKey for each provider
_ENV_KEYS = {
    "gateway": "LOVABLE_API_KEY",
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
}


def resolve_config_dir() -> Path:
    """Config directory: $SIX_EYES_CONFIG_DIR, then ~/.six_eyes, then the temp dir"""
    config_dir = os.environ.get("SIX_EYES_CONFIG_DIR") or os.path.expanduser("~/.six_eyes")

    config_path = Path(config_dir)
    try:
        config_path.mkdir(parents=True, exist_ok=True)
        return config_path
    except OSError as e:
        print(f"[ConfigManager] Warning: Cannot write to {config_dir}: {e}")

    tmp_dir = Path(tempfile.gettempdir()) / "six_eyes"
    tmp_dir.mkdir(parents=True, exist_ok=True)
    print(f"[ConfigManager] Using temporary config path: {tmp_dir}")
    return tmp_dir


class ConfigManager:
    """Manage configuration persistence"""

    _instance = None

    def __init__(self, config_dir: Path | None = None):
        self.config_dir = config_dir or resolve_config_dir()
        self._config_file = self.config_dir / "config.json"
        self._config = self._load_config()

    @classmethod
    def get_instance(cls) -> "ConfigManager":
        """Get singleton instance"""
        if cls._instance is None:
            cls._instance = ConfigManager()
        return cls._instance

    @classmethod
    def reset_instance(cls):
        """Drop the singleton so the next get_instance() re-reads the environment"""
        cls._instance = None

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from file, layered over the defaults"""
        config = self._default_config()
        if not self._config_file.exists():
            return config

        try:
            with open(self._config_file) as f:
                stored = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            print(f"[ConfigManager] Error loading config: {e}")
            return config

        for key, value in stored.items():
            if isinstance(value, dict) and isinstance(config.get(key), dict):
                config[key] = {**config[key], **value}
            else:
                config[key] = value
        return config

    def _default_config(self) -> dict[str, Any]:
        """Get default configuration"""
        return {
            "provider": "gateway",
            "gateway": {
                "endpoint": "https://ai.gateway.lovable.dev/v1/chat/completions",
                "apiKey": "",
                "model": "google/gemini-2.5-flash",
            },
            "openai": {
                "endpoint": "https://api.openai.com/v1/chat/completions",
                "apiKey": "",
                "model": "gpt-4o-mini",
            },
            "gemini": {"apiKey": "", "model": "gemini-2.5-flash"},
            "maxRetries": 2,
            "timeoutSeconds": 60,
            "history": {"maxEntries": 20},
            "server": {"host": "0.0.0.0", "port": 8000},
        }

    def _apply_env(self, config: dict[str, Any]) -> dict[str, Any]:
        """Fill empty API keys and the provider from the environment"""
        for provider, env_name in _ENV_KEYS.items():
            block = config.setdefault(provider, {})
            if not block.get("apiKey") and os.environ.get(env_name):
                block["apiKey"] = os.environ[env_name]

        if os.environ.get("SIX_EYES_PROVIDER"):
            config["provider"] = os.environ["SIX_EYES_PROVIDER"]
        return config

    def get_config(self) -> dict[str, Any]:
        """Get current configuration with environment overrides applied"""
        # Reload config from file to ensure we have the latest
        self._config = self._load_config()
        return self._apply_env(copy.deepcopy(self._config))

    def get_stored_config(self) -> dict[str, Any]:
        """Get configuration as stored on disk, without environment overrides"""
        self._config = self._load_config()
        return copy.deepcopy(self._config)

    def save_config(self, config: dict[str, Any]):
        """Save configuration to file"""
        # Merge with existing config
        self._config.update(config)

        self._config_file.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(self._config_file, "w") as f:
                json.dump(self._config, f, indent=2)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}")

    def get(self, key: str, default=None):
        """Get specific config value"""
        return self._config.get(key, default)
