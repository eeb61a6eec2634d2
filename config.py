# file: config.py
"""Configuration management for persistent user settings."""
from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_FORMAT = "fpa-markdown"


@dataclass
class AppConfig:
    """Application configuration settings"""
    # Last used paths
    last_sql_file: Optional[str] = None
    last_model_file: Optional[str] = None
    last_output_file: Optional[str] = None

    # Export options
    output_format: str = DEFAULT_OUTPUT_FORMAT

    # Diagnostics
    log_level: str = "INFO"

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        """Create config from dictionary"""
        # Filter out any unknown keys to handle version changes
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_data = {k: v for k, v in data.items() if k in known_fields}
        return cls(**filtered_data)


class ConfigManager:
    """Manages loading and saving application configuration"""

    def __init__(self, config_name: str = "function_point_helper.json", config_dir: Optional[Path] = None):
        self.config_path = (Path(config_dir) if config_dir else self._get_config_dir()) / config_name
        self._config: Optional[AppConfig] = None

    def _get_config_dir(self) -> Path:
        """Get the appropriate config directory for the platform"""
        if sys.platform == "win32":
            # Windows: %APPDATA%
            config_dir = Path(os.environ.get("APPDATA", "~")).expanduser()
        elif sys.platform == "darwin":
            # macOS: ~/Library/Application Support
            config_dir = Path("~/Library/Application Support").expanduser()
        else:
            # Linux/Unix: $XDG_CONFIG_HOME or ~/.config
            config_dir = Path(os.environ.get("XDG_CONFIG_HOME", "~/.config")).expanduser()

        return config_dir / "FunctionPointHelper"

    def load_config(self) -> AppConfig:
        """Load configuration from disk, or create default if not found"""
        if self._config is not None:
            return self._config

        try:
            if self.config_path.exists():
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                self._config = AppConfig.from_dict(data)
            else:
                self._config = AppConfig()
        except (json.JSONDecodeError, AttributeError, KeyError, TypeError, OSError) as exc:
            logger.warning("Ignoring unreadable config %s: %s", self.config_path, exc)
            self._config = AppConfig()

        return self._config

    def save_config(self, config: AppConfig) -> None:
        """Save configuration to disk"""
        self._config = config
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)
        except OSError as exc:
            logger.warning("Could not save config to %s: %s", self.config_path, exc)

    def update_sql_file(self, path: str) -> None:
        """Update the last analysed SQL file"""
        config = self.load_config()
        config.last_sql_file = str(path)
        self.save_config(config)

    def update_model_file(self, path: str) -> None:
        """Update the last loaded or saved model document"""
        config = self.load_config()
        config.last_model_file = str(path)
        self.save_config(config)

    def update_output(self, path: Optional[str], format_value: str) -> None:
        """Update the last output file and export format"""
        config = self.load_config()
        if path:
            config.last_output_file = str(path)
        config.output_format = format_value
        self.save_config(config)


# Global config manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get the global config manager instance"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
