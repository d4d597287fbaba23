"""
Configuration service implementation for Recent Icons.
Holds the user-scoped settings, including the pipe-delimited favorites list.
"""

from __future__ import annotations
from typing import Dict, Any, Optional
from pathlib import Path
import json
import os
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .interfaces import IConfigService, ILogger
from ..core.registry import DEFAULT_TASK_KEY_PREFIX


class RecentsConfig(BaseModel):
    """Settings of the recents panel."""
    model_config = ConfigDict(validate_assignment=True)

    favorites: str = ""
    task_key_prefix: str = DEFAULT_TASK_KEY_PREFIX
    # Cache capacity is 1/memory_fraction of the available memory
    memory_fraction: int = Field(default=4, ge=1)


class AppConfig(BaseModel):
    """Main application configuration."""
    model_config = ConfigDict(validate_assignment=True)

    recents: RecentsConfig = Field(default_factory=RecentsConfig)


def default_config_dir() -> Path:
    """Get the default configuration directory."""
    if os.name == 'nt':
        return Path.home() / "AppData" / "Local" / "RecentIcons"
    return Path.home() / ".config" / "recent-icons"


class ConfigService(IConfigService):
    """JSON file backed configuration service."""

    def __init__(self, logger: ILogger, config_dir: Optional[Path] = None):
        self._logger = logger
        self._config_dir = config_dir or default_config_dir()
        self._config_file = self._config_dir / "config.json"
        self._config = AppConfig()
        self._ensure_config_dir()
        self._load_config_from_file()

    @property
    def config_file(self) -> Path:
        return self._config_file

    def _ensure_config_dir(self) -> None:
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self._logger.error(f"Failed to create config directory: {self._config_dir}", exception=e)

    def _load_config_from_file(self) -> None:
        if not self._config_file.exists():
            self._logger.info("No config file found, using defaults")
            return

        try:
            with open(self._config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            self._config = AppConfig.model_validate(data)
            self._logger.info(f"Loaded configuration from: {self._config_file}")
        except (OSError, ValueError, ValidationError) as e:
            self._logger.error(f"Failed to load config from {self._config_file}", exception=e)
            self._config = AppConfig()

    def load_config(self) -> Dict[str, Any]:
        """Return the configuration as a plain dictionary."""
        return self._config.model_dump()

    def save_config(self, config: Dict[str, Any]) -> bool:
        """Validate, adopt and write a configuration dictionary."""
        try:
            validated = AppConfig.model_validate(config)
        except ValidationError as e:
            self._logger.error("Rejected invalid configuration", exception=e)
            return False

        self._config = validated
        return self._write()

    def _write(self) -> bool:
        try:
            with open(self._config_file, 'w', encoding='utf-8') as f:
                json.dump(self._config.model_dump(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            self._logger.error(f"Failed to save config to {self._config_file}", exception=e)
            return False

        self._logger.debug(f"Saved configuration to: {self._config_file}")
        return True

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a specific setting value using dot notation."""
        value: Any = self._config
        for part in key.split('.'):
            if not hasattr(value, part):
                return default
            value = getattr(value, part)
        return value

    def set_setting(self, key: str, value: Any) -> bool:
        """Set a setting value using dot notation and persist it."""
        parts = key.split('.')
        if len(parts) < 2:
            self._logger.warning(f"Invalid setting key format: {key}")
            return False

        obj: Any = self._config
        for part in parts[:-1]:
            if not hasattr(obj, part):
                self._logger.warning(f"Setting path not found: {key}")
                return False
            obj = getattr(obj, part)

        final_key = parts[-1]
        if not hasattr(obj, final_key):
            self._logger.warning(f"Setting key not found: {key}")
            return False

        try:
            setattr(obj, final_key, value)
        except ValidationError as e:
            self._logger.error(f"Invalid value for setting '{key}'", exception=e)
            return False

        self._logger.debug(f"Set setting '{key}' = {value!r}")
        return self._write()

    def get_recents_config(self) -> RecentsConfig:
        return self._config.recents

    def export_config(self, export_path: Path) -> bool:
        """Export configuration to a JSON or YAML file."""
        config_dict = self.load_config()
        try:
            with open(export_path, 'w', encoding='utf-8') as f:
                if export_path.suffix.lower() in ('.yaml', '.yml'):
                    yaml.safe_dump(config_dict, f, default_flow_style=False)
                else:
                    json.dump(config_dict, f, indent=2, ensure_ascii=False)
        except OSError as e:
            self._logger.error(f"Failed to export config to {export_path}", exception=e)
            return False

        self._logger.info(f"Exported configuration to: {export_path}")
        return True

    def import_config(self, import_path: Path) -> bool:
        """Import configuration from a JSON or YAML file."""
        if not import_path.exists():
            self._logger.error(f"Config file not found: {import_path}")
            return False

        try:
            with open(import_path, 'r', encoding='utf-8') as f:
                if import_path.suffix.lower() in ('.yaml', '.yml'):
                    config_dict = yaml.safe_load(f) or {}
                else:
                    config_dict = json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            self._logger.error(f"Failed to import config from {import_path}", exception=e)
            return False

        success = self.save_config(config_dict)
        if success:
            self._logger.info(f"Imported configuration from: {import_path}")
        return success
