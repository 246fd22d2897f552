"""
Centralized configuration management for the XML DTD validation system.

This module provides the ConfigManager class that serves as the single source
of truth for runtime settings, read from ``DTD_VALIDATOR_*`` environment
variables and optionally from a JSON or YAML settings file.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..exceptions import ConfigurationError
from .processing_defaults import ValidationDefaults


ENV_PREFIX = 'DTD_VALIDATOR_'
VALID_LOG_LEVELS = ('CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG')
VALID_EXECUTORS = ('thread', 'process')


def _env_bool(name: str, default: bool) -> bool:
    return os.environ.get(name, str(default)).lower() == 'true'


def _coerce_setting(name: str, value: Any, target: type) -> Any:
    """
    Convert a settings-file value to the type of its field.

    Booleans accept true/false in any case, integers accept numeric strings.

    Raises:
        ConfigurationError: If the value cannot represent the field's type
    """
    if target is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ('true', 'false'):
            return value.strip().lower() == 'true'
    elif target is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                pass
    elif isinstance(value, target):
        return value

    raise ConfigurationError(
        f"Setting '{name}' must be of type {target.__name__}, got {type(value).__name__} {value!r}"
    )


@dataclass
class ValidatorSettings:
    """Runtime settings with environment variable support."""
    log_level: str = ValidationDefaults.LOG_LEVEL
    max_workers: int = ValidationDefaults.MAX_WORKERS
    executor: str = ValidationDefaults.EXECUTOR
    use_parser_lines: bool = ValidationDefaults.USE_PARSER_LINES
    text_preview_length: int = ValidationDefaults.TEXT_PREVIEW_LENGTH
    huge_tree: bool = ValidationDefaults.HUGE_TREE

    @classmethod
    def from_environment(cls) -> 'ValidatorSettings':
        """Create settings from environment variables."""
        try:
            return cls(
                log_level=os.environ.get(f'{ENV_PREFIX}LOG_LEVEL', cls.log_level).upper(),
                max_workers=int(os.environ.get(f'{ENV_PREFIX}MAX_WORKERS', cls.max_workers)),
                executor=os.environ.get(f'{ENV_PREFIX}EXECUTOR', cls.executor).lower(),
                use_parser_lines=_env_bool(f'{ENV_PREFIX}USE_PARSER_LINES', cls.use_parser_lines),
                text_preview_length=int(os.environ.get(f'{ENV_PREFIX}TEXT_PREVIEW_LENGTH', cls.text_preview_length)),
                huge_tree=_env_bool(f'{ENV_PREFIX}HUGE_TREE', cls.huge_tree),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric value in {ENV_PREFIX}* environment: {e}")

    def updated(self, overrides: Dict[str, Any]) -> 'ValidatorSettings':
        """
        Copy of these settings with known keys replaced and coerced to their field types.

        Raises:
            ConfigurationError: For unknown keys or values of the wrong type
        """
        known = {f.name: f.type for f in fields(self)}
        unknown = sorted(set(overrides) - set(known))
        if unknown:
            raise ConfigurationError(f"Unknown setting(s): {', '.join(unknown)}")
        values = asdict(self)
        for name, value in overrides.items():
            values[name] = _coerce_setting(name, value, known[name])
        return ValidatorSettings(**values)


class ConfigManager:
    """
    Centralized configuration manager.

    Settings come from the environment at construction time; a settings file
    loaded afterwards overrides them key by key.
    """

    def __init__(self, settings_path: Optional[Union[str, Path]] = None):
        """
        Args:
            settings_path: Optional JSON/YAML settings file applied over the environment
        """
        self.logger = logging.getLogger(__name__)
        self.settings = ValidatorSettings.from_environment()
        self.settings_path: Optional[Path] = None

        if settings_path:
            self.load_settings_file(settings_path)

        self.logger.debug(f"ConfigManager initialized: {self.get_configuration_summary()}")

    def get_settings(self) -> ValidatorSettings:
        return self.settings

    def load_settings_file(self, settings_path: Union[str, Path]) -> ValidatorSettings:
        """
        Apply a JSON or YAML settings file over the current settings.

        Args:
            settings_path: Path to a ``.json``, ``.yaml`` or ``.yml`` file holding a flat mapping

        Returns:
            The updated settings

        Raises:
            ConfigurationError: If the file is missing, unreadable or holds unknown keys
        """
        full_path = Path(settings_path)
        if not full_path.exists():
            raise ConfigurationError(f"Settings file not found: {full_path}")

        try:
            with open(full_path, 'r', encoding='utf-8') as file:
                if full_path.suffix.lower() in ['.yaml', '.yml']:
                    import yaml
                    data = yaml.safe_load(file)
                elif full_path.suffix.lower() == '.json':
                    data = json.load(file)
                else:
                    raise ConfigurationError(f"Unsupported file format: {full_path.suffix}")
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Failed to read settings file {full_path}: {e}")

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Settings file {full_path} must contain a mapping")

        self.settings = self.settings.updated(data)
        self.settings_path = full_path
        self.logger.info(f"Loaded settings from {full_path}")
        return self.settings

    def validate_configuration(self) -> bool:
        """
        Validate all configuration settings.

        Returns:
            True if all settings are valid

        Raises:
            ConfigurationError: If any setting is invalid
        """
        errors = []

        if self.settings.log_level not in VALID_LOG_LEVELS:
            errors.append(f"Log level must be one of {', '.join(VALID_LOG_LEVELS)}")

        if self.settings.max_workers <= 0:
            errors.append("Max workers must be greater than 0")

        if self.settings.executor not in VALID_EXECUTORS:
            errors.append(f"Executor must be one of {', '.join(VALID_EXECUTORS)}")

        if self.settings.text_preview_length < 0:
            errors.append("Text preview length cannot be negative")

        if errors:
            raise ConfigurationError(f"Configuration validation failed: {'; '.join(errors)}")

        self.logger.debug("Configuration validation passed")
        return True

    def get_configuration_summary(self) -> Dict[str, Any]:
        """
        Get a summary of all configuration settings.

        Returns:
            Dictionary containing configuration summary
        """
        return {
            'settings': asdict(self.settings),
            'settings_file': str(self.settings_path) if self.settings_path else None,
        }

    def reload_configuration(self) -> None:
        """Reload settings from the environment, then re-apply the settings file if one was loaded."""
        self.settings = ValidatorSettings.from_environment()
        if self.settings_path:
            self.load_settings_file(self.settings_path)

        self.logger.info("Configuration reloaded from environment variables")


# Global configuration manager instance
_global_config_manager: Optional[ConfigManager] = None


def get_config_manager(settings_path: Optional[Union[str, Path]] = None) -> ConfigManager:
    """
    Get the global configuration manager instance.

    Args:
        settings_path: Settings file to apply. Only used on first call.

    Returns:
        Global ConfigManager instance
    """
    global _global_config_manager

    if _global_config_manager is None:
        _global_config_manager = ConfigManager(settings_path)

    return _global_config_manager


def reset_config_manager() -> None:
    """Reset the global configuration manager instance."""
    global _global_config_manager
    _global_config_manager = None
