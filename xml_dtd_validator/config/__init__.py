"""Configuration management components."""

from .config_manager import ConfigManager, ValidatorSettings, get_config_manager, reset_config_manager
from .processing_defaults import ValidationDefaults

__all__ = ['ConfigManager', 'ValidatorSettings', 'ValidationDefaults', 'get_config_manager', 'reset_config_manager']
