"""Configuration management module."""

from .config_manager import ConfigManager, get_config_value, load_config

__all__ = ['ConfigManager', 'get_config_value', 'load_config']
