"""Configuration parsing and environment-backed settings."""

from .card_config import (
    AxisDefinition,
    CardConfig,
    get_stub_config,
    load_card_config,
    parse_card_config,
)
from .errors import ConfigurationError
from .runtime import JsonConfig, env_float, env_str, load_json
from .settings import HomeAssistantSettings, get_home_assistant_settings

__all__ = [
    "AxisDefinition",
    "CardConfig",
    "ConfigurationError",
    "HomeAssistantSettings",
    "JsonConfig",
    "env_float",
    "env_str",
    "get_home_assistant_settings",
    "get_stub_config",
    "load_card_config",
    "load_json",
    "parse_card_config",
]
