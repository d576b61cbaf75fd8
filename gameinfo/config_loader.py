"""
Configuration loader for gameinfo.

Supports loading configuration from YAML files with environment variable overrides.
"""

import logging
import os
from typing import Optional

import yaml

from .config import AppConfig, ProviderConfig, SteamLibraryConfig, SteamStoreConfig

logger = logging.getLogger("gameinfo.config")


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load configuration from file with environment variable overrides.

    Args:
        config_path: Path to YAML config file. Defaults to "gameinfo.yaml"

    Returns:
        AppConfig instance with loaded settings
    """
    config = AppConfig.create_default()

    config_path = config_path or "gameinfo.yaml"
    if os.path.exists(config_path):
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f)

            if config_data:
                apply_config_data(config, config_data)

        except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
            logger.warning("Could not load config from %s: %s", config_path, e)
            config = AppConfig.create_default()

    apply_env_overrides(config)

    return config


def _section(config_data: dict, name: str) -> dict:
    section = config_data[name] or {}
    if not isinstance(section, dict):
        raise ValueError(f"section '{name}' must be a mapping, got {type(section).__name__}")
    return section


def apply_config_data(config: AppConfig, config_data: dict) -> None:
    """Apply a parsed YAML mapping onto a configuration.

    Raises ValueError when the document or one of its sections is not a mapping.
    """
    if not isinstance(config_data, dict):
        raise ValueError(f"top level must be a mapping, got {type(config_data).__name__}")

    defaults_store = SteamStoreConfig()
    defaults_provider = ProviderConfig()

    if "steam_store" in config_data:
        store_data = _section(config_data, "steam_store")
        timeout = store_data.get("request_timeout")
        config.steam_store = SteamStoreConfig(
            appdetails_url=store_data.get("appdetails_url", defaults_store.appdetails_url),
            request_timeout=float(timeout) if timeout is not None else None,
        )

    if "steam_library" in config_data:
        library_data = _section(config_data, "steam_library")
        config.steam_library = SteamLibraryConfig(steam_path=library_data.get("steam_path"))

    if "provider" in config_data:
        provider_data = _section(config_data, "provider")
        config.provider = ProviderConfig(
            name=provider_data.get("name", defaults_provider.name),
            priority=int(provider_data.get("priority", defaults_provider.priority)),
            expire_ms=int(provider_data.get("expire_ms", defaults_provider.expire_ms)),
        )

    config.debug = bool(config_data.get("debug", False))
    config.log_level = str(config_data.get("log_level", "INFO")).upper()


def apply_env_overrides(config: AppConfig) -> None:
    """Apply environment variable overrides to configuration."""
    if os.getenv("STEAM_PATH"):
        config.steam_library.steam_path = os.getenv("STEAM_PATH")

    if os.getenv("STEAM_REQUEST_TIMEOUT"):
        try:
            config.steam_store.request_timeout = float(os.getenv("STEAM_REQUEST_TIMEOUT"))
        except ValueError:
            logger.warning("Ignoring invalid STEAM_REQUEST_TIMEOUT: %s", os.getenv("STEAM_REQUEST_TIMEOUT"))

    # Global settings
    if os.getenv("DEBUG"):
        config.debug = os.getenv("DEBUG").lower() in ("true", "1", "yes")

    if os.getenv("LOG_LEVEL"):
        config.log_level = os.getenv("LOG_LEVEL").upper()
