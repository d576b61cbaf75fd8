"""
Game info providers.

This package provides the provider registry and the Steam store provider,
which enriches catalog entries with release date, last update, website and
Metacritic score.
"""

from .base import CatalogEntry, GameInfoProvider, InfoField, StorefrontTitle
from .registry import GameInfoRegistry, ProviderRegistration
from .resolution import NotFound, ResolvedIdentifier, resolve_local_info
from .steam_provider import SteamStoreProvider, register_steam_provider

__all__ = [
    "CatalogEntry",
    "GameInfoProvider",
    "GameInfoRegistry",
    "InfoField",
    "NotFound",
    "ProviderRegistration",
    "ResolvedIdentifier",
    "StorefrontTitle",
    "SteamStoreProvider",
    "register_steam_provider",
    "resolve_local_info",
]
