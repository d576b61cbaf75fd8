"""
Steam store game info provider.

Resolves a catalog entry to a Steam app id, fetches the store's appdetails
record and maps it to release date, last update, website and Metacritic
score fields. Every failure ends in an empty mapping.
"""

import asyncio
import json
import urllib.request
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..config import AppConfig, SteamStoreConfig
from .base import CatalogEntry, GameInfoProvider, InfoField
from .resolution import (
    NormalizeFuncProvider,
    NotFound,
    TitleSource,
    default_normalize_func,
    resolve_local_info,
)
from .steam_library import SteamLibrary

STEAM_INFO_KEYS = ["release_date", "last_updated", "website", "metacritic_score"]
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _identity(text: str) -> str:
    return text


def get_safe(data: Any, path: Sequence[str], default: Any = None) -> Any:
    """Walk nested dicts, returning default if any level is missing."""
    current = data
    for key in path:
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current


def safe_get_timestamp(value: Optional[datetime]) -> Optional[int]:
    """Milliseconds since the epoch, or None."""
    if value is None:
        return None
    if value.tzinfo is None:
        # naive values are local time, as datetime.timestamp() assumes
        value = value.astimezone()
    return (value - EPOCH) // timedelta(milliseconds=1)


class SteamStoreProvider(GameInfoProvider):
    """Game info provider backed by the Steam store web API."""

    def __init__(
        self,
        config: Optional[SteamStoreConfig] = None,
        translate: Optional[Callable[[str], str]] = None,
        get_normalize_func: Optional[NormalizeFuncProvider] = None,
        all_games: Optional[TitleSource] = None,
        steam_path: Optional[str] = None,
    ):
        """Initialize Steam store provider.

        Collaborators default to OS path normalization, the local Steam
        library scan and an identity translation.
        """
        super().__init__("steam", "Steam Store")
        self.config = config or SteamStoreConfig()
        self.translate = translate or _identity
        self._get_normalize_func = get_normalize_func or default_normalize_func
        if all_games is None:
            all_games = SteamLibrary(steam_path).all_games
        self._all_games = all_games

    @property
    def keys(self) -> List[str]:
        """Field keys this provider can produce."""
        return list(STEAM_INFO_KEYS)

    def _send_request_sync(self, url: str) -> str:
        """Perform the HTTP GET for thread pool execution."""
        if self.config.request_timeout is None:
            response = urllib.request.urlopen(url)
        else:
            response = urllib.request.urlopen(url, timeout=self.config.request_timeout)

        with response:
            return response.read().decode("utf-8")

    async def _send_request(self, url: str) -> str:
        """Async wrapper for the store request."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._send_request_sync, url)

    def _build_fields(self, data: Any, last_updated: Optional[datetime]) -> Dict[str, InfoField]:
        return {
            "release_date": InfoField(
                title=self.translate("Release Date"),
                value=get_safe(data, ["release_date", "date"]),
                type="date",
            ),
            "last_updated": InfoField(
                title=self.translate("Last Updated"),
                value=safe_get_timestamp(last_updated),
                type="date",
            ),
            "website": InfoField(
                title=self.translate("Website"),
                value=get_safe(data, ["website"]),
                type="url",
            ),
            "metacritic_score": InfoField(
                title=self.translate("Score (Metacritic)"),
                value=get_safe(data, ["metacritic", "score"]),
            ),
        }

    async def query(self, entry: CatalogEntry) -> Dict[str, InfoField]:
        """Fetch Steam store info for an entry; returns {} on any failure."""
        try:
            resolution = await resolve_local_info(entry, self._get_normalize_func, self._all_games)
            if isinstance(resolution, NotFound):
                self.logger.debug("No Steam app id for %s: %s", entry.id, resolution.reason)
                return {}

            url = self.config.build_url(resolution.app_id)
            self.logger.debug("requesting game info from steam store: %s", url)
            response = await self._send_request(url)

            details = json.loads(response)[resolution.app_id]
            if details.get("success") is not True:
                self.logger.warning("steam store request was unsuccessful (gameId=%s): %s", entry.id, response)
                return {}

            return self._build_fields(details.get("data"), resolution.last_updated)

        except Exception as e:
            self.logger.warning("failed to request info from steam (gameId=%s): %s", entry.id, e)
            return {}


def register_steam_provider(
    registry,
    provider: Optional[SteamStoreProvider] = None,
    config: Optional[AppConfig] = None,
    translate: Optional[Callable[[str], str]] = None,
) -> bool:
    """Register the Steam store provider with a game info registry."""
    config = config or AppConfig.create_default()
    if provider is None:
        provider = SteamStoreProvider(
            config=config.steam_store,
            translate=translate,
            steam_path=config.steam_library.steam_path,
        )

    registry.register_game_info_provider(
        config.provider.name,
        config.provider.priority,
        config.provider.expire_ms,
        provider.keys,
        provider.query,
    )
    return True
