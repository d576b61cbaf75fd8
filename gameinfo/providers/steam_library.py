"""
Enumerate games installed through the local Steam client.

Reads ``libraryfolders.vdf`` to find every Steam library, then each
``appmanifest_*.acf`` inside it to build StorefrontTitle records.
"""

import asyncio
import glob
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import vdf

from .base import StorefrontTitle


def _get_ci(mapping: Dict[str, Any], key: str, default: Any = None) -> Any:
    """Case-insensitive dict lookup; Steam is inconsistent about key case."""
    lowered = key.lower()
    for k, v in mapping.items():
        if k.lower() == lowered:
            return v
    return default


def _parse_timestamp(raw: Any) -> Optional[datetime]:
    try:
        seconds = int(raw)
    except (TypeError, ValueError):
        return None
    if seconds <= 0:
        return None
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


class SteamLibrary:
    """Reads installed Steam titles from disk."""

    def __init__(self, steam_path: Optional[str] = None):
        """Initialize with an explicit Steam root, or probe the usual locations."""
        self.logger = logging.getLogger("gameinfo.library")
        self.steam_path = steam_path or self._find_steam_path()

    def _get_default_steam_paths(self) -> List[str]:
        if sys.platform.startswith("win"):
            program_files = os.environ.get("ProgramFiles(x86)", r"C:\Program Files (x86)")
            return [os.path.join(program_files, "Steam")]
        if sys.platform == "darwin":
            return [os.path.expanduser("~/Library/Application Support/Steam")]
        return [
            os.path.expanduser("~/.steam/steam"),
            os.path.expanduser("~/.local/share/Steam"),
            os.path.expanduser("~/.var/app/com.valvesoftware.Steam/.local/share/Steam"),
        ]

    def _find_steam_path(self) -> Optional[str]:
        for candidate in self._get_default_steam_paths():
            if os.path.isdir(candidate):
                return candidate
        return None

    def library_folders(self) -> List[str]:
        """Return every Steam library root, starting with the Steam install itself."""
        if not self.steam_path or not os.path.isdir(self.steam_path):
            return []

        folders = [self.steam_path]
        config_path = os.path.join(self.steam_path, "steamapps", "libraryfolders.vdf")
        if not os.path.isfile(config_path):
            return folders

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = vdf.load(f)
        except (OSError, SyntaxError, ValueError) as e:
            self.logger.warning("Could not read %s: %s", config_path, e)
            return folders

        entries = _get_ci(data, "libraryfolders", {})
        if not isinstance(entries, dict):
            self.logger.warning("Unexpected layout in %s", config_path)
            return folders

        for key, value in entries.items():
            if not key.isdigit():
                continue
            # Newer clients store a block per library, older ones just the path
            path = _get_ci(value, "path") if isinstance(value, dict) else value
            if not isinstance(path, str) or not path:
                continue
            if os.path.normpath(path) not in {os.path.normpath(p) for p in folders}:
                folders.append(path)

        return folders

    def _read_manifest(self, library: str, manifest_path: str) -> Optional[StorefrontTitle]:
        try:
            with open(manifest_path, "r", encoding="utf-8") as f:
                data = vdf.load(f)
        except (OSError, SyntaxError, ValueError) as e:
            self.logger.warning("Skipping unreadable manifest %s: %s", manifest_path, e)
            return None

        state = _get_ci(data, "AppState", {})
        if not isinstance(state, dict):
            self.logger.warning("Skipping manifest without an AppState block: %s", manifest_path)
            return None

        app_id = _get_ci(state, "appid")
        install_dir = _get_ci(state, "installdir")
        if not isinstance(app_id, str) or not app_id or not isinstance(install_dir, str) or not install_dir:
            self.logger.debug("Manifest %s lacks appid or installdir", manifest_path)
            return None

        return StorefrontTitle(
            app_id=app_id,
            game_path=os.path.join(library, "steamapps", "common", install_dir),
            name=_get_ci(state, "name"),
            last_updated=_parse_timestamp(_get_ci(state, "LastUpdated")),
        )

    def all_games_sync(self) -> List[StorefrontTitle]:
        """Scan all libraries and return installed titles."""
        titles = []
        for library in self.library_folders():
            pattern = os.path.join(library, "steamapps", "appmanifest_*.acf")
            for manifest_path in sorted(glob.glob(pattern)):
                title = self._read_manifest(library, manifest_path)
                if title is not None:
                    titles.append(title)

        self.logger.debug("Found %d installed Steam titles", len(titles))
        return titles

    async def all_games(self) -> List[StorefrontTitle]:
        """Async wrapper for library scanning."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.all_games_sync)
