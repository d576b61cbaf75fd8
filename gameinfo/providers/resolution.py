"""
Resolve a catalog entry to its Steam app id.

Resolution never raises for an unknown game. It returns either a
ResolvedIdentifier or a NotFound outcome and callers branch on the type.
Errors raised by the collaborators (path normalization, title enumeration)
are not caught here.
"""

import os
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, Union

from .base import CatalogEntry, StorefrontTitle

STEAM_APP_ID_KEY = "steamAppId"

NormalizeFunc = Callable[[str], str]
NormalizeFuncProvider = Callable[[str], Awaitable[NormalizeFunc]]
TitleSource = Callable[[], Awaitable[List[StorefrontTitle]]]


@dataclass(frozen=True)
class ResolvedIdentifier:
    """Steam app id for an entry, with the install's last update if known."""

    app_id: str
    last_updated: Optional[datetime] = None


@dataclass(frozen=True)
class NotFound:
    """The entry could not be matched to any Steam app id."""

    entry_id: str
    reason: str = "not found"


Resolution = Union[ResolvedIdentifier, NotFound]


def _normalize_path(path: str) -> str:
    normalized = os.path.normcase(os.path.normpath(path))
    return normalized.rstrip("/\\") or normalized


async def default_normalize_func(path: str) -> NormalizeFunc:  # noqa: U100
    """Return a normalizer that folds case and separators the way the OS does."""
    return _normalize_path


def _from_details(entry: CatalogEntry) -> Resolution:
    app_id = (entry.details or {}).get(STEAM_APP_ID_KEY)
    if app_id is None or app_id == "":
        return NotFound(entry.id, f"no {STEAM_APP_ID_KEY} in details")
    return ResolvedIdentifier(app_id=str(app_id), last_updated=None)


async def resolve_local_info(
    entry: CatalogEntry,
    get_normalize_func: NormalizeFuncProvider,
    all_games: TitleSource,
) -> Resolution:
    """Find the Steam app id for a catalog entry.

    Entries without an install path can only be resolved through
    ``details["steamAppId"]``. Installed entries are first matched against
    the locally installed Steam titles by normalized path; a match wins over
    the details value and carries the install's last update time.
    """
    if entry.path is None:
        return _from_details(entry)

    normalize = await get_normalize_func(entry.path)
    titles = await all_games()

    search_path = normalize(entry.path)
    match = next((title for title in titles if normalize(title.game_path) == search_path), None)
    if match is None:
        return _from_details(entry)

    return ResolvedIdentifier(app_id=str(match.app_id), last_updated=match.last_updated)
