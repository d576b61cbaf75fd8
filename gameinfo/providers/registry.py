"""
Registry for game info providers.

Providers register a query function together with a priority and the keys
they can produce. Querying an entry runs every provider in priority order
and merges the returned fields.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .base import CatalogEntry, InfoField

QueryFunc = Callable[[CatalogEntry], Awaitable[Dict[str, InfoField]]]


@dataclass
class ProviderRegistration:
    """A registered game info provider."""

    name: str
    priority: int
    expire_ms: int  # advisory only, nothing is cached here
    keys: List[str] = field(default_factory=list)
    query: Optional[QueryFunc] = None


class GameInfoRegistry:
    """Manages game info providers and merges their results."""

    def __init__(self):
        """Initialize an empty registry."""
        self._providers: Dict[str, ProviderRegistration] = {}
        self.logger = logging.getLogger("gameinfo.registry")

    def register_game_info_provider(
        self,
        name: str,
        priority: int,
        expire_ms: int,
        keys: List[str],
        query: QueryFunc,
    ) -> None:
        """Register a provider; a second registration under the same name replaces the first."""
        self._providers[name] = ProviderRegistration(
            name=name,
            priority=priority,
            expire_ms=expire_ms,
            keys=list(keys),
            query=query,
        )
        self.logger.info("Registered game info provider: %s (priority %d)", name, priority)

    def unregister(self, name: str) -> bool:
        """Remove a provider."""
        if name in self._providers:
            del self._providers[name]
            return True
        return False

    def get_provider(self, name: str) -> Optional[ProviderRegistration]:
        """Look up a registration by name."""
        return self._providers.get(name)

    def providers_by_priority(self) -> List[ProviderRegistration]:
        """Registrations ordered by ascending priority, then name."""
        return sorted(self._providers.values(), key=lambda p: (p.priority, p.name))

    async def query(self, entry: CatalogEntry) -> Dict[str, InfoField]:
        """Query all providers for an entry.

        The first provider (in priority order) to supply a key wins. A
        provider that raises is logged and skipped.
        """
        combined: Dict[str, InfoField] = {}
        for provider in self.providers_by_priority():
            try:
                result = await provider.query(entry)
            except Exception as e:
                self.logger.error("Provider %s failed for %s: %s", provider.name, entry.id, e)
                continue

            for key, info in (result or {}).items():
                combined.setdefault(key, info)

        return combined

    def get_registry_status(self) -> Dict[str, Any]:
        """Get registry status."""
        return {
            "total_providers": len(self._providers),
            "providers": {
                p.name: {"priority": p.priority, "expire_ms": p.expire_ms, "keys": list(p.keys)}
                for p in self.providers_by_priority()
            },
        }
