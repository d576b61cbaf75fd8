"""
Base classes for the game info provider system.

This module provides the data structures exchanged between the host catalog
and game info providers, plus the abstract base class providers implement.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class CatalogEntry:
    """A locally detected game, as supplied by the host catalog."""

    id: str
    path: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class StorefrontTitle:
    """A title installed through the storefront client."""

    app_id: str
    game_path: str
    name: Optional[str] = None
    last_updated: Optional[datetime] = None


@dataclass
class InfoField:
    """A single display field produced by a provider."""

    title: str
    value: Any = None
    type: Optional[str] = None  # "date" | "url"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dict."""
        result = {"title": self.title, "value": self.value}
        if self.type is not None:
            result["type"] = self.type
        return result


class GameInfoProvider(ABC):
    """Base class for game info providers."""

    def __init__(self, provider_id: str, provider_name: str):
        """Initialize provider with ID and name."""
        self.provider_id = provider_id
        self.provider_name = provider_name
        self.logger = logging.getLogger(f"gameinfo.{provider_id}")

    @property
    @abstractmethod
    def keys(self) -> List[str]:
        """Field keys this provider can produce."""

    @abstractmethod
    async def query(self, entry: CatalogEntry) -> Dict[str, InfoField]:  # noqa: U100
        """Look up info fields for an entry. Override in subclasses."""
        return {}

    def get_provider_info(self) -> Dict[str, Any]:
        """Get provider information for debugging."""
        return {
            "provider_id": self.provider_id,
            "provider_name": self.provider_name,
            "keys": list(self.keys),
        }
