"""
Configuration management for the gameinfo package.
"""

from dataclasses import dataclass, field
from typing import Optional

DEFAULT_APPDETAILS_URL = "http://store.steampowered.com/api/appdetails?appids={app_id}"


@dataclass
class SteamStoreConfig:
    """Configuration for the Steam store lookup."""

    appdetails_url: str = DEFAULT_APPDETAILS_URL

    # None leaves the socket default in place
    request_timeout: Optional[float] = None

    def build_url(self, app_id: str) -> str:
        """Interpolate an app id into the appdetails endpoint."""
        return self.appdetails_url.format(app_id=app_id)


@dataclass
class SteamLibraryConfig:
    """Configuration for locating installed Steam titles."""

    steam_path: Optional[str] = None


@dataclass
class ProviderConfig:
    """Registration values handed to the host."""

    name: str = "steam"
    priority: int = 50
    expire_ms: int = 604800000  # 7 days, advisory to the host cache


@dataclass
class AppConfig:
    """Main application configuration container."""

    steam_store: SteamStoreConfig = field(default_factory=SteamStoreConfig)
    steam_library: SteamLibraryConfig = field(default_factory=SteamLibraryConfig)
    provider: ProviderConfig = field(default_factory=ProviderConfig)

    # Global settings
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def create_default(cls) -> "AppConfig":
        """Create a default configuration instance."""
        return cls()

    @classmethod
    def create_for_testing(cls) -> "AppConfig":
        """Create a configuration suitable for testing."""
        config = cls()
        config.steam_store.request_timeout = 1.0
        config.debug = True
        config.log_level = "DEBUG"
        return config
