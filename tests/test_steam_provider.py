"""
Tests for the Steam store game info provider.
"""

import json
import logging
import os
import sys
import urllib.error
from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock, patch

import pytest

# Add the project root to the path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from gameinfo.config import AppConfig, SteamStoreConfig  # noqa: E402
from gameinfo.providers import (  # noqa: E402
    CatalogEntry,
    GameInfoRegistry,
    StorefrontTitle,
    SteamStoreProvider,
    register_steam_provider,
)
from gameinfo.providers.steam_provider import get_safe, safe_get_timestamp  # noqa: E402

SUCCESS_RESPONSE = {
    "220": {
        "success": True,
        "data": {
            "release_date": {"date": "1 Jan 2010"},
            "website": "http://x",
            "metacritic": {"score": 90},
        },
    }
}


def make_response(payload):
    """Build a mock urlopen response for a payload (dict or raw string)."""
    body = payload if isinstance(payload, str) else json.dumps(payload)
    mock_response = Mock()
    mock_response.read.return_value = body.encode("utf-8")
    mock_response.__enter__ = Mock(return_value=mock_response)
    mock_response.__exit__ = Mock(return_value=None)
    return mock_response


class TestHelpers:
    """Test cases for module helpers."""

    def test_get_safe_nested(self):
        """Test walking a nested path."""
        assert get_safe({"a": {"b": 1}}, ["a", "b"]) == 1

    def test_get_safe_missing_levels(self):
        """Test missing keys and non-dict levels fall back to the default."""
        assert get_safe({"a": {}}, ["a", "b"]) is None
        assert get_safe({"a": "text"}, ["a", "b"]) is None
        assert get_safe(None, ["a"], default="x") == "x"

    def test_safe_get_timestamp(self):
        """Test conversion to epoch milliseconds."""
        assert safe_get_timestamp(None) is None
        assert safe_get_timestamp(datetime(2020, 1, 1, tzinfo=timezone.utc)) == 1577836800000

    def test_safe_get_timestamp_keeps_milliseconds(self):
        """Test sub-second values are not rounded down by float error."""
        value = datetime(2021, 3, 4, 5, 6, 7, 123000, tzinfo=timezone.utc)
        assert safe_get_timestamp(value) == 1614834367123
        assert safe_get_timestamp(datetime(1970, 1, 1, 0, 0, 0, 1000, tzinfo=timezone.utc)) == 1


class TestSteamStoreProvider:
    """Test cases for SteamStoreProvider."""

    @pytest.fixture
    def no_titles(self):
        """Title source with nothing installed."""
        return AsyncMock(return_value=[])

    @pytest.fixture
    def provider(self, no_titles):
        """Create provider with no installed titles."""
        return SteamStoreProvider(all_games=no_titles)

    @pytest.fixture
    def app_entry(self):
        """Entry known only through its details."""
        return CatalogEntry(id="halflife2", details={"steamAppId": "220"})

    def test_provider_initialization(self, provider):
        """Test provider initialization."""
        assert provider.provider_id == "steam"
        assert provider.provider_name == "Steam Store"
        assert provider.keys == ["release_date", "last_updated", "website", "metacritic_score"]
        assert provider.config.request_timeout is None
        assert provider.logger.name == "gameinfo.steam"

    @pytest.mark.asyncio
    async def test_query_success(self, provider, app_entry):
        """Test mapping of a successful store response."""
        with patch("urllib.request.urlopen", return_value=make_response(SUCCESS_RESPONSE)) as mock_urlopen:
            result = await provider.query(app_entry)

        mock_urlopen.assert_called_once_with("http://store.steampowered.com/api/appdetails?appids=220")
        assert set(result) == {"release_date", "last_updated", "website", "metacritic_score"}
        assert result["release_date"].value == "1 Jan 2010"
        assert result["release_date"].type == "date"
        assert result["website"].value == "http://x"
        assert result["website"].type == "url"
        assert result["metacritic_score"].value == 90
        assert result["metacritic_score"].type is None
        assert result["last_updated"].value is None
        assert result["last_updated"].type == "date"

    @pytest.mark.asyncio
    async def test_query_logs_request_url(self, provider, app_entry, caplog):
        """Test the request URL is logged at debug level before sending."""
        with patch("urllib.request.urlopen", return_value=make_response(SUCCESS_RESPONSE)):
            with caplog.at_level(logging.DEBUG, logger="gameinfo.steam"):
                await provider.query(app_entry)

        debug_messages = [r.getMessage() for r in caplog.records if r.levelno == logging.DEBUG]
        assert any(
            "requesting game info from steam store" in message
            and "http://store.steampowered.com/api/appdetails?appids=220" in message
            for message in debug_messages
        )

    @pytest.mark.asyncio
    async def test_query_titles_are_translated(self, no_titles, app_entry):
        """Test field titles go through the translate function."""
        provider = SteamStoreProvider(translate=lambda text: f"T:{text}", all_games=no_titles)
        with patch("urllib.request.urlopen", return_value=make_response(SUCCESS_RESPONSE)):
            result = await provider.query(app_entry)

        assert result["release_date"].title == "T:Release Date"
        assert result["last_updated"].title == "T:Last Updated"
        assert result["website"].title == "T:Website"
        assert result["metacritic_score"].title == "T:Score (Metacritic)"

    @pytest.mark.asyncio
    async def test_query_installed_title_supplies_last_updated(self):
        """Test last_updated comes from the matched install."""
        updated = datetime(2020, 1, 1, tzinfo=timezone.utc)
        titles = AsyncMock(return_value=[StorefrontTitle(app_id="220", game_path="/games/X", last_updated=updated)])
        provider = SteamStoreProvider(all_games=titles)
        entry = CatalogEntry(id="hl2", path="/games/X", details={"steamAppId": "999"})

        with patch("urllib.request.urlopen", return_value=make_response(SUCCESS_RESPONSE)) as mock_urlopen:
            result = await provider.query(entry)

        assert mock_urlopen.call_args[0][0].endswith("appids=220")
        assert result["last_updated"].value == 1577836800000

    @pytest.mark.asyncio
    async def test_query_missing_data_fields(self, provider, app_entry):
        """Test absent fields map to None instead of failing."""
        payload = {"220": {"success": True, "data": {"release_date": {}}}}
        with patch("urllib.request.urlopen", return_value=make_response(payload)):
            result = await provider.query(app_entry)

        assert result["release_date"].value is None
        assert result["website"].value is None
        assert result["metacritic_score"].value is None

    @pytest.mark.asyncio
    async def test_query_unsuccessful_response(self, provider, app_entry, caplog):
        """Test success=false yields an empty mapping and a warning."""
        with patch("urllib.request.urlopen", return_value=make_response({"220": {"success": False}})):
            with caplog.at_level(logging.WARNING, logger="gameinfo.steam"):
                result = await provider.query(app_entry)

        assert result == {}
        assert "steam store request was unsuccessful" in caplog.text
        assert "halflife2" in caplog.text

    @pytest.mark.asyncio
    async def test_query_success_must_be_true(self, provider, app_entry):
        """Test a truthy but non-boolean success flag is rejected."""
        with patch("urllib.request.urlopen", return_value=make_response({"220": {"success": 1, "data": {}}})):
            result = await provider.query(app_entry)
        assert result == {}

    @pytest.mark.asyncio
    async def test_query_network_error(self, provider, app_entry, caplog):
        """Test transport failures are absorbed and logged with the entry id."""
        with patch("urllib.request.urlopen", side_effect=urllib.error.URLError("Network error")):
            with caplog.at_level(logging.WARNING, logger="gameinfo.steam"):
                result = await provider.query(app_entry)

        assert result == {}
        assert "failed to request info from steam" in caplog.text
        assert "halflife2" in caplog.text
        assert "Network error" in caplog.text

    @pytest.mark.asyncio
    async def test_query_missing_app_key(self, provider, app_entry, caplog):
        """Test a response without the requested app id is treated as malformed."""
        with patch("urllib.request.urlopen", return_value=make_response({"440": {"success": True}})):
            with caplog.at_level(logging.WARNING, logger="gameinfo.steam"):
                result = await provider.query(app_entry)

        assert result == {}
        assert "failed to request info from steam" in caplog.text

    @pytest.mark.asyncio
    async def test_query_invalid_json(self, provider, app_entry, caplog):
        """Test unparseable bodies are absorbed."""
        with patch("urllib.request.urlopen", return_value=make_response("<html>busy</html>")):
            with caplog.at_level(logging.WARNING, logger="gameinfo.steam"):
                result = await provider.query(app_entry)

        assert result == {}
        assert "failed to request info from steam" in caplog.text

    @pytest.mark.asyncio
    async def test_query_not_found_is_silent(self, provider, caplog):
        """Test unresolvable entries return {} without warnings or requests."""
        entry = CatalogEntry(id="unknown-game")
        with patch("urllib.request.urlopen") as mock_urlopen:
            with caplog.at_level(logging.DEBUG, logger="gameinfo.steam"):
                result = await provider.query(entry)

        assert result == {}
        mock_urlopen.assert_not_called()
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    @pytest.mark.asyncio
    async def test_query_resolver_failure_is_logged(self, caplog):
        """Test a failing title source is logged and absorbed."""
        provider = SteamStoreProvider(all_games=AsyncMock(side_effect=OSError("library unreadable")))
        entry = CatalogEntry(id="hl2", path="/games/X")

        with caplog.at_level(logging.WARNING, logger="gameinfo.steam"):
            result = await provider.query(entry)

        assert result == {}
        assert "library unreadable" in caplog.text

    @pytest.mark.asyncio
    async def test_query_is_idempotent(self, provider, app_entry):
        """Test identical inputs and responses give identical outputs."""
        with patch("urllib.request.urlopen", side_effect=lambda *a, **kw: make_response(SUCCESS_RESPONSE)):
            first = await provider.query(app_entry)
            second = await provider.query(app_entry)

        assert first == second

    @pytest.mark.asyncio
    async def test_query_uses_configured_timeout(self, no_titles, app_entry):
        """Test a configured timeout is passed through to urlopen."""
        provider = SteamStoreProvider(config=SteamStoreConfig(request_timeout=5.0), all_games=no_titles)
        with patch("urllib.request.urlopen", return_value=make_response(SUCCESS_RESPONSE)) as mock_urlopen:
            await provider.query(app_entry)

        assert mock_urlopen.call_args.kwargs == {"timeout": 5.0}

    def test_provider_info(self, provider):
        """Test get_provider_info method."""
        info = provider.get_provider_info()
        assert info["provider_id"] == "steam"
        assert info["keys"] == provider.keys


class TestRegisterSteamProvider:
    """Test cases for registering the provider with the host."""

    def test_register_uses_host_contract(self):
        """Test the registration values handed to the host."""
        registry = Mock()
        provider = SteamStoreProvider(all_games=AsyncMock(return_value=[]))

        assert register_steam_provider(registry, provider=provider) is True

        registry.register_game_info_provider.assert_called_once_with(
            "steam",
            50,
            604800000,
            ["release_date", "last_updated", "website", "metacritic_score"],
            provider.query,
        )

    @pytest.mark.asyncio
    async def test_registered_provider_is_queryable(self):
        """Test the registry reaches the provider's query function."""
        registry = GameInfoRegistry()
        config = AppConfig.create_for_testing()
        provider = SteamStoreProvider(config=config.steam_store, all_games=AsyncMock(return_value=[]))
        register_steam_provider(registry, provider=provider, config=config)

        entry = CatalogEntry(id="hl2", details={"steamAppId": "220"})
        with patch("urllib.request.urlopen", return_value=make_response(SUCCESS_RESPONSE)):
            result = await registry.query(entry)

        assert result["metacritic_score"].value == 90
