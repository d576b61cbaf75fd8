"""
MCP Server for Steam game info.

This module provides an MCP server that exposes the game info lookup
as a tool, using the registered providers.
"""

import json
from typing import Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from mcp.types import INVALID_PARAMS, EmbeddedResource, ErrorData, ImageContent, TextContent, Tool
from pydantic import BaseModel, ValidationError

from .config import AppConfig
from .providers import CatalogEntry, GameInfoRegistry, register_steam_provider

TOOL_NAME = "steam_game_info"


class GameInfoInput(BaseModel):
    """Input for the game info tool."""

    app_id: Optional[str] = None
    path: Optional[str] = None
    entry_id: Optional[str] = None

    def to_entry(self) -> CatalogEntry:
        """Build the catalog entry the providers expect."""
        details = {"steamAppId": self.app_id} if self.app_id else {}
        entry_id = self.entry_id or self.app_id or self.path or "unknown"
        return CatalogEntry(id=entry_id, path=self.path, details=details)


class GameInfoResult(BaseModel):
    """Result from a game info lookup."""

    entry_id: str
    fields: dict


class GameInfoServer:
    """MCP server for game info."""

    def __init__(self, registry: Optional[GameInfoRegistry] = None, config: Optional[AppConfig] = None):
        """Initialize the MCP server."""
        self.server = Server("steam-gameinfo-server")
        if registry is None:
            registry = GameInfoRegistry()
            register_steam_provider(registry, config=config)
        self.registry = registry

    async def lookup(self, input_data: GameInfoInput) -> GameInfoResult:
        """Look up game info for the given input."""
        entry = input_data.to_entry()
        fields = await self.registry.query(entry)
        return GameInfoResult(entry_id=entry.id, fields={key: info.to_dict() for key, info in fields.items()})

    def list_tools(self) -> list[Tool]:
        """Tools exposed by this server."""
        return [
            Tool(
                name=TOOL_NAME,
                description="Look up release date, last update, website and Metacritic score from the Steam store",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "app_id": {"type": "string", "description": "The Steam app id"},
                        "path": {"type": "string", "description": "Local install directory (optional)"},
                        "entry_id": {"type": "string", "description": "Catalog id used in logs (optional)"},
                    },
                },
            )
        ]

    async def call_tool(self, name: str, arguments: dict) -> list[TextContent | ImageContent | EmbeddedResource]:
        """Dispatch a tool call."""
        if name != TOOL_NAME:
            raise McpError(ErrorData(code=INVALID_PARAMS, message=f"Unknown tool: {name}"))

        try:
            input_data = GameInfoInput(**(arguments or {}))
        except ValidationError as e:
            raise McpError(ErrorData(code=INVALID_PARAMS, message=f"Invalid arguments: {e}"))

        if not input_data.app_id and not input_data.path:
            raise McpError(ErrorData(code=INVALID_PARAMS, message="Either app_id or path is required"))

        result = await self.lookup(input_data)
        return [TextContent(type="text", text=json.dumps(result.model_dump(), indent=2))]

    async def serve(self) -> None:
        """Run the MCP server."""

        @self.server.list_tools()
        async def handle_list_tools() -> list[Tool]:
            """List available tools."""
            return self.list_tools()

        @self.server.call_tool()
        async def handle_call_tool(name: str, arguments: dict) -> list[TextContent | ImageContent | EmbeddedResource]:
            """Handle tool calls."""
            return await self.call_tool(name, arguments)

        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(read_stream, write_stream, self.server.create_initialization_options())


async def serve_mcp(config: Optional[AppConfig] = None):
    """Entry point for running the MCP server."""
    await GameInfoServer(config=config).serve()
