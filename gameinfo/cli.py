#!/usr/bin/env python3
"""Command-line interface entry points for the gameinfo package."""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from .config import AppConfig
from .config_loader import load_config
from .providers import CatalogEntry, GameInfoRegistry, register_steam_provider


def _setup_logging(config: AppConfig) -> None:
    # stderr only; stdout carries JSON output and the MCP protocol
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for gameinfo-lookup."""
    parser = argparse.ArgumentParser(description="Look up Steam store info for a game")
    parser.add_argument("--app-id", help="Steam app id")
    parser.add_argument("--path", help="Install directory of the game")
    parser.add_argument("--id", dest="entry_id", help="Catalog id used in log messages")
    parser.add_argument("--config", help="Path to YAML config file (default: gameinfo.yaml)")
    parser.add_argument("--log-level", help="Override the configured log level")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


async def run_lookup(entry: CatalogEntry, config: AppConfig) -> dict:
    """Query the registered providers and return a JSON-friendly mapping."""
    registry = GameInfoRegistry()
    register_steam_provider(registry, config=config)
    fields = await registry.query(entry)
    return {key: info.to_dict() for key, info in fields.items()}


def lookup_main(argv: Optional[List[str]] = None) -> int:
    """Entry point for gameinfo-lookup command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.app_id and not args.path:
        parser.error("one of --app-id or --path is required")

    config = load_config(args.config)
    if args.debug:
        config.debug = True
        config.log_level = "DEBUG"
    elif args.log_level:
        config.log_level = args.log_level.upper()
    _setup_logging(config)

    details = {"steamAppId": args.app_id} if args.app_id else {}
    entry = CatalogEntry(id=args.entry_id or args.app_id or args.path, path=args.path, details=details)

    result = asyncio.run(run_lookup(entry, config))
    print(json.dumps(result, indent=2))
    return 0


def mcp_main(argv: Optional[List[str]] = None) -> int:
    """Entry point for gameinfo-mcp command."""
    from .mcp_server import serve_mcp

    parser = argparse.ArgumentParser(description="Serve Steam game info over MCP (stdio)")
    parser.add_argument("--config", help="Path to YAML config file (default: gameinfo.yaml)")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    _setup_logging(config)
    asyncio.run(serve_mcp(config))
    return 0


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "mcp":
        sys.exit(mcp_main(sys.argv[2:]))
    else:
        sys.exit(lookup_main())
