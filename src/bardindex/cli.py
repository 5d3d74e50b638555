"""CLI entry point for Bardindex.

Subcommands::

    bardindex serve [--host H] [--port P] [--reload]
    bardindex works
    bardindex speeches PLAY_ID QUERY [--page N] [--per-page N]
    bardindex collections
    bardindex dump COLLECTION
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from bardindex.config.settings import Settings
from bardindex.core.index_client import PlayIndexClient
from bardindex.observability.logging import setup_logging
from bardindex.typesense.exceptions import SearchIndexError


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = _load_settings(args.config)
    if args.log_level:
        settings.observability.log_level = args.log_level

    if args.command == "serve":
        _serve(settings, args)
        return

    setup_logging(settings.observability)
    try:
        output = asyncio.run(_run_query(settings, args))
    except (SearchIndexError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(output)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bardindex",
        description="Bardindex — Shakespeare play data from Typesense",
    )
    parser.add_argument("--config", "-c", type=str, default=None, help="Path to YAML configuration file")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument("--version", action="version", version=f"Bardindex {_get_version()}")

    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", type=str, default=None, help="Server bind address (overrides config)")
    serve.add_argument("--port", "-p", type=int, default=None, help="Server port (overrides config)")
    serve.add_argument("--reload", action="store_true", help="Enable auto-reload for development")

    sub.add_parser("works", help="List plays")

    speeches = sub.add_parser("speeches", help="Search speeches within a play")
    speeches.add_argument("play_id")
    speeches.add_argument("query")
    speeches.add_argument("--page", type=int, default=1)
    speeches.add_argument("--per-page", type=int, default=250)

    sub.add_parser("collections", help="List collections with field schemas and document counts")

    dump = sub.add_parser("dump", help="Print the first page of raw documents in a collection")
    dump.add_argument("collection")

    return parser


def _load_settings(config: str | None) -> Settings:
    if config:
        config_path = Path(config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        return Settings.from_yaml(config_path)
    return Settings()


async def _run_query(settings: Settings, args: argparse.Namespace) -> str:
    client = PlayIndexClient.from_settings(settings)
    commands: dict[str, Callable[[], Awaitable[Any]]] = {
        "works": client.list_works,
        "speeches": lambda: client.search_speeches(args.play_id, args.query, args.page, args.per_page),
        "collections": client.list_collections,
        "dump": lambda: client.dump_collection(args.collection),
    }
    try:
        result = await commands[args.command]()
    finally:
        await client.close()

    if isinstance(result, str):
        return result
    if isinstance(result, list):
        return json.dumps([item.model_dump() for item in result], indent=2, ensure_ascii=False)
    return result.model_dump_json(indent=2)


def _serve(settings: Settings, args: argparse.Namespace) -> None:
    import uvicorn

    from bardindex.api.app import CONFIG_FILE_ENV

    if args.config:
        os.environ[CONFIG_FILE_ENV] = str(Path(args.config).resolve())
    host = args.host or settings.server.host
    port = args.port or settings.server.port
    uvicorn.run(
        "bardindex.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=args.reload,
        log_level=settings.observability.log_level.lower(),
    )


def _get_version() -> str:
    from bardindex import __version__

    return __version__


if __name__ == "__main__":
    main()
