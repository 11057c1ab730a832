"""Command-line entry point: ``switchboard-mcp`` / ``python -m switchboard``.

Examples:
- switchboard-mcp                      # stdio, for MCP clients that spawn it
- switchboard-mcp --transport http --port 3141
- switchboard-mcp --list-providers
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import TYPE_CHECKING, Any

from switchboard import __version__
from switchboard.config import load_settings
from switchboard.errors import ConfigurationError
from switchboard.registry import BackendRegistry
from switchboard.server import serve

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger("switchboard.cli")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="switchboard-mcp",
        description="MCP server routing text generation to configured AI providers.",
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        help="Transport to serve on (default: stdio, or SWITCHBOARD_TRANSPORT).",
    )
    parser.add_argument("--host", help="HTTP bind address (http transport only).")
    parser.add_argument("--port", type=int, help="HTTP port (http transport only).")
    parser.add_argument(
        "--log-level",
        help="Logging level: DEBUG, INFO, WARNING, ERROR (default: INFO).",
    )
    parser.add_argument(
        "--list-providers",
        action="store_true",
        help="Print the configured providers and exit.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Map CLI flags onto Settings fields, skipping the ones not given."""
    candidates = {
        "transport": args.transport,
        "http_host": args.host,
        "http_port": args.port,
        "log_level": args.log_level,
    }
    return {k: v for k, v in candidates.items() if v is not None}


def configure_logging(level: str) -> None:
    """Send logs to stderr; stdout is reserved for the stdio transport."""
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the server; return a process exit code."""
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(_overrides(args))
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        if e.hint:
            print(f"Hint: {e.hint}", file=sys.stderr)
        return 2

    configure_logging(settings.log_level)
    registry = BackendRegistry.from_settings(settings)

    if args.list_providers:
        available = registry.list_available()
        if not available:
            print("No AI providers configured.")
        for backend_id in available:
            default = registry.default_model_for(backend_id)
            print(f"{backend_id.value} (default model: {default})")
        return 0

    try:
        asyncio.run(serve(settings, registry))
    except KeyboardInterrupt:
        logger.info("Shutting down MCP server...")
    except Exception:
        logger.exception("Failed to start server")
        return 1
    return 0
