"""Entry point: pick a transport and run the server.

Transport selection:
  --stdio   Force stdio mode
  --http    Force Streamable HTTP mode
  (default) TRANSPORT setting, else stdio when stdin is piped and HTTP when
            it is a terminal

In stdio mode stdout is reserved for JSON-RPC frames, so logging is set up
quiet before anything else runs.
"""

import argparse
import asyncio
import sys
from collections.abc import Sequence

from .config import Settings, get_settings
from .logger import setup_logging


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Value Picker MCP Apps test server")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--stdio", action="store_true", help="Serve over stdio")
    group.add_argument("--http", action="store_true", help="Serve over Streamable HTTP")
    return parser.parse_args(argv)


def resolve_transport(args: argparse.Namespace, settings: Settings, stdin_is_tty: bool) -> str:
    """Return ``"stdio"`` or ``"http"``."""
    if args.stdio:
        return "stdio"
    if args.http:
        return "http"
    if settings.transport != "auto":
        return settings.transport
    # Clients that spawn the server hand it a pipe, not a terminal.
    return "http" if stdin_is_tty else "stdio"


def run(argv: Sequence[str] | None = None) -> None:
    """Console script entry point."""
    args = parse_args(argv)
    settings = get_settings()
    transport = resolve_transport(args, settings, sys.stdin.isatty())

    setup_logging(quiet=transport == "stdio", settings=settings)

    if transport == "stdio":
        from .server import ValuePickerMCPServer

        asyncio.run(ValuePickerMCPServer(settings).run())
    else:
        from .server_http import ValuePickerHTTPServer

        ValuePickerHTTPServer(settings).run()


if __name__ == "__main__":
    run()
