"""Streamable HTTP server for the Value Picker."""

import contextlib
import errno
import socket
from collections.abc import AsyncIterator

import uvicorn
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.types import Receive, Scope, Send
from uvicorn.config import LOG_LEVELS

from .config import Settings, get_settings
from .logger import get_logger
from .server import ValuePickerMCPServer

logger = get_logger(__name__)


def find_available_port(preferred: int, host: str = "0.0.0.0") -> int:
    """Return ``preferred`` if it can be bound, otherwise an OS-assigned port."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind((host, preferred))
            return preferred
        except OSError as e:
            if e.errno != errno.EADDRINUSE:
                raise
            logger.warning(f"Port {preferred} is in use, falling back to an ephemeral port")

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind((host, 0))
        return sock.getsockname()[1]


class _MCPEndpoint:
    """ASGI endpoint handing requests to the session manager."""

    def __init__(self, session_manager: StreamableHTTPSessionManager):
        self.session_manager = session_manager

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.session_manager.handle_request(scope, receive, send)


class ValuePickerHTTPServer:
    """HTTP Server for the Value Picker MCP integration.

    Stateless: every request gets a fresh, ephemeral MCP session.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.mcp = ValuePickerMCPServer(self.settings)

    def create_app(self) -> Starlette:
        """Create Starlette application with MCP transport."""
        session_manager = StreamableHTTPSessionManager(
            app=self.mcp.server,
            json_response=self.settings.http_json_response,
            stateless=True,
        )

        async def health_check(request: Request) -> JSONResponse:
            """Health check endpoint."""
            return JSONResponse({
                "status": "healthy",
                "server": self.settings.mcp_server_name,
                "version": self.settings.mcp_server_version
            })

        @contextlib.asynccontextmanager
        async def lifespan(app: Starlette) -> AsyncIterator[None]:
            async with session_manager.run():
                logger.info("Streamable HTTP session manager started")
                yield
            logger.info("Streamable HTTP session manager stopped")

        routes = [
            Route("/health", health_check, methods=["GET"]),
            Route("/mcp", _MCPEndpoint(session_manager)),
        ]
        app = Starlette(routes=routes, lifespan=lifespan)

        if self.settings.http_cors_enabled:
            app.add_middleware(
                CORSMiddleware,
                allow_origins=["*"],
                allow_methods=["*"],
                allow_headers=["*"],
                expose_headers=["Mcp-Session-Id"],
            )

        return app

    def _uvicorn_log_level(self) -> str:
        # uvicorn knows no SUCCESS level
        level = self.settings.log_level.lower()
        return level if level in LOG_LEVELS else "info"

    def run(self) -> None:
        """Run the HTTP server."""
        port = find_available_port(self.settings.http_port, self.settings.http_host)
        app = self.create_app()
        logger.info(
            f"{self.settings.mcp_server_name} listening on http://localhost:{port}/mcp"
        )
        uvicorn.run(
            app,
            host=self.settings.http_host,
            port=port,
            log_level=self._uvicorn_log_level(),
        )
