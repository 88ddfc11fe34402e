"""Main MCP server implementation for the Value Picker."""

import json
from collections.abc import Iterable
from typing import Any

from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from mcp.types import CallToolResult, Resource, TextContent, Tool
from pydantic import AnyUrl

from .config import Settings, get_settings
from .errors import ValuePickerError
from .logger import get_logger
from .services import ResourceRegistry, ToolRegistry
from .tools import PickValueTool

logger = get_logger(__name__)


def _error_result(body: dict[str, Any]) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=json.dumps(body))],
        isError=True,
    )


class ValuePickerMCPServer:
    """MCP Server exposing the pick_value tool and its view."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.server: Server = Server(
            name=self.settings.mcp_server_name,
            version=self.settings.mcp_server_version
        )

        # One registry pair per server instance
        self.tools = ToolRegistry()
        self.resources = ResourceRegistry()
        PickValueTool(self.settings).register(self.tools, self.resources)

        # Register handlers
        self._register_handlers()

        logger.info(
            f"Initialized {self.settings.mcp_server_name} v{self.settings.mcp_server_version}"
        )

    def _register_handlers(self) -> None:
        """Register MCP server handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            """List available tools."""
            tools = [descriptor.to_tool() for descriptor in self.tools.list_descriptors()]
            logger.debug(f"Listed {len(tools)} tools")
            return tools

        # Arguments are validated by the registry so errors carry our codes.
        @self.server.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: dict[str, Any]) -> CallToolResult:
            """Execute a tool with given arguments."""
            logger.info("Calling tool", extra={"tool": name, "arguments": arguments})

            try:
                result = await self.tools.invoke(name, arguments)
            except ValuePickerError as e:
                logger.warning("Tool call rejected", extra={"tool": name, "error": e.message})
                return _error_result(e.to_dict())
            except Exception as e:
                error_msg = f"Error executing tool {name}: {str(e)}"
                logger.exception("Tool call failed", extra={"tool": name})
                return _error_result({"error": error_msg})

            logger.success("Tool executed successfully", extra={"tool": name})
            return result.to_call_tool_result()

        @self.server.list_resources()
        async def list_resources() -> list[Resource]:
            """List available resources."""
            return [descriptor.to_resource() for descriptor in self.resources.list_descriptors()]

        @self.server.read_resource()
        async def read_resource(uri: AnyUrl) -> Iterable[ReadResourceContents]:
            """Resolve a resource; content is fetched fresh every time."""
            try:
                resolved = await self.resources.resolve(str(uri))
            except ValuePickerError as e:
                logger.warning("Resource read rejected", extra={"uri": str(uri), "error": e.message})
                raise McpError(e.to_error_data()) from e

            return [ReadResourceContents(content=resolved.text, mime_type=resolved.mime_type)]

    async def run(self) -> None:
        """Run the MCP server over stdio."""
        logger.info(f"Starting {self.settings.mcp_server_name} on stdio...")

        async with stdio_server() as (read_stream, write_stream):
            logger.info("MCP server started successfully")
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options()
            )
