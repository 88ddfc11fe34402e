"""End-to-end tests through an in-memory MCP client session."""

import json

import pytest
from mcp.shared.exceptions import McpError
from mcp.shared.memory import create_connected_server_and_client_session
from pydantic import AnyUrl

from mcp_server_value_picker.protocol import UI_MIME_TYPE
from mcp_server_value_picker.server import ValuePickerMCPServer

VIEW_URI = "ui://pick-value/mcp-app.html"


@pytest.fixture
def mcp_server(settings):
    return ValuePickerMCPServer(settings)


@pytest.mark.asyncio
async def test_list_tools(mcp_server):
    """Test that pick_value is listed with its view link."""
    async with create_connected_server_and_client_session(mcp_server.server) as client:
        result = await client.list_tools()

    assert [tool.name for tool in result.tools] == ["pick_value"]
    tool = result.tools[0]
    assert tool.title == "Pick a Value"
    assert tool.inputSchema["properties"] == {}
    assert tool.meta["ui"]["resourceUri"] == VIEW_URI


@pytest.mark.asyncio
async def test_call_pick_value(mcp_server):
    """Test a successful pick_value call."""
    async with create_connected_server_and_client_session(mcp_server.server) as client:
        result = await client.call_tool("pick_value", {})

    assert not result.isError
    assert len(result.structuredContent["values"]) == 10
    assert result.content[0].text.endswith("Test values: Alpha, Beta, Gamma, Delta, Epsilon, Zeta, Eta, Theta, Iota, Kappa")


@pytest.mark.asyncio
async def test_call_pick_value_with_arguments_is_rejected(mcp_server):
    """Test that unexpected arguments come back as an error result."""
    async with create_connected_server_and_client_session(mcp_server.server) as client:
        result = await client.call_tool("pick_value", {"choice": "alpha"})

    assert result.isError
    body = json.loads(result.content[0].text)
    assert body["code"] == -32602
    assert "pick_value" in body["error"]


@pytest.mark.asyncio
async def test_call_unknown_tool(mcp_server):
    """Test calling a tool that does not exist."""
    async with create_connected_server_and_client_session(mcp_server.server) as client:
        result = await client.call_tool("missing", {})

    assert result.isError
    assert "Unknown tool" in json.loads(result.content[0].text)["error"]


@pytest.mark.asyncio
async def test_list_and_read_view_resource(mcp_server):
    """Test listing and reading the view resource."""
    async with create_connected_server_and_client_session(mcp_server.server) as client:
        listed = await client.list_resources()
        read = await client.read_resource(AnyUrl(VIEW_URI))

    assert [str(resource.uri) for resource in listed.resources] == [VIEW_URI]
    assert listed.resources[0].mimeType == UI_MIME_TYPE

    contents = read.contents[0]
    assert contents.mimeType == UI_MIME_TYPE
    assert "<html" in contents.text
    assert "{{SERVER_NAME}}" not in contents.text


@pytest.mark.asyncio
async def test_read_unknown_resource(mcp_server):
    """Test that unknown resources are a protocol error."""
    async with create_connected_server_and_client_session(mcp_server.server) as client:
        with pytest.raises(McpError) as exc_info:
            await client.read_resource(AnyUrl("ui://pick-value/missing.html"))

    assert exc_info.value.error.code == -32002
