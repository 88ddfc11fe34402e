"""Tests for the tool and resource registries."""

from unittest.mock import AsyncMock

import pytest
from mcp.types import TextContent
from pydantic import ValidationError

from mcp_server_value_picker.errors import (
    DuplicateResourceError,
    DuplicateToolError,
    InvalidArgumentsError,
    InvalidResultError,
    UnknownResourceError,
    UnknownToolError,
)
from mcp_server_value_picker.models import InvocationResult, ToolDescriptor
from mcp_server_value_picker.protocol import UI_MIME_TYPE
from mcp_server_value_picker.services import ResourceRegistry, ToolRegistry


def _descriptor(name="echo", **kwargs):
    return ToolDescriptor(name=name, description="Test tool", **kwargs)


def _result(text="ok", structured=None):
    return InvocationResult(content=[TextContent(type="text", text=text)], structured_content=structured)


@pytest.mark.asyncio
async def test_tool_registry_register_and_invoke():
    """Test invoking a registered tool."""
    registry = ToolRegistry()
    handler = AsyncMock(return_value=_result("hello"))
    registry.register("echo", _descriptor(), handler)

    result = await registry.invoke("echo", {})

    assert result.text == "hello"
    assert result.structured_content is None
    handler.assert_awaited_once_with({})
    assert "echo" in registry
    assert [d.name for d in registry.list_descriptors()] == ["echo"]


def test_tool_registry_duplicate_name():
    """Test that a name can only be registered once."""
    registry = ToolRegistry()
    registry.register("echo", _descriptor(), AsyncMock())

    with pytest.raises(DuplicateToolError) as exc_info:
        registry.register("echo", _descriptor(), AsyncMock())

    assert exc_info.value.tool == "echo"
    assert len(registry) == 1


@pytest.mark.parametrize(
    "arguments",
    [{"unexpected": 1}, {"a": "b", "c": "d"}, ["not", "an", "object"], "text"],
)
@pytest.mark.asyncio
async def test_tool_registry_rejects_arguments_without_calling_handler(arguments):
    """Test that schema mismatches never reach the handler."""
    registry = ToolRegistry()
    handler = AsyncMock(return_value=_result())
    registry.register("echo", _descriptor(), handler)

    with pytest.raises(InvalidArgumentsError) as exc_info:
        await registry.invoke("echo", arguments)

    handler.assert_not_awaited()
    error_data = exc_info.value.to_error_data()
    assert error_data.code == -32602
    assert "echo" in error_data.message


@pytest.mark.asyncio
async def test_tool_registry_validates_against_declared_schema():
    """Test that arguments matching a non-empty schema are passed through."""
    registry = ToolRegistry()
    handler = AsyncMock(return_value=_result())
    schema = {
        "type": "object",
        "properties": {"count": {"type": "integer"}},
        "required": ["count"],
        "additionalProperties": False,
    }
    registry.register("echo", _descriptor(input_schema=schema), handler)

    await registry.invoke("echo", {"count": 3})
    handler.assert_awaited_once_with({"count": 3})

    with pytest.raises(InvalidArgumentsError):
        await registry.invoke("echo", {"count": "three"})
    with pytest.raises(InvalidArgumentsError):
        await registry.invoke("echo", {})


@pytest.mark.asyncio
async def test_tool_registry_none_arguments_are_empty():
    """Test that missing arguments are treated as {}."""
    registry = ToolRegistry()
    handler = AsyncMock(return_value=_result())
    registry.register("echo", _descriptor(), handler)

    await registry.invoke("echo", None)

    handler.assert_awaited_once_with({})


@pytest.mark.asyncio
async def test_tool_registry_unknown_tool():
    """Test invoking a tool that was never registered."""
    registry = ToolRegistry()

    with pytest.raises(UnknownToolError):
        await registry.invoke("missing", {})


@pytest.mark.asyncio
async def test_tool_registry_validates_output():
    """Test output schema validation of handler results."""
    output_schema = {
        "type": "object",
        "properties": {"values": {"type": "array"}},
        "required": ["values"],
    }
    registry = ToolRegistry()
    registry.register("good", _descriptor("good", output_schema=output_schema), AsyncMock(return_value=_result(structured={"values": []})))
    registry.register("bad", _descriptor("bad", output_schema=output_schema), AsyncMock(return_value=_result(structured={"values": "nope"})))
    registry.register("bare", _descriptor("bare", output_schema=output_schema), AsyncMock(return_value=_result()))

    result = await registry.invoke("good", {})
    assert result.structured_content == {"values": []}

    with pytest.raises(InvalidResultError):
        await registry.invoke("bad", {})
    with pytest.raises(InvalidResultError):
        await registry.invoke("bare", {})


def test_invocation_result_requires_model_channel():
    """Test that a result always carries model-visible content."""
    with pytest.raises(ValidationError):
        InvocationResult(content=[], structured_content={"values": []})

    result = _result("text only")
    wire = result.to_call_tool_result()
    assert wire.structuredContent is None
    assert wire.isError is False


@pytest.mark.asyncio
async def test_resource_registry_resolves_on_every_request():
    """Test that the fetcher runs on each resolution (no caching)."""
    registry = ResourceRegistry()
    fetcher = AsyncMock(side_effect=["<p>first</p>", "<p>second</p>"])
    descriptor = registry.register("ui://test/view.html", UI_MIME_TYPE, fetcher, name="Test view")

    assert descriptor.is_interactive_view
    assert descriptor.name == "Test view"

    first = await registry.resolve("ui://test/view.html")
    second = await registry.resolve("ui://test/view.html")

    assert first.text == "<p>first</p>"
    assert second.text == "<p>second</p>"
    assert first.mime_type == UI_MIME_TYPE
    assert fetcher.await_count == 2


@pytest.mark.asyncio
async def test_resource_registry_unknown_uri():
    """Test resolving an unregistered URI."""
    registry = ResourceRegistry()

    with pytest.raises(UnknownResourceError) as exc_info:
        await registry.resolve("ui://missing/view.html")

    assert exc_info.value.to_error_data().code == -32002
    with pytest.raises(UnknownResourceError):
        registry.get("ui://missing/view.html")


def test_resource_registry_plain_data_resource():
    """Test that only the mcp-app profile marks an interactive view."""
    registry = ResourceRegistry()
    registry.register("file:///data.json", "application/json", AsyncMock(return_value="{}"))

    assert not registry.get("file:///data.json").is_interactive_view

    with pytest.raises(DuplicateResourceError):
        registry.register("file:///data.json", "application/json", AsyncMock())
