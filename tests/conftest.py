"""Pytest configuration and fixtures."""

import asyncio
from typing import Any

import pytest
from mcp.types import ErrorData

from mcp_server_value_picker.config import Settings
from mcp_server_value_picker.protocol import INITIALIZE, TOOL_RESULT
from mcp_server_value_picker.services import ResourceRegistry, ToolRegistry
from mcp_server_value_picker.tools import PickValueTool
from mcp_server_value_picker.view import JsonRpcChannel, ViewSession


class ScriptedHost:
    """Host double that talks to a view session over a JsonRpcChannel.

    View requests are answered from ``replies`` (a result dict or an
    ErrorData); a method can be held back until its gate is set.
    """

    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []
        self.replies: dict[str, dict[str, Any] | ErrorData] = {
            INITIALIZE: {
                "protocolVersion": "2026-01-26",
                "hostInfo": {"name": "scripted-host", "version": "0.0.1"},
                "hostCapabilities": {"updateModelContext": {}, "message": {}},
            },
        }
        self.gates: dict[str, asyncio.Event] = {}
        self.channel = JsonRpcChannel(self._deliver)
        self._tasks: set[asyncio.Task] = set()
        self._next_id = 1000

    def reply(self, method: str, result: dict[str, Any] | None = None, error: ErrorData | None = None) -> None:
        self.replies[method] = error if error is not None else (result or {})

    def hold(self, method: str) -> asyncio.Event:
        gate = asyncio.Event()
        self.gates[method] = gate
        return gate

    async def _deliver(self, message: dict[str, Any]) -> None:
        self.sent.append(message)
        if "method" in message and "id" in message:
            gate = self.gates.get(message["method"])
            task = asyncio.create_task(self._answer(message, gate))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _answer(self, message: dict[str, Any], gate: asyncio.Event | None) -> None:
        if gate is not None:
            await gate.wait()

        reply = self.replies.get(message["method"], {})
        if isinstance(reply, ErrorData):
            frame = {"jsonrpc": "2.0", "id": message["id"], "error": reply.model_dump(exclude_none=True)}
        else:
            frame = {"jsonrpc": "2.0", "id": message["id"], "result": reply}
        await self.channel.receive(frame)

    async def notify(self, method: str, params: dict[str, Any] | None = None) -> None:
        await self.channel.receive({"jsonrpc": "2.0", "method": method, "params": params or {}})

    async def request(self, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Send a host request to the view and return the view's reply frame."""
        request_id = self._next_id
        self._next_id += 1
        await self.channel.receive({"jsonrpc": "2.0", "id": request_id, "method": method, "params": params or {}})
        return next(m for m in self.sent if m.get("id") == request_id and "method" not in m)

    def methods(self) -> list[str]:
        return [m["method"] for m in self.sent if "method" in m]

    def requests(self, method: str) -> list[dict[str, Any]]:
        return [m for m in self.sent if m.get("method") == method and "id" in m]


@pytest.fixture
def settings():
    """Settings isolated from the environment's .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def pick_tool(settings):
    return PickValueTool(settings)


@pytest.fixture
def registries(pick_tool):
    tools = ToolRegistry()
    resources = ResourceRegistry()
    pick_tool.register(tools, resources)
    return tools, resources


@pytest.fixture
async def tool_result(pick_tool):
    """pick_value result as a host would forward it to the view."""
    result = await pick_tool.pick_value({})
    return result.to_call_tool_result().model_dump(by_alias=True, mode="json", exclude_none=True)


@pytest.fixture
def host():
    return ScriptedHost()


@pytest.fixture
def host_factory():
    return ScriptedHost


@pytest.fixture
async def session(host, settings):
    """A session that completed the handshake."""
    return await ViewSession.open(host.channel, settings)


@pytest.fixture
async def ready_session(session, host, tool_result):
    """A session with the catalog rendered."""
    await host.notify(TOOL_RESULT, tool_result)
    return session
