"""Error taxonomy for the Value Picker MCP Server.

Every error carries a JSON-RPC error code so it can be reported over the
transport as a structured protocol error instead of crashing the session.
"""

from typing import Any

from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, ErrorData

# MCP reserves -32002 for "resource not found".
RESOURCE_NOT_FOUND = -32002


class ValuePickerError(Exception):
    """Base class for all protocol-level errors."""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str, data: Any | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.data = data

    def to_error_data(self) -> ErrorData:
        """Convert to the wire representation of a JSON-RPC error."""
        return ErrorData(code=self.code, message=self.message, data=self.data)

    def to_dict(self) -> dict[str, Any]:
        """Body used for error tool results."""
        body: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.data is not None:
            body["data"] = self.data
        return body


class InvalidArgumentsError(ValuePickerError):
    """Tool arguments do not satisfy the declared input schema."""

    code = INVALID_PARAMS

    def __init__(self, tool: str, reason: str) -> None:
        super().__init__(f"Invalid arguments for tool {tool}: {reason}", data={"tool": tool})
        self.tool = tool
        self.reason = reason


class UnknownToolError(ValuePickerError):
    """No tool is registered under the requested name."""

    code = INVALID_PARAMS

    def __init__(self, tool: str) -> None:
        super().__init__(f"Unknown tool: {tool}", data={"tool": tool})
        self.tool = tool


class InvalidResultError(ValuePickerError):
    """A tool handler returned data violating its declared output schema."""

    def __init__(self, tool: str, reason: str) -> None:
        super().__init__(f"Invalid result from tool {tool}: {reason}", data={"tool": tool})
        self.tool = tool
        self.reason = reason


class DuplicateToolError(ValuePickerError):
    """A tool with the same name is already registered."""

    def __init__(self, tool: str) -> None:
        super().__init__(f"Tool already registered: {tool}", data={"tool": tool})
        self.tool = tool


class UnknownResourceError(ValuePickerError):
    """Resolution of a resource URI that was never registered."""

    code = RESOURCE_NOT_FOUND

    def __init__(self, uri: str) -> None:
        super().__init__(f"Resource not found: {uri}", data={"uri": uri})
        self.uri = uri


class DuplicateResourceError(ValuePickerError):
    """A resource with the same URI is already registered."""

    def __init__(self, uri: str) -> None:
        super().__init__(f"Resource already registered: {uri}", data={"uri": uri})
        self.uri = uri


class RequestRejectedError(ValuePickerError):
    """The host declined a view request (error response or isError result)."""

    def __init__(self, method: str, message: str, code: int = INTERNAL_ERROR) -> None:
        super().__init__(f"{method} rejected by host: {message}", data={"method": method})
        self.method = method
        self.code = code


class TransportFailure(ValuePickerError):
    """The underlying channel failed; opaque to the protocol core."""


class SessionStateError(ValuePickerError):
    """An operation is not valid in the current view session state."""
