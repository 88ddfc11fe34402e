"""JSON-RPC channel between a view and its host."""

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from mcp.types import (
    INTERNAL_ERROR,
    METHOD_NOT_FOUND,
    ErrorData,
    JSONRPCError,
    JSONRPCMessage,
    JSONRPCNotification,
    JSONRPCRequest,
    JSONRPCResponse,
)
from pydantic import ValidationError

from ..errors import RequestRejectedError, TransportFailure, ValuePickerError
from ..logger import get_logger

logger = get_logger(__name__)

Sender = Callable[[dict[str, Any]], Awaitable[None]]
NotificationHandler = Callable[[dict[str, Any]], Awaitable[None] | None]
RequestHandler = Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]


class JsonRpcChannel:
    """Order-preserving JSON-RPC channel bound to one view session.

    Outbound frames go through ``send``; inbound frames are fed to
    :meth:`receive` by whatever carries them (postMessage bridge, pipe,
    test double). Host-originated methods are dispatched through handler
    tables keyed by method name, so independent sessions never share
    handler state. No request has an implicit timeout.
    """

    def __init__(self, send: Sender) -> None:
        self._send = send
        self._next_id = 1
        self._pending: dict[int | str, tuple[str, asyncio.Future]] = {}
        self._notification_handlers: dict[str, NotificationHandler] = {}
        self._request_handlers: dict[str, RequestHandler] = {}
        self.closed = False

    def on_notification(self, method: str, handler: NotificationHandler) -> None:
        self._notification_handlers[method] = handler

    def on_request(self, method: str, handler: RequestHandler) -> None:
        self._request_handlers[method] = handler

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def _write(self, message: JSONRPCRequest | JSONRPCNotification | JSONRPCResponse | JSONRPCError) -> None:
        if self.closed:
            raise TransportFailure("Channel is closed")
        try:
            await self._send(message.model_dump(by_alias=True, mode="json", exclude_none=True))
        except Exception as e:
            raise TransportFailure(f"Failed to send message: {e}") from e

    async def request(self, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Send a request and wait for the host's answer.

        Raises RequestRejectedError on an error response and
        TransportFailure if the channel fails or closes first.
        """
        request_id = self._next_id
        self._next_id += 1

        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._pending[request_id] = (method, future)

        try:
            await self._write(JSONRPCRequest(jsonrpc="2.0", id=request_id, method=method, params=params))
            return await future
        finally:
            self._pending.pop(request_id, None)

    async def notify(self, method: str, params: dict[str, Any] | None = None) -> None:
        await self._write(JSONRPCNotification(jsonrpc="2.0", method=method, params=params))

    async def receive(self, payload: dict[str, Any]) -> None:
        """Feed one inbound frame into the channel."""
        try:
            message = JSONRPCMessage.model_validate(payload).root
        except ValidationError as e:
            logger.warning("Dropping malformed JSON-RPC frame", extra={"error": str(e)})
            return

        if isinstance(message, JSONRPCResponse):
            self._settle(message.id, result=message.result)
        elif isinstance(message, JSONRPCError):
            self._settle(message.id, error=message.error)
        elif isinstance(message, JSONRPCRequest):
            await self._dispatch_request(message)
        else:
            await self._dispatch_notification(message)

    def _settle(self, request_id: int | str, result: dict[str, Any] | None = None, error: ErrorData | None = None) -> None:
        entry = self._pending.get(request_id)
        if entry is None:
            logger.warning("Response for unknown request id", extra={"request_id": request_id})
            return

        method, future = entry
        if future.done():
            return
        if error is not None:
            future.set_exception(RequestRejectedError(method, error.message, error.code))
        else:
            future.set_result(result or {})

    async def _dispatch_notification(self, message: JSONRPCNotification) -> None:
        handler = self._notification_handlers.get(message.method)
        if handler is None:
            logger.debug(f"No handler for notification {message.method}")
            return

        try:
            outcome = handler(message.params or {})
            if inspect.isawaitable(outcome):
                await outcome
        except Exception:
            # Notifications have no response path; the log is the report.
            logger.exception(f"Notification handler for {message.method} failed")

    async def _dispatch_request(self, message: JSONRPCRequest) -> None:
        handler = self._request_handlers.get(message.method)
        if handler is None:
            reply: JSONRPCResponse | JSONRPCError = JSONRPCError(
                jsonrpc="2.0",
                id=message.id,
                error=ErrorData(code=METHOD_NOT_FOUND, message=f"Method not found: {message.method}"),
            )
        else:
            try:
                result = await handler(message.params or {})
                reply = JSONRPCResponse(jsonrpc="2.0", id=message.id, result=result or {})
            except ValuePickerError as e:
                reply = JSONRPCError(jsonrpc="2.0", id=message.id, error=e.to_error_data())
            except Exception as e:
                logger.exception(f"Request handler for {message.method} failed")
                reply = JSONRPCError(
                    jsonrpc="2.0", id=message.id, error=ErrorData(code=INTERNAL_ERROR, message=str(e))
                )
        await self._write(reply)

    def close(self) -> None:
        """Close the channel and fail every pending request."""
        self.closed = True
        for method, future in list(self._pending.values()):
            if not future.done():
                future.set_exception(TransportFailure(f"Channel closed while {method} was pending"))
