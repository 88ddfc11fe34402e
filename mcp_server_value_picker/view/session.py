"""View session: the protocol state machine running inside the view."""

from enum import Enum
from typing import Any

from pydantic import ValidationError

from ..config import Settings, get_settings
from ..errors import RequestRejectedError, SessionStateError, TransportFailure
from ..logger import get_logger
from ..models import HostContext, ValueEntry
from ..protocol import (
    HOST_CONTEXT_CHANGED,
    INITIALIZE,
    INITIALIZED,
    RESOURCE_TEARDOWN,
    TOOL_CANCELLED,
    TOOL_INPUT,
    TOOL_RESULT,
)
from .channel import JsonRpcChannel
from .presentation import StatusKind, ViewPresentation
from .projector import apply_host_context
from .selection import SelectionOutcome, SelectionReport, SelectionSaga

logger = get_logger(__name__)


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    SELECTING = "selecting"
    TORN_DOWN = "torn_down"


def outcome_status(entry: ValueEntry, report: SelectionReport) -> tuple[str, StatusKind]:
    """Status line shown once a selection sequence settles."""
    outcome = report.outcome
    if outcome is SelectionOutcome.SUCCESS:
        return f"Selected: {entry.label} - AI has been notified!", StatusKind.SUCCESS
    if outcome is SelectionOutcome.FAILURE:
        return f"Selected: {entry.label} - failed to notify AI", StatusKind.ERROR
    if report.context.ok:
        return f"Selected: {entry.label} (context updated, message send was rejected)", StatusKind.WARNING
    return f"Selected: {entry.label} (context update was rejected, message sent)", StatusKind.WARNING


class ViewSession:
    """One view's session with its host.

    Host notifications are handled one at a time in arrival order. The only
    suspension points are the handshake and the two requests of each
    selection; overlapping selections are allowed to run concurrently.
    """

    def __init__(self, channel: JsonRpcChannel, settings: Settings | None = None):
        self.channel = channel
        self.settings = settings or get_settings()

        self.state = SessionState.UNINITIALIZED
        self.host_context: HostContext | None = None
        self.host_info: dict[str, Any] | None = None
        self.host_capabilities: dict[str, Any] | None = None
        self.tool_input: dict[str, Any] | None = None
        self.selected_id: str | None = None
        self.presentation = ViewPresentation()

        self._in_flight = 0
        self._selection_serial = 0

        channel.on_notification(TOOL_INPUT, self._on_tool_input)
        channel.on_notification(TOOL_RESULT, self._on_tool_result)
        channel.on_notification(TOOL_CANCELLED, self._on_tool_cancelled)
        channel.on_notification(HOST_CONTEXT_CHANGED, self._on_host_context_changed)
        channel.on_notification(RESOURCE_TEARDOWN, self._on_teardown_notification)
        channel.on_request(RESOURCE_TEARDOWN, self._on_teardown_request)

    @classmethod
    async def open(cls, channel: JsonRpcChannel, settings: Settings | None = None) -> "ViewSession":
        """Construct a session and run the handshake."""
        session = cls(channel, settings)
        await session.connect()
        return session

    @property
    def is_torn_down(self) -> bool:
        return self.state is SessionState.TORN_DOWN

    async def connect(self) -> None:
        """Run the ``ui/initialize`` handshake.

        No timeout is applied; wrap the call in one if the host may stall.
        """
        if self.state is not SessionState.UNINITIALIZED:
            raise SessionStateError(f"Cannot connect a session in state {self.state.value}")

        self.state = SessionState.INITIALIZING
        try:
            result = await self.channel.request(
                INITIALIZE,
                {
                    "appInfo": {
                        "name": self.settings.view_app_name,
                        "version": self.settings.mcp_server_version,
                    },
                    "appCapabilities": {},
                    "protocolVersion": self.settings.apps_protocol_version,
                },
            )
        except (RequestRejectedError, TransportFailure):
            if self.state is SessionState.INITIALIZING:
                self.state = SessionState.UNINITIALIZED
            raise

        if self.state is SessionState.TORN_DOWN:
            return

        self.host_info = result.get("hostInfo")
        self.host_capabilities = result.get("hostCapabilities")
        if result.get("hostContext") is not None:
            self._accept_host_context(result["hostContext"])

        self.state = SessionState.READY
        await self.channel.notify(INITIALIZED, {})
        logger.info("View session ready")

    async def select(self, value_id: str) -> SelectionReport:
        """Handle the user picking ``value_id``.

        The selection indicator updates before anything is sent. The
        returned report always resolves to one of the three outcomes.
        """
        if self.state not in (SessionState.READY, SessionState.SELECTING):
            raise SessionStateError(f"Cannot select in state {self.state.value}")

        entry = next((value for value in self.presentation.values if value.id == value_id), None)
        if entry is None:
            raise ValueError(f"Value {value_id!r} is not rendered")

        self._selection_serial += 1
        serial = self._selection_serial
        self.selected_id = entry.id
        self.presentation.selected_id = entry.id
        self.presentation.set_status(f"Selected: {entry.label} - sending to AI...", StatusKind.SENDING)
        logger.info(f"Selection changed to: {entry.id}")

        self._in_flight += 1
        self.state = SessionState.SELECTING
        try:
            report = await SelectionSaga(self.channel, entry).run()
        finally:
            self._in_flight -= 1
            if self.state is SessionState.SELECTING and self._in_flight == 0:
                self.state = SessionState.READY

        # A newer selection owns the status line.
        if serial == self._selection_serial and not self.is_torn_down:
            self.presentation.set_status(*outcome_status(entry, report))
        return report

    def teardown(self) -> None:
        """Release view state. Safe to call in any state, any number of times."""
        if self.is_torn_down:
            return
        self.state = SessionState.TORN_DOWN
        logger.info("Value Picker app is being torn down")

    def _accept_host_context(self, params: dict[str, Any]) -> None:
        """Replace the snapshot and project it. Malformed snapshots are logged and dropped."""
        try:
            snapshot = HostContext.model_validate(params)
        except ValidationError as e:
            logger.error("Ignoring malformed host context", extra={"error": str(e)})
            return
        self.host_context = snapshot
        apply_host_context(snapshot, self.presentation)

    def _on_tool_input(self, params: dict[str, Any]) -> None:
        if self.is_torn_down:
            return
        # pick_value takes no arguments; the view learns everything from the result.
        self.tool_input = params.get("arguments") or {}
        logger.info("Received tool input", extra={"arguments": self.tool_input})

    def _on_tool_result(self, params: dict[str, Any]) -> None:
        if self.is_torn_down:
            return
        logger.info("Received tool result")

        structured = params.get("structuredContent") or {}
        values = structured.get("values")
        if values is None:
            logger.warning("Tool result carried no values to render")
            return

        try:
            self.presentation.values = [ValueEntry.model_validate(value) for value in values]
        except ValidationError as e:
            logger.error("Tool result values are malformed", extra={"error": str(e)})

    def _on_tool_cancelled(self, params: dict[str, Any]) -> None:
        if self.is_torn_down:
            return
        reason = params.get("reason")
        logger.info("Tool call cancelled", extra={"reason": reason})
        self.presentation.cancelled = True
        self.presentation.cancel_reason = reason
        self.presentation.set_status("Tool call was cancelled", StatusKind.WARNING)

    def _on_host_context_changed(self, params: dict[str, Any]) -> None:
        if self.is_torn_down:
            return
        self._accept_host_context(params)

    def _on_teardown_notification(self, params: dict[str, Any]) -> None:
        self._on_teardown()

    async def _on_teardown_request(self, params: dict[str, Any]) -> dict[str, Any]:
        self._on_teardown()
        return {}

    def _on_teardown(self) -> None:
        try:
            self.teardown()
        except Exception:
            logger.exception("Teardown failed")
