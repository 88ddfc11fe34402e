"""Two-step request sequence run for every user selection."""

import time
from enum import Enum

from pydantic import BaseModel

from ..errors import RequestRejectedError
from ..logger import get_logger
from ..models import ValueEntry
from ..protocol import SEND_MESSAGE, UPDATE_MODEL_CONTEXT
from .channel import JsonRpcChannel

logger = get_logger(__name__)

FOLLOW_UP_MESSAGE = "I have picked a value, can you tell me what it is?"


class SelectionOutcome(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILURE = "failure"


class StepResult(BaseModel):
    """Settlement of one request of the sequence."""

    method: str
    ok: bool
    error: str | None = None
    issued_at: float
    settled_at: float


class SelectionReport(BaseModel):
    entry: ValueEntry
    context: StepResult
    message: StepResult

    @property
    def outcome(self) -> SelectionOutcome:
        if self.context.ok and self.message.ok:
            return SelectionOutcome.SUCCESS
        if self.context.ok or self.message.ok:
            return SelectionOutcome.PARTIAL
        return SelectionOutcome.FAILURE


def context_text(entry: ValueEntry) -> str:
    return (
        f'The user selected "{entry.label}" (id: {entry.id}). '
        f"Description: {entry.description}. "
        "Please acknowledge their selection and provide relevant information about this choice."
    )


class SelectionSaga:
    """``update-model-context`` followed by ``send-message``.

    The second request is issued only after the first has settled, and it
    is issued whatever the first one's outcome was. :meth:`run` never
    raises for request failures; they are recorded on the report.
    """

    def __init__(self, channel: JsonRpcChannel, entry: ValueEntry):
        self.channel = channel
        self.entry = entry

    async def run(self) -> SelectionReport:
        context = await self._step(
            UPDATE_MODEL_CONTEXT,
            {"content": [{"type": "text", "text": context_text(self.entry)}]},
        )
        message = await self._step(
            SEND_MESSAGE,
            {"role": "user", "content": [{"type": "text", "text": FOLLOW_UP_MESSAGE}]},
        )
        report = SelectionReport(entry=self.entry, context=context, message=message)

        logger.info(
            "Selection sequence settled",
            extra={"value_id": self.entry.id, "outcome": report.outcome.value},
        )
        return report

    async def _step(self, method: str, params: dict) -> StepResult:
        issued_at = time.monotonic()
        try:
            result = await self.channel.request(method, params)
            if result.get("isError"):
                raise RequestRejectedError(method, "host returned an error result")
        except Exception as e:
            # A failed step never stops the sequence.
            logger.warning("Host request failed", extra={"method": method, "error": str(e)})
            return StepResult(
                method=method, ok=False, error=str(e), issued_at=issued_at, settled_at=time.monotonic()
            )

        return StepResult(method=method, ok=True, issued_at=issued_at, settled_at=time.monotonic())
