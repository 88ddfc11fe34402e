"""Observable state of the value picker view."""

from enum import Enum

from pydantic import BaseModel, Field

from ..models import SafeAreaInsets, ValueEntry


class StatusKind(str, Enum):
    IDLE = "idle"
    SENDING = "sending"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class ViewPresentation(BaseModel):
    """Everything a user could observe on the view.

    Stands in for the DOM: the projector writes the theme, tokens, fonts
    and padding, and the session writes the cards, selection and status.
    """

    color_scheme: str | None = None
    style_variables: dict[str, str] = Field(default_factory=dict)
    fonts: str | None = None
    padding: SafeAreaInsets | None = None

    values: list[ValueEntry] = Field(default_factory=list)
    selected_id: str | None = None
    status: str = ""
    status_kind: StatusKind = StatusKind.IDLE
    cancelled: bool = False
    cancel_reason: str | None = None

    def set_status(self, text: str, kind: StatusKind) -> None:
        self.status = text
        self.status_kind = kind
