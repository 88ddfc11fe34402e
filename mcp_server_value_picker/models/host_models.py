"""Host context models sent by the host to the view."""

from pydantic import BaseModel, ConfigDict, Field


class SafeAreaInsets(BaseModel):
    """Insets in pixels the view should keep clear."""

    top: float = 0
    right: float = 0
    bottom: float = 0
    left: float = 0


class HostCss(BaseModel):
    model_config = ConfigDict(extra="allow")

    fonts: str | None = None


class HostStyles(BaseModel):
    model_config = ConfigDict(extra="allow")

    variables: dict[str, str] | None = None
    css: HostCss | None = None


class HostContext(BaseModel):
    """Snapshot of host presentation parameters.

    Each notification replaces the previous snapshot. Fields the projector
    does not use (display mode, locale, platform...) are kept as extras.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    theme: str | None = None
    styles: HostStyles | None = None
    safe_area_insets: SafeAreaInsets | None = Field(default=None, alias="safeAreaInsets")

    @property
    def style_variables(self) -> dict[str, str] | None:
        return self.styles.variables if self.styles else None

    @property
    def fonts(self) -> str | None:
        if self.styles and self.styles.css:
            return self.styles.css.fonts
        return None
