"""Projection of host context snapshots onto the view."""

from ..logger import get_logger
from ..models import HostContext
from .presentation import ViewPresentation

logger = get_logger(__name__)

COLOR_SCHEMES = ("light", "dark")


def apply_host_context(snapshot: HostContext, presentation: ViewPresentation) -> ViewPresentation:
    """Apply the presentation parameters carried by ``snapshot``.

    Theme, style variables, fonts and insets are applied independently.
    An aspect missing from the snapshot leaves the current presentation
    untouched, and so does a theme that names no known color scheme.
    Applying the same snapshot twice is the same as applying it once.
    """
    if snapshot.theme in COLOR_SCHEMES:
        presentation.color_scheme = snapshot.theme
    elif snapshot.theme:
        logger.warning("Ignoring unknown theme", extra={"theme": snapshot.theme})

    variables = snapshot.style_variables
    if variables:
        presentation.style_variables.update(variables)

    fonts = snapshot.fonts
    if fonts:
        presentation.fonts = fonts

    if snapshot.safe_area_insets is not None:
        presentation.padding = snapshot.safe_area_insets.model_copy()

    return presentation
