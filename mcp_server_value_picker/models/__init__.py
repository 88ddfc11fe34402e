"""Models for the Value Picker MCP Server."""

from .app_models import *
from .host_models import *

__all__ = [
    "ValueEntry",
    "PickValueOutput",
    "ToolDescriptor",
    "UiResourceDescriptor",
    "ResolvedResource",
    "InvocationResult",
    "HostContext",
    "HostStyles",
    "HostCss",
    "SafeAreaInsets",
]
