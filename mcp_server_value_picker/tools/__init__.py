"""MCP Tools for the Value Picker."""

from .pick_value import PickValueTool

__all__ = [
    "PickValueTool",
]
