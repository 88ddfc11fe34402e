"""Services for the Value Picker MCP Server."""

from .resource_registry import ResourceRegistry
from .tool_registry import ToolRegistry

__all__ = ["ResourceRegistry", "ToolRegistry"]
