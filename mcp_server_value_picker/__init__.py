"""Value Picker MCP Server: a conformance probe for MCP Apps hosts."""

__version__ = "1.0.0"
