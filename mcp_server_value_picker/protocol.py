"""MCP Apps extension constants."""

UI_MIME_TYPE = "text/html;profile=mcp-app"
UI_EXTENSION_ID = "io.modelcontextprotocol/ui"

# View -> host
INITIALIZE = "ui/initialize"
INITIALIZED = "ui/notifications/initialized"
UPDATE_MODEL_CONTEXT = "ui/update-model-context"
SEND_MESSAGE = "ui/message"

# Host -> view
TOOL_INPUT = "ui/notifications/tool-input"
TOOL_RESULT = "ui/notifications/tool-result"
TOOL_CANCELLED = "ui/notifications/tool-cancelled"
HOST_CONTEXT_CHANGED = "ui/notifications/host-context-changed"
RESOURCE_TEARDOWN = "ui/resource-teardown"
