"""pick_value MCP tool and its interactive view."""

import asyncio
from pathlib import Path
from typing import Any

from mcp.types import TextContent

from ..config import Settings, get_settings
from ..logger import get_logger
from ..models import InvocationResult, PickValueOutput, ToolDescriptor, ValueEntry
from ..protocol import UI_MIME_TYPE
from ..services import ResourceRegistry, ToolRegistry

logger = get_logger(__name__)

TOOL_NAME = "pick_value"

TEMPLATE_PATH = Path(__file__).resolve().parent.parent / "templates" / "mcp-app.html"

VALUES: tuple[ValueEntry, ...] = (
    ValueEntry(id="alpha", label="Alpha Protocol", description="First-generation quantum encryption"),
    ValueEntry(id="beta", label="Beta Framework", description="Distributed computing mesh"),
    ValueEntry(id="gamma", label="Gamma Engine", description="Neural network accelerator"),
    ValueEntry(id="delta", label="Delta Shield", description="Zero-trust security layer"),
    ValueEntry(id="epsilon", label="Epsilon Core", description="Edge computing runtime"),
    ValueEntry(id="zeta", label="Zeta Pipeline", description="Real-time data streaming"),
    ValueEntry(id="eta", label="Eta Compiler", description="Cross-platform bytecode optimizer"),
    ValueEntry(id="theta", label="Theta Analytics", description="Predictive telemetry dashboard"),
    ValueEntry(id="iota", label="Iota Mesh", description="IoT device orchestration"),
    ValueEntry(id="kappa", label="Kappa Vault", description="Secrets management platform"),
)

DESCRIPTION = (
    "DEBUG/TEST TOOL: Tests MCP Apps communication between UI and model. "
    "The user picks a value in the UI, and you must confirm whether you received it. "
    "This validates that ui/update-model-context is working correctly. "
    "Do not treat this as a real decision — just report what value you received."
)

INSTRUCTION = (
    "Wait for the user to select a value via the UI. "
    "Their choice will appear in the model context."
)

# Hosts and models are tested against this text; keep it verbatim.
MODEL_TEXT_TEMPLATE = """[MCP Apps Test] This is a debug tool for testing value communication between the UI and the model.

The user will select one of 10 test values via the interactive UI. Their selection will be injected into your context via ui/update-model-context. The user will then ask you to confirm which value you received.

Your job: Simply report back the value you received. This tests whether the MCP Apps context injection is working. Do not provide detailed analysis of the values — just confirm what was selected.

Test values: {labels}"""

OUTPUT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "values": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "id": {"type": "string"},
                    "label": {"type": "string"},
                    "description": {"type": "string"},
                },
                "required": ["id", "label", "description"],
            },
        },
        "instruction": {"type": "string"},
    },
    "required": ["values", "instruction"],
}


class PickValueTool:
    """MCP tool returning the catalog of selectable test values."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.resource_uri = self.settings.ui_resource_uri

    async def pick_value(self, arguments: dict[str, Any]) -> InvocationResult:
        """
        Return the fixed catalog.

        The model receives the instructional text and the labels only; the
        full entries travel in the structured channel to the view.
        """
        labels = ", ".join(value.label for value in VALUES)
        output = PickValueOutput(values=list(VALUES), instruction=INSTRUCTION)

        logger.info(f"Returning {len(VALUES)} test values")

        return InvocationResult(
            content=[TextContent(type="text", text=MODEL_TEXT_TEMPLATE.format(labels=labels))],
            structured_content=output.model_dump(),
        )

    async def fetch_view(self) -> str:
        """Read the view template; called on every resource resolution."""
        html = await asyncio.to_thread(TEMPLATE_PATH.read_text, encoding="utf-8")
        return (
            html.replace("{{SERVER_NAME}}", self.settings.mcp_server_name)
            .replace("{{SERVER_VERSION}}", self.settings.mcp_server_version)
            .replace("{{APP_NAME}}", self.settings.view_app_name)
            .replace("{{PROTOCOL_VERSION}}", self.settings.apps_protocol_version)
        )

    def get_tool_definition(self) -> ToolDescriptor:
        """Get the descriptor linking pick_value to its view."""
        return ToolDescriptor(
            name=TOOL_NAME,
            title="Pick a Value",
            description=DESCRIPTION,
            input_schema={"type": "object", "properties": {}, "additionalProperties": False},
            output_schema=OUTPUT_SCHEMA,
            meta={
                "ui": {"resourceUri": self.resource_uri},
                "ui/resourceUri": self.resource_uri,
            },
        )

    def register(self, tools: ToolRegistry, resources: ResourceRegistry) -> None:
        """Register the tool and the view it links to."""
        tools.register(TOOL_NAME, self.get_tool_definition(), self.pick_value)
        resources.register(
            self.resource_uri,
            UI_MIME_TYPE,
            self.fetch_view,
            name=self.resource_uri,
            description="Interactive value picker view",
        )
