"""Pydantic models for tools, resources and invocation results."""

from typing import Any

from mcp.types import CallToolResult, Resource, TextContent, Tool
from pydantic import BaseModel, ConfigDict, Field

from ..protocol import UI_MIME_TYPE


class ValueEntry(BaseModel):
    """One selectable catalog entry."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    description: str


class PickValueOutput(BaseModel):
    """Structured payload of the pick_value tool."""

    values: list[ValueEntry]
    instruction: str


class ToolDescriptor(BaseModel):
    """Immutable declaration of a callable tool."""

    model_config = ConfigDict(frozen=True)

    name: str
    title: str | None = None
    description: str
    input_schema: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}, "additionalProperties": False}
    )
    output_schema: dict[str, Any] | None = None
    meta: dict[str, Any] = Field(default_factory=dict)

    @property
    def resource_uri(self) -> str | None:
        """UI resource linked through the metadata block, if any."""
        ui = self.meta.get("ui") or {}
        return ui.get("resourceUri") or self.meta.get("ui/resourceUri")

    def to_tool(self) -> Tool:
        """Convert to the MCP wire type."""
        return Tool(
            name=self.name,
            title=self.title,
            description=self.description,
            inputSchema=self.input_schema,
            outputSchema=self.output_schema,
            _meta=self.meta or None,
        )


class UiResourceDescriptor(BaseModel):
    """Registered resource; content is produced on demand by its fetcher."""

    model_config = ConfigDict(frozen=True)

    uri: str
    name: str
    mime_type: str
    description: str | None = None

    @property
    def is_interactive_view(self) -> bool:
        return self.mime_type == UI_MIME_TYPE

    def to_resource(self) -> Resource:
        return Resource(
            uri=self.uri,
            name=self.name,
            description=self.description,
            mimeType=self.mime_type,
        )


class ResolvedResource(BaseModel):
    """Content of a resource at the moment it was resolved."""

    uri: str
    mime_type: str
    text: str


class InvocationResult(BaseModel):
    """Dual-channel tool result.

    ``content`` is what the model sees and is always present.
    ``structured_content`` is delivered to the view only and may be absent;
    nothing copies it into the text channel.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content: list[TextContent] = Field(min_length=1)
    structured_content: dict[str, Any] | None = Field(default=None, alias="structuredContent")

    @property
    def text(self) -> str:
        """Concatenated model-visible text."""
        return "\n".join(block.text for block in self.content)

    def to_call_tool_result(self) -> CallToolResult:
        return CallToolResult(
            content=list(self.content),
            structuredContent=self.structured_content,
            isError=False,
        )
