"""Configuration management for the Value Picker MCP Server."""

from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Transport Configuration
    transport: Literal["auto", "stdio", "http"] = Field(
        default="auto",
        description="Transport mode (auto detects stdio when stdin is piped)"
    )
    http_host: str = Field(default="0.0.0.0", description="HTTP bind address")
    http_port: int = Field(
        default=3456,
        validation_alias=AliasChoices("http_port", "port"),
        description="Preferred HTTP port (an ephemeral port is used if taken)"
    )
    http_cors_enabled: bool = Field(default=True, description="Enable permissive CORS")
    http_json_response: bool = Field(
        default=False,
        description="Answer Streamable HTTP requests with JSON instead of SSE"
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="text",
        description="Log format (json or text)",
        pattern="^(json|text)$"
    )
    log_file_path: str = Field(
        default="",
        description="Log file path (empty disables file logging)"
    )
    log_rotation_size: str = Field(default="10MB", description="Log rotation size")
    log_retention_days: int = Field(default=7, description="Log retention in days")

    # MCP Server Configuration
    mcp_server_name: str = Field(
        default="Value Picker Test Server",
        description="MCP server name"
    )
    mcp_server_version: str = Field(default="1.0.0", description="MCP server version")

    # MCP Apps Configuration
    ui_resource_uri: str = Field(
        default="ui://pick-value/mcp-app.html",
        description="URI of the value picker view"
    )
    apps_protocol_version: str = Field(
        default="2026-01-26",
        description="MCP Apps protocol version announced by the view"
    )
    view_app_name: str = Field(default="Value Picker", description="View app name")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()

    @field_validator("ui_resource_uri")
    @classmethod
    def validate_ui_resource_uri(cls, v: str) -> str:
        """Views are addressed with the ui:// scheme."""
        if not v.lower().startswith("ui://"):
            raise ValueError(f"UI resource URI must use the ui:// scheme: {v}")
        return v


# Global settings instance
settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings
