"""Prompt server configuration using Pydantic Settings v2.

Provides a typed configuration model with environment variable mapping.
Prefer `PROMPT_SERVER_{FIELD}` and `PROMPT_SERVER_{SECTION}__{FIELD}` env
vars. The comma-separated `PROMPTS_DIRS` variable is also honoured.

Usage:
    from src.config import settings
    print(settings.prompts_dirs)
"""

from pathlib import Path
from typing import Annotated, Any

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class LoggingConfig(BaseModel):
    """Loguru sink configuration."""

    level: str = Field(default="INFO")
    file: Path | None = Field(default=None, description="Optional log file path")
    rotation: str = Field(default="10 MB")
    retention: str = Field(default="7 days")

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unsupported log level '{value}'")
        return level


class PromptServerSettings(BaseSettings):
    """Prompt server configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PROMPT_SERVER_",
        env_nested_delimiter="__",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    app_name: str = Field(default="mcp-prompt-server")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)

    prompts_dirs: Annotated[list[Path], NoDecode] = Field(
        default_factory=lambda: [Path("./prompts")],
        validation_alias=AliasChoices("PROMPT_SERVER_PROMPTS_DIRS", "PROMPTS_DIRS"),
        description="Directories scanned for prompt files, in priority order",
    )
    strict_references: bool = Field(
        default=True,
        description="Refuse to render when a template references an unbound variable",
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("prompts_dirs", mode="before")
    @classmethod
    def _split_dirs(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @property
    def log_level(self) -> str:
        """Effective log level; ``debug`` forces DEBUG."""
        return "DEBUG" if self.debug else self.logging.level


# Global settings instance - primary interface for the application
settings = PromptServerSettings()

__all__ = ["LoggingConfig", "PromptServerSettings", "settings"]
