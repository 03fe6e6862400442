"""
Observability configuration settings.

Settings for Langfuse tracing of scan requests.

Dependencies: pydantic_settings
System role: Observability configuration for tracing and logging
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ObservabilitySettings(BaseSettings):
    """Observability configuration for Langfuse and logging."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LANGFUSE_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    langfuse_public_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("LANGFUSE_PUBLIC_KEY", "langfuse_public_key"),
        description="Langfuse public key for tracing",
    )
    langfuse_secret_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("LANGFUSE_SECRET_KEY", "langfuse_secret_key"),
        description="Langfuse secret key for tracing",
    )
    langfuse_host: str = Field(
        default="https://cloud.langfuse.com",
        validation_alias=AliasChoices("LANGFUSE_HOST", "langfuse_host"),
        description="Langfuse server host URL",
    )
    enable_tracing: bool = Field(
        default=True,
        description="Enable Langfuse tracing (LANGFUSE_ENABLE_TRACING)",
    )
