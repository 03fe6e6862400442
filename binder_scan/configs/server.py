"""
HTTP server configuration settings.

Bind address, CORS origins and the accepted upload size.

Dependencies: pydantic, pydantic_settings
System role: Web server configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """Uvicorn and request limits configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SERVER_",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8000, description="Bind port")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")
    max_image_bytes: int = Field(
        default=12 * 1024 * 1024,
        gt=0,
        description="Maximum decoded image size in bytes",
    )
