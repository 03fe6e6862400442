"""
Vision model configuration settings.

Selects the chat model used to identify cards in a binder photo and carries
provider credentials and generation parameters.

Dependencies: pydantic, pydantic_settings
System role: Vision LLM configuration
"""

from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VisionSettings(BaseSettings):
    """Vision model provider and prompt configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VISION_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    provider: Literal["openai", "google"] = Field(
        default="openai",
        description="Chat model provider (openai or google)",
    )
    model: str = Field(default="gpt-4o-mini", description="Vision-capable model identifier")
    temperature: float = Field(default=0.0, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int = Field(default=1500, gt=0, description="Maximum tokens in the model reply")
    timeout_seconds: float = Field(default=60.0, gt=0, description="Model request timeout")
    image_detail: Literal["low", "high", "auto"] = Field(
        default="high",
        description="Image detail hint sent with the image content block",
    )
    prompt_variant: str = Field(
        default="binder",
        description="Default prompt variant (binder or single)",
    )
    max_cards: int = Field(
        default=20,
        gt=0,
        description="Maximum number of detected cards kept from one reply",
    )

    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "VISION_OPENAI_API_KEY"),
        description="OpenAI API key",
    )
    google_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GOOGLE_API_KEY", "VISION_GOOGLE_API_KEY"),
        description="Google Generative AI API key",
    )

    @property
    def api_key(self) -> str | None:
        """
        Return the key for the configured provider.

        Returns:
            str | None: API key, or None when not configured
        """
        if self.provider == "google":
            return self.google_api_key or None
        return self.openai_api_key or None
