"""
Card catalog configuration settings.

Settings for the Pokémon TCG API and TCGdex clients, the set list cache and
the placeholder image returned for unmatched cards.

Dependencies: pydantic, pydantic_settings
System role: External card database configuration
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

SET_LIST_TTL_SECONDS = 12 * 60 * 60


class CatalogSettings(BaseSettings):
    """Pokémon TCG API and TCGdex configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CATALOG_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    pokemontcg_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("POKEMONTCG_API_KEY", "CATALOG_POKEMONTCG_API_KEY"),
        description="Optional Pokémon TCG API key (raises rate limits)",
    )
    pokemontcg_base_url: str = Field(
        default="https://api.pokemontcg.io/v2",
        description="Pokémon TCG API base URL",
    )
    tcgdex_base_url: str = Field(
        default="https://api.tcgdex.net/v2",
        description="TCGdex REST API base URL",
    )
    tcgdex_language: str = Field(default="en", description="TCGdex catalog language")
    enable_tcgdex_fallback: bool = Field(
        default=True,
        description="Query TCGdex when the Pokémon TCG API has no match",
    )

    timeout_seconds: float = Field(default=20.0, gt=0, description="HTTP timeout per request")
    max_retries: int = Field(
        default=3,
        ge=1,
        description="Attempts per catalog request on transport errors, 429 and 5xx",
    )
    set_cache_ttl_seconds: int = Field(
        default=SET_LIST_TTL_SECONDS,
        gt=0,
        description="Lifetime of the in-memory set list",
    )
    search_page_size: int = Field(default=10, gt=0, le=250, description="Cards per search query")
    include_prices: bool = Field(default=True, description="Attach market prices to matches")
    placeholder_image_url: str = Field(
        default="https://tcg.pokemon.com/assets/img/global/tcg-card-back-2x.jpg",
        description="Image returned for cards that could not be matched",
    )
