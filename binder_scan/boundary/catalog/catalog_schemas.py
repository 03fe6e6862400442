"""
Card catalog record schemas.

Pydantic views over the subset of the Pokémon TCG API and TCGdex payloads
the service reads. Unknown keys are ignored; price blocks are kept raw since
their shape varies by variant.

Dependencies: pydantic
System role: External catalog data schemas
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

TCGDEX_IMAGE_QUALITY = "high"
TCGDEX_IMAGE_EXTENSION = "webp"


class CatalogSet(BaseModel):
    """Pokémon TCG API set record."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str
    series: str = ""
    ptcgo_code: str | None = Field(default=None, alias="ptcgoCode")
    release_date: str | None = Field(default=None, alias="releaseDate")
    printed_total: int | None = Field(default=None, alias="printedTotal")
    total: int | None = None


class CatalogCard(BaseModel):
    """Pokémon TCG API card record."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str
    number: str = ""
    rarity: str | None = None
    set: CatalogSet | None = None
    images: dict[str, str] = Field(default_factory=dict)
    tcgplayer: dict[str, Any] | None = None
    cardmarket: dict[str, Any] | None = None

    @property
    def image_url(self) -> str | None:
        """Large image when present, otherwise the small one."""
        return self.images.get("large") or self.images.get("small") or None


class TcgdexSetBrief(BaseModel):
    """Set reference embedded in a TCGdex card."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str


class TcgdexCardBrief(BaseModel):
    """TCGdex card summary as returned by list endpoints."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    local_id: str = Field(default="", alias="localId")
    name: str
    image: str | None = None

    @property
    def image_url(self) -> str | None:
        """TCGdex image base URL completed with quality and extension."""
        if not self.image:
            return None
        return f"{self.image}/{TCGDEX_IMAGE_QUALITY}.{TCGDEX_IMAGE_EXTENSION}"


class TcgdexCard(TcgdexCardBrief):
    """TCGdex card detail."""

    rarity: str | None = None
    set: TcgdexSetBrief | None = None
    pricing: dict[str, Any] | None = None
