"""
Scan API request/response models.

Defines Pydantic DTOs for the binder scan endpoints.

Dependencies: pydantic, binder_scan.models.common
System role: API data models for scan endpoints
"""

from pydantic import Field

from binder_scan.models.common import CamelModel


class ScanRequest(CamelModel):
    """Request to scan a binder page photo.

    The image is sent inline as base64, optionally wrapped in a data URL.
    """

    image_base64: str | None = Field(
        default=None,
        description="Base64 image payload or data:image/...;base64, URL",
    )
    mime_type: str | None = Field(
        default=None,
        description="Image MIME type; sniffed from the bytes when omitted",
    )
    prompt_variant: str | None = Field(
        default=None,
        description="Prompt variant (binder or single); server default when omitted",
    )
    enrich: bool = Field(
        default=True,
        description="Look detected cards up in the card catalogs",
    )
    include_prices: bool | None = Field(
        default=None,
        description="Attach market prices; server default when omitted",
    )


class CardPrice(CamelModel):
    """Market price of a matched card."""

    amount: float = Field(description="Price value")
    currency: str = Field(description="ISO currency code (USD or EUR)")
    source: str = Field(description="Price source (tcgplayer or cardmarket)")
    variant: str | None = Field(default=None, description="Print variant the price applies to")
    url: str | None = Field(default=None, description="Marketplace page for the card")
    updated_at: str | None = Field(default=None, description="Date the price was last updated")


class ScannedCard(CamelModel):
    """A card detected in the photo, with its catalog match if any."""

    position: int = Field(ge=1, description="1-based position in reading order")
    name: str = Field(description="Card name as read by the vision model")
    set_name: str | None = Field(default=None, description="Set name as read by the model")
    collector_number: str | None = Field(default=None, description="Collector number as printed")
    confidence: float = Field(ge=0.0, le=1.0, description="Model confidence (0.0-1.0)")

    matched: bool = Field(default=False, description="Whether a catalog record was found")
    match_strategy: str | None = Field(
        default=None,
        description="Lookup stage that produced the match, placeholder when unmatched",
    )
    catalog_id: str | None = Field(default=None, description="Catalog card identifier")
    catalog_name: str | None = Field(default=None, description="Canonical card name")
    catalog_set: str | None = Field(default=None, description="Canonical set name")
    image_url: str | None = Field(default=None, description="Canonical or placeholder image")
    price: CardPrice | None = Field(default=None, description="Market price when available")


class ScanResponse(CamelModel):
    """Result of scanning one photo."""

    cards: list[ScannedCard] = Field(default_factory=list)
    count: int = Field(description="Number of detected cards")
    matched_count: int = Field(description="Number of cards matched in a catalog")
    model: str = Field(description="Vision model identifier")
    prompt_variant: str = Field(description="Prompt variant used")
    elapsed_ms: float = Field(description="Server-side processing time")
