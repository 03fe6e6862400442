"""
Market price extraction from catalog records.

Prices are read from the TCGplayer block first (USD) and fall back to
Cardmarket (EUR). Variants and fields are tried in a fixed preference order
so a given card always reports the same figure.

Dependencies: binder_scan.models.scan, binder_scan.boundary.catalog
System role: Price enrichment for matched cards
"""

from typing import Any

from binder_scan.boundary.catalog.catalog_schemas import CatalogCard, TcgdexCard
from binder_scan.models.scan import CardPrice

TCGPLAYER_VARIANT_ORDER = (
    "holofoil",
    "normal",
    "reverseHolofoil",
    "1stEditionHolofoil",
    "1stEditionNormal",
    "unlimitedHolofoil",
)
TCGPLAYER_FIELD_ORDER = ("market", "mid", "low")
CARDMARKET_FIELD_ORDER = ("trendPrice", "averageSellPrice", "avg30")

TCGDEX_TCGPLAYER_VARIANT_ORDER = ("holofoil", "normal", "reverse-holofoil")
TCGDEX_TCGPLAYER_FIELD_ORDER = ("marketPrice", "midPrice", "lowPrice")
TCGDEX_CARDMARKET_FIELD_ORDER = ("trend", "avg", "avg30")


def _positive_amount(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return round(float(value), 2) if value > 0 else None


def _ordered_variants(prices: dict[str, Any], preferred: tuple[str, ...]) -> list[str]:
    ordered = [variant for variant in preferred if variant in prices]
    ordered.extend(variant for variant in prices if variant not in preferred)
    return ordered


def _first_amount(block: dict[str, Any], fields: tuple[str, ...]) -> float | None:
    for field in fields:
        amount = _positive_amount(block.get(field))
        if amount is not None:
            return amount
    return None


def extract_pokemontcg_price(card: CatalogCard) -> CardPrice | None:
    """
    Price of a Pokémon TCG API card.

    Args:
        card: Catalog card with optional tcgplayer/cardmarket blocks

    Returns:
        CardPrice | None: First available price, or None
    """
    tcgplayer = card.tcgplayer or {}
    prices = tcgplayer.get("prices") or {}
    for variant in _ordered_variants(prices, TCGPLAYER_VARIANT_ORDER):
        block = prices.get(variant)
        if not isinstance(block, dict):
            continue
        amount = _first_amount(block, TCGPLAYER_FIELD_ORDER)
        if amount is not None:
            return CardPrice(
                amount=amount,
                currency="USD",
                source="tcgplayer",
                variant=variant,
                url=tcgplayer.get("url"),
                updated_at=tcgplayer.get("updatedAt"),
            )

    cardmarket = card.cardmarket or {}
    amount = _first_amount(cardmarket.get("prices") or {}, CARDMARKET_FIELD_ORDER)
    if amount is not None:
        return CardPrice(
            amount=amount,
            currency="EUR",
            source="cardmarket",
            url=cardmarket.get("url"),
            updated_at=cardmarket.get("updatedAt"),
        )
    return None


def extract_tcgdex_price(card: TcgdexCard) -> CardPrice | None:
    """Price of a TCGdex card from its `pricing` block."""
    pricing = card.pricing or {}

    tcgplayer = pricing.get("tcgplayer") or {}
    variants = {key: value for key, value in tcgplayer.items() if isinstance(value, dict)}
    for variant in _ordered_variants(variants, TCGDEX_TCGPLAYER_VARIANT_ORDER):
        amount = _first_amount(variants[variant], TCGDEX_TCGPLAYER_FIELD_ORDER)
        if amount is not None:
            return CardPrice(
                amount=amount,
                currency=tcgplayer.get("unit") or "USD",
                source="tcgplayer",
                variant=variant,
                updated_at=tcgplayer.get("updated"),
            )

    cardmarket = pricing.get("cardmarket") or {}
    amount = _first_amount(cardmarket, TCGDEX_CARDMARKET_FIELD_ORDER)
    if amount is not None:
        return CardPrice(
            amount=amount,
            currency=cardmarket.get("unit") or "EUR",
            source="cardmarket",
            updated_at=cardmarket.get("updated"),
        )
    return None
