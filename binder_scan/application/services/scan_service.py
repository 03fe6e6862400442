"""Scan service layer.

Orchestrates the scan pipeline for one request:
1. Identify cards in the photo with the vision agent
2. Resolve each card against the catalogs, one after another
3. Assemble the response and record a trace

Dependencies: logging, card vision agent, card resolver, tracer, models
System role: Service layer for the scan endpoints
"""

import logging
import time
from collections import Counter

from binder_scan.application.image_parser import ParsedImage
from binder_scan.core.agentic_system.card_vision_agent import CardVisionAgent, DetectedCard
from binder_scan.core.agentic_system.card_vision_agent.card_vision_prompt import (
    get_variant_instructions,
)
from binder_scan.core.card_matching.resolver import CardResolution, CardResolver
from binder_scan.models.scan import ScannedCard, ScanResponse
from binder_scan.observability.langfuse_tracer import LangfuseTracer

logger = logging.getLogger(__name__)


def to_scanned_card(
    position: int,
    detected: DetectedCard,
    resolution: CardResolution | None = None,
) -> ScannedCard:
    """Merge a detection and its optional resolution into the API model."""
    card = ScannedCard(
        position=position,
        name=detected.name,
        set_name=detected.set_name,
        collector_number=detected.number,
        confidence=detected.confidence,
    )
    if resolution is None:
        return card
    return card.model_copy(
        update={
            "matched": resolution.matched,
            "match_strategy": resolution.strategy.value,
            "catalog_id": resolution.catalog_id,
            "catalog_name": resolution.catalog_name,
            "catalog_set": resolution.catalog_set,
            "image_url": resolution.image_url,
            "price": resolution.price,
        }
    )


class ScanService:
    """Service for scanning binder page photos.

    Handles orchestration between the API layer, the vision agent and the
    card resolver.
    """

    def __init__(
        self,
        vision_agent: CardVisionAgent,
        resolver: CardResolver,
        tracer: LangfuseTracer | None = None,
        default_variant: str = "binder",
        include_prices: bool = True,
    ) -> None:
        """Initialize service with dependencies.

        Args:
            vision_agent: Agent identifying cards in photos
            resolver: Catalog resolver for detected cards
            tracer: Optional Langfuse tracer
            default_variant: Prompt variant when the request names none
            include_prices: Price enrichment when the request does not say
        """
        self._agent = vision_agent
        self._resolver = resolver
        self._tracer = tracer
        self._default_variant = default_variant
        self._include_prices = include_prices

    async def scan(
        self,
        image: ParsedImage,
        prompt_variant: str | None = None,
        enrich: bool = True,
        include_prices: bool | None = None,
    ) -> ScanResponse:
        """Identify and enrich the cards in a photo.

        Args:
            image: Validated image
            prompt_variant: Prompt variant (binder, single); default when None
            enrich: Resolve cards against the catalogs
            include_prices: Attach prices; service default when None

        Returns:
            ScanResponse: Detected cards in reading order with matches

        Raises:
            UnsupportedPromptVariantError: If the variant is unknown
            ConfigurationError: If the vision API key is missing
            VisionModelError: If the vision model fails
        """
        start = time.perf_counter()
        variant = (prompt_variant or self._default_variant).strip().lower()
        get_variant_instructions(variant)
        with_prices = self._include_prices if include_prices is None else include_prices

        logger.info(
            f"{__name__}:scan - START variant={variant} enrich={enrich} "
            f"mime={image.mime_type} size={image.size_bytes}"
        )

        detections = await self._agent.adetect(image.data_url, variant)

        cards: list[ScannedCard] = []
        for position, detected in enumerate(detections, start=1):
            resolution = None
            if enrich:
                resolution = await self._resolver.resolve(detected, include_prices=with_prices)
            cards.append(to_scanned_card(position, detected, resolution))

        elapsed_ms = (time.perf_counter() - start) * 1000
        matched = sum(1 for card in cards if card.matched)
        strategies = Counter(card.match_strategy for card in cards if card.match_strategy)

        logger.info(
            f"{__name__}:scan - END cards={len(cards)} matched={matched} "
            f"elapsed_ms={elapsed_ms:.0f}"
        )

        if self._tracer is not None:
            self._tracer.trace_scan(
                model=self._agent.model_name,
                prompt_variant=variant,
                detected=len(cards),
                matched=matched,
                latency_ms=elapsed_ms,
                strategies=dict(strategies),
            )

        return ScanResponse(
            cards=cards,
            count=len(cards),
            matched_count=matched,
            model=self._agent.model_name,
            prompt_variant=variant,
            elapsed_ms=round(elapsed_ms, 2),
        )
