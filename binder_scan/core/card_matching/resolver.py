"""
Card resolution against the external catalogs.

Given an unreliable name, optional set name and optional collector number
from the vision model, finds the best catalog record through ordered
fallback lookups and extracts its image and price.

Stages (first hit wins):
1. set_number    set id + collector number, name must roughly agree
2. name_number   exact name + collector number
3. name_set      exact name + set id
4. name          exact name, number match preferred, newest print otherwise
5. partial_name  prefix wildcard on each base-name token
6. tcgdex        TCGdex name search
7. placeholder   configured card-back image

Dependencies: binder_scan.boundary.catalog, binder_scan.core.card_matching
System role: Core matching heuristic of the scan pipeline
"""

import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from binder_scan.boundary.catalog.catalog_schemas import (
    CatalogCard,
    CatalogSet,
    TcgdexCardBrief,
)
from binder_scan.boundary.catalog.pokemontcg_client import PokemonTcgClient
from binder_scan.boundary.catalog.set_cache import SetListCache
from binder_scan.boundary.catalog.tcgdex_client import TcgdexClient
from binder_scan.core.agentic_system.card_vision_agent.card_vision_schema import DetectedCard
from binder_scan.core.card_matching.normalization import (
    escape_query_value,
    names_match,
    normalize_number,
    numbers_match,
    query_tokens,
)
from binder_scan.core.card_matching.pricing import (
    extract_pokemontcg_price,
    extract_tcgdex_price,
)
from binder_scan.core.card_matching.set_matching import match_set
from binder_scan.core.exceptions import CatalogLookupError
from binder_scan.models.scan import CardPrice

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MatchStrategy(str, Enum):
    """Lookup stage that produced a resolution."""

    SET_NUMBER = "set_number"
    NAME_NUMBER = "name_number"
    NAME_SET = "name_set"
    NAME = "name"
    PARTIAL_NAME = "partial_name"
    TCGDEX = "tcgdex"
    PLACEHOLDER = "placeholder"


@dataclass
class CardResolution:
    """Outcome of resolving one detected card."""

    matched: bool
    strategy: MatchStrategy
    image_url: str
    catalog_id: str | None = None
    catalog_name: str | None = None
    catalog_set: str | None = None
    price: CardPrice | None = None


def _first(items: Iterable[T]) -> T | None:
    return next(iter(items), None)


def _prefer(cards: list[T], predicate: Callable[[T], bool]) -> T | None:
    """First card satisfying predicate, else the first card."""
    return _first(card for card in cards if predicate(card)) or _first(cards)


class CardResolver:
    """Resolves detected cards to catalog records."""

    def __init__(
        self,
        pokemontcg: PokemonTcgClient,
        set_cache: SetListCache,
        tcgdex: TcgdexClient | None = None,
        placeholder_image_url: str = "",
        page_size: int = 10,
    ) -> None:
        """
        Initialize resolver.

        Args:
            pokemontcg: Primary catalog client
            set_cache: Cached set list for set name resolution
            tcgdex: Secondary catalog client, None disables the fallback
            placeholder_image_url: Image used for unmatched cards
            page_size: Cards requested per search
        """
        self._pokemontcg = pokemontcg
        self._set_cache = set_cache
        self._tcgdex = tcgdex
        self._placeholder_image_url = placeholder_image_url
        self._page_size = page_size

    async def resolve(self, detected: DetectedCard, include_prices: bool = True) -> CardResolution:
        """
        Resolve a detected card.

        Catalog failures in one stage are logged and the next stage is tried;
        this method does not raise for catalog errors.

        Args:
            detected: Card reported by the vision model
            include_prices: Attach market price to the resolution

        Returns:
            CardResolution: Match, or placeholder resolution when nothing matched
        """
        name = detected.name.strip()
        number = normalize_number(detected.number)
        card_set = await self._resolve_set(detected.set_name)

        stages: list[tuple[MatchStrategy, Callable[[], Awaitable[CatalogCard | None]]]] = []
        if card_set and number:
            stages.append(
                (MatchStrategy.SET_NUMBER, lambda: self._by_set_and_number(name, card_set, number))
            )
        if number:
            stages.append(
                (MatchStrategy.NAME_NUMBER, lambda: self._by_name_and_number(name, number, card_set))
            )
        if card_set:
            stages.append((MatchStrategy.NAME_SET, lambda: self._by_name_and_set(name, card_set)))
        stages.append((MatchStrategy.NAME, lambda: self._by_name(name, number)))
        stages.append((MatchStrategy.PARTIAL_NAME, lambda: self._by_partial_name(name, number)))

        for strategy, stage in stages:
            try:
                card = await stage()
            except CatalogLookupError as e:
                logger.warning(f"{__name__}:resolve - {strategy.value} failed for {name!r}: {e.message}")
                continue
            if card is not None:
                logger.info(f"{__name__}:resolve - {name!r} -> {card.id} via {strategy.value}")
                return self._from_catalog_card(card, strategy, include_prices)

        if self._tcgdex is not None:
            try:
                resolution = await self._by_tcgdex(name, number, include_prices)
            except CatalogLookupError as e:
                logger.warning(f"{__name__}:resolve - tcgdex failed for {name!r}: {e.message}")
                resolution = None
            if resolution is not None:
                logger.info(f"{__name__}:resolve - {name!r} -> {resolution.catalog_id} via tcgdex")
                return resolution

        logger.info(f"{__name__}:resolve - no match for {name!r}, using placeholder")
        return CardResolution(
            matched=False,
            strategy=MatchStrategy.PLACEHOLDER,
            image_url=self._placeholder_image_url,
        )

    async def _resolve_set(self, set_name: str | None) -> CatalogSet | None:
        if not set_name:
            return None
        card_set = match_set(await self._set_cache.get_sets(), set_name)
        if card_set is None:
            logger.debug(f"{__name__}:_resolve_set - unknown set {set_name!r}")
        return card_set

    async def _search(self, query: str) -> list[CatalogCard]:
        return await self._pokemontcg.search_cards(query, page_size=self._page_size)

    async def _by_set_and_number(
        self, name: str, card_set: CatalogSet, number: str
    ) -> CatalogCard | None:
        cards = await self._search(
            f'set.id:{card_set.id} number:"{escape_query_value(number)}"'
        )
        return _first(card for card in cards if names_match(card.name, name, partial=True))

    async def _by_name_and_number(
        self, name: str, number: str, card_set: CatalogSet | None
    ) -> CatalogCard | None:
        cards = await self._search(
            f'name:"{escape_query_value(name)}" number:"{escape_query_value(number)}"'
        )
        if card_set is None:
            return _first(cards)
        return _prefer(cards, lambda card: card.set is not None and card.set.id == card_set.id)

    async def _by_name_and_set(self, name: str, card_set: CatalogSet) -> CatalogCard | None:
        cards = await self._search(f'name:"{escape_query_value(name)}" set.id:{card_set.id}')
        return _first(cards)

    async def _by_name(self, name: str, number: str | None) -> CatalogCard | None:
        cards = await self._search(f'name:"{escape_query_value(name)}"')
        return _prefer(cards, lambda card: numbers_match(card.number, number))

    async def _by_partial_name(self, name: str, number: str | None) -> CatalogCard | None:
        tokens = query_tokens(name)
        if not tokens:
            return None
        cards = await self._search(" ".join(f"name:{token}*" for token in tokens))
        candidates = [card for card in cards if names_match(card.name, name, partial=True)]
        return _prefer(candidates, lambda card: numbers_match(card.number, number))

    async def _by_tcgdex(
        self, name: str, number: str | None, include_prices: bool
    ) -> CardResolution | None:
        briefs = await self._tcgdex.search_cards(name)
        candidates = [brief for brief in briefs if names_match(brief.name, name, partial=True)]
        brief: TcgdexCardBrief | None = (
            _first(c for c in candidates if numbers_match(c.local_id, number))
            or _first(c for c in candidates if names_match(c.name, name))
            or _first(candidates)
        )
        if brief is None:
            return None

        set_name = None
        price = None
        try:
            card = await self._tcgdex.get_card(brief.id)
        except CatalogLookupError as e:
            logger.warning(f"{__name__}:_by_tcgdex - detail fetch failed for {brief.id}: {e.message}")
            card = None
        if card is not None:
            set_name = card.set.name if card.set else None
            price = extract_tcgdex_price(card) if include_prices else None

        return CardResolution(
            matched=True,
            strategy=MatchStrategy.TCGDEX,
            image_url=brief.image_url or self._placeholder_image_url,
            catalog_id=brief.id,
            catalog_name=brief.name,
            catalog_set=set_name,
            price=price,
        )

    def _from_catalog_card(
        self, card: CatalogCard, strategy: MatchStrategy, include_prices: bool
    ) -> CardResolution:
        return CardResolution(
            matched=True,
            strategy=strategy,
            image_url=card.image_url or self._placeholder_image_url,
            catalog_id=card.id,
            catalog_name=card.name,
            catalog_set=card.set.name if card.set else None,
            price=extract_pokemontcg_price(card) if include_prices else None,
        )
