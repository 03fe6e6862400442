"""
Pokémon TCG API client.

Provides set listing and card search against api.pokemontcg.io (v2). Card
search uses the API's `q` query syntax; callers are responsible for escaping
values (see card_matching.normalization.escape_query_value).

Dependencies: httpx, pydantic, binder_scan.boundary.catalog
System role: Primary card catalog (images and TCGplayer/Cardmarket prices)
"""

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError
from tenacity.wait import wait_base

from binder_scan.boundary.catalog.catalog_schemas import CatalogCard, CatalogSet
from binder_scan.boundary.catalog.http_utils import get_with_retry, read_json

logger = logging.getLogger(__name__)

SOURCE = "pokemontcg"
SET_PAGE_SIZE = 250

M = TypeVar("M", bound=BaseModel)


def _parse_records(records: list[Any], model: type[M]) -> list[M]:
    """Validate records, skipping the ones that do not fit the schema."""
    parsed: list[M] = []
    for record in records:
        try:
            parsed.append(model.model_validate(record))
        except ValidationError as e:
            logger.warning(
                f"{__name__}:_parse_records - skipping invalid {model.__name__}: "
                f"{e.error_count()} errors"
            )
    return parsed


class PokemonTcgClient:
    """Async client for the Pokémon TCG API."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str = "https://api.pokemontcg.io/v2",
        api_key: str | None = None,
        max_attempts: int = 3,
        retry_wait: wait_base | None = None,
    ) -> None:
        """
        Initialize client.

        Args:
            http_client: Shared async HTTP client
            base_url: API root, without trailing slash
            api_key: Optional key sent as X-Api-Key
            max_attempts: Attempts per request
            retry_wait: Tenacity wait strategy (default exponential jitter)
        """
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._headers = {"X-Api-Key": api_key} if api_key else {}
        self._max_attempts = max_attempts
        self._retry_wait = retry_wait

    async def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        response = await get_with_retry(
            self._http,
            f"{self._base_url}{path}",
            source=SOURCE,
            params=params,
            headers=self._headers,
            max_attempts=self._max_attempts,
            wait=self._retry_wait,
        )
        payload = read_json(response, SOURCE)
        return payload if isinstance(payload, dict) else {}

    async def list_sets(self) -> list[CatalogSet]:
        """
        Fetch every set, newest first.

        Returns:
            list[CatalogSet]: All sets known to the API

        Raises:
            CatalogLookupError: If a page cannot be fetched
        """
        sets: list[CatalogSet] = []
        page = 1
        while True:
            payload = await self._get(
                "/sets",
                {"page": page, "pageSize": SET_PAGE_SIZE, "orderBy": "-releaseDate"},
            )
            data = payload.get("data") or []
            sets.extend(_parse_records(data, CatalogSet))

            total = payload.get("totalCount") or 0
            if not data or page * SET_PAGE_SIZE >= total:
                break
            page += 1

        logger.info(f"{__name__}:list_sets - fetched {len(sets)} sets")
        return sets

    async def search_cards(
        self,
        query: str,
        page_size: int = 10,
        order_by: str = "-set.releaseDate",
    ) -> list[CatalogCard]:
        """
        Search cards with the `q` syntax.

        Args:
            query: Search expression, e.g. 'name:"pikachu" number:25'
            page_size: Maximum cards returned
            order_by: Sort expression

        Returns:
            list[CatalogCard]: Matching cards (possibly empty)

        Raises:
            CatalogLookupError: If the request fails
        """
        payload = await self._get(
            "/cards",
            {"q": query, "pageSize": page_size, "orderBy": order_by},
        )
        cards = _parse_records(payload.get("data") or [], CatalogCard)
        logger.debug(f"{__name__}:search_cards - q={query!r} results={len(cards)}")
        return cards
