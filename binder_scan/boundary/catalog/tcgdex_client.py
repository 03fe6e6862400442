"""TCGdex REST client.

Secondary catalog used when the Pokémon TCG API has no match. Name search
uses the TCGdex "like" filter (case-insensitive containment).

Docs:
- https://tcgdex.dev/rest
- https://tcgdex.dev/rest/filtering-sorting-pagination
"""

import logging
from urllib.parse import quote

import httpx
from pydantic import ValidationError
from tenacity.wait import wait_base

from binder_scan.boundary.catalog.catalog_schemas import TcgdexCard, TcgdexCardBrief
from binder_scan.boundary.catalog.http_utils import get_with_retry, read_json
from binder_scan.core.exceptions import CatalogLookupError

logger = logging.getLogger(__name__)

SOURCE = "tcgdex"


class TcgdexClient:
    """Async client for the TCGdex API."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str = "https://api.tcgdex.net/v2",
        language: str = "en",
        max_attempts: int = 3,
        retry_wait: wait_base | None = None,
    ) -> None:
        self._http = http_client
        self._root = f"{base_url.rstrip('/')}/{quote(language)}"
        self._max_attempts = max_attempts
        self._retry_wait = retry_wait

    async def _get(self, url: str, params: dict[str, str] | None = None) -> httpx.Response:
        return await get_with_retry(
            self._http,
            url,
            source=SOURCE,
            params=params,
            max_attempts=self._max_attempts,
            wait=self._retry_wait,
        )

    async def search_cards(self, name: str) -> list[TcgdexCardBrief]:
        """Cards whose name contains `name`."""
        response = await self._get(f"{self._root}/cards", params={"name": name})
        if response.status_code == 404:
            return []
        payload = read_json(response, SOURCE)
        if not isinstance(payload, list):
            return []

        cards: list[TcgdexCardBrief] = []
        for record in payload:
            try:
                cards.append(TcgdexCardBrief.model_validate(record))
            except ValidationError:
                logger.debug(f"{__name__}:search_cards - skipping invalid record")
        return cards

    async def get_card(self, card_id: str) -> TcgdexCard | None:
        """Full card record, or None when TCGdex does not know the id."""
        response = await self._get(f"{self._root}/cards/{quote(card_id, safe='')}")
        if response.status_code == 404:
            return None
        payload = read_json(response, SOURCE)
        try:
            return TcgdexCard.model_validate(payload)
        except ValidationError as e:
            raise CatalogLookupError(
                "tcgdex returned an unexpected card payload",
                source=SOURCE,
                details={"card_id": card_id},
            ) from e
