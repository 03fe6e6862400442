"""
In-memory set list cache.

Holds the Pokémon TCG set list for a fixed lifetime (12 hours by default).
An expired list is refreshed on the next read; when the refresh fails the
stale list keeps being served, and with nothing cached an empty list is
returned so card resolution can continue without set information.

Dependencies: time, binder_scan.boundary.catalog.pokemontcg_client
System role: Read-mostly cache of static reference data
"""

import logging
import time
from collections.abc import Callable

from binder_scan.boundary.catalog.catalog_schemas import CatalogSet
from binder_scan.boundary.catalog.pokemontcg_client import PokemonTcgClient
from binder_scan.core.exceptions import CatalogLookupError

logger = logging.getLogger(__name__)


class SetListCache:
    """Time-expiring cache of the catalog's set list."""

    def __init__(
        self,
        client: PokemonTcgClient,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize cache.

        Args:
            client: Pokémon TCG API client used to load sets
            ttl_seconds: Lifetime of a loaded list
            clock: Monotonic time source (injectable for tests)
        """
        self._client = client
        self._ttl = ttl_seconds
        self._clock = clock
        self._sets: list[CatalogSet] | None = None
        self._expires_at = 0.0

    @property
    def is_fresh(self) -> bool:
        """True when a list is cached and has not expired."""
        return self._sets is not None and self._clock() < self._expires_at

    async def get_sets(self) -> list[CatalogSet]:
        """
        Return the cached set list, loading it when missing or expired.

        Returns:
            list[CatalogSet]: Set list (stale or empty when loading fails)
        """
        if self.is_fresh:
            return self._sets

        try:
            sets = await self._client.list_sets()
        except CatalogLookupError as e:
            if self._sets is not None:
                logger.warning(
                    f"{__name__}:get_sets - refresh failed, serving stale list "
                    f"({len(self._sets)} sets): {e.message}"
                )
                return self._sets
            logger.warning(f"{__name__}:get_sets - load failed, no sets cached: {e.message}")
            return []

        self._sets = sets
        self._expires_at = self._clock() + self._ttl
        logger.info(f"{__name__}:get_sets - cached {len(sets)} sets for {self._ttl:.0f}s")
        return sets

    def invalidate(self) -> None:
        """Drop the cached list."""
        self._sets = None
        self._expires_at = 0.0
