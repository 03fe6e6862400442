"""
Dependency injection container.

Factory functions for FastAPI dependencies. Long-lived objects (the HTTP
client, catalog clients, set list cache, vision agent and tracer) are built
lazily once per process and shared by all requests.

Dependencies: binder_scan.configs, binder_scan.application, binder_scan.boundary
System role: DI container for service injection
"""

import logging

import httpx
from fastapi import Depends

from binder_scan.application.services import ScanService
from binder_scan.configs import Settings, get_settings

logger = logging.getLogger(__name__)


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self, settings: Settings | None = None):
        self._settings = settings
        self._http_client = None
        self._pokemontcg_client = None
        self._tcgdex_client = None
        self._set_cache = None
        self._card_resolver = None
        self._vision_agent = None
        self._tracer = None

    @property
    def settings(self) -> Settings:
        """Get settings, the process-wide ones unless injected."""
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Get shared HTTP client for catalog requests."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self.settings.catalog.timeout_seconds,
                headers={"Accept": "application/json"},
                follow_redirects=True,
            )
        return self._http_client

    @property
    def pokemontcg_client(self):
        """Get cached Pokémon TCG API client."""
        if self._pokemontcg_client is None:
            from binder_scan.boundary.catalog import PokemonTcgClient

            catalog = self.settings.catalog
            self._pokemontcg_client = PokemonTcgClient(
                self.http_client,
                base_url=catalog.pokemontcg_base_url,
                api_key=catalog.pokemontcg_api_key,
                max_attempts=catalog.max_retries,
            )
        return self._pokemontcg_client

    @property
    def tcgdex_client(self):
        """Get cached TCGdex client, None when the fallback is disabled."""
        catalog = self.settings.catalog
        if self._tcgdex_client is None and catalog.enable_tcgdex_fallback:
            from binder_scan.boundary.catalog import TcgdexClient

            self._tcgdex_client = TcgdexClient(
                self.http_client,
                base_url=catalog.tcgdex_base_url,
                language=catalog.tcgdex_language,
                max_attempts=catalog.max_retries,
            )
        return self._tcgdex_client

    @property
    def set_cache(self):
        """Get cached set list cache."""
        if self._set_cache is None:
            from binder_scan.boundary.catalog import SetListCache

            self._set_cache = SetListCache(
                self.pokemontcg_client,
                ttl_seconds=self.settings.catalog.set_cache_ttl_seconds,
            )
        return self._set_cache

    @property
    def card_resolver(self):
        """Get cached card resolver."""
        if self._card_resolver is None:
            from binder_scan.core.card_matching import CardResolver

            catalog = self.settings.catalog
            self._card_resolver = CardResolver(
                pokemontcg=self.pokemontcg_client,
                set_cache=self.set_cache,
                tcgdex=self.tcgdex_client,
                placeholder_image_url=catalog.placeholder_image_url,
                page_size=catalog.search_page_size,
            )
        return self._card_resolver

    @property
    def vision_agent(self):
        """Get cached vision agent."""
        if self._vision_agent is None:
            from binder_scan.core.agentic_system.card_vision_agent import CardVisionAgent

            self._vision_agent = CardVisionAgent(settings=self.settings.vision)
        return self._vision_agent

    @property
    def tracer(self):
        """Get cached Langfuse tracer."""
        if self._tracer is None:
            from binder_scan.observability import LangfuseTracer

            self._tracer = LangfuseTracer(self.settings.observability)
        return self._tracer

    async def aclose(self) -> None:
        """Flush traces, close the HTTP client and drop all instances."""
        if self._tracer is not None:
            self._tracer.flush()
        if self._http_client is not None:
            await self._http_client.aclose()
            logger.info("Catalog HTTP client closed")
        self.clear()

    def clear(self) -> None:
        """Clear all cached instances."""
        self._http_client = None
        self._pokemontcg_client = None
        self._tcgdex_client = None
        self._set_cache = None
        self._card_resolver = None
        self._vision_agent = None
        self._tracer = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_scan_service(cache: ServiceCache = Depends(get_service_cache)) -> ScanService:
    """
    Get scan service instance.

    Args:
        cache: Shared service cache (injected via Depends)

    Returns:
        ScanService: Scan service wired to the cached agent and resolver
    """
    settings = cache.settings
    return ScanService(
        vision_agent=cache.vision_agent,
        resolver=cache.card_resolver,
        tracer=cache.tracer,
        default_variant=settings.vision.prompt_variant,
        include_prices=settings.catalog.include_prices,
    )
