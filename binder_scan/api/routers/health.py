"""
Health check API endpoint.

Routes: GET /health

Dependencies: binder_scan.configs
System role: Health check HTTP API
"""

from fastapi import APIRouter, Depends

from binder_scan.api.deps import get_settings_dependency
from binder_scan.configs import Settings
from binder_scan.models.common import CamelModel


class HealthResponse(CamelModel):
    """Health check response model."""

    ok: bool
    service: str
    version: str
    vision_provider: str
    vision_model: str
    has_vision_key: bool
    has_pokemon_tcg_key: bool


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_settings_dependency),
) -> HealthResponse:
    """Report service identity and which provider keys are configured."""
    return HealthResponse(
        ok=True,
        service=settings.service_name,
        version=settings.version,
        vision_provider=settings.vision.provider,
        vision_model=settings.vision.model,
        has_vision_key=bool(settings.vision.api_key),
        has_pokemon_tcg_key=bool(settings.catalog.pokemontcg_api_key),
    )
