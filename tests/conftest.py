"""
Shared test fixtures and configuration for entire test suite.

Provides: sample image payloads, detected cards, catalog records, settings
Dependencies: pytest
System role: Test infrastructure and fixture management
"""

import base64

import pytest

from binder_scan.boundary.catalog.catalog_schemas import CatalogCard, CatalogSet
from binder_scan.configs import Settings
from binder_scan.configs.catalog import CatalogSettings
from binder_scan.configs.observability import ObservabilitySettings
from binder_scan.configs.server import ServerSettings
from binder_scan.configs.vision import VisionSettings
from binder_scan.core.agentic_system.card_vision_agent import DetectedCard

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + b"\x00" * 16
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 16


@pytest.fixture
def png_bytes() -> bytes:
    """Provide bytes starting with the PNG signature."""
    return PNG_BYTES


@pytest.fixture
def jpeg_bytes() -> bytes:
    """Provide bytes starting with the JPEG signature."""
    return JPEG_BYTES


@pytest.fixture
def png_base64() -> str:
    """Provide base64 of the sample PNG."""
    return base64.b64encode(PNG_BYTES).decode("ascii")


@pytest.fixture
def test_settings() -> Settings:
    """Provide settings independent of the environment."""
    return Settings(
        vision=VisionSettings(provider="openai", model="gpt-4o-mini", openai_api_key="sk-test"),
        catalog=CatalogSettings(pokemontcg_api_key=None),
        server=ServerSettings(max_image_bytes=1024),
        observability=ObservabilitySettings(enable_tracing=False),
    )


@pytest.fixture
def sample_sets() -> list[CatalogSet]:
    """Provide a small set list, newest first."""
    return [
        CatalogSet(id="sv3pt5", name="151", ptcgoCode="MEW", releaseDate="2023/09/22"),
        CatalogSet(id="sv3", name="Obsidian Flames", ptcgoCode="OBF", releaseDate="2023/08/11"),
        CatalogSet(id="swsh9", name="Brilliant Stars", ptcgoCode="BRS", releaseDate="2022/02/25"),
        CatalogSet(id="base1", name="Base", ptcgoCode="BS", releaseDate="1999/01/09"),
    ]


@pytest.fixture
def charizard_card(sample_sets: list[CatalogSet]) -> CatalogCard:
    """Provide a priced Pokémon TCG API card."""
    return CatalogCard(
        id="sv3-125",
        name="Charizard ex",
        number="125",
        set=sample_sets[1],
        images={
            "small": "https://images.pokemontcg.io/sv3/125.png",
            "large": "https://images.pokemontcg.io/sv3/125_hires.png",
        },
        tcgplayer={
            "url": "https://prices.pokemontcg.io/tcgplayer/sv3-125",
            "updatedAt": "2024/01/05",
            "prices": {"holofoil": {"low": 20.0, "mid": 25.5, "market": 24.987}},
        },
    )


@pytest.fixture
def detected_charizard() -> DetectedCard:
    """Provide a detected card with set and number."""
    return DetectedCard(
        name="Charizard ex",
        set_name="Obsidian Flames",
        number="125/197",
        confidence=0.9,
    )
