"""
Test suite for CardResolver.

Tests the ordered lookup stages, stage failure handling, the TCGdex
fallback and the placeholder outcome with mocked catalog clients.

System role: Verification of the card resolution heuristic
"""

from unittest.mock import AsyncMock

import httpx
import pytest
from tenacity import wait_none

from binder_scan.boundary.catalog import PokemonTcgClient, SetListCache, TcgdexClient
from binder_scan.boundary.catalog.catalog_schemas import (
    CatalogCard,
    TcgdexCard,
    TcgdexCardBrief,
)
from binder_scan.core.agentic_system.card_vision_agent import DetectedCard
from binder_scan.core.card_matching import CardResolver, MatchStrategy
from binder_scan.core.exceptions import CatalogLookupError

PLACEHOLDER = "https://example.test/card-back.jpg"


def fake_search(results: dict[str, list[CatalogCard]]):
    """Build a search_cards stand-in answering by exact query."""

    async def search_cards(query: str, page_size: int = 10) -> list[CatalogCard]:
        outcome = results.get(query, [])
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    return AsyncMock(side_effect=search_cards)


@pytest.fixture
def mock_pokemontcg() -> AsyncMock:
    """Provide mock Pokémon TCG client returning no cards."""
    client = AsyncMock()
    client.search_cards = fake_search({})
    return client


@pytest.fixture
def mock_set_cache(sample_sets) -> AsyncMock:
    """Provide mock set cache."""
    cache = AsyncMock()
    cache.get_sets = AsyncMock(return_value=sample_sets)
    return cache


@pytest.fixture
def mock_tcgdex() -> AsyncMock:
    """Provide mock TCGdex client returning no cards."""
    client = AsyncMock()
    client.search_cards = AsyncMock(return_value=[])
    client.get_card = AsyncMock(return_value=None)
    return client


@pytest.fixture
def resolver(mock_pokemontcg, mock_set_cache, mock_tcgdex) -> CardResolver:
    """Provide resolver wired to the mocks."""
    return CardResolver(
        pokemontcg=mock_pokemontcg,
        set_cache=mock_set_cache,
        tcgdex=mock_tcgdex,
        placeholder_image_url=PLACEHOLDER,
    )


class TestPokemonTcgStages:
    """Test suite for the Pokémon TCG API stages."""

    @pytest.mark.asyncio
    async def test_set_and_number_should_match_first(
        self, resolver, mock_pokemontcg, detected_charizard, charizard_card
    ) -> None:
        """Test a known set and number resolve in the first stage."""
        # Arrange
        mock_pokemontcg.search_cards = fake_search(
            {'set.id:sv3 number:"125"': [charizard_card]}
        )

        # Act
        resolution = await resolver.resolve(detected_charizard)

        # Assert
        assert resolution.matched is True
        assert resolution.strategy == MatchStrategy.SET_NUMBER
        assert resolution.catalog_id == "sv3-125"
        assert resolution.catalog_set == "Obsidian Flames"
        assert resolution.image_url == "https://images.pokemontcg.io/sv3/125_hires.png"
        assert resolution.price.amount == 24.99
        assert mock_pokemontcg.search_cards.await_count == 1

    @pytest.mark.asyncio
    async def test_set_number_with_other_name_should_fall_through(
        self, resolver, mock_pokemontcg, detected_charizard, charizard_card
    ) -> None:
        """Test a set/number hit naming another card is rejected."""
        # Arrange
        other = CatalogCard(id="sv3-125b", name="Pidgeot", number="125")
        mock_pokemontcg.search_cards = fake_search(
            {
                'set.id:sv3 number:"125"': [other],
                'name:"Charizard ex" number:"125"': [charizard_card],
            }
        )

        # Act
        resolution = await resolver.resolve(detected_charizard)

        # Assert
        assert resolution.strategy == MatchStrategy.NAME_NUMBER
        assert resolution.catalog_id == "sv3-125"

    @pytest.mark.asyncio
    async def test_name_number_should_prefer_detected_set(
        self, resolver, mock_pokemontcg, detected_charizard, charizard_card, sample_sets
    ) -> None:
        """Test the printing from the detected set wins over earlier results."""
        # Arrange
        reprint = CatalogCard(
            id="swsh9-125", name="Charizard ex", number="125", set=sample_sets[2]
        )
        mock_pokemontcg.search_cards = fake_search(
            {'name:"Charizard ex" number:"125"': [reprint, charizard_card]}
        )

        # Act
        resolution = await resolver.resolve(detected_charizard)

        # Assert
        assert resolution.strategy == MatchStrategy.NAME_NUMBER
        assert resolution.catalog_id == "sv3-125"

    @pytest.mark.asyncio
    async def test_name_and_set_should_match_without_number(
        self, resolver, mock_pokemontcg, charizard_card
    ) -> None:
        """Test the name/set stage when the number is unreadable."""
        # Arrange
        detected = DetectedCard(name="Charizard ex", set_name="OBF")
        mock_pokemontcg.search_cards = fake_search(
            {'name:"Charizard ex" set.id:sv3': [charizard_card]}
        )

        # Act
        resolution = await resolver.resolve(detected)

        # Assert
        assert resolution.strategy == MatchStrategy.NAME_SET

    @pytest.mark.asyncio
    async def test_name_stage_should_prefer_number_match(
        self, resolver, mock_pokemontcg
    ) -> None:
        """Test the name stage picks the printing with the reported number."""
        # Arrange
        detected = DetectedCard(name="Charizard", set_name="Mystery Set", number="4")
        newest = CatalogCard(id="pgo-10", name="Charizard", number="10")
        base = CatalogCard(id="base1-4", name="Charizard", number="4")
        mock_pokemontcg.search_cards = fake_search({'name:"Charizard"': [newest, base]})

        # Act
        resolution = await resolver.resolve(detected)

        # Assert
        assert resolution.strategy == MatchStrategy.NAME
        assert resolution.catalog_id == "base1-4"

    @pytest.mark.asyncio
    async def test_partial_name_should_use_prefix_wildcards(
        self, resolver, mock_pokemontcg, charizard_card
    ) -> None:
        """Test the partial stage queries base-name tokens as wildcards."""
        # Arrange
        detected = DetectedCard(name="Charizard EX")
        mock_pokemontcg.search_cards = fake_search({"name:charizard*": [charizard_card]})

        # Act
        resolution = await resolver.resolve(detected)

        # Assert
        assert resolution.strategy == MatchStrategy.PARTIAL_NAME
        queries = [call.args[0] for call in mock_pokemontcg.search_cards.await_args_list]
        assert queries == ['name:"Charizard EX"', "name:charizard*"]

    @pytest.mark.asyncio
    async def test_failed_stage_should_be_skipped(
        self, resolver, mock_pokemontcg, charizard_card
    ) -> None:
        """Test a catalog error in one stage moves on to the next."""
        # Arrange
        detected = DetectedCard(name="Charizard ex")
        mock_pokemontcg.search_cards = fake_search(
            {
                'name:"Charizard ex"': CatalogLookupError("boom", source="pokemontcg"),
                "name:charizard*": [charizard_card],
            }
        )

        # Act
        resolution = await resolver.resolve(detected)

        # Assert
        assert resolution.matched is True
        assert resolution.strategy == MatchStrategy.PARTIAL_NAME

    @pytest.mark.asyncio
    async def test_include_prices_false_should_omit_price(
        self, resolver, mock_pokemontcg, detected_charizard, charizard_card
    ) -> None:
        """Test prices are not attached when disabled."""
        # Arrange
        mock_pokemontcg.search_cards = fake_search(
            {'set.id:sv3 number:"125"': [charizard_card]}
        )

        # Act
        resolution = await resolver.resolve(detected_charizard, include_prices=False)

        # Assert
        assert resolution.matched is True
        assert resolution.price is None


class TestFallbacks:
    """Test suite for the TCGdex and placeholder outcomes."""

    @pytest.mark.asyncio
    async def test_tcgdex_should_resolve_when_pokemontcg_has_nothing(
        self, resolver, mock_tcgdex
    ) -> None:
        """Test TCGdex match with detail set name and price."""
        # Arrange
        detected = DetectedCard(name="Charizard ex", number="199")
        mock_tcgdex.search_cards.return_value = [
            TcgdexCardBrief(id="sv03-125", localId="125", name="Charizard ex",
                            image="https://assets.tcgdex.net/en/sv/sv03/125"),
            TcgdexCardBrief(id="sv03-199", localId="199", name="Charizard ex",
                            image="https://assets.tcgdex.net/en/sv/sv03/199"),
        ]
        mock_tcgdex.get_card.return_value = TcgdexCard(
            id="sv03-199",
            localId="199",
            name="Charizard ex",
            set={"id": "sv03", "name": "Obsidian Flames"},
            pricing={"cardmarket": {"trend": 80.0}},
        )

        # Act
        resolution = await resolver.resolve(detected)

        # Assert
        assert resolution.strategy == MatchStrategy.TCGDEX
        assert resolution.catalog_id == "sv03-199"
        assert resolution.image_url == "https://assets.tcgdex.net/en/sv/sv03/199/high.webp"
        assert resolution.catalog_set == "Obsidian Flames"
        assert resolution.price.currency == "EUR"
        mock_tcgdex.get_card.assert_awaited_once_with("sv03-199")

    @pytest.mark.asyncio
    async def test_tcgdex_detail_failure_should_keep_match(
        self, resolver, mock_tcgdex
    ) -> None:
        """Test a failing detail fetch still returns the search match."""
        # Arrange
        detected = DetectedCard(name="Pikachu")
        mock_tcgdex.search_cards.return_value = [
            TcgdexCardBrief(id="base1-58", localId="58", name="Pikachu",
                            image="https://assets.tcgdex.net/en/base/base1/58"),
        ]
        mock_tcgdex.get_card.side_effect = CatalogLookupError("down", source="tcgdex")

        # Act
        resolution = await resolver.resolve(detected)

        # Assert
        assert resolution.matched is True
        assert resolution.catalog_set is None
        assert resolution.price is None

    @pytest.mark.asyncio
    async def test_should_return_placeholder_when_nothing_matches(
        self, resolver, mock_tcgdex
    ) -> None:
        """Test the placeholder outcome."""
        # Arrange
        mock_tcgdex.search_cards.side_effect = CatalogLookupError("down", source="tcgdex")

        # Act
        resolution = await resolver.resolve(DetectedCard(name="Missingno"))

        # Assert
        assert resolution.matched is False
        assert resolution.strategy == MatchStrategy.PLACEHOLDER
        assert resolution.image_url == PLACEHOLDER
        assert resolution.catalog_id is None

    @pytest.mark.asyncio
    async def test_disabled_tcgdex_should_go_straight_to_placeholder(
        self, mock_pokemontcg, mock_set_cache
    ) -> None:
        """Test resolver without a TCGdex client."""
        # Arrange
        resolver = CardResolver(
            pokemontcg=mock_pokemontcg,
            set_cache=mock_set_cache,
            placeholder_image_url=PLACEHOLDER,
        )

        # Act
        resolution = await resolver.resolve(DetectedCard(name="Missingno"))

        # Assert
        assert resolution.strategy == MatchStrategy.PLACEHOLDER


class TestMisbehavingCatalogs:
    """Test suite for resolution against real clients whose HTTP calls fail."""

    @pytest.mark.asyncio
    async def test_redirect_loop_should_degrade_to_placeholder(self) -> None:
        """Test httpx errors outside the retry set still skip stages."""
        # Arrange
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(302, headers={"Location": str(request.url)})

        http_client = httpx.AsyncClient(
            transport=httpx.MockTransport(handler), follow_redirects=True
        )
        pokemontcg = PokemonTcgClient(
            http_client, base_url="https://api.pokemontcg.test/v2", retry_wait=wait_none()
        )
        resolver = CardResolver(
            pokemontcg=pokemontcg,
            set_cache=SetListCache(pokemontcg, ttl_seconds=60),
            tcgdex=TcgdexClient(
                http_client, base_url="https://api.tcgdex.test/v2", retry_wait=wait_none()
            ),
            placeholder_image_url=PLACEHOLDER,
        )

        # Act
        async with http_client:
            resolution = await resolver.resolve(
                DetectedCard(name="Pikachu", set_name="151", number="25")
            )

        # Assert
        assert resolution.strategy == MatchStrategy.PLACEHOLDER
        assert resolution.image_url == PLACEHOLDER
