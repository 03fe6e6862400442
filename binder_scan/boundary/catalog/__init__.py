"""External card database clients."""

from .catalog_schemas import CatalogCard, CatalogSet, TcgdexCard, TcgdexCardBrief
from .pokemontcg_client import PokemonTcgClient
from .set_cache import SetListCache
from .tcgdex_client import TcgdexClient

__all__ = [
    "CatalogCard",
    "CatalogSet",
    "PokemonTcgClient",
    "SetListCache",
    "TcgdexCard",
    "TcgdexCardBrief",
    "TcgdexClient",
]
