"""Card matching heuristics: normalization, set matching, pricing and resolution."""

from .resolver import CardResolution, CardResolver, MatchStrategy

__all__ = ["CardResolution", "CardResolver", "MatchStrategy"]
