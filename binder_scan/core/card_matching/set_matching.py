"""
Set name matching against the cached set list.

Dependencies: binder_scan.core.card_matching.normalization
System role: Maps a model-reported set name to a catalog set id
"""

from binder_scan.boundary.catalog.catalog_schemas import CatalogSet
from binder_scan.core.card_matching.normalization import normalize_name


def _set_key(value: str | None) -> str:
    return normalize_name(value).replace(" and ", " & ")


def match_set(sets: list[CatalogSet], set_name: str | None) -> CatalogSet | None:
    """
    Find the set a model-reported name refers to.

    Tries, in order: exact normalized name, exact set id or PTCGO code, then
    containment in either direction. Among partial matches the most recent
    release wins.

    Args:
        sets: Catalog set list
        set_name: Set name or code as reported by the vision model

    Returns:
        CatalogSet | None: Matching set, or None
    """
    target = _set_key(set_name)
    if not target or not sets:
        return None

    for card_set in sets:
        if _set_key(card_set.name) == target:
            return card_set

    code = set_name.strip().lower()
    for card_set in sets:
        if card_set.id.lower() == code:
            return card_set
        if card_set.ptcgo_code and card_set.ptcgo_code.lower() == code:
            return card_set

    partial = []
    for card_set in sets:
        key = _set_key(card_set.name)
        if key and (key in target or target in key):
            partial.append(card_set)
    if not partial:
        return None
    return max(partial, key=lambda card_set: card_set.release_date or "")
