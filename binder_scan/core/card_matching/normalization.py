"""
String normalization for card names and collector numbers.

Vision model output is noisy: accents come and go, suffixes change case,
collector numbers arrive padded and with the set total attached. These
helpers reduce both sides of a comparison to the same form.

Dependencies: re, unicodedata
System role: Matching primitives for card resolution
"""

import re
import unicodedata

# Mechanic suffixes dropped by base_name, matched against normalized tokens
NAME_SUFFIXES = frozenset({
    "ex", "gx", "v", "vmax", "vstar", "v-union", "break", "prime", "star",
})
# "Lv.X" normalizes to two tokens and is only dropped as a pair
_LEVEL_X = ["lv", "x"]

_APOSTROPHES = str.maketrans({"’": "'", "‘": "'", "`": "'", "´": "'"})
_DISALLOWED_NAME_CHARS = re.compile(r"[^a-z0-9'&\- ]+")
_WHITESPACE = re.compile(r"\s+")
_NUMBER_PREFIX = re.compile(r"^(?:no\.?|#)\s*", re.IGNORECASE)
_PREFIXED_NUMBER = re.compile(r"([A-Z]+)0*(\d+)([A-Z]*)")
_QUERY_TOKEN = re.compile(r"[a-z0-9]+")


def strip_accents(value: str) -> str:
    """Remove combining marks (Pokémon -> Pokemon)."""
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_name(value: str | None) -> str:
    """
    Canonical comparison form of a card or set name.

    Args:
        value: Raw name

    Returns:
        str: Lower-case, accent-free name with punctuation other than
            apostrophes, ampersands and hyphens replaced by spaces
    """
    if not value:
        return ""
    text = strip_accents(value).translate(_APOSTROPHES).lower()
    text = _DISALLOWED_NAME_CHARS.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def base_name(value: str | None) -> str:
    """Normalized name without trailing mechanic suffixes (Charizard ex -> charizard)."""
    tokens = normalize_name(value).split()
    while len(tokens) > 1:
        if tokens[-2:] == _LEVEL_X and len(tokens) > 2:
            del tokens[-2:]
        elif tokens[-1] in NAME_SUFFIXES:
            tokens.pop()
        else:
            break
    return " ".join(tokens)


def normalize_number(value: str | int | None) -> str | None:
    """
    Collector number in the form the catalog stores it.

    "025/198" -> "25", "#7" -> "7", "tg05" -> "TG05". Purely numeric values
    lose their padding; alphanumeric ones keep it since the catalog does.

    Args:
        value: Number as read from the card

    Returns:
        str | None: Normalized number, or None when nothing usable remains
    """
    if value is None:
        return None
    text = _NUMBER_PREFIX.sub("", str(value).strip())
    text = text.split("/", 1)[0]
    text = _WHITESPACE.sub("", text).upper()
    if not text:
        return None
    if text.isdigit():
        return str(int(text))
    return text


def number_key(value: str | int | None) -> str | None:
    """Comparison key for collector numbers, ignoring zero padding (TG05 == TG5)."""
    number = normalize_number(value)
    if number is None:
        return None
    match = _PREFIXED_NUMBER.fullmatch(number)
    if match:
        prefix, digits, suffix = match.groups()
        return f"{prefix}{int(digits)}{suffix}"
    return number


def numbers_match(left: str | int | None, right: str | int | None) -> bool:
    """True when both numbers are known and equal after normalization."""
    left_key = number_key(left)
    return left_key is not None and left_key == number_key(right)


def names_match(candidate: str | None, target: str | None, partial: bool = False) -> bool:
    """
    Compare a catalog name with a detected name.

    Exact mode compares normalized forms. Partial mode also accepts one
    name's base tokens being contained in the other's tokens, so
    "Charizard" matches "Charizard ex" and "Dark Charizard".

    Args:
        candidate: Catalog name
        target: Detected name
        partial: Allow token containment

    Returns:
        bool: Whether the names match
    """
    normalized_candidate = normalize_name(candidate)
    normalized_target = normalize_name(target)
    if not normalized_candidate or not normalized_target:
        return False
    if normalized_candidate == normalized_target:
        return True
    if not partial:
        return False

    candidate_tokens = set(normalized_candidate.split())
    target_tokens = set(normalized_target.split())
    return (
        set(base_name(target).split()) <= candidate_tokens
        or set(base_name(candidate).split()) <= target_tokens
    )


def query_tokens(value: str | None) -> list[str]:
    """Alphanumeric tokens of the base name usable as prefix wildcards."""
    return [token for token in _QUERY_TOKEN.findall(base_name(value)) if len(token) >= 2]


def escape_query_value(value: str) -> str:
    """Escape a value for a double-quoted term in the Pokémon TCG `q` syntax."""
    return value.replace("\\", "\\\\").replace('"', '\\"')
