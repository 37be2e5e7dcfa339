"""
Location key normalization for dataset lookups.

US locations are keyed by ZIP (five digits, with a three-digit prefix
fallback); Canadian locations by FSA, the first three characters of the
postal code.
"""
import re
from typing import List, Optional

from growbydate.core.types import LocationKey

_LETTER = re.compile(r"[a-z]", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")
_NON_DIGIT = re.compile(r"\D+")
_ZIP5 = re.compile(r"^\d{5}$")


def normalize_location_key(raw: Optional[str]) -> LocationKey:
    """
    Normalize free-form ZIP / postal code input to a lookup key.

    Input containing any letter is treated as a postal code: uppercased,
    whitespace removed, first three characters kept. Anything else is a ZIP:
    non-digits removed, first five digits kept.

    Returns "" when nothing usable remains.
    """
    s = str(raw or "").strip()
    if not s:
        return ""

    if _LETTER.search(s):
        return _WHITESPACE.sub("", s.upper())[:3]

    return _NON_DIGIT.sub("", s)[:5]


def is_zip5(key: LocationKey) -> bool:
    return bool(_ZIP5.match(key or ""))


def candidate_keys(key: LocationKey) -> List[LocationKey]:
    """Exact key first, then the ZIP3 prefix for five-digit ZIPs."""
    if not key:
        return []
    candidates = [key]
    if is_zip5(key):
        candidates.append(key[:3])
    return candidates
