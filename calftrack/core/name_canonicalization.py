"""Name Canonicalization — pure normalisation of free-text master data.

Invariants:
    - canonical_name() is what gets stored: trimmed, single-spaced, Title Case
    - lookup_key() is what gets compared: no diacritics, lowercase,
      non-alphanumerics collapsed to single spaces
    - Two names are "the same" iff their lookup keys are equal
    - Seller identity = name key + address/city/state/zip keys

Design Decisions:
    - Separate stored form from comparison form: "Angus", " ANGUS ", "angus."
      all map to one row while the row keeps a readable name
    - Fuzzy matching is opt-in (catalog-only mode) and never used on the
      create path, so canonicalization stays deterministic
"""

import re
import unicodedata
from difflib import SequenceMatcher


FUZZY_MATCH_THRESHOLD: float = 0.76
MIN_FUZZY_LENGTH: int = 4

_WHITESPACE = re.compile(r"\s+")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize_whitespace(value: object) -> str:
    return _WHITESPACE.sub(" ", str(value or "").strip())


def strip_diacritics(value: str) -> str:
    decomposed = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def lookup_key(value: object) -> str:
    """Comparison form: 'Charolais-Cross ' and 'charolais cross' collide."""
    text = strip_diacritics(normalize_whitespace(value)).lower()
    return _NON_ALNUM.sub(" ", text).strip()


def canonical_name(value: object) -> str:
    """Stored form. Capitalises the first letter of every word."""
    text = normalize_whitespace(value).lower()
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), text)


def normalize_state(value: object) -> str | None:
    letters = re.sub(r"[^A-Z]", "", normalize_whitespace(value).upper())
    if not letters:
        return None
    return letters[:2]


def normalize_zip_code(value: object) -> str | None:
    digits = re.sub(r"\D", "", str(value or ""))
    if not digits:
        return None
    if len(digits) >= 9:
        return f"{digits[:5]}-{digits[5:9]}"
    return digits[:5]


def normalize_order_index(value: object) -> int | None:
    """Non-negative integer or None (None means 'assign automatically')."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = int(float(value))
    except (TypeError, ValueError):
        return None
    return number if number >= 0 else None


def breed_identity_key(name: object) -> str:
    return lookup_key(name)


def seller_identity_key(
    name: object,
    address: object = None,
    city: object = None,
    state: object = None,
    zip_code: object = None,
) -> str:
    return "|".join(
        lookup_key(part) for part in (name, address, city, state, zip_code)
    )


def normalize_seller_fields(
    name: object,
    address: object = None,
    city: object = None,
    state: object = None,
    zip_code: object = None,
) -> dict:
    """Seller payload as stored: canonical name and cleaned address tuple."""
    return {
        "name": canonical_name(name),
        "address": normalize_whitespace(address) or None,
        "city": canonical_name(city) or None,
        "state": normalize_state(state),
        "zip_code": normalize_zip_code(zip_code),
    }


def _collapsed(value: object) -> str:
    return lookup_key(value).replace(" ", "")


def best_fuzzy_match(raw: object, candidates: list[str]) -> str | None:
    """Closest existing name for catalog-only lookups, or None.

    Exact key match first, then containment (inputs of 4+ chars), then the
    highest similarity ratio at or above FUZZY_MATCH_THRESHOLD.
    """
    key = lookup_key(raw)
    collapsed = _collapsed(raw)
    if not key or not collapsed:
        return None

    pool = [
        (name, lookup_key(name), _collapsed(name))
        for name in candidates if lookup_key(name)
    ]
    for name, cand_key, cand_collapsed in pool:
        if cand_key == key or cand_collapsed == collapsed:
            return name

    if len(collapsed) < MIN_FUZZY_LENGTH:
        return None

    for name, _, cand_collapsed in pool:
        if collapsed in cand_collapsed or cand_collapsed in collapsed:
            return name

    best_name, best_score = None, 0.0
    for name, _, cand_collapsed in pool:
        score = SequenceMatcher(None, collapsed, cand_collapsed).ratio()
        if score > best_score:
            best_name, best_score = name, score
    return best_name if best_score >= FUZZY_MATCH_THRESHOLD else None
