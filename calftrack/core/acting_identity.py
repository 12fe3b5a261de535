"""Acting Identity — derive the "created by" stamp from verified token claims.

Invariants:
    - Pure: claims dict in, display name (or None) out
    - Blank values never win over later fallbacks

Design Decisions:
    - Claims are consumed as opaque data; token verification happens upstream
"""


def identity_from_claims(claims: dict | None) -> str | None:
    """name → given+family name → preferred_username → nickname."""
    if not claims:
        return None
    full_name = " ".join(
        str(claims[part]).strip()
        for part in ("given_name", "family_name")
        if claims.get(part) and str(claims[part]).strip()
    )
    for candidate in (
        claims.get("name"), full_name,
        claims.get("preferred_username"), claims.get("nickname"),
    ):
        text = str(candidate or "").strip()
        if text:
            return text
    return None
