"""Acting Identity — created_by stamp from token claims."""

from calftrack.core.acting_identity import identity_from_claims


def test_name_claim_wins():
    assert identity_from_claims({"name": "Dana Ruiz", "nickname": "dr"}) == "Dana Ruiz"


def test_given_and_family_name_joined():
    assert identity_from_claims({"given_name": "Dana", "family_name": "Ruiz"}) == "Dana Ruiz"


def test_blank_values_fall_through():
    claims = {"name": "  ", "preferred_username": "", "nickname": "dr"}
    assert identity_from_claims(claims) == "dr"


def test_no_claims_is_anonymous():
    assert identity_from_claims(None) is None
    assert identity_from_claims({}) is None
