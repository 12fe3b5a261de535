"""Name Canonicalization — stored vs comparison forms and fuzzy lookups.

Tests:
    - canonical_name trims, single-spaces and title-cases
    - lookup_key ignores case, punctuation and diacritics
    - Seller identity spans the whole address tuple
    - best_fuzzy_match: exact, containment, similarity, and refusal paths
"""

from calftrack.core.name_canonicalization import (
    best_fuzzy_match,
    breed_identity_key,
    canonical_name,
    lookup_key,
    normalize_order_index,
    normalize_seller_fields,
    normalize_state,
    normalize_zip_code,
    seller_identity_key,
)


def test_canonical_name_title_cases_and_collapses_spaces():
    assert canonical_name("  black   ANGUS ") == "Black Angus"


def test_canonical_name_of_none_is_empty():
    assert canonical_name(None) == ""


def test_lookup_key_collides_on_punctuation_and_case():
    assert lookup_key("Charolais-Cross ") == lookup_key("charolais cross")


def test_lookup_key_strips_diacritics():
    assert lookup_key("Limousín") == "limousin"


def test_breed_identity_key_is_lookup_key():
    assert breed_identity_key(" Angus. ") == "angus"


def test_seller_identity_includes_address_parts():
    with_city = seller_identity_key("Smith Farms", None, "Amarillo", "TX", None)
    without_city = seller_identity_key("Smith Farms")
    assert with_city != without_city
    assert without_city == "smith farms||||"


def test_normalize_state_keeps_two_letters():
    assert normalize_state(" tx. ") == "TX"
    assert normalize_state("") is None


def test_normalize_zip_code_formats_plus_four():
    assert normalize_zip_code("79101") == "79101"
    assert normalize_zip_code("791011234") == "79101-1234"
    assert normalize_zip_code("n/a") is None


def test_normalize_seller_fields_cleans_each_part():
    fields = normalize_seller_fields("smith  farms", " 12 Main St ", "amarillo", "tx", "79101")
    assert fields == {
        "name": "Smith Farms",
        "address": "12 Main St",
        "city": "Amarillo",
        "state": "TX",
        "zip_code": "79101",
    }


def test_normalize_order_index_rejects_negative_and_garbage():
    assert normalize_order_index("3") == 3
    assert normalize_order_index(-1) is None
    assert normalize_order_index("abc") is None
    assert normalize_order_index(True) is None


def test_fuzzy_match_prefers_exact_key():
    assert best_fuzzy_match("ANGUS", ["Holstein", "Angus"]) == "Angus"


def test_fuzzy_match_accepts_containment():
    assert best_fuzzy_match("Black Angus", ["Holstein", "Angus"]) == "Angus"


def test_fuzzy_match_tolerates_typos():
    assert best_fuzzy_match("Holstien", ["Angus", "Holstein"]) == "Holstein"


def test_fuzzy_match_refuses_short_inputs():
    assert best_fuzzy_match("ab", ["Abc"]) is None


def test_fuzzy_match_refuses_unrelated_names():
    assert best_fuzzy_match("Wagyu", ["Holstein", "Jersey"]) is None
