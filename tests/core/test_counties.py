"""County Names — verifies reconciliation between Chinese, English, short and slug forms.

Invariants:
    - Every spelling of a county resolves to the same short name
    - Stored-name lists cover both the canonical and the legacy English form
    - Search terms bridge Chinese and English queries in both directions
"""

import pytest

from travel_map.core.counties import (
    COUNTIES,
    county_search_terms,
    county_to_slug,
    is_known_county,
    list_counties,
    normalize_tai,
    slug_to_county,
    stored_names_for,
    to_short_name,
)


def test_catalogue_has_22_divisions():
    assert len(COUNTIES) == 22


def test_normalize_tai_folds_common_form():
    assert normalize_tai("台中市") == "臺中市"
    assert normalize_tai("高雄") == "高雄"


@pytest.mark.parametrize("spelling", [
    "臺北", "臺北市", "台北", "台北市", "Taipei City", "taipei city", "taipei",
    " Taipei City ", "%E8%87%BA%E5%8C%97",
])
def test_to_short_name_resolves_every_spelling(spelling):
    assert to_short_name(spelling) == "臺北"


def test_to_short_name_unknown_is_none():
    assert to_short_name("Atlantis") is None
    assert to_short_name("") is None
    assert to_short_name(None) is None
    assert not is_known_county("Atlantis")


def test_city_and_county_share_short_name():
    assert to_short_name("Hsinchu City") == to_short_name("新竹縣") == "新竹"
    assert to_short_name("Chiayi County") == to_short_name("嘉義市") == "嘉義"


def test_stored_names_include_legacy_english():
    assert stored_names_for("臺北") == ["臺北", "臺北市", "Taipei City"]


def test_stored_names_for_shared_short_name_cover_both_divisions():
    names = stored_names_for("新竹")
    assert names[0] == "新竹"
    assert {"Hsinchu City", "Hsinchu County", "新竹市", "新竹縣"} <= set(names)


def test_slug_round_trip():
    assert county_to_slug("新北") == "new-taipei"
    assert slug_to_county("new-taipei") == "新北"


def test_slug_with_spaces_and_case():
    assert slug_to_county("New%20Taipei") == "新北"
    assert slug_to_county("KAOHSIUNG") == "高雄"


def test_unknown_slug_falls_back_to_taipei(caplog):
    assert slug_to_county("atlantis") == "臺北"
    assert "Unknown county slug" in caplog.text


def test_list_counties_merges_shared_short_names():
    catalogue = list_counties()
    names = [c["name"] for c in catalogue]
    assert len(names) == len(set(names)) == 20
    hsinchu = next(c for c in catalogue if c["name"] == "新竹")
    assert hsinchu["full_names"] == ["新竹市", "新竹縣"]
    assert hsinchu["map_labels"] == ["Hsinchu City", "Hsinchu County"]


def test_search_terms_blank_query():
    assert county_search_terms("   ") == []


def test_search_terms_chinese_query_adds_english_and_short():
    terms = county_search_terms("台北市")
    assert terms[0] == "台北市"
    assert "Taipei City" in terms
    assert "臺北" in terms


def test_search_terms_english_query_adds_chinese():
    terms = county_search_terms("Kaohsiung City")
    assert "高雄市" in terms
    assert "高雄" in terms


def test_search_terms_partial_english_matches_every_county_containing_it():
    terms = county_search_terms("taipei")
    assert {"Taipei City", "臺北市", "臺北"} <= set(terms)
    assert {"New Taipei City", "新北市", "新北"} <= set(terms)


def test_search_terms_partial_chinese():
    terms = county_search_terms("花蓮")
    assert "Hualien County" in terms
    assert "花蓮縣" in terms


def test_search_terms_have_no_duplicates():
    terms = county_search_terms("新竹")
    assert len(terms) == len(set(terms))


def test_search_terms_unrelated_query_is_only_the_term():
    assert county_search_terms("beef noodles") == ["beef noodles"]
