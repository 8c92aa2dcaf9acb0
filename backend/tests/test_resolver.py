"""Ingredient resolution: exact name first, then raw synonym-string containment."""

from nutriplan.services.resolver import resolve_ingredient, resolve_many, resolve_text, split_tokens


def test_resolve_is_case_and_whitespace_insensitive(session, kb):
    for text in ["ayam", "Ayam", "  AYAM  ", "\tayam\n"]:
        assert resolve_ingredient(session, text).name == "ayam"


def test_resolve_exact_name_beats_synonym(session, kb):
    # "telur ayam" is a synonym of telur, but "ayam" is an ingredient name
    assert resolve_ingredient(session, "ayam").name == "ayam"
    assert resolve_ingredient(session, "telur").name == "telur"


def test_resolve_by_synonym_substring(session, kb):
    assert resolve_ingredient(session, "kampung").name == "ayam"
    assert resolve_ingredient(session, "dada ayam").name == "ayam"
    assert resolve_ingredient(session, "ikan").name == "ikan nila"
    assert resolve_ingredient(session, "kol").name == "kubis"


def test_resolve_synonym_first_inserted_wins(session, kb):
    # both "daging sapi" (sapi,daging) and "susu" (susu sapi) contain "sapi"
    assert resolve_ingredient(session, "sapi").name == "daging sapi"


def test_resolve_synonym_match_can_span_commas(session, kb):
    assert resolve_ingredient(session, "sapi,dag").name == "daging sapi"


def test_resolve_wildcards_are_literal(session, kb):
    assert resolve_ingredient(session, "%") is None
    assert resolve_ingredient(session, "a_am") is None
    assert resolve_ingredient(session, "invalid_item") is None


def test_resolve_rejects_blank_and_non_text(session, kb):
    assert resolve_ingredient(session, "") is None
    assert resolve_ingredient(session, "   ") is None
    assert resolve_ingredient(session, None) is None
    assert resolve_ingredient(session, 42) is None


def test_resolve_unknown(session, kb):
    assert resolve_ingredient(session, "pizza") is None


def test_resolve_many_keeps_unknown_in_order(session, kb):
    resolution = resolve_many(session, ["Tahu", "pizza", "", "telur", "Burger "])
    assert resolution.names == ["tahu", "telur"]
    assert resolution.unknown == ["pizza", "burger"]


def test_resolve_text_splits_on_commas_and_newlines(session, kb):
    resolution = resolve_text(session, "nasi putih, telur\nkangkung,,")
    assert resolution.names == ["nasi putih", "telur", "kangkung"]
    assert resolution.unknown == []


def test_split_tokens():
    assert split_tokens(" Ayam , Tahu\nTELUR ,, ") == ["ayam", "tahu", "telur"]
    assert split_tokens("") == []
