from nutriplan.errors import ErrorCode
from nutriplan.services import allergen_report


def test_check_ingredients(session, kb):
    result = allergen_report.check_ingredients(session, ["Tahu", "pizza", "dada ayam"])
    assert [(d.name, d.found, d.allergens) for d in result.ingredients] == [
        ("tahu", True, ["soy"]),
        ("pizza", False, []),
        ("ayam", True, []),
    ]
    assert result.merged_allergens == ["soy"]
    assert result.unique_allergen_count == 1
    assert result.requested_count == 3
    assert result.found_count == 2


def test_check_ingredients_is_repeatable(session, kb):
    first = allergen_report.check_ingredients(session, ["tahu", "telur", "susu"]).to_json()
    second = allergen_report.check_ingredients(session, ["tahu", "telur", "susu"]).to_json()
    assert first == second
    assert first["mergedAllergens"] == ["dairy", "egg", "soy"]


def test_ingredient_allergen_details(session, kb):
    result = allergen_report.ingredient_allergen_details(session, "susu")
    assert result.allergens == ["dairy"]
    assert result.has_allergens
    assert allergen_report.ingredient_allergen_details(session, "pizza") is None


def test_ingredient_allergen_details_no_allergens(session, kb):
    result = allergen_report.ingredient_allergen_details(session, "wortel")
    assert result.allergens == []
    assert not result.has_allergens


def test_menu_allergens(session, kb):
    result = allergen_report.menu_allergens(session, "ikan tongkol")
    assert result.menu_name == "Tongkol Balado"
    assert result.detected_allergens == ["fish"]

    missing = allergen_report.menu_allergens(session, "pizza")
    assert missing.error == ErrorCode.INGREDIENT_NOT_FOUND


def test_user_safety():
    result = allergen_report.user_safety(1, ["peanut", "fish"], ["fish", "egg"])
    assert result.conflicts == ["fish"]
    assert not result.is_safe
    assert result.risk_level == "warning"

    safe = allergen_report.user_safety(1, ["peanut"], ["egg"])
    assert safe.is_safe
    assert safe.risk_level == "safe"


def test_allergen_statistics(session, kb):
    stats = allergen_report.allergen_statistics(session)
    by_name = {s.allergen_name: s for s in stats.allergens_with_ingredients}
    assert stats.total_allergens == 8
    assert stats.ingredient_allergen_mappings == 18
    assert by_name["soy"].ingredient_count == 5
    assert by_name["soy"].examples == ["tempe", "tahu", "edamame"]
    assert by_name["peanut"].ingredient_count == 0


def test_ingredients_with_allergens(session, kb):
    result = allergen_report.ingredients_with_allergens(session)
    assert result.total_ingredients == 48
    roti = next(i for i in result.ingredients_with_allergens if i.name == "roti")
    assert roti.allergens == ["gluten"]
