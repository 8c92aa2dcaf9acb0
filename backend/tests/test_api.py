from nutriplan.storage.models import Ingredient


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_ready(client):
    response = client.get("/api/ready")
    assert response.status_code == 200
    assert response.json() == {"db": "ok"}


def test_validate_ingredient(client, kb):
    response = client.post("/api/ai/validate-ingredient", json={"foodName": "  Telur "})
    assert response.status_code == 200
    data = response.json()
    assert data["valid"] is True
    assert data["ingredient"]["name"] == "telur"
    assert data["ingredient"]["synonyms"] == ["telur ayam"]
    assert data["ingredient"]["allergens"][0]["allergenName"] == "egg"


def test_validate_ingredient_not_found(client, kb):
    response = client.post("/api/ai/validate-ingredient", json={"foodName": "pizza"})
    assert response.status_code == 400
    data = response.json()
    assert data["valid"] is False
    assert data["error"] == "INGREDIENT_NOT_FOUND"
    assert "suggestions" in data


def test_validate_ingredient_bad_input(client, kb):
    assert client.post("/api/ai/validate-ingredient", json={}).json()["error"] == "INVALID_INPUT"
    assert client.post("/api/ai/validate-ingredient", json={"foodName": 3}).json()["error"] == "INVALID_INPUT"
    response = client.post("/api/ai/validate-ingredient", json={"foodName": "   "})
    assert response.status_code == 400
    assert response.json()["error"] == "EMPTY_INPUT"


def test_validate_ingredients_batch(client, kb):
    response = client.post(
        "/api/ai/validate-ingredients-batch", json={"foodNames": ["ayam", "invalid_item", "tahu"]}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["summary"] == {"total": 3, "valid": 2, "invalid": 1, "validationPercentage": 67}
    assert [v["valid"] for v in data["validations"]] == [True, False, True]
    assert data["validations"][1]["error"] == "INGREDIENT_NOT_FOUND"
    assert data["validations"][2]["ingredient"]["allergens"] == ["soy"]


def test_validate_ingredients_batch_bad_items(client, kb):
    response = client.post("/api/ai/validate-ingredients-batch", json={"foodNames": ["", 5, "susu"]})
    data = response.json()
    assert [v["foodName"] for v in data["validations"]] == ["(empty)", "5", "susu"]
    assert data["validations"][0]["error"] == "INVALID_INPUT"
    assert data["summary"]["valid"] == 1


def test_validate_ingredients_batch_requires_list(client, kb):
    assert client.post("/api/ai/validate-ingredients-batch", json={"foodNames": []}).status_code == 400
    assert client.post("/api/ai/validate-ingredients-batch", json={"foodNames": "ayam"}).status_code == 400


def test_list_ingredients(client, kb):
    data = client.get("/api/ai/ingredients").json()
    assert data["count"] == 48
    assert data["categories"]["seafood"] == 4
    names = [i["name"] for i in data["ingredients"]]
    assert names == sorted(names)


def test_search_ingredients(client, kb):
    data = client.get("/api/ai/ingredients/search", params={"keyword": "Ikan"}).json()
    assert [i["name"] for i in data["results"]] == ["ikan bandeng", "ikan nila", "ikan tongkol"]
    limited = client.get("/api/ai/ingredients/search", params={"keyword": "a", "limit": 2}).json()
    assert limited["count"] == 2


def test_search_ingredients_default_limit(client, kb):
    data = client.get("/api/ai/ingredients/search", params={"keyword": "a"}).json()
    assert data["count"] == 10


def test_search_ingredients_limit_is_capped(client, kb, session):
    for i in range(60):
        session.add(Ingredient(name=f"sayur campur {i:02d}", category="vegetable"))
    session.commit()
    data = client.get("/api/ai/ingredients/search", params={"keyword": "sayur", "limit": 100}).json()
    assert data["count"] == 50


def test_search_ingredients_blank_keyword(client, kb):
    response = client.get("/api/ai/ingredients/search", params={"keyword": "  "})
    assert response.status_code == 400
    assert response.json()["error"] == "INVALID_SEARCH"


def test_categories(client, kb):
    data = client.get("/api/ai/ingredients/categories").json()
    assert data["categories"] == sorted(data["categories"])
    assert "dairy" in data["categories"]


def test_ingredients_in_category(client, kb):
    data = client.get("/api/ai/ingredients/category/dairy").json()
    assert [i["name"] for i in data["ingredients"]] == ["keju", "mentega", "susu", "yogurt"]
    assert all(i["allergens"] == ["dairy"] for i in data["ingredients"])


def test_check_allergen(client, kb):
    response = client.post("/api/ai/check-allergen", json={"ingredients": ["tahu", "telur", "susu"]})
    assert response.status_code == 200
    data = response.json()
    assert data["mergedAllergens"] == ["dairy", "egg", "soy"]
    assert data["foundCount"] == 3


def test_check_allergen_rejects_bad_bodies(client, kb):
    for body in [{}, {"ingredients": "tahu"}, {"ingredients": []}, {"ingredients": ["tahu", 1]}]:
        response = client.post("/api/ai/check-allergen", json=body)
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_INPUT"


def test_check_single_ingredient(client, kb):
    assert client.get("/api/ai/check-allergen/udang").json()["allergens"] == ["shellfish"]
    response = client.get("/api/ai/check-allergen/pizza")
    assert response.status_code == 400
    assert response.json()["searchedTerm"] == "pizza"


def test_check_menu_allergen(client, kb):
    data = client.get("/api/ai/check-allergen/menu/ayam").json()
    assert data["menuName"] == "Ayam Bakar Madu"
    assert data["hasAllergens"] is False


def test_user_safety_requires_login(client, kb):
    response = client.post("/api/ai/check-allergen/user-safety", json={"detectedAllergens": ["fish"]})
    assert response.status_code == 401


def test_user_safety_unknown_user(client, kb):
    response = client.post(
        "/api/ai/check-allergen/user-safety",
        json={"detectedAllergens": ["fish"]},
        headers={"X-User-Id": "999"},
    )
    assert response.status_code == 404
    assert response.json()["error"] == "USER_NOT_FOUND"


def test_user_safety(client, kb, student):
    response = client.post(
        "/api/ai/check-allergen/user-safety",
        json={"detectedAllergens": ["fish", "egg"]},
        headers={"X-User-Id": str(student.id)},
    )
    data = response.json()
    assert data["userAllergens"] == ["peanut", "fish", "susu"]
    assert data["conflicts"] == ["fish"]
    assert data["riskLevel"] == "warning"
    assert data["isSafe"] is False


def test_allergen_listing_endpoints(client, kb):
    assert client.get("/api/ai/allergens").json()["count"] == 8
    assert client.get("/api/ai/allergen/ingredients").json()["totalIngredients"] == 48
    assert client.get("/api/ai/allergen/statistics").json()["totalAllergens"] == 8


def test_analyze_food(client, kb):
    data = client.post("/api/ai/analyze-food", json={"foodDescription": "ayam"}).json()
    assert data["success"] is True
    assert data["analysis"]["foodName"] == "Ayam Bakar Madu"

    unknown = client.post("/api/ai/analyze-food", json={"foodDescription": "pizza"}).json()
    assert unknown["success"] is False
    assert unknown["analysis"]["ingredients"] == []


def test_check_allergen_safety_guest(client, kb):
    data = client.post("/api/ai/check-allergen-safety", json={"foodDescription": "ikan nila, nasi"}).json()
    assert data["foodAnalysis"]["allergens"] == ["fish"]
    assert data["isSafe"] is True
    assert data["severity"] == "safe"


def test_check_allergen_safety_user(client, kb, student):
    data = client.post(
        "/api/ai/check-allergen-safety",
        json={"foodDescription": "ikan nila, nasi"},
        headers={"X-User-Id": str(student.id)},
    ).json()
    assert data["matchedAllergens"] == ["fish"]
    assert data["severity"] == "danger"


def test_detect_allergens(client, kb, student):
    data = client.post(
        "/api/ai/detect-allergens",
        json={"name": "Soto Ayam", "description": "ayam, telur", "ingredients": ["susu"]},
        headers={"X-User-Id": str(student.id)},
    ).json()
    assert data["success"] is False
    assert data["aiExtracted"]["ingredients"] == ["susu", "ayam", "telur"]
    assert data["aiExtracted"]["possibleAllergens"] == ["dairy", "egg"]
    assert data["aiExtracted"]["summary"] == "Unknown ingredients: soto ayam"
    # custom "susu" is not a substring of "dairy"
    assert data["matchedAllergens"] == []
    assert data["hasAllergy"] is False


def test_detect_allergens_empty_body(client, kb):
    response = client.post("/api/ai/detect-allergens", json={})
    assert response.status_code == 400
    assert response.json()["error"] == "EMPTY_INPUT"


def test_detect_allergens_blank_tokens(client, kb):
    response = client.post("/api/ai/detect-allergens", json={"ingredients": ["   "], "description": " , "})
    assert response.status_code == 400
    assert response.json()["error"] == "EMPTY_INPUT"


def test_cbr_random_rejects_negative_limit(client, kb):
    response = client.get("/api/ai/cbr/random", params={"limit": -5})
    assert response.status_code == 400
    assert response.json()["error"] == "INVALID_INPUT"


def test_generate_menu_cbr(client, kb):
    response = client.post("/api/ai/generate-menu-cbr", json={"baseIngredient": "ayam"})
    assert response.status_code == 200
    data = response.json()
    assert [m["menuName"] for m in data["menus"]] == ["Ayam Bakar Madu", "Ayam Goreng Krispy", "Soto Ayam"]
    assert data["menus"][0]["baseIngredient"]["name"] == "ayam"


def test_generate_menu_alias_uses_food_name(client, kb):
    data = client.post("/api/ai/generate-menu", json={"foodName": "kampung"}).json()
    assert data["caseCount"] == 3


def test_generate_menu_errors(client, kb):
    no_cases = client.post("/api/ai/generate-menu-cbr", json={"baseIngredient": "tahu"})
    assert no_cases.status_code == 404
    assert no_cases.json()["error"] == "NO_CASES_FOUND"

    unknown = client.post("/api/ai/generate-menu-cbr", json={"baseIngredient": "pizza"})
    assert unknown.status_code == 400
    assert unknown.json()["error"] == "INGREDIENT_NOT_FOUND"

    missing = client.post("/api/ai/generate-menu-cbr", json={})
    assert missing.json()["error"] == "INVALID_INPUT"


def test_cbr_endpoints(client, kb):
    assert client.get("/api/ai/cbr/cases").json()["totalCases"] == 6
    assert client.get("/api/ai/cbr/statistics").json()["averageCalories"] == 645
    assert len(client.get("/api/ai/cbr/random", params={"limit": 2}).json()["menus"]) == 2
    assert client.get("/api/ai/cbr/category/protein").json()["totalCases"] == 4
    assert client.get("/api/ai/cbr/menu/Rendang%20Sapi").json()["menu"]["calories"] == 720
    assert client.get("/api/ai/cbr/menu/unknown").status_code == 404


def test_cbr_calories(client, kb):
    data = client.get("/api/ai/cbr/calories", params={"min_calories": 700, "max_calories": 800}).json()
    assert [m["menuName"] for m in data["menus"]] == ["Ayam Goreng Krispy", "Rendang Sapi"]
    bad = client.get("/api/ai/cbr/calories", params={"min_calories": 800, "max_calories": 700})
    assert bad.status_code == 400


def test_user_allergen_check(client, kb, student):
    response = client.post(
        "/api/allergens/check",
        json={"ingredients": ["ikan nila"], "menuAllergens": []},
        headers={"X-User-Id": str(student.id)},
    )
    data = response.json()
    assert data["hasAllergy"] is True
    assert data["matchedAllergens"] == ["fish"]
    assert data["severity"] == "high"
    assert data["method"] == "knowledge-base"


def test_user_allergen_check_nut_symmetry(client, kb, student):
    data = client.post(
        "/api/allergens/check",
        json={"menuAllergens": ["nut"]},
        headers={"X-User-Id": str(student.id)},
    ).json()
    assert data["matchedAllergens"] == ["peanut"]


def test_user_allergen_check_requires_login(client, kb):
    assert client.post("/api/allergens/check", json={}).status_code == 401
