"""
Fixed knowledge base for the school lunch program.

Allergens, ingredients (with comma-joined synonyms and allergen links) and the
hand-authored menu cases used for case-based menu retrieval. Names are the
lowercase canonical lookup keys.
"""

ALLERGENS: list[tuple[str, str]] = [
    ("egg", "Eggs and egg products"),
    ("dairy", "Milk and milk products"),
    ("fish", "Fish"),
    ("shellfish", "Shellfish and shrimp"),
    ("soy", "Soybeans and soy products"),
    ("gluten", "Wheat, flour and wheat products"),
    ("peanut", "Peanuts"),
    ("tree_nut", "Tree nuts (almond, walnut, ...)"),
]

# (name, category, synonyms, allergen names)
INGREDIENTS: list[tuple[str, str, str, list[str]]] = [
    # protein
    ("ayam", "protein", "ayam kampung,dada ayam,ayam fillet", []),
    ("daging sapi", "protein", "sapi,daging", []),
    ("ikan nila", "seafood", "ikan", ["fish"]),
    ("ikan tongkol", "seafood", "", ["fish"]),
    ("ikan bandeng", "seafood", "", ["fish"]),
    ("udang", "seafood", "", ["shellfish"]),
    ("telur", "protein", "telur ayam", ["egg"]),
    ("tempe", "soy", "", ["soy"]),
    ("tahu", "soy", "", ["soy"]),
    # carb
    ("nasi putih", "carb", "nasi", []),
    ("nasi goreng", "carb", "", []),
    ("kentang", "carb", "", []),
    ("ubi", "carb", "ubi jalar", []),
    ("roti", "gluten", "roti tawar,roti gandum", ["gluten"]),
    ("spaghetti", "gluten", "pasta", ["gluten"]),
    ("mie", "gluten", "mi,mie instan", ["gluten"]),
    # vegetable
    ("kangkung", "vegetable", "", []),
    ("buncis", "vegetable", "", []),
    ("wortel", "vegetable", "", []),
    ("kubis", "vegetable", "kol", []),
    ("bayam", "vegetable", "", []),
    ("brokoli", "vegetable", "", []),
    ("edamame", "soy", "", ["soy"]),
    ("tomat", "vegetable", "", []),
    ("timun", "vegetable", "ketimun", []),
    # fruit
    ("pisang", "fruit", "", []),
    ("jeruk", "fruit", "", []),
    ("apel", "fruit", "", []),
    ("semangka", "fruit", "", []),
    ("melon", "fruit", "", []),
    ("anggur", "fruit", "", []),
    ("pepaya", "fruit", "", []),
    ("pir", "fruit", "", []),
    # dairy
    ("susu", "dairy", "susu sapi", ["dairy"]),
    ("keju", "dairy", "", ["dairy"]),
    ("yogurt", "dairy", "", ["dairy"]),
    ("mentega", "dairy", "", ["dairy"]),
    # seasoning
    ("kecap", "soy", "kecap manis", ["soy"]),
    ("kecap asin", "soy", "", ["soy"]),
    ("santan", "misc", "santan kelapa", []),
    ("bawang merah", "misc", "", []),
    ("bawang putih", "misc", "", []),
    ("cabai", "misc", "cabai merah,cabe", []),
    ("tepung terigu", "gluten", "terigu", ["gluten"]),
    ("gula", "misc", "gula pasir", []),
    ("garam", "misc", "", []),
    ("madu", "misc", "", []),
    ("kunyit", "misc", "", []),
]

MENU_CASES: list[dict] = [
    {
        "base_ingredient": "ayam",
        "menu_name": "Ayam Bakar Madu",
        "description": "Grilled chicken glazed with honey",
        "calories": 650,
        "protein": "35g",
        "carbs": "75g",
        "fat": "20g",
    },
    {
        "base_ingredient": "ayam",
        "menu_name": "Ayam Goreng Krispy",
        "description": "Crispy battered fried chicken",
        "calories": 700,
        "protein": "40g",
        "carbs": "60g",
        "fat": "28g",
    },
    {
        "base_ingredient": "ayam",
        "menu_name": "Soto Ayam",
        "description": "Chicken soup with turmeric broth",
        "calories": 580,
        "protein": "28g",
        "carbs": "68g",
        "fat": "16g",
    },
    {
        "base_ingredient": "ikan nila",
        "menu_name": "Ikan Goreng Kecap",
        "description": "Fried tilapia with sweet soy sauce",
        "calories": 600,
        "protein": "30g",
        "carbs": "70g",
        "fat": "18g",
    },
    {
        "base_ingredient": "daging sapi",
        "menu_name": "Rendang Sapi",
        "description": "Beef rendang slow-cooked in coconut milk",
        "calories": 720,
        "protein": "40g",
        "carbs": "80g",
        "fat": "25g",
    },
    {
        "base_ingredient": "ikan tongkol",
        "menu_name": "Tongkol Balado",
        "description": "Mackerel tuna in balado chili sauce",
        "calories": 620,
        "protein": "32g",
        "carbs": "65g",
        "fat": "22g",
    },
]
