from typing import Optional

from nutriplan.errors import ErrorCode
from nutriplan.schemas.common import CamelModel, IngredientRef, IngredientSummary, IngredientWithAllergens


class IngredientDetection(CamelModel):
    name: str
    found: bool
    allergens: list[str]


class AllergenCheckResponse(CamelModel):
    success: bool
    ingredients: list[IngredientDetection]
    merged_allergens: list[str]
    unique_allergen_count: int
    requested_count: int
    found_count: int
    message: str


class IngredientAllergenResponse(CamelModel):
    success: bool = True
    ingredient: IngredientSummary
    allergens: list[str]
    has_allergens: bool
    message: str


class MenuAllergenResponse(CamelModel):
    success: bool
    menu_name: str
    base_ingredient: Optional[IngredientRef] = None
    detected_allergens: list[str]
    has_allergens: bool
    message: str
    error: Optional[ErrorCode] = None


class UserSafetyResponse(CamelModel):
    success: bool = True
    user_id: int
    user_allergens: list[str]
    detected_allergens: list[str]
    conflicts: list[str]
    is_safe: bool
    risk_level: str  # safe | warning | critical
    recommendation: str


class UserAllergenCheckResponse(CamelModel):
    success: bool = True
    has_allergy: bool
    matched_allergens: list[str]
    severity: str  # high | none
    recommendation: str
    method: str = "knowledge-base"


class AllergenListResponse(CamelModel):
    success: bool = True
    count: int
    allergens: list[str]


class AllergenIngredientsResponse(CamelModel):
    success: bool = True
    total_ingredients: int
    ingredients_with_allergens: list[IngredientWithAllergens]


class AllergenStatistic(CamelModel):
    allergen_name: str
    ingredient_count: int
    examples: list[str]


class AllergenStatisticsResponse(CamelModel):
    success: bool = True
    total_allergens: int
    ingredient_allergen_mappings: int
    allergens_with_ingredients: list[AllergenStatistic]
    message: str


class FoodAnalysis(CamelModel):
    food_name: str
    ingredients: list[str]
    allergens: list[str]
    notes: Optional[str] = None


class AnalyzeFoodResponse(CamelModel):
    success: bool
    analysis: FoodAnalysis
    message: Optional[str] = None


class AllergenSafetyResponse(CamelModel):
    success: bool = True
    food_analysis: FoodAnalysis
    user_allergens: list[str]
    matched_allergens: list[str]
    is_safe: bool
    severity: str  # safe | danger
    recommendation: str


class ExtractedIngredients(CamelModel):
    ingredients: list[str]
    possible_allergens: list[str]
    summary: Optional[str] = None


class DetectAllergensResponse(CamelModel):
    success: bool
    ai_extracted: ExtractedIngredients
    user_allergens: list[str]
    matched_allergens: list[str]
    has_allergy: bool
