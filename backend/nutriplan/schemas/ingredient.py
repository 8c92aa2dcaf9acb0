from typing import Optional

from nutriplan.errors import ErrorCode
from nutriplan.schemas.common import CamelModel, IngredientRef, IngredientSummary, IngredientWithAllergens


class AllergenLink(CamelModel):
    allergen_id: int
    allergen_name: str


class ValidatedIngredient(IngredientRef):
    synonyms: list[str] = []
    allergens: list[AllergenLink] = []


class ValidateIngredientResponse(CamelModel):
    valid: bool
    ingredient: Optional[ValidatedIngredient] = None
    error: Optional[ErrorCode] = None
    message: str
    suggestions: Optional[str] = None


class BatchIngredient(IngredientRef):
    allergens: list[str] = []


class BatchValidationItem(CamelModel):
    food_name: str
    valid: bool
    ingredient: Optional[BatchIngredient] = None
    error: Optional[ErrorCode] = None
    message: Optional[str] = None


class BatchSummary(CamelModel):
    total: int
    valid: int
    invalid: int
    validation_percentage: int


class BatchValidationResponse(CamelModel):
    validations: list[BatchValidationItem]
    summary: BatchSummary


class IngredientListResponse(CamelModel):
    success: bool = True
    count: int
    categories: dict[str, int]
    ingredients: list[IngredientSummary]


class IngredientSearchResponse(CamelModel):
    success: bool = True
    keyword: str
    count: int
    results: list[IngredientSummary]


class CategoryListResponse(CamelModel):
    success: bool = True
    count: int
    categories: list[str]


class CategoryIngredientsResponse(CamelModel):
    success: bool
    category: str
    count: int
    ingredients: list[IngredientWithAllergens]
