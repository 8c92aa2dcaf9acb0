from typing import Optional

from nutriplan.errors import ErrorCode
from nutriplan.schemas.common import CamelModel, IngredientRef


class MenuCaseOut(CamelModel):
    id: int
    menu_name: str
    description: Optional[str] = None
    calories: int
    protein: Optional[str] = None
    carbs: Optional[str] = None
    fat: Optional[str] = None
    base_ingredient: IngredientRef
    allergens: list[str] = []


class MenuRetrievalResponse(CamelModel):
    success: bool
    requested_ingredient: str
    base_ingredient: Optional[IngredientRef] = None
    menus: list[MenuCaseOut] = []
    case_count: int = 0
    message: str
    error: Optional[ErrorCode] = None


class MenuListResponse(CamelModel):
    success: bool
    total_cases: int
    menus: list[MenuCaseOut]
    message: str
    error: Optional[ErrorCode] = None


class MenuCaseGroup(CamelModel):
    ingredient: IngredientRef
    cases: list[MenuCaseOut]


class GroupedMenuCasesResponse(CamelModel):
    success: bool = True
    total_cases: int
    ingredient_count: int
    grouped: dict[str, MenuCaseGroup]


class IngredientCaseCount(CamelModel):
    name: str
    category: str
    case_count: int


class CalorieRange(CamelModel):
    min: int
    max: int


class MenuStatisticsResponse(CamelModel):
    success: bool = True
    total_cases: int
    ingredient_count: int
    max_cases_per_ingredient: int
    average_calories: int
    calorie_range: CalorieRange
    category_distribution: dict[str, int]
    ingredients_with_cases: list[IngredientCaseCount]


class MenuLookupResponse(CamelModel):
    success: bool
    menu: Optional[MenuCaseOut] = None
    message: str
    error: Optional[ErrorCode] = None
