"""
Case-based menu retrieval: look up stored MenuCase rows for a base ingredient.

Nothing is generated or adapted. The primary path filters by the resolved
ingredient, orders by menu name and caps the result; random_menus is a
separate path that reads a page at a random offset.
"""

import random
from collections import Counter
from typing import Any, Optional

from sqlmodel import Session

from nutriplan.config import settings
from nutriplan.errors import ErrorCode
from nutriplan.logging import get_logger
from nutriplan.schemas.common import IngredientRef
from nutriplan.schemas.menu import (
    CalorieRange,
    GroupedMenuCasesResponse,
    IngredientCaseCount,
    MenuCaseGroup,
    MenuCaseOut,
    MenuListResponse,
    MenuLookupResponse,
    MenuRetrievalResponse,
    MenuStatisticsResponse,
)
from nutriplan.services.resolver import normalize_name, resolve_ingredient
from nutriplan.storage.models import Ingredient, MenuCase
from nutriplan.storage.repositories import (
    count_menu_cases,
    find_menu_case_by_name,
    get_allergen_names,
    list_menu_cases,
    list_menu_cases_by_calories,
    list_menu_cases_by_category,
    list_menu_cases_for_ingredient,
    page_menu_cases,
)
from nutriplan.utils.numbers import round_half_up

logger = get_logger(__name__)

FILTER_MAX_LIMIT = 50


def ingredient_ref(ingredient: Ingredient) -> IngredientRef:
    return IngredientRef(id=ingredient.id, name=ingredient.name, category=ingredient.category)


def _menu_out(case: MenuCase, base: Ingredient, allergens: list[str]) -> MenuCaseOut:
    return MenuCaseOut(
        id=case.id,
        menu_name=case.menu_name,
        description=case.description,
        calories=case.calories,
        protein=case.protein,
        carbs=case.carbs,
        fat=case.fat,
        base_ingredient=ingredient_ref(base),
        allergens=allergens,
    )


def annotate(session: Session, rows: list[tuple[MenuCase, Ingredient]]) -> list[MenuCaseOut]:
    """Attach each case's base-ingredient allergens."""
    allergens = get_allergen_names(session, {base.id for _, base in rows})
    return [_menu_out(case, base, allergens[base.id]) for case, base in rows]


def retrieve_menus(
    session: Session, raw_name: Any, limit: Optional[int] = None
) -> MenuRetrievalResponse:
    """
    Up to min(limit, cbr_max_limit) stored menus for the ingredient named by raw_name.
    Unresolvable names give INGREDIENT_NOT_FOUND; resolvable ones with no cases
    give NO_CASES_FOUND.
    """
    limit = settings.cbr_default_limit if limit is None else limit
    requested = raw_name if isinstance(raw_name, str) else ""
    if not isinstance(raw_name, str) or not raw_name:
        return MenuRetrievalResponse(
            success=False,
            requested_ingredient=requested,
            message="Ingredient name must be a non-empty string",
            error=ErrorCode.INVALID_INPUT,
        )
    if not normalize_name(raw_name):
        return MenuRetrievalResponse(
            success=False,
            requested_ingredient=requested,
            message="Ingredient name must not be blank",
            error=ErrorCode.EMPTY_INPUT,
        )

    ingredient = resolve_ingredient(session, raw_name)
    if ingredient is None:
        return MenuRetrievalResponse(
            success=False,
            requested_ingredient=requested,
            message=(
                f"Ingredient '{raw_name}' is not in the knowledge base. "
                "Use GET /api/ai/ingredients to list valid ingredients."
            ),
            error=ErrorCode.INGREDIENT_NOT_FOUND,
        )

    cases = list_menu_cases_for_ingredient(
        session, ingredient.id, limit=max(0, min(limit, settings.cbr_max_limit))
    )
    logger.info("cbr.retrieve ingredient=%s cases=%s limit=%s", ingredient.name, len(cases), limit)
    if not cases:
        return MenuRetrievalResponse(
            success=False,
            requested_ingredient=requested,
            base_ingredient=ingredient_ref(ingredient),
            message=f"No stored menus for ingredient '{ingredient.name}'",
            error=ErrorCode.NO_CASES_FOUND,
        )

    menus = annotate(session, [(case, ingredient) for case in cases])
    if len(menus) == 1:
        message = f"Found 1 menu for ingredient '{ingredient.name}'."
    else:
        message = f"Found {len(menus)} menus for ingredient '{ingredient.name}'. Pick one to use."
    return MenuRetrievalResponse(
        success=True,
        requested_ingredient=requested,
        base_ingredient=ingredient_ref(ingredient),
        menus=menus,
        case_count=len(menus),
        message=message,
    )


def random_menus(
    session: Session, limit: Optional[int] = None, rng: Optional[random.Random] = None
) -> MenuListResponse:
    """Read up to min(limit, cbr_max_limit) cases starting at a random offset."""
    limit = settings.cbr_default_limit if limit is None else limit
    take = min(limit, settings.cbr_max_limit)
    if take <= 0:
        return MenuListResponse(
            success=False,
            total_cases=0,
            menus=[],
            message="limit must be a positive number",
            error=ErrorCode.INVALID_INPUT,
        )
    rng = rng or random.Random()
    total = count_menu_cases(session)
    if total == 0:
        return MenuListResponse(
            success=False,
            total_cases=0,
            menus=[],
            message="No menus in the knowledge base",
            error=ErrorCode.NO_CASES_FOUND,
        )
    offset = rng.randint(0, max(0, total - take))
    menus = annotate(session, page_menu_cases(session, offset, take))
    logger.info("cbr.random total=%s offset=%s returned=%s", total, offset, len(menus))
    return MenuListResponse(
        success=True,
        total_cases=len(menus),
        menus=menus,
        message=f"Picked {len(menus)} menus at random",
    )


def grouped_menu_cases(session: Session) -> GroupedMenuCasesResponse:
    rows = list_menu_cases(session)
    grouped: dict[str, MenuCaseGroup] = {}
    for menu, (_, base) in zip(annotate(session, rows), rows):
        group = grouped.setdefault(base.name, MenuCaseGroup(ingredient=ingredient_ref(base), cases=[]))
        group.cases.append(menu)
    return GroupedMenuCasesResponse(
        total_cases=len(rows), ingredient_count=len(grouped), grouped=grouped
    )


def menus_by_category(session: Session, category: str, limit: int = 10) -> MenuListResponse:
    rows = list_menu_cases_by_category(
        session, normalize_name(category), max(0, min(limit, FILTER_MAX_LIMIT))
    )
    return MenuListResponse(
        success=True,
        total_cases=len(rows),
        menus=annotate(session, rows),
        message=f"Found {len(rows)} menus with category '{category}'",
    )


def menus_by_calorie_range(
    session: Session, min_calories: int, max_calories: int, limit: int = 10
) -> MenuListResponse:
    rows = list_menu_cases_by_calories(
        session, min_calories, max_calories, max(0, min(limit, FILTER_MAX_LIMIT))
    )
    return MenuListResponse(
        success=True,
        total_cases=len(rows),
        menus=annotate(session, rows),
        message=f"Found {len(rows)} menus with {min_calories}-{max_calories} calories",
    )


def menu_by_name(session: Session, menu_name: str) -> MenuLookupResponse:
    if not menu_name.strip():
        return MenuLookupResponse(
            success=False, message="Menu name must not be blank", error=ErrorCode.EMPTY_INPUT
        )
    row = find_menu_case_by_name(session, menu_name.strip())
    if row is None:
        return MenuLookupResponse(
            success=False, message=f"Menu '{menu_name}' not found", error=ErrorCode.MENU_NOT_FOUND
        )
    menu = annotate(session, [row])[0]
    return MenuLookupResponse(success=True, menu=menu, message=f"Menu '{menu.menu_name}' found")


def menu_statistics(session: Session) -> MenuStatisticsResponse:
    rows = list_menu_cases(session)
    per_ingredient: Counter = Counter()
    ingredients: dict[int, Ingredient] = {}
    for _, base in rows:
        per_ingredient[base.id] += 1
        ingredients[base.id] = base

    category_distribution: Counter = Counter(ing.category for ing in ingredients.values())
    calories = [case.calories for case, _ in rows]
    return MenuStatisticsResponse(
        total_cases=len(rows),
        ingredient_count=len(ingredients),
        max_cases_per_ingredient=max(per_ingredient.values(), default=0),
        average_calories=round_half_up(sum(calories) / len(calories)) if calories else 0,
        calorie_range=CalorieRange(min=min(calories, default=0), max=max(calories, default=0)),
        category_distribution=dict(category_distribution),
        ingredients_with_cases=[
            IngredientCaseCount(name=ing.name, category=ing.category, case_count=per_ingredient[ing.id])
            for ing in ingredients.values()
        ],
    )
