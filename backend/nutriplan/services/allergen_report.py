"""Allergen lookups and summaries over the knowledge base."""

from typing import Any

from sqlmodel import Session

from nutriplan.errors import ErrorCode
from nutriplan.logging import get_logger
from nutriplan.schemas.allergen import (
    AllergenCheckResponse,
    AllergenIngredientsResponse,
    AllergenStatistic,
    AllergenStatisticsResponse,
    IngredientAllergenResponse,
    IngredientDetection,
    MenuAllergenResponse,
    UserSafetyResponse,
)
from nutriplan.schemas.common import IngredientSummary, IngredientWithAllergens
from nutriplan.services.allergens import (
    check_safety,
    ingredient_allergens,
    merge_allergens,
    risk_level,
)
from nutriplan.services.menu_cbr import ingredient_ref
from nutriplan.services.resolver import resolve_ingredient
from nutriplan.storage.models import Ingredient
from nutriplan.storage.repositories import (
    list_allergen_links,
    list_ingredients,
    list_menu_cases_for_ingredient,
)
from nutriplan.utils.timing import time_span

logger = get_logger(__name__)

STATISTIC_EXAMPLES = 3


def ingredient_summary(ingredient: Ingredient) -> IngredientSummary:
    return IngredientSummary(
        id=ingredient.id,
        name=ingredient.name,
        category=ingredient.category,
        synonyms=ingredient.synonyms,
    )


def with_allergens(session: Session, ingredients: list[Ingredient]) -> list[IngredientWithAllergens]:
    allergens = ingredient_allergens(session, ingredients)
    return [
        IngredientWithAllergens(**ingredient_summary(ing).model_dump(), allergens=allergens[ing.id])
        for ing in ingredients
    ]


def check_ingredients(session: Session, names: list[str]) -> AllergenCheckResponse:
    """Resolve each name, report its allergens, and merge them across the list."""
    with time_span("allergen.check", requested=len(names)):
        resolved: list[tuple[str, Ingredient | None]] = [
            (name, resolve_ingredient(session, name)) for name in names
        ]
        allergens = ingredient_allergens(session, [ing for _, ing in resolved if ing is not None])

    detections = [
        IngredientDetection(name=ing.name, found=True, allergens=allergens[ing.id])
        if ing is not None
        else IngredientDetection(name=name, found=False, allergens=[])
        for name, ing in resolved
    ]
    merged = merge_allergens(d.allergens for d in detections)
    found = sum(1 for d in detections if d.found)
    return AllergenCheckResponse(
        success=True,
        ingredients=detections,
        merged_allergens=merged,
        unique_allergen_count=len(merged),
        requested_count=len(names),
        found_count=found,
        message=f"Found {len(merged)} allergens across {found} recognised ingredients",
    )


def ingredient_allergen_details(session: Session, raw: Any) -> IngredientAllergenResponse | None:
    ingredient = resolve_ingredient(session, raw)
    if ingredient is None:
        return None
    allergens = ingredient_allergens(session, [ingredient])[ingredient.id]
    if allergens:
        message = f"This ingredient contains {len(allergens)} allergens: {', '.join(allergens)}"
    else:
        message = "This ingredient has no registered allergens"
    return IngredientAllergenResponse(
        ingredient=ingredient_summary(ingredient),
        allergens=allergens,
        has_allergens=bool(allergens),
        message=message,
    )


def menu_allergens(session: Session, raw: str) -> MenuAllergenResponse:
    """Allergens of a base ingredient, labelled with its first stored menu name when one exists."""
    ingredient = resolve_ingredient(session, raw)
    if ingredient is None:
        return MenuAllergenResponse(
            success=False,
            menu_name=raw,
            detected_allergens=[],
            has_allergens=False,
            message=f"Ingredient '{raw}' not found",
            error=ErrorCode.INGREDIENT_NOT_FOUND,
        )
    allergens = ingredient_allergens(session, [ingredient])[ingredient.id]
    cases = list_menu_cases_for_ingredient(session, ingredient.id, limit=1)
    if allergens:
        message = f"Menu contains {len(allergens)} allergens: {', '.join(allergens)}"
    else:
        message = "Menu has no registered allergens"
    return MenuAllergenResponse(
        success=True,
        menu_name=cases[0].menu_name if cases else ingredient.name,
        base_ingredient=ingredient_ref(ingredient),
        detected_allergens=allergens,
        has_allergens=bool(allergens),
        message=message,
    )


def user_safety(user_id: int, user_allergens: list[str], detected: list[str]) -> UserSafetyResponse:
    verdict = check_safety(detected, user_allergens)
    if verdict.is_safe:
        recommendation = "Menu is safe for this user"
    else:
        recommendation = (
            f"WARNING: menu contains known allergens: {', '.join(verdict.matched)}. "
            "Avoid this menu or consult a nutritionist."
        )
    logger.info("allergen.user_safety user_id=%s conflicts=%s", user_id, verdict.matched)
    return UserSafetyResponse(
        user_id=user_id,
        user_allergens=user_allergens,
        detected_allergens=detected,
        conflicts=verdict.matched,
        is_safe=verdict.is_safe,
        risk_level=risk_level(verdict.matched),
        recommendation=recommendation,
    )


def ingredients_with_allergens(session: Session) -> AllergenIngredientsResponse:
    items = with_allergens(session, list_ingredients(session))
    return AllergenIngredientsResponse(total_ingredients=len(items), ingredients_with_allergens=items)


def allergen_statistics(session: Session) -> AllergenStatisticsResponse:
    links = list_allergen_links(session)
    stats = [
        AllergenStatistic(
            allergen_name=name,
            ingredient_count=len(ingredient_names),
            examples=ingredient_names[:STATISTIC_EXAMPLES],
        )
        for name, ingredient_names in links.items()
    ]
    total = sum(s.ingredient_count for s in stats)
    return AllergenStatisticsResponse(
        total_allergens=len(stats),
        ingredient_allergen_mappings=total,
        allergens_with_ingredients=stats,
        message=f"{len(stats)} allergens with {total} ingredient mappings",
    )
