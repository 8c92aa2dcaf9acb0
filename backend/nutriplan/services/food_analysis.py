"""Deterministic food analysis from free text: resolve, aggregate, optionally pick a stored menu."""

from typing import Iterable, Optional

from sqlmodel import Session

from nutriplan.logging import get_logger
from nutriplan.schemas.allergen import FoodAnalysis
from nutriplan.services.allergens import aggregate_allergens
from nutriplan.services.resolver import (
    Resolution,
    normalize_name,
    resolve_ingredient,
    resolve_many,
    split_tokens,
)
from nutriplan.storage.repositories import list_menu_cases_for_ingredient
from nutriplan.utils.timing import time_span

logger = get_logger(__name__)

UNRECOGNISED_NOTE = "Input was not recognised as a known ingredient or menu"


def unknown_note(unknown: list[str]) -> Optional[str]:
    if not unknown:
        return None
    return f"Unknown ingredients: {', '.join(unknown)}"


def analyze_food(session: Session, description: str) -> FoodAnalysis:
    """
    Several comma/newline separated tokens are treated as an ingredient list.
    A single token is resolved as one ingredient; if it has stored menu cases the
    first one (by name) becomes the food name. Unrecognised input yields no
    ingredients and an explanatory note.
    """
    trimmed = description.strip()
    tokens = split_tokens(trimmed)

    with time_span("food.analyze", tokens=len(tokens)):
        if len(tokens) > 1:
            resolution = resolve_many(session, tokens)
            return FoodAnalysis(
                food_name=trimmed,
                ingredients=resolution.names,
                allergens=aggregate_allergens(session, resolution.validated),
                notes=unknown_note(resolution.unknown),
            )

        base = tokens[0] if tokens else normalize_name(trimmed)
        ingredient = resolve_ingredient(session, base)
        if ingredient is None:
            return FoodAnalysis(food_name=trimmed, ingredients=[], allergens=[], notes=UNRECOGNISED_NOTE)

        cases = list_menu_cases_for_ingredient(session, ingredient.id, limit=1)
        return FoodAnalysis(
            food_name=cases[0].menu_name if cases else ingredient.name,
            ingredients=[ingredient.name],
            allergens=aggregate_allergens(session, [ingredient]),
        )


def collect_tokens(
    name: Optional[str], description: Optional[str], ingredients: Iterable[str]
) -> list[str]:
    """Explicit ingredients first, then the name, then the comma/newline split description."""
    tokens = [normalize_name(i) for i in ingredients]
    if name:
        tokens.append(normalize_name(name))
    if description:
        tokens.extend(split_tokens(description))
    return [t for t in tokens if t]


def detect_ingredients(
    session: Session, name: Optional[str], description: Optional[str], ingredients: Iterable[str]
) -> tuple[Resolution, list[str]]:
    resolution = resolve_many(session, collect_tokens(name, description, ingredients))
    allergens = aggregate_allergens(session, resolution.validated)
    logger.info(
        "food.detect validated=%s unknown=%s allergens=%s",
        len(resolution.validated),
        len(resolution.unknown),
        allergens,
    )
    return resolution, allergens
