"""Ingredient validation, listing and search against the knowledge base."""

from collections import Counter
from typing import Optional

from fastapi import APIRouter, Body, Query
from fastapi.responses import JSONResponse

from nutriplan.config import settings
from nutriplan.errors import ErrorCode
from nutriplan.logging import get_logger
from nutriplan.api.responses import error_response, respond
from nutriplan.schemas.ingredient import (
    AllergenLink,
    BatchIngredient,
    BatchSummary,
    BatchValidationItem,
    BatchValidationResponse,
    CategoryIngredientsResponse,
    CategoryListResponse,
    IngredientListResponse,
    IngredientSearchResponse,
    ValidatedIngredient,
    ValidateIngredientResponse,
)
from nutriplan.services.allergen_report import ingredient_summary, with_allergens
from nutriplan.services.allergens import ingredient_allergens
from nutriplan.services.resolver import normalize_name, resolve_ingredient
from nutriplan.storage import db
from nutriplan.storage.repositories import (
    list_allergens_for_ingredient,
    list_categories,
    list_ingredients,
    list_ingredients_by_category,
    search_ingredients,
)
from nutriplan.utils.numbers import percentage
from nutriplan.utils.timing import time_span

router = APIRouter()
logger = get_logger(__name__)

LIST_HINT = "Use GET /api/ai/ingredients to list valid ingredients"


@router.post("/validate-ingredient")
def validate_ingredient(body: dict = Body(...)) -> JSONResponse:
    """Body: { foodName }. 200 with the ingredient and its allergens, 400 otherwise."""
    food_name = body.get("foodName")
    if not isinstance(food_name, str) or not food_name:
        return respond(
            ValidateIngredientResponse(
                valid=False,
                error=ErrorCode.INVALID_INPUT,
                message="Ingredient name must be non-empty text",
            )
        )
    if not normalize_name(food_name):
        return respond(
            ValidateIngredientResponse(
                valid=False,
                error=ErrorCode.EMPTY_INPUT,
                message="Ingredient name must not be only whitespace",
            )
        )

    try:
        with db.get_session() as session:
            ingredient = resolve_ingredient(session, food_name)
            if ingredient is None:
                return respond(
                    ValidateIngredientResponse(
                        valid=False,
                        error=ErrorCode.INGREDIENT_NOT_FOUND,
                        message=f'Ingredient "{food_name}" is not in the knowledge base. Use a valid ingredient name.',
                        suggestions=LIST_HINT,
                    )
                )
            links = [
                AllergenLink(allergen_id=a.id, allergen_name=a.name)
                for a in list_allergens_for_ingredient(session, ingredient.id)
            ]
            payload = ValidateIngredientResponse(
                valid=True,
                ingredient=ValidatedIngredient(
                    id=ingredient.id,
                    name=ingredient.name,
                    category=ingredient.category,
                    synonyms=ingredient.synonym_list,
                    allergens=links,
                ),
                message=f'Ingredient "{ingredient.name}" found and valid.',
            )
        logger.info("ingredient.validate name=%s resolved=%s", food_name, ingredient.name)
        return respond(payload)
    except Exception:
        logger.exception("ingredient.validate_failed name=%s", food_name)
        return respond(
            ValidateIngredientResponse(
                valid=False,
                error=ErrorCode.INTERNAL_ERROR,
                message="Unexpected error while validating ingredient",
            )
        )


@router.post("/validate-ingredients-batch")
def validate_ingredients_batch(body: dict = Body(...)) -> JSONResponse:
    """Body: { foodNames: [...] }. Each item is reported on its own; the call itself succeeds."""
    food_names = body.get("foodNames")
    if not isinstance(food_names, list) or not food_names:
        return JSONResponse(
            status_code=400,
            content={
                "error": ErrorCode.INVALID_INPUT.value,
                "message": "foodNames must be a non-empty array of ingredient names",
            },
        )

    try:
        with time_span("ingredient.validate_batch", count=len(food_names)):
            with db.get_session() as session:
                resolved = [
                    resolve_ingredient(session, name)
                    if isinstance(name, str) and name.strip()
                    else None
                    for name in food_names
                ]
                allergens = ingredient_allergens(session, [ing for ing in resolved if ing is not None])

        validations: list[BatchValidationItem] = []
        for name, ingredient in zip(food_names, resolved):
            if not isinstance(name, str) or not name.strip():
                validations.append(
                    BatchValidationItem(
                        food_name=str(name) if name else "(empty)",
                        valid=False,
                        error=ErrorCode.INVALID_INPUT,
                        message="Ingredient name must be non-empty text",
                    )
                )
            elif ingredient is None:
                validations.append(
                    BatchValidationItem(
                        food_name=name,
                        valid=False,
                        error=ErrorCode.INGREDIENT_NOT_FOUND,
                        message=f'Ingredient "{name}" is not recognised',
                    )
                )
            else:
                validations.append(
                    BatchValidationItem(
                        food_name=name,
                        valid=True,
                        ingredient=BatchIngredient(
                            id=ingredient.id,
                            name=ingredient.name,
                            category=ingredient.category,
                            allergens=allergens[ingredient.id],
                        ),
                    )
                )

        valid = sum(1 for v in validations if v.valid)
        summary = BatchSummary(
            total=len(food_names),
            valid=valid,
            invalid=len(food_names) - valid,
            validation_percentage=percentage(valid, len(food_names)),
        )
        logger.info("ingredient.validate_batch total=%s valid=%s", summary.total, summary.valid)
        return respond(BatchValidationResponse(validations=validations, summary=summary))
    except Exception:
        logger.exception("ingredient.validate_batch_failed")
        return JSONResponse(
            status_code=500,
            content={
                "error": ErrorCode.INTERNAL_ERROR.value,
                "message": "Unexpected error while validating ingredients",
            },
        )


@router.get("/ingredients")
def get_ingredients() -> JSONResponse:
    try:
        with db.get_session() as session:
            ingredients = list_ingredients(session)
        return respond(
            IngredientListResponse(
                count=len(ingredients),
                categories=dict(Counter(ing.category for ing in ingredients)),
                ingredients=[ingredient_summary(ing) for ing in ingredients],
            )
        )
    except Exception:
        logger.exception("ingredient.list_failed")
        return error_response(ErrorCode.INTERNAL_ERROR, "Unexpected error while listing ingredients")


@router.get("/ingredients/search")
def search(
    keyword: Optional[str] = Query(default=None),
    limit: int = Query(default=0),
) -> JSONResponse:
    """Substring match on name or synonyms, ordered by name."""
    if not keyword or not keyword.strip():
        return JSONResponse(
            status_code=400,
            content={
                "error": ErrorCode.INVALID_SEARCH.value,
                "message": "Search keyword must not be empty",
            },
        )
    if limit <= 0:
        limit = settings.ingredient_search_default_limit
    limit = min(limit, settings.ingredient_search_max_limit)

    try:
        with db.get_session() as session:
            results = search_ingredients(session, normalize_name(keyword), limit)
        return respond(
            IngredientSearchResponse(
                keyword=keyword,
                count=len(results),
                results=[ingredient_summary(ing) for ing in results],
            )
        )
    except Exception:
        logger.exception("ingredient.search_failed keyword=%s", keyword)
        return error_response(ErrorCode.INTERNAL_ERROR, "Unexpected error while searching ingredients")


@router.get("/ingredients/categories")
def get_categories() -> JSONResponse:
    with db.get_session() as session:
        categories = list_categories(session)
    return respond(CategoryListResponse(count=len(categories), categories=categories))


@router.get("/ingredients/category/{category}")
def get_ingredients_in_category(category: str) -> JSONResponse:
    with db.get_session() as session:
        items = with_allergens(session, list_ingredients_by_category(session, normalize_name(category)))
    return respond(
        CategoryIngredientsResponse(
            success=bool(items), category=category, count=len(items), ingredients=items
        )
    )
