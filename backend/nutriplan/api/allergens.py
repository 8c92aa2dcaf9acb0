"""Allergen detection, per-ingredient lookups and user safety checks."""

from typing import Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from nutriplan.errors import ErrorCode
from nutriplan.logging import get_logger
from nutriplan.api.responses import error_response, is_string_list, optional_user_id, respond
from nutriplan.schemas.allergen import (
    AllergenListResponse,
    AllergenSafetyResponse,
    AnalyzeFoodResponse,
    DetectAllergensResponse,
    ExtractedIngredients,
)
from nutriplan.services import allergen_report
from nutriplan.services.allergens import check_safety, load_user_allergens
from nutriplan.services.food_analysis import (
    analyze_food,
    collect_tokens,
    detect_ingredients,
    unknown_note,
)
from nutriplan.storage import db
from nutriplan.storage.repositories import get_user, list_allergens

router = APIRouter()
logger = get_logger(__name__)


@router.post("/check-allergen")
def check_allergen(body: dict = Body(...)) -> JSONResponse:
    """Body: { ingredients: [...] }. Unknown names are reported with found=false."""
    ingredients = body.get("ingredients")
    if ingredients is None:
        return error_response(ErrorCode.INVALID_INPUT, "ingredients is required")
    if not isinstance(ingredients, list):
        return error_response(ErrorCode.INVALID_INPUT, "ingredients must be an array")
    if not ingredients:
        return error_response(ErrorCode.INVALID_INPUT, "ingredients must not be empty")
    if not is_string_list(ingredients):
        return error_response(ErrorCode.INVALID_INPUT, "every ingredient must be a string")

    try:
        with db.get_session() as session:
            result = allergen_report.check_ingredients(session, ingredients)
        return respond(result)
    except Exception:
        logger.exception("allergen.check_failed")
        return error_response(ErrorCode.INTERNAL_ERROR, "Unexpected error while checking allergens")


@router.get("/check-allergen/menu/{ingredient}")
def check_menu_allergen(ingredient: str) -> JSONResponse:
    with db.get_session() as session:
        return respond(allergen_report.menu_allergens(session, ingredient))


@router.post("/check-allergen/user-safety")
def check_user_safety(
    body: dict = Body(...), user_id: Optional[int] = Depends(optional_user_id)
) -> JSONResponse:
    """Body: { detectedAllergens: [...] } compared against the caller's allergen profile."""
    if user_id is None:
        return error_response(ErrorCode.UNAUTHORIZED, "Login required to check user safety")
    detected = body.get("detectedAllergens")
    if not is_string_list(detected):
        return error_response(ErrorCode.INVALID_INPUT, "detectedAllergens must be an array of strings")

    with db.get_session() as session:
        if get_user(session, user_id) is None:
            return error_response(ErrorCode.USER_NOT_FOUND, f"User {user_id} not found")
        user_allergens = load_user_allergens(session, user_id)
    return respond(allergen_report.user_safety(user_id, user_allergens, detected))


@router.get("/check-allergen/{ingredient}")
def check_ingredient_allergen(ingredient: str) -> JSONResponse:
    with db.get_session() as session:
        result = allergen_report.ingredient_allergen_details(session, ingredient)
    if result is None:
        return error_response(
            ErrorCode.INGREDIENT_NOT_FOUND,
            f"Ingredient '{ingredient}' not found",
            searchedTerm=ingredient,
            suggestion="Use GET /api/ai/ingredients/search to find ingredient names",
        )
    return respond(result)


@router.get("/allergens")
def get_allergens() -> JSONResponse:
    with db.get_session() as session:
        names = [a.name for a in list_allergens(session)]
    return respond(AllergenListResponse(count=len(names), allergens=names))


@router.get("/allergen/ingredients")
def get_allergen_ingredients() -> JSONResponse:
    with db.get_session() as session:
        return respond(allergen_report.ingredients_with_allergens(session))


@router.get("/allergen/statistics")
def get_allergen_statistics() -> JSONResponse:
    with db.get_session() as session:
        return respond(allergen_report.allergen_statistics(session))


@router.post("/analyze-food")
def analyze(body: dict = Body(...)) -> JSONResponse:
    description = body.get("foodDescription")
    if not isinstance(description, str) or not description.strip():
        return error_response(ErrorCode.INVALID_INPUT, "foodDescription must be non-empty text")

    try:
        with db.get_session() as session:
            analysis = analyze_food(session, description)
        found = bool(analysis.ingredients)
        return respond(
            AnalyzeFoodResponse(
                success=found,
                analysis=analysis,
                message=None if found else analysis.notes,
            )
        )
    except Exception:
        logger.exception("food.analyze_failed")
        return error_response(ErrorCode.INTERNAL_ERROR, "Unexpected error while analysing food")


@router.post("/check-allergen-safety")
def check_allergen_safety(
    body: dict = Body(...), user_id: Optional[int] = Depends(optional_user_id)
) -> JSONResponse:
    """Analyse the description, then match its allergens against the caller when logged in."""
    description = body.get("foodDescription")
    if not isinstance(description, str) or not description.strip():
        return error_response(ErrorCode.INVALID_INPUT, "foodDescription must be non-empty text")

    try:
        with db.get_session() as session:
            analysis = analyze_food(session, description)
            user_allergens = load_user_allergens(session, user_id) if user_id is not None else []
        verdict = check_safety(analysis.allergens, user_allergens)
        if verdict.is_safe:
            recommendation = "Food is safe to eat"
        else:
            recommendation = f"Do not eat: contains {', '.join(verdict.matched)}"
        return respond(
            AllergenSafetyResponse(
                food_analysis=analysis,
                user_allergens=user_allergens,
                matched_allergens=verdict.matched,
                is_safe=verdict.is_safe,
                severity="safe" if verdict.is_safe else "danger",
                recommendation=recommendation,
            )
        )
    except Exception:
        logger.exception("allergen.safety_failed user_id=%s", user_id)
        return error_response(ErrorCode.INTERNAL_ERROR, "Unexpected error while checking food safety")


@router.post("/detect-allergens")
def detect_allergens(
    body: dict = Body(...), user_id: Optional[int] = Depends(optional_user_id)
) -> JSONResponse:
    """Body: { name?, description?, ingredients? }. Succeeds only when every token resolves."""
    name = body.get("name")
    description = body.get("description")
    ingredients = body.get("ingredients") or []
    if (
        (name is not None and not isinstance(name, str))
        or (description is not None and not isinstance(description, str))
        or not is_string_list(ingredients)
    ):
        return error_response(ErrorCode.INVALID_INPUT, "name, description and ingredients must be text")
    if not collect_tokens(name, description, ingredients):
        return error_response(ErrorCode.EMPTY_INPUT, "Provide a name, description or ingredients")

    try:
        with db.get_session() as session:
            resolution, allergens = detect_ingredients(session, name, description, ingredients)
            user_allergens = load_user_allergens(session, user_id) if user_id is not None else []
        verdict = check_safety(allergens, user_allergens)
        return respond(
            DetectAllergensResponse(
                success=not resolution.unknown,
                ai_extracted=ExtractedIngredients(
                    ingredients=resolution.names,
                    possible_allergens=allergens,
                    summary=unknown_note(resolution.unknown),
                ),
                user_allergens=user_allergens,
                matched_allergens=verdict.matched,
                has_allergy=not verdict.is_safe,
            )
        )
    except Exception:
        logger.exception("allergen.detect_failed user_id=%s", user_id)
        return error_response(ErrorCode.INTERNAL_ERROR, "Unexpected error while detecting allergens")
