"""Personal allergen check for the logged-in user."""

from typing import Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from nutriplan.errors import ErrorCode
from nutriplan.logging import get_logger
from nutriplan.api.responses import error_response, is_string_list, optional_user_id, respond
from nutriplan.schemas.allergen import UserAllergenCheckResponse
from nutriplan.services.allergens import aggregate_allergens, check_safety, load_user_allergens
from nutriplan.services.resolver import resolve_many
from nutriplan.storage import db
from nutriplan.storage.repositories import get_user

router = APIRouter(prefix="/allergens")
logger = get_logger(__name__)


@router.post("/check")
def check_user_allergens(
    body: dict = Body(...), user_id: Optional[int] = Depends(optional_user_id)
) -> JSONResponse:
    """
    Body: { ingredients?, menuAllergens? }.

    Detected terms are the menu allergens, the raw ingredient strings and the
    allergens of every ingredient that resolves in the knowledge base.
    """
    if user_id is None:
        return error_response(ErrorCode.UNAUTHORIZED, "Login required to check allergens")
    ingredients = body.get("ingredients") or []
    menu_allergens = body.get("menuAllergens") or []
    if not is_string_list(ingredients) or not is_string_list(menu_allergens):
        return error_response(
            ErrorCode.INVALID_INPUT, "ingredients and menuAllergens must be arrays of strings"
        )

    with db.get_session() as session:
        if get_user(session, user_id) is None:
            return error_response(ErrorCode.USER_NOT_FOUND, f"User {user_id} not found")
        user_allergens = load_user_allergens(session, user_id)
        resolved = resolve_many(session, ingredients).validated
        detected = [*menu_allergens, *ingredients, *aggregate_allergens(session, resolved)]

    verdict = check_safety(detected, user_allergens)
    if verdict.is_safe:
        recommendation = "No allergens from your profile were detected"
    else:
        recommendation = f"Avoid this menu: it matches your allergies ({', '.join(verdict.matched)})"
    logger.info("user_allergens.check user_id=%s matched=%s", user_id, verdict.matched)
    return respond(
        UserAllergenCheckResponse(
            has_allergy=not verdict.is_safe,
            matched_allergens=verdict.matched,
            severity="none" if verdict.is_safe else "high",
            recommendation=recommendation,
        )
    )
