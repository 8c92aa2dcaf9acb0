"""Case-based menu retrieval endpoints."""

from fastapi import APIRouter, Body, Query
from fastapi.responses import JSONResponse

from nutriplan.config import settings
from nutriplan.errors import ErrorCode
from nutriplan.logging import get_logger
from nutriplan.api.responses import error_response, respond
from nutriplan.services import menu_cbr
from nutriplan.storage import db
from nutriplan.utils.timing import time_span

router = APIRouter()
logger = get_logger(__name__)


@router.post("/generate-menu-cbr")
@router.post("/generate-menu")
def generate_menu(body: dict = Body(...)) -> JSONResponse:
    """Body: { baseIngredient } or { foodName }. Returns stored menus, never generated ones."""
    raw_name = body.get("baseIngredient")
    if raw_name is None:
        raw_name = body.get("foodName")

    try:
        with time_span("cbr.generate"):
            with db.get_session() as session:
                result = menu_cbr.retrieve_menus(session, raw_name, settings.cbr_default_limit)
        return respond(result)
    except Exception:
        logger.exception("cbr.generate_failed ingredient=%s", raw_name)
        return error_response(ErrorCode.INTERNAL_ERROR, "Unexpected error while retrieving menus")


@router.get("/cbr/cases")
def get_cases() -> JSONResponse:
    with db.get_session() as session:
        return respond(menu_cbr.grouped_menu_cases(session))


@router.get("/cbr/statistics")
def get_statistics() -> JSONResponse:
    with db.get_session() as session:
        return respond(menu_cbr.menu_statistics(session))


@router.get("/cbr/random")
def get_random(limit: int = Query(default=3)) -> JSONResponse:
    with db.get_session() as session:
        result = menu_cbr.random_menus(session, limit)
    return respond(result)


@router.get("/cbr/category/{category}")
def get_by_category(category: str, limit: int = Query(default=10)) -> JSONResponse:
    with db.get_session() as session:
        return respond(menu_cbr.menus_by_category(session, category, limit))


@router.get("/cbr/calories")
def get_by_calories(
    min_calories: int = Query(default=0),
    max_calories: int = Query(default=10000),
    limit: int = Query(default=10),
) -> JSONResponse:
    if min_calories > max_calories:
        return error_response(ErrorCode.INVALID_INPUT, "min_calories must not exceed max_calories")
    with db.get_session() as session:
        return respond(menu_cbr.menus_by_calorie_range(session, min_calories, max_calories, limit))


@router.get("/cbr/menu/{menu_name}")
def get_menu(menu_name: str) -> JSONResponse:
    with db.get_session() as session:
        return respond(menu_cbr.menu_by_name(session, menu_name))
