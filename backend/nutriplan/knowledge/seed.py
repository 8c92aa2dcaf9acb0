"""Idempotent upsert of the fixed knowledge base. Run: python -m nutriplan.knowledge.seed"""

from sqlmodel import Session

from nutriplan.knowledge.seed_data import ALLERGENS, INGREDIENTS, MENU_CASES
from nutriplan.logging import configure_logging, get_logger
from nutriplan.storage.models import MenuCase
from nutriplan.storage.repositories import (
    count_knowledge_rows,
    get_or_create_allergen,
    get_or_create_ingredient,
    get_or_create_menu_case,
    link_ingredient_allergen,
)
from nutriplan.utils.timing import time_span

logger = get_logger(__name__)


def seed_knowledge_base(session: Session) -> dict[str, int]:
    """
    Upsert allergens, ingredients, ingredient-allergen links and menu cases.
    Existing rows are left untouched, so running twice creates nothing new.
    Returns the number of rows created per table.
    """
    created = {"allergens": 0, "ingredients": 0, "ingredient_allergens": 0, "menu_cases": 0}

    with time_span("knowledge.seed"):
        allergen_ids: dict[str, int] = {}
        for name, description in ALLERGENS:
            allergen, is_new = get_or_create_allergen(session, name, description)
            allergen_ids[allergen.name] = allergen.id
            created["allergens"] += int(is_new)

        ingredient_ids: dict[str, int] = {}
        for name, category, synonyms, allergen_names in INGREDIENTS:
            ingredient, is_new = get_or_create_ingredient(session, name, category, synonyms)
            ingredient_ids[ingredient.name] = ingredient.id
            created["ingredients"] += int(is_new)
            for allergen_name in allergen_names:
                allergen_id = allergen_ids.get(allergen_name)
                if allergen_id is None:
                    logger.warning(
                        "knowledge.seed.unknown_allergen ingredient=%s allergen=%s", name, allergen_name
                    )
                    continue
                created["ingredient_allergens"] += int(
                    link_ingredient_allergen(session, ingredient.id, allergen_id)
                )

        for case in MENU_CASES:
            base_id = ingredient_ids.get(case["base_ingredient"])
            if base_id is None:
                logger.warning(
                    "knowledge.seed.unknown_base menu=%s base=%s", case["menu_name"], case["base_ingredient"]
                )
                continue
            fields = {k: v for k, v in case.items() if k != "base_ingredient"}
            _, is_new = get_or_create_menu_case(session, MenuCase(base_ingredient_id=base_id, **fields))
            created["menu_cases"] += int(is_new)

    totals = count_knowledge_rows(session)
    logger.info(
        "knowledge.seed.done created=%s totals=%s",
        created,
        totals,
    )
    return created


if __name__ == "__main__":
    from nutriplan.config import settings
    from nutriplan.storage.db import create_db_and_tables, get_session

    configure_logging(settings.log_level)
    create_db_and_tables()
    with get_session() as session:
        seed_knowledge_base(session)
