from typing import Iterable, Optional

from sqlalchemy import func
from sqlmodel import Session, col, select

from nutriplan.logging import get_logger
from nutriplan.storage.models import (
    Allergen,
    Ingredient,
    IngredientAllergen,
    MenuCase,
    User,
    UserAllergen,
)

logger = get_logger(__name__)


# Ingredients


def list_ingredients(session: Session) -> list[Ingredient]:
    return list(session.exec(select(Ingredient).order_by(Ingredient.name)))


def find_ingredient_by_name(session: Session, name: str) -> Ingredient | None:
    return session.exec(select(Ingredient).where(Ingredient.name == name)).first()


def find_ingredient_by_synonym(session: Session, text: str) -> Ingredient | None:
    """First ingredient (insertion order) whose raw synonym string contains text."""
    return session.exec(
        select(Ingredient)
        .where(func.lower(Ingredient.synonyms).contains(text, autoescape=True))
        .order_by(Ingredient.id)
    ).first()


def search_ingredients(session: Session, keyword: str, limit: int) -> list[Ingredient]:
    return list(
        session.exec(
            select(Ingredient)
            .where(
                func.lower(Ingredient.name).contains(keyword, autoescape=True)
                | func.lower(Ingredient.synonyms).contains(keyword, autoescape=True)
            )
            .order_by(Ingredient.name)
            .limit(limit)
        )
    )


def list_ingredients_by_category(session: Session, category: str) -> list[Ingredient]:
    return list(
        session.exec(
            select(Ingredient).where(Ingredient.category == category).order_by(Ingredient.name)
        )
    )


def list_categories(session: Session) -> list[str]:
    return sorted(session.exec(select(Ingredient.category).distinct()))


# Allergens


def list_allergens(session: Session) -> list[Allergen]:
    return list(session.exec(select(Allergen).order_by(Allergen.name)))


def get_allergen_names(session: Session, ingredient_ids: Iterable[int]) -> dict[int, list[str]]:
    """Map ingredient id -> linked allergen names (sorted). Ids without links map to []."""
    ids = list(ingredient_ids)
    out: dict[int, list[str]] = {i: [] for i in ids}
    if not ids:
        return out
    rows = session.exec(
        select(IngredientAllergen.ingredient_id, Allergen.name)
        .join(Allergen, Allergen.id == IngredientAllergen.allergen_id)
        .where(col(IngredientAllergen.ingredient_id).in_(ids))
        .order_by(Allergen.name)
    )
    for ingredient_id, allergen_name in rows:
        out[ingredient_id].append(allergen_name)
    return out


def list_allergens_for_ingredient(session: Session, ingredient_id: int) -> list[Allergen]:
    return list(
        session.exec(
            select(Allergen)
            .join(IngredientAllergen, IngredientAllergen.allergen_id == Allergen.id)
            .where(IngredientAllergen.ingredient_id == ingredient_id)
            .order_by(Allergen.name)
        )
    )


def list_allergen_links(session: Session) -> dict[str, list[str]]:
    """Allergen name -> ingredient names linked to it, in link order. Every allergen is present."""
    out: dict[str, list[str]] = {a.name: [] for a in list_allergens(session)}
    rows = session.exec(
        select(Allergen.name, Ingredient.name)
        .join(IngredientAllergen, IngredientAllergen.allergen_id == Allergen.id)
        .join(Ingredient, Ingredient.id == IngredientAllergen.ingredient_id)
        .order_by(Allergen.name, IngredientAllergen.id)
    )
    for allergen_name, ingredient_name in rows:
        out[allergen_name].append(ingredient_name)
    return out


# Menu cases


def _menu_case_query():
    return select(MenuCase, Ingredient).join(
        Ingredient, Ingredient.id == MenuCase.base_ingredient_id
    )


def list_menu_cases_for_ingredient(
    session: Session, ingredient_id: int, limit: Optional[int] = None
) -> list[MenuCase]:
    query = (
        select(MenuCase)
        .where(MenuCase.base_ingredient_id == ingredient_id)
        .order_by(MenuCase.menu_name)
    )
    if limit is not None:
        query = query.limit(limit)
    return list(session.exec(query))


def list_menu_cases(session: Session) -> list[tuple[MenuCase, Ingredient]]:
    return list(session.exec(_menu_case_query().order_by(Ingredient.name, MenuCase.menu_name)))


def list_menu_cases_by_category(
    session: Session, category: str, limit: int
) -> list[tuple[MenuCase, Ingredient]]:
    return list(
        session.exec(
            _menu_case_query()
            .where(Ingredient.category == category)
            .order_by(MenuCase.menu_name)
            .limit(limit)
        )
    )


def list_menu_cases_by_calories(
    session: Session, min_calories: int, max_calories: int, limit: int
) -> list[tuple[MenuCase, Ingredient]]:
    return list(
        session.exec(
            _menu_case_query()
            .where(MenuCase.calories >= min_calories, MenuCase.calories <= max_calories)
            .order_by(MenuCase.calories, MenuCase.menu_name)
            .limit(limit)
        )
    )


def find_menu_case_by_name(session: Session, menu_name: str) -> tuple[MenuCase, Ingredient] | None:
    return session.exec(
        _menu_case_query().where(func.lower(MenuCase.menu_name) == menu_name.lower())
    ).first()


def page_menu_cases(session: Session, offset: int, limit: int) -> list[tuple[MenuCase, Ingredient]]:
    return list(
        session.exec(_menu_case_query().order_by(MenuCase.id).offset(offset).limit(limit))
    )


def count_menu_cases(session: Session) -> int:
    return session.exec(select(func.count()).select_from(MenuCase)).one()


# Users


def get_user(session: Session, user_id: int) -> User | None:
    return session.exec(select(User).where(User.id == user_id)).first()


def list_user_allergens(session: Session, user_id: int) -> list[UserAllergen]:
    return list(
        session.exec(
            select(UserAllergen).where(UserAllergen.user_id == user_id).order_by(UserAllergen.id)
        )
    )


def count_knowledge_rows(session: Session) -> dict[str, int]:
    return {
        "allergens": session.exec(select(func.count()).select_from(Allergen)).one(),
        "ingredients": session.exec(select(func.count()).select_from(Ingredient)).one(),
        "ingredient_allergens": session.exec(
            select(func.count()).select_from(IngredientAllergen)
        ).one(),
        "menu_cases": count_menu_cases(session),
    }


# Knowledge-base upserts (seeding only; request handlers never write here)


def get_or_create_allergen(session: Session, name: str, description: str) -> tuple[Allergen, bool]:
    allergen = session.exec(select(Allergen).where(Allergen.name == name)).first()
    if allergen:
        return allergen, False
    allergen = Allergen(name=name, description=description)
    session.add(allergen)
    session.commit()
    session.refresh(allergen)
    logger.info("allergen.created id=%s name=%s", allergen.id, allergen.name)
    return allergen, True


def get_or_create_ingredient(
    session: Session, name: str, category: str, synonyms: Optional[str]
) -> tuple[Ingredient, bool]:
    ingredient = find_ingredient_by_name(session, name)
    if ingredient:
        return ingredient, False
    ingredient = Ingredient(name=name, category=category, synonyms=synonyms or None)
    session.add(ingredient)
    session.commit()
    session.refresh(ingredient)
    logger.info(
        "ingredient.created id=%s name=%s category=%s", ingredient.id, ingredient.name, ingredient.category
    )
    return ingredient, True


def link_ingredient_allergen(session: Session, ingredient_id: int, allergen_id: int) -> bool:
    existing = session.exec(
        select(IngredientAllergen).where(
            IngredientAllergen.ingredient_id == ingredient_id,
            IngredientAllergen.allergen_id == allergen_id,
        )
    ).first()
    if existing:
        return False
    session.add(IngredientAllergen(ingredient_id=ingredient_id, allergen_id=allergen_id))
    session.commit()
    return True


def get_or_create_menu_case(session: Session, menu_case: MenuCase) -> tuple[MenuCase, bool]:
    existing = session.exec(
        select(MenuCase).where(
            MenuCase.base_ingredient_id == menu_case.base_ingredient_id,
            MenuCase.menu_name == menu_case.menu_name,
        )
    ).first()
    if existing:
        return existing, False
    session.add(menu_case)
    session.commit()
    session.refresh(menu_case)
    logger.info(
        "menu_case.created id=%s name=%s base_ingredient_id=%s",
        menu_case.id,
        menu_case.menu_name,
        menu_case.base_ingredient_id,
    )
    return menu_case, True
