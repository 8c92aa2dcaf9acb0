"""
Allergen aggregation and user safety matching.

Aggregation unions the allergens linked (IngredientAllergen) to every resolved
ingredient. Matching compares those against a user's declared allergens with
case-insensitive substring containment in both directions, so "nut" matches
"peanut" and "peanut" matches "nut".
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from sqlmodel import Session

from nutriplan.logging import get_logger
from nutriplan.storage.models import Ingredient
from nutriplan.storage.repositories import get_allergen_names, get_user, list_user_allergens

logger = get_logger(__name__)

RISK_SAFE = "safe"
RISK_WARNING = "warning"
RISK_CRITICAL = "critical"


def merge_allergens(groups: Iterable[Iterable[str]]) -> list[str]:
    """Deduplicated, alphabetically sorted union of allergen names."""
    merged: set[str] = set()
    for group in groups:
        merged.update(group)
    return sorted(merged)


def ingredient_allergens(session: Session, ingredients: Iterable[Ingredient]) -> dict[int, list[str]]:
    return get_allergen_names(session, [ing.id for ing in ingredients])


def aggregate_allergens(session: Session, ingredients: Iterable[Ingredient]) -> list[str]:
    return merge_allergens(ingredient_allergens(session, ingredients).values())


def matches_allergy(detected_allergens: Iterable[str], user_allergens: Iterable[str]) -> list[str]:
    """
    Return the user allergen terms (lowercased, in user order) that match any
    detected allergen, where a match is d in u or u in d.
    """
    detected = [d.lower() for d in detected_allergens]
    return [
        u
        for u in (a.lower() for a in user_allergens)
        if any(d in u or u in d for d in detected)
    ]


def parse_custom_allergies(text: Optional[str]) -> list[str]:
    if not text:
        return []
    return [part.strip() for part in text.split(",") if part.strip()]


def load_user_allergens(session: Session, user_id: int) -> list[str]:
    """
    Structured UserAllergen tags followed by the comma-split custom allergies,
    lowercased and deduplicated. Free text is accepted as-is; nothing is checked
    against the Allergen table.
    """
    user = get_user(session, user_id)
    if user is None:
        logger.info("user_allergens.unknown_user user_id=%s", user_id)
        return []
    raw = [ua.allergen for ua in list_user_allergens(session, user_id)]
    raw += parse_custom_allergies(user.custom_allergies)
    seen: set[str] = set()
    out: list[str] = []
    for item in raw:
        term = item.strip().lower()
        if term and term not in seen:
            seen.add(term)
            out.append(term)
    return out


def risk_level(matched: list[str]) -> str:
    if not matched:
        return RISK_SAFE
    return RISK_WARNING if len(matched) == 1 else RISK_CRITICAL


@dataclass
class SafetyVerdict:
    user_allergens: list[str]
    matched: list[str]

    @property
    def is_safe(self) -> bool:
        return not self.matched


def check_safety(detected_allergens: Iterable[str], user_allergens: list[str]) -> SafetyVerdict:
    return SafetyVerdict(
        user_allergens=user_allergens,
        matched=matches_allergy(detected_allergens, user_allergens),
    )
