"""
Ingredient resolution against the knowledge base.

Free text is trimmed and lowercased, then matched by exact ingredient name or,
failing that, as a substring of an ingredient's raw comma-joined synonym
string (first ingredient in insertion order wins). The synonym check is
not token-based: "kampung" resolves to "ayam" through
"ayam kampung,dada ayam,ayam fillet", and a query spanning a comma can match.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Iterable

from sqlmodel import Session

from nutriplan.logging import get_logger
from nutriplan.storage.models import Ingredient
from nutriplan.storage.repositories import find_ingredient_by_name, find_ingredient_by_synonym

logger = get_logger(__name__)

_TOKEN_SPLIT = re.compile(r"[,\n]")


def normalize_name(text: str) -> str:
    return text.strip().lower()


def split_tokens(text: str) -> list[str]:
    """Split on comma or newline; normalize each piece and drop empties, keeping order."""
    tokens = (normalize_name(part) for part in _TOKEN_SPLIT.split(text))
    return [t for t in tokens if t]


def resolve_ingredient(session: Session, raw: Any) -> Ingredient | None:
    if not isinstance(raw, str):
        return None
    normalized = normalize_name(raw)
    if not normalized:
        return None
    ingredient = find_ingredient_by_name(session, normalized)
    if ingredient is None:
        ingredient = find_ingredient_by_synonym(session, normalized)
    if ingredient is None:
        logger.info("ingredient.resolve.miss text=%s", normalized)
    return ingredient


@dataclass
class Resolution:
    validated: list[Ingredient] = field(default_factory=list)
    unknown: list[str] = field(default_factory=list)

    @property
    def names(self) -> list[str]:
        return [ing.name for ing in self.validated]


def resolve_many(session: Session, tokens: Iterable[str]) -> Resolution:
    """Resolve each token independently. Unknown tokens are kept normalized, in input order."""
    resolution = Resolution()
    for token in tokens:
        normalized = normalize_name(token)
        if not normalized:
            continue
        ingredient = resolve_ingredient(session, normalized)
        if ingredient is None:
            resolution.unknown.append(normalized)
        else:
            resolution.validated.append(ingredient)
    return resolution


def resolve_text(session: Session, text: str) -> Resolution:
    return resolve_many(session, split_tokens(text))
