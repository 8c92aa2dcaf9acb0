from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase JSON keys (foodName, validationPercentage, ...)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class IngredientRef(CamelModel):
    id: int
    name: str
    category: str


class IngredientSummary(IngredientRef):
    synonyms: Optional[str] = None


class IngredientWithAllergens(IngredientSummary):
    allergens: list[str] = []
