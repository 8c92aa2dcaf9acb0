from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


INGREDIENT_CATEGORIES = (
    "protein",
    "seafood",
    "soy",
    "carb",
    "gluten",
    "vegetable",
    "fruit",
    "dairy",
    "misc",
)


class Allergen(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)  # lowercase canonical, e.g. "soy"
    description: str = ""


class Ingredient(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)  # lowercase canonical lookup key
    category: str
    synonyms: Optional[str] = None  # comma-joined lowercase aliases: "sapi,daging"

    @property
    def synonym_list(self) -> list[str]:
        if not self.synonyms:
            return []
        return [s.strip() for s in self.synonyms.split(",") if s.strip()]


class IngredientAllergen(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("ingredient_id", "allergen_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    ingredient_id: int = Field(foreign_key="ingredient.id", index=True)
    allergen_id: int = Field(foreign_key="allergen.id", index=True)


class MenuCase(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    base_ingredient_id: int = Field(foreign_key="ingredient.id", index=True)
    menu_name: str
    description: Optional[str] = None
    calories: int
    protein: Optional[str] = None  # "35g"
    carbs: Optional[str] = None
    fat: Optional[str] = None


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    email: str = Field(index=True, unique=True)
    role: str = "student"  # student | admin | kitchen_staff
    custom_allergies: Optional[str] = None  # free text, comma-separated
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class UserAllergen(SQLModel, table=True):
    # allergen is plain text, not a foreign key to Allergen
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    allergen: str
    is_custom: bool = False
