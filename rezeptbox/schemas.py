from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_COLOR = "#D97706"


class Icon(str, Enum):
    POTATO = "potato"
    PASTA = "pasta"
    CASSEROLE = "casserole"
    BEANS = "beans"
    SOUP = "soup"
    SALAD = "salad"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN


class Category(BaseModel):
    """A category as stored on disk; id and color are taken as they are."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field("", json_schema_extra={"example": "hauptgericht"})
    name: str = Field(
        ..., min_length=1, json_schema_extra={"example": "Hauptgericht"}
    )
    icon: Icon = Icon.CASSEROLE
    color: str = DEFAULT_COLOR

    @field_validator("icon", mode="before")
    @classmethod
    def resolve_icon(cls, v):
        # unrecognised tags become Icon.UNKNOWN instead of failing
        if isinstance(v, str):
            return Icon(v.strip().lower())
        return v


class CategoryCreate(Category):
    id: str = Field(
        "", max_length=20, json_schema_extra={"example": "hauptgericht"}
    )
    color: str = Field(DEFAULT_COLOR, pattern=r"^#[0-9A-Fa-f]{6}$")


class CategoryWithCount(Category):
    recipe_count: int = 0


class Ingredient(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    ingredient: str = Field("", json_schema_extra={"example": "Salz"})
    quantity: str = Field("", json_schema_extra={"example": "1TL"})
    action: str = Field("", json_schema_extra={"example": "würzen"})

    def is_empty(self) -> bool:
        return not (self.ingredient or self.quantity or self.action)


class Recipe(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, json_schema_extra={"example": "Suppe"})
    category: str = Field("", json_schema_extra={"example": "Hauptgericht"})
    ingredients: List[Ingredient] = Field(default_factory=list)

    @field_validator("ingredients")
    @classmethod
    def drop_empty_ingredients(cls, v: List[Ingredient]) -> List[Ingredient]:
        return [i for i in v if not i.is_empty()]


class RenameCategoryRequest(BaseModel):
    old_category: str
    new_category: str = ""


class PdfSelection(BaseModel):
    names: List[str] = Field(
        ..., json_schema_extra={"example": ["Suppe", "Kartoffelsalat"]}
    )
    lang: Optional[str] = None
