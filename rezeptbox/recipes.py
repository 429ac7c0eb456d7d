"""Recipe store backed by a CSV file with one row per ingredient.

Rows are grouped by dish name into Recipe objects on read and flattened back on
write, the category repeated on every row. Like the category store, each
operation rewrites the whole file and the last writer wins.
"""

import csv
import logging
from collections import Counter
from typing import Dict, List

from pydantic import ValidationError as SchemaError

from .config import StoreConfig
from .errors import DuplicateError, NotFoundError, StoreWriteError
from .schemas import Ingredient, Recipe

logger = logging.getLogger(__name__)

COL_CATEGORY = "Kategorie"
COL_DISH = "Gericht"
COL_INGREDIENT = "Zutat"
COL_QUANTITY = "Menge"
COL_ACTION = "Tätigkeit"

HEADER = [COL_CATEGORY, COL_DISH, COL_INGREDIENT, COL_QUANTITY, COL_ACTION]


def _cell(row: dict, column: str) -> str:
    return (row.get(column) or "").strip()


def group_rows(rows) -> List[Recipe]:
    """Group flat rows into recipes, in first-seen order of dish names.

    The category of a recipe is taken from its first row. Rows with empty
    ingredient columns register the recipe without adding an ingredient.
    """
    grouped: Dict[str, dict] = {}
    for row in rows:
        name = _cell(row, COL_DISH)
        if not name:
            continue
        entry = grouped.setdefault(
            name,
            {"name": name, "category": _cell(row, COL_CATEGORY), "ingredients": []},
        )
        ing = Ingredient(
            ingredient=_cell(row, COL_INGREDIENT),
            quantity=_cell(row, COL_QUANTITY),
            action=_cell(row, COL_ACTION),
        )
        if not ing.is_empty():
            entry["ingredients"].append(ing)
    return [Recipe.model_validate(e) for e in grouped.values()]


def flatten_recipes(recipes: List[Recipe]) -> List[dict]:
    rows = []
    for recipe in recipes:
        # placeholder row keeps recipes without ingredients on disk
        ingredients = recipe.ingredients or [Ingredient()]
        for ing in ingredients:
            rows.append({
                COL_CATEGORY: recipe.category,
                COL_DISH: recipe.name,
                COL_INGREDIENT: ing.ingredient,
                COL_QUANTITY: ing.quantity,
                COL_ACTION: ing.action,
            })
    return rows


def _index(recipes: List[Recipe]) -> Dict[str, int]:
    return {r.name: i for i, r in enumerate(recipes)}


class RecipeStore:
    def __init__(self, config: StoreConfig):
        self.path = config.recipes_path

    def load(self) -> List[Recipe]:
        """Read all recipes. A missing or unparsable file reads as empty."""
        p = self.path
        if not p.exists():
            return []
        try:
            with p.open("r", encoding="utf-8", newline="") as f:
                recipes = group_rows(csv.DictReader(f))
        except (OSError, UnicodeDecodeError, csv.Error, SchemaError) as e:
            logger.warning(
                f"Ignoring unreadable recipe file: {e}", extra={"file": p},
            )
            return []
        logger.debug(f"Loaded {len(recipes)} recipes", extra={"file": p})
        return recipes

    def save(self, recipes: List[Recipe]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8", newline="") as f:
                writer = csv.DictWriter(f, fieldnames=HEADER)
                writer.writeheader()
                writer.writerows(flatten_recipes(recipes))
        except OSError as e:
            raise StoreWriteError(self.path, e.strerror or str(e)) from e
        logger.info(
            f"Wrote {len(recipes)} recipes",
            extra={"file": self.path, "count": len(recipes)},
        )

    def list(self) -> List[Recipe]:
        return self.load()

    def get(self, name: str) -> Recipe:
        recipes = self.load()
        pos = _index(recipes).get(name)
        if pos is None:
            raise NotFoundError("recipe", name)
        return recipes[pos]

    def create(self, recipe: Recipe) -> Recipe:
        recipes = self.load()
        if recipe.name in _index(recipes):
            raise DuplicateError("recipe", recipe.name)
        recipes.append(recipe)
        self.save(recipes)
        return recipe

    def update(self, original_name: str, recipe: Recipe) -> Recipe:
        recipes = self.load()
        index = _index(recipes)
        pos = index.get(original_name)
        if pos is None:
            raise NotFoundError("recipe", original_name)
        if recipe.name != original_name and recipe.name in index:
            raise DuplicateError("recipe", recipe.name)
        recipes[pos] = recipe
        self.save(recipes)
        return recipe

    def delete(self, name: str) -> Recipe:
        recipes = self.load()
        pos = _index(recipes).get(name)
        if pos is None:
            raise NotFoundError("recipe", name)
        removed = recipes.pop(pos)
        self.save(recipes)
        return removed

    def rename_category(self, old: str, new: str) -> int:
        """Point every recipe filed under `old` (exact match) at `new`.

        An empty `new` clears the reference. Returns the number of recipes
        changed; the file is only rewritten when that number is non-zero.
        """
        recipes = self.load()
        updated = 0
        for i, r in enumerate(recipes):
            if r.category == old:
                recipes[i] = r.model_copy(update={"category": new})
                updated += 1
        if updated:
            self.save(recipes)
        logger.info(
            f"Moved {updated} recipe(s) from category '{old}' to '{new}'",
            extra={"count": updated},
        )
        return updated

    def category_counts(self) -> Counter:
        return Counter(r.category for r in self.load())
