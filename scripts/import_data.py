"""Import recipes from a JSON file into the CSV recipe store.

The JSON file holds a list of {"name", "category", "ingredients": [...]}
objects. Recipes whose name is already stored are skipped.
"""

import json
import sys
from pathlib import Path

from rezeptbox.config import StoreConfig, get_settings
from rezeptbox.recipes import RecipeStore
from rezeptbox.schemas import Recipe


def import_recipes(store: RecipeStore, data: list) -> int:
    recipes = store.load()
    existing = {r.name for r in recipes}
    added = 0
    for r in data:
        name = (r.get('name') or '').strip()
        if not name or name in existing:
            continue
        recipes.append(Recipe.model_validate(r))
        existing.add(name)
        added += 1
    if added:
        store.save(recipes)
    return added


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    p = Path(argv[0]) if argv else Path(__file__).resolve().parents[1] / 'data' / 'recipes.json'
    if not p.exists():
        print(f'{p} not found')
        return
    data = json.loads(p.read_text(encoding='utf-8'))
    store = RecipeStore(StoreConfig.from_settings(get_settings()))
    added = import_recipes(store, data)
    print(f'Imported {added} recipes')


if __name__ == '__main__':
    main()
