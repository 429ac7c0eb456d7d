import re
from typing import Iterable, List, Optional

from .schemas import Recipe

CATEGORY_ID_MAX = 20

_NON_ALNUM = re.compile(r"[^a-z0-9]")

# Umlauts sort next to their base letter, as in German dictionaries
_COLLATE = str.maketrans({"ä": "a", "ö": "o", "ü": "u", "ß": "ss"})


def category_id_from_name(name: str) -> str:
    """Derive a category id: lowercased, ASCII alphanumerics only, 20 chars max.

    Non-ASCII letters are stripped, not transliterated, so "Gemüse" becomes
    "gemse". The result may be empty.
    """
    if not name:
        return ""
    return _NON_ALNUM.sub("", name.lower())[:CATEGORY_ID_MAX]


def collation_key(s: str) -> str:
    return s.casefold().translate(_COLLATE)


def matches(recipe: Recipe, search: Optional[str] = None,
            category: Optional[str] = None) -> bool:
    if search and search.strip().lower() not in recipe.name.lower():
        return False
    if category is not None and recipe.category != category:
        return False
    return True


def filter_recipes(recipes: Iterable[Recipe], search: Optional[str] = None,
                   category: Optional[str] = None) -> List[Recipe]:
    """Keep recipes whose name contains `search` (case-insensitive) and whose
    category equals `category` exactly. None disables a criterion."""
    return [r for r in recipes if matches(r, search, category)]


def sort_for_print(recipes: Iterable[Recipe]) -> List[Recipe]:
    """Order by category, then name; recipes without a category go last."""
    return sorted(
        recipes,
        key=lambda r: (
            not r.category,
            collation_key(r.category),
            collation_key(r.name),
        ),
    )
