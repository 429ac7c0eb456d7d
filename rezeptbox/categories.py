"""Category store backed by a JSON file.

File shape: {"categories": [{id, name, icon, color}, ...]}. Every operation
loads the whole file, mutates the list in memory and writes it back. There is
no locking: with two writers the last write wins.
"""

import json
import logging
from typing import Dict, List, Tuple

from pydantic import ValidationError as SchemaError

from .config import StoreConfig
from .errors import DuplicateError, NotFoundError, StoreWriteError, ValidationError
from .normalize import category_id_from_name
from .schemas import Category

logger = logging.getLogger(__name__)


def _index(categories: List[Category]) -> Dict[str, int]:
    return {c.id: i for i, c in enumerate(categories)}


class CategoryStore:
    def __init__(self, config: StoreConfig):
        self.path = config.categories_path

    def _read(self) -> Tuple[List[Category], int]:
        p = self.path
        if not p.exists():
            return [], 0
        try:
            with p.open("r", encoding="utf-8") as f:
                data = json.load(f)
            raw = data["categories"]
            if not isinstance(raw, list):
                raise TypeError("'categories' is not a list")
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(
                f"Ignoring unreadable category file: {e}", extra={"file": p},
            )
            return [], 0

        categories = []
        for item in raw:
            try:
                categories.append(Category.model_validate(item))
            except SchemaError as e:
                logger.warning(
                    f"Skipping invalid category {item!r}: {e.error_count()} error(s)",
                    extra={"file": p},
                )
        logger.debug(f"Loaded {len(categories)} categories", extra={"file": p})
        return categories, len(raw) - len(categories)

    def load(self) -> List[Category]:
        """Read all categories. A missing or unparsable file reads as empty."""
        return self._read()[0]

    def _load_for_write(self) -> List[Category]:
        # rewriting the file would erase the records that were skipped
        categories, skipped = self._read()
        if skipped:
            raise StoreWriteError(
                self.path, f"{skipped} invalid category record(s) must be fixed first",
            )
        return categories

    def save(self, categories: List[Category]) -> None:
        data = {"categories": [c.model_dump(mode="json") for c in categories]}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise StoreWriteError(self.path, e.strerror or str(e)) from e
        logger.info(
            f"Wrote {len(categories)} categories",
            extra={"file": self.path, "count": len(categories)},
        )

    def list(self) -> List[Category]:
        return self.load()

    def get(self, category_id: str) -> Category:
        categories = self.load()
        pos = _index(categories).get(category_id)
        if pos is None:
            raise NotFoundError("category", category_id)
        return categories[pos]

    def create(self, category: Category) -> Category:
        categories = self._load_for_write()
        if not category.id:
            category = category.model_copy(
                update={"id": category_id_from_name(category.name)}
            )
        if not category.id:
            raise ValidationError(
                f"cannot derive an id from name '{category.name}'", "id",
            )
        lowered = category.name.lower()
        if category.id in _index(categories) or any(
            c.name.lower() == lowered for c in categories
        ):
            raise DuplicateError("category", category.name)
        categories.append(category)
        self.save(categories)
        return category

    def update(self, original_id: str, category: Category) -> Category:
        categories = self._load_for_write()
        index = _index(categories)
        pos = index.get(original_id)
        if pos is None:
            raise NotFoundError("category", original_id)
        if not category.id:
            category = category.model_copy(update={"id": original_id})
        if category.id != original_id and category.id in index:
            raise DuplicateError("category", category.id)
        categories[pos] = category
        self.save(categories)
        return category

    def delete(self, category_id: str) -> Category:
        categories = self._load_for_write()
        pos = _index(categories).get(category_id)
        if pos is None:
            raise NotFoundError("category", category_id)
        removed = categories.pop(pos)
        self.save(categories)
        return removed
