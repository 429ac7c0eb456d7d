"""Shared fixtures: every test gets its own pair of store files."""
import sys
from pathlib import Path

# Ensure project root is on sys.path so `rezeptbox` can be imported when tests are run
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))  # noqa: E402

import pytest  # noqa: E402

from rezeptbox.categories import CategoryStore  # noqa: E402
from rezeptbox.config import StoreConfig  # noqa: E402
from rezeptbox.recipes import RecipeStore  # noqa: E402


@pytest.fixture
def config(tmp_path):
    return StoreConfig(
        categories_path=tmp_path / "categories.json",
        recipes_path=tmp_path / "rezepte.csv",
    )


@pytest.fixture
def category_store(config):
    return CategoryStore(config)


@pytest.fixture
def recipe_store(config):
    return RecipeStore(config)
