# flake8: noqa
import pytest
from fastapi.testclient import TestClient

from rezeptbox import app as app_module


@pytest.fixture
def client(category_store, recipe_store):
    app_module.app.dependency_overrides[app_module.get_category_store] = lambda: category_store
    app_module.app.dependency_overrides[app_module.get_recipe_store] = lambda: recipe_store
    yield TestClient(app_module.app)
    app_module.app.dependency_overrides.clear()


SOUP = {
    "name": "Suppe",
    "category": "Hauptgericht",
    "ingredients": [
        {"ingredient": "Wasser", "quantity": "1L", "action": ""},
        {"ingredient": "Salz", "quantity": "1TL", "action": "würzen"},
    ],
}


def test_health(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


def test_category_crud(client):
    res = client.post("/api/categories", json={"name": "Hauptgericht", "icon": "pasta", "color": "#DC2626"})
    assert res.status_code == 201
    assert res.json() == {"id": "hauptgericht", "name": "Hauptgericht", "icon": "pasta", "color": "#DC2626"}

    res = client.get("/api/categories/hauptgericht")
    assert res.status_code == 200

    res = client.put("/api/categories/hauptgericht", json={"id": "haupt", "name": "Hauptspeise", "icon": "soup"})
    assert res.status_code == 200
    assert res.json()["id"] == "haupt"

    res = client.delete("/api/categories/haupt")
    assert res.status_code == 200
    assert res.json()["deleted"] is True
    assert res.json()["category"]["name"] == "Hauptspeise"

    assert client.get("/api/categories").json() == []


def test_category_list_includes_recipe_counts(client):
    client.post("/api/categories", json={"name": "Hauptgericht"})
    client.post("/api/categories", json={"name": "Dessert"})
    client.post("/api/recipes", json=SOUP)

    data = client.get("/api/categories").json()
    counts = {c["name"]: c["recipe_count"] for c in data}
    assert counts == {"Hauptgericht": 1, "Dessert": 0}


def test_category_errors(client):
    client.post("/api/categories", json={"name": "Suppen"})

    res = client.post("/api/categories", json={"name": "suppen", "id": "andere"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "CATEGORY_EXISTS"

    res = client.put("/api/categories/nope", json={"name": "Nope"})
    assert res.status_code == 404
    assert res.json()["error"]["category"] == "resource_not_found"

    res = client.delete("/api/categories/nope")
    assert res.status_code == 404

    res = client.post("/api/categories", json={"name": "ÄÖÜ"})
    assert res.status_code == 400


def test_category_bad_color_is_rejected(client):
    res = client.post("/api/categories", json={"name": "Bunt", "color": "red"})
    assert res.status_code == 422


def test_recipe_crud(client):
    res = client.post("/api/recipes", json=SOUP)
    assert res.status_code == 201
    assert res.json() == SOUP

    res = client.get("/api/recipes/Suppe")
    assert res.status_code == 200
    assert res.json()["ingredients"][1]["action"] == "würzen"

    changed = dict(SOUP, name="Tomatensuppe")
    res = client.put("/api/recipes/Suppe", json=changed)
    assert res.status_code == 200
    assert res.json()["name"] == "Tomatensuppe"
    assert client.get("/api/recipes/Suppe").status_code == 404

    res = client.delete("/api/recipes/Tomatensuppe")
    assert res.status_code == 200
    assert res.json()["deleted"] is True
    assert client.get("/api/recipes").json() == []


def test_duplicate_recipe_name(client):
    assert client.post("/api/recipes", json=SOUP).status_code == 201
    res = client.post("/api/recipes", json=SOUP)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "RECIPE_EXISTS"


def test_update_rename_collision(client):
    client.post("/api/recipes", json=SOUP)
    client.post("/api/recipes", json={"name": "Salat"})
    res = client.put("/api/recipes/Suppe", json={"name": "Salat"})
    assert res.status_code == 400


def test_recipe_name_with_slash(client):
    res = client.post("/api/recipes", json={"name": "Salz/Pfeffer", "category": "Gewürze"})
    assert res.status_code == 201

    res = client.get("/api/recipes/Salz/Pfeffer")
    assert res.status_code == 200
    assert res.json()["category"] == "Gewürze"

    res = client.put("/api/recipes/Salz%2FPfeffer", json={"name": "Salz/Pfeffer/Chili"})
    assert res.status_code == 200
    assert [r["name"] for r in client.get("/api/recipes").json()] == ["Salz/Pfeffer/Chili"]

    res = client.delete("/api/recipes/Salz/Pfeffer/Chili")
    assert res.status_code == 200
    assert client.get("/api/recipes").json() == []


def test_category_list_keeps_hand_edited_colors(client, config):
    config.categories_path.write_text(
        '{"categories": [{"id": "suppen", "name": "Suppen", "icon": "soup", "color": "#fff"}]}',
        encoding="utf-8",
    )
    assert client.get("/api/categories").json()[0]["color"] == "#fff"
    assert client.post("/api/categories", json={"name": "Salate"}).status_code == 201
    assert [c["id"] for c in client.get("/api/categories").json()] == ["suppen", "salate"]


def test_missing_recipe(client):
    assert client.put("/api/recipes/Nope", json=SOUP).status_code == 404
    assert client.delete("/api/recipes/Nope").status_code == 404


def test_missing_name_validation(client):
    res = client.post("/api/recipes", json={"ingredients": []})
    assert res.status_code == 422
    res = client.post("/api/recipes", json={"name": "   "})
    assert res.status_code == 422


def test_filter_recipes(client):
    client.post("/api/recipes", json=SOUP)
    client.post("/api/recipes", json={"name": "Linsensuppe", "category": "Suppen"})
    client.post("/api/recipes", json={"name": "Salat", "category": "Suppen"})

    names = lambda res: [r["name"] for r in res.json()]
    assert names(client.get("/api/recipes?q=SUPPE")) == ["Suppe", "Linsensuppe"]
    assert names(client.get("/api/recipes?category=Suppen")) == ["Linsensuppe", "Salat"]
    assert names(client.get("/api/recipes?q=suppe&category=Suppen")) == ["Linsensuppe"]


def test_rename_category_on_recipes(client):
    client.post("/api/recipes", json=SOUP)
    client.post("/api/recipes", json={"name": "Gulasch", "category": "Hauptgericht"})
    client.post("/api/recipes", json={"name": "Salat", "category": "Beilage"})

    res = client.patch("/api/recipes", json={"old_category": "Hauptgericht", "new_category": "Hauptspeise"})
    assert res.status_code == 200
    assert res.json() == {"updated": 2}

    res = client.patch("/api/recipes", json={"old_category": "Beilage"})
    assert res.json() == {"updated": 1}
    assert client.get("/api/recipes/Salat").json()["category"] == ""


def test_pdf_export_filtered(client):
    for i in range(5):
        client.post("/api/recipes", json={"name": f"Suppe {i}", "category": "Suppen"})
    client.post("/api/recipes", json={"name": "Salat"})

    res = client.get("/api/pdf?category=Suppen")
    assert res.status_code == 200
    assert res.headers["content-type"] == "application/pdf"
    assert 'filename="recipe-cards.pdf"' in res.headers["content-disposition"]
    assert res.content.startswith(b"%PDF")

    res = client.get("/api/pdf?lang=de")
    assert 'filename="rezepte-kaertchen.pdf"' in res.headers["content-disposition"]


def test_pdf_export_selection(client):
    client.post("/api/recipes", json=SOUP)
    client.post("/api/recipes", json={"name": "Salat"})

    res = client.post("/api/pdf", json={"names": ["Salat", "Suppe"]})
    assert res.status_code == 200
    assert res.content.startswith(b"%PDF")

    res = client.post("/api/pdf", json={"names": ["Suppe", "Gibt es nicht"]})
    assert res.status_code == 404


def test_pdf_unsupported_language(client):
    res = client.get("/api/pdf?lang=xx")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


def test_write_failure_is_500(tmp_path):
    from rezeptbox.config import StoreConfig
    from rezeptbox.recipes import RecipeStore

    blocker = tmp_path / "file"
    blocker.write_text("x")
    store = RecipeStore(StoreConfig(categories_path=tmp_path / "c.json", recipes_path=blocker / "r.csv"))
    app_module.app.dependency_overrides[app_module.get_recipe_store] = lambda: store
    try:
        res = TestClient(app_module.app).post("/api/recipes", json=SOUP)
    finally:
        app_module.app.dependency_overrides.clear()
    assert res.status_code == 500
    assert res.json()["error"]["code"] == "STORE_WRITE_FAILED"
