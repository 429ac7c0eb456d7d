import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import schemas
from .categories import CategoryStore
from .config import StoreConfig, get_settings
from .errors import NotFoundError, RezeptboxError, ValidationError
from .normalize import filter_recipes, sort_for_print
from .observability import setup_logging
from .pdf import render_cards_pdf
from .recipes import RecipeStore
from .translate import supported_languages, translate_text

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Resolve file locations once at startup
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    app.state.store_config = StoreConfig.from_settings(settings)
    logger.info(
        f"Rezeptbox API started, data in {app.state.store_config.recipes_path.parent}"
    )
    yield


app = FastAPI(title="Rezeptbox API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RezeptboxError)
async def rezeptbox_error_handler(request: Request, exc: RezeptboxError):
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(exc.message, extra={"error_code": exc.code, "path": request.url.path})
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


def get_store_config(request: Request) -> StoreConfig:
    config = getattr(request.app.state, "store_config", None)
    if config is None:
        config = StoreConfig.from_settings(get_settings())
        request.app.state.store_config = config
    return config


def get_category_store(config: StoreConfig = Depends(get_store_config)):
    return CategoryStore(config)


def get_recipe_store(config: StoreConfig = Depends(get_store_config)):
    return RecipeStore(config)


def _resolve_lang(lang: Optional[str]) -> str:
    lang = (lang or get_settings().default_lang).lower()
    if lang not in supported_languages():
        raise ValidationError(f"unsupported language '{lang}'", "lang")
    return lang


def _pdf_response(content: bytes, lang: str) -> Response:
    filename = translate_text("recipe-cards.pdf", lang)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.get("/api/health")
def health():
    return {"status": "healthy", "service": "rezeptbox"}


# Categories

@app.get("/api/categories", response_model=List[schemas.CategoryWithCount])
def list_categories(
    categories: CategoryStore = Depends(get_category_store),
    recipes: RecipeStore = Depends(get_recipe_store),
):
    counts = recipes.category_counts()
    return [
        schemas.CategoryWithCount(**c.model_dump(), recipe_count=counts.get(c.name, 0))
        for c in categories.list()
    ]


@app.post(
    "/api/categories",
    response_model=schemas.Category,
    status_code=status.HTTP_201_CREATED,
)
def create_category(
    category: schemas.CategoryCreate,
    store: CategoryStore = Depends(get_category_store),
):
    return store.create(category)


@app.get("/api/categories/{category_id}", response_model=schemas.Category)
def get_category(category_id: str, store: CategoryStore = Depends(get_category_store)):
    return store.get(category_id)


@app.put("/api/categories/{original_id}", response_model=schemas.Category)
def update_category(
    original_id: str,
    category: schemas.CategoryCreate,
    store: CategoryStore = Depends(get_category_store),
):
    return store.update(original_id, category)


@app.delete("/api/categories/{category_id}")
def delete_category(category_id: str, store: CategoryStore = Depends(get_category_store)):
    removed = store.delete(category_id)
    return {"deleted": True, "category": removed.model_dump(mode="json")}


# Recipes

@app.get("/api/recipes", response_model=List[schemas.Recipe])
def list_recipes(
    q: Optional[str] = None,
    category: Optional[str] = None,
    store: RecipeStore = Depends(get_recipe_store),
):
    return filter_recipes(store.list(), q, category)


@app.post(
    "/api/recipes",
    response_model=schemas.Recipe,
    status_code=status.HTTP_201_CREATED,
)
def create_recipe(recipe: schemas.Recipe, store: RecipeStore = Depends(get_recipe_store)):
    return store.create(recipe)


@app.patch("/api/recipes")
def rename_category(
    payload: schemas.RenameCategoryRequest,
    store: RecipeStore = Depends(get_recipe_store),
):
    updated = store.rename_category(payload.old_category, payload.new_category)
    return {"updated": updated}


@app.get("/api/recipes/{name:path}", response_model=schemas.Recipe)
def get_recipe(name: str, store: RecipeStore = Depends(get_recipe_store)):
    return store.get(name)


@app.put("/api/recipes/{original_name:path}", response_model=schemas.Recipe)
def update_recipe(
    original_name: str,
    recipe: schemas.Recipe,
    store: RecipeStore = Depends(get_recipe_store),
):
    return store.update(original_name, recipe)


@app.delete("/api/recipes/{name:path}")
def delete_recipe(name: str, store: RecipeStore = Depends(get_recipe_store)):
    removed = store.delete(name)
    return {"deleted": True, "recipe": removed.model_dump(mode="json")}


# PDF export

@app.get("/api/pdf")
def export_filtered(
    q: Optional[str] = None,
    category: Optional[str] = None,
    lang: Optional[str] = None,
    recipes: RecipeStore = Depends(get_recipe_store),
    categories: CategoryStore = Depends(get_category_store),
):
    lang = _resolve_lang(lang)
    selected = filter_recipes(recipes.list(), q, category)
    return _pdf_response(render_cards_pdf(selected, categories.list(), lang), lang)


@app.post("/api/pdf")
def export_selection(
    selection: schemas.PdfSelection,
    recipes: RecipeStore = Depends(get_recipe_store),
    categories: CategoryStore = Depends(get_category_store),
):
    lang = _resolve_lang(selection.lang)
    by_name = {r.name: r for r in recipes.list()}
    missing = [n for n in selection.names if n not in by_name]
    if missing:
        raise NotFoundError("recipe", missing[0])
    selected = sort_for_print(by_name[n] for n in dict.fromkeys(selection.names))
    return _pdf_response(render_cards_pdf(selected, categories.list(), lang), lang)
