import argparse
from itertools import groupby
from pathlib import Path

import uvicorn

from .categories import CategoryStore
from .config import StoreConfig, get_settings
from .normalize import filter_recipes, sort_for_print
from .observability import setup_logging
from .pdf import render_cards_pdf
from .recipes import RecipeStore
from .translate import supported_languages, translate_text


def list_recipes(config: StoreConfig, lang: str) -> None:
    recipes = sort_for_print(RecipeStore(config).list())
    print(f"Loaded {len(recipes)} recipe(s).")
    for category, group in groupby(recipes, key=lambda r: r.category):
        print(category or translate_text("No category", lang))
        for r in group:
            print(f"- {r.name} ({len(r.ingredients)})")


def export_pdf(config: StoreConfig, out: Path, search, category, lang: str) -> None:
    recipes = filter_recipes(RecipeStore(config).list(), search, category)
    data = render_cards_pdf(recipes, CategoryStore(config).list(), lang)
    out.write_bytes(data)
    print(f"Wrote {len(recipes)} card(s) to {out}")


def build_parser(default_lang: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rezeptbox", description="Manage recipes and print recipe cards.",
    )
    parser.add_argument(
        "--lang", choices=supported_languages(), default=default_lang,
    )
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("list", help="list recipes grouped by category")

    pdf = sub.add_parser("pdf", help="export recipe cards as PDF")
    pdf.add_argument("out", type=Path)
    pdf.add_argument("--category")
    pdf.add_argument("--search")

    serve = sub.add_parser("serve", help="run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    return parser


def main(argv=None):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    args = build_parser(settings.default_lang).parse_args(argv)
    config = StoreConfig.from_settings(settings)

    if args.command == "pdf":
        export_pdf(config, args.out, args.search, args.category, args.lang)
    elif args.command == "serve":
        uvicorn.run("rezeptbox.app:app", host=args.host, port=args.port)
    else:
        list_recipes(config, args.lang)


if __name__ == "__main__":
    main()
