from typing import List, Optional

DEFAULT_LANG = "en"

# Keys are language codes (ISO 639-1) -> mapping of English phrase -> translated phrase.
# English needs no table: untranslated text is returned unchanged.
TRANSLATIONS = {
    "de": {
        "ingredient": "Zutat",
        "preparation": "Zubereitung",
        "recipe-cards.pdf": "rezepte-kaertchen.pdf",
        "Recipe cards": "Rezeptkärtchen",
        "No category": "Ohne Kategorie",
    },
}


def supported_languages() -> List[str]:
    return [DEFAULT_LANG] + sorted(TRANSLATIONS)


def translate_text(text: str, lang: Optional[str]) -> str:
    if not lang:
        return text
    mapping = TRANSLATIONS.get(lang.lower())
    if not mapping:
        return text
    key = text.strip()
    if key in mapping:
        return mapping[key]
    lower = key.lower()
    if lower in mapping:
        return mapping[lower]
    return text


def translate_list(items: List[str], lang: Optional[str]) -> List[str]:
    if not lang:
        return items
    return [translate_text(i, lang) for i in items]
