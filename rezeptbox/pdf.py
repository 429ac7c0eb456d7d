"""Printable recipe cards: four cards per landscape A4 page in a 2x2 grid.

Layout values are millimetres measured from the top-left corner of the page;
they are converted to reportlab's bottom-left point coordinates when drawing.
Ingredient rows that start below the card's lower bound are dropped, there is
no continuation card.
"""

import io
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import mm
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen.canvas import Canvas

from .schemas import Category, Recipe
from .translate import translate_list, translate_text

logger = logging.getLogger(__name__)

PAGE_SIZE = landscape(A4)
PAGE_HEIGHT = PAGE_SIZE[1]

CARD_WIDTH = 120
CARD_HEIGHT = 90
MARGIN = 5
LINE_HEIGHT = 4
TITLE_LINE_HEIGHT = 5
OFFSET_X = 28.5
OFFSET_Y = 15
CARDS_PER_PAGE = 4

SLOTS = [
    (OFFSET_X, OFFSET_Y),
    (OFFSET_X + CARD_WIDTH, OFFSET_Y),
    (OFFSET_X, OFFSET_Y + CARD_HEIGHT),
    (OFFSET_X + CARD_WIDTH, OFFSET_Y + CARD_HEIGHT),
]

TITLE_FONT = ("Helvetica-Bold", 12)
HEADER_FONT = ("Helvetica-Bold", 7)
INGREDIENT_FONT = ("Helvetica", 8)
ACTION_FONT = ("Helvetica-Oblique", 8)


@dataclass(frozen=True)
class CardPlacement:
    recipe: Recipe
    page: int
    slot: int
    x: float
    y: float


def layout_cards(recipes: Iterable[Recipe]) -> List[CardPlacement]:
    """Assign each recipe a page and a grid slot, in input order."""
    placements = []
    for index, recipe in enumerate(recipes):
        page, slot = divmod(index, CARDS_PER_PAGE)
        x, y = SLOTS[slot]
        placements.append(CardPlacement(recipe, page, slot, x, y))
    return placements


def wrap_text(text: str, font_name: str, font_size: float, max_width: float) -> List[str]:
    """Greedy word wrap to `max_width` points. Words wider than a line are
    split by character. Empty text yields one empty line."""
    words = text.split()
    if not words:
        return [""]
    lines: List[str] = []
    current = ""
    for word in words:
        candidate = f"{current} {word}" if current else word
        if stringWidth(candidate, font_name, font_size) <= max_width:
            current = candidate
            continue
        if current:
            lines.append(current)
        current = ""
        for ch in word:
            if current and stringWidth(current + ch, font_name, font_size) > max_width:
                lines.append(current)
                current = ch
            else:
                current += ch
    lines.append(current)
    return lines


def card_title(recipe: Recipe) -> str:
    if recipe.category:
        return f"{recipe.category} - {recipe.name}"
    return recipe.name


def _top(y_mm: float) -> float:
    return PAGE_HEIGHT - y_mm * mm


def _draw_lines(c: Canvas, lines: Sequence[str], x_mm: float, y_mm: float,
                step_mm: float, centred: bool = False) -> None:
    for i, line in enumerate(lines):
        baseline = _top(y_mm + i * step_mm)
        if centred:
            c.drawCentredString(x_mm * mm, baseline, line)
        else:
            c.drawString(x_mm * mm, baseline, line)


def draw_card(c: Canvas, recipe: Recipe, x: float, y_top: float,
              labels: Sequence[str], rule_color=colors.black) -> int:
    """Draw one card with its top-left corner at (x, y_top) mm.

    Returns the number of ingredient rows that were drawn.
    """
    left_col = x + MARGIN
    right_col = x + CARD_WIDTH / 2 + 2
    col_width = (CARD_WIDTH / 2 - MARGIN - 2) * mm
    bottom_limit = y_top + CARD_HEIGHT - MARGIN - 4

    c.setStrokeColor(colors.black)
    c.setFillColor(colors.black)
    c.setLineWidth(0.2 * mm)
    c.rect(x * mm, _top(y_top + CARD_HEIGHT), CARD_WIDTH * mm, CARD_HEIGHT * mm)

    y = y_top + MARGIN * 2
    c.setFont(*TITLE_FONT)
    title_lines = wrap_text(card_title(recipe), *TITLE_FONT, (CARD_WIDTH - MARGIN * 2) * mm)
    _draw_lines(c, title_lines, x + CARD_WIDTH / 2, y, TITLE_LINE_HEIGHT, centred=True)
    y += len(title_lines) * TITLE_LINE_HEIGHT + 2

    c.setStrokeColor(rule_color)
    c.setLineWidth(0.4 * mm)
    c.line((x + MARGIN) * mm, _top(y), (x + CARD_WIDTH - MARGIN) * mm, _top(y))
    y += 4

    c.setFont(*HEADER_FONT)
    c.drawString(left_col * mm, _top(y), labels[0])
    c.drawString(right_col * mm, _top(y), labels[1])
    y += 4

    drawn = 0
    for ing in recipe.ingredients:
        if y > bottom_limit:
            continue
        ing_lines = wrap_text(f"{ing.quantity} {ing.ingredient}".strip(), *INGREDIENT_FONT, col_width)
        action_lines = wrap_text(ing.action, *ACTION_FONT, col_width)

        c.setFont(*INGREDIENT_FONT)
        _draw_lines(c, ing_lines, left_col, y, LINE_HEIGHT)
        c.setFont(*ACTION_FONT)
        _draw_lines(c, action_lines, right_col, y, LINE_HEIGHT)

        y += max(len(ing_lines), len(action_lines)) * LINE_HEIGHT + 1
        drawn += 1

    dropped = len(recipe.ingredients) - drawn
    if dropped:
        logger.info(f"Card '{recipe.name}': {dropped} ingredient row(s) did not fit")
    return drawn


def parse_color(value: str):
    """Stored colours are free text; anything reportlab cannot read is black."""
    try:
        return colors.toColor(value, colors.black)
    except ValueError:
        return colors.black


def render_cards_pdf(recipes: Sequence[Recipe],
                     categories: Optional[Sequence[Category]] = None,
                     lang: Optional[str] = None) -> bytes:
    """Render the recipes, in the given order, as one PDF document."""
    colors_by_name: Dict[str, str] = {c.name: c.color for c in categories or []}
    labels = translate_list(["ingredient", "preparation"], lang)

    buf = io.BytesIO()
    c = Canvas(buf, pagesize=PAGE_SIZE)
    c.setTitle(translate_text("Recipe cards", lang))

    page = 0
    for placement in layout_cards(recipes):
        if placement.page != page:
            c.showPage()
            page = placement.page
        rule_color = parse_color(colors_by_name.get(placement.recipe.category, ""))
        draw_card(c, placement.recipe, placement.x, placement.y, labels, rule_color)

    c.showPage()
    c.save()
    logger.info(f"Rendered {len(recipes)} card(s) on {page + 1} page(s)")
    return buf.getvalue()
