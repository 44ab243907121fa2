"""
Draw a stub document onto a single Pillow bitmap.

Layout is expressed in base pixels for an 800px wide document and multiplied by
the render scale, so a scale of 2 produces a 1600px wide bitmap.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

from paystub_generator.core import (
    StubDocument,
    Totals,
    coerce_amount,
    compute_totals,
    format_money,
    format_quantity,
    is_mileage_eligible,
    line_amount,
    line_mileage,
)
from paystub_generator.settings import DEFAULT_SETTINGS, StubSettings

logger = logging.getLogger(__name__)

BASE_WIDTH = 800
MARGIN = 32
ROW_HEIGHT = 26
TEXT_COLOR = (17, 24, 39)
MUTED_COLOR = (71, 85, 105)
RULE_COLOR = (226, 232, 240)
PLACEHOLDER = "—"

# Column left edges (text columns) and right edges (numeric columns), in base pixels.
COL_CATEGORY = MARGIN
COL_NOTES = 260
COL_QTY_RIGHT = 540
COL_RATE_RIGHT = 640
COL_AMOUNT_RIGHT = BASE_WIDTH - MARGIN

FontType = ImageFont.FreeTypeFont | ImageFont.ImageFont
_FONT_CACHE: dict[tuple[int, bool], FontType] = {}


@dataclass
class RasterResult:
    image: Optional[Image.Image] = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.image is not None


def get_font(size: int, bold: bool = False) -> FontType:
    key = (size, bold)
    if key in _FONT_CACHE:
        return _FONT_CACHE[key]
    names = ("DejaVuSans-Bold.ttf", "Arial Bold.ttf") if bold else ("DejaVuSans.ttf", "Arial.ttf")
    font: FontType | None = None
    for name in names:
        try:
            font = ImageFont.truetype(name, size)
            break
        except OSError:
            continue
    if font is None:
        font = ImageFont.load_default(size=size)
    _FONT_CACHE[key] = font
    return font


class _Canvas:
    """Thin wrapper that scales base-pixel coordinates onto the bitmap."""

    def __init__(self, image: Image.Image, scale: float) -> None:
        self.draw = ImageDraw.Draw(image)
        self.scale = scale

    def px(self, value: float) -> int:
        return int(round(value * self.scale))

    def font(self, size: int, bold: bool = False) -> FontType:
        return get_font(self.px(size), bold)

    def text(self, x: float, y: float, text: str, size: int = 13, bold: bool = False, color=TEXT_COLOR) -> None:
        self.draw.text((self.px(x), self.px(y)), text, font=self.font(size, bold), fill=color)

    def text_right(self, right: float, y: float, text: str, size: int = 13, bold: bool = False, color=TEXT_COLOR) -> None:
        font = self.font(size, bold)
        width = self.draw.textlength(text, font=font)
        self.draw.text((self.px(right) - width, self.px(y)), text, font=font, fill=color)

    def rule(self, y: float) -> None:
        self.draw.line(
            [(self.px(MARGIN), self.px(y)), (self.px(BASE_WIDTH - MARGIN), self.px(y))],
            fill=RULE_COLOR,
            width=max(1, self.px(1)),
        )

    def fit(self, text: str, max_width: float, size: int = 13) -> str:
        font = self.font(size)
        limit = self.px(max_width)
        if self.draw.textlength(text, font=font) <= limit:
            return text
        while text and self.draw.textlength(text + "...", font=font) > limit:
            text = text[:-1]
        return text + "..."


def _table_rows(document: StubDocument, settings: StubSettings) -> list[tuple[str, str, str, str, str, bool]]:
    rows = []
    for item in document.items:
        rows.append(
            (
                item.category,
                item.note or PLACEHOLDER,
                format_quantity(item.quantity),
                format_money(coerce_amount(item.rate)),
                format_money(line_amount(item)),
                False,
            )
        )
        eligible = is_mileage_eligible(item.category, settings.mileage_category)
        if eligible and coerce_amount(item.miles) > 0:
            rows.append(
                (
                    f"Mileage ({settings.mileage_category})",
                    "",
                    format_quantity(item.miles),
                    f"{format_money(settings.mile_rate)}/mi",
                    format_money(
                        line_mileage(item, mile_rate=settings.mile_rate, mileage_category=settings.mileage_category)
                    ),
                    True,
                )
            )
    return rows


def document_height(row_count: int, contact_lines: int) -> int:
    header = MARGIN + 60 + contact_lines * 22 + 48
    table = ROW_HEIGHT * (row_count + 1) + 12
    totals = 3 * 24 + 12 + MARGIN
    return header + table + totals


def draw_stub(
    document: StubDocument,
    totals: Totals,
    settings: StubSettings = DEFAULT_SETTINGS,
    scale: float | None = None,
    background_color: str | None = None,
) -> Image.Image:
    scale = settings.render_scale if scale is None else scale
    rows = _table_rows(document, settings)
    height = document_height(len(rows), len(settings.company_contact_lines))
    image = Image.new(
        "RGB",
        (int(round(BASE_WIDTH * scale)), int(round(height * scale))),
        background_color or settings.background_color,
    )
    canvas = _Canvas(image, scale)

    y = MARGIN
    canvas.text(MARGIN, y, settings.company_name, size=20, bold=True)
    canvas.text(MARGIN, y + 28, settings.company_tagline, size=12, color=MUTED_COLOR)
    period = document.period
    canvas.text_right(COL_AMOUNT_RIGHT, y, f"Pay Period: {period.start} - {period.end}", size=12)
    canvas.text_right(COL_AMOUNT_RIGHT, y + 18, f"Pay Date: {period.pay_date}", size=12)
    canvas.text_right(COL_AMOUNT_RIGHT, y + 36, f"Paid via: {document.paid_via or PLACEHOLDER}", size=12)
    y += 60

    for line in settings.company_contact_lines:
        canvas.text(MARGIN, y, line, size=16, bold=True)
        y += 22

    y += 8
    canvas.text(MARGIN, y, f"Pay Stub for {document.contractor.name or PLACEHOLDER}", size=18, bold=True)
    y += 40

    canvas.text(COL_CATEGORY, y, "Category", color=MUTED_COLOR)
    canvas.text(COL_NOTES, y, "Notes", color=MUTED_COLOR)
    canvas.text_right(COL_QTY_RIGHT, y, "Qty", color=MUTED_COLOR)
    canvas.text_right(COL_RATE_RIGHT, y, "Rate", color=MUTED_COLOR)
    canvas.text_right(COL_AMOUNT_RIGHT, y, "Amount", color=MUTED_COLOR)
    y += ROW_HEIGHT
    canvas.rule(y - 6)

    for category, note, qty, rate, amount, is_mileage in rows:
        indent = 20 if is_mileage else 0
        canvas.text(COL_CATEGORY + indent, y, canvas.fit(category, COL_NOTES - COL_CATEGORY - indent - 8))
        canvas.text(COL_NOTES, y, canvas.fit(note, COL_QTY_RIGHT - COL_NOTES - 60))
        canvas.text_right(COL_QTY_RIGHT, y, qty)
        canvas.text_right(COL_RATE_RIGHT, y, rate)
        canvas.text_right(COL_AMOUNT_RIGHT, y, amount, bold=True)
        y += ROW_HEIGHT
        canvas.rule(y - 6)

    y += 12
    canvas.text_right(COL_AMOUNT_RIGHT, y, f"Gross Earnings: {format_money(totals.earnings)}")
    y += 24
    canvas.text_right(COL_AMOUNT_RIGHT, y, f"+ Mileage: {format_money(totals.mileage)}")
    y += 24
    canvas.text_right(COL_AMOUNT_RIGHT, y, f"Net Pay: {format_money(totals.net)}", size=18, bold=True)
    return image


def rasterize_document(
    document: StubDocument,
    settings: StubSettings = DEFAULT_SETTINGS,
    scale: float | None = None,
    totals: Totals | None = None,
) -> RasterResult:
    """Render the document, reporting failure as a RasterResult instead of raising."""
    if totals is None:
        totals = compute_totals(
            document.items, mile_rate=settings.mile_rate, mileage_category=settings.mileage_category
        )
    try:
        image = draw_stub(document, totals, settings=settings, scale=scale)
    except Exception as exc:
        logger.exception("Rasterizing the stub document failed")
        return RasterResult(reason=f"Failed to render document: {exc}")
    return RasterResult(image=image)
