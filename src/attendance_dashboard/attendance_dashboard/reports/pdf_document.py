"""Top-to-bottom PDF layout over a reportlab canvas.

Content is placed as a fold over sections: each call takes a ``Cursor``
and returns the advanced one. Before a block is drawn its height is known;
if it would cross the bottom margin a new page is started and the cursor
goes back to the top margin. ``Cursor.y`` is measured from the top edge.
"""

from __future__ import annotations

import io
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"


@dataclass(frozen=True)
class Cursor:
    page: int
    y: float


@dataclass(frozen=True)
class PageGeometry:
    width: float = A4[0]
    height: float = A4[1]
    margin_top: float = 40.0
    margin_bottom: float = 40.0
    margin_left: float = 40.0
    margin_right: float = 40.0

    @property
    def printable_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def bottom_limit(self) -> float:
        return self.height - self.margin_bottom


@dataclass(frozen=True)
class TableStyle:
    font_size: float = 9
    padding: float = 3
    header_fill: str = "#22C55E"
    header_text: str = "#FFFFFF"
    stripe_fill: Optional[str] = "#F5F5F5"
    grid: str = "#C8C8C8"

    @property
    def row_height(self) -> float:
        return self.font_size + 2 * self.padding


SUMMARY_TABLE_STYLE = TableStyle(font_size=8, padding=2, header_fill="#3B82F6")
DETAIL_TABLE_STYLE = TableStyle(font_size=7, padding=1.5, header_fill="#9CA3AF", stripe_fill=None)


def _fit(text: str, font: str, size: float, width: float) -> str:
    if stringWidth(text, font, size) <= width:
        return text
    ellipsis = "..."
    while text and stringWidth(text + ellipsis, font, size) > width:
        text = text[:-1]
    return text + ellipsis


class PdfDocument:
    def __init__(self, *, title: str, geometry: PageGeometry = PageGeometry()):
        self._buffer = io.BytesIO()
        self._geometry = geometry
        self._canvas = canvas.Canvas(self._buffer, pagesize=(geometry.width, geometry.height))
        self._canvas.setTitle(title)

    @property
    def geometry(self) -> PageGeometry:
        return self._geometry

    def start(self) -> Cursor:
        return Cursor(page=1, y=self._geometry.margin_top)

    def new_page(self, cursor: Cursor) -> Cursor:
        self._draw_page_number(cursor.page)
        self._canvas.showPage()
        return Cursor(page=cursor.page + 1, y=self._geometry.margin_top)

    def ensure_room(self, cursor: Cursor, height: float) -> Cursor:
        """Break the page if ``height`` does not fit below the cursor.

        A block taller than a whole page is placed anyway on a fresh page.
        """
        if cursor.y + height > self._geometry.bottom_limit and cursor.y > self._geometry.margin_top:
            return self.new_page(cursor)
        return cursor

    def text(self, cursor: Cursor, value: str, *, size: float = 10, bold: bool = False,
             color: str = "#282828", gap: float = 4) -> Cursor:
        height = size + gap
        cursor = self.ensure_room(cursor, height)
        self._canvas.setFillColor(colors.HexColor(color))
        self._canvas.setFont(FONT_BOLD if bold else FONT, size)
        self._canvas.drawString(self._geometry.margin_left, self._baseline(cursor.y, size), value)
        return replace(cursor, y=cursor.y + height)

    def space(self, cursor: Cursor, height: float) -> Cursor:
        return replace(cursor, y=min(cursor.y + height, self._geometry.bottom_limit))

    def table(
        self,
        cursor: Cursor,
        columns: Sequence[str],
        rows: Sequence[Sequence],
        *,
        style: TableStyle = TableStyle(),
    ) -> Cursor:
        """Draw a table row by row, repeating the header on every new page.

        The header is never left alone at the bottom of a page.
        """
        widths = self._column_widths(columns, rows, style)
        cursor = self.ensure_room(cursor, self.table_lead_height(rows, style))

        cursor = self._row(cursor, columns, widths, style, header=True)
        for index, row in enumerate(rows):
            if cursor.y + style.row_height > self._geometry.bottom_limit:
                cursor = self.new_page(cursor)
                cursor = self._row(cursor, columns, widths, style, header=True)
            cursor = self._row(cursor, row, widths, style, stripe=index % 2 == 1)
        return cursor

    @staticmethod
    def table_lead_height(rows: Sequence[Sequence], style: TableStyle) -> float:
        """Height of the header plus the first row."""
        return style.row_height * min(2, len(rows) + 1)

    def finish(self, cursor: Cursor) -> bytes:
        self._draw_page_number(cursor.page)
        self._canvas.showPage()
        self._canvas.save()
        return self._buffer.getvalue()

    def _baseline(self, top: float, size: float) -> float:
        return self._geometry.height - top - size * 0.85

    def _column_widths(self, columns: Sequence[str], rows: Sequence[Sequence], style: TableStyle) -> list[float]:
        natural = []
        for idx, header in enumerate(columns):
            cells = [str(header)] + [str(r[idx]) for r in rows]
            natural.append(max(stringWidth(c, FONT_BOLD, style.font_size) for c in cells) + 2 * style.padding)
        scale = self._geometry.printable_width / sum(natural)
        return [w * scale for w in natural]

    def _row(self, cursor: Cursor, cells: Sequence, widths: Sequence[float], style: TableStyle,
             *, header: bool = False, stripe: bool = False) -> Cursor:
        c = self._canvas
        height = style.row_height
        bottom = self._geometry.height - cursor.y - height
        x = self._geometry.margin_left

        fill = style.header_fill if header else (style.stripe_fill if stripe else None)
        font = FONT_BOLD if header else FONT
        c.setLineWidth(0.1)
        c.setStrokeColor(colors.HexColor(style.grid))
        for cell, width in zip(cells, widths):
            if fill is not None:
                c.setFillColor(colors.HexColor(fill))
                c.rect(x, bottom, width, height, stroke=1, fill=1)
            else:
                c.rect(x, bottom, width, height, stroke=1, fill=0)
            c.setFillColor(colors.HexColor(style.header_text) if header else colors.black)
            c.setFont(font, style.font_size)
            label = _fit(str(cell), font, style.font_size, width - 2 * style.padding)
            c.drawString(x + style.padding, bottom + style.padding + style.font_size * 0.2, label)
            x += width
        return replace(cursor, y=cursor.y + height)

    def _draw_page_number(self, page: int) -> None:
        self._canvas.setFont(FONT, 8)
        self._canvas.setFillColor(colors.HexColor("#646464"))
        self._canvas.drawRightString(
            self._geometry.width - self._geometry.margin_right,
            self._geometry.margin_bottom / 2,
            f"Page {page}",
        )
