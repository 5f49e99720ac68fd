"""Builders for synthetic register pages (PDF user space, Y-up)."""
from __future__ import annotations

from da_scraper.table_extraction.models import (
    Fill,
    LineTo,
    MoveTo,
    RectangleTo,
    TextRun,
)

ROW_TOP = 700.0
ROW_HEIGHT = 20.0
FONT_SIZE = 10.0


def row_edges(rows: int) -> list[float]:
    """Y-up positions of the horizontal rules for ``rows`` table rows."""
    return [ROW_TOP - i * ROW_HEIGHT for i in range(rows + 1)]


def baseline(row: int) -> float:
    """Text baseline inside the given row (0 is the heading row)."""
    return ROW_TOP - row * ROW_HEIGHT - 15.0


def filled_rules(columns: list[float], rows: int) -> list:
    """Ruled layout: thin filled rectangles, long enough to pass the logo filter."""
    left, right = columns[0], columns[-1]
    instructions = []
    for y in row_edges(rows):
        instructions += [RectangleTo(left, y, right - left, 1.0), Fill()]
    for x in columns:
        instructions += [RectangleTo(x, 400.0, 1.0, 301.0), Fill()]
    return instructions


def stroked_segments(columns: list[float], rows: int) -> list:
    """Segmented layout: open segments, verticals broken at every row."""
    left, right = columns[0], columns[-1]
    edges = row_edges(rows)
    instructions = []
    for y in edges:
        instructions += [MoveTo(left, y), LineTo(right, y)]
    for x in columns:
        for top, bottom in zip(edges, edges[1:]):
            instructions += [MoveTo(x, bottom), LineTo(x, top)]
    return instructions


def run(text: str, x: float, row: int, width: float) -> TextRun:
    return TextRun(
        text=text,
        transform=(FONT_SIZE, 0.0, 0.0, FONT_SIZE, x, baseline(row)),
        width=width,
    )


# Alternating fonts keep neighbouring cells in separate spans.
PDF_FONTS = ("helv", "cour")
PDF_PAGE_SIZE = (612, 792)


def register_pdf() -> bytes:
    """A generated one-page ruled register: heading row and a single application."""
    import pymupdf

    doc = pymupdf.open()
    page = doc.new_page(width=PDF_PAGE_SIZE[0], height=PDF_PAGE_SIZE[1])

    for y in (100, 120, 140):
        page.draw_rect(pymupdf.Rect(0, y, 600, y + 1), color=None, fill=(0, 0, 0))
    for x in (0, 100, 300, 450, 600):
        page.draw_rect(pymupdf.Rect(x, 90, x + 1, 400), color=None, fill=(0, 0, 0))

    rows = [
        ("APPLICATION", "PROPERTY ADDRESS", "DESCRIPTION", "RECEIPT"),
        ("123/20", "123 SMITH ST, GRANT", "DWELLING", "5/03/2020"),
    ]
    for y, texts in zip((115, 135), rows):
        for index, (x, text) in enumerate(zip((5, 105, 305, 455), texts)):
            page.insert_text((x, y), text, fontsize=8, fontname=PDF_FONTS[index % 2])

    data = doc.tobytes()
    doc.close()
    return data


def encrypted_pdf() -> bytes:
    """A generated register that needs a user password to open."""
    import pymupdf

    doc = pymupdf.open(stream=register_pdf(), filetype="pdf")
    data = doc.tobytes(
        encryption=pymupdf.PDF_ENCRYPT_AES_256,
        owner_pw="owner",
        user_pw="user",
    )
    doc.close()
    return data
