"""PyMuPDF adapter: turns document pages into drawing instructions and text runs.

PyMuPDF reports geometry in a top-left origin, Y-down space.  The table
extraction engine works in PDF user space (Y-up), so both streams are
mapped here: drawings through a leading flip transform, text runs by
computing their baseline origin as ``page_height - origin_y``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

import pymupdf

from .errors import DocumentError
from .table_extraction.models import (
    Fill,
    Instruction,
    LineTo,
    MoveTo,
    RectangleTo,
    RestoreState,
    SaveState,
    TextRun,
    Transform,
)

logger = logging.getLogger(__name__)

# Raised by PyMuPDF while reading a damaged or unreadable document.
PDF_ERRORS = (ValueError, RuntimeError, pymupdf.FileDataError)


@dataclass(frozen=True)
class PageContent:
    """Engine inputs for one page."""
    page_number: int                    # 1-based
    instructions: list[Instruction]
    text_runs: list[TextRun]


def open_document(data: bytes, url: str = "<memory>") -> pymupdf.Document:
    """Open a PDF from bytes.

    Raises:
        DocumentError: If the bytes are not a readable, unencrypted PDF
            with at least one page.
    """
    try:
        doc = pymupdf.open(stream=data, filetype="pdf")
    except Exception as e:
        raise DocumentError(url, e) from e

    if doc.needs_pass:
        doc.close()
        raise DocumentError(url, ValueError("document is encrypted"))
    # Non-PDF bytes (an HTML error page) can open as a one-page document.
    if not doc.is_pdf or doc.page_count == 0:
        doc.close()
        raise DocumentError(url, ValueError("not a PDF document"))
    return doc


def drawing_instructions(page: pymupdf.Page) -> list[Instruction]:
    """The page's vector paths as an instruction stream in PDF user space."""
    page_height = page.rect.height
    instructions: list[Instruction] = [
        SaveState(),
        Transform((1.0, 0.0, 0.0, -1.0, 0.0, page_height)),
    ]

    for path in page.get_drawings():
        filled = "f" in (path.get("type") or "")
        instructions.append(SaveState())
        for item in path.get("items", []):
            kind = item[0]
            if kind == "l":
                p1, p2 = item[1], item[2]
                instructions.append(MoveTo(p1.x, p1.y))
                instructions.append(LineTo(p2.x, p2.y))
            elif kind in ("re", "qu"):
                rect = item[1] if kind == "re" else item[1].rect
                instructions.append(RectangleTo(rect.x0, rect.y0, rect.width, rect.height))
                # Each rectangle is committed by its own fill.
                if filled:
                    instructions.append(Fill())
        instructions.append(RestoreState())

    instructions.append(RestoreState())
    return instructions


def text_runs(page: pymupdf.Page) -> list[TextRun]:
    """Every non-blank text span on the page, positioned in PDF user space."""
    page_height = page.rect.height
    runs: list[TextRun] = []
    # Only spaces present in the content stream; none synthesized for gaps.
    flags = pymupdf.TEXTFLAGS_DICT | pymupdf.TEXT_INHIBIT_SPACES
    for block in page.get_text("dict", flags=flags)["blocks"]:
        for line in block.get("lines", []):
            cos, sin = line.get("dir", (1.0, 0.0))
            sin = -sin  # Y-down direction to Y-up
            for span in line.get("spans", []):
                text = span.get("text", "")
                if not text.strip():
                    continue
                size = span["size"]
                origin_x, origin_y = span["origin"]
                x0, _y0, x1, _y1 = span["bbox"]
                runs.append(TextRun(
                    text=text,
                    transform=(size * cos, size * sin, -size * sin, size * cos,
                               origin_x, page_height - origin_y),
                    width=x1 - x0,
                ))
    return runs


def iter_pages(doc: pymupdf.Document) -> Iterator[PageContent]:
    """Yield each page's instructions and text runs in document order."""
    for index, page in enumerate(doc):
        content = PageContent(
            page_number=index + 1,
            instructions=drawing_instructions(page),
            text_runs=text_runs(page),
        )
        logger.debug(
            f"Page {content.page_number}: {len(content.instructions)} instruction(s), "
            f"{len(content.text_runs)} text run(s)"
        )
        yield content
