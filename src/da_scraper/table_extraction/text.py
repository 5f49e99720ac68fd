"""Text element extraction from a page's text runs."""

from __future__ import annotations

import math
from functools import cmp_to_key
from typing import Iterable

from .models import Matrix, TextElement, TextRun

LINE_TOLERANCE = 1.0


def _compare_elements(a: TextElement, b: TextElement) -> int:
    if abs(a.y - b.y) < LINE_TOLERANCE:
        return (a.x > b.x) - (a.x < b.x)
    return 1 if a.y > b.y else -1


def sort_elements(elements: Iterable[TextElement]) -> list[TextElement]:
    """Order elements by approximate Y, then by X."""
    return sorted(elements, key=cmp_to_key(_compare_elements))


def run_height(transform: Matrix) -> float:
    """Glyph height from the run's transform.

    The height some text layers declare for a run is exaggerated for certain
    fonts; the norm of the transform's vertical basis vector is reliable.
    """
    return math.sqrt(transform[2] * transform[2] + transform[3] * transform[3])


def extract_text_elements(runs: Iterable[TextRun]) -> list[TextElement]:
    """Convert text runs (PDF Y-up space) into sorted page-space elements.

    Args:
        runs: The page's text runs.

    Returns:
        Elements with Y inverted (``y = -(y + height)``), sorted by line and
        then left to right.
    """
    elements: list[TextElement] = []
    for run in runs:
        height = run_height(run.transform)
        x, y = run.transform[4], run.transform[5]
        elements.append(TextElement(
            text=run.text,
            x=x,
            y=-(y + height),
            width=run.width,
            height=height,
        ))
    return sort_elements(elements)
