"""Rectangle and affine-matrix primitives.

All functions are pure.  Rectangles are anything exposing ``x``, ``y``,
``width`` and ``height`` (``Rect``, ``Cell``, ``TextElement``).
"""
from __future__ import annotations

from .table_extraction.models import ZERO_RECT, Bounded, Matrix, Rect


def intersect(rect1: Bounded, rect2: Bounded) -> Rect:
    """Return the overlap of two rectangles, or the zero rectangle if disjoint."""
    x1 = max(rect1.x, rect2.x)
    y1 = max(rect1.y, rect2.y)
    x2 = min(rect1.x + rect1.width, rect2.x + rect2.width)
    y2 = min(rect1.y + rect1.height, rect2.y + rect2.height)
    if x2 < x1 or y2 < y1:
        return ZERO_RECT
    return Rect(x1, y1, x2 - x1, y2 - y1)


def area(rect: Bounded) -> float:
    return rect.width * rect.height


def percentage_of_element_in_cell(element: Bounded, cell: Bounded) -> float:
    """Percentage (0-100) of the element's area that lies within the cell.

    For example, if a quarter of the element lies within the cell this
    returns 25.  A zero-area element is never inside anything.
    """
    element_area = area(element)
    if element_area == 0:
        return 0.0
    return area(intersect(cell, element)) * 100 / element_area


def horizontal_overlap_percentage(rect1: Bounded | None, rect2: Bounded | None) -> float:
    """Overlapping X span as a percentage of the union X span.

    0 means no overlap and 100 means the two rectangles occupy exactly the
    same columns.
    """
    if rect1 is None or rect2 is None:
        return 0.0

    start1, end1 = rect1.x, rect1.x + rect1.width
    start2, end2 = rect2.x, rect2.x + rect2.width

    if start1 >= end2 or end1 <= start2 or rect1.width == 0 or rect2.width == 0:
        return 0.0

    intersection_width = min(end1, end2) - max(start1, start2)
    union_width = max(end1, end2) - min(start1, start2)
    return intersection_width * 100 / union_width


def contains(outer: Bounded, inner: Bounded) -> bool:
    """True if every edge of ``inner`` lies within the edges of ``outer``."""
    return (
        inner.x >= outer.x
        and inner.y >= outer.y
        and inner.x + inner.width <= outer.x + outer.width
        and inner.y + inner.height <= outer.y + outer.height
    )


# ---------------------------------------------------------------------------
# Affine matrices: (a, b, c, d, e, f) as in the PDF ``cm`` operator
# ---------------------------------------------------------------------------

def multiply(m1: Matrix, m2: Matrix) -> Matrix:
    """Compose ``m2`` onto ``m1`` (the result applies ``m2`` first)."""
    return (
        m1[0] * m2[0] + m1[2] * m2[1],
        m1[1] * m2[0] + m1[3] * m2[1],
        m1[0] * m2[2] + m1[2] * m2[3],
        m1[1] * m2[2] + m1[3] * m2[3],
        m1[0] * m2[4] + m1[2] * m2[5] + m1[4],
        m1[1] * m2[4] + m1[3] * m2[5] + m1[5],
    )


def apply(x: float, y: float, m: Matrix) -> tuple[float, float]:
    """Map a point through the matrix."""
    return (x * m[0] + y * m[2] + m[4], x * m[1] + y * m[3] + m[5])
