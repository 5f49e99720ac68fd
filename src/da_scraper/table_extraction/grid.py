"""Grid construction: page-space line segments to candidate cells.

Two strategies:

* ``intersection_grid`` pairs every adjacent horizontal rule with every
  adjacent vertical rule.  Only correct for a true ruled grid.
* ``point_graph`` reduces the lines to their endpoints and builds a cell from
  each point to its nearest right-hand and nearest lower neighbour, which
  copes with tables where not every boundary runs edge to edge.
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Iterable

from .models import Cell, LineSet, Point

ROW_TOLERANCE = 2.0        # cells within this many units of Y share a row
POINT_TOLERANCE = 1.0      # squared distance under which two points merge
ALIGN_TOLERANCE = 1.0      # neighbours must share X or Y within this


def _compare_cells(a: Cell, b: Cell) -> int:
    if abs(a.y - b.y) < ROW_TOLERANCE:
        return (a.x > b.x) - (a.x < b.x)
    return 1 if a.y > b.y else -1


def sort_cells(cells: Iterable[Cell]) -> list[Cell]:
    """Order cells by approximate Y, then by X."""
    return sorted(cells, key=cmp_to_key(_compare_cells))


# ---------------------------------------------------------------------------
# Intersection grid
# ---------------------------------------------------------------------------

def intersection_grid(lines: LineSet) -> list[Cell]:
    """Synthesize a cell for every adjacent pair of rules on both axes."""
    horizontal = sorted(lines.horizontal, key=lambda line: line.y)
    vertical = sorted(lines.vertical, key=lambda line: line.x)

    cells: list[Cell] = []
    for top, bottom in zip(horizontal, horizontal[1:]):
        for left, right in zip(vertical, vertical[1:]):
            cells.append(Cell(
                x=left.x,
                y=top.y,
                width=right.x - left.x,
                height=bottom.y - top.y,
            ))
    return sort_cells(cells)


# ---------------------------------------------------------------------------
# Point graph
# ---------------------------------------------------------------------------

def line_points(lines: LineSet) -> list[Point]:
    """Endpoints of every line, with near-duplicates merged (first one wins)."""
    candidates: list[Point] = []
    for line in lines.horizontal:
        candidates.append(Point(line.x, line.y))
        candidates.append(Point(line.x + line.width, line.y))
    for line in lines.vertical:
        candidates.append(Point(line.x, line.y))
        candidates.append(Point(line.x, line.y + line.height))

    points: list[Point] = []
    for candidate in candidates:
        if not any(
            (p.x - candidate.x) ** 2 + (p.y - candidate.y) ** 2 < POINT_TOLERANCE
            for p in points
        ):
            points.append(candidate)
    return points


def _nearest_right(point: Point, points: list[Point]) -> Point | None:
    best: Point | None = None
    for other in points:
        if other.x > point.x and abs(other.y - point.y) < ALIGN_TOLERANCE:
            if best is None or other.x < best.x:
                best = other
    return best


def _nearest_below(point: Point, points: list[Point]) -> Point | None:
    best: Point | None = None
    for other in points:
        if other.y > point.y and abs(other.x - point.x) < ALIGN_TOLERANCE:
            if best is None or other.y < best.y:
                best = other
    return best


def point_graph(lines: LineSet) -> list[Cell]:
    """Build cells from each grid point to its right and lower neighbours."""
    points = line_points(lines)
    cells: list[Cell] = []
    for point in points:
        right = _nearest_right(point, points)
        if right is None:
            continue
        below = _nearest_below(point, points)
        if below is None:
            continue
        cells.append(Cell(
            x=point.x,
            y=point.y,
            width=right.x - point.x,
            height=below.y - point.y,
        ))
    return sort_cells(cells)
