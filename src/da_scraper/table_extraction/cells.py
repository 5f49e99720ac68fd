"""Text-to-cell ownership and row grouping."""

from __future__ import annotations

from typing import Iterable, Sequence

from ..geometry import area, intersect, percentage_of_element_in_cell
from .grid import ROW_TOLERANCE
from .models import Cell, Row, TextElement

MAJORITY_PERCENTAGE = 50.0


def assign_majority(elements: Iterable[TextElement], cells: Sequence[Cell]) -> None:
    """Give each element to the first cell holding more than half of it.

    Elements that no cell holds a majority of are dropped.
    """
    for element in elements:
        for cell in cells:
            if percentage_of_element_in_cell(element, cell) > MAJORITY_PERCENTAGE:
                cell.elements.append(element)
                break


def assign_leftmost(elements: Iterable[TextElement], cells: Sequence[Cell]) -> None:
    """Give each element to the first cell it intersects at all.

    Cells are in row-then-X order, so an element straddling a column
    boundary is bound to the left-hand cell.
    """
    for element in elements:
        for cell in cells:
            if area(intersect(element, cell)) > 0:
                cell.elements.append(element)
                break


def group_rows(cells: Iterable[Cell]) -> list[Row]:
    """Group cells into rows by approximate Y.

    Returns:
        Rows sorted top to bottom, each row's cells sorted left to right.
    """
    rows: list[Row] = []
    for cell in cells:
        row = next((r for r in rows if abs(r[0].y - cell.y) < ROW_TOLERANCE), None)
        if row is None:
            rows.append([cell])
        else:
            row.append(cell)

    # The cells normally arrive sorted already; re-sort in case they did not.
    rows.sort(key=lambda r: r[0].y)
    for row in rows:
        row.sort(key=lambda c: c.x)
    return rows
