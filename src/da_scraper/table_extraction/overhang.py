"""Overhang splitting.

Some text layers join the contents of horizontally adjacent cells into one
run, separating the original fragments with long runs of spaces.  Under
leftmost ownership that run lands in the left-hand cell and hangs over its
right edge.  This module splits such runs back into per-cell elements.

The work is done in two phases: every split is planned against the
unmodified cells first, then all plans are applied.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Sequence

from ..geometry import contains, horizontal_overlap_percentage
from .models import Cell, Row, TextElement
from .text import sort_elements

logger = logging.getLogger(__name__)

GROUP_TOLERANCE = 5.0           # elements within this Y distance form one line
HEADER_OVERLAP_PERCENTAGE = 90.0
_SEPARATOR = re.compile(r"\s{3,}")


@dataclass(frozen=True)
class SplitTarget:
    """A header column whose cells may carry merged runs.

    ``max_tokens`` is how many consecutive columns (starting with this one)
    a merged run may be split across.
    """

    header: Cell
    max_tokens: int


@dataclass(frozen=True)
class SplitOperation:
    """One planned split: elements to remove and fabricated replacements."""

    source: Cell
    removed: tuple[TextElement, ...]
    placements: tuple[tuple[Cell, TextElement], ...]


def split_tokens(text: str, max_tokens: int) -> list[str]:
    """Split on runs of three or more spaces, folding extras into the last token."""
    tokens = [token for token in _SEPARATOR.split(text.strip()) if token]
    if len(tokens) > max_tokens:
        tokens = tokens[:max_tokens - 1] + [" ".join(tokens[max_tokens - 1:])]
    return tokens


def _token_limit(cell: Cell, targets: Sequence[SplitTarget]) -> int | None:
    for target in targets:
        if horizontal_overlap_percentage(cell, target.header) > HEADER_OVERLAP_PERCENTAGE:
            return target.max_tokens
    return None


def plan_splits(rows: Sequence[Row], targets: Sequence[SplitTarget]) -> list[SplitOperation]:
    """Plan a split for every overhanging line of text.  Nothing is mutated."""
    operations: list[SplitOperation] = []

    for row in rows:
        for index, cell in enumerate(row):
            overhanging = [e for e in cell.elements if not contains(cell, e)]
            if not overhanging:
                continue
            limit = _token_limit(cell, targets)
            if limit is None:
                continue
            limit = min(limit, len(row) - index)

            consumed: set[int] = set()
            for anchor in overhanging:
                if id(anchor) in consumed:
                    continue
                group = [
                    e for e in cell.elements
                    if id(e) not in consumed and abs(e.y - anchor.y) < GROUP_TOLERANCE
                ]
                consumed.update(id(e) for e in group)

                tokens = split_tokens("".join(e.text for e in group), limit)
                if not tokens:
                    continue

                left = min(e.x for e in group)
                top = min(e.y for e in group)
                height = max(e.height for e in group)

                placements: list[tuple[Cell, TextElement]] = [(
                    cell,
                    TextElement(text=tokens[0], x=left, y=top, width=cell.right - left, height=height),
                )]
                for offset, token in enumerate(tokens[1:], start=1):
                    target = row[index + offset]
                    placements.append((
                        target,
                        TextElement(text=token, x=target.x, y=top, width=target.width, height=height),
                    ))

                operations.append(SplitOperation(
                    source=cell,
                    removed=tuple(group),
                    placements=tuple(placements),
                ))

    return operations


def apply_splits(operations: Sequence[SplitOperation], cells: Sequence[Cell]) -> None:
    """Apply planned splits, then re-sort every cell's elements."""
    for operation in operations:
        removed = {id(e) for e in operation.removed}
        operation.source.elements = [e for e in operation.source.elements if id(e) not in removed]
        for target, element in operation.placements:
            target.elements.append(element)

    for cell in cells:
        cell.elements = sort_elements(cell.elements)


def split_overhangs(rows: Sequence[Row], targets: Sequence[SplitTarget]) -> int:
    """Split merged runs across their columns.

    Returns:
        The number of text lines that were split.
    """
    operations = plan_splits(rows, targets)
    apply_splits(operations, [cell for row in rows for cell in row])
    if operations:
        logger.debug("Split %d overhanging text line(s)", len(operations))
    return len(operations)
