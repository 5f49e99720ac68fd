"""Grid extractor strategies, one per layout generation."""

from __future__ import annotations

import logging
from typing import Sequence

from ..models import LayoutVersion
from .cells import assign_leftmost, assign_majority
from .grid import intersection_grid, point_graph
from .lines import filled_rule_lines, stroke_segment_lines, walk_instructions
from .models import Cell, Instruction, TextElement
from .protocols import TableGridExtractor

logger = logging.getLogger(__name__)


class RuledGridExtractor:
    """Filled-rectangle rules, dense intersection grid, majority ownership."""

    @property
    def name(self) -> str:
        return "ruled"

    def build_cells(self, instructions: Sequence[Instruction]) -> list[Cell]:
        rects = walk_instructions(instructions, require_fill=True)
        lines = filled_rule_lines(rects).inverted()
        logger.debug(
            "Found %d horizontal and %d vertical rule(s)",
            len(lines.horizontal), len(lines.vertical),
        )
        return intersection_grid(lines)

    def assign(self, elements: Sequence[TextElement], cells: Sequence[Cell]) -> None:
        assign_majority(elements, cells)


class SegmentGridExtractor:
    """Open line segments, point-graph cells, leftmost ownership."""

    @property
    def name(self) -> str:
        return "segmented"

    def build_cells(self, instructions: Sequence[Instruction]) -> list[Cell]:
        rects = walk_instructions(instructions, require_fill=False)
        lines = stroke_segment_lines(rects).inverted()
        logger.debug(
            "Found %d horizontal and %d vertical segment(s)",
            len(lines.horizontal), len(lines.vertical),
        )
        return point_graph(lines)

    def assign(self, elements: Sequence[TextElement], cells: Sequence[Cell]) -> None:
        assign_leftmost(elements, cells)


def get_extractor(layout: LayoutVersion) -> TableGridExtractor:
    """Return the grid extractor for a layout generation."""
    if layout is LayoutVersion.RULED:
        return RuledGridExtractor()
    if layout is LayoutVersion.SEGMENTED:
        return SegmentGridExtractor()
    raise ValueError(f"Unknown layout: {layout!r}")
