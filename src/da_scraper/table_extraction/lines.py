"""Line extraction from a page's drawing-instruction stream.

The instruction stream is walked with a transform stack (starting at the
identity).  Each rectangle a path constructs is mapped into PDF user space
through the current transform.  Two classifiers turn those rectangles into
grid lines:

* ``filled_rule_lines`` for layouts whose rules are drawn as thin filled
  rectangles (only rectangles followed by a fill count).
* ``stroke_segment_lines`` for layouts drawn with open segments, read
  straight from the path construction without a fill dependency.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from ..geometry import apply, multiply
from .models import (
    IDENTITY,
    Fill,
    Instruction,
    LineSet,
    LineTo,
    Matrix,
    MoveTo,
    Rect,
    RectangleTo,
    RestoreState,
    SaveState,
    Transform,
)

logger = logging.getLogger(__name__)

THIN = 2.0             # max thickness of a rule
MIN_LENGTH = 10.0      # min length of a stroked segment
SMALL_SHAPE = 200.0    # shapes smaller than this in both dimensions are logo noise
BANNER_DEPTH = 10.0    # filled rects thicker than this (and long) are banners


# ---------------------------------------------------------------------------
# Instruction walk
# ---------------------------------------------------------------------------

def _transform_rect(x: float, y: float, width: float, height: float, matrix: Matrix) -> Rect:
    x1, y1 = apply(x, y, matrix)
    x2, y2 = apply(x + width, y + height, matrix)
    return Rect(x1, y1, x2 - x1, y2 - y1).normalized()


def walk_instructions(
    instructions: Iterable[Instruction],
    *,
    require_fill: bool,
) -> list[Rect]:
    """Collect the rectangles a page draws, in PDF user space.

    With ``require_fill`` the most recently constructed rectangle is only
    kept once a ``Fill`` follows it.  Without it every constructed rectangle
    is kept, and every ``MoveTo``/``LineTo`` pair contributes a zero-thickness
    segment.
    """
    rects: list[Rect] = []
    stack: list[Matrix] = []
    transform: Matrix = IDENTITY
    pending: Rect | None = None
    cursor: tuple[float, float] | None = None

    for instruction in instructions:
        if isinstance(instruction, SaveState):
            stack.append(transform)
        elif isinstance(instruction, RestoreState):
            if stack:
                transform = stack.pop()
            else:
                logger.debug("Unbalanced restore in drawing stream; keeping current transform")
        elif isinstance(instruction, Transform):
            transform = multiply(transform, instruction.matrix)
        elif isinstance(instruction, RectangleTo):
            rect = _transform_rect(
                instruction.x, instruction.y, instruction.width, instruction.height, transform,
            )
            if require_fill:
                pending = rect
            else:
                rects.append(rect)
        elif isinstance(instruction, MoveTo):
            cursor = apply(instruction.x, instruction.y, transform)
        elif isinstance(instruction, LineTo):
            end = apply(instruction.x, instruction.y, transform)
            if cursor is not None and not require_fill:
                rects.append(
                    Rect(cursor[0], cursor[1], end[0] - cursor[0], end[1] - cursor[1]).normalized()
                )
            cursor = end
        elif isinstance(instruction, Fill):
            if pending is not None:
                rects.append(pending)
                pending = None
        else:
            raise TypeError(f"Unknown drawing instruction: {instruction!r}")

    return rects


# ---------------------------------------------------------------------------
# Classifiers
# ---------------------------------------------------------------------------

def filled_rule_lines(rects: Sequence[Rect]) -> LineSet:
    """Classify filled rectangles as grid rules.

    Small shapes are ignored (the logo at the top left of the page).  Large
    filled rectangles are almost always a heading banner, so only their top
    and bottom edges are kept; their sides would otherwise create very narrow
    cells.
    """
    horizontal: list[Rect] = []
    vertical: list[Rect] = []

    for rect in rects:
        if rect.width < SMALL_SHAPE and rect.height < SMALL_SHAPE:
            continue

        if (rect.width > BANNER_DEPTH and rect.height > SMALL_SHAPE) or (
            rect.height > BANNER_DEPTH and rect.width > SMALL_SHAPE
        ):
            horizontal.append(Rect(rect.x, rect.y, rect.width, 1.0))
            horizontal.append(Rect(rect.x, rect.y + rect.height, rect.width, 1.0))
            continue

        if rect.height <= THIN:
            horizontal.append(rect)
        else:
            vertical.append(rect)

    return LineSet(horizontal=tuple(horizontal), vertical=tuple(vertical))


def stroke_segment_lines(rects: Sequence[Rect]) -> LineSet:
    """Classify constructed segments as grid rules.

    Segments shorter than ``MIN_LENGTH`` or thicker than ``THIN`` are not
    rules (thick rectangles are shading, not lines).
    """
    horizontal: list[Rect] = []
    vertical: list[Rect] = []

    for rect in rects:
        if rect.height <= THIN:
            if rect.width < MIN_LENGTH:
                continue
            horizontal.append(rect)
        else:
            if rect.width > THIN or rect.height < MIN_LENGTH:
                continue
            vertical.append(rect)

    return LineSet(horizontal=tuple(horizontal), vertical=tuple(vertical))
