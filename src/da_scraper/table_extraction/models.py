"""Geometry, text and drawing-instruction models for table reconstruction.

Everything here lives for a single page: cells and elements are created from
one page's drawing and text streams and discarded once that page's records
have been mapped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Union

Matrix = tuple[float, float, float, float, float, float]

IDENTITY: Matrix = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


class Bounded(Protocol):
    """Anything with an axis-aligned bounding box."""

    x: float
    y: float
    width: float
    height: float


# ---------------------------------------------------------------------------
# Frozen geometry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle.

    Width and height may be negative straight after a transform has been
    applied; call ``normalized()`` before measuring area or overlap.
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def normalized(self) -> Rect:
        """Return the same rectangle with non-negative width and height."""
        x, width = (self.x + self.width, -self.width) if self.width < 0 else (self.x, self.width)
        y, height = (self.y + self.height, -self.height) if self.height < 0 else (self.y, self.height)
        return Rect(x, y, width, height)

    def inverted(self) -> Rect:
        """Flip from PDF (Y-up) space into page (Y-down) space."""
        return Rect(self.x, -(self.y + self.height), self.width, self.height)


ZERO_RECT = Rect(0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class LineSet:
    """Horizontal and vertical line segments recovered from one page."""

    horizontal: tuple[Rect, ...]
    vertical: tuple[Rect, ...]

    def inverted(self) -> LineSet:
        return LineSet(
            horizontal=tuple(line.inverted() for line in self.horizontal),
            vertical=tuple(line.inverted() for line in self.vertical),
        )

    def __len__(self) -> int:
        return len(self.horizontal) + len(self.vertical)


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TextRun:
    """A positioned run of text as reported by the PDF text layer."""

    text: str
    transform: Matrix
    width: float


@dataclass(frozen=True)
class TextElement:
    """A text fragment with a corrected bounding box in page space."""

    text: str
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(eq=False)
class Cell:
    """A grid cell and the text elements it owns.

    Compared by identity: two cells with equal bounds are still distinct
    positions in the page's cell list.
    """

    x: float
    y: float
    width: float
    height: float
    elements: list[TextElement] = field(default_factory=list)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def bounds(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    def text(self, separator: str = "") -> str:
        return separator.join(element.text for element in self.elements)


Row = list[Cell]


# ---------------------------------------------------------------------------
# Drawing instructions (one page's vector content, in PDF user space)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MoveTo:
    x: float
    y: float


@dataclass(frozen=True)
class LineTo:
    x: float
    y: float


@dataclass(frozen=True)
class RectangleTo:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class SaveState:
    pass


@dataclass(frozen=True)
class RestoreState:
    pass


@dataclass(frozen=True)
class Transform:
    matrix: Matrix


@dataclass(frozen=True)
class Fill:
    pass


Instruction = Union[MoveTo, LineTo, RectangleTo, SaveState, RestoreState, Transform, Fill]
