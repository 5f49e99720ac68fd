"""Grid extractor protocol.

Structural typing contract for the per-layout table reconstruction
strategies.  Any class with the right method signatures qualifies; no
inheritance required.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from .models import Cell, Instruction, TextElement


@runtime_checkable
class TableGridExtractor(Protocol):
    """Builds a page's cell grid and binds text elements to cells."""

    @property
    def name(self) -> str:
        """Unique identifier for this strategy (e.g. ``"ruled"``)."""
        ...

    def build_cells(self, instructions: Sequence[Instruction]) -> list[Cell]:
        """Reconstruct the page's cells from its drawing instructions.

        Parameters
        ----------
        instructions:
            The page's drawing instructions in PDF user space.

        Returns
        -------
        list[Cell]
            Empty cells in page space, ordered by row then X.
        """
        ...

    def assign(self, elements: Sequence[TextElement], cells: Sequence[Cell]) -> None:
        """Append each element to the cell that owns it (cells are mutated)."""
        ...
