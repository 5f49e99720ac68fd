"""Column heading discovery."""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Sequence

from .errors import MissingHeaderError
from .geometry import contains
from .layouts import HeaderLabels
from .table_extraction.models import Cell, TextElement


@dataclass(frozen=True)
class HeaderCells:
    """Heading cells found on a page; optional columns may be absent."""
    application_number: Cell
    address: Cell
    description: Cell | None = None
    date: Cell | None = None
    house_number: Cell | None = None
    lot: Cell | None = None
    section: Cell | None = None
    applicant: Cell | None = None
    vg_number: Cell | None = None

    def present(self) -> dict[str, Cell]:
        """Field name -> cell for every heading that was found."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


def _normalise(text: str, collapse: bool) -> str:
    text = text.strip()
    return " ".join(text.split()) if collapse else text


def find_header(
    cells: Sequence[Cell],
    label: str,
    *,
    require_containment: bool = False,
    collapse_whitespace: bool = False,
) -> Cell | None:
    """First cell owning an element whose text is exactly ``label``.

    With ``require_containment`` the element must also lie wholly inside
    the cell, so a fragment overhanging from a neighbour is not mistaken
    for the heading.
    """
    def is_label(cell: Cell, element: TextElement) -> bool:
        if _normalise(element.text, collapse_whitespace) != label:
            return False
        return not require_containment or contains(cell, element)

    for cell in cells:
        if any(is_label(cell, element) for element in cell.elements):
            return cell
    return None


def find_joined_header(
    cells: Sequence[Cell],
    label: str,
    *,
    require_containment: bool = False,
) -> Cell | None:
    """First cell whose whole text (elements joined by spaces) is ``label``."""
    for cell in cells:
        if not cell.elements:
            continue
        if require_containment and not all(contains(cell, e) for e in cell.elements):
            continue
        if " ".join(e.text.strip() for e in cell.elements).strip() == label:
            return cell
    return None


def locate_headers(
    cells: Sequence[Cell],
    labels: HeaderLabels,
    *,
    require_containment: bool = False,
    collapse_whitespace: bool = False,
) -> HeaderCells:
    """Find every heading cell on a page.

    Raises:
        MissingHeaderError: If the application number or address heading
            is not on the page.
    """
    def find(label: str | None) -> Cell | None:
        if label is None:
            return None
        return find_header(
            cells, label,
            require_containment=require_containment,
            collapse_whitespace=collapse_whitespace,
        )

    application_number = find(labels.application_number)
    if application_number is None:
        raise MissingHeaderError(labels.application_number)
    address = find(labels.address)
    if address is None:
        raise MissingHeaderError(labels.address)

    house_number = None
    if labels.house_number is not None:
        house_number = find_joined_header(
            cells, labels.house_number, require_containment=require_containment,
        )

    return HeaderCells(
        application_number=application_number,
        address=address,
        description=find(labels.description),
        date=find(labels.date),
        house_number=house_number,
        lot=find(labels.lot),
        section=find(labels.section),
        applicant=find(labels.applicant),
        vg_number=find(labels.vg_number),
    )
