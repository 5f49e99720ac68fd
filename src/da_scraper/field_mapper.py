"""Row to development application mapping."""
from __future__ import annotations

import re
from datetime import date, datetime
from typing import Sequence

from .address import AddressFormatter
from .geometry import horizontal_overlap_percentage
from .headers import HeaderCells
from .layouts import LayoutSettings
from .models import DevelopmentApplication
from .table_extraction.models import Cell, Row, TextElement

HEADER_OVERLAP_PERCENTAGE = 90.0
NO_DESCRIPTION = "NO DESCRIPTION PROVIDED"

_WHITESPACE = re.compile(r"\s\s+")
_DESCRIPTION_SUFFIX = re.compile(
    r"(\s+-)?\s*\b(BUILDING RULES ONLY|BUILDING ONLY|PLANNING ONLY)\s*$", re.IGNORECASE,
)
_DATE = re.compile(r"^\d{1,2}/\d{2}/\d{4}$")
_HUNDRED = re.compile(r"^(HD|HUNDRED)\s+", re.IGNORECASE)
_EMPTY_MARKERS = ("", "-")


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def row_cell(row: Row, header: Cell | None) -> Cell | None:
    """The cell of ``row`` lying under ``header`` (> 90 % horizontal overlap)."""
    if header is None:
        return None
    for cell in row:
        if horizontal_overlap_percentage(cell, header) > HEADER_OVERLAP_PERCENTAGE:
            return cell
    return None


def _first_text(cell: Cell | None) -> str:
    if cell is None or not cell.elements:
        return ""
    return cell.elements[0].text.strip()


def parse_received_date(cell: Cell | None) -> str:
    """Strict ``D/MM/YYYY`` parse of the cell's first element as an ISO date, or ""."""
    text = _first_text(cell)
    if not _DATE.match(text):
        return ""
    try:
        return datetime.strptime(text, "%d/%m/%Y").date().isoformat()
    except ValueError:
        return ""


def clean_description(cell: Cell | None) -> str:
    if cell is None:
        return NO_DESCRIPTION
    description = _collapse(cell.text(" "))
    description = _DESCRIPTION_SUFFIX.sub("", description).strip()
    description = description.replace("DW ELLING", "DWELLING")
    return description or NO_DESCRIPTION


def split_hundred(elements: Sequence[TextElement]) -> tuple[list[TextElement], str]:
    """Remove the last hundred element ("HD ..." or "HUNDRED ...").

    Returns the remaining elements and the hundred name ("" if none).
    """
    remaining = list(elements)
    for index in range(len(remaining) - 1, -1, -1):
        text = remaining[index].text.strip()
        if _HUNDRED.match(text):
            del remaining[index]
            return remaining, _HUNDRED.sub("", text).strip()
    return remaining, ""


def legal_description(lot: str, section: str, hundred: str) -> str:
    parts = []
    if lot not in _EMPTY_MARKERS:
        parts.append(f"Lot {lot}")
    if section not in _EMPTY_MARKERS:
        parts.append(f"Section {section}")
    if hundred not in _EMPTY_MARKERS:
        parts.append(f"Hundred {hundred}")
    return ", ".join(parts)


def map_row(
    row: Row,
    headers: HeaderCells,
    *,
    settings: LayoutSettings,
    formatter: AddressFormatter,
    info_url: str,
    comment_url: str,
    scrape_date: date,
) -> DevelopmentApplication | None:
    """Build a record from one table row.

    Returns None for rows that are not applications (heading rows, blank
    rows, rows without a valid application number or address).
    """
    number_cell = row_cell(row, headers.application_number)
    if number_cell is None:
        return None
    application_number = number_cell.text().strip()
    if not settings.application_number_pattern.fullmatch(application_number):
        return None

    address_cell = row_cell(row, headers.address)
    if address_cell is None:
        return None
    address_elements, hundred = split_hundred(address_cell.elements)

    house_number_cell = row_cell(row, headers.house_number)
    house_number = ""
    if house_number_cell is not None:
        house_number = " ".join(
            e.text.strip() for e in house_number_cell.elements if e.text.strip() != "-"
        )

    address = settings.address_separator.join(e.text for e in address_elements)
    address = _collapse(f"{house_number} {address}")
    if not address:
        return None
    address = formatter.format_address(address)
    if not address:
        return None

    return DevelopmentApplication(
        application_number=application_number,
        address=address,
        description=clean_description(row_cell(row, headers.description)),
        info_url=info_url,
        comment_url=comment_url,
        date_scraped=scrape_date.isoformat(),
        date_received=parse_received_date(row_cell(row, headers.date)),
        legal_description=legal_description(
            _first_text(row_cell(row, headers.lot)),
            _first_text(row_cell(row, headers.section)),
            hundred,
        ),
    )


def map_page(
    rows: Sequence[Row],
    headers: HeaderCells,
    *,
    settings: LayoutSettings,
    formatter: AddressFormatter,
    info_url: str,
    comment_url: str,
    scrape_date: date,
) -> list[DevelopmentApplication]:
    """Map every row of a page, dropping rows that are not applications."""
    applications = []
    for row in rows:
        application = map_row(
            row, headers,
            settings=settings,
            formatter=formatter,
            info_url=info_url,
            comment_url=comment_url,
            scrape_date=scrape_date,
        )
        if application is not None:
            applications.append(application)
    return applications
