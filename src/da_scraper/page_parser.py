"""
Single-page pipeline: drawing instructions and text runs in, records out.

    instructions ─► grid extractor ─► cells ─┐
    text runs ────► text elements ───────────┴─► ownership ─► rows
        ─► headers ─► (overhang splitting) ─► field mapper ─► records
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

from .address import AddressFormatter
from .errors import MissingHeaderError
from .field_mapper import map_page
from .headers import HeaderCells, locate_headers
from .layouts import LayoutSettings
from .models import DevelopmentApplication
from .table_extraction.cells import group_rows
from .table_extraction.models import Instruction, TextElement, TextRun
from .table_extraction.overhang import SplitTarget, split_overhangs
from .table_extraction.strategies import get_extractor
from .table_extraction.text import extract_text_elements

logger = logging.getLogger(__name__)


def element_summary(elements: Sequence[TextElement]) -> str:
    """Raw page text as ``[text][text]...`` for diagnostics."""
    return "".join(f"[{element.text}]" for element in elements)


def split_targets(headers: HeaderCells, settings: LayoutSettings) -> list[SplitTarget]:
    """Header columns whose cells may carry merged runs, with their token limits."""
    targets = []
    for field_name, max_tokens in settings.split_limits.items():
        header = getattr(headers, field_name)
        if header is not None:
            targets.append(SplitTarget(header=header, max_tokens=max_tokens))
    return targets


def parse_page(
    instructions: Sequence[Instruction],
    runs: Sequence[TextRun],
    *,
    settings: LayoutSettings,
    formatter: AddressFormatter,
    info_url: str,
    comment_url: str,
    scrape_date: date | None = None,
) -> list[DevelopmentApplication]:
    """Extract the development applications on one page.

    Pages without a table, or without the mandatory column headings, are
    logged and yield no records.
    """
    scrape_date = scrape_date or date.today()
    extractor = get_extractor(settings.version)

    cells = extractor.build_cells(instructions)
    elements = extract_text_elements(runs)
    extractor.assign(elements, cells)
    rows = group_rows(cells)

    if not rows:
        logger.info(
            f"No development applications can be parsed from the current page because no "
            f"table cells were found.  Elements: {element_summary(elements)}"
        )
        return []

    try:
        headers = locate_headers(
            cells, settings.labels,
            require_containment=settings.require_header_containment,
            collapse_whitespace=settings.collapse_header_whitespace,
        )
    except MissingHeaderError as e:
        logger.info(
            f"No development applications can be parsed from the current page because {e}.  "
            f"Elements: {element_summary(elements)}"
        )
        return []

    if settings.split_overhangs:
        split_overhangs(rows, split_targets(headers, settings))

    applications = map_page(
        rows, headers,
        settings=settings,
        formatter=formatter,
        info_url=info_url,
        comment_url=comment_url,
        scrape_date=scrape_date,
    )
    logger.debug(
        f"Parsed {len(applications)} application(s) from {len(rows)} row(s) "
        f"using the {extractor.name} extractor"
    )
    return applications
