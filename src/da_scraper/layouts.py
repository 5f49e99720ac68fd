"""Per-layout settings: column headings, patterns and matching behaviour."""
from __future__ import annotations

import re
from dataclasses import dataclass, field

from .models import LayoutVersion


@dataclass(frozen=True)
class HeaderLabels:
    """Literal column heading text.  ``None`` means the layout has no such column."""
    application_number: str = "APPLICATION"
    address: str = "PROPERTY ADDRESS"
    description: str | None = "DESCRIPTION"
    date: str | None = "RECEIPT"
    house_number: str | None = "NO."
    lot: str | None = "LOT"
    section: str | None = "SECTION /"
    applicant: str | None = None
    vg_number: str | None = None


@dataclass(frozen=True)
class LayoutSettings:
    """Everything that differs between layout generations."""
    version: LayoutVersion
    labels: HeaderLabels
    application_number_pattern: re.Pattern
    address_separator: str             # joins the address cell's elements
    collapse_header_whitespace: bool   # normalise runs of spaces in headings
    require_header_containment: bool   # heading text must sit inside its cell
    split_overhangs: bool
    street_window: int
    street_fuzzy_threshold: int | None  # None: base minus word count
    split_limits: dict[str, int] = field(default_factory=dict)  # header field -> max tokens


LAYOUTS: dict[LayoutVersion, LayoutSettings] = {
    LayoutVersion.RULED: LayoutSettings(
        version=LayoutVersion.RULED,
        labels=HeaderLabels(),
        application_number_pattern=re.compile(r"\d+/\d+"),  # e.g. "141/17"
        address_separator=", ",
        collapse_header_whitespace=True,
        require_header_containment=False,
        split_overhangs=False,
        street_window=4,
        street_fuzzy_threshold=1,
    ),
    LayoutVersion.SEGMENTED: LayoutSettings(
        version=LayoutVersion.SEGMENTED,
        labels=HeaderLabels(date="DECISION", applicant="APPLICANT", vg_number="VG NUMBER"),
        application_number_pattern=re.compile(r"\d+/\d+/\d+"),  # e.g. "830/123/18"
        address_separator=" ",
        collapse_header_whitespace=False,
        require_header_containment=True,
        split_overhangs=True,
        street_window=6,
        street_fuzzy_threshold=None,
        # applicant | VG number | application number; description | decision date
        split_limits={"applicant": 3, "description": 2, "date": 1},
    ),
}


def get_layout(version: LayoutVersion | str) -> LayoutSettings:
    """Look up layout settings by version (or its string value)."""
    return LAYOUTS[LayoutVersion(version)]
