"""
Record and layout models shared by the extraction engine and its collaborators.
"""
from __future__ import annotations

import enum
from dataclasses import asdict, dataclass
from typing import Any


class LayoutVersion(enum.Enum):
    """Generation of the register PDF layout.

    RULED documents draw a full grid of filled rectangles.  SEGMENTED
    documents draw open line segments and their text layer merges adjacent
    columns into single runs.
    """

    RULED = "ruled"
    SEGMENTED = "segmented"


# =============================================================================
# OUTPUT RECORDS
# =============================================================================

@dataclass(frozen=True)
class DevelopmentApplication:
    """One development application row recovered from a register page."""
    application_number: str    # council reference, e.g. "141/17"
    address: str               # formatted, "..., Suburb SA 5291"
    description: str
    info_url: str              # the PDF the record came from
    comment_url: str
    date_scraped: str          # YYYY-MM-DD
    date_received: str = ""    # YYYY-MM-DD or empty
    legal_description: str = ""

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable dict."""
        return asdict(self)
