"""Address canonicalisation against the gazetteer.

Register addresses are comma-separated but the position of the street within
them varies, e.g.::

    LOT 15, SECTION P.2299,  KIRIP RD, HINDMARSH
    LOT 1, 2 BAKER ST, SOUTHEND, RIVOLI BAY
    LOT 4, SECTION ,  KIRIP RD, HD HINDMARSH, HINDMARSH
    SECTION P.399, 10 SOMERVILLE ST,S.O.T.P, BEACHPORT, RIVOLI BAY

The street is located first; the tokens after it (suburb and/or hundred
names) are used to choose among the street's known suburbs.
"""
from __future__ import annotations

from dataclasses import dataclass

from .gazetteer import Gazetteer, closest_match

# Edit-distance thresholds (empirically tuned).
STREET_FUZZY_BASE = 7        # street threshold is this minus the word count
NAME_FUZZY_THRESHOLD = 2     # suburb and hundred names
STREET_WINDOW = 6            # longest street name tried, in words
MIN_STREET_WORDS = 2

# Where the street usually sits, counted from the end, in trial order.
STREET_OFFSETS = (3, 2, 4)

HUNDRED_PREFIX = "HD "

_SPECIAL_CASES = (
    (" TCE NTH", " TERRACE NORTH"),
    (" TCE STH", " TERRACE SOUTH"),
    (" TCE EAST", " TERRACE EAST"),
    (" TCE WEST", " TERRACE WEST"),
)


@dataclass(frozen=True)
class FormattedStreet:
    street_name: str              # canonical street, with any leading house number
    suburb_names: tuple[str, ...]  # suburbs the street is known in


def _strip_hundred_prefix(token: str) -> str:
    token = token.strip()
    if token.startswith(HUNDRED_PREFIX):
        token = token[len(HUNDRED_PREFIX):].strip()
    return token


def _intersect(candidates: tuple[str, ...], *constraints: tuple[str, ...]) -> list[str]:
    """Keep candidates present in every non-empty constraint."""
    return [
        name for name in candidates
        if all(not constraint or name in constraint for constraint in constraints)
    ]


class AddressFormatter:
    """Formats raw register addresses into "street, Suburb SA postcode" form."""

    def __init__(
        self,
        gazetteer: Gazetteer,
        *,
        street_window: int = STREET_WINDOW,
        street_fuzzy_base: int = STREET_FUZZY_BASE,
        street_fuzzy_threshold: int | None = None,
        name_fuzzy_threshold: int = NAME_FUZZY_THRESHOLD,
    ):
        """
        Args:
            gazetteer: Lookup tables.
            street_window: Longest trailing word sequence tried as a street name.
            street_fuzzy_base: Street threshold is ``base - word_count``.
            street_fuzzy_threshold: Fixed street threshold; overrides the base.
            name_fuzzy_threshold: Threshold for suburb and hundred names.
        """
        self.gazetteer = gazetteer
        self.street_window = street_window
        self.street_fuzzy_base = street_fuzzy_base
        self.street_fuzzy_threshold = street_fuzzy_threshold
        self.name_fuzzy_threshold = name_fuzzy_threshold

    def _street_threshold(self, word_count: int) -> int:
        if self.street_fuzzy_threshold is not None:
            return self.street_fuzzy_threshold
        return max(0, self.street_fuzzy_base - word_count)

    def _hundred_suburbs(self, token: str) -> tuple[str, ...]:
        match = closest_match(
            _strip_hundred_prefix(token), self.gazetteer.hundred_names, self.name_fuzzy_threshold,
        )
        return () if match is None else self.gazetteer.hundreds[match]

    def _suburb(self, token: str) -> tuple[str, ...]:
        match = closest_match(token.strip(), self.gazetteer.suburb_names, self.name_fuzzy_threshold)
        return () if match is None else (match,)

    def format_street(self, text: str | None) -> FormattedStreet | None:
        """Recognise a street (with optional leading house number).

        Returns None unless the text ends in a known street suffix and the
        words before it name a known street.
        """
        if text is None:
            return None
        tokens = text.strip().upper().split()
        if not tokens:
            return None

        # Accept both "ST" and "STREET"; no suffix means not a street.
        suffix = self.gazetteer.expand_suffix(tokens.pop())
        if suffix is None:
            return None
        tokens.append(suffix)

        windows = range(min(self.street_window, len(tokens)), MIN_STREET_WORDS - 1, -1)

        for count in windows:
            suburb_names = self.gazetteer.streets.get(" ".join(tokens[-count:]))
            if suburb_names is not None:
                return FormattedStreet(" ".join(tokens), suburb_names)

        # Allow for a spelling error.
        for count in windows:
            match = closest_match(
                " ".join(tokens[-count:]), self.gazetteer.street_names, self._street_threshold(count),
            )
            if match is not None:
                prefix = tokens[:-count]
                return FormattedStreet(
                    (" ".join(prefix) + " " + match).strip(), self.gazetteer.streets[match],
                )

        return None

    def format_address(self, address: str) -> str:
        """Format an address, ensuring it ends with a valid suburb, state and postcode.

        The address is returned unchanged if no street can be found in it.
        """
        for abbreviated, expanded in _SPECIAL_CASES:
            address = address.replace(abbreviated, expanded)

        tokens = address.split(",")

        street: FormattedStreet | None = None
        offset = 0
        for offset in STREET_OFFSETS:
            if offset > len(tokens):
                continue
            street = self.format_street(tokens[-offset])
            if street is not None:
                break
        if street is None:
            return address

        if offset == 2:
            # One trailing token: a hundred name.
            candidates = _intersect(street.suburb_names, self._hundred_suburbs(tokens[-1]))
        else:
            # Two trailing tokens: suburb then hundred, unless the first is
            # also marked as a hundred.  With three, the first is ignored.
            hundred_suburbs = self._hundred_suburbs(tokens[-1])
            other = tokens[-2].strip()
            if other.startswith(HUNDRED_PREFIX):
                other_suburbs = self._hundred_suburbs(other)
            else:
                other_suburbs = self._suburb(other)
            candidates = _intersect(street.suburb_names, hundred_suburbs, other_suburbs)

        suburb = candidates[0] if candidates else street.suburb_names[0]

        formatted = [token.strip() for token in tokens[:-offset]]
        formatted.append(street.street_name)
        formatted.append(self.gazetteer.suburbs.get(suburb, suburb))
        return ", ".join(formatted)
