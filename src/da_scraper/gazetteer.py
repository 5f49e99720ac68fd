"""
Street, suffix, suburb and hundred name lookup tables.

The gazetteer is built once at startup from three comma-separated text files
and passed explicitly to the address formatter:

- ``streetnames.txt``: ``STREET NAME,SUBURB`` (a street may appear once per suburb)
- ``streetsuffixes.txt``: ``ABBREVIATION,EXPANDED`` (e.g. ``ST,STREET``)
- ``suburbnames.txt``: ``SUBURB,Suburb SA 5291,HUNDRED ONE;HUNDRED TWO``

Names are matched with a Levenshtein edit distance via rapidfuzz.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from rapidfuzz import process
from rapidfuzz.distance import Levenshtein

logger = logging.getLogger(__name__)

STREET_NAMES_FILE = "streetnames.txt"
STREET_SUFFIXES_FILE = "streetsuffixes.txt"
SUBURB_NAMES_FILE = "suburbnames.txt"

GAZETTEER_FILES = (STREET_NAMES_FILE, STREET_SUFFIXES_FILE, SUBURB_NAMES_FILE)

_MOUNT = "MOUNT "
_MOUNT_ABBREVIATIONS = ("MT ", "MT.", "MT. ")


def _fold(text: str) -> str:
    """Case-fold and collapse whitespace for fuzzy comparison."""
    return " ".join(text.split()).upper()


def closest_match(query: str, choices: Sequence[str], threshold: int) -> str | None:
    """Return the first choice with the smallest edit distance to ``query``.

    Args:
        query: Text to look up.
        choices: Candidate names.
        threshold: Largest edit distance accepted.

    Returns:
        The matching choice, or None if nothing is within ``threshold``.
    """
    if not query.strip() or not choices:
        return None
    match = process.extractOne(
        query,
        choices,
        scorer=Levenshtein.distance,
        processor=_fold,
        score_cutoff=threshold,
    )
    if match is None:
        return None
    choice, _distance, _index = match
    return choice


def _mount_variants(name: str) -> list[str]:
    if not name.startswith(_MOUNT):
        return []
    rest = name[len(_MOUNT):]
    return [prefix + rest for prefix in _MOUNT_ABBREVIATIONS]


def _rows(lines: Iterable[str]) -> Iterable[list[str]]:
    for line in lines:
        line = line.strip()
        if not line:
            continue
        yield [token.strip() for token in line.upper().split(",")]


@dataclass(frozen=True)
class Gazetteer:
    """Immutable name lookup tables used for address canonicalisation."""

    streets: Mapping[str, tuple[str, ...]]   # street name -> candidate suburbs
    suffixes: Mapping[str, str]              # abbreviation -> expanded suffix
    suburbs: Mapping[str, str]               # suburb name -> "Suburb SA 5291"
    hundreds: Mapping[str, tuple[str, ...]]  # hundred name -> candidate suburbs

    @classmethod
    def from_lines(
        cls,
        street_lines: Iterable[str],
        suffix_lines: Iterable[str],
        suburb_lines: Iterable[str],
    ) -> Gazetteer:
        """Build a gazetteer from the lines of the three source files."""
        streets: dict[str, list[str]] = {}
        for tokens in _rows(street_lines):
            if len(tokens) < 2:
                logger.debug(f"Ignoring malformed street line: {tokens}")
                continue
            streets.setdefault(tokens[0], []).append(tokens[1])

        suffixes: dict[str, str] = {}
        for tokens in _rows(suffix_lines):
            if len(tokens) < 2:
                logger.debug(f"Ignoring malformed suffix line: {tokens}")
                continue
            suffixes[tokens[0]] = tokens[1]

        suburbs: dict[str, str] = {}
        hundreds: dict[str, list[str]] = {}
        for tokens in _rows(suburb_lines):
            if len(tokens) < 2:
                logger.debug(f"Ignoring malformed suburb line: {tokens}")
                continue
            suburb, canonical = tokens[0], tokens[1]
            suburbs[suburb] = canonical
            for variant in _mount_variants(suburb):
                suburbs[variant] = canonical

            if len(tokens) < 3:
                continue
            for hundred in tokens[2].split(";"):
                hundred = hundred.strip()
                if not hundred:
                    continue
                for name in [hundred, *_mount_variants(hundred)]:
                    hundreds.setdefault(name, []).append(suburb)

        return cls(
            streets=MappingProxyType({k: tuple(v) for k, v in streets.items()}),
            suffixes=MappingProxyType(suffixes),
            suburbs=MappingProxyType(suburbs),
            hundreds=MappingProxyType({k: tuple(v) for k, v in hundreds.items()}),
        )

    # Key tuples for fuzzy matching (computed once).

    @cached_property
    def street_names(self) -> tuple[str, ...]:
        return tuple(self.streets)

    @cached_property
    def suburb_names(self) -> tuple[str, ...]:
        return tuple(self.suburbs)

    @cached_property
    def hundred_names(self) -> tuple[str, ...]:
        return tuple(self.hundreds)

    @cached_property
    def expanded_suffixes(self) -> frozenset[str]:
        return frozenset(self.suffixes.values())

    def expand_suffix(self, token: str) -> str | None:
        """Expanded form of a street suffix given either form ("ST" or "STREET")."""
        expanded = self.suffixes.get(token)
        if expanded is not None:
            return expanded
        if token in self.expanded_suffixes:
            return token
        return None

    def stats(self) -> dict:
        """Return counts of the loaded tables."""
        return {
            "streets": len(self.streets),
            "suffixes": len(self.suffixes),
            "suburbs": len(self.suburbs),
            "hundreds": len(self.hundreds),
        }


def _read_lines(path: Path) -> list[str]:
    if not path.exists():
        raise FileNotFoundError(f"Gazetteer file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return f.read().replace("\r", "").split("\n")


def load_gazetteer(directory: Path | str) -> Gazetteer:
    """Load the gazetteer from the three source files in ``directory``."""
    directory = Path(directory).expanduser()
    gazetteer = Gazetteer.from_lines(
        _read_lines(directory / STREET_NAMES_FILE),
        _read_lines(directory / STREET_SUFFIXES_FILE),
        _read_lines(directory / SUBURB_NAMES_FILE),
    )
    logger.info(f"Loaded gazetteer from {directory}: {gazetteer.stats()}")
    return gazetteer
