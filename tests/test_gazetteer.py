"""Tests for gazetteer loading and fuzzy name lookup."""
from __future__ import annotations

from pathlib import Path

import pytest

from da_scraper.gazetteer import (
    STREET_SUFFIXES_FILE,
    Gazetteer,
    closest_match,
    load_gazetteer,
)


# =============================================================================
# Fuzzy matching
# =============================================================================


class TestClosestMatch:

    CHOICES = ("GRANT", "PORT MACDONNELL", "HINDMARSH")

    def test_exact(self):
        assert closest_match("GRANT", self.CHOICES, 2) == "GRANT"

    def test_case_and_whitespace_insensitive(self):
        assert closest_match("  grant ", self.CHOICES, 0) == "GRANT"

    def test_within_threshold(self):
        assert closest_match("HINDMASH", self.CHOICES, 2) == "HINDMARSH"

    def test_beyond_threshold(self):
        assert closest_match("HNDMSH", self.CHOICES, 2) is None

    def test_empty_query(self):
        assert closest_match("   ", self.CHOICES, 2) is None

    def test_no_choices(self):
        assert closest_match("GRANT", (), 2) is None


# =============================================================================
# Construction
# =============================================================================


class TestFromLines:

    def test_street_listed_in_several_suburbs(self, gazetteer):
        assert gazetteer.streets["SMITH STREET"] == ("GRANT", "PORT MACDONNELL")

    def test_suffixes(self, gazetteer):
        assert gazetteer.suffixes["ST"] == "STREET"
        assert gazetteer.expand_suffix("ST") == "STREET"
        assert gazetteer.expand_suffix("STREET") == "STREET"
        assert gazetteer.expand_suffix("LANE") is None

    def test_mount_variants(self, gazetteer):
        for name in ("MOUNT GAMBIER", "MT GAMBIER", "MT.GAMBIER", "MT. GAMBIER"):
            assert gazetteer.suburbs[name] == "MOUNT GAMBIER SA 5290"
            assert gazetteer.hundreds[name] == ("MOUNT GAMBIER",)

    def test_hundred_shared_by_suburbs(self, gazetteer):
        assert gazetteer.hundreds["RIVOLI BAY"] == ("SOUTHEND", "BEACHPORT")

    def test_blank_and_malformed_lines_are_ignored(self):
        gazetteer = Gazetteer.from_lines(["", "SMITH STREET", "SMITH STREET,GRANT"], ["ST"], ["GRANT"])
        assert gazetteer.stats() == {"streets": 1, "suffixes": 0, "suburbs": 0, "hundreds": 0}

    def test_input_is_uppercased(self):
        gazetteer = Gazetteer.from_lines(["Smith Street,Grant"], [], ["grant,Grant SA 5291"])
        assert gazetteer.streets == {"SMITH STREET": ("GRANT",)}
        assert gazetteer.suburbs == {"GRANT": "GRANT SA 5291"}

    def test_immutable(self, gazetteer):
        with pytest.raises(TypeError):
            gazetteer.streets["NEW STREET"] = ("GRANT",)


# =============================================================================
# Loading
# =============================================================================


class TestLoadGazetteer:

    def test_loads_files(self, gazetteer_dir: Path, gazetteer):
        loaded = load_gazetteer(gazetteer_dir)
        assert loaded.stats() == gazetteer.stats()
        assert loaded.streets["KIRIP ROAD"] == ("HINDMARSH",)

    def test_missing_file(self, gazetteer_dir: Path):
        (gazetteer_dir / STREET_SUFFIXES_FILE).unlink()
        with pytest.raises(FileNotFoundError, match=STREET_SUFFIXES_FILE):
            load_gazetteer(gazetteer_dir)
