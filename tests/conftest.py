"""
Shared pytest fixtures for da-scraper tests.

All fixtures that need to be shared across test modules should be defined here.
"""
from __future__ import annotations

from pathlib import Path

import pytest


STREET_LINES = [
    "SMITH STREET,GRANT",
    "SMITH STREET,PORT MACDONNELL",
    "KIRIP ROAD,HINDMARSH",
    "BAKER STREET,SOUTHEND",
    "SOMERVILLE STREET,BEACHPORT",
]

SUFFIX_LINES = [
    "ST,STREET",
    "RD,ROAD",
    "TCE,TERRACE",
]

SUBURB_LINES = [
    "GRANT,GRANT SA 5291,GRANT",
    "PORT MACDONNELL,PORT MACDONNELL SA 5291,MACDONNELL",
    "HINDMARSH,HINDMARSH SA 5291,HINDMARSH",
    "SOUTHEND,SOUTHEND SA 5280,RIVOLI BAY",
    "BEACHPORT,BEACHPORT SA 5280,RIVOLI BAY",
    "MOUNT GAMBIER,MOUNT GAMBIER SA 5290,MOUNT GAMBIER;BLANCHE",
]


# =============================================================================
# Gazetteer fixtures
# =============================================================================

@pytest.fixture
def gazetteer():
    """Small synthetic gazetteer covering the addresses used in tests."""
    from da_scraper.gazetteer import Gazetteer

    return Gazetteer.from_lines(STREET_LINES, SUFFIX_LINES, SUBURB_LINES)


@pytest.fixture
def gazetteer_dir(tmp_path: Path) -> Path:
    """Directory holding the three gazetteer files."""
    from da_scraper.gazetteer import STREET_NAMES_FILE, STREET_SUFFIXES_FILE, SUBURB_NAMES_FILE

    directory = tmp_path / "gazetteer"
    directory.mkdir()
    (directory / STREET_NAMES_FILE).write_text("\r\n".join(STREET_LINES) + "\r\n", encoding="utf-8")
    (directory / STREET_SUFFIXES_FILE).write_text("\n".join(SUFFIX_LINES) + "\n", encoding="utf-8")
    (directory / SUBURB_NAMES_FILE).write_text("\n".join(SUBURB_LINES) + "\n", encoding="utf-8")
    return directory


@pytest.fixture
def formatter(gazetteer):
    from da_scraper.address import AddressFormatter

    return AddressFormatter(gazetteer)


# =============================================================================
# Config fixtures
# =============================================================================

@pytest.fixture
def mock_config(tmp_path: Path, gazetteer_dir: Path, monkeypatch):
    """Create a test configuration with no file and no environment overrides."""
    from da_scraper.config import Config

    monkeypatch.delenv("MORPH_PROXY", raising=False)
    monkeypatch.delenv("DA_SCRAPER_DATABASE", raising=False)

    config = Config.load(tmp_path / "missing-config.json")
    config.database_path = tmp_path / "data.sqlite"
    config.gazetteer_dir = gazetteer_dir
    config.pace_min_seconds = 0.0
    config.pace_max_seconds = 0.0
    return config
