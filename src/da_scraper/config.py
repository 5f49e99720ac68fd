"""Configuration management."""
from dataclasses import dataclass
from pathlib import Path
import json
import os

from .gazetteer import GAZETTEER_FILES
from .models import LayoutVersion

DEFAULT_CONFIG_PATH = "~/.config/da-scraper/config.json"


@dataclass
class Config:
    """Application configuration."""
    listing_url: str
    comment_url: str
    database_path: Path
    # Directory holding streetnames.txt, streetsuffixes.txt and suburbnames.txt
    gazetteer_dir: Path
    # Register layout generation: "ruled" or "segmented"
    layout: str
    # HTTP settings
    proxy: str | None
    request_timeout: float
    max_retries: int
    verify_listing_tls: bool  # the council site's certificate chain is incomplete
    # Pause between requests: min seconds plus a random whole number up to max
    pace_min_seconds: float
    pace_max_seconds: float
    documents_per_run: int
    # Address matching
    street_fuzzy_base: int
    name_fuzzy_threshold: int

    @classmethod
    def load(cls, path: Path | str | None = None) -> "Config":
        """Load config from file and/or environment."""
        if path is not None:
            config_path = Path(path).expanduser()
        else:
            config_path = Path(DEFAULT_CONFIG_PATH).expanduser()

        data = {}
        if config_path.exists():
            with open(config_path) as f:
                data = json.load(f)

        return cls(
            listing_url=data.get("listing_url", "https://www.dcgrant.sa.gov.au/developmentregister"),
            comment_url=data.get("comment_url", "mailto:info@dcgrant.sa.gov.au"),
            database_path=Path(
                os.environ.get("DA_SCRAPER_DATABASE") or data.get("database_path", "data.sqlite")
            ).expanduser(),
            gazetteer_dir=Path(data.get("gazetteer_dir", ".")).expanduser(),
            layout=data.get("layout", LayoutVersion.RULED.value),
            # HTTP settings
            proxy=data.get("proxy") or os.environ.get("MORPH_PROXY"),
            request_timeout=data.get("request_timeout", 60.0),
            max_retries=data.get("max_retries", 3),
            verify_listing_tls=data.get("verify_listing_tls", False),
            pace_min_seconds=data.get("pace_min_seconds", 2.0),
            pace_max_seconds=data.get("pace_max_seconds", 7.0),
            documents_per_run=data.get("documents_per_run", 2),
            # Address matching
            street_fuzzy_base=data.get("street_fuzzy_base", 7),
            name_fuzzy_threshold=data.get("name_fuzzy_threshold", 2),
        )

    @property
    def layout_version(self) -> LayoutVersion:
        return LayoutVersion(self.layout)

    def validate(self) -> list[str]:
        """Return list of validation errors, empty if valid."""
        errors = []
        valid_layouts = [v.value for v in LayoutVersion]
        if self.layout not in valid_layouts:
            errors.append(f"Invalid layout: {self.layout}. Must be one of {valid_layouts}")

        for name in GAZETTEER_FILES:
            if not (self.gazetteer_dir / name).exists():
                errors.append(f"Gazetteer file not found: {self.gazetteer_dir / name}")

        if self.pace_min_seconds < 0 or self.pace_max_seconds < self.pace_min_seconds:
            errors.append(
                f"Invalid pacing range: {self.pace_min_seconds}..{self.pace_max_seconds} seconds"
            )
        if self.documents_per_run < 1:
            errors.append(f"documents_per_run must be positive, got {self.documents_per_run}")
        if self.max_retries < 0:
            errors.append(f"max_retries must not be negative, got {self.max_retries}")

        return errors
