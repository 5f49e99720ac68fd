"""Development application register scraper."""
from .errors import DocumentError, MissingHeaderError, ScraperError, StorageError
from .models import DevelopmentApplication, LayoutVersion

__all__ = [
    "DevelopmentApplication",
    "LayoutVersion",
    "ScraperError",
    "MissingHeaderError",
    "DocumentError",
    "StorageError",
]
