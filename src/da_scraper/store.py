"""SQLite sink for development application records."""
from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from .errors import StorageError
from .models import DevelopmentApplication

logger = logging.getLogger(__name__)

SCHEMA = """\
CREATE TABLE IF NOT EXISTS [data] (
    [council_reference] TEXT PRIMARY KEY,
    [address]           TEXT,
    [description]       TEXT,
    [info_url]          TEXT,
    [comment_url]       TEXT,
    [date_scraped]      TEXT,
    [date_received]     TEXT,
    [legal_description] TEXT
);
"""

_COLUMNS = (
    "council_reference", "address", "description", "info_url",
    "comment_url", "date_scraped", "date_received", "legal_description",
)


def _describe(application: DevelopmentApplication) -> str:
    return (
        f'application "{application.application_number}" with address "{application.address}", '
        f'description "{application.description}", legal description '
        f'"{application.legal_description}" and received date "{application.date_received}"'
    )


class SqliteStore:
    """Idempotent record store: a council reference is only ever inserted once."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        try:
            self._con = sqlite3.connect(str(self.path))
            self._con.executescript(SCHEMA)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open database {self.path}: {e}") from e

    def upsert(self, application: DevelopmentApplication) -> bool:
        """Insert the record unless its council reference is already stored.

        Returns:
            True if a row was inserted, False if it was already present.

        Raises:
            StorageError: On database failure.
        """
        values = (
            application.application_number,
            application.address,
            application.description,
            application.info_url,
            application.comment_url,
            application.date_scraped,
            application.date_received,
            application.legal_description,
        )
        try:
            with self._con:
                cursor = self._con.execute(
                    f"INSERT OR IGNORE INTO [data] ({', '.join(_COLUMNS)}) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                    values,
                )
        except sqlite3.Error as e:
            logger.error(f"Failed to store {_describe(application)}: {e}")
            raise StorageError(
                f"Failed to store application {application.application_number}: {e}"
            ) from e

        if cursor.rowcount > 0:
            logger.info(f"Inserted: {_describe(application)} into the database.")
            return True
        logger.info(f"Skipped: {_describe(application)} because it was already present in the database.")
        return False

    def count(self) -> int:
        return self._con.execute("SELECT COUNT(*) FROM [data]").fetchone()[0]

    def get(self, council_reference: str) -> dict | None:
        """Stored row as a column -> value dict, or None."""
        row = self._con.execute(
            f"SELECT {', '.join(_COLUMNS)} FROM [data] WHERE council_reference = ?",
            (council_reference,),
        ).fetchone()
        if row is None:
            return None
        return dict(zip(_COLUMNS, row))

    def close(self) -> None:
        self._con.close()

    def __enter__(self) -> SqliteStore:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
