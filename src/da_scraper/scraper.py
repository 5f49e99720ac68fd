"""Run orchestration: listing, document selection, parsing and storage."""
from __future__ import annotations

import gc
import logging
import random
from dataclasses import dataclass, field
from datetime import date

from .address import AddressFormatter
from .config import Config
from .errors import DocumentError, StorageError
from .fetcher import Fetcher, select_documents
from .gazetteer import Gazetteer, load_gazetteer
from .layouts import LayoutSettings, get_layout
from .models import DevelopmentApplication
from .page_parser import parse_page
from .pdf_source import PDF_ERRORS, iter_pages, open_document
from .store import SqliteStore

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Outcome of one scraper run."""
    documents: int = 0                 # documents selected
    parsed: int = 0                    # records parsed across all documents
    inserted: int = 0                  # records newly stored
    failed_documents: list[str] = field(default_factory=list)
    failed_records: list[str] = field(default_factory=list)


def make_formatter(gazetteer: Gazetteer, config: Config, settings: LayoutSettings) -> AddressFormatter:
    """Address formatter tuned for the layout, with thresholds from config."""
    return AddressFormatter(
        gazetteer,
        street_window=settings.street_window,
        street_fuzzy_base=config.street_fuzzy_base,
        street_fuzzy_threshold=settings.street_fuzzy_threshold,
        name_fuzzy_threshold=config.name_fuzzy_threshold,
    )


def parse_document(
    data: bytes,
    info_url: str,
    *,
    gazetteer: Gazetteer,
    config: Config,
    scrape_date: date | None = None,
) -> list[DevelopmentApplication]:
    """Parse every page of a register PDF.

    Raises:
        DocumentError: If the bytes cannot be opened as a PDF or a page
            cannot be read.
    """
    settings = get_layout(config.layout)
    formatter = make_formatter(gazetteer, config, settings)
    scrape_date = scrape_date or date.today()

    doc = open_document(data, info_url)
    applications: list[DevelopmentApplication] = []
    try:
        for page in iter_pages(doc):
            logger.debug(f"Parsing page {page.page_number} of {info_url}")
            applications.extend(parse_page(
                page.instructions,
                page.text_runs,
                settings=settings,
                formatter=formatter,
                info_url=info_url,
                comment_url=config.comment_url,
                scrape_date=scrape_date,
            ))
    except PDF_ERRORS as e:
        raise DocumentError(info_url, e) from e
    finally:
        doc.close()
    return applications


def parse_document_at(
    url: str,
    fetcher: Fetcher,
    *,
    gazetteer: Gazetteer,
    config: Config,
    scrape_date: date | None = None,
) -> list[DevelopmentApplication]:
    """Download and parse a register PDF.

    Raises:
        DocumentError: If the document cannot be fetched or opened.
    """
    data = fetcher.fetch_document(url)
    return parse_document(data, url, gazetteer=gazetteer, config=config, scrape_date=scrape_date)


def run(
    config: Config,
    *,
    fetcher: Fetcher | None = None,
    rng: random.Random | None = None,
) -> RunSummary:
    """Scrape the register once: the latest document plus random others."""
    summary = RunSummary()
    gazetteer = load_gazetteer(config.gazetteer_dir)
    owns_fetcher = fetcher is None
    fetcher = fetcher or Fetcher(config, rng=rng)

    try:
        with SqliteStore(config.database_path) as store:
            urls = fetcher.fetch_listing(config.listing_url)
            if not urls:
                logger.info("No PDF URLs were found on the page.")
                return summary

            selected = select_documents(urls, config.documents_per_run, rng)
            summary.documents = len(selected)
            logger.info(f"Found {len(urls)} PDF file(s).  Selecting {len(selected)} to parse.")

            for url in selected:
                logger.info(f"Parsing document: {url}")
                try:
                    applications = parse_document_at(
                        url, fetcher, gazetteer=gazetteer, config=config,
                    )
                except DocumentError as e:
                    logger.error(str(e))
                    summary.failed_documents.append(url)
                    continue
                logger.info(f"Parsed {len(applications)} development application(s) from document: {url}")
                summary.parsed += len(applications)

                # Release the document's page structures before storing.
                gc.collect()

                for application in applications:
                    try:
                        if store.upsert(application):
                            summary.inserted += 1
                    except StorageError as e:
                        logger.error(str(e))
                        summary.failed_records.append(application.application_number)
    finally:
        if owns_fetcher:
            fetcher.close()

    return summary
