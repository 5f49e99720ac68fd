"""Tests for the PyMuPDF page adapter, on PDFs generated in the test."""
from __future__ import annotations

from datetime import date
from unittest.mock import patch

import pymupdf
import pytest

from da_scraper.errors import DocumentError
from da_scraper.pdf_source import drawing_instructions, iter_pages, open_document, text_runs
from da_scraper.scraper import parse_document
from da_scraper.table_extraction.lines import walk_instructions
from da_scraper.table_extraction.models import Fill, RestoreState, SaveState, Transform

from page_builders import PDF_PAGE_SIZE, encrypted_pdf, register_pdf

PAGE_WIDTH, PAGE_HEIGHT = PDF_PAGE_SIZE


@pytest.fixture
def page():
    doc = pymupdf.open()
    page = doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
    yield page
    doc.close()


class TestOpenDocument:

    def test_not_a_pdf(self):
        with pytest.raises(DocumentError) as excinfo:
            open_document(b"<html>not a pdf</html>", "https://example.com/x.pdf")
        assert excinfo.value.url == "https://example.com/x.pdf"

    def test_encrypted(self):
        with pytest.raises(DocumentError) as excinfo:
            open_document(encrypted_pdf(), "https://example.com/locked.pdf")
        assert "encrypted" in str(excinfo.value)

    def test_empty_bytes(self):
        with pytest.raises(DocumentError):
            open_document(b"")

    def test_pages(self):
        doc = open_document(register_pdf())
        pages = list(iter_pages(doc))
        doc.close()
        assert [p.page_number for p in pages] == [1]
        assert pages[0].instructions
        assert pages[0].text_runs


class TestDrawingInstructions:

    def test_stream_is_wrapped_in_flip(self, page):
        instructions = drawing_instructions(page)
        assert instructions == [
            SaveState(),
            Transform((1.0, 0.0, 0.0, -1.0, 0.0, PAGE_HEIGHT)),
            RestoreState(),
        ]

    def test_filled_rectangle_in_user_space(self, page):
        page.draw_rect(pymupdf.Rect(0, 100, 600, 101), color=None, fill=(0, 0, 0))
        instructions = drawing_instructions(page)
        assert any(isinstance(i, Fill) for i in instructions)

        (rect,) = walk_instructions(instructions, require_fill=True)
        assert (rect.x, rect.y, rect.width, rect.height) == pytest.approx(
            (0, PAGE_HEIGHT - 101, 600, 1), abs=0.5,
        )

    def test_stroked_line_is_a_segment(self, page):
        page.draw_line(pymupdf.Point(10, 200), pymupdf.Point(300, 200))
        instructions = drawing_instructions(page)
        assert not any(isinstance(i, Fill) for i in instructions)
        assert walk_instructions(instructions, require_fill=True) == []

        (segment,) = walk_instructions(instructions, require_fill=False)
        assert (segment.x, segment.y, segment.width, segment.height) == pytest.approx(
            (10, PAGE_HEIGHT - 200, 290, 0), abs=0.5,
        )


class TestTextRuns:

    def test_run_position(self, page):
        page.insert_text((50, 700), "HELLO", fontsize=12)
        (run,) = text_runs(page)
        assert run.text.strip() == "HELLO"
        a, b, c, d, e, f = run.transform
        assert (a, b, c, d) == pytest.approx((12, 0, 0, 12))
        assert (e, f) == pytest.approx((50, PAGE_HEIGHT - 700), abs=0.5)
        assert run.width > 0

    def test_blank_page(self, page):
        assert text_runs(page) == []


class TestParseDocument:

    def test_generated_register(self, gazetteer, mock_config):
        applications = parse_document(
            register_pdf(),
            "https://example.com/register.pdf",
            gazetteer=gazetteer,
            config=mock_config,
            scrape_date=date(2024, 5, 1),
        )
        assert len(applications) == 1
        (application,) = applications
        assert application.application_number == "123/20"
        assert application.address == "123 SMITH STREET, GRANT SA 5291"
        assert application.description == "DWELLING"
        assert application.date_received == "2020-03-05"
        assert application.info_url == "https://example.com/register.pdf"

    def test_unreadable_page(self, gazetteer, mock_config):
        with patch("da_scraper.scraper.iter_pages", side_effect=RuntimeError("damaged xref")):
            with pytest.raises(DocumentError) as excinfo:
                parse_document(
                    register_pdf(),
                    "https://example.com/damaged.pdf",
                    gazetteer=gazetteer,
                    config=mock_config,
                )
        assert excinfo.value.url == "https://example.com/damaged.pdf"
        assert isinstance(excinfo.value.cause, RuntimeError)
