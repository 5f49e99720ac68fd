"""End-to-end tests for single-page parsing on synthetic pages."""
from __future__ import annotations

import logging
from datetime import date

import pytest

from da_scraper.address import AddressFormatter
from da_scraper.layouts import get_layout
from da_scraper.models import LayoutVersion
from da_scraper.page_parser import parse_page
from da_scraper.table_extraction.models import Fill

from page_builders import filled_rules, run, stroked_segments

SCRAPE_DATE = date(2024, 5, 1)

# application | no. | address | description | receipt
RULED_COLUMNS = [0.0, 100.0, 140.0, 300.0, 450.0, 600.0]

# applicant | VG number | application | address | description | decision
SEGMENTED_COLUMNS = [0.0, 100.0, 200.0, 300.0, 450.0, 560.0, 660.0]


def _ruled_heading_runs():
    return [
        run("APPLICATION", 5, 0, 70),
        run("NO.", 105, 0, 20),
        run("PROPERTY  ADDRESS", 145, 0, 110),
        run("DESCRIPTION", 305, 0, 80),
        run("RECEIPT", 455, 0, 50),
    ]


def _segmented_heading_runs():
    return [
        run("APPLICANT", 5, 0, 70),
        run("VG NUMBER", 105, 0, 70),
        run("APPLICATION", 205, 0, 80),
        run("PROPERTY ADDRESS", 305, 0, 110),
        run("DESCRIPTION", 455, 0, 80),
        run("DECISION", 565, 0, 60),
    ]


def _parse(layout, instructions, runs, gazetteer):
    settings = get_layout(layout)
    formatter = AddressFormatter(
        gazetteer,
        street_window=settings.street_window,
        street_fuzzy_threshold=settings.street_fuzzy_threshold,
    )
    return parse_page(
        instructions, runs,
        settings=settings,
        formatter=formatter,
        info_url="https://example.com/register.pdf",
        comment_url="mailto:info@dcgrant.sa.gov.au",
        scrape_date=SCRAPE_DATE,
    )


# =============================================================================
# Ruled layout
# =============================================================================


class TestRuledPage:

    def test_one_data_row(self, gazetteer):
        runs = _ruled_heading_runs() + [
            run("123/20", 5, 1, 40),
            run("123", 105, 1, 20),
            run("SMITH ST", 145, 1, 40),
            run("HD GRANT", 190, 1, 40),
            run("GRANT", 240, 1, 30),
            run("DWELLING - BUILDING RULES ONLY", 305, 1, 140),
            run("5/03/2020", 455, 1, 50),
        ]
        applications = _parse(
            LayoutVersion.RULED, filled_rules(RULED_COLUMNS, rows=2), runs, gazetteer,
        )

        assert len(applications) == 1
        (application,) = applications
        assert application.application_number == "123/20"
        assert application.address == "123 SMITH STREET, GRANT SA 5291"
        assert application.description == "DWELLING"
        assert application.date_received == "2020-03-05"
        assert application.legal_description == "Hundred GRANT"
        assert application.date_scraped == "2024-05-01"

    def test_several_rows(self, gazetteer):
        runs = _ruled_heading_runs()
        for row, number in enumerate(["1/20", "NOT A NUMBER", "3/20"], start=1):
            runs += [run(number, 5, row, 60), run("SMITH ST, GRANT", 145, row, 100)]
        applications = _parse(
            LayoutVersion.RULED, filled_rules(RULED_COLUMNS, rows=4), runs, gazetteer,
        )
        assert [a.application_number for a in applications] == ["1/20", "3/20"]

    def test_unfilled_rules_give_no_table(self, gazetteer, caplog):
        instructions = [i for i in filled_rules(RULED_COLUMNS, rows=2) if not isinstance(i, Fill)]
        with caplog.at_level(logging.INFO, logger="da_scraper.page_parser"):
            assert _parse(LayoutVersion.RULED, instructions, _ruled_heading_runs(), gazetteer) == []
        assert "[APPLICATION][NO.]" in caplog.text

    def test_missing_address_heading_skips_page(self, gazetteer, caplog):
        runs = [r for r in _ruled_heading_runs() if "ADDRESS" not in r.text]
        runs.append(run("123/20", 5, 1, 40))
        with caplog.at_level(logging.INFO, logger="da_scraper.page_parser"):
            applications = _parse(
                LayoutVersion.RULED, filled_rules(RULED_COLUMNS, rows=2), runs, gazetteer,
            )
        assert applications == []
        assert 'the "PROPERTY ADDRESS" column heading was not found' in caplog.text
        assert "[123/20]" in caplog.text


# =============================================================================
# Segmented layout
# =============================================================================


class TestSegmentedPage:

    def test_merged_run_is_split_before_mapping(self, gazetteer):
        runs = _segmented_heading_runs() + [
            run("SMITH   1234567   830/123/20", 5, 1, 280),
            run("12 SMITH ST, GRANT", 305, 1, 120),
            run("DWELLING", 455, 1, 60),
            run("5/03/2020", 565, 1, 50),
        ]
        applications = _parse(
            LayoutVersion.SEGMENTED, stroked_segments(SEGMENTED_COLUMNS, rows=2), runs, gazetteer,
        )

        assert len(applications) == 1
        (application,) = applications
        assert application.application_number == "830/123/20"
        assert application.address == "12 SMITH STREET, GRANT SA 5291"
        assert application.description == "DWELLING"
        assert application.date_received == "2020-03-05"

    def test_description_and_date_merged(self, gazetteer):
        runs = _segmented_heading_runs() + [
            run("830/1/20", 205, 1, 60),
            run("SMITH ST, GRANT", 305, 1, 100),
            run("SHED   5/03/2020", 455, 1, 180),
        ]
        (application,) = _parse(
            LayoutVersion.SEGMENTED, stroked_segments(SEGMENTED_COLUMNS, rows=2), runs, gazetteer,
        )
        assert application.description == "SHED"
        assert application.date_received == "2020-03-05"

    @pytest.mark.parametrize("number", ["123/20", "ASSESS"])
    def test_two_part_numbers_are_rejected(self, gazetteer, number):
        runs = _segmented_heading_runs() + [
            run(number, 205, 1, 60),
            run("SMITH ST, GRANT", 305, 1, 100),
        ]
        applications = _parse(
            LayoutVersion.SEGMENTED, stroked_segments(SEGMENTED_COLUMNS, rows=2), runs, gazetteer,
        )
        assert applications == []
