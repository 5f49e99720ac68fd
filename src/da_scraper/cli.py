"""CLI for scraping the development register."""
import argparse
import json
import logging
from pathlib import Path

from .config import Config
from .fetcher import Fetcher
from .gazetteer import load_gazetteer
from .models import LayoutVersion
from .scraper import parse_document, run


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Scrape development applications from register PDFs")
    parser.add_argument("--config", type=str, help="Path to config file")
    parser.add_argument("--layout", choices=[v.value for v in LayoutVersion], help="Register layout generation")
    parser.add_argument("--database", type=str, help="SQLite database path")
    parser.add_argument("--gazetteer-dir", type=str, help="Directory holding the gazetteer files")
    parser.add_argument("--pdf", type=str, metavar="FILE", help="Parse a local PDF and print its records")
    parser.add_argument("--no-pause", action="store_true", help="Do not pause between requests")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s"
    )

    config = Config.load(args.config)

    # Override config from CLI flags
    if args.layout:
        config.layout = args.layout
    if args.database:
        config.database_path = Path(args.database).expanduser()
    if args.gazetteer_dir:
        config.gazetteer_dir = Path(args.gazetteer_dir).expanduser()

    errors = config.validate()
    if errors:
        for e in errors:
            logging.error(e)
        return 1

    if args.pdf:
        pdf_path = Path(args.pdf).expanduser()
        applications = parse_document(
            pdf_path.read_bytes(),
            pdf_path.as_uri(),
            gazetteer=load_gazetteer(config.gazetteer_dir),
            config=config,
        )
        for application in applications:
            print(json.dumps(application.to_dict()))
        print(f"\nParsed {len(applications)} development application(s) from {pdf_path}")
        return 0

    with Fetcher(config, pause=not args.no_pause) as fetcher:
        summary = run(config, fetcher=fetcher)

    print(f"\nRun summary:")
    print(f"  Documents:        {summary.documents}")
    print(f"  Parsed:           {summary.parsed}")
    print(f"  Inserted:         {summary.inserted}")
    print(f"  Failed documents: {len(summary.failed_documents)}")
    print(f"  Failed records:   {len(summary.failed_records)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
