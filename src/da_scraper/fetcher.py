"""Register listing and PDF document retrieval.

Requests are paced: after every fetch the client pauses for
``pace_min_seconds`` plus a random whole number of seconds, so that a run
never hits the council site in quick succession.
"""
import logging
import random
import time
from typing import Callable, Sequence
from urllib.parse import urljoin

import httpx
import lxml.html

from .config import Config
from .errors import DocumentError

logger = logging.getLogger(__name__)

LISTING_CELL_CLASS = "u6ListTD"


def extract_pdf_links(html: str | bytes, base_url: str) -> list[str]:
    """Absolute URLs of the PDF links in the register listing table.

    Only anchors inside ``td`` cells of the listing table are considered.
    Duplicates are dropped; page order is kept (most recent first).
    """
    if not html or not html.strip():
        return []
    root = lxml.html.fromstring(html)
    anchors = root.xpath(
        f"//td[contains(concat(' ', normalize-space(@class), ' '), ' {LISTING_CELL_CLASS} ')]//a[@href]"
    )
    urls: list[str] = []
    for anchor in anchors:
        url = urljoin(base_url, anchor.get("href").strip())
        if ".pdf" not in url.lower() or url in urls:
            continue
        urls.append(url)
    return urls


def select_documents(urls: Sequence[str], count: int, rng: random.Random | None = None) -> list[str]:
    """Pick the documents to parse this run.

    The first (most recent) document is always chosen, plus up to
    ``count - 1`` others at random.  The order is reversed half the time.
    """
    if not urls or count < 1:
        return []
    rng = rng or random.Random()
    selected = [urls[0]]
    others = list(urls[1:])
    selected.extend(rng.sample(others, min(count - 1, len(others))))
    if rng.randrange(2) == 0:
        selected.reverse()
    return selected


class Fetcher:
    """HTTP client for the development register.

    Rate limiting: one request, then a pause of
    ``pace_min_seconds + randrange(pace_max_seconds - pace_min_seconds)``.
    """

    def __init__(
        self,
        config: Config,
        *,
        pause: bool = True,
        sleep: Callable[[float], None] = time.sleep,
        rng: random.Random | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize client.

        Args:
            config: Proxy, timeout, retry and pacing settings.
            pause: Whether to pause after each request.
            sleep: Sleep function (replaced in tests).
            rng: Random source for pacing.
            transport: Transport override for both clients (used in tests).
        """
        self.config = config
        self.pause = pause
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._client = self._make_client(verify=True, transport=transport)
        # The listing site's certificate chain does not verify.
        self._listing_client = self._make_client(
            verify=config.verify_listing_tls, transport=transport,
        )

    def _make_client(self, *, verify: bool, transport: httpx.BaseTransport | None) -> httpx.Client:
        if transport is None:
            transport = httpx.HTTPTransport(
                retries=self.config.max_retries,
                verify=verify,
                proxy=self.config.proxy,
            )
        return httpx.Client(
            transport=transport,
            timeout=self.config.request_timeout,
            follow_redirects=True,
        )

    def _rate_limit(self):
        """Pause between requests."""
        if not self.pause:
            return
        spread = int(self.config.pace_max_seconds - self.config.pace_min_seconds)
        delay = self.config.pace_min_seconds + (self._rng.randrange(spread) if spread > 0 else 0)
        logger.debug(f"Pausing for {delay} seconds")
        self._sleep(delay)

    def fetch_listing(self, url: str | None = None) -> list[str]:
        """Fetch the register page and return its PDF links.

        Raises:
            httpx.HTTPError: If the listing cannot be retrieved.
        """
        url = url or self.config.listing_url
        logger.info(f"Retrieving page: {url}")
        resp = self._listing_client.get(url)
        resp.raise_for_status()
        self._rate_limit()
        urls = extract_pdf_links(resp.content, str(resp.url))
        logger.info(f"Found {len(urls)} PDF file(s)")
        return urls

    def fetch_document(self, url: str) -> bytes:
        """Download a register PDF.

        Raises:
            DocumentError: If the download fails.
        """
        logger.info(f"Retrieving document: {url}")
        try:
            resp = self._client.get(url)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise DocumentError(url, e) from e
        self._rate_limit()
        return resp.content

    def close(self):
        self._client.close()
        self._listing_client.close()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *exc_info):
        self.close()
