"""Scraper for the roadrun.co.kr race schedule."""
import logging
import re
import time
from typing import Iterable, List

import requests
from bs4 import BeautifulSoup

from processor.detail_extractor import parse_detail_html
from processor.models import RaceRecord, TransportError

logger = logging.getLogger(__name__)

DETAIL_LINK_RE = re.compile(r'view\.php\?no=(\d+)')


def parse_listing_ids(html_content: str) -> List[str]:
    """
    Extract detail page numbers from a listing page.

    Args:
        html_content: Decoded list.php HTML

    Returns:
        Distinct race numbers in discovery order
    """
    soup = BeautifulSoup(html_content, 'html.parser')
    ids = {}

    for anchor in soup.find_all('a', href=True):
        match = DETAIL_LINK_RE.search(anchor['href'])
        if match:
            ids.setdefault(match.group(1), None)

    return list(ids)


class RoadrunScraper:
    """Scraper for roadrun.co.kr list and detail pages."""

    BASE_URL = "http://www.roadrun.co.kr/schedule"
    ENCODING = "cp949"  # superset of EUC-KR covering all modern Hangul
    MAX_RETRIES = 3
    BASE_DELAY = 1  # seconds

    def __init__(self, timeout: int = 30):
        """
        Initialize the scraper.

        Args:
            timeout: HTTP request timeout in seconds (default: 30)
        """
        self.timeout = timeout

    def list_url(self, year: int) -> str:
        return f"{self.BASE_URL}/list.php?syear_key={year}"

    def detail_url(self, source_id: str) -> str:
        return f"{self.BASE_URL}/view.php?no={source_id}"

    def fetch_listing_ids(self, years: Iterable[int]) -> List[str]:
        """
        Collect race numbers across all requested years.

        Args:
            years: Years to crawl

        Returns:
            Distinct race numbers, first occurrence wins

        Raises:
            TransportError: If a listing page cannot be fetched
        """
        ids = {}

        for year in years:
            url = self.list_url(year)
            logger.info(f"[LIST] {url}")
            html_content = self.fetch_html(url)
            # First occurrence wins across years
            for source_id in parse_listing_ids(html_content):
                ids.setdefault(source_id, None)

        logger.info(f"[LIST] Found {len(ids)} events")
        return list(ids)

    def fetch_race(self, source_id: str) -> RaceRecord:
        """
        Fetch and extract a single race detail page.

        Raises:
            TransportError: If the page cannot be fetched
            ParseError: If the page has no table rows
        """
        url = self.detail_url(source_id)
        logger.info(f"[DETAIL] {url}")
        html_content = self.fetch_html(url)
        return parse_detail_html(html_content, source_id, url)

    def fetch_html(self, url: str) -> str:
        """
        Fetch a page and decode it as CP949 (EUC-KR), with retry logic.

        Args:
            url: Page URL

        Returns:
            Decoded HTML content

        Raises:
            TransportError: If all retry attempts fail
        """
        for attempt in range(self.MAX_RETRIES):
            try:
                response = requests.get(url, timeout=self.timeout)
                response.raise_for_status()
                # Decode legacy Korean encoding
                return response.content.decode(self.ENCODING, errors='replace')

            except requests.RequestException as e:
                if attempt < self.MAX_RETRIES - 1:
                    # Calculate exponential backoff delay
                    delay = self.BASE_DELAY * (2 ** attempt)
                    logger.warning(
                        f"Request to {url} failed (attempt {attempt + 1}/{self.MAX_RETRIES}): {e}. "
                        f"Retrying in {delay} seconds..."
                    )
                    time.sleep(delay)
                else:
                    logger.error(
                        f"All {self.MAX_RETRIES} retry attempts failed for {url}. Last error: {e}"
                    )
                    raise TransportError(f"Failed to fetch {url}: {e}") from e
