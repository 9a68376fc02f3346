"""
BOE Listing Scraper

Searches the BOE auction portal (subastas.boe.es) for real-estate auctions
in the execution stage, one province at a time, and parses the result blocks
into ListingSummary instances.
"""
from dataclasses import dataclass, field
from typing import List, Optional

import requests
from bs4 import BeautifulSoup
from pydantic import ValidationError

from config.settings import settings
from src.subastas.models.auction import ListingSummary
from src.subastas.transformers.listing_text import (
    classify_status,
    extract_identifier,
    parse_geography,
    resolve_link,
)
from src.subastas.transformers.money import extract_amount
from src.subastas.utils.logger import get_logger

logger = get_logger(__name__)

NO_RESULTS_MARKER = "No se han encontrado"

# Fixed search filter: case stage = execution (EJ), asset type = real estate (I)
SEARCH_FILTER = {
    "campo[2]": "SUBASTA.ESTADO.CODIGO",
    "dato[2]": "EJ",
    "campo[3]": "BIEN.TIPO",
    "dato[3]": "I",
    "campo[8]": "BIEN.COD_PROVINCIA",
}


@dataclass
class PartitionResult:
    """Outcome of one province search."""
    partition: str
    listings: List[ListingSummary] = field(default_factory=list)
    dropped: int = 0
    failed: bool = False


class BoeListingScraper:
    """
    Scraper for the BOE advanced search results page.

    One form-encoded POST per province; every result block with a usable
    detail link becomes a ListingSummary.
    """

    def __init__(
        self,
        search_url: Optional[str] = None,
        base_url: Optional[str] = None,
        page_hits: Optional[int] = None,
    ):
        """
        Initialize the listing scraper.

        Args:
            search_url: Override the search endpoint (for testing)
            base_url: Override the base URL links are resolved against
            page_hits: Override the page-size ceiling
        """
        self.search_url = search_url or settings.boe_search_url
        self.base_url = base_url or settings.boe_base_url
        self.page_hits = page_hits or settings.boe_page_hits
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": settings.boe_user_agent})
        logger.info("listing_scraper_initialized", search_url=self.search_url)

    def build_form(self, partition: str) -> dict:
        """Search form for one province code."""
        return {
            **SEARCH_FILTER,
            "dato[8]": partition,
            "page_hits": str(self.page_hits),
            "accion": "Buscar",
        }

    def search(self, partition: str) -> str:
        """
        POST the search form for one province.

        Returns:
            Raw HTML of the results page

        Raises:
            requests.RequestException: On network or HTTP errors
        """
        response = self.session.post(
            self.search_url,
            data=self.build_form(partition),
            timeout=settings.http_timeout_seconds,
        )
        response.raise_for_status()
        logger.debug(
            "search_request_successful",
            partition=partition,
            status_code=response.status_code,
        )
        return response.text

    def fetch_partition(self, partition: str) -> PartitionResult:
        """
        Search and parse one province.

        Request failures are logged and reported as an empty, failed result.
        """
        logger.info("scraping_partition", partition=partition)

        try:
            html = self.search(partition)
        except requests.RequestException as e:
            logger.error(
                "search_request_failed",
                partition=partition,
                error=str(e),
                error_type=type(e).__name__
            )
            return PartitionResult(partition=partition, failed=True)

        result = self.parse_results(html, partition)
        logger.info(
            "partition_scraped",
            partition=partition,
            items=len(result.listings),
            dropped=result.dropped,
        )
        return result

    def parse_results(self, html: str, partition: str = "") -> PartitionResult:
        """
        Parse a results page into listings.

        Args:
            html: Results page HTML
            partition: Province code, for logging

        Returns:
            PartitionResult with parsed listings and the dropped-block count
        """
        soup = BeautifulSoup(html, "lxml")
        blocks = soup.select(".resultado-busqueda")
        result = PartitionResult(partition=partition)

        if not blocks:
            if NO_RESULTS_MARKER in soup.get_text(" "):
                logger.info("partition_no_results", partition=partition)
            return result

        for block in blocks:
            listing = self._parse_block(block)
            if listing is None:
                result.dropped += 1
                continue
            result.listings.append(listing)

        if result.dropped:
            logger.debug("listing_blocks_dropped", partition=partition, dropped=result.dropped)

        return result

    def _parse_block(self, block) -> Optional[ListingSummary]:
        """One result block, or None when it has no addressable identifier."""
        link = block.find("a")
        href = link.get("href") if link is not None else None
        if not href:
            return None

        try:
            url = resolve_link(href, self.base_url)
            auction_id = extract_identifier(url)
        except ValueError as e:
            logger.debug("listing_link_unparsable", href=href, error=str(e))
            return None
        if not auction_id:
            return None

        paragraphs = block.find_all("p")
        status_line = _text(paragraphs[0]) if len(paragraphs) > 0 else ""
        detail_line = _text(paragraphs[1]) if len(paragraphs) > 1 else ""
        geography = parse_geography(detail_line)

        try:
            return ListingSummary(
                id=auction_id,
                title=_text(block.find("h3")),
                court=_text(block.find("h4")),
                status=classify_status(status_line),
                description=detail_line,
                amount=extract_amount(status_line, detail_line),
                url=url,
                location_city=geography.city,
                location_province=geography.province,
            )
        except ValidationError as e:
            logger.warning("listing_validation_failed", auction_id=auction_id, error=str(e))
            return None


def _text(tag) -> str:
    if tag is None:
        return ""
    return " ".join(tag.get_text(" ", strip=True).split())
