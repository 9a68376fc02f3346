"""
BOE Detail Scraper

Fetches the general-information (ver=1) and assets (ver=3) views of an
auction's detail page and extracts the structured enrichment fields.
"""
from typing import Dict, Optional
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

import requests
from bs4 import BeautifulSoup

from config.settings import settings
from src.subastas.models.auction import EnrichmentDetails
from src.subastas.transformers.html_tables import get_table_value
from src.subastas.transformers.money import parse_money
from src.subastas.utils.logger import get_logger

logger = get_logger(__name__)

GENERAL_VIEW = "1"
ASSETS_VIEW = "3"

# field -> (header label, is_money)
GENERAL_LABELS: Dict[str, tuple] = {
    "identifier": ("Identificador", False),
    "auction_type": ("Tipo de subasta", False),
    "claim_amount": ("Cantidad reclamada", True),
    "appraisal_amount": ("Tasación", True),
    "min_bid": ("Puja mínima", True),
    "deposit_amount": ("Importe del depósito", True),
}

ASSET_LABELS: Dict[str, tuple] = {
    "catastral_ref": ("Referencia catastral", False),
    "full_address": ("Dirección", False),
    "postal_code": ("Código Postal", False),
    "visitable": ("Visitable", False),
    "possession_status": ("Situación posesoria", False),
}


def view_url(url: str, view: str) -> str:
    """Return `url` with the `ver` query parameter forced to `view`."""
    parts = urlparse(url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != "ver"]
    query.append(("ver", view))
    return urlunparse(parts._replace(query=urlencode(query)))


def extract_fields(soup: BeautifulSoup, labels: Dict[str, tuple]) -> dict:
    """
    Label-keyed extraction for one view.

    Missing labels yield "" for text fields and None for amounts.
    """
    fields = {}
    for name, (label, is_money) in labels.items():
        raw = get_table_value(soup, label)
        fields[name] = parse_money(raw) if is_money else raw
    return fields


class BoeDetailScraper:
    """
    Scraper for BOE auction detail pages.

    Fetches two views of the same auction and merges them into a single
    EnrichmentDetails.
    """

    def __init__(self, user_agent: Optional[str] = None):
        """
        Initialize the detail scraper.

        Args:
            user_agent: Override the User-Agent header
        """
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": user_agent or settings.detail_user_agent})
        logger.info("detail_scraper_initialized")

    def fetch_view(self, url: str, view: str) -> BeautifulSoup:
        """
        GET one view of a detail page.

        Raises:
            requests.RequestException: On network or HTTP errors
        """
        response = self.session.get(view_url(url, view), timeout=settings.http_timeout_seconds)
        response.raise_for_status()
        return BeautifulSoup(response.text, "lxml")

    def fetch_details(self, url: str) -> EnrichmentDetails:
        """
        Fetch and parse both views of an auction.

        Args:
            url: Canonical detail URL stored for the auction

        Returns:
            Merged EnrichmentDetails

        Raises:
            requests.RequestException: If either view cannot be fetched
        """
        general = extract_fields(self.fetch_view(url, GENERAL_VIEW), GENERAL_LABELS)
        assets = extract_fields(self.fetch_view(url, ASSETS_VIEW), ASSET_LABELS)
        return self.build_details(general, assets)

    @staticmethod
    def build_details(general: dict, assets: dict) -> EnrichmentDetails:
        """Merge both views; empty text fields become None, except identifier."""
        merged = {**general, **assets}
        for name, value in merged.items():
            if name != "identifier" and value == "":
                merged[name] = None
        return EnrichmentDetails(**merged)
