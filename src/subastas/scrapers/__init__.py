"""
Scrapers Package

Scrapers for the BOE auction portal: the province search results and the
per-auction detail views.
"""

from .listing_scraper import BoeListingScraper, PartitionResult
from .detail_scraper import BoeDetailScraper

__all__ = [
    "BoeListingScraper",
    "PartitionResult",
    "BoeDetailScraper",
]
