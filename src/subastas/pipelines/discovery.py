"""
Listing Discovery Stage

Searches every province partition on the BOE portal and upserts the listing
summaries into the record store. A failed partition counts as zero items;
the run always finishes with one ScraperLog row.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from config.settings import settings
from src.subastas.db.repository import AuctionRepository, ScraperLogRepository
from src.subastas.scrapers.listing_scraper import BoeListingScraper
from src.subastas.utils.logger import get_logger
from src.subastas.utils.rate_limiter import RateLimiter

logger = get_logger(__name__)

LOG_SUCCESS = "SUCCESS"
LOG_PARTIAL = "PARTIAL"


@dataclass
class DiscoveryResult:
    """Totals for one discovery run."""
    partitions: int = 0
    items: int = 0
    dropped: int = 0
    failed_partitions: List[str] = field(default_factory=list)

    @property
    def outcome(self) -> str:
        return LOG_PARTIAL if self.failed_partitions else LOG_SUCCESS

    @property
    def message(self) -> str:
        message = f"Scraped {self.items} items from all provinces"
        if self.failed_partitions:
            message += f" ({len(self.failed_partitions)} provinces failed)"
        return message


class ListingDiscovery:
    """Runs the province-by-province search and stores every listing found."""

    def __init__(
        self,
        session: Session,
        scraper: BoeListingScraper | None = None,
        repository: AuctionRepository | None = None,
        log_repository: ScraperLogRepository | None = None,
        limiter: RateLimiter | None = None,
    ):
        self.session = session
        self.scraper = scraper or BoeListingScraper()
        self.repository = repository or AuctionRepository()
        self.log_repository = log_repository or ScraperLogRepository()
        self.limiter = limiter or RateLimiter(settings.discovery_delay_seconds, name="discovery")

    def run(self, partitions: Optional[Iterable[str]] = None) -> DiscoveryResult:
        """
        Discover listings for every partition.

        Args:
            partitions: Province codes to search (default: all configured)

        Returns:
            DiscoveryResult with run totals
        """
        partitions = list(partitions or settings.boe_partitions)
        result = DiscoveryResult()
        logger.info("discovery_started", partitions=len(partitions))

        for partition in partitions:
            self.limiter.wait()
            partition_result = self.scraper.fetch_partition(partition)

            result.partitions += 1
            result.dropped += partition_result.dropped
            if partition_result.failed:
                result.failed_partitions.append(partition)

            for listing in partition_result.listings:
                self.repository.upsert_listing(self.session, listing.to_dict())
            self.session.commit()

            result.items += len(partition_result.listings)

        self.log_repository.append_log(self.session, result.message, result.outcome)
        self.session.commit()

        logger.info(
            "discovery_complete",
            items=result.items,
            dropped=result.dropped,
            failed_partitions=result.failed_partitions,
        )
        return result
