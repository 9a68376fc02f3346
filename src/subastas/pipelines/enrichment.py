"""
Detail Enrichment Stage

Fetches the detail views of auctions that have not been enriched yet and
writes the extracted field group back to the store. A failure leaves the
auction pending for the next run.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from config.settings import settings
from src.subastas.db.repository import AuctionRepository
from src.subastas.scrapers.detail_scraper import BoeDetailScraper
from src.subastas.utils.logger import get_logger
from src.subastas.utils.rate_limiter import RateLimiter

logger = get_logger(__name__)


@dataclass
class EnrichmentResult:
    """Totals for one enrichment run."""
    selected: int = 0
    enriched: int = 0
    failed: int = 0


class DetailEnrichment:
    """Enriches a bounded batch of pending auctions, one at a time."""

    def __init__(
        self,
        session: Session,
        scraper: BoeDetailScraper | None = None,
        repository: AuctionRepository | None = None,
        limiter: RateLimiter | None = None,
    ):
        self.session = session
        self.scraper = scraper or BoeDetailScraper()
        self.repository = repository or AuctionRepository()
        self.limiter = limiter or RateLimiter(settings.enrichment_delay_seconds, name="enrichment")

    def run(self, limit: Optional[int] = None) -> EnrichmentResult:
        """
        Enrich up to `limit` pending auctions.

        Args:
            limit: Batch size (default: settings.enrichment_batch_size)

        Returns:
            EnrichmentResult with run totals
        """
        if limit is None:
            limit = settings.enrichment_batch_size
        pending = self.repository.select_pending_enrichment(self.session, limit)
        result = EnrichmentResult(selected=len(pending))
        logger.info("enrichment_started", pending=len(pending), limit=limit)

        targets = [(record.id, record.url) for record in pending]
        for auction_id, url in targets:
            self.limiter.wait()
            try:
                if not url:
                    raise ValueError("auction has no detail URL")

                details = self.scraper.fetch_details(url)
                self.repository.apply_enrichment(self.session, auction_id, details.to_dict())
                self.session.commit()

                result.enriched += 1
                logger.info("auction_enriched", auction_id=auction_id, identifier=details.identifier)
            except Exception as e:
                self.session.rollback()
                result.failed += 1
                logger.error(
                    "auction_enrichment_failed",
                    auction_id=auction_id,
                    error=str(e),
                    error_type=type(e).__name__
                )

        logger.info(
            "enrichment_complete",
            selected=result.selected,
            enriched=result.enriched,
            failed=result.failed,
        )
        return result
