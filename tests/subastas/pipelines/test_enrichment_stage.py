"""
Tests for the detail enrichment stage
"""
import pytest
from unittest.mock import MagicMock, Mock

import requests
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from src.subastas.db.base import Base
from src.subastas.db.models import AuctionRecord  # noqa: F401
from src.subastas.db.repository import AuctionRepository
from src.subastas.models.auction import EnrichmentDetails
from src.subastas.pipelines.enrichment import DetailEnrichment
from src.subastas.scrapers.detail_scraper import BoeDetailScraper
from src.subastas.utils.rate_limiter import RateLimiter


@pytest.fixture(scope="function")
def test_db():
    """In-memory database seeded with three pending auctions."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    Session = sessionmaker(bind=engine)
    session = Session()

    repo = AuctionRepository()
    for auction_id in ("SUB-1", "SUB-2", "SUB-3"):
        repo.upsert_listing(session, {
            "id": auction_id,
            "title": f"SUBASTA {auction_id}",
            "url": f"https://subastas.boe.es/detalleSubasta.php?idSub={auction_id}",
            "location_city": "SEVILLA",
            "location_province": "SEVILLA",
        })
    session.commit()

    yield session

    session.close()
    Base.metadata.drop_all(engine)


def _details(auction_id):
    return EnrichmentDetails(
        identifier=auction_id,
        auction_type="JUDICIAL EN VÍA DE APREMIO",
        appraisal_amount=150000.0,
        min_bid=None,
        postal_code="41010",
    )


def _scraper(fail_for=()):
    scraper = MagicMock(spec=BoeDetailScraper)

    def fetch(url):
        auction_id = url.rsplit("=", 1)[-1]
        if auction_id in fail_for:
            raise requests.ConnectionError("connection reset")
        return _details(auction_id)

    scraper.fetch_details.side_effect = fetch
    return scraper


class TestDetailEnrichment:
    """Tests for DetailEnrichment.run"""

    def test_all_pending_enriched(self, test_db):
        result = DetailEnrichment(test_db, scraper=_scraper(), limiter=RateLimiter(0)).run(limit=10)

        assert result.selected == 3
        assert result.enriched == 3
        assert result.failed == 0
        record = AuctionRepository().get_by_id(test_db, "SUB-2")
        assert record.identifier == "SUB-2"
        assert record.appraisal_amount == 150000.0
        assert record.postal_code == "41010"
        assert record.enrichment_status == "done"

    def test_batch_limit(self, test_db):
        scraper = _scraper()

        result = DetailEnrichment(test_db, scraper=scraper, limiter=RateLimiter(0)).run(limit=2)

        assert result.selected == 2
        assert scraper.fetch_details.call_count == 2
        assert len(AuctionRepository().select_pending_enrichment(test_db, limit=10)) == 1

    def test_failure_leaves_auction_pending(self, test_db):
        """A fetch failure is logged and the auction is retried next run"""
        result = DetailEnrichment(
            test_db, scraper=_scraper(fail_for={"SUB-2"}), limiter=RateLimiter(0)
        ).run(limit=10)

        assert result.enriched == 2
        assert result.failed == 1
        pending = AuctionRepository().select_pending_enrichment(test_db, limit=10)
        assert [r.id for r in pending] == ["SUB-2"]
        assert AuctionRepository().get_by_id(test_db, "SUB-2").identifier is None

    def test_missing_url_counts_as_failure(self, test_db):
        AuctionRepository().upsert_listing(test_db, {"id": "SUB-4", "url": None})
        test_db.commit()
        scraper = _scraper()

        result = DetailEnrichment(test_db, scraper=scraper, limiter=RateLimiter(0)).run(limit=10)

        assert result.failed == 1
        assert scraper.fetch_details.call_count == 3

    def test_nothing_pending(self, test_db):
        DetailEnrichment(test_db, scraper=_scraper(), limiter=RateLimiter(0)).run(limit=10)
        scraper = _scraper()

        result = DetailEnrichment(test_db, scraper=scraper, limiter=RateLimiter(0)).run(limit=10)

        assert result.selected == 0
        scraper.fetch_details.assert_not_called()

    def test_limiter_paces_each_auction(self, test_db):
        limiter = Mock(spec=RateLimiter)

        DetailEnrichment(test_db, scraper=_scraper(), limiter=limiter).run(limit=10)

        assert limiter.wait.call_count == 3

    def test_zero_limit_enriches_nothing(self, test_db):
        scraper = _scraper()

        result = DetailEnrichment(test_db, scraper=scraper, limiter=RateLimiter(0)).run(limit=0)

        assert result.selected == 0
        scraper.fetch_details.assert_not_called()
