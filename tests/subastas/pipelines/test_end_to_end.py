"""
End-to-end run of all four stages against canned HTTP responses
"""
import json
import pytest
from unittest.mock import MagicMock, Mock

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from src.subastas.db.base import Base
from src.subastas.db.models import AuctionRecord  # noqa: F401
from src.subastas.db.repository import AuctionRepository, ScraperLogRepository
from src.subastas.enrichers.geocoder import NominatimGeocoder
from src.subastas.pipelines.discovery import ListingDiscovery
from src.subastas.pipelines.enrichment import DetailEnrichment
from src.subastas.pipelines.export import SnapshotExporter
from src.subastas.pipelines.geocoding import AuctionGeocoding
from src.subastas.scrapers.detail_scraper import BoeDetailScraper
from src.subastas.scrapers.listing_scraper import BoeListingScraper
from src.subastas.utils.rate_limiter import RateLimiter


SEARCH_HTML = """
<html><body><ul>
  <li class="resultado-busqueda">
    <h3>SUBASTA SUB-JA-2024-777777</h3>
    <h4>JUZGADO DE PRIMERA INSTANCIA Nº 5 DE SEVILLA</h4>
    <p>Estado: Celebrándose - [Conclusión prevista: 20/11/2026 a las 18:00:00]</p>
    <p>SEVILLA (SEVILLA)</p>
    <a href="./detalleSubasta.php?idSub=SUB-JA-2024-777777&amp;idBus=_xyz">Más...</a>
  </li>
</ul></body></html>
"""

GENERAL_HTML = """
<html><body><table>
  <tr><th>Identificador</th><td>SUB-JA-2024-777777</td></tr>
  <tr><th>Tipo de subasta</th><td>JUDICIAL EN VÍA DE APREMIO</td></tr>
  <tr><th>Tasación</th><td>210.500,00 €</td></tr>
  <tr><th>Puja mínima</th><td>105.250,00 €</td></tr>
</table></body></html>
"""

ASSETS_HTML = """
<html><body><table>
  <tr><th>Dirección</th><td>AVENIDA DE LA CONSTITUCIÓN 1</td></tr>
  <tr><th>Código Postal</th><td>41001</td></tr>
  <tr><th>Situación posesoria</th><td>Ocupado</td></tr>
</table></body></html>
"""


@pytest.fixture(scope="function")
def test_db():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    Session = sessionmaker(bind=engine)
    session = Session()

    yield session

    session.close()
    Base.metadata.drop_all(engine)


@pytest.fixture
def listing_scraper():
    scraper = BoeListingScraper(base_url="https://subastas.boe.es")
    scraper.session = MagicMock()
    scraper.session.post.return_value = Mock(text=SEARCH_HTML, status_code=200)
    return scraper


@pytest.fixture
def detail_scraper():
    scraper = BoeDetailScraper()
    scraper.session = MagicMock()
    scraper.session.get.side_effect = lambda url, timeout=None: Mock(
        text=GENERAL_HTML if "ver=1" in url else ASSETS_HTML
    )
    return scraper


@pytest.fixture
def geocoder():
    geocoder = NominatimGeocoder()
    geocoder.session = MagicMock()
    response = Mock()
    response.json.return_value = [{"lat": "37.3828", "lon": "-5.9732", "display_name": "Sevilla"}]
    geocoder.session.get.return_value = response
    return geocoder


class TestFullPipeline:
    """Discovery -> Enrichment -> Geocoding -> Export"""

    def test_single_auction_flows_through_every_stage(
        self, test_db, listing_scraper, detail_scraper, geocoder, tmp_path
    ):
        ListingDiscovery(test_db, scraper=listing_scraper, limiter=RateLimiter(0)).run(["41"])
        DetailEnrichment(test_db, scraper=detail_scraper, limiter=RateLimiter(0)).run(limit=10)
        AuctionGeocoding(test_db, geocoder=geocoder, limiter=RateLimiter(0)).run()
        path = tmp_path / "auctions.json"
        SnapshotExporter(test_db, output_path=path).run(limit=1000)

        assert geocoder.session.get.call_args.kwargs["params"]["q"] == "SEVILLA, SEVILLA, Spain"

        with open(path, encoding="utf-8") as f:
            records = json.load(f)

        assert len(records) == 1
        record = records[0]
        assert record["id"] == "SUB-JA-2024-777777"
        assert record["status"] == "LIVE"
        assert record["location_city"] == "SEVILLA"
        assert record["location_province"] == "SEVILLA"
        assert record["url"] == "https://subastas.boe.es/detalleSubasta.php?idSub=SUB-JA-2024-777777&idBus=_xyz"
        assert record["identifier"] == "SUB-JA-2024-777777"
        assert record["appraisal_amount"] == 210500.0
        assert record["min_bid"] == 105250.0
        assert record["full_address"] == "AVENIDA DE LA CONSTITUCIÓN 1"
        assert record["possession_status"] == "Ocupado"
        assert record["lat"] == pytest.approx(37.3828)
        assert record["lng"] == pytest.approx(-5.9732)

        log = ScraperLogRepository().latest(test_db)
        assert log.status == "SUCCESS"
        assert log.message == "Scraped 1 items from all provinces"
        assert AuctionRepository().count_incomplete(test_db) == 0

    def test_second_run_does_no_duplicate_work(
        self, test_db, listing_scraper, detail_scraper, geocoder
    ):
        for _ in range(2):
            ListingDiscovery(test_db, scraper=listing_scraper, limiter=RateLimiter(0)).run(["41"])
            DetailEnrichment(test_db, scraper=detail_scraper, limiter=RateLimiter(0)).run(limit=10)
            AuctionGeocoding(test_db, geocoder=geocoder, limiter=RateLimiter(0)).run()

        assert AuctionRepository().count(test_db) == 1
        assert detail_scraper.session.get.call_count == 2
        assert geocoder.session.get.call_count == 1
        assert ScraperLogRepository().count(test_db) == 2
