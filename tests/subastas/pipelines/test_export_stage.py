"""
Tests for the snapshot export stage
"""
import json
import pytest
from datetime import datetime

from sqlalchemy import create_engine, update
from sqlalchemy.orm import sessionmaker

from src.subastas.db.base import Base
from src.subastas.db.models import AuctionRecord
from src.subastas.db.repository import AuctionRepository
from src.subastas.pipelines.export import SnapshotExporter, write_json_atomic


@pytest.fixture(scope="function")
def test_db():
    """In-memory database with three auctions of known age."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    Session = sessionmaker(bind=engine)
    session = Session()

    repo = AuctionRepository()
    for day, auction_id in enumerate(("SUB-OLD", "SUB-MID", "SUB-NEW"), start=1):
        repo.upsert_listing(session, {
            "id": auction_id,
            "title": f"SUBASTA {auction_id}",
            "url": f"https://subastas.boe.es/detalleSubasta.php?idSub={auction_id}",
            "status": "LIVE",
            "location_city": "CÁDIZ",
            "location_province": "CÁDIZ",
        })
        session.execute(
            update(AuctionRecord)
            .where(AuctionRecord.id == auction_id)
            .values(last_updated=datetime(2024, 1, day))
        )
    repo.apply_coordinates(session, "SUB-NEW", 36.52, -6.29)
    session.commit()

    yield session

    session.close()
    Base.metadata.drop_all(engine)


def _read(path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


class TestSnapshotExporter:
    """Tests for SnapshotExporter.run"""

    def test_writes_newest_first(self, test_db, tmp_path):
        path = tmp_path / "api" / "auctions.json"

        result = SnapshotExporter(test_db, output_path=path).run(limit=1000)

        assert result.count == 3
        assert result.path == path
        assert [r["id"] for r in _read(path)] == ["SUB-NEW", "SUB-MID", "SUB-OLD"]

    def test_limit(self, test_db, tmp_path):
        path = tmp_path / "auctions.json"

        SnapshotExporter(test_db, output_path=path).run(limit=2)

        assert [r["id"] for r in _read(path)] == ["SUB-NEW", "SUB-MID"]

    def test_zero_limit_writes_empty_snapshot(self, test_db, tmp_path):
        path = tmp_path / "auctions.json"

        result = SnapshotExporter(test_db, output_path=path).run(limit=0)

        assert result.count == 0
        assert _read(path) == []

    def test_record_shape(self, test_db, tmp_path):
        path = tmp_path / "auctions.json"

        SnapshotExporter(test_db, output_path=path).run()

        record = _read(path)[0]
        assert record["lat"] == 36.52
        assert record["lng"] == -6.29
        assert record["location_city"] == "CÁDIZ"
        assert record["geocode_status"] == "done"
        assert record["enrichment_status"] == "pending"
        assert record["identifier"] is None
        assert record["last_updated"].startswith("2024-01-03")

    def test_non_ascii_written_verbatim(self, test_db, tmp_path):
        path = tmp_path / "auctions.json"

        SnapshotExporter(test_db, output_path=path).run()

        assert "CÁDIZ" in path.read_text(encoding="utf-8")

    def test_replaces_previous_snapshot(self, test_db, tmp_path):
        path = tmp_path / "auctions.json"
        path.write_text('[{"id": "STALE"}]', encoding="utf-8")

        SnapshotExporter(test_db, output_path=path).run()

        assert "STALE" not in {r["id"] for r in _read(path)}
        assert [p.name for p in tmp_path.iterdir()] == ["auctions.json"]

    def test_empty_store(self, tmp_path):
        engine = create_engine("sqlite:///:memory:")
        Base.metadata.create_all(engine)
        session = sessionmaker(bind=engine)()
        path = tmp_path / "auctions.json"

        result = SnapshotExporter(session, output_path=path).run()

        assert result.count == 0
        assert _read(path) == []
        session.close()


class TestWriteJsonAtomic:
    """Tests for write_json_atomic"""

    def test_failed_write_keeps_previous_file(self, tmp_path):
        path = tmp_path / "auctions.json"
        path.write_text("[]", encoding="utf-8")

        with pytest.raises(TypeError):
            write_json_atomic(path, [{"bad": object()}])

        assert path.read_text(encoding="utf-8") == "[]"
        assert [p.name for p in tmp_path.iterdir()] == ["auctions.json"]
