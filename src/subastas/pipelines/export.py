"""
Snapshot Export Stage

Publishes the most recently discovered auctions as a single JSON array for
the static viewer. The file is replaced whole, never patched.
"""
from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from sqlalchemy.orm import Session

from config.settings import settings
from src.subastas.db.repository import AuctionRepository
from src.subastas.models.auction import AuctionSnapshotRecord
from src.subastas.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ExportResult:
    path: Path
    count: int


def serialize_records(records) -> List[dict]:
    """JSON-ready dicts for a list of AuctionRecord instances."""
    return [
        AuctionSnapshotRecord.model_validate(record).model_dump(mode="json")
        for record in records
    ]


def write_json_atomic(path: Path, payload) -> None:
    """
    Write `payload` as JSON to `path`, replacing any previous file in one step.

    The document is written to a temporary file in the same directory and
    moved over the target, so readers never see a partial file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        os.replace(tmp_name, path)
    except Exception:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


class SnapshotExporter:
    """Serializes the newest slice of the store to the viewer's JSON file."""

    def __init__(
        self,
        session: Session,
        repository: AuctionRepository | None = None,
        output_path: Optional[Path] = None,
    ):
        self.session = session
        self.repository = repository or AuctionRepository()
        self.output_path = Path(output_path or settings.export_path)

    def run(self, limit: Optional[int] = None) -> ExportResult:
        """
        Export up to `limit` auctions ordered by last_updated, newest first.

        Args:
            limit: Maximum number of auctions (default: settings.export_limit)

        Returns:
            ExportResult with the written path and record count
        """
        if limit is None:
            limit = settings.export_limit
        records = self.repository.snapshot(self.session, limit=limit)
        payload = serialize_records(records)

        write_json_atomic(self.output_path, payload)

        logger.info(
            "snapshot_exported",
            path=str(self.output_path),
            count=len(payload),
            geocoded=sum(1 for r in records if r.has_coordinates()),
        )
        return ExportResult(path=self.output_path, count=len(payload))
