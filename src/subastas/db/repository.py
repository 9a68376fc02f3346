"""
Repository Pattern for Data Access

The record store contract used by every pipeline stage. Methods take the
caller's session and flush; committing is the caller's decision, so each
stage controls how much partial progress becomes durable.
"""
from typing import List, Optional, Dict, Any, Iterable, Type, TypeVar

from sqlalchemy import select, update, func, desc, or_
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from src.subastas.db.base import utcnow
from src.subastas.db.models import AuctionRecord, ScraperLog
from src.subastas.models.auction import WorkStatus
from src.subastas.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar('T')

# Columns discovery is allowed to write
LISTING_FIELDS = (
    "title",
    "description",
    "court",
    "status",
    "amount",
    "url",
    "source",
    "location_city",
    "location_province",
)

ENRICHMENT_FIELDS = (
    "identifier",
    "auction_type",
    "claim_amount",
    "appraisal_amount",
    "min_bid",
    "deposit_amount",
    "catastral_ref",
    "full_address",
    "postal_code",
    "visitable",
    "possession_status",
)


class BaseRepository:
    """
    Base repository with common read operations.
    """

    def __init__(self, model: Type[T]):
        """
        Initialize repository with model class.

        Args:
            model: SQLAlchemy model class
        """
        self.model = model
        logger.debug("repository_initialized", model=model.__name__)

    def get_by_id(self, session: Session, id_value: Any) -> Optional[T]:
        """
        Get single record by primary key.

        Args:
            session: Database session
            id_value: Primary key value

        Returns:
            Model instance or None
        """
        result = session.get(self.model, id_value)
        logger.debug(
            "repository_get_by_id",
            model=self.model.__name__,
            id=id_value,
            found=result is not None
        )
        return result

    def count(self, session: Session) -> int:
        """
        Count total records.

        Args:
            session: Database session

        Returns:
            Total count
        """
        count = session.scalar(select(func.count()).select_from(self.model))
        logger.debug("repository_count", model=self.model.__name__, count=count)
        return count


def _dialect_insert(session: Session):
    """INSERT construct supporting ON CONFLICT for the bound dialect."""
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise NotImplementedError(f"upsert is not supported for dialect '{dialect}'")


class AuctionRepository(BaseRepository):
    """Repository for AuctionRecord with the pipeline's work-queue queries."""

    def __init__(self):
        super().__init__(AuctionRecord)

    def upsert_listing(self, session: Session, fields: Dict[str, Any]) -> None:
        """
        Insert a new auction or merge discovery fields into an existing one.

        Only the supplied discovery fields are overwritten; enrichment and
        geocoding columns are never touched. `last_updated` is refreshed on
        every call.

        Args:
            session: Database session
            fields: Listing fields (must include id)

        Raises:
            ValueError: If id is missing
        """
        auction_id = fields.get("id")
        if not auction_id:
            raise ValueError("id is required for upsert")

        values = {k: v for k, v in fields.items() if k in LISTING_FIELDS}
        now = utcnow()

        insert = _dialect_insert(session)
        stmt = insert(AuctionRecord).values(
            id=auction_id,
            created_at=now,
            last_updated=now,
            enrichment_status=WorkStatus.PENDING.value,
            geocode_status=WorkStatus.PENDING.value,
            **values,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["id"],
            set_={**values, "last_updated": now},
        )

        session.execute(stmt)
        session.flush()
        logger.debug("auction_upserted", auction_id=auction_id)

    def select_pending_enrichment(self, session: Session, limit: int) -> List[AuctionRecord]:
        """
        Auctions that have not been enriched yet.

        Args:
            session: Database session
            limit: Maximum number of records to return

        Returns:
            Pending records, oldest first
        """
        query = (
            select(AuctionRecord)
            .where(AuctionRecord.enrichment_status == WorkStatus.PENDING.value)
            .order_by(AuctionRecord.created_at, AuctionRecord.id)
            .limit(limit)
        )
        result = session.execute(query).scalars().all()
        logger.debug("pending_enrichment_selected", count=len(result), limit=limit)
        return list(result)

    def select_pending_geocode(self, session: Session, include_skipped: bool = True) -> List[AuctionRecord]:
        """
        Auctions without coordinates.

        Args:
            session: Database session
            include_skipped: Also return auctions already tried without a match

        Returns:
            Records with lat IS NULL
        """
        query = select(AuctionRecord).where(AuctionRecord.lat.is_(None))
        if not include_skipped:
            query = query.where(AuctionRecord.geocode_status != WorkStatus.SKIPPED.value)
        query = query.order_by(AuctionRecord.created_at, AuctionRecord.id)

        result = session.execute(query).scalars().all()
        logger.debug("pending_geocode_selected", count=len(result), include_skipped=include_skipped)
        return list(result)

    def apply_enrichment(self, session: Session, auction_id: str, fields: Dict[str, Any]) -> bool:
        """
        Write the enrichment field group and mark the auction enriched.

        `last_updated` is left unchanged.

        Returns:
            True if the auction exists
        """
        values = {k: fields.get(k) for k in ENRICHMENT_FIELDS}
        if values["identifier"] is None:
            values["identifier"] = ""

        stmt = (
            update(AuctionRecord)
            .where(AuctionRecord.id == auction_id)
            .values(**values, enrichment_status=WorkStatus.DONE.value)
            .execution_options(synchronize_session="fetch")
        )
        result = session.execute(stmt)
        session.flush()

        found = result.rowcount > 0
        if not found:
            logger.warning("apply_enrichment_not_found", auction_id=auction_id)
        return found

    def apply_coordinates(self, session: Session, auction_id: str, lat: float, lng: float) -> bool:
        """
        Write both coordinates and mark the auction geocoded.

        Raises:
            ValueError: If either coordinate is None

        Returns:
            True if the auction exists
        """
        if lat is None or lng is None:
            raise ValueError("lat and lng must be written together")

        stmt = (
            update(AuctionRecord)
            .where(AuctionRecord.id == auction_id)
            .values(lat=float(lat), lng=float(lng), geocode_status=WorkStatus.DONE.value)
            .execution_options(synchronize_session="fetch")
        )
        result = session.execute(stmt)
        session.flush()

        found = result.rowcount > 0
        if not found:
            logger.warning("apply_coordinates_not_found", auction_id=auction_id)
        return found

    def mark_geocode_skipped(self, session: Session, auction_id: str) -> None:
        """Record a geocoding attempt that produced no coordinates."""
        stmt = (
            update(AuctionRecord)
            .where(AuctionRecord.id == auction_id, AuctionRecord.lat.is_(None))
            .values(geocode_status=WorkStatus.SKIPPED.value)
            .execution_options(synchronize_session="fetch")
        )
        session.execute(stmt)
        session.flush()

    def reset_enrichment(self, session: Session, ids: Optional[Iterable[str]] = None) -> int:
        """
        Put auctions back on the enrichment queue.

        Args:
            session: Database session
            ids: Auction ids to reset (None for all)

        Returns:
            Number of rows reset
        """
        stmt = update(AuctionRecord).values(
            **{field: None for field in ENRICHMENT_FIELDS},
            enrichment_status=WorkStatus.PENDING.value,
        )
        if ids is not None:
            stmt = stmt.where(AuctionRecord.id.in_(list(ids)))

        result = session.execute(stmt.execution_options(synchronize_session="fetch"))
        session.flush()
        logger.info("enrichment_reset", count=result.rowcount)
        return result.rowcount

    def reset_geocode(self, session: Session, ids: Optional[Iterable[str]] = None) -> int:
        """
        Put auctions back on the geocoding queue.

        Args:
            session: Database session
            ids: Auction ids to reset (None for all)

        Returns:
            Number of rows reset
        """
        stmt = update(AuctionRecord).values(
            lat=None,
            lng=None,
            geocode_status=WorkStatus.PENDING.value,
        )
        if ids is not None:
            stmt = stmt.where(AuctionRecord.id.in_(list(ids)))

        result = session.execute(stmt.execution_options(synchronize_session="fetch"))
        session.flush()
        logger.info("geocode_reset", count=result.rowcount)
        return result.rowcount

    def snapshot(self, session: Session, limit: Optional[int] = None) -> List[AuctionRecord]:
        """
        Most recently discovered auctions, newest first.

        Args:
            session: Database session
            limit: Maximum number of records (None for all)

        Returns:
            List of AuctionRecord instances
        """
        query = select(AuctionRecord).order_by(
            desc(AuctionRecord.last_updated), AuctionRecord.id
        )
        if limit is not None:
            query = query.limit(limit)

        result = session.execute(query).scalars().all()
        logger.debug("auction_snapshot", count=len(result), limit=limit)
        return list(result)

    def list_all(self, session: Session) -> List[AuctionRecord]:
        """Every stored auction, newest first."""
        return self.snapshot(session)

    def count_by_status(self, session: Session) -> Dict[str, int]:
        """Auction count per enrichment/geocode work state."""
        counts: Dict[str, int] = {}
        for column in (AuctionRecord.enrichment_status, AuctionRecord.geocode_status):
            rows = session.execute(
                select(column, func.count()).group_by(column)
            ).all()
            for value, total in rows:
                counts[f"{column.key}_{value}"] = total
        return counts

    def count_incomplete(self, session: Session) -> int:
        """Auctions still missing enrichment or coordinates."""
        return session.scalar(
            select(func.count()).select_from(AuctionRecord).where(
                or_(
                    AuctionRecord.enrichment_status != WorkStatus.DONE.value,
                    AuctionRecord.lat.is_(None),
                )
            )
        )


class ScraperLogRepository(BaseRepository):
    """Repository for the append-only ScraperLog table."""

    def __init__(self):
        super().__init__(ScraperLog)

    def append_log(self, session: Session, message: str, status: str) -> ScraperLog:
        """
        Append one run summary.

        Args:
            session: Database session
            message: Human-readable summary
            status: Outcome tag (SUCCESS, PARTIAL)

        Returns:
            Created ScraperLog instance
        """
        entry = ScraperLog(message=message, status=status, timestamp=utcnow())
        session.add(entry)
        session.flush()
        logger.info("scraper_log_appended", log_id=entry.id, status=status)
        return entry

    def latest(self, session: Session) -> Optional[ScraperLog]:
        """Most recent log entry, or None."""
        query = select(ScraperLog).order_by(desc(ScraperLog.timestamp), desc(ScraperLog.id)).limit(1)
        return session.execute(query).scalars().first()
