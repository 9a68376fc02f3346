"""
SQLAlchemy ORM Models

The record store: one `auctions` row per BOE auction identifier, plus the
append-only `scraper_logs` audit trail written by each discovery run.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    String, Integer, Float, DateTime, Text, CheckConstraint, Index
)
from sqlalchemy.orm import Mapped, mapped_column

from src.subastas.db.base import Base, CreatedAtMixin, utcnow
from src.subastas.models.auction import AuctionStatus, WorkStatus


class AuctionRecord(Base, CreatedAtMixin):
    """
    Auction listing table.

    Created by discovery, updated in place by enrichment and geocoding,
    never deleted. Closed auctions stay as history.
    """
    __tablename__ = "auctions"

    # Primary key
    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        comment="Source-assigned auction identifier (idSub)"
    )

    # Discovery fields
    title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Detail line from the search results"
    )
    court: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(16),
        default=AuctionStatus.UNKNOWN.value,
        nullable=False,
        comment="LIVE, UPCOMING, CLOSED or UNKNOWN"
    )
    amount: Mapped[Optional[float]] = mapped_column(
        Float,
        nullable=True,
        comment="Auction value (EUR)"
    )
    url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    location_city: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    location_province: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Geocoding fields, written together
    lat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    lng: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    # Enrichment fields, written together
    identifier: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        comment="Auction reference from the general view; NULL until enriched"
    )
    auction_type: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    claim_amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    appraisal_amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    min_bid: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    deposit_amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    catastral_ref: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    full_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    postal_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    visitable: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    possession_status: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Work state
    enrichment_status: Mapped[str] = mapped_column(
        String(16),
        default=WorkStatus.PENDING.value,
        nullable=False,
        comment="pending, done or skipped"
    )
    geocode_status: Mapped[str] = mapped_column(
        String(16),
        default=WorkStatus.PENDING.value,
        nullable=False,
        comment="pending, done or skipped"
    )

    # Refreshed by discovery only
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        comment="Last time discovery saw this listing"
    )

    __table_args__ = (
        CheckConstraint(
            "(lat IS NULL AND lng IS NULL) OR (lat IS NOT NULL AND lng IS NOT NULL)",
            name="check_coordinates_paired"
        ),
        CheckConstraint(
            "lat IS NULL OR (lat >= -90 AND lat <= 90)",
            name="check_lat_range"
        ),
        CheckConstraint(
            "lng IS NULL OR (lng >= -180 AND lng <= 180)",
            name="check_lng_range"
        ),
        Index("idx_auctions_last_updated", "last_updated"),
        Index("idx_auctions_enrichment_status", "enrichment_status"),
        Index("idx_auctions_geocode_status", "geocode_status"),
        Index("idx_auctions_province", "location_province"),
    )

    def has_coordinates(self) -> bool:
        """Check if the auction has been geocoded."""
        return self.lat is not None and self.lng is not None

    def __repr__(self) -> str:
        return f"<AuctionRecord(id={self.id}, status={self.status}, city={self.location_city})>"


class ScraperLog(Base):
    """Discovery run audit trail (append-only)."""
    __tablename__ = "scraper_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        comment="Run completion time"
    )
    message: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Human-readable run summary"
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="SUCCESS or PARTIAL"
    )

    __table_args__ = (
        Index("idx_scraper_logs_timestamp", "timestamp"),
    )

    def __repr__(self) -> str:
        return f"<ScraperLog(id={self.id}, status={self.status}, message={self.message})>"
