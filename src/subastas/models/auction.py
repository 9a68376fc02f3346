"""
Auction Data Models

Pydantic models for the data each pipeline stage produces before it is
written to the store.
"""
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class AuctionStatus(str, Enum):
    """Auction lifecycle as shown in the search results."""
    LIVE = "LIVE"
    UPCOMING = "UPCOMING"
    CLOSED = "CLOSED"
    UNKNOWN = "UNKNOWN"


class WorkStatus(str, Enum):
    """Per-stage processing state of a stored auction."""
    PENDING = "pending"
    DONE = "done"
    SKIPPED = "skipped"


class ListingSummary(BaseModel):
    """
    One search-result block from the BOE portal.

    Attributes:
        id: Source-assigned auction identifier (idSub)
        title: Listing heading
        court: Issuing court or authority
        status: Classified auction status
        description: Raw detail line, kept for display and geocoding fallback
        amount: Auction value in euros
        url: Absolute detail-page link
        source: Origin tag
        location_city: City parsed from the detail line
        location_province: Province parsed from the detail line
    """

    id: str = Field(..., min_length=1, description="Auction identifier")
    title: Optional[str] = Field(None, description="Listing title")
    court: Optional[str] = Field(None, description="Court or authority")
    status: AuctionStatus = Field(AuctionStatus.UNKNOWN, description="Auction status")
    description: Optional[str] = Field(None, description="Detail line")
    amount: Optional[float] = Field(None, description="Auction value (EUR)", ge=0)
    url: str = Field(..., description="Detail page URL")
    source: str = Field("BOE", description="Origin tag")
    location_city: Optional[str] = Field(None, description="City")
    location_province: Optional[str] = Field(None, description="Province")

    def to_dict(self) -> dict:
        """Column values for the store upsert."""
        data = self.model_dump()
        data["status"] = self.status.value
        return data

    class Config:
        """Pydantic model configuration."""
        str_strip_whitespace = True


class EnrichmentDetails(BaseModel):
    """Structured fields scraped from the general (ver=1) and asset (ver=3) views."""

    # ver=1
    identifier: str = Field("", description="Auction reference, e.g. SUB-JA-2024-123456")
    auction_type: Optional[str] = Field(None, description="Tipo de subasta")
    claim_amount: Optional[float] = Field(None, description="Cantidad reclamada (EUR)")
    appraisal_amount: Optional[float] = Field(None, description="Tasación (EUR)")
    min_bid: Optional[float] = Field(None, description="Puja mínima (EUR)")
    deposit_amount: Optional[float] = Field(None, description="Importe del depósito (EUR)")

    # ver=3
    catastral_ref: Optional[str] = Field(None, description="Referencia catastral")
    full_address: Optional[str] = Field(None, description="Dirección")
    postal_code: Optional[str] = Field(None, description="Código postal")
    visitable: Optional[str] = Field(None, description="Visitable")
    possession_status: Optional[str] = Field(None, description="Situación posesoria")

    def to_dict(self) -> dict:
        return self.model_dump()


class GeocodeMatch(BaseModel):
    """Best match returned by the geocoding provider."""

    lat: float = Field(..., description="WGS84 latitude", ge=-90, le=90)
    lng: float = Field(..., description="WGS84 longitude", ge=-180, le=180)
    display_name: Optional[str] = Field(None, description="Provider's label for the match")


class AuctionSnapshotRecord(BaseModel):
    """
    Full auction record as published to the viewer and returned by the API.

    Built from an AuctionRecord ORM instance.
    """

    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    court: Optional[str] = None
    status: str = AuctionStatus.UNKNOWN.value
    amount: Optional[float] = None
    url: Optional[str] = None
    source: Optional[str] = None
    location_city: Optional[str] = None
    location_province: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    identifier: Optional[str] = None
    auction_type: Optional[str] = None
    claim_amount: Optional[float] = None
    appraisal_amount: Optional[float] = None
    min_bid: Optional[float] = None
    deposit_amount: Optional[float] = None
    catastral_ref: Optional[str] = None
    full_address: Optional[str] = None
    postal_code: Optional[str] = None
    visitable: Optional[str] = None
    possession_status: Optional[str] = None
    enrichment_status: str = WorkStatus.PENDING.value
    geocode_status: str = WorkStatus.PENDING.value
    last_updated: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
