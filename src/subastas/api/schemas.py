"""
Pydantic Schemas for API Request/Response Models

These schemas define the JSON structure for API endpoints. Auction records
use the same schema as the published snapshot.
"""
from typing import Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel

from src.subastas.models.auction import AuctionSnapshotRecord

AuctionOut = AuctionSnapshotRecord


class ScraperLogOut(BaseModel):
    """One discovery run summary."""
    id: int
    timestamp: datetime
    message: Optional[str] = None
    status: str

    class Config:
        from_attributes = True


class StatsResponse(BaseModel):
    """Record count and latest discovery run."""
    count: int
    last_log: Optional[ScraperLogOut] = None
    work_state: Dict[str, int] = {}


class ScrapeResponse(BaseModel):
    """Result of a discovery run triggered over the API."""
    message: str
    items: int
    failed_partitions: List[str] = []


class HealthCheck(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str = "0.1.0"
    database: str = "connected"
    timestamp: datetime
