"""
Statistics Router

Status probe: record count, latest discovery log and queue sizes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from src.subastas.api.dependencies import get_db
from src.subastas.api.schemas import ScraperLogOut, StatsResponse
from src.subastas.db.repository import AuctionRepository, ScraperLogRepository

router = APIRouter(prefix="/api", tags=["statistics"])


@router.get("/stats", response_model=StatsResponse)
def get_stats(db: Session = Depends(get_db)):
    """
    Get the auction count and the most recent discovery run.

    Args:
        db: Database session

    Returns:
        Store statistics
    """
    auctions = AuctionRepository()
    last_log = ScraperLogRepository().latest(db)
    return StatsResponse(
        count=auctions.count(db),
        last_log=ScraperLogOut.model_validate(last_log) if last_log else None,
        work_state=auctions.count_by_status(db),
    )
