"""
Auctions Router

Read access to the record store and a manual discovery trigger.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from src.subastas.api.dependencies import get_db, get_discovery
from src.subastas.api.schemas import AuctionOut, ScrapeResponse
from src.subastas.db.repository import AuctionRepository
from src.subastas.pipelines.discovery import ListingDiscovery
from src.subastas.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["auctions"])


@router.get("/auctions", response_model=List[AuctionOut])
def list_auctions(db: Session = Depends(get_db)):
    """
    List every stored auction, most recently discovered first.

    Args:
        db: Database session

    Returns:
        All auction records
    """
    return AuctionRepository().list_all(db)


@router.post("/scrape", response_model=ScrapeResponse)
def trigger_scrape(discovery: ListingDiscovery = Depends(get_discovery)):
    """
    Run a full discovery pass synchronously.

    Raises:
        HTTPException: 500 if the run fails outside the per-province handling
    """
    try:
        result = discovery.run()
    except Exception as e:
        logger.error("api_scrape_failed", error=str(e), error_type=type(e).__name__)
        raise HTTPException(status_code=500, detail=str(e))

    return ScrapeResponse(
        message="Scraping triggered successfully",
        items=result.items,
        failed_partitions=result.failed_partitions,
    )
