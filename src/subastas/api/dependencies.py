"""
FastAPI Dependencies

Provides dependency injection for database sessions and the discovery stage.
"""
from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from src.subastas.db.session import SessionLocal
from src.subastas.pipelines.discovery import ListingDiscovery


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields:
        SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_discovery(db: Session = Depends(get_db)) -> ListingDiscovery:
    """
    Discovery stage bound to the request's session.

    Returns:
        ListingDiscovery using the live BOE scraper
    """
    return ListingDiscovery(db)
