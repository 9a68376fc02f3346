"""
Database Package

Record store models, connection management, and repositories.
"""
from src.subastas.db.base import Base
from src.subastas.db.session import (
    engine,
    SessionLocal,
    get_db_session,
    close_connections,
    create_all_tables,
)
from src.subastas.db.models import (
    AuctionRecord,
    ScraperLog,
)
from src.subastas.db.repository import (
    BaseRepository,
    AuctionRepository,
    ScraperLogRepository,
)

__all__ = [
    # Base
    "Base",
    # Session management
    "engine",
    "SessionLocal",
    "get_db_session",
    "close_connections",
    "create_all_tables",
    # Models
    "AuctionRecord",
    "ScraperLog",
    # Repositories
    "BaseRepository",
    "AuctionRepository",
    "ScraperLogRepository",
]
