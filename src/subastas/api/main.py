"""
FastAPI Main Application

Query surface over the auction record store.
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from sqlalchemy import text

from src.subastas.api.dependencies import get_db
from src.subastas.api.schemas import HealthCheck
from src.subastas.api.routers import auctions, stats
from src.subastas.db.session import close_connections, create_all_tables
from src.subastas.utils.logger import setup_logging

API_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    create_all_tables()
    yield
    close_connections()


app = FastAPI(
    title="Subastas BOE API",
    description="Read access to BOE real-estate auction listings",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# The viewer is served from a different origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(auctions.router)
app.include_router(stats.router)


@app.get("/health", response_model=HealthCheck, tags=["health"])
def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint.

    Returns:
        Health status with database connectivity check
    """
    try:
        db.execute(text("SELECT 1"))
        database_status = "connected"
    except Exception as e:
        database_status = f"error: {str(e)}"

    return HealthCheck(
        status="healthy" if database_status == "connected" else "degraded",
        version=API_VERSION,
        database=database_status,
        timestamp=datetime.now(timezone.utc),
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.subastas.api.main:app",
        host="0.0.0.0",
        port=3001,
        reload=True,
    )
