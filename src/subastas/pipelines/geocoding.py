"""
Geocoding Stage

Builds a place query for every auction without coordinates and resolves it
through Nominatim. Degenerate queries and empty answers are recorded as
skipped; provider errors trigger a longer cooldown before the next lookup.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests
from sqlalchemy.orm import Session

from config.settings import settings
from src.subastas.db.repository import AuctionRepository
from src.subastas.enrichers.geocoder import NominatimGeocoder
from src.subastas.transformers.place_query import build_geocode_query
from src.subastas.utils.logger import get_logger
from src.subastas.utils.rate_limiter import RateLimiter

logger = get_logger(__name__)


@dataclass
class GeocodeResult:
    """Totals for one geocoding run."""
    selected: int = 0
    geocoded: int = 0
    skipped: int = 0
    no_match: int = 0
    failed: int = 0


class AuctionGeocoding:
    """Resolves coordinates for pending auctions, one lookup at a time."""

    def __init__(
        self,
        session: Session,
        geocoder: NominatimGeocoder | None = None,
        repository: AuctionRepository | None = None,
        limiter: RateLimiter | None = None,
        min_query_length: Optional[int] = None,
        error_cooldown: Optional[float] = None,
    ):
        self.session = session
        self.geocoder = geocoder or NominatimGeocoder()
        self.repository = repository or AuctionRepository()
        self.limiter = limiter or RateLimiter(settings.geocode_delay_seconds, name="geocoder")
        self.min_query_length = (
            settings.geocode_min_query_length if min_query_length is None else min_query_length
        )
        self.error_cooldown = (
            settings.geocode_error_cooldown_seconds if error_cooldown is None else error_cooldown
        )

    def run(self, include_skipped: Optional[bool] = None) -> GeocodeResult:
        """
        Geocode every auction that still lacks coordinates.

        Args:
            include_skipped: Retry auctions already tried without a match
                (default: settings.geocode_retry_skipped)

        Returns:
            GeocodeResult with run totals
        """
        if include_skipped is None:
            include_skipped = settings.geocode_retry_skipped

        pending = self.repository.select_pending_geocode(self.session, include_skipped=include_skipped)
        result = GeocodeResult(selected=len(pending))
        logger.info("geocoding_started", pending=len(pending))

        targets = [
            (r.id, r.location_city, r.location_province, r.description) for r in pending
        ]
        for auction_id, city, province, description in targets:
            query = build_geocode_query(city, province, description, settings.geocode_country_name)

            if len(query) < self.min_query_length:
                logger.info("geocode_query_too_short", auction_id=auction_id, query=query)
                self.repository.mark_geocode_skipped(self.session, auction_id)
                self.session.commit()
                result.skipped += 1
                continue

            self.limiter.wait()
            try:
                match = self.geocoder.geocode(query)
            except (requests.RequestException, ValueError) as e:
                logger.error(
                    "geocode_request_failed",
                    auction_id=auction_id,
                    query=query,
                    error=str(e),
                    error_type=type(e).__name__
                )
                result.failed += 1
                self.limiter.cooldown(self.error_cooldown)
                continue

            if match is None:
                logger.info("geocode_no_results", auction_id=auction_id, query=query)
                self.repository.mark_geocode_skipped(self.session, auction_id)
                self.session.commit()
                result.no_match += 1
                continue

            self.repository.apply_coordinates(self.session, auction_id, match.lat, match.lng)
            self.session.commit()
            result.geocoded += 1
            logger.info("auction_geocoded", auction_id=auction_id, query=query, lat=match.lat, lng=match.lng)

        logger.info(
            "geocoding_complete",
            selected=result.selected,
            geocoded=result.geocoded,
            skipped=result.skipped,
            no_match=result.no_match,
            failed=result.failed,
        )
        return result
