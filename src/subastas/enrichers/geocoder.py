"""
Nominatim Geocoder

Resolves a free-text place query to a single coordinate pair using the
OpenStreetMap Nominatim search API, restricted to Spain.
"""
from typing import Optional

import requests
from pydantic import ValidationError

from config.settings import settings
from src.subastas.models.auction import GeocodeMatch
from src.subastas.utils.logger import get_logger

logger = get_logger(__name__)


class NominatimGeocoder:
    """
    Client for the Nominatim `/search` endpoint.

    Nominatim's usage policy requires an identifying User-Agent and at most
    one request per second; pacing is left to the caller.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        country_codes: Optional[str] = None,
        user_agent: Optional[str] = None,
    ):
        """
        Initialize the geocoder.

        Args:
            base_url: Override the search endpoint (for testing)
            country_codes: Comma-separated ISO country codes to restrict to
            user_agent: Override the User-Agent header
        """
        self.base_url = base_url or settings.nominatim_url
        self.country_codes = country_codes or settings.geocode_country_codes
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": user_agent or settings.geocoder_user_agent})
        logger.info("geocoder_initialized", base_url=self.base_url, country_codes=self.country_codes)

    def geocode(self, query: str) -> Optional[GeocodeMatch]:
        """
        Look up the best match for `query`.

        Args:
            query: Free-text place, e.g. "SEVILLA, SEVILLA, Spain"

        Returns:
            GeocodeMatch, or None when the provider has no result

        Raises:
            requests.RequestException: On network or HTTP errors
            ValueError: If the provider payload cannot be read
        """
        params = {
            "q": query,
            "format": "json",
            "limit": 1,
            "countrycodes": self.country_codes,
        }
        response = self.session.get(self.base_url, params=params, timeout=settings.http_timeout_seconds)
        response.raise_for_status()
        results = response.json()

        if not isinstance(results, list):
            raise ValueError(f"unexpected geocoder payload: {results!r}")
        if not results:
            return None

        try:
            best = results[0]
            return GeocodeMatch(
                lat=float(best["lat"]),
                lng=float(best["lon"]),
                display_name=best.get("display_name"),
            )
        except (KeyError, TypeError, AttributeError, ValidationError) as e:
            raise ValueError(f"unexpected geocoder payload: {e}") from e
