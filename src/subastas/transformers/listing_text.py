"""
Listing Text Extractors

Heuristics applied to the loosely structured text of a BOE search-result
block: status classification, "<city> (<province>)" geography, and the
auction identifier carried by the detail link.
"""
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple
from urllib.parse import parse_qs, urljoin, urlparse

from src.subastas.models.auction import AuctionStatus

# Ordered (tokens, status) rules, first match wins
STATUS_RULES: List[Tuple[Tuple[str, ...], AuctionStatus]] = [
    (("Celebrándose",), AuctionStatus.LIVE),
    (("Próxima apertura",), AuctionStatus.UPCOMING),
    (("Concluida", "Cancelada", "Suspendida"), AuctionStatus.CLOSED),
]

_LETTERS = "A-ZÁÉÍÓÚÜÑÀÈÒÏÇ"
_CITY_PROVINCE = re.compile(
    rf"([{_LETTERS}'\s\-]+)\s+\(([{_LETTERS}\s\-/]+)\)$",
    re.IGNORECASE,
)

IDENTIFIER_PARAMS = ("idSub", "id")


@dataclass
class Geography:
    """City/province pair parsed from a detail line; empty when unmatched."""
    city: str = ""
    province: str = ""

    def is_empty(self) -> bool:
        return not (self.city or self.province)


def classify_status(status_line: Optional[str]) -> AuctionStatus:
    """
    Map a listing's status line to an AuctionStatus.

    Unrecognized phrasing degrades to UNKNOWN.
    """
    text = status_line or ""
    for tokens, status in STATUS_RULES:
        if any(token in text for token in tokens):
            return status
    return AuctionStatus.UNKNOWN


def parse_geography(detail_line: Optional[str]) -> Geography:
    """
    Parse a trailing "<city> (<province>)" from the detail line.

    Examples:
        >>> parse_geography("MADRID (MADRID)")
        Geography(city='MADRID', province='MADRID')
        >>> parse_geography("Vivienda sin municipio").is_empty()
        True
    """
    match = _CITY_PROVINCE.search((detail_line or "").strip())
    if not match:
        return Geography()
    return Geography(city=match.group(1).strip(), province=match.group(2).strip())


def resolve_link(href: str, base_url: str) -> str:
    """Resolve a listing link against the portal base URL."""
    return urljoin(base_url.rstrip("/") + "/", href)


def extract_identifier(url: Optional[str]) -> Optional[str]:
    """
    Pull the auction identifier from a detail link.

    The portal uses `idSub`; older links carry `id`.
    """
    if not url:
        return None

    query = parse_qs(urlparse(url).query)
    for param in IDENTIFIER_PARAMS:
        values = query.get(param)
        if values and values[0].strip():
            return values[0].strip()
    return None
