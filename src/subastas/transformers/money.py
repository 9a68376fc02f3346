"""
Currency Parsing

Normalizes Spanish-formatted currency strings ("1.234,56 €") and pulls the
auction value out of a search-result block.
"""
import re
from typing import Callable, List, Optional

from src.subastas.utils.logger import get_logger

logger = get_logger(__name__)

_NON_AMOUNT_CHARS = re.compile(r"[^\d,]")

_LABELED_VALUE = re.compile(r"Valor\s+(?:de\s+)?subasta:?\s+([\d.]+(?:,\d+)?)", re.IGNORECASE)
_DECIMAL_CURRENCY = re.compile(r"([\d.]+,\d{2})\s*€")
_BARE_CURRENCY = re.compile(r"([\d.]+)\s*€")


def parse_money(value: Optional[str]) -> Optional[float]:
    """
    Parse a Spanish currency string into a float.

    Thousands separator is ".", decimal separator is ",". Anything that does
    not parse, and a zero amount, yields None.

    Examples:
        >>> parse_money("1.234,56 €")
        1234.56
        >>> parse_money("90.000 €")
        90000.0
        >>> parse_money("Sin tasación") is None
        True
    """
    if not value:
        return None

    clean = _NON_AMOUNT_CHARS.sub("", value).replace(",", ".", 1)
    try:
        amount = float(clean)
    except ValueError:
        logger.debug("money_parse_failed", raw=value)
        return None

    return amount or None


def labeled_auction_value(status_line: str, detail_line: str) -> Optional[str]:
    """'Valor subasta 123.456,78' in the status line."""
    match = _LABELED_VALUE.search(status_line or "")
    return match.group(1) if match else None


def decimal_currency(status_line: str, detail_line: str) -> Optional[str]:
    """'123.456,78 €' in the detail line."""
    match = _DECIMAL_CURRENCY.search(detail_line or "")
    return match.group(1) if match else None


def bare_currency(status_line: str, detail_line: str) -> Optional[str]:
    """'123.456 €' in the detail line."""
    match = _BARE_CURRENCY.search(detail_line or "")
    return match.group(1) if match else None


AmountExtractor = Callable[[str, str], Optional[str]]

# Tried in order, first match wins
AMOUNT_EXTRACTORS: List[AmountExtractor] = [
    labeled_auction_value,
    decimal_currency,
    bare_currency,
]


def extract_amount(
    status_line: str,
    detail_line: str,
    extractors: Optional[List[AmountExtractor]] = None,
) -> Optional[float]:
    """
    Extract the auction amount from a listing's status and detail lines.

    Args:
        status_line: First text block of the listing
        detail_line: Second text block of the listing
        extractors: Override the default extractor order

    Returns:
        Parsed amount, or None when no extractor matches
    """
    for extractor in extractors or AMOUNT_EXTRACTORS:
        raw = extractor(status_line, detail_line)
        if raw is not None:
            return parse_money(raw)
    return None
