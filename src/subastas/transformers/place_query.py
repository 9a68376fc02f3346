"""
Geocoding Query Construction

Builds a free-text place query for an auction from its parsed city and
province, falling back to the free-text description. The city field often
carries legal boilerplate ("100% DEL PLENO DOMINIO DE VIVIENDA EN ...")
because the listing parser takes every leading letter run before the
province parenthetical.
"""
import re
from typing import Callable, List, Optional

_LETTERS = "A-ZÁÉÍÓÚÜÑÀÈÒÏÇ"

BOILERPLATE_PREFIXES = [
    # Ownership share: "50%", "100 %", "33,33%"
    re.compile(r"^\d+(?:[.,]\d+)?\s*%\s*"),
    # Ownership type: "DEL PLENO DOMINIO DE", "NUDA PROPIEDAD DE", "USUFRUCTO SOBRE"
    re.compile(
        r"^(?:(?:DE|DEL)\s+)?(?:LA\s+)?"
        r"(?:PLENO\s+DOMINIO|NUDA\s+PROPIEDAD|USUFRUCTO|DERECHO\s+DE\s+SUPERFICIE)"
        r"(?:\s+(?:DE|DEL|SOBRE)(?:\s+(?:LA|EL|UNA|UN))?)?\s+",
        re.IGNORECASE,
    ),
    # Property type: "VIVIENDA EN", "FINCA URBANA SITA EN", "PLAZA DE GARAJE EN"
    re.compile(
        r"^(?:(?:UNA|UN)\s+)?"
        r"(?:VIVIENDA(?:\s+UNIFAMILIAR)?|FINCA(?:\s+(?:URBANA|R[UÚ]STICA))?|"
        r"LOCAL(?:\s+COMERCIAL)?|(?:PLAZA\s+DE\s+)?GARAJE|TRASTERO|SOLAR|PARCELA|"
        r"NAVE(?:\s+INDUSTRIAL)?|TERRENO|PISO|CASA|EDIFICIO)"
        r"(?:\s+(?:SITA|SITO|SITUADA|SITUADO|UBICADA|UBICADO))?\s+EN\s+",
        re.IGNORECASE,
    ),
]

_DESCRIPTION_TAIL = re.compile(rf"([{_LETTERS}\s]+),\s+([{_LETTERS}\s]+)\s*$", re.IGNORECASE)


def clean_city(city: Optional[str]) -> str:
    """
    Strip known legal-ownership and property-type prefixes from a city field.

    Prefixes are removed repeatedly, so stacked boilerplate collapses.

    Examples:
        >>> clean_city("DEL PLENO DOMINIO DE VIVIENDA EN ALCALA DE HENARES")
        'ALCALA DE HENARES'
    """
    text = " ".join((city or "").split())
    changed = True
    while changed and text:
        changed = False
        for pattern in BOILERPLATE_PREFIXES:
            stripped = pattern.sub("", text, count=1)
            if stripped != text:
                text = stripped.strip()
                changed = True
    return text


def structured_query(
    city: Optional[str],
    province: Optional[str],
    description: Optional[str],
    country: str,
) -> Optional[str]:
    """City + province, the preferred query."""
    clean = clean_city(city)
    province = (province or "").strip()
    if clean and province:
        return f"{clean}, {province}, {country}"
    return None


def description_query(
    city: Optional[str],
    province: Optional[str],
    description: Optional[str],
    country: str,
) -> Optional[str]:
    """Trailing "<place>, <region>" of the description line."""
    match = _DESCRIPTION_TAIL.search(description or "")
    if not match:
        return None
    place, region = match.group(1).strip(), match.group(2).strip()
    if not (place and region):
        return None
    return f"{place}, {region}, {country}"


QueryBuilder = Callable[[Optional[str], Optional[str], Optional[str], str], Optional[str]]

# Tried in order, first non-empty query wins
QUERY_BUILDERS: List[QueryBuilder] = [
    structured_query,
    description_query,
]


def build_geocode_query(
    city: Optional[str],
    province: Optional[str],
    description: Optional[str] = None,
    country: str = "Spain",
) -> str:
    """
    Build the best-effort place query for an auction.

    Returns:
        Query string, or "" when no builder produced one
    """
    for builder in QUERY_BUILDERS:
        query = builder(city, province, description, country)
        if query:
            return query
    return ""
