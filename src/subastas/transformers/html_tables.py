"""
Label-keyed table lookup for BOE detail pages.

Detail views render each field as a `<th>label</th><td>value</td>` row.
"""
from bs4 import BeautifulSoup


def _text(tag) -> str:
    return " ".join(tag.get_text(" ", strip=True).split())


def get_table_value(soup: BeautifulSoup, label: str) -> str:
    """
    Return the value cell next to the first header containing `label`.

    Args:
        soup: Parsed detail page
        label: Substring expected in the header cell

    Returns:
        Value text, or "" when no header matches
    """
    for header in soup.find_all("th"):
        if label in _text(header):
            cell = header.find_next_sibling("td")
            return _text(cell) if cell is not None else ""
    return ""
