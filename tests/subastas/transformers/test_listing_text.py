"""
Unit tests for listing text heuristics
"""
import pytest

from src.subastas.models.auction import AuctionStatus
from src.subastas.transformers.listing_text import (
    Geography,
    classify_status,
    extract_identifier,
    parse_geography,
    resolve_link,
)


class TestClassifyStatus:
    """Tests for status classification"""

    @pytest.mark.parametrize("line,expected", [
        ("Estado: Celebrándose - [Conclusión prevista: 20/11/2026]", AuctionStatus.LIVE),
        ("Estado: Próxima apertura - [Fecha de inicio: 01/12/2026]", AuctionStatus.UPCOMING),
        ("Estado: Concluida en Portal de Subastas", AuctionStatus.CLOSED),
        ("Estado: Cancelada", AuctionStatus.CLOSED),
        ("Estado: Suspendida", AuctionStatus.CLOSED),
        ("Estado: Pendiente de algo nuevo", AuctionStatus.UNKNOWN),
        ("", AuctionStatus.UNKNOWN),
        (None, AuctionStatus.UNKNOWN),
    ])
    def test_classification(self, line, expected):
        assert classify_status(line) == expected


class TestParseGeography:
    """Tests for the trailing '<city> (<province>)' parser"""

    def test_city_and_province(self):
        geo = parse_geography("MADRID (MADRID)")
        assert geo.city == "MADRID"
        assert geo.province == "MADRID"

    def test_address_prefix_is_not_part_of_city(self):
        geo = parse_geography("Vivienda en Calle Mayor 5, Alcalá de Henares (Madrid)")
        assert geo.city == "Alcalá de Henares"
        assert geo.province == "Madrid"

    def test_apostrophe_and_hyphen(self):
        geo = parse_geography("L'HOSPITALET DE LLOBREGAT (BARCELONA)")
        assert geo.city == "L'HOSPITALET DE LLOBREGAT"
        assert geo.province == "BARCELONA"

        geo = parse_geography("VITORIA-GASTEIZ (ARABA/ÁLAVA)")
        assert geo.city == "VITORIA-GASTEIZ"
        assert geo.province == "ARABA/ÁLAVA"

    def test_no_parenthetical_leaves_fields_empty(self):
        geo = parse_geography("Vivienda sin municipio indicado")
        assert geo == Geography()
        assert geo.is_empty()

    def test_parenthetical_not_trailing(self):
        assert parse_geography("SEVILLA (SEVILLA) - 3 lotes").is_empty()

    def test_none_input(self):
        assert parse_geography(None).is_empty()


class TestIdentifier:
    """Tests for detail-link identifier extraction"""

    def test_idsub_parameter(self):
        url = "https://subastas.boe.es/detalleSubasta.php?idSub=SUB-JA-2024-123456&idBus=_abc"
        assert extract_identifier(url) == "SUB-JA-2024-123456"

    def test_id_fallback(self):
        assert extract_identifier("https://subastas.boe.es/detalle.php?id=SUB-AT-2023-9") == "SUB-AT-2023-9"

    def test_idsub_preferred_over_id(self):
        assert extract_identifier("https://x/detalle.php?id=OLD&idSub=NEW") == "NEW"

    @pytest.mark.parametrize("url", [None, "", "https://subastas.boe.es/detalleSubasta.php", "https://x/?idSub="])
    def test_missing_identifier(self, url):
        assert extract_identifier(url) is None

    def test_resolve_relative_link(self):
        url = resolve_link("./detalleSubasta.php?idSub=SUB-1", "https://subastas.boe.es")
        assert url == "https://subastas.boe.es/detalleSubasta.php?idSub=SUB-1"

    def test_resolve_absolute_link(self):
        url = resolve_link("https://subastas.boe.es/detalleSubasta.php?idSub=SUB-1", "https://other.example")
        assert url == "https://subastas.boe.es/detalleSubasta.php?idSub=SUB-1"
