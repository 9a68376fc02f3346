"""
Unit tests for currency parsing and amount extraction
"""
import pytest

from src.subastas.transformers.money import (
    AMOUNT_EXTRACTORS,
    bare_currency,
    decimal_currency,
    extract_amount,
    labeled_auction_value,
    parse_money,
)


class TestParseMoney:
    """Tests for parse_money"""

    def test_decimal_amount(self):
        assert parse_money("1.234,56 €") == pytest.approx(1234.56)

    def test_thousands_without_decimals(self):
        assert parse_money("90.000 €") == 90000

    def test_millions(self):
        assert parse_money("1.234.567,89 €") == pytest.approx(1234567.89)

    def test_plain_integer(self):
        assert parse_money("500") == 500

    @pytest.mark.parametrize("raw", ["Sin tasación", "", None, "€", ",", "1,2,3"])
    def test_unparsable_returns_none(self, raw):
        """Unparsable input yields None instead of raising"""
        assert parse_money(raw) is None

    def test_zero_is_treated_as_missing(self):
        assert parse_money("0,00 €") is None


class TestAmountExtractors:
    """Tests for the ordered amount extractors"""

    def test_extractor_order(self):
        assert AMOUNT_EXTRACTORS == [labeled_auction_value, decimal_currency, bare_currency]

    def test_labeled_value_in_status_line(self):
        assert labeled_auction_value("Valor subasta 120.000,00", "") == "120.000,00"
        assert labeled_auction_value("Estado: Celebrándose", "") is None

    def test_decimal_currency(self):
        assert decimal_currency("", "Tasación 98.765,43 €") == "98.765,43"
        assert decimal_currency("", "90.000 €") is None

    def test_bare_currency(self):
        assert bare_currency("", "Importe 90.000 €") == "90.000"
        assert bare_currency("", "Sin importe") is None

    def test_labeled_value_wins(self):
        """The labeled status-line value takes precedence over detail-line amounts"""
        amount = extract_amount("Valor subasta 200.000,00", "Tasación 150.000,00 €")
        assert amount == pytest.approx(200000.0)

    def test_decimal_pattern_before_bare_pattern(self):
        amount = extract_amount("Estado: Celebrándose", "Depósito 12.000 € - Valor 3.500,50 €")
        assert amount == pytest.approx(3500.5)

    def test_bare_pattern_fallback(self):
        assert extract_amount("", "VIVIENDA 90.000 € SEVILLA (SEVILLA)") == 90000

    def test_no_amount(self):
        assert extract_amount("Estado: Próxima apertura", "SEVILLA (SEVILLA)") is None

    def test_custom_extractor_list(self):
        """Callers can supply their own extractor order"""
        amount = extract_amount(
            "Valor subasta 200.000,00",
            "150.000,00 €",
            extractors=[decimal_currency, labeled_auction_value],
        )
        assert amount == pytest.approx(150000.0)
