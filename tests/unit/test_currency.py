"""
Unit tests for currency conversion.
"""

import pytest

from domain.currency import (
    convert_currency,
    format_currency_value,
    get_currency_options,
    get_currency_symbol,
    get_rate,
)


def test_same_currency_returns_amount_unchanged():
    assert convert_currency(123.45, "USD", "USD") == 123.45
    assert convert_currency(50, "PKR", "PKR") == 50


def test_convert_eur_to_usd():
    assert convert_currency(100, "EUR", "USD") == pytest.approx(108.0)


def test_convert_usd_to_pkr():
    assert convert_currency(36, "USD", "PKR") == pytest.approx(10000.0)


def test_convert_between_non_base_currencies():
    # GBP -> EUR goes through the USD rates
    assert convert_currency(108, "GBP", "EUR") == pytest.approx(108 * 1.27 / 1.08)


def test_unknown_currency_uses_rate_one():
    assert get_rate("XYZ") == 1.0
    assert get_rate("") == 1.0
    assert convert_currency(10, "XYZ", "USD") == 10


def test_lowercase_codes_accepted():
    assert get_rate("eur") == get_rate("EUR")


def test_format_currency_value():
    assert format_currency_value(1234.5, "EUR") == "€1,234.50"
    assert format_currency_value(0, "USD") == "$0.00"
    assert format_currency_value(None, "GBP") == "£0.00"


def test_unknown_symbol_defaults_to_dollar():
    assert get_currency_symbol("ABC") == "$"


def test_currency_options():
    assert get_currency_options() == ["USD", "EUR", "GBP", "PKR"]
