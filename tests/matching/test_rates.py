"""Tests for the principal-weighted average financing rate."""

import pytest

from conftest import make_financing
from plazo_app.matching.rates import (
    FinancingRateAggregator,
    calculate_avg_rate_by_currency,
    normalize_currency,
)


class TestCalculateAvgRateByCurrency:
    """Test suite for currency rate aggregation."""

    def test_weighted_by_principal(self) -> None:
        """Larger principals weigh more in the average."""
        txs = [
            make_financing(principal=1000, rate=80),
            make_financing(principal=2000, rate=90),
        ]

        rates = calculate_avg_rate_by_currency(txs)

        assert rates["ARS"] == pytest.approx(86.6666667)

    def test_currency_codes_are_normalized(self) -> None:
        """Lower-case and mixed-case codes aggregate together."""
        txs = [
            make_financing(principal=500, rate=10, currency="usd"),
            make_financing(principal=1500, rate=11.6, currency="USD"),
        ]

        rates = calculate_avg_rate_by_currency(txs)

        assert list(rates) == ["USD"]
        assert rates["USD"] == pytest.approx(11.2)

    def test_blank_currency_uses_default(self) -> None:
        """Transactions without a currency fall back to the default."""
        rates = calculate_avg_rate_by_currency([make_financing(principal=100, rate=40, currency="")])

        assert rates == {"ARS": 40.0}

    def test_currencies_are_independent(self) -> None:
        """Each currency has its own average."""
        txs = [
            make_financing(principal=1000, rate=30, currency="ARS"),
            make_financing(principal=1000, rate=2, currency="USD"),
        ]

        rates = calculate_avg_rate_by_currency(txs)

        assert rates == {"ARS": 30.0, "USD": 2.0}

    def test_zero_principal_gives_zero_rate(self) -> None:
        """A currency whose principal sums to zero has rate 0."""
        rates = calculate_avg_rate_by_currency([make_financing(principal=0, rate=35)])

        assert rates == {"ARS": 0.0}

    @pytest.mark.parametrize("transactions", [None, []])
    def test_empty_input(self, transactions) -> None:
        """No transactions produce an empty mapping."""
        assert calculate_avg_rate_by_currency(transactions) == {}


class TestFinancingRateAggregator:
    """Test suite for the aggregator wrapper."""

    def test_default_currency(self) -> None:
        """The configured default currency is applied to blank codes."""
        aggregator = FinancingRateAggregator(default_currency="USD")

        assert aggregator.aggregate([make_financing(principal=1, rate=5, currency=None)]) == {"USD": 5.0}


class TestNormalizeCurrency:
    """Test suite for currency code normalization."""

    def test_upper_cases(self) -> None:
        assert normalize_currency(" ars ") == "ARS"

    def test_missing(self) -> None:
        assert normalize_currency(None) == "ARS"
        assert normalize_currency("", default="USD") == "USD"
