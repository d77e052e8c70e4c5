"""Tests for aggregation helpers."""

import math

import pytest

from conftest import make_operation
from plazo_app.errors import PnLCalculationError
from plazo_app.utils.numeric import (
    ensure_finite,
    safe_divide,
    total_notional,
    weighted_average_price,
    weighted_commission_per_unit,
)


class TestSafeDivide:
    """Test zero-denominator guards."""

    def test_zero_denominator(self):
        assert safe_divide(10.0, 0) == 0.0

    def test_regular_division(self):
        assert safe_divide(10.0, 4.0) == 2.5


class TestWeightedAggregates:
    """Test quantity-weighted aggregates."""

    def test_weighted_average_price(self):
        ops = [
            make_operation(quantity=100.0, price=1.0),
            make_operation(quantity=300.0, price=2.0),
        ]
        assert weighted_average_price(ops) == pytest.approx(1.75)
        assert total_notional(ops) == pytest.approx(700.0)

    def test_empty(self):
        assert weighted_average_price([]) == 0.0
        assert weighted_commission_per_unit([]) == 0.0

    def test_commission_per_unit(self):
        ops = [
            make_operation(quantity=100.0, commission=1.0),
            make_operation(quantity=100.0, commission=3.0),
        ]
        assert weighted_commission_per_unit(ops) == pytest.approx(0.02)


class TestEnsureFinite:
    """Test non-finite guards."""

    def test_finite_passthrough(self):
        assert ensure_finite(1.5, "trade_pnl") == 1.5

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_raises(self, value):
        with pytest.raises(PnLCalculationError) as exc_info:
            ensure_finite(value, "trade_pnl", {"instrument": "S31O5"})

        assert exc_info.value.metric_name == "trade_pnl"
        assert exc_info.value.calculation_input == {"instrument": "S31O5"}
