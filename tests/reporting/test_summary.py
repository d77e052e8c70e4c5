"""Tests for reporting helpers."""

import pytest

from conftest import TRADING_DAY, make_financing, make_operation
from plazo_app.data.models import Side, Venue
from plazo_app.models.results import (
    ArbitragePattern,
    InstrumentTenorGroup,
    PatternResult,
    ResultStatus,
)
from plazo_app.reporting import (
    filter_groups_by_instrument,
    format_currency,
    format_percentage,
    groups_summary,
    result_to_row,
    results_to_rows,
    unique_instruments,
)


def group(instrument, ops=(), financing=()):
    return InstrumentTenorGroup(
        instrument=instrument,
        tenor=3,
        trading_day=TRADING_DAY,
        currency="ARS",
        sell_immediate=tuple(ops),
        financing=tuple(financing),
    )


@pytest.fixture
def groups():
    return [
        group("S31O5", ops=[make_operation(), make_operation()], financing=[make_financing()]),
        group("AL30", ops=[make_operation(Side.SELL, Venue.IMMEDIATE)]),
    ]


class TestGroupHelpers:
    """Test suite for group filtering and summaries."""

    def test_filter_by_instrument(self, groups):
        assert [g.instrument for g in filter_groups_by_instrument(groups, "AL30")] == ["AL30"]

    @pytest.mark.parametrize("instrument", [None, "all"])
    def test_filter_all(self, groups, instrument):
        assert len(filter_groups_by_instrument(groups, instrument)) == 2

    def test_unique_instruments_sorted(self, groups):
        assert unique_instruments(groups) == ["AL30", "S31O5"]

    def test_groups_summary(self, groups):
        assert groups_summary(groups) == {
            "total_groups": 2,
            "total_instruments": 2,
            "total_operations": 3,
            "total_financing": 1,
        }


class TestResultRows:
    """Test suite for table rows."""

    def test_result_to_row(self):
        result = PatternResult(
            instrument="S31O5",
            tenor=3,
            pattern=ArbitragePattern.SELL_IMMEDIATE_BUY_DEFERRED,
            status=ResultStatus.COMPLETE,
            matched_quantity=100.0,
            trade_pnl=1.5,
            financing_pnl=2.0,
            total_pnl=3.5,
        )

        row = result_to_row(result)

        assert row["id"] == "S31O5-3-sell_immediate_buy_deferred"
        assert row["status"] == "complete"
        assert row["total_pnl"] == 3.5

    def test_unmatched_rows_skipped(self):
        unmatched = PatternResult.no_counterparty("AL30", 3, ArbitragePattern.BUY_IMMEDIATE_SELL_DEFERRED)
        matched = PatternResult(
            instrument="S31O5", tenor=3,
            pattern=ArbitragePattern.SELL_IMMEDIATE_BUY_DEFERRED,
            status=ResultStatus.MATCHED_NO_FINANCING,
            matched_quantity=10.0,
        )

        rows = results_to_rows([unmatched, matched])

        assert [r["instrument"] for r in rows] == ["S31O5"]


class TestFormatting:
    """Test suite for es-AR formatting."""

    def test_currency(self):
        assert format_currency(1234.56) == "$ 1.234,56"
        assert format_currency(0) == "$ 0,00"
        assert format_currency(187562.443312) == "$ 187.562,44"

    def test_negative_currency(self):
        assert format_currency(-364236.07447) == "-$ 364.236,07"

    def test_other_currency(self):
        assert format_currency(1000000, "USD") == "US$ 1.000.000,00"

    def test_percentage(self):
        assert format_percentage(86.666666) == "86,67%"
        assert format_percentage(-1.5) == "-1,50%"
