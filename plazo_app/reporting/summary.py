"""
Table and summary helpers for arbitrage output.

Amounts are formatted in the es-AR convention: dot thousands separator,
comma decimal separator.
"""

from collections.abc import Iterable
from typing import Any, Optional

from ..models.results import InstrumentTenorGroup, PatternResult

ALL_INSTRUMENTS = "all"

CURRENCY_SYMBOLS = {
    "ARS": "$",
    "USD": "US$",
}


def filter_groups_by_instrument(groups: Iterable[InstrumentTenorGroup],
                                instrument: Optional[str]) -> list[InstrumentTenorGroup]:
    """Groups of ``instrument``; every group for None or ``"all"``."""
    groups = list(groups)
    if not instrument or instrument == ALL_INSTRUMENTS:
        return groups
    return [g for g in groups if g.instrument == instrument]


def unique_instruments(groups: Iterable[InstrumentTenorGroup]) -> list[str]:
    return sorted({g.instrument for g in groups})


def groups_summary(groups: Iterable[InstrumentTenorGroup]) -> dict[str, int]:
    """Counts of groups, instruments, operations and financing transactions."""
    groups = list(groups)
    return {
        "total_groups": len(groups),
        "total_instruments": len(unique_instruments(groups)),
        "total_operations": sum(g.operation_count for g in groups),
        "total_financing": sum(len(g.financing) for g in groups),
    }


def result_to_row(result: PatternResult) -> dict[str, Any]:
    """Flat row for tabular display."""
    return {
        "id": f"{result.instrument}-{result.tenor}-{result.pattern.value}",
        "instrument": result.instrument,
        "tenor": result.tenor,
        "pattern": result.pattern.value,
        "status": result.status.value,
        "matched_quantity": result.matched_quantity,
        "average_price": result.average_price,
        "price_a": result.price_a,
        "price_b": result.price_b,
        "trade_pnl": result.trade_pnl,
        "financing_pnl": result.financing_pnl,
        "total_pnl": result.total_pnl,
        "principal": result.principal,
        "accrued_interest": result.accrued_interest,
        "financing_fees": result.financing_fees,
        "operations": len(result.operations),
        "financing": len(result.financing),
    }


def results_to_rows(results: Iterable[PatternResult]) -> list[dict[str, Any]]:
    """Rows for matched results only."""
    return [result_to_row(r) for r in results if r.matched_quantity > 0]


def _es_ar_number(value: float) -> str:
    # 1,234,567.89 -> 1.234.567,89
    formatted = f"{abs(value):,.2f}"
    return formatted.replace(",", "_").replace(".", ",").replace("_", ".")


def format_currency(value: float, currency: str = "ARS") -> str:
    """
    Format an amount for display.

    >>> format_currency(1234.56)
    '$ 1.234,56'
    >>> format_currency(-364236.07)
    '-$ 364.236,07'
    """
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), currency.upper())
    sign = "-" if round(value, 2) < 0 else ""
    return f"{sign}{symbol} {_es_ar_number(value)}"


def format_percentage(value: float) -> str:
    """
    Format a percentage already expressed in percent units.

    >>> format_percentage(86.6666)
    '86,67%'
    """
    sign = "-" if round(value, 2) < 0 else ""
    return f"{sign}{_es_ar_number(value)}%"
