"""Principal-weighted average financing rate per currency."""

from collections.abc import Iterable
from typing import Optional

from ..data.models import FinancingTransaction
from ..utils.numeric import safe_divide


def normalize_currency(currency: Optional[str], default: str = "ARS") -> str:
    """Upper-cased currency code, ``default`` when missing or blank."""
    code = (currency or "").strip()
    return (code or default).upper()


def calculate_avg_rate_by_currency(
    transactions: Optional[Iterable[FinancingTransaction]],
    default_currency: str = "ARS",
) -> dict[str, float]:
    """
    Weighted average TNA per currency.

    avg[c] = sum(principal_i * rate_i) / sum(principal_i) over transactions in c

    Args:
        transactions: Financing transactions of one trading day, may be None
        default_currency: Currency assumed for transactions without one

    Returns:
        Currency code -> average rate in percent; 0.0 for a currency whose
        principal sums to zero, empty mapping for no input
    """
    if not transactions:
        return {}

    weighted: dict[str, float] = {}
    principal: dict[str, float] = {}

    for tx in transactions:
        code = normalize_currency(tx.currency, default_currency)
        weighted[code] = weighted.get(code, 0.0) + tx.principal * tx.rate
        principal[code] = principal.get(code, 0.0) + tx.principal

    return {code: safe_divide(weighted[code], principal[code]) for code in weighted}


class FinancingRateAggregator:
    """Global financing-cost estimate, computed once per trading day."""

    def __init__(self, default_currency: str = "ARS"):
        self.default_currency = default_currency

    def aggregate(self, transactions: Optional[Iterable[FinancingTransaction]]) -> dict[str, float]:
        return calculate_avg_rate_by_currency(transactions, self.default_currency)
