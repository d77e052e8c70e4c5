"""Aggregation helpers over trade legs with zero-denominator guards."""

import math
from collections.abc import Iterable
from typing import Any, Optional

from ..data.models import Operation
from ..errors import PnLCalculationError


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, resolving a zero denominator to 0.0."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


def total_quantity(operations: Iterable[Operation]) -> float:
    return sum(op.quantity for op in operations)


def total_notional(operations: Iterable[Operation]) -> float:
    return sum(op.quantity * op.price for op in operations)


def total_commission(operations: Iterable[Operation]) -> float:
    return sum(op.commission for op in operations)


def weighted_average_price(operations: Iterable[Operation]) -> float:
    """
    Quantity-weighted average price.

    Returns:
        sum(q * p) / sum(q), or 0.0 for no legs or zero quantity
    """
    ops = list(operations)
    return safe_divide(total_notional(ops), total_quantity(ops))


def weighted_commission_per_unit(operations: Iterable[Operation]) -> float:
    """Total commission divided by total quantity, 0.0 when empty."""
    ops = list(operations)
    return safe_divide(total_commission(ops), total_quantity(ops))


def ensure_finite(value: float, metric_name: str,
                  calculation_input: Optional[dict[str, Any]] = None) -> float:
    """
    Guard against non-finite arithmetic results.

    Raises:
        PnLCalculationError: if value is NaN or infinite
    """
    if not math.isfinite(value):
        raise PnLCalculationError(
            f"Non-finite value for {metric_name}: {value}",
            metric_name=metric_name,
            calculation_input=calculation_input,
        )
    return value
