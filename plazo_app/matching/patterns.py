"""
Pattern evaluation and P&L for calendar arbitrage.

Pattern A sells for immediate settlement, buys back for deferred settlement
and lends the proceeds over the tenor. Pattern B buys for immediate
settlement, sells for deferred settlement and borrows to fund the purchase.

Matched quantity is sized by notional rather than raw quantity:

    matched = min(notional_a, notional_b) / mean(price_a, price_b)

so surplus legs on one side never inflate P&L.
"""

from dataclasses import dataclass
from typing import Optional

from ..data.models import FinancingRole, FinancingTransaction, Operation
from ..errors import MalformedDataError
from ..logging.config import get_matching_logger, log_pattern_result
from ..models.results import (
    ArbitragePattern,
    InstrumentTenorGroup,
    PatternResult,
    ResultStatus,
)
from ..utils.numeric import (
    ensure_finite,
    safe_divide,
    total_notional,
    total_quantity,
    weighted_average_price,
    weighted_commission_per_unit,
)

logger = get_matching_logger(__name__)


@dataclass(frozen=True)
class SideTotals:
    """Aggregates of one bucket."""
    quantity: float
    notional: float
    price: float
    commission_per_unit: float

    @classmethod
    def of(cls, operations: tuple[Operation, ...]) -> "SideTotals":
        return cls(
            quantity=total_quantity(operations),
            notional=total_notional(operations),
            price=weighted_average_price(operations),
            commission_per_unit=weighted_commission_per_unit(operations),
        )


@dataclass(frozen=True)
class FinancingOutcome:
    """Financing leg of a matched pattern."""
    pnl: float = 0.0
    principal: float = 0.0
    accrued_interest: float = 0.0
    fees: float = 0.0
    computed: bool = False


def pattern_sides(group: InstrumentTenorGroup, pattern: ArbitragePattern
                  ) -> tuple[tuple[Operation, ...], tuple[Operation, ...]]:
    """Immediate and deferred buckets of ``pattern`` in ``group``."""
    if pattern is ArbitragePattern.SELL_IMMEDIATE_BUY_DEFERRED:
        return group.sell_immediate, group.buy_deferred
    return group.buy_immediate, group.sell_deferred


def matched_principal(group: InstrumentTenorGroup, pattern: ArbitragePattern) -> float:
    """Cash amount ``pattern`` matches in ``group``, the smaller side notional."""
    side_a, side_b = pattern_sides(group, pattern)
    return min(total_notional(side_a), total_notional(side_b))


def signed_financing(interest: float, fees: float, role: FinancingRole) -> float:
    """Lenders earn interest net of fees; borrowers pay interest plus fees."""
    if role is FinancingRole.LENDER:
        return interest - fees
    return -(interest + fees)


class PatternMatcher:
    """Evaluates both arbitrage patterns on a group and computes P&L."""

    def __init__(self, day_count_basis: int = 365, strict_finite_checks: bool = True):
        self.day_count_basis = day_count_basis
        self.strict_finite_checks = strict_finite_checks

    def evaluate(self, group: InstrumentTenorGroup) -> list[PatternResult]:
        """
        Evaluate every pattern with at least one leg.

        Returns:
            Up to two results, Pattern A first
        """
        results = []
        for pattern in ArbitragePattern:
            result = self.evaluate_pattern(group, pattern)
            if result is not None:
                log_pattern_result(logger, result)
                results.append(result)
        return results

    def evaluate_pattern(self, group: InstrumentTenorGroup,
                         pattern: ArbitragePattern) -> Optional[PatternResult]:
        """
        Evaluate one pattern.

        Returns:
            None when both buckets are empty, otherwise a terminal result

        Raises:
            MalformedDataError: if the pattern's legs mix settlement currencies
        """
        side_a, side_b = pattern_sides(group, pattern)
        if not side_a and not side_b:
            return None

        operations = side_a + side_b
        currencies = {op.currency for op in operations}
        if len(currencies) > 1:
            raise MalformedDataError(
                f"Legs of {group.instrument} settle in more than one currency",
                context={"instrument": group.instrument, "tenor": group.tenor,
                         "currencies": sorted(currencies)},
            )

        a = SideTotals.of(side_a)
        b = SideTotals.of(side_b)

        average_price = (a.price + b.price) / 2
        matched = safe_divide(min(a.notional, b.notional), average_price)
        self._check("matched_quantity", matched, group, pattern)

        if matched <= 0:
            return PatternResult.no_counterparty(
                group.instrument, group.tenor, pattern,
                operations=operations,
                quantity_a=a.quantity,
                quantity_b=b.quantity,
            )

        if pattern is ArbitragePattern.SELL_IMMEDIATE_BUY_DEFERRED:
            spread = a.price - b.price
        else:
            spread = b.price - a.price
        commissions = (a.commission_per_unit + b.commission_per_unit) * matched
        trade_pnl = self._check("trade_pnl", spread * matched - commissions, group, pattern)

        role = pattern.financing_role
        role_financing = group.financing_for(role)
        financing = self._financing(group, role, role_financing, average_price * matched)
        financing_pnl = self._check("financing_pnl", financing.pnl, group, pattern)

        if not financing.computed:
            status = ResultStatus.MATCHED_NO_FINANCING
        elif a.quantity == b.quantity:
            status = ResultStatus.COMPLETE
        else:
            status = ResultStatus.UNBALANCED_QUANTITIES

        return PatternResult(
            instrument=group.instrument,
            tenor=group.tenor,
            pattern=pattern,
            status=status,
            matched_quantity=matched,
            average_price=average_price,
            trade_pnl=trade_pnl,
            financing_pnl=financing_pnl,
            total_pnl=trade_pnl + financing_pnl,
            operations=operations,
            financing=role_financing,
            principal=financing.principal,
            base_amount=financing.principal + financing.accrued_interest,
            accrued_interest=financing.accrued_interest,
            financing_fees=financing.fees,
            quantity_a=a.quantity,
            quantity_b=b.quantity,
            price_a=a.price,
            price_b=b.price,
            commission_a=a.commission_per_unit * matched,
            commission_b=b.commission_per_unit * matched,
        )

    def _financing(self, group: InstrumentTenorGroup, role: FinancingRole,
                   transactions: tuple[FinancingTransaction, ...],
                   principal: float) -> FinancingOutcome:
        """
        Financing P&L for the matched principal.

        Uses the group's currency rate when one is available and the tenor is
        positive; otherwise blends the recorded interest of the role's
        transactions by principal; otherwise no financing.
        """
        fees = group.financing_fees_for(role)

        if group.avg_rate and group.avg_rate > 0 and group.tenor > 0:
            interest = principal * (group.avg_rate / 100) * (group.tenor / self.day_count_basis)
            return FinancingOutcome(
                pnl=signed_financing(interest, fees, role),
                principal=principal,
                accrued_interest=interest,
                fees=fees,
                computed=True,
            )

        if transactions:
            # Interest per unit of principal, weighted across every transaction
            interest_rate = safe_divide(
                sum(tx.interest for tx in transactions),
                sum(tx.principal for tx in transactions),
            )
            interest = interest_rate * principal
            logger.info(
                "Financing from recorded transactions, no currency rate",
                instrument=group.instrument,
                tenor=group.tenor,
                currency=group.currency,
                role=role.value,
                transactions=len(transactions),
            )
            return FinancingOutcome(
                pnl=signed_financing(interest, fees, role),
                principal=principal,
                accrued_interest=interest,
                fees=fees,
                computed=True,
            )

        logger.info(
            "No financing available for matched pattern",
            instrument=group.instrument,
            tenor=group.tenor,
            currency=group.currency,
            role=role.value,
        )
        return FinancingOutcome()

    def _check(self, metric_name: str, value: float, group: InstrumentTenorGroup,
               pattern: ArbitragePattern) -> float:
        if not self.strict_finite_checks:
            return value
        return ensure_finite(value, metric_name, {
            "instrument": group.instrument,
            "tenor": group.tenor,
            "pattern": pattern.value,
        })
