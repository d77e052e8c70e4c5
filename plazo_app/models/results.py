"""
Grouping and pattern-result models for arbitrage evaluation.

Groups are built once per aggregation pass and never mutated; pattern
results carry every derived display value so consumers do not recompute.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from ..data.models import FinancingRole, FinancingTransaction, Operation


class ArbitragePattern(str, Enum):
    """The two canonical calendar-arbitrage patterns."""
    SELL_IMMEDIATE_BUY_DEFERRED = "sell_immediate_buy_deferred"
    BUY_IMMEDIATE_SELL_DEFERRED = "buy_immediate_sell_deferred"

    @property
    def financing_role(self) -> FinancingRole:
        """Role of the financing leg that bridges the settlement gap."""
        if self is ArbitragePattern.SELL_IMMEDIATE_BUY_DEFERRED:
            return FinancingRole.LENDER
        return FinancingRole.BORROWER

    @property
    def sort_order(self) -> int:
        """Stable display position."""
        return _PATTERN_ORDER[self]

    @classmethod
    def for_role(cls, role: FinancingRole) -> "ArbitragePattern":
        """Pattern whose financing leg plays ``role``."""
        if role is FinancingRole.LENDER:
            return cls.SELL_IMMEDIATE_BUY_DEFERRED
        return cls.BUY_IMMEDIATE_SELL_DEFERRED


_PATTERN_ORDER = {
    ArbitragePattern.SELL_IMMEDIATE_BUY_DEFERRED: 0,
    ArbitragePattern.BUY_IMMEDIATE_SELL_DEFERRED: 1,
}


class ResultStatus(str, Enum):
    """Terminal outcome of one pattern evaluation."""
    NO_COUNTERPARTY = "no_counterparty"
    MATCHED_NO_FINANCING = "matched_no_financing"
    COMPLETE = "complete"
    UNBALANCED_QUANTITIES = "unbalanced_quantities"


@dataclass(frozen=True)
class InstrumentTenorGroup:
    """Operations and financing for one (instrument, tenor) key."""
    instrument: str
    tenor: int
    trading_day: date
    currency: str
    sell_immediate: tuple[Operation, ...] = ()
    buy_deferred: tuple[Operation, ...] = ()
    buy_immediate: tuple[Operation, ...] = ()
    sell_deferred: tuple[Operation, ...] = ()
    financing: tuple[FinancingTransaction, ...] = ()
    avg_rate: Optional[float] = None    # Currency-level TNA, None when unknown
    fee_shares: tuple[float, ...] = ()   # Per-transaction fee share, parallel to financing

    @property
    def key(self) -> tuple[str, int]:
        return (self.instrument, self.tenor)

    @property
    def operation_count(self) -> int:
        return (len(self.sell_immediate) + len(self.buy_deferred)
                + len(self.buy_immediate) + len(self.sell_deferred))

    @property
    def has_operations(self) -> bool:
        return self.operation_count > 0

    def financing_for(self, role: FinancingRole) -> tuple[FinancingTransaction, ...]:
        """Financing transactions playing ``role``."""
        return tuple(tx for tx in self.financing if tx.role == role)

    def financing_fees_for(self, role: FinancingRole) -> float:
        """
        Fees of the transactions playing ``role`` charged to this group.

        Transactions shared with other groups contribute only this group's
        share of their fees; without shares every fee is charged in full.
        """
        shares = self.fee_shares or (1.0,) * len(self.financing)
        return sum(tx.fee_amount * share
                   for tx, share in zip(self.financing, shares) if tx.role == role)


@dataclass(frozen=True)
class PatternResult:
    """Outcome of evaluating one pattern on one group."""

    instrument: str
    tenor: int
    pattern: ArbitragePattern
    status: ResultStatus

    matched_quantity: float = 0.0
    average_price: float = 0.0
    trade_pnl: float = 0.0
    financing_pnl: float = 0.0
    total_pnl: float = 0.0

    operations: tuple[Operation, ...] = ()
    financing: tuple[FinancingTransaction, ...] = ()

    # Display fields
    principal: float = 0.0
    base_amount: float = 0.0
    accrued_interest: float = 0.0
    financing_fees: float = 0.0

    # Per-side aggregates, side A is the immediate leg of the pattern
    quantity_a: float = 0.0
    quantity_b: float = 0.0
    price_a: float = 0.0
    price_b: float = 0.0
    commission_a: float = 0.0
    commission_b: float = 0.0

    @property
    def key(self) -> tuple[str, int]:
        return (self.instrument, self.tenor)

    @property
    def is_matched(self) -> bool:
        return self.matched_quantity > 0

    @classmethod
    def no_counterparty(cls, instrument: str, tenor: int, pattern: ArbitragePattern,
                        operations: tuple[Operation, ...] = (),
                        quantity_a: float = 0.0,
                        quantity_b: float = 0.0) -> "PatternResult":
        """Result for a pattern with nothing to match; every P&L field is zero."""
        return cls(
            instrument=instrument,
            tenor=tenor,
            pattern=pattern,
            status=ResultStatus.NO_COUNTERPARTY,
            operations=operations,
            quantity_a=quantity_a,
            quantity_b=quantity_b,
        )
