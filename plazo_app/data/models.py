"""
Canonical data models for trade legs and financing transactions.

This module defines immutable records that represent validated executions
after adaptation from raw CSV or broker rows. Once built they are never
mutated; fee enrichment produces new instances.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional


class Side(str, Enum):
    """Trade direction."""
    BUY = "buy"
    SELL = "sell"


class Venue(str, Enum):
    """Settlement venue of a trade leg."""
    IMMEDIATE = "CI"       # Same-day settlement (contado inmediato)
    DEFERRED = "24h"       # Next-business-day settlement


class FinancingRole(str, Enum):
    """Side of a caución/repo."""
    LENDER = "lender"      # Colocadora: places cash and earns interest
    BORROWER = "borrower"  # Tomadora: takes cash and owes interest


@dataclass(frozen=True)
class FeeBreakdown:
    """Fee components supplied by a fee resolver."""
    commission: float = 0.0
    market_rights: float = 0.0
    guarantee_expense: float = 0.0
    tax_on_expenses: float = 0.0
    net_settlement: float = 0.0

    @property
    def total(self) -> float:
        """Sum of every expense component."""
        return self.commission + self.market_rights + self.guarantee_expense + self.tax_on_expenses


@dataclass(frozen=True)
class Operation:
    """One executed trade leg."""
    id: str
    instrument: str
    side: Side
    venue: Venue
    traded_at: datetime     # Execution timestamp
    quantity: float         # Always positive, sign implied by side
    price: float            # Normalized price per unit of quantity
    commission: float = 0.0  # Total fees charged on the leg
    currency: str = "ARS"
    fee_breakdown: Optional[FeeBreakdown] = None

    @property
    def notional(self) -> float:
        """Traded value, quantity times price."""
        return self.quantity * self.price

    @property
    def trade_date(self) -> date:
        """Calendar date of execution in the timestamp's own zone."""
        return self.traded_at.date()


def accrued_interest(principal: float, rate: float, tenor_days: int,
                     day_count_basis: int = 365) -> float:
    """
    Simple interest accrued on a financing leg.

    interest = principal * (rate / 100) * (tenor_days / day_count_basis)

    Args:
        principal: Amount placed or taken
        rate: Annualized nominal rate (TNA) in percent
        tenor_days: Days the principal is outstanding
        day_count_basis: Days per year for accrual

    Returns:
        Accrued interest, 0.0 for non-positive tenor or basis
    """
    if tenor_days <= 0 or day_count_basis <= 0:
        return 0.0
    return principal * (rate / 100.0) * (tenor_days / day_count_basis)


@dataclass(frozen=True)
class FinancingTransaction:
    """One caución/repo leg used to bridge the settlement gap."""
    id: str
    instrument: str          # Funding label, e.g. "PESOS"
    principal: float
    rate: float              # TNA in percent
    tenor_days: int
    currency: str
    role: FinancingRole
    interest: float = 0.0    # Accrued interest over the tenor
    fee_amount: float = 0.0
    fee_breakdown: Optional[FeeBreakdown] = None
    start: Optional[date] = None
    end: Optional[date] = None

    @property
    def base_amount(self) -> float:
        """Principal plus accrued interest."""
        return self.principal + self.interest

    @classmethod
    def create(cls, id: str, instrument: str, principal: float, rate: float,
               tenor_days: int, role: FinancingRole, currency: str = "ARS",
               fee_amount: float = 0.0, start: Optional[date] = None,
               day_count_basis: int = 365) -> "FinancingTransaction":
        """Build a transaction with its interest accrued from rate and tenor."""
        return cls(
            id=id,
            instrument=instrument,
            principal=principal,
            rate=rate,
            tenor_days=tenor_days,
            currency=currency,
            role=role,
            interest=accrued_interest(principal, rate, tenor_days, day_count_basis),
            fee_amount=fee_amount,
            start=start,
        )


@dataclass(frozen=True)
class NormalizationResult:
    """Result of adapting one raw row."""

    operation: Optional[Operation] = None
    financing: Optional[FinancingTransaction] = None

    success: bool = True
    error_msg: Optional[str] = None
    skipped_reason: Optional[str] = None

    @classmethod
    def success_with_operation(cls, operation: Operation):
        """Create successful result with an operation."""
        return cls(operation=operation, success=True)

    @classmethod
    def success_with_financing(cls, financing: FinancingTransaction):
        """Create successful result with a financing transaction."""
        return cls(financing=financing, success=True)

    @classmethod
    def error(cls, error_msg: str):
        """Create error result."""
        return cls(success=False, error_msg=error_msg)

    @classmethod
    def skipped(cls, reason: str):
        """Create skipped result."""
        return cls(success=True, skipped_reason=reason)
