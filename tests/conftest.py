"""Pytest configuration and shared fixtures."""

import itertools
from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytest

from plazo_app.data.models import (
    FinancingRole,
    FinancingTransaction,
    Operation,
    Side,
    Venue,
)
from plazo_app.markets.calendar import MarketCalendar

BUENOS_AIRES = timezone(timedelta(hours=-3))

TRADING_DAY = date(2025, 10, 17)  # Friday

_ids = itertools.count(1)


def make_operation(
    side: Side = Side.SELL,
    venue: Venue = Venue.IMMEDIATE,
    quantity: float = 1000.0,
    price: float = 1.0,
    commission: float = 0.0,
    instrument: str = "S31O5",
    currency: str = "ARS",
    traded_at: Optional[datetime] = None,
    id: Optional[str] = None,
) -> Operation:
    """Build an operation executed on the reference trading day unless told otherwise."""
    return Operation(
        id=id or f"op-{next(_ids)}",
        instrument=instrument,
        side=side,
        venue=venue,
        traded_at=traded_at or datetime(2025, 10, 17, 11, 0, tzinfo=BUENOS_AIRES),
        quantity=quantity,
        price=price,
        commission=commission,
        currency=currency,
    )


def make_financing(
    principal: float = 1_000_000.0,
    rate: float = 30.0,
    tenor_days: int = 3,
    role: FinancingRole = FinancingRole.LENDER,
    currency: str = "ARS",
    fee_amount: float = 0.0,
    interest: Optional[float] = None,
    id: Optional[str] = None,
) -> FinancingTransaction:
    """Build a financing transaction, accruing interest from rate and tenor by default."""
    tx = FinancingTransaction.create(
        id=id or f"fin-{next(_ids)}",
        instrument="PESOS",
        principal=principal,
        rate=rate,
        tenor_days=tenor_days,
        role=role,
        currency=currency,
        fee_amount=fee_amount,
        start=TRADING_DAY,
    )
    if interest is not None:
        return FinancingTransaction(
            id=tx.id,
            instrument=tx.instrument,
            principal=tx.principal,
            rate=tx.rate,
            tenor_days=tx.tenor_days,
            currency=tx.currency,
            role=tx.role,
            interest=interest,
            fee_amount=tx.fee_amount,
            start=tx.start,
        )
    return tx


@pytest.fixture
def trading_day() -> date:
    """Reference trading day, a Friday settling T+1 on Monday."""
    return TRADING_DAY


@pytest.fixture
def calendar() -> MarketCalendar:
    """BYMA calendar with a Monday holiday and a long closure."""
    return MarketCalendar(
        holidays_by_market={
            "BYMA": [
                "2025-11-24",
                "2025-11-21",
                "2025-12-25",
            ],
        }
    )
