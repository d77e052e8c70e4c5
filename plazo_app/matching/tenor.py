"""Settlement gap between the immediate and deferred venues."""

from collections.abc import Iterable
from datetime import date
from typing import Optional

from ..data.models import Operation
from ..markets.calendar import MarketCalendar
from ..utils.dates import DateLike, calendar_days_between, earliest_date, to_date


class TenorResolver:
    """
    Computes the tenor: calendar days from immediate settlement (the trading
    day itself) to deferred settlement (T+N business days).
    """

    def __init__(self, calendar: Optional[MarketCalendar] = None,
                 market_id: str = "BYMA", settlement_offset_days: int = 1):
        self.calendar = calendar or MarketCalendar()
        self.market_id = market_id
        self.settlement_offset_days = settlement_offset_days

    def deferred_settlement_date(self, trading_day: DateLike) -> date:
        return self.calendar.add_business_days(
            trading_day, self.settlement_offset_days, self.market_id
        )

    def resolve(self, trading_day: DateLike) -> int:
        """
        Tenor in calendar days for ``trading_day``.

        A Friday trade with T+1 settlement has tenor 3; a Thursday before a
        Friday holiday has tenor 4.
        """
        immediate = to_date(trading_day)
        return calendar_days_between(immediate, self.deferred_settlement_date(immediate))

    def resolve_for_operations(self, operations: Iterable[Operation],
                               fallback_day: DateLike) -> int:
        """Tenor from the earliest trade date among ``operations``."""
        day = earliest_date([op.traded_at for op in operations], fallback=to_date(fallback_day))
        return self.resolve(day)
