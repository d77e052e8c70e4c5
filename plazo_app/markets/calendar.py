"""
Market business-day calendar.

Weekends never settle; per-market holiday lists come from configuration
(config/markets.yaml). The calendar is the only collaborator the tenor
resolver consults.
"""

from collections.abc import Iterable, Mapping
from datetime import date, timedelta
from typing import Optional

from ..config.defaults import DefaultConfig
from ..errors import GracefulDegradationError
from ..logging.config import get_logger
from ..utils.dates import DateLike, to_date

logger = get_logger(__name__)


class MarketCalendar:
    """Weekend and holiday aware business-day calendar."""

    def __init__(
        self,
        holidays_by_market: Optional[Mapping[str, Iterable[DateLike]]] = None,
        max_search_days: int = 14,
    ):
        """
        Args:
            holidays_by_market: Market id -> holiday dates (date or ISO string)
            max_search_days: Days scanned before giving up on a business day
        """
        self.holidays: dict[str, frozenset[date]] = {
            market_id.upper(): frozenset(to_date(d) for d in days)
            for market_id, days in (holidays_by_market or {}).items()
        }
        self.max_search_days = max_search_days

    @classmethod
    def from_config(cls, config: DefaultConfig) -> "MarketCalendar":
        """Build a calendar from the market section of the configuration."""
        return cls(
            holidays_by_market={config.market.market_id: config.market.holidays},
            max_search_days=config.market.max_business_day_search,
        )

    def is_holiday(self, day: DateLike, market_id: str) -> bool:
        return to_date(day) in self.holidays.get(market_id.upper(), frozenset())

    def is_business_day(self, day: DateLike, market_id: str) -> bool:
        """True unless ``day`` is a weekend or a listed market holiday."""
        d = to_date(day)
        if d.weekday() >= 5:
            return False
        return not self.is_holiday(d, market_id)

    def find_next_business_day(self, day: DateLike, market_id: str) -> date:
        """
        First business day strictly after ``day``.

        Raises:
            GracefulDegradationError: if none is found within the search window
        """
        candidate = to_date(day)
        for _ in range(self.max_search_days):
            candidate += timedelta(days=1)
            if self.is_business_day(candidate, market_id):
                return candidate

        raise GracefulDegradationError(
            f"No business day within {self.max_search_days} days after {to_date(day)}",
            degraded_functionality="business_day_search",
            fallback_strategy="next_calendar_day",
        )

    def next_business_day(self, day: DateLike, market_id: str) -> date:
        """First business day after ``day``, or the next calendar day if none is found."""
        try:
            return self.find_next_business_day(day, market_id)
        except GracefulDegradationError as e:
            logger.warning(
                "Business day search exhausted, using next calendar day",
                market_id=market_id,
                day=to_date(day).isoformat(),
                error=str(e),
                fallback_strategy=e.fallback_strategy,
            )
            return to_date(day) + timedelta(days=1)

    def add_business_days(self, day: DateLike, count: int, market_id: str) -> date:
        """Move ``count`` business days forward from ``day``; 0 returns ``day``."""
        current = to_date(day)
        for _ in range(count):
            current = self.next_business_day(current, market_id)
        return current
