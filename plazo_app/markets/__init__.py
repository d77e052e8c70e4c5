"""
Market calendar module.

Business-day rules used to place the deferred settlement date.
"""
from .calendar import MarketCalendar

__all__ = ["MarketCalendar"]
