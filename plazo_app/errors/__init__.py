"""
Error classification for the arbitrage matching and P&L engine.

Data quality problems are recoverable and reported per record or per group;
system failures signal invariant violations that must not reach consumers.
"""

from .data_quality import (
    DataQualityError,
    MissingDataError,
    MalformedDataError,
)
from .system_failures import (
    SystemFailureError,
    PnLCalculationError,
    ConfigurationError,
)
from .recovery import GracefulDegradationError

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "MissingDataError",
    "MalformedDataError",
    # System Failures
    "SystemFailureError",
    "PnLCalculationError",
    "ConfigurationError",
    # Recovery Categories
    "GracefulDegradationError",
]
