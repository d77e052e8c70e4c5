"""
Plazo App - Calendar Arbitrage Matching and P&L Engine

Matches trades executed for immediate and deferred settlement on the same
instrument, attaches the caución (repo) financing that bridges the settlement
gap, and computes trade, financing and total P&L per arbitrage pattern.
"""

__version__ = "0.1.0"
__author__ = "Plazo Team"

from .data.normalizer import RecordNormalizer
from .engine import ArbitrageEngine, ArbitrageReport
from .models.results import ArbitragePattern, PatternResult, ResultStatus

__all__ = [
    "ArbitrageEngine",
    "ArbitrageReport",
    "ArbitragePattern",
    "PatternResult",
    "RecordNormalizer",
    "ResultStatus",
]
