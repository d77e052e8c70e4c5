"""Matching pipeline: classification, tenor, grouping, rates and patterns"""

from .classifier import ClassifiedOperations, OperationClassifier
from .grouper import InstrumentGrouper
from .patterns import PatternMatcher
from .rates import FinancingRateAggregator, calculate_avg_rate_by_currency
from .tenor import TenorResolver

__all__ = [
    "ClassifiedOperations",
    "OperationClassifier",
    "InstrumentGrouper",
    "PatternMatcher",
    "FinancingRateAggregator",
    "calculate_avg_rate_by_currency",
    "TenorResolver",
]
