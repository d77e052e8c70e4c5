"""
Result models module.

Immutable groups and pattern results produced by the matching pipeline.
"""
from .results import ArbitragePattern, InstrumentTenorGroup, PatternResult, ResultStatus

__all__ = ["ArbitragePattern", "InstrumentTenorGroup", "PatternResult", "ResultStatus"]
