"""
Logging configuration and utilities for the arbitrage engine.
"""
from .config import (
    configure_logging,
    get_logger,
    get_matching_logger,
    log_pattern_result,
    round_money_fields,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "get_matching_logger",
    "log_pattern_result",
    "round_money_fields",
]
