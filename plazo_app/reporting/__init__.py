"""Reporting helpers for groups and pattern results"""

from .summary import (
    filter_groups_by_instrument,
    format_currency,
    format_percentage,
    groups_summary,
    result_to_row,
    results_to_rows,
    unique_instruments,
)

__all__ = [
    "filter_groups_by_instrument",
    "format_currency",
    "format_percentage",
    "groups_summary",
    "result_to_row",
    "results_to_rows",
    "unique_instruments",
]
