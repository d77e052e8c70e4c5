"""
System failure error classifications.

These represent broken invariants (non-finite P&L, unusable configuration)
rather than bad input, and are meant to surface loudly.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for unrecoverable failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class PnLCalculationError(SystemFailureError):
    """Arithmetic inside matching or P&L produced a non-finite value."""

    def __init__(self, message: str, metric_name: Optional[str] = None,
                 calculation_input: Optional[Dict[str, Any]] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.metric_name = metric_name
        self.calculation_input = calculation_input


class ConfigurationError(SystemFailureError):
    """Configuration failed validation and the engine cannot be built."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []
