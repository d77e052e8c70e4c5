"""
Data quality error classifications for trade and financing records.

Raised while adapting raw rows into canonical records. They are reported
back through normalization results and never abort a whole batch.
"""

from typing import Optional, Dict, Any


class DataQualityError(Exception):
    """Base class for record issues that can be handled gracefully."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class MissingDataError(DataQualityError):
    """A required field is absent from the record."""

    def __init__(self, message: str, field_name: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field_name = field_name


class MalformedDataError(DataQualityError):
    """A field exists but cannot be interpreted."""

    def __init__(self, message: str, raw_value: Optional[str] = None,
                 expected_format: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_value = raw_value
        self.expected_format = expected_format
