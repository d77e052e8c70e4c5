"""
Recovery strategy classifications for error handling.
"""

from typing import Optional


class GracefulDegradationError(Exception):
    """Operation can continue with reduced fidelity."""

    def __init__(self, message: str, degraded_functionality: Optional[str] = None,
                 fallback_strategy: Optional[str] = None, **kwargs):
        super().__init__(message)
        self.degraded_functionality = degraded_functionality
        self.fallback_strategy = fallback_strategy
        self.allows_degradation = True
