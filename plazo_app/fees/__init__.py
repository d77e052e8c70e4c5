"""Fee resolution for trades and financing"""

from .resolver import FeeResolver, RateTableFeeResolver

__all__ = ["FeeResolver", "RateTableFeeResolver"]
