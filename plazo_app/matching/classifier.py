"""Partition trade legs into role-tagged buckets per instrument."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional

from ..data.models import Operation, Side, Venue
from ..logging.config import get_logger

logger = get_logger(__name__)

_BUCKETS = {
    (Venue.IMMEDIATE, Side.SELL): "sell_immediate",
    (Venue.DEFERRED, Side.BUY): "buy_deferred",
    (Venue.IMMEDIATE, Side.BUY): "buy_immediate",
    (Venue.DEFERRED, Side.SELL): "sell_deferred",
}


@dataclass
class ClassifiedOperations:
    """The four venue/side buckets of one instrument, in input order."""
    instrument: str
    sell_immediate: list[Operation] = field(default_factory=list)
    buy_deferred: list[Operation] = field(default_factory=list)
    buy_immediate: list[Operation] = field(default_factory=list)
    sell_deferred: list[Operation] = field(default_factory=list)

    def all_operations(self) -> list[Operation]:
        return self.sell_immediate + self.buy_deferred + self.buy_immediate + self.sell_deferred


def bucket_for(operation: Operation) -> Optional[str]:
    """Bucket name for a leg, None when venue or side is not recognized."""
    try:
        venue = Venue(operation.venue)
        side = Side(operation.side)
    except ValueError:
        return None
    return _BUCKETS[(venue, side)]


class OperationClassifier:
    """Field-lookup classification of legs; no business logic beyond partitioning."""

    def classify(self, operations: Iterable[Operation]) -> dict[str, ClassifiedOperations]:
        """
        Partition operations by instrument, venue and side.

        Args:
            operations: Fee-annotated operations, in any order

        Returns:
            Instrument -> buckets, instruments in first-seen order
        """
        classified: dict[str, ClassifiedOperations] = {}
        dropped = 0

        for op in operations:
            bucket = bucket_for(op)
            if bucket is None:
                dropped += 1
                continue

            if op.instrument not in classified:
                classified[op.instrument] = ClassifiedOperations(instrument=op.instrument)
            getattr(classified[op.instrument], bucket).append(op)

        if dropped:
            logger.debug("Dropped operations with unrecognized venue or side", dropped=dropped)

        return classified
