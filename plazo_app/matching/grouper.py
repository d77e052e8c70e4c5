"""Group classified operations and financing by (instrument, tenor)."""

from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import date
from typing import Optional

from ..data.models import FinancingTransaction, Operation
from ..logging.config import get_logger
from ..models.results import ArbitragePattern, InstrumentTenorGroup
from ..utils.dates import DateLike, to_date
from ..utils.numeric import safe_divide
from .classifier import ClassifiedOperations, OperationClassifier
from .patterns import matched_principal
from .rates import FinancingRateAggregator, normalize_currency
from .tenor import TenorResolver

logger = get_logger(__name__)

GroupMap = dict[tuple[str, int], InstrumentTenorGroup]


class InstrumentGrouper:
    """
    Builds the (instrument, tenor) group map for one trading day.

    The currency rate map is computed once per call, never per group, and each
    group's average rate is looked up by its currency.
    """

    def __init__(
        self,
        tenor_resolver: Optional[TenorResolver] = None,
        rate_aggregator: Optional[FinancingRateAggregator] = None,
        classifier: Optional[OperationClassifier] = None,
        default_currency: str = "ARS",
    ):
        self.tenor_resolver = tenor_resolver or TenorResolver()
        self.rate_aggregator = rate_aggregator or FinancingRateAggregator(default_currency)
        self.classifier = classifier or OperationClassifier()
        self.default_currency = default_currency

    def group(
        self,
        operations: Iterable[Operation],
        financing: Iterable[FinancingTransaction],
        trading_day: DateLike,
        rate_by_currency: Optional[Mapping[str, float]] = None,
    ) -> GroupMap:
        """
        Build groups keyed by (instrument, tenor).

        Args:
            operations: Fee-annotated operations
            financing: Fee-annotated financing transactions
            trading_day: Trading day the records belong to
            rate_by_currency: Precomputed currency -> TNA map, derived when None

        Returns:
            Mapping ordered by instrument first appearance
        """
        day = to_date(trading_day)
        financing = list(financing)

        if rate_by_currency is None:
            rate_by_currency = self.rate_aggregator.aggregate(financing)
        rates = {normalize_currency(code, self.default_currency): rate
                 for code, rate in rate_by_currency.items()}

        groups: GroupMap = {}
        positions: dict[tuple[str, int], tuple[int, ...]] = {}

        for instrument, buckets in self.classifier.classify(operations).items():
            tenor = self.tenor_resolver.resolve_for_operations(buckets.all_operations(), day)
            indexes = tuple(i for i, tx in enumerate(financing) if tx.tenor_days == tenor)
            matching_financing = tuple(financing[i] for i in indexes)

            group = self._build_group(buckets, tenor, day, matching_financing, rates)
            groups[group.key] = group
            positions[group.key] = indexes

            logger.debug(
                "Built instrument group",
                instrument=instrument,
                tenor=tenor,
                operations=group.operation_count,
                financing=len(matching_financing),
                currency=group.currency,
                avg_rate=group.avg_rate,
            )

        attached = {i for indexes in positions.values() for i in indexes}
        if len(attached) < len(financing):
            logger.debug("Financing transactions matched no instrument tenor",
                         count=len(financing) - len(attached))

        return self._allocate_fees(groups, positions)

    def _allocate_fees(
        self,
        groups: GroupMap,
        positions: Mapping[tuple[str, int], tuple[int, ...]],
    ) -> GroupMap:
        """
        Split each transaction's fees across the groups it is attached to.

        A transaction shared by several instruments at the same tenor is
        charged in proportion to the principal each group matches for the
        transaction's role, so the day's fees are counted once.
        """
        funded: dict[int, float] = defaultdict(float)
        weights: dict[tuple[str, int], tuple[float, ...]] = {}

        for key, group in groups.items():
            weights[key] = tuple(
                matched_principal(group, ArbitragePattern.for_role(tx.role))
                for tx in group.financing
            )
            for index, weight in zip(positions[key], weights[key]):
                funded[index] += weight

        return {
            key: replace(group, fee_shares=tuple(
                safe_divide(weight, funded[index])
                for index, weight in zip(positions[key], weights[key])
            ))
            for key, group in groups.items()
        }

    def _build_group(
        self,
        buckets: ClassifiedOperations,
        tenor: int,
        trading_day: date,
        financing: tuple[FinancingTransaction, ...],
        rates: Mapping[str, float],
    ) -> InstrumentTenorGroup:
        currency = self._group_currency(buckets)
        return InstrumentTenorGroup(
            instrument=buckets.instrument,
            tenor=tenor,
            trading_day=trading_day,
            currency=currency,
            sell_immediate=tuple(buckets.sell_immediate),
            buy_deferred=tuple(buckets.buy_deferred),
            buy_immediate=tuple(buckets.buy_immediate),
            sell_deferred=tuple(buckets.sell_deferred),
            financing=financing,
            avg_rate=rates.get(currency),
        )

    def _group_currency(self, buckets: ClassifiedOperations) -> str:
        ops = buckets.all_operations()
        first = ops[0].currency if ops else None
        return normalize_currency(first, self.default_currency)
