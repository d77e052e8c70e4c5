"""
Main arbitrage engine coordinator.

Orchestrates the matching pipeline for one trading day, coordinating fee
enrichment, classification, tenor resolution, grouping and pattern
evaluation.
"""

from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

import structlog
import structlog.contextvars

from .config.defaults import DefaultConfig, get_default_config
from .data.models import FinancingTransaction, Operation
from .errors import DataQualityError
from .fees.resolver import FeeResolver
from .logging.config import get_matching_logger
from .markets.calendar import MarketCalendar
from .matching.grouper import GroupMap, InstrumentGrouper
from .matching.patterns import PatternMatcher
from .matching.rates import FinancingRateAggregator
from .matching.tenor import TenorResolver
from .models.results import InstrumentTenorGroup, PatternResult
from .utils.dates import DateLike, to_date

logger = structlog.get_logger(__name__)
matching_logger = get_matching_logger(__name__)


@dataclass(frozen=True)
class ArbitrageReport:
    """Everything one run produced."""
    trading_day: date
    groups: GroupMap = field(default_factory=dict)
    results: tuple[PatternResult, ...] = ()
    rate_by_currency: Mapping[str, float] = field(default_factory=dict)

    @property
    def total_pnl(self) -> float:
        return sum(r.total_pnl for r in self.results)

    def results_for(self, instrument: str) -> list[PatternResult]:
        return [r for r in self.results if r.instrument == instrument]


def result_sort_key(result: PatternResult) -> tuple[str, int, int]:
    return result.instrument, result.tenor, result.pattern.sort_order


class ArbitrageEngine:
    """
    Main coordinator for the calendar arbitrage matching engine.

    Manages the pipeline:
    Records → Fees → Classification → Tenor → Groups → Patterns → P&L
    """

    def __init__(
        self,
        config: Optional[DefaultConfig] = None,
        calendar: Optional[MarketCalendar] = None,
        fee_resolver: Optional[FeeResolver] = None,
    ) -> None:
        """
        Args:
            config: Engine configuration, library defaults when None
            calendar: Business-day calendar, built from ``config`` when None
            fee_resolver: Optional resolver used by the enrichment stage
        """
        self.logger = logger
        self.config = config or get_default_config()
        self.calendar = calendar or MarketCalendar.from_config(self.config)
        self.fee_resolver = fee_resolver

        self.rate_aggregator = FinancingRateAggregator(self.config.financing.default_currency)
        self.tenor_resolver = TenorResolver(
            calendar=self.calendar,
            market_id=self.config.market.market_id,
            settlement_offset_days=self.config.market.settlement_offset_days,
        )
        self.grouper = InstrumentGrouper(
            tenor_resolver=self.tenor_resolver,
            rate_aggregator=self.rate_aggregator,
            default_currency=self.config.financing.default_currency,
        )
        self.matcher = PatternMatcher(
            day_count_basis=self.config.financing.day_count_basis,
            strict_finite_checks=self.config.engine.strict_finite_checks,
        )

        self.logger.info(
            "Arbitrage engine initialized",
            market_id=self.config.market.market_id,
            fee_resolver=type(fee_resolver).__name__ if fee_resolver else None,
        )

    def enrich(
        self,
        operations: Iterable[Operation],
        financing: Iterable[FinancingTransaction],
    ) -> tuple[list[Operation], list[FinancingTransaction]]:
        """Attach resolved fees to every record; records pass through unchanged without a resolver."""
        if self.fee_resolver is None:
            self.logger.debug("No fee resolver configured, using recorded fees")
            return list(operations), list(financing)

        return (
            self.fee_resolver.enrich_operations(operations),
            self.fee_resolver.enrich_financing_transactions(financing),
        )

    def build_groups(
        self,
        operations: Iterable[Operation],
        financing: Iterable[FinancingTransaction],
        trading_day: DateLike,
        rate_by_currency: Optional[Mapping[str, float]] = None,
    ) -> GroupMap:
        """Group records by (instrument, tenor)."""
        return self.grouper.group(operations, financing, trading_day, rate_by_currency)

    def evaluate(
        self,
        groups: GroupMap,
        max_workers: Optional[int] = None,
    ) -> list[PatternResult]:
        """
        Evaluate both patterns on every group.

        Args:
            groups: Group map from ``build_groups``
            max_workers: Thread count, ``engine.max_workers`` when None

        Returns:
            Results sorted by instrument, tenor and pattern order
        """
        workers = max_workers if max_workers is not None else self.config.engine.max_workers
        group_list = list(groups.values())

        if workers > 1 and len(group_list) > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                batches = list(executor.map(self._evaluate_group, group_list))
        else:
            batches = [self._evaluate_group(group) for group in group_list]

        results = [result for batch in batches for result in batch]
        results.sort(key=result_sort_key)
        return results

    def _evaluate_group(self, group: InstrumentTenorGroup) -> list[PatternResult]:
        try:
            return self.matcher.evaluate(group)

        except DataQualityError as e:
            matching_logger.warning(
                "Data quality issue during group evaluation",
                error=str(e),
                error_type=type(e).__name__,
                instrument=group.instrument,
                tenor=group.tenor,
                context=getattr(e, 'context', {})
            )
            # Continue with the remaining groups
            return []

    def run(
        self,
        operations: Iterable[Operation],
        financing: Iterable[FinancingTransaction],
        trading_day: DateLike,
        rate_by_currency: Optional[Mapping[str, float]] = None,
        enrich: bool = False,
    ) -> ArbitrageReport:
        """
        Run the full pipeline for one trading day.

        Args:
            operations: Trade legs of the day
            financing: Financing transactions of the day
            trading_day: Trading day being reconciled
            rate_by_currency: Precomputed currency -> TNA map, derived when None
            enrich: Resolve fees before grouping

        Returns:
            Report with the group map, sorted results and the rate map used
        """
        day = to_date(trading_day)
        operations = list(operations)
        financing = list(financing)

        if enrich:
            operations, financing = self.enrich(operations, financing)

        if rate_by_currency is None:
            rate_by_currency = self.rate_aggregator.aggregate(financing)

        with structlog.contextvars.bound_contextvars(trading_day=day.isoformat()):
            groups = self.build_groups(operations, financing, day, rate_by_currency)
            results = self.evaluate(groups)

        self.logger.info(
            "Arbitrage run complete",
            trading_day=day.isoformat(),
            operations=len(operations),
            financing=len(financing),
            groups=len(groups),
            results=len(results),
            matched=sum(1 for r in results if r.is_matched),
        )

        return ArbitrageReport(
            trading_day=day,
            groups=groups,
            results=tuple(results),
            rate_by_currency=dict(rate_by_currency),
        )
