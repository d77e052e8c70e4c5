"""Fee resolution for trade legs and financing transactions."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import replace
from typing import Optional

from ..config.defaults import FeeParams
from ..data.models import (
    FeeBreakdown,
    FinancingRole,
    FinancingTransaction,
    Operation,
    Side,
)
from ..logging.config import get_logger

logger = get_logger(__name__)


class FeeResolver(ABC):
    """
    Base class for fee resolvers.

    Resolvers are pure: they read a record and return its fee breakdown.
    Enrichment must complete before grouping; matching only reads the fee
    fields already stored on the records.
    """

    @abstractmethod
    def operation_fees(self, operation: Operation) -> FeeBreakdown:
        """Fee breakdown for one trade leg."""
        pass

    @abstractmethod
    def financing_fees(self, transaction: FinancingTransaction) -> FeeBreakdown:
        """Fee breakdown for one financing transaction."""
        pass

    def enrich_operation(self, operation: Operation) -> Operation:
        breakdown = self.operation_fees(operation)
        return replace(operation, commission=breakdown.total, fee_breakdown=breakdown)

    def enrich_financing(self, transaction: FinancingTransaction) -> FinancingTransaction:
        breakdown = self.financing_fees(transaction)
        return replace(transaction, fee_amount=breakdown.total, fee_breakdown=breakdown)

    def enrich_operations(self, operations: Iterable[Operation]) -> list[Operation]:
        """Return new operations carrying their commission and breakdown."""
        enriched = [self.enrich_operation(op) for op in operations]
        logger.debug("Enriched operations with fees", count=len(enriched))
        return enriched

    def enrich_financing_transactions(
        self, transactions: Iterable[FinancingTransaction]
    ) -> list[FinancingTransaction]:
        """Return new financing transactions carrying their fee amount and breakdown."""
        enriched = [self.enrich_financing(tx) for tx in transactions]
        logger.debug("Enriched financing transactions with fees", count=len(enriched))
        return enriched


class RateTableFeeResolver(FeeResolver):
    """
    Percentage-of-notional fee schedule.

    Trades pay commission and market rights on notional, plus VAT on both.
    Financing pays annualized commission and market rights pro-rated by tenor,
    a guarantee expense on principal, plus VAT on the expenses.
    """

    def __init__(self, params: Optional[FeeParams] = None, day_count_basis: int = 365):
        self.params = params or FeeParams()
        self.day_count_basis = day_count_basis

    def operation_fees(self, operation: Operation) -> FeeBreakdown:
        notional = operation.notional
        commission = notional * self.params.commission_pct
        market_rights = notional * self.params.market_rights_pct
        tax = (commission + market_rights) * self.params.vat_pct
        expenses = commission + market_rights + tax

        # Buyers pay fees on top of notional; sellers receive notional minus fees
        if operation.side == Side.BUY:
            net_settlement = notional + expenses
        else:
            net_settlement = notional - expenses

        return FeeBreakdown(
            commission=commission,
            market_rights=market_rights,
            tax_on_expenses=tax,
            net_settlement=net_settlement,
        )

    def financing_fees(self, transaction: FinancingTransaction) -> FeeBreakdown:
        if transaction.tenor_days <= 0 or self.day_count_basis <= 0:
            year_fraction = 0.0
        else:
            year_fraction = transaction.tenor_days / self.day_count_basis

        principal = transaction.principal
        commission = principal * self.params.repo_commission_pct * year_fraction
        market_rights = principal * self.params.repo_market_rights_pct * year_fraction
        guarantee = principal * self.params.guarantee_pct
        tax = (commission + market_rights + guarantee) * self.params.vat_pct
        expenses = commission + market_rights + guarantee + tax

        # Lenders collect principal plus interest at maturity; borrowers repay it
        base_amount = transaction.base_amount
        if transaction.role == FinancingRole.LENDER:
            net_settlement = base_amount - expenses
        else:
            net_settlement = base_amount + expenses

        return FeeBreakdown(
            commission=commission,
            market_rights=market_rights,
            guarantee_expense=guarantee,
            tax_on_expenses=tax,
            net_settlement=net_settlement,
        )
