"""
Record adapter converting raw execution rows into canonical records.

Rows come from CSV exports or broker APIs and name their instrument with a
composite symbol such as ``MERV - XMEV - S31O5 - CI``. The last segment is
the settlement venue for trades, or the tenor (``3D``) for cauciones. Rows
failing validation are rejected here so the matching stages can assume
complete, numeric records.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..errors import DataQualityError, MalformedDataError, MissingDataError
from ..logging.config import get_logger
from ..utils.dates import calendar_days_between, parse_timestamp, to_date
from .models import (
    FinancingRole,
    FinancingTransaction,
    NormalizationResult,
    Operation,
    Side,
    Venue,
    accrued_interest,
)

logger = get_logger(__name__)

_TENOR_PATTERN = re.compile(r"^(\d+)D$", re.IGNORECASE)

QUANTITY_FIELDS = ("quantity", "last_qty", "cantidad")
PRICE_FIELDS = ("price", "last_price", "precio")
TIMESTAMP_FIELDS = ("transact_time", "traded_at", "date", "fechaHora")
SIDE_FIELDS = ("side", "lado")
INTEREST_FIELDS = ("interest", "interes")
# Keys only an explicit caución row carries
EXPLICIT_FINANCING_FIELDS = ("start", "inicio", "amount", "monto", "principal")


@dataclass(frozen=True)
class SymbolInfo:
    """Parsed composite symbol."""
    instrument: str
    venue: Optional[Venue] = None
    tenor_days: Optional[int] = None

    @property
    def is_financing(self) -> bool:
        return self.tenor_days is not None


@dataclass
class NormalizedBatch:
    """Outcome of adapting a batch of rows."""
    operations: list[Operation] = field(default_factory=list)
    financing: list[FinancingTransaction] = field(default_factory=list)
    rejected: list[tuple[dict[str, Any], str]] = field(default_factory=list)


def parse_symbol(symbol: str) -> SymbolInfo:
    """
    Split a composite symbol into instrument and venue or tenor.

    ``MERV - XMEV - S31O5 - CI``   -> S31O5, immediate
    ``MERV - XMEV - S31O5 - 24hs`` -> S31O5, deferred
    ``MERV - XMEV - PESOS - 3D``   -> PESOS, financing with tenor 3
    ``S31O5``                      -> S31O5, immediate
    """
    parts = [p.strip() for p in str(symbol or "").split(" - ") if p.strip()]
    if not parts:
        raise MissingDataError("Symbol is empty", field_name="symbol")

    last = parts[-1]
    tenor_match = _TENOR_PATTERN.match(last)
    if tenor_match and len(parts) > 1:
        return SymbolInfo(instrument=parts[-2], tenor_days=int(tenor_match.group(1)))

    upper = last.upper()
    if "24" in upper and len(parts) > 1:
        return SymbolInfo(instrument=parts[-2], venue=Venue.DEFERRED)
    if upper == "CI" and len(parts) > 1:
        return SymbolInfo(instrument=parts[-2], venue=Venue.IMMEDIATE)

    return SymbolInfo(instrument=last, venue=Venue.IMMEDIATE)


def parse_side(value: Any) -> Side:
    """BUY/COMPRA/C -> buy, SELL/VENTA/V -> sell."""
    if value is None or not str(value).strip():
        raise MissingDataError("Side is missing", field_name="side")

    normalized = str(value).strip().upper()
    if normalized in ("SELL", "S") or normalized.startswith("V"):
        return Side.SELL
    if normalized in ("BUY", "B") or normalized.startswith("C"):
        return Side.BUY

    raise MalformedDataError(
        f"Unknown side: {value}",
        raw_value=str(value),
        expected_format="BUY/SELL",
    )


def parse_role(value: Any) -> FinancingRole:
    """lender/colocadora -> lender, borrower/tomadora -> borrower."""
    normalized = str(value or "").strip().lower()
    if normalized in ("lender", "colocadora"):
        return FinancingRole.LENDER
    if normalized in ("borrower", "tomadora"):
        return FinancingRole.BORROWER
    raise MalformedDataError(
        f"Unknown financing role: {value}",
        raw_value=str(value),
        expected_format="lender/borrower",
    )


def _first(row: dict[str, Any], names: tuple[str, ...]) -> Any:
    for name in names:
        value = row.get(name)
        if value is not None and value != "":
            return value
    return None


def _positive_number(row: dict[str, Any], names: tuple[str, ...], label: str) -> float:
    raw = _first(row, names)
    if raw is None:
        raise MissingDataError(f"{label} is missing", field_name=label)
    try:
        value = float(str(raw).replace(",", "")) if isinstance(raw, str) else float(raw)
    except (TypeError, ValueError):
        raise MalformedDataError(f"{label} is not numeric: {raw}", raw_value=str(raw))
    if not value > 0:
        raise MalformedDataError(f"{label} must be positive, got {value}", raw_value=str(raw))
    return value


def _optional_number(row: dict[str, Any], names: tuple[str, ...], label: str) -> float:
    raw = _first(row, names)
    if raw is None:
        return 0.0
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise MalformedDataError(f"{label} is not numeric: {raw}", raw_value=str(raw))


def _is_financing_row(row: dict[str, Any]) -> bool:
    if _first(row, EXPLICIT_FINANCING_FIELDS) is not None:
        return True
    try:
        return parse_symbol(_first(row, ("symbol", "instrument"))).is_financing
    except DataQualityError:
        return False


def _timestamp(row: dict[str, Any]) -> datetime:
    raw = _first(row, TIMESTAMP_FIELDS)
    if raw is None:
        raise MissingDataError("Execution timestamp is missing", field_name="transact_time")
    try:
        return parse_timestamp(raw)
    except ValueError:
        raise MalformedDataError(
            f"Unparseable timestamp: {raw}",
            raw_value=str(raw),
            expected_format="ISO-8601 or YYYYMMDD-HH:MM:SS.fff+HHMM",
        )


class RecordNormalizer:
    """
    Adapter from raw rows to canonical operations and financing transactions.
    """

    def __init__(self, default_currency: str = "ARS", day_count_basis: int = 365):
        self.default_currency = default_currency
        self.day_count_basis = day_count_basis

    def normalize_operation(self, row: dict[str, Any]) -> NormalizationResult:
        """
        Adapt one trade row.

        Returns:
            Result with an Operation, skipped for caución rows, error otherwise
        """
        try:
            info = parse_symbol(_first(row, ("symbol", "instrument")))
            if info.is_financing:
                return NormalizationResult.skipped("financing row")

            operation = Operation(
                id=str(_first(row, ("id", "order_id")) or ""),
                instrument=info.instrument,
                side=parse_side(_first(row, SIDE_FIELDS)),
                venue=info.venue,
                traded_at=_timestamp(row),
                quantity=_positive_number(row, QUANTITY_FIELDS, "quantity"),
                price=_positive_number(row, PRICE_FIELDS, "price"),
                commission=_optional_number(row, ("commission", "fee_amount", "feeAmount"), "commission"),
                currency=str(row.get("currency") or self.default_currency).upper(),
            )
            return NormalizationResult.success_with_operation(operation)

        except DataQualityError as e:
            return NormalizationResult.error(str(e))

    def normalize_financing(self, row: dict[str, Any]) -> NormalizationResult:
        """
        Adapt one caución row.

        Two shapes are accepted: a traded ``PESOS - nD`` row, where side gives
        the role (buy places cash, sell takes it), quantity the principal and
        price the TNA; or an explicit row with amount, rate, role and
        start/end dates.
        """
        try:
            symbol = _first(row, ("symbol",))
            if symbol is not None:
                info = parse_symbol(symbol)
                if not info.is_financing:
                    return NormalizationResult.skipped("trade row")
                return NormalizationResult.success_with_financing(self._traded_financing(row, info))

            return NormalizationResult.success_with_financing(self._explicit_financing(row))

        except DataQualityError as e:
            return NormalizationResult.error(str(e))

    def _traded_financing(self, row: dict[str, Any], info: SymbolInfo) -> FinancingTransaction:
        side = parse_side(_first(row, SIDE_FIELDS))
        traded_at = _timestamp(row)
        return FinancingTransaction.create(
            id=str(_first(row, ("id", "order_id")) or ""),
            instrument=info.instrument,
            principal=_positive_number(row, QUANTITY_FIELDS, "quantity"),
            rate=_positive_number(row, PRICE_FIELDS, "rate"),
            tenor_days=info.tenor_days,
            role=FinancingRole.LENDER if side == Side.BUY else FinancingRole.BORROWER,
            currency=str(row.get("currency") or self.default_currency).upper(),
            fee_amount=_optional_number(row, ("fee_amount", "feeAmount"), "fee_amount"),
            start=traded_at.date(),
            day_count_basis=self.day_count_basis,
        )

    def _explicit_financing(self, row: dict[str, Any]) -> FinancingTransaction:
        start = _first(row, ("start", "inicio"))
        end = _first(row, ("end", "fin"))
        if start is None or end is None:
            raise MissingDataError("Financing start and end dates are required", field_name="start")
        try:
            start_date, end_date = to_date(start), to_date(end)
        except ValueError:
            raise MalformedDataError(f"Unparseable financing dates: {start} / {end}")

        tenor = calendar_days_between(start_date, end_date)
        if tenor <= 0:
            raise MalformedDataError(f"Financing tenor must be positive, got {tenor}")

        principal = _positive_number(row, ("amount", "principal", "monto"), "amount")
        rate = _positive_number(row, ("rate", "tasa"), "rate")
        if _first(row, INTEREST_FIELDS) is None:
            interest = accrued_interest(principal, rate, tenor, self.day_count_basis)
        else:
            interest = _optional_number(row, INTEREST_FIELDS, "interest")

        return FinancingTransaction(
            id=str(_first(row, ("id",)) or ""),
            instrument=str(_first(row, ("instrument", "instrumento")) or ""),
            principal=principal,
            rate=rate,
            tenor_days=tenor,
            currency=str(_first(row, ("currency", "moneda")) or self.default_currency).upper(),
            role=parse_role(_first(row, ("role", "tipo"))),
            interest=interest,
            fee_amount=_optional_number(row, ("fee_amount", "feeAmount"), "fee_amount"),
            start=start_date,
            end=end_date,
        )

    def normalize_rows(self, rows: list[dict[str, Any]]) -> NormalizedBatch:
        """
        Adapt a mixed batch of trade and caución rows.

        Returns:
            Operations, financing transactions and rejected rows with reasons
        """
        batch = NormalizedBatch()

        for row in rows:
            if _is_financing_row(row):
                result = self.normalize_financing(row)
            else:
                result = self.normalize_operation(row)

            if not result.success:
                batch.rejected.append((row, result.error_msg))
            elif result.operation is not None:
                batch.operations.append(result.operation)
            elif result.financing is not None:
                batch.financing.append(result.financing)

        if batch.rejected:
            logger.warning(
                "Rejected malformed rows",
                rejected=len(batch.rejected),
                accepted=len(batch.operations) + len(batch.financing),
            )

        logger.info(
            "Normalized rows",
            operations=len(batch.operations),
            financing=len(batch.financing),
            rejected=len(batch.rejected),
        )
        return batch
