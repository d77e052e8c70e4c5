"""
Centralized logging configuration for the arbitrage engine.

All components log through structlog so that matching decisions, degraded
financing and rejected records carry the same structured context
(instrument, tenor, pattern) regardless of where they are emitted. Run-level
context such as the trading day is bound with ``structlog.contextvars`` and
merged into every event.
"""
import logging
import sys
from typing import IO, TYPE_CHECKING, Any, Optional

import structlog
from structlog.types import EventDict, FilteringBoundLogger

if TYPE_CHECKING:
    from ..models.results import PatternResult

MONEY_FIELDS = frozenset({
    "trade_pnl",
    "financing_pnl",
    "total_pnl",
    "principal",
    "accrued_interest",
    "financing_fees",
})


def round_money_fields(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Round P&L and amount fields to cents for readable output."""
    for key in MONEY_FIELDS.intersection(event_dict):
        value = event_dict[key]
        if isinstance(value, float):
            event_dict[key] = round(value, 2)
    return event_dict


def _build_processors(
    format_json: bool,
    include_timestamp: bool,
    include_caller: bool,
    extra_processors: Optional[list],
    colors: bool,
) -> list:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        round_money_fields,
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.MODULE,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    processors.extend(extra_processors or [])

    if format_json:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colors))
    return processors


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Configure structlog for the engine and its callers.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: Emit JSON lines instead of console output
        include_timestamp: Add a UTC ISO timestamp to each event
        include_caller: Add module and line number to each event
        extra_processors: Processors inserted before the renderer
        stream: Output stream, stdout when None
    """
    output = stream or sys.stdout

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        stream=output,
        format="%(message)s",
        force=True,
    )

    structlog.configure(
        processors=_build_processors(
            format_json,
            include_timestamp,
            include_caller,
            extra_processors,
            colors=output.isatty(),
        ),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_matching_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound to the matching subsystem.

    Pattern evaluation events carry ``subsystem="matching"`` so they can be
    separated from adapter and configuration noise.
    """
    logger = get_logger(name)

    return logger.bind(
        subsystem="matching",
        audit_trail=True
    )


def log_pattern_result(
    logger: FilteringBoundLogger,
    result: "PatternResult",
) -> None:
    """
    Log one pattern outcome with standardized fields.

    Args:
        logger: Structlog logger instance
        result: Evaluated pattern result
    """
    bound_logger = logger.bind(
        instrument=result.instrument,
        tenor=result.tenor,
        pattern=result.pattern.value,
        status=result.status.value,
        matched_quantity=result.matched_quantity,
        trade_pnl=result.trade_pnl,
        financing_pnl=result.financing_pnl,
        total_pnl=result.total_pnl,
        principal=result.principal,
        financing_fees=result.financing_fees,
    )

    if result.matched_quantity == 0:
        bound_logger.warning("Pattern has no counterparty")
    else:
        bound_logger.info("Pattern evaluated")
