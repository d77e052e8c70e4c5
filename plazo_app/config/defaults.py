"""Default configuration parameters for the arbitrage engine."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class MarketParams:
    """Settlement calendar parameters."""
    market_id: str = "BYMA"
    settlement_offset_days: int = 1                  # Deferred venue settles T+N business days
    max_business_day_search: int = 14                # Days scanned for the next business day
    holidays: tuple[str, ...] = field(default_factory=tuple)  # ISO dates, merged from markets.yaml


@dataclass(frozen=True)
class FinancingParams:
    """Financing (caución) accrual parameters."""
    default_currency: str = "ARS"
    day_count_basis: int = 365


@dataclass(frozen=True)
class FeeParams:
    """Fee rates as fractions of notional (operations) or principal (financing)."""
    commission_pct: float = 0.0                      # Broker commission on trades
    market_rights_pct: float = 0.00001               # Market rights on trades
    vat_pct: float = 0.21                            # VAT applied on commission and rights
    repo_commission_pct: float = 0.0                 # Annualized broker commission on financing
    repo_market_rights_pct: float = 0.00045          # Annualized market rights on financing
    guarantee_pct: float = 0.0                       # Guarantee expense on financing principal


@dataclass(frozen=True)
class EngineParams:
    """Pipeline execution parameters."""
    max_workers: int = 1                             # 1 evaluates groups sequentially
    strict_finite_checks: bool = True                # Raise on non-finite P&L


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    market: MarketParams
    financing: FinancingParams
    fees: FeeParams
    engine: EngineParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        market=MarketParams(),
        financing=FinancingParams(),
        fees=FeeParams(),
        engine=EngineParams(),
    )
