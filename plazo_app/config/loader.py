"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError
from .defaults import (
    DefaultConfig,
    EngineParams,
    FeeParams,
    FinancingParams,
    MarketParams,
    get_default_config,
)
from .validation import ConfigValidator


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_market_config(self, market_id: str) -> dict[str, Any]:
        """Load market-specific overrides (holidays, settlement convention)."""
        markets_file = self.config_dir / "markets.yaml"

        if not markets_file.exists():
            return {}

        with open(markets_file) as f:
            markets_config = yaml.safe_load(f) or {}

        market = dict(markets_config.get("markets", {}).get(market_id, {}) or {})
        if "holidays" in market:
            market["holidays"] = [
                h.isoformat() if isinstance(h, date) else str(h)
                for h in market["holidays"] or []
            ]
        return market

    def merge_config(
        self,
        market_id: Optional[str] = None,
        overrides: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Call overrides (highest priority)
        2. Market-specific overrides from markets.yaml
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)

        if market_id is None:
            market_id = (overrides or {}).get("market", {}).get("market_id", config["market"]["market_id"])

        market_config = self.load_market_config(market_id)
        if market_config:
            config = self._deep_merge(config, {"market": {**market_config, "market_id": market_id}})

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load(
        self,
        market_id: Optional[str] = None,
        overrides: Optional[dict[str, Any]] = None
    ) -> DefaultConfig:
        """Merge, validate and build the typed configuration."""
        merged = self.merge_config(market_id, overrides)
        return build_config(merged)

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name, _field in obj.__dataclass_fields__.items():
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                elif isinstance(value, tuple):
                    result[field_name] = list(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def build_config(config: dict[str, Any]) -> DefaultConfig:
    """Build a typed configuration from a merged dict, validating first."""
    errors = ConfigValidator.validate_config(config)
    if errors:
        raise ConfigurationError(
            "Invalid configuration: " + "; ".join(
                f"{err.field}: {err.message} (got: {err.value})" for err in errors
            ),
            errors=errors,
        )

    market = dict(config.get("market", {}))
    if "holidays" in market:
        market["holidays"] = tuple(str(h) for h in market["holidays"])

    return DefaultConfig(
        market=MarketParams(**market),
        financing=FinancingParams(**config.get("financing", {})),
        fees=FeeParams(**config.get("fees", {})),
        engine=EngineParams(**config.get("engine", {})),
    )


def load_engine_config(
    config_dir: Optional[Path] = None,
    market_id: Optional[str] = None,
    overrides: Optional[dict[str, Any]] = None
) -> DefaultConfig:
    """Convenience wrapper: load configuration from ``config_dir``."""
    return ConfigLoader.create(config_dir).load(market_id, overrides)
