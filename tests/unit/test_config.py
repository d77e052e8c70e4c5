"""Unit tests for configuration management."""

import pytest
from pathlib import Path

from plazo_app.config import ConfigLoader, build_config, get_default_config, load_engine_config
from plazo_app.config.validation import ConfigValidator
from plazo_app.errors import ConfigurationError


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_default_config_creation(self) -> None:
        """Test that default configuration can be created."""
        config = get_default_config()
        assert config.market.market_id == "BYMA"
        assert config.market.settlement_offset_days == 1
        assert config.financing.day_count_basis == 365
        assert config.fees.vat_pct == 0.21
        assert config.engine.max_workers == 1
        assert config.engine.strict_finite_checks is True


class TestConfigLoader:
    """Test suite for configuration loader."""

    def test_config_loader_creation(self) -> None:
        """Test that ConfigLoader can be created."""
        loader = ConfigLoader.create()
        assert isinstance(loader.config_dir, Path)
        assert (loader.config_dir / "markets.yaml").exists()

    def test_market_holidays_loaded(self) -> None:
        """Holidays from markets.yaml are merged as ISO strings."""
        config = ConfigLoader.create().merge_config("BYMA")

        assert "2025-12-25" in config["market"]["holidays"]
        assert config["market"]["market_id"] == "BYMA"

    def test_unknown_market_uses_defaults(self) -> None:
        """Markets missing from YAML keep the defaults."""
        config = ConfigLoader.create().merge_config("UNKNOWN")

        assert config["market"]["holidays"] == []
        assert config["market"]["settlement_offset_days"] == 1

    def test_merge_config_with_overrides(self) -> None:
        """Call overrides win over market and default values."""
        loader = ConfigLoader.create()
        overrides = {
            "market": {"settlement_offset_days": 2},
            "financing": {"day_count_basis": 360},
        }

        config = loader.merge_config("BYMA", overrides)

        assert config["market"]["settlement_offset_days"] == 2
        assert config["financing"]["day_count_basis"] == 360
        # Other values should remain
        assert config["financing"]["default_currency"] == "ARS"
        assert "2025-12-25" in config["market"]["holidays"]

    def test_load_builds_typed_config(self) -> None:
        config = ConfigLoader.create().load("BYMA")

        assert isinstance(config.market.holidays, tuple)
        assert "2025-05-01" in config.market.holidays

    def test_custom_config_dir(self, tmp_path: Path) -> None:
        """YAML is read from the given directory."""
        (tmp_path / "markets.yaml").write_text(
            "markets:\n"
            "  MAE:\n"
            "    settlement_offset_days: 2\n"
            "    holidays:\n"
            "      - 2025-10-20\n"
        )

        config = load_engine_config(tmp_path, market_id="MAE")

        assert config.market.market_id == "MAE"
        assert config.market.settlement_offset_days == 2
        assert config.market.holidays == ("2025-10-20",)

    def test_missing_yaml(self, tmp_path: Path) -> None:
        config = load_engine_config(tmp_path)

        assert config == get_default_config()


class TestConfigValidator:
    """Test suite for configuration validation."""

    def test_valid_defaults(self) -> None:
        loader = ConfigLoader.create()
        assert ConfigValidator.validate_config(loader.merge_config("BYMA")) == []

    def test_fee_rate_out_of_range(self) -> None:
        errors = ConfigValidator.validate_fee_params({"vat_pct": 21, "commission_pct": -0.1})

        assert {e.field for e in errors} == {"vat_pct", "commission_pct"}

    def test_day_count_basis(self) -> None:
        errors = ConfigValidator.validate_financing_params({"day_count_basis": 364})

        assert len(errors) == 1
        assert errors[0].value == 364

    def test_market_params(self) -> None:
        errors = ConfigValidator.validate_market_params({
            "settlement_offset_days": -1,
            "max_business_day_search": 0,
            "holidays": ["2025-13-01"],
        })

        assert [e.field for e in errors] == [
            "settlement_offset_days", "max_business_day_search", "holidays"
        ]

    def test_engine_params(self) -> None:
        errors = ConfigValidator.validate_engine_params({"max_workers": 0, "strict_finite_checks": "yes"})

        assert len(errors) == 2

    def test_build_config_raises(self) -> None:
        """Invalid merged configuration cannot be built."""
        with pytest.raises(ConfigurationError) as exc_info:
            build_config({"financing": {"day_count_basis": 100}})

        assert exc_info.value.errors[0].field == "day_count_basis"
        assert exc_info.value.recoverable is False
