"""Configuration validation utilities."""

from dataclasses import dataclass
from datetime import date
from typing import Any


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_fee_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate fee rates; every rate is a fraction in [0, 1]."""
        errors = []

        for name in (
            "commission_pct",
            "market_rights_pct",
            "vat_pct",
            "repo_commission_pct",
            "repo_market_rights_pct",
            "guarantee_pct",
        ):
            if name not in params:
                continue
            value = params[name]
            if not _is_number(value) or value < 0 or value > 1:
                errors.append(ValidationError(
                    field=name,
                    message="Must be a number between 0 and 1",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_market_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate market calendar parameters."""
        errors = []

        if "market_id" in params:
            value = params["market_id"]
            if not isinstance(value, str) or not value.strip():
                errors.append(ValidationError(
                    field="market_id",
                    message="Must be a non-empty string",
                    value=value
                ))

        if "settlement_offset_days" in params:
            value = params["settlement_offset_days"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                errors.append(ValidationError(
                    field="settlement_offset_days",
                    message="Must be a non-negative integer",
                    value=value
                ))

        if "max_business_day_search" in params:
            value = params["max_business_day_search"]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                errors.append(ValidationError(
                    field="max_business_day_search",
                    message="Must be a positive integer",
                    value=value
                ))

        if "holidays" in params:
            value = params["holidays"]
            if not isinstance(value, (list, tuple)):
                errors.append(ValidationError(
                    field="holidays",
                    message="Must be a list of ISO dates",
                    value=value
                ))
            else:
                for item in value:
                    if isinstance(item, date):
                        continue
                    try:
                        date.fromisoformat(str(item))
                    except ValueError:
                        errors.append(ValidationError(
                            field="holidays",
                            message="Must be a list of ISO dates",
                            value=item
                        ))

        return errors

    @staticmethod
    def validate_financing_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate financing accrual parameters."""
        errors = []

        if "default_currency" in params:
            value = params["default_currency"]
            if not isinstance(value, str) or not value.strip():
                errors.append(ValidationError(
                    field="default_currency",
                    message="Must be a non-empty currency code",
                    value=value
                ))

        if "day_count_basis" in params:
            value = params["day_count_basis"]
            if value not in (360, 365):
                errors.append(ValidationError(
                    field="day_count_basis",
                    message="Must be 360 or 365",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_engine_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate engine execution parameters."""
        errors = []

        if "max_workers" in params:
            value = params["max_workers"]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                errors.append(ValidationError(
                    field="max_workers",
                    message="Must be a positive integer",
                    value=value
                ))

        if "strict_finite_checks" in params:
            value = params["strict_finite_checks"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="strict_finite_checks",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "fees" in config:
            errors.extend(ConfigValidator.validate_fee_params(config["fees"]))

        if "market" in config:
            errors.extend(ConfigValidator.validate_market_params(config["market"]))

        if "financing" in config:
            errors.extend(ConfigValidator.validate_financing_params(config["financing"]))

        if "engine" in config:
            errors.extend(ConfigValidator.validate_engine_params(config["engine"]))

        return errors
