"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_broker_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate broker API parameters."""
        errors = []

        if "base_url" in params:
            value = params["base_url"]
            parsed = urlparse(value) if isinstance(value, str) else None
            if parsed is None or parsed.scheme not in ("http", "https") or not parsed.netloc:
                errors.append(ValidationError(
                    field="base_url",
                    message="Must be an absolute http(s) URL",
                    value=value
                ))

        if "verify_tls" in params:
            value = params["verify_tls"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="verify_tls",
                    message="Must be a boolean",
                    value=value
                ))

        if "timeout_ms" in params:
            value = params["timeout_ms"]
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                errors.append(ValidationError(
                    field="timeout_ms",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_trade_log_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate trade history parameters."""
        errors = []

        if "path" in params:
            value = params["path"]
            if not isinstance(value, str) or not value.strip():
                errors.append(ValidationError(
                    field="path",
                    message="Must be a non-empty path",
                    value=value
                ))

        if "indent" in params:
            value = params["indent"]
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                errors.append(ValidationError(
                    field="indent",
                    message="Must be a non-negative integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_order_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate order default parameters."""
        errors = []

        if "default_quantity" in params:
            value = params["default_quantity"]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                errors.append(ValidationError(
                    field="default_quantity",
                    message="Must be a positive number",
                    value=value
                ))

        if "default_conid" in params:
            value = params["default_conid"]
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                errors.append(ValidationError(
                    field="default_conid",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_contracts(contracts: dict[str, Any]) -> list[ValidationError]:
        """Validate the symbol to conid mapping."""
        errors = []

        for symbol, conid in contracts.items():
            if isinstance(conid, bool) or not isinstance(conid, int) or conid <= 0:
                errors.append(ValidationError(
                    field=f"contracts.{symbol}",
                    message="Must be a positive integer",
                    value=conid
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        for section in ("broker", "trade_log", "order"):
            if section in config and not isinstance(config[section], dict):
                errors.append(ValidationError(
                    field=section,
                    message="Must be a mapping",
                    value=config[section]
                ))
        if errors:
            return errors

        if "broker" in config:
            errors.extend(ConfigValidator.validate_broker_params(config["broker"]))

        if "trade_log" in config:
            errors.extend(ConfigValidator.validate_trade_log_params(config["trade_log"]))

        if "order" in config:
            errors.extend(ConfigValidator.validate_order_params(config["order"]))

        if "contracts" in config:
            if isinstance(config["contracts"], dict):
                errors.extend(ConfigValidator.validate_contracts(config["contracts"]))
            else:
                errors.append(ValidationError(
                    field="contracts",
                    message="Must be a mapping of symbol to conid",
                    value=config["contracts"]
                ))

        return errors
