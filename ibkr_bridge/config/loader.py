"""Configuration loader with 3-tier parameter precedence."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError
from .defaults import (
    BrokerApiConfig,
    DefaultConfig,
    OrderDefaults,
    TradeLogConfig,
    get_default_config,
)
from .validation import ConfigValidator

# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "IBKR_API_BASE_URL": ("broker", "base_url"),
    "IBKR_VERIFY_TLS": ("broker", "verify_tls"),
    "IBKR_TIMEOUT_MS": ("broker", "timeout_ms"),
    "TRADE_LOG_FILE": ("trade_log", "path"),
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class BridgeSettings:
    """Resolved runtime settings."""
    broker: BrokerApiConfig
    trade_log: TradeLogConfig
    order: OrderDefaults
    contracts: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_path: Optional[Path]
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_path: Optional[str] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        return cls(
            config_path=Path(config_path) if config_path else None,
            defaults=get_default_config(),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load the YAML configuration file, if one was given."""
        if self.config_path is None:
            return {}

        if not self.config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {self.config_path}",
                context={"path": str(self.config_path)}
            )

        try:
            with open(self.config_path, encoding="utf-8") as f:
                file_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in {self.config_path}: {e}",
                context={"path": str(self.config_path)}
            ) from e
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(
                f"Cannot read configuration file {self.config_path}: {e}",
                context={"path": str(self.config_path)}
            ) from e

        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"Configuration file must contain a mapping: {self.config_path}",
                context={"path": str(self.config_path)}
            )

        # An empty `contracts:` key parses as None
        if "contracts" in file_config and file_config["contracts"] is None:
            file_config.pop("contracts")

        return file_config

    def load_env_config(self, environ: Mapping[str, str]) -> dict[str, Any]:
        """Collect overrides from environment variables."""
        config: dict[str, Any] = {}

        for env_name, (section, key) in ENV_OVERRIDES.items():
            raw = environ.get(env_name)
            if raw is None or raw == "":
                continue
            config.setdefault(section, {})[key] = self._coerce_env_value(key, raw)

        return config

    def merge_config(self, environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Environment variables (highest priority)
        2. YAML configuration file
        3. Global defaults (lowest priority)
        """
        if environ is None:
            environ = os.environ

        config = self._dataclass_to_dict(self.defaults)
        config["contracts"] = {}

        config = self._deep_merge(config, self.load_file_config())
        config = self._deep_merge(config, self.load_env_config(environ))

        return config

    def load(self, environ: Optional[Mapping[str, str]] = None) -> BridgeSettings:
        """Merge, validate and build typed settings."""
        config = self.merge_config(environ)

        errors = ConfigValidator.validate_config(config)
        if errors:
            details = "; ".join(f"{err.field}: {err.message} (got: {err.value!r})" for err in errors)
            raise ConfigurationError(
                f"Invalid configuration: {details}",
                missing_fields=[err.field for err in errors]
            )

        try:
            return BridgeSettings(
                broker=BrokerApiConfig(**config["broker"]),
                trade_log=TradeLogConfig(**config["trade_log"]),
                order=OrderDefaults(**config["order"]),
                contracts={str(symbol): conid for symbol, conid in config["contracts"].items()},
            )
        except TypeError as e:
            # Unknown keys in a section
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @staticmethod
    def _coerce_env_value(key: str, raw: str) -> Any:
        """Convert an environment string to the type the setting expects."""
        if key == "verify_tls":
            lowered = raw.strip().lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
            return raw
        if key == "timeout_ms":
            try:
                return int(raw)
            except ValueError:
                return raw
        return raw

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
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
