"""
Configuration loading for fundman.

This module loads the holdings list from a YAML (or JSON) file and
resolves runtime settings from defaults, the config file, a .env file
and FUNDMAN_* environment variables.
"""

import os
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import dotenv_values

from fundman.models import Holding
from fundman.data.fetcher import DEFAULT_MAX_ATTEMPTS
from fundman.data.providers.jd_provider import DEFAULT_BASE_URL
from fundman.scheduler import DEFAULT_INTERVAL


DEFAULT_CONFIG_FILE = Path.cwd() / "config.yaml"
DEFAULT_ENV_FILE = Path.cwd() / ".env"

ENV_PREFIX = "FUNDMAN_"

# Legacy config.json keys from the original tool
_HOLDING_ALIASES = {
    "code": "identifier",
    "name": "display_name",
    "cost": "unit_cost",
    "holdings": "units_held",
}


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


@dataclass
class Settings:
    """
    Runtime settings.

    Attributes:
        base_url: Valuation endpoint prefix
        interval: Seconds between refresh cycles
        max_attempts: Fetch attempts per holding per cycle
        request_timeout: HTTP timeout per attempt, in seconds
        log_level: Root logging level name
        log_file: Optional log file path
    """
    base_url: str = DEFAULT_BASE_URL
    interval: float = DEFAULT_INTERVAL
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    request_timeout: float = 10.0
    log_level: str = "INFO"
    log_file: Optional[str] = None


def _read_yaml(config_path: Path) -> Any:
    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}")


def load_settings(
    config_path: str | Path | None = None,
    env_file: str | Path | None = None,
) -> Settings:
    """
    Resolve runtime settings.

    Sources are applied in this order (later sources override earlier):
    1. Built-in defaults
    2. ``settings`` mapping in the config file
    3. .env file (FUNDMAN_* keys)
    4. Environment variables (FUNDMAN_* keys)

    Args:
        config_path: Holdings/config file; its ``settings`` mapping is optional
        env_file: Path to .env file (defaults to ./.env)

    Returns:
        Validated Settings

    Raises:
        ConfigurationError: If a value is invalid
    """
    raw: dict[str, Any] = {}

    if config_path is not None:
        data = _read_yaml(Path(config_path))
        if isinstance(data, dict):
            file_settings = data.get("settings") or {}
            if not isinstance(file_settings, dict):
                raise ConfigurationError("'settings' must be a mapping")
            raw.update(file_settings)

    env_path = Path(env_file) if env_file else DEFAULT_ENV_FILE
    if env_path.exists():
        raw.update(_prefixed(dotenv_values(env_path)))

    raw.update(_prefixed(os.environ))

    return _parse_settings(raw)


def _prefixed(values) -> dict[str, Any]:
    """Pick FUNDMAN_* keys and strip the prefix."""
    return {
        key[len(ENV_PREFIX):].lower(): value
        for key, value in values.items()
        if key.startswith(ENV_PREFIX) and value is not None
    }


def _parse_settings(raw: dict[str, Any]) -> Settings:
    defaults = Settings()
    log_file = raw.get("log_file", defaults.log_file)
    return Settings(
        base_url=str(raw.get("base_url", defaults.base_url)),
        interval=float(_parse_decimal(
            raw.get("interval", defaults.interval), "interval", min_val=Decimal("0.1"),
        )),
        max_attempts=_parse_positive_int(raw.get("max_attempts", defaults.max_attempts), "max_attempts"),
        request_timeout=float(_parse_decimal(
            raw.get("request_timeout", defaults.request_timeout), "request_timeout", min_val=Decimal("0.1"),
        )),
        log_level=str(raw.get("log_level", defaults.log_level)).upper(),
        log_file=str(log_file) if log_file else None,
    )


def load_holdings(config_path: str | Path) -> list[Holding]:
    """
    Load the holding list from a YAML or JSON file.

    The file contains either a list of holdings or a mapping with a
    ``holdings`` list. Each entry needs an identifier, unit cost and
    units held; the original tool's keys (code, name, cost, holdings)
    are accepted as aliases.

    Args:
        config_path: Path to the file

    Returns:
        Holdings in file order (duplicates are kept)

    Raises:
        ConfigurationError: If the file cannot be loaded or is invalid
    """
    data = _read_yaml(Path(config_path))

    if isinstance(data, dict):
        data = data.get("holdings")

    if not isinstance(data, list):
        raise ConfigurationError("Configuration must contain a list of holdings")

    return [_parse_holding(entry, index) for index, entry in enumerate(data)]


def _parse_holding(entry: Any, index: int) -> Holding:
    """
    Parse and validate one holding entry.

    Raises:
        ConfigurationError: If required fields are missing or invalid
    """
    if not isinstance(entry, dict):
        raise ConfigurationError(f"Holding #{index} must be a mapping")

    raw = {_HOLDING_ALIASES.get(key, key): value for key, value in entry.items()}

    for field_name in ("identifier", "unit_cost", "units_held"):
        if raw.get(field_name) in (None, ""):
            raise ConfigurationError(f"Holding #{index} is missing required field: {field_name}")

    acquired_at = raw.get("acquired_at")

    return Holding(
        identifier=str(raw["identifier"]).strip(),
        display_name=str(raw.get("display_name") or ""),
        unit_cost=_parse_decimal(raw["unit_cost"], f"holding #{index} unit_cost", min_val=Decimal("0")),
        units_held=_parse_decimal(raw["units_held"], f"holding #{index} units_held", min_val=Decimal("0")),
        acquired_at=_parse_datetime(acquired_at, f"holding #{index} acquired_at") if acquired_at else None,
    )


def _parse_datetime(value: Any, field_name: str) -> datetime:
    """
    Parse a datetime value from a date, datetime or ISO string.

    Raises:
        ConfigurationError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            pass

    raise ConfigurationError(
        f"Invalid date format for {field_name}: {value}. Expected YYYY-MM-DD"
    )


def _parse_decimal(
    value: Any,
    field_name: str,
    min_val: Decimal | None = None,
    max_val: Decimal | None = None,
) -> Decimal:
    """
    Parse a decimal value with optional range validation.

    Raises:
        ConfigurationError: If the value is invalid or out of range
    """
    try:
        decimal_value = Decimal(str(value))
    except Exception:
        raise ConfigurationError(f"Invalid decimal value for {field_name}: {value}")

    if not decimal_value.is_finite():
        raise ConfigurationError(f"Invalid decimal value for {field_name}: {value}")

    if min_val is not None and decimal_value < min_val:
        raise ConfigurationError(
            f"{field_name} must be >= {min_val}, got {decimal_value}"
        )

    if max_val is not None and decimal_value > max_val:
        raise ConfigurationError(
            f"{field_name} must be <= {max_val}, got {decimal_value}"
        )

    return decimal_value


def _parse_positive_int(value: Any, field_name: str) -> int:
    try:
        int_value = int(str(value))
    except ValueError:
        raise ConfigurationError(f"Invalid integer value for {field_name}: {value}")
    if int_value < 1:
        raise ConfigurationError(f"{field_name} must be >= 1, got {int_value}")
    return int_value
