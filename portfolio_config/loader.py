"""
Configuration Loader (``portfolio_config.loader``).

Responsibility
--------------
Loads a YAML rule file and parses it into typed
``portfolio_config.schema`` dataclass instances. The single public entry
point for runtime config is ``portfolio_config.get_active_config()``.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* Numeric rule values are parsed to ``Decimal`` -- NEVER ``float``.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing ``config_id`` or unparseable values  -> ``ConfigurationError``.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from portfolio_config.schema import AllocationRules, BudgetRules, PortfolioConfiguration
from portfolio_kernel.exceptions import ConfigurationError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_decimal(value: Any, field_path: str) -> Decimal:
    """Parse a Decimal from a YAML scalar (quoted string or int)."""
    if isinstance(value, bool) or isinstance(value, float):
        raise ConfigurationError(field_path, f"expected a quoted decimal, got {value!r}")
    try:
        d = Decimal(str(value))
    except InvalidOperation as e:
        raise ConfigurationError(field_path, f"not a decimal: {value!r}") from e
    if not d.is_finite():
        raise ConfigurationError(field_path, f"must be finite, got {value!r}")
    return d


def parse_int(value: Any, field_path: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(field_path, f"expected an integer, got {value!r}")
    return value


def parse_allocation_rules(data: dict[str, Any]) -> AllocationRules:
    """Parse ``AllocationRules``; absent keys keep their defaults."""
    defaults = AllocationRules()
    return AllocationRules(
        max_percentage=parse_decimal(
            data.get("max_percentage", defaults.max_percentage),
            "allocation.max_percentage",
        ),
        full_capacity_percentage=parse_decimal(
            data.get("full_capacity_percentage", defaults.full_capacity_percentage),
            "allocation.full_capacity_percentage",
        ),
        max_lookback_years=parse_int(
            data.get("max_lookback_years", defaults.max_lookback_years),
            "allocation.max_lookback_years",
        ),
        max_horizon_years=parse_int(
            data.get("max_horizon_years", defaults.max_horizon_years),
            "allocation.max_horizon_years",
        ),
        max_duration_days=parse_int(
            data.get("max_duration_days", defaults.max_duration_days),
            "allocation.max_duration_days",
        ),
        max_role_length=parse_int(
            data.get("max_role_length", defaults.max_role_length),
            "allocation.max_role_length",
        ),
        standard_hours_per_day=parse_decimal(
            data.get("standard_hours_per_day", defaults.standard_hours_per_day),
            "allocation.standard_hours_per_day",
        ),
        standard_hours_per_week=parse_decimal(
            data.get("standard_hours_per_week", defaults.standard_hours_per_week),
            "allocation.standard_hours_per_week",
        ),
    )


def parse_budget_rules(data: dict[str, Any]) -> BudgetRules:
    """Parse ``BudgetRules``; absent keys keep their defaults."""
    defaults = BudgetRules()
    return BudgetRules(
        nearing_limit_percentage=parse_decimal(
            data.get("nearing_limit_percentage", defaults.nearing_limit_percentage),
            "budget.nearing_limit_percentage",
        ),
        utilization_cap_percentage=parse_decimal(
            data.get("utilization_cap_percentage", defaults.utilization_cap_percentage),
            "budget.utilization_cap_percentage",
        ),
    )


def parse_configuration(data: dict[str, Any]) -> PortfolioConfiguration:
    """
    Parse a complete ``PortfolioConfiguration`` from a dict.

    Preconditions:
        - ``data`` must contain ``config_id``.
    Postconditions:
        - ``checksum`` is the SHA-256 of the canonical source dict.
    """
    if not data.get("config_id"):
        raise ConfigurationError("config_id", "is required")
    return PortfolioConfiguration(
        config_id=str(data["config_id"]),
        version=parse_int(data.get("version", 1), "version"),
        allocation=parse_allocation_rules(data.get("allocation") or {}),
        budget=parse_budget_rules(data.get("budget") or {}),
        description=str(data.get("description", "")),
        checksum=compute_checksum(data),
    )


def load_configuration(path: Path) -> PortfolioConfiguration:
    """Load and parse a configuration file."""
    return parse_configuration(load_yaml_file(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Postconditions:
        - Identical ``data`` always produces identical checksums
          (deterministic), regardless of key order.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
