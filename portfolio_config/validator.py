"""
Configuration Validator (``portfolio_config.validator``).

Responsibility
--------------
Checks a parsed ``PortfolioConfiguration`` for values that would make the
allocation or budget rules meaningless (negative limits, a capacity above
the per-allocation ceiling, thresholds outside 0-100).

Failure modes
-------------
* Validation errors (``ConfigValidationResult.errors``)  -> the
  configuration MUST NOT be used.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from portfolio_config.schema import PortfolioConfiguration
from portfolio_kernel.exceptions import ConfigurationError

_HUNDRED = Decimal("100")


@dataclass
class ConfigValidationResult:
    """
    Result of configuration validation.

    ``is_valid`` returns ``True`` only when ``errors`` is empty.
    """

    errors: list[ConfigurationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, field_path: str, reason: str) -> None:
        self.errors.append(ConfigurationError(field_path, reason))


def validate_configuration(config: PortfolioConfiguration) -> ConfigValidationResult:
    """Validate every rule section and collect all errors."""
    result = ConfigValidationResult()
    alloc = config.allocation
    budget = config.budget

    if config.version < 1:
        result.add_error("version", "must be at least 1")

    if alloc.max_percentage <= 0:
        result.add_error("allocation.max_percentage", "must be positive")
    if alloc.full_capacity_percentage <= 0:
        result.add_error("allocation.full_capacity_percentage", "must be positive")
    elif alloc.full_capacity_percentage > alloc.max_percentage:
        result.add_error(
            "allocation.full_capacity_percentage",
            "cannot exceed allocation.max_percentage",
        )
    for name in ("max_lookback_years", "max_horizon_years", "max_duration_days", "max_role_length"):
        if getattr(alloc, name) < 1:
            result.add_error(f"allocation.{name}", "must be at least 1")
    if not (0 < alloc.standard_hours_per_day <= 24):
        result.add_error("allocation.standard_hours_per_day", "must be within (0, 24]")
    if alloc.standard_hours_per_week <= 0:
        result.add_error("allocation.standard_hours_per_week", "must be positive")

    if not (0 < budget.nearing_limit_percentage <= _HUNDRED):
        result.add_error("budget.nearing_limit_percentage", "must be within (0, 100]")
    if budget.utilization_cap_percentage < budget.nearing_limit_percentage:
        result.add_error(
            "budget.utilization_cap_percentage",
            "cannot be below budget.nearing_limit_percentage",
        )

    return result
