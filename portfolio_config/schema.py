"""
Portfolio rule configuration schema.

Defines the typed form of the YAML rule files. The loader parses YAML
into these frozen dataclasses; aggregates consume them. Defaults equal
the bundled ``sets/default.yaml`` so aggregates built without an
explicit configuration follow the standard rules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class AllocationRules:
    """Capacity and lifecycle limits for resource allocations."""

    max_percentage: Decimal = Decimal("200")
    full_capacity_percentage: Decimal = Decimal("100")
    max_lookback_years: int = 1
    max_horizon_years: int = 5
    max_duration_days: int = 730
    max_role_length: int = 100
    standard_hours_per_day: Decimal = Decimal("8")
    standard_hours_per_week: Decimal = Decimal("40")


@dataclass(frozen=True)
class BudgetRules:
    """Threshold settings for budget notifications."""

    nearing_limit_percentage: Decimal = Decimal("90")
    utilization_cap_percentage: Decimal = Decimal("100")


@dataclass(frozen=True)
class PortfolioConfiguration:
    """A complete, versioned rule set."""

    config_id: str
    version: int
    allocation: AllocationRules = field(default_factory=AllocationRules)
    budget: BudgetRules = field(default_factory=BudgetRules)
    description: str = ""
    checksum: str = ""
