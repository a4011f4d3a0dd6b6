"""
Portfolio Modules.

Aggregates built on the Portfolio Kernel. Each module contains:
- Domain models (the aggregate and its status enum)
- Change records (tagged variants appended to the aggregate's queue)
- Workflows (state machines)

Modules:
- Allocation: a person's percentage commitment to a project over a period,
  with pairwise conflict detection across overlapping allocations
- Budget: per-project, per-category spend tracked against an allocation,
  with threshold-crossing notifications
"""

from portfolio_modules import allocation, budget

__all__ = [
    "allocation",
    "budget",
]
