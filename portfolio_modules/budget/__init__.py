"""
Project Budget Module (``portfolio_modules.budget``).

Responsibility
--------------
Spend-versus-allocation control for one project category, with one-time
nearing-limit and exceeded notifications and an
``active -> frozen -> closed`` lifecycle.

Architecture position
---------------------
**Modules layer** -- the ``Budget`` aggregate, its change records and
``BUDGET_WORKFLOW``. Depends only on ``portfolio_kernel`` and the
``BudgetRules`` thresholds from ``portfolio_config``.

Failure modes
-------------
* ``InvalidBudgetError`` -- malformed amount, category or currency.
* ``BudgetStateError`` -- operation not permitted in the current status.
"""

from portfolio_modules.budget.events import (
    BudgetAllocationUpdated,
    BudgetClosed,
    BudgetCreated,
    BudgetExceeded,
    BudgetFrozen,
    BudgetNearingLimit,
    BudgetUnfrozen,
    ExpenseAdded,
    ExpenseRemoved,
)
from portfolio_modules.budget.models import Budget, BudgetStatus
from portfolio_modules.budget.workflows import BUDGET_WORKFLOW

__all__ = [
    "BUDGET_WORKFLOW",
    "Budget",
    "BudgetAllocationUpdated",
    "BudgetClosed",
    "BudgetCreated",
    "BudgetExceeded",
    "BudgetFrozen",
    "BudgetNearingLimit",
    "BudgetStatus",
    "BudgetUnfrozen",
    "ExpenseAdded",
    "ExpenseRemoved",
]
