"""Budget change records."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar
from uuid import UUID

from portfolio_kernel.domain.changes import ChangeKind, ChangeRecord
from portfolio_kernel.domain.values import Money


@dataclass(frozen=True)
class BudgetCreated(ChangeRecord):
    kind: ClassVar[ChangeKind] = ChangeKind.BUDGET_CREATED

    project_id: UUID
    category: str
    allocated_amount: Money


@dataclass(frozen=True)
class ExpenseAdded(ChangeRecord):
    kind: ClassVar[ChangeKind] = ChangeKind.EXPENSE_ADDED

    project_id: UUID
    category: str
    amount: Money
    new_spent_amount: Money
    description: str


@dataclass(frozen=True)
class ExpenseRemoved(ChangeRecord):
    kind: ClassVar[ChangeKind] = ChangeKind.EXPENSE_REMOVED

    project_id: UUID
    category: str
    amount: Money
    new_spent_amount: Money
    reason: str


@dataclass(frozen=True)
class BudgetAllocationUpdated(ChangeRecord):
    kind: ClassVar[ChangeKind] = ChangeKind.BUDGET_ALLOCATION_UPDATED

    project_id: UUID
    category: str
    old_amount: Money
    new_amount: Money
    reason: str


@dataclass(frozen=True)
class BudgetExceeded(ChangeRecord):
    """Spent moved above allocated. ``variance`` is spent minus allocated."""

    kind: ClassVar[ChangeKind] = ChangeKind.BUDGET_EXCEEDED

    project_id: UUID
    category: str
    allocated_amount: Money
    spent_amount: Money
    variance: Money


@dataclass(frozen=True)
class BudgetNearingLimit(ChangeRecord):
    kind: ClassVar[ChangeKind] = ChangeKind.BUDGET_NEARING_LIMIT

    project_id: UUID
    category: str
    allocated_amount: Money
    spent_amount: Money
    utilization_percentage: Decimal


@dataclass(frozen=True)
class BudgetFrozen(ChangeRecord):
    kind: ClassVar[ChangeKind] = ChangeKind.BUDGET_FROZEN

    project_id: UUID
    category: str
    reason: str


@dataclass(frozen=True)
class BudgetUnfrozen(ChangeRecord):
    kind: ClassVar[ChangeKind] = ChangeKind.BUDGET_UNFROZEN

    project_id: UUID
    category: str
    reason: str


@dataclass(frozen=True)
class BudgetClosed(ChangeRecord):
    """Terminal record carrying the final allocated/spent snapshot."""

    kind: ClassVar[ChangeKind] = ChangeKind.BUDGET_CLOSED

    project_id: UUID
    category: str
    final_allocated_amount: Money
    final_spent_amount: Money
    reason: str
