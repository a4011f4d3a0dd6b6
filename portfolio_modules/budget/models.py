"""
Project Budget Aggregate (``portfolio_modules.budget.models``).

Responsibility
--------------
Tracks spend against an allocated amount for one project and one spending
category, gates mutations on the budget lifecycle, and emits one-time
threshold records when spend crosses the nearing-limit or exceeded
boundary.

Architecture position
---------------------
**Modules layer** -- pure in-memory aggregate, ZERO I/O. Status changes
are looked up in ``BUDGET_WORKFLOW``.

Invariants enforced
-------------------
* ``spent`` and ``allocated`` always share a currency.
* ``category`` is non-blank; ``allocated`` is positive at creation and on
  every reallocation.
* Expenses and reallocations only while ``ACTIVE``; ``CLOSED`` is terminal.
* Threshold crossings are evaluated against the pre-expense state so each
  crossing emits exactly one record.

Failure modes
-------------
* ``InvalidBudgetError`` -- blank category, non-positive amount, currency
  mismatch, removal larger than spend.
* ``BudgetStateError`` -- operation not permitted in the current status,
  including repeated freeze/unfreeze/close.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4

from portfolio_config.schema import BudgetRules
from portfolio_kernel.domain.aggregate import AggregateMetadata
from portfolio_kernel.domain.changes import ChangeQueue, ChangeRecord
from portfolio_kernel.domain.clock import Clock, SystemClock
from portfolio_kernel.domain.values import Money
from portfolio_kernel.exceptions import BudgetStateError, InvalidBudgetError
from portfolio_kernel.logging_config import get_logger
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
from portfolio_modules.budget.workflows import BUDGET_WORKFLOW

logger = get_logger("modules.budget.models")

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


class BudgetStatus(Enum):
    """Budget lifecycle states."""
    ACTIVE = "active"
    FROZEN = "frozen"
    CLOSED = "closed"


class Budget:
    """
    Spend tracking for one project category.

    Contract
    --------
    * Created ``ACTIVE`` with zero spend in the allocated currency.
    * Every successful mutation appends change records to ``changes``;
      failed operations leave state and queue untouched.
    """

    def __init__(
        self,
        project_id: UUID,
        category: str,
        allocated_amount: Money,
        notes: str = "",
        *,
        created_by: UUID | None = None,
        budget_id: UUID | None = None,
        clock: Clock | None = None,
        rules: BudgetRules | None = None,
    ):
        if not isinstance(category, str) or not category.strip():
            raise InvalidBudgetError("Budget category cannot be null or empty.", budget_id)
        if not isinstance(allocated_amount, Money):
            raise InvalidBudgetError("Allocated amount must be Money.", budget_id)
        if not allocated_amount.is_positive:
            raise InvalidBudgetError("Allocated amount must be greater than zero.", budget_id)

        self._clock = clock or SystemClock()
        self._rules = rules or BudgetRules()
        now = self._clock.now_utc()
        self._meta = AggregateMetadata(
            created_at=now, created_by=created_by, id=budget_id or uuid4()
        )
        self._changes = ChangeQueue()
        self._project_id = project_id
        self._category = category.strip()
        self._allocated = allocated_amount
        self._spent = Money.zero(allocated_amount.currency)
        self._notes = notes or ""
        self._status = BudgetStatus(BUDGET_WORKFLOW.initial_state)

        self._changes.append(BudgetCreated(
            aggregate_id=self.id,
            occurred_at=now,
            project_id=project_id,
            category=self._category,
            allocated_amount=allocated_amount,
        ))
        logger.info("budget_created", extra={
            "budget_id": str(self.id),
            "project_id": str(project_id),
            "category": self._category,
            "allocated": str(allocated_amount),
        })

    @classmethod
    def create(
        cls,
        project_id: UUID,
        category: str,
        allocated_amount: Money,
        notes: str = "",
        **kwargs,
    ) -> Budget:
        return cls(project_id, category, allocated_amount, notes, **kwargs)

    # =========================================================================
    # State
    # =========================================================================

    @property
    def id(self) -> UUID:
        return self._meta.id

    @property
    def project_id(self) -> UUID:
        return self._project_id

    @property
    def category(self) -> str:
        return self._category

    @property
    def allocated(self) -> Money:
        return self._allocated

    @property
    def spent(self) -> Money:
        return self._spent

    @property
    def currency(self) -> str:
        return self._allocated.currency

    @property
    def status(self) -> BudgetStatus:
        return self._status

    @property
    def notes(self) -> str:
        return self._notes

    @property
    def metadata(self) -> AggregateMetadata:
        return self._meta

    @property
    def created_at(self) -> datetime:
        return self._meta.created_at

    @property
    def last_updated_at(self) -> datetime | None:
        return self._meta.updated_at

    @property
    def changes(self) -> ChangeQueue:
        return self._changes

    def drain_changes(self) -> tuple[ChangeRecord, ...]:
        return self._changes.drain()

    def clear_changes(self) -> None:
        self._changes.clear()

    # =========================================================================
    # Derived
    # =========================================================================

    @property
    def remaining(self) -> Money:
        return self._allocated - self._spent

    @property
    def variance(self) -> Money:
        """Spent minus allocated; positive when over budget."""
        return self._spent - self._allocated

    @property
    def variance_percentage(self) -> Decimal:
        return self._spent.variance_percentage(self._allocated)

    @property
    def is_over_budget(self) -> bool:
        return self._spent > self._allocated

    @property
    def is_exhausted(self) -> bool:
        return self._spent >= self._allocated

    @property
    def utilization_percentage(self) -> Decimal:
        """Spent as a percentage of allocated, capped. 0 when allocated is 0."""
        return self._utilization(self._spent, self._allocated)

    @property
    def is_nearing_limit(self) -> bool:
        return self.utilization_percentage >= self._rules.nearing_limit_percentage

    def can_accommodate(self, amount: Money) -> bool:
        """True iff active, same currency, and spend would stay within allocation."""
        if not self._spent.same_currency(amount):
            return False
        return self._status is BudgetStatus.ACTIVE and self._spent + amount <= self._allocated

    def projected_variance(self, additional: Money) -> Money:
        """Variance after a further ``additional`` spend."""
        if not self._spent.same_currency(additional):
            raise InvalidBudgetError(
                "Additional expenses currency does not match budget currency.", self.id
            )
        return self._spent + additional - self._allocated

    def _utilization(self, spent: Money, allocated: Money) -> Decimal:
        if allocated.is_zero:
            return _ZERO
        return min(spent.amount / allocated.amount * _HUNDRED, self._rules.utilization_cap_percentage)

    # =========================================================================
    # Mutations
    # =========================================================================

    def add_expense(
        self,
        amount: Money,
        description: str = "",
        *,
        actor: UUID | None = None,
    ) -> None:
        """
        Record spend.

        Emits ``ExpenseAdded``; ``BudgetExceeded`` when this expense moves
        the budget from within to over allocation; ``BudgetNearingLimit``
        when utilization moves from below to at or above the nearing-limit
        threshold and the budget was not already over.
        """
        self._require_active("add expense to")
        self._require_amount(amount, "Expense")

        was_over = self.is_over_budget
        was_nearing = self.is_nearing_limit

        self._spent = self._spent + amount
        now = self._touch(actor)

        self._changes.append(ExpenseAdded(
            aggregate_id=self.id,
            occurred_at=now,
            project_id=self._project_id,
            category=self._category,
            amount=amount,
            new_spent_amount=self._spent,
            description=description,
        ))
        logger.info("budget_expense_added", extra={
            "budget_id": str(self.id),
            "amount": str(amount),
            "spent": str(self._spent),
        })

        if not was_over and self.is_over_budget:
            self._emit_exceeded(now)

        if not was_over and not was_nearing and self.is_nearing_limit:
            utilization = self.utilization_percentage
            self._changes.append(BudgetNearingLimit(
                aggregate_id=self.id,
                occurred_at=now,
                project_id=self._project_id,
                category=self._category,
                allocated_amount=self._allocated,
                spent_amount=self._spent,
                utilization_percentage=utilization,
            ))
            logger.warning("budget_nearing_limit", extra={
                "budget_id": str(self.id),
                "utilization_percentage": str(utilization),
            })

    def remove_expense(
        self,
        amount: Money,
        reason: str = "",
        *,
        actor: UUID | None = None,
    ) -> None:
        """Reverse spend (refund or correction). Cannot go below zero spend."""
        self._require_active("remove expense from")
        self._require_amount(amount, "Expense")
        if amount > self._spent:
            raise InvalidBudgetError("Cannot remove more than the total spent amount.", self.id)

        self._spent = self._spent - amount
        now = self._touch(actor)

        self._changes.append(ExpenseRemoved(
            aggregate_id=self.id,
            occurred_at=now,
            project_id=self._project_id,
            category=self._category,
            amount=amount,
            new_spent_amount=self._spent,
            reason=reason,
        ))
        logger.info("budget_expense_removed", extra={
            "budget_id": str(self.id),
            "amount": str(amount),
            "spent": str(self._spent),
        })

    def update_allocation(
        self,
        new_amount: Money,
        reason: str = "",
        *,
        actor: UUID | None = None,
    ) -> None:
        """Replace the allocated amount. Emits ``BudgetExceeded`` if still over."""
        self._require_active("update allocation of")
        self._require_amount(new_amount, "Allocated")

        old = self._allocated
        self._allocated = new_amount
        now = self._touch(actor)

        self._changes.append(BudgetAllocationUpdated(
            aggregate_id=self.id,
            occurred_at=now,
            project_id=self._project_id,
            category=self._category,
            old_amount=old,
            new_amount=new_amount,
            reason=reason,
        ))
        logger.info("budget_allocation_updated", extra={
            "budget_id": str(self.id),
            "old_amount": str(old),
            "new_amount": str(new_amount),
        })

        if self.is_over_budget:
            self._emit_exceeded(now)

    def freeze(self, reason: str = "", *, actor: UUID | None = None) -> None:
        self._transition("freeze", actor)
        self._changes.append(BudgetFrozen(
            aggregate_id=self.id,
            occurred_at=self._meta.last_modified_at,
            project_id=self._project_id,
            category=self._category,
            reason=reason,
        ))

    def unfreeze(self, reason: str = "", *, actor: UUID | None = None) -> None:
        self._transition("unfreeze", actor)
        self._changes.append(BudgetUnfrozen(
            aggregate_id=self.id,
            occurred_at=self._meta.last_modified_at,
            project_id=self._project_id,
            category=self._category,
            reason=reason,
        ))

    def close(self, reason: str = "", *, actor: UUID | None = None) -> None:
        """Terminal. Records the final allocated and spent amounts."""
        self._transition("close", actor)
        self._changes.append(BudgetClosed(
            aggregate_id=self.id,
            occurred_at=self._meta.last_modified_at,
            project_id=self._project_id,
            category=self._category,
            final_allocated_amount=self._allocated,
            final_spent_amount=self._spent,
            reason=reason,
        ))

    def update_notes(self, notes: str, *, actor: UUID | None = None) -> None:
        if BUDGET_WORKFLOW.is_terminal(self._status.value):
            raise BudgetStateError(self.id, "update notes of", self._status.value)
        self._notes = notes or ""
        self._touch(actor)

    # =========================================================================
    # Internals
    # =========================================================================

    def _transition(self, action: str, actor: UUID | None) -> None:
        transition = BUDGET_WORKFLOW.transition_for(self._status.value, action)
        if transition is None:
            raise BudgetStateError(self.id, action, self._status.value)
        old_status = self._status
        self._status = BudgetStatus(transition.to_state)
        self._touch(actor)
        logger.info("budget_status_changed", extra={
            "budget_id": str(self.id),
            "action": action,
            "from_status": old_status.value,
            "to_status": self._status.value,
        })

    def _require_active(self, action: str) -> None:
        if self._status is not BudgetStatus.ACTIVE:
            raise BudgetStateError(self.id, action, self._status.value)

    def _require_amount(self, amount: Money, label: str) -> None:
        if not isinstance(amount, Money):
            raise InvalidBudgetError(f"{label} amount must be Money.", self.id)
        if not self._allocated.same_currency(amount):
            raise InvalidBudgetError(
                f"{label} currency {amount.currency} does not match budget currency "
                f"{self._allocated.currency}.",
                self.id,
            )
        if not amount.is_positive:
            raise InvalidBudgetError(f"{label} amount must be greater than zero.", self.id)

    def _emit_exceeded(self, at: datetime) -> None:
        self._changes.append(BudgetExceeded(
            aggregate_id=self.id,
            occurred_at=at,
            project_id=self._project_id,
            category=self._category,
            allocated_amount=self._allocated,
            spent_amount=self._spent,
            variance=self.variance,
        ))
        logger.warning("budget_exceeded", extra={
            "budget_id": str(self.id),
            "allocated": str(self._allocated),
            "spent": str(self._spent),
            "variance": str(self.variance),
        })

    def _touch(self, actor: UUID | None) -> datetime:
        now = self._clock.now_utc()
        self._meta.touch(now, actor)
        return now

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Budget):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return (
            f"Budget(id={self.id}, category={self._category!r}, "
            f"allocated={self._allocated}, spent={self._spent}, "
            f"status={self._status.value})"
        )
