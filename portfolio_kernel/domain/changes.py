"""
Change records -- the explicit outbox owned by each aggregate.

Responsibility:
    Defines the tagged base type for records emitted by mutating aggregate
    operations, and the append-only in-memory queue that holds them until
    the hosting system drains it after a successful persistence
    transaction.

Architecture position:
    Kernel > Domain -- pure, zero I/O. Aggregates append; they never
    deliver. Delivery and persistence belong to the host.

Invariants enforced:
    - Records are immutable (frozen dataclasses).
    - The queue only grows through ``append``; it shrinks only through
      ``drain`` or ``clear``.
    - Every concrete record class declares exactly one ``ChangeKind``.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import ClassVar
from uuid import UUID


class ChangeKind(str, Enum):
    """Tag for every change record variant."""

    # Resource allocation
    ALLOCATION_CREATED = "allocation_created"
    ALLOCATION_UPDATED = "allocation_updated"
    OVERALLOCATION_DETECTED = "overallocation_detected"
    ALLOCATION_EXTENDED = "allocation_extended"
    ALLOCATION_REDUCED = "allocation_reduced"
    ALLOCATION_ROLE_UPDATED = "allocation_role_updated"
    ALLOCATION_DEACTIVATED = "allocation_deactivated"
    ALLOCATION_REACTIVATED = "allocation_reactivated"

    # Budget
    BUDGET_CREATED = "budget_created"
    EXPENSE_ADDED = "expense_added"
    EXPENSE_REMOVED = "expense_removed"
    BUDGET_ALLOCATION_UPDATED = "budget_allocation_updated"
    BUDGET_EXCEEDED = "budget_exceeded"
    BUDGET_NEARING_LIMIT = "budget_nearing_limit"
    BUDGET_FROZEN = "budget_frozen"
    BUDGET_UNFROZEN = "budget_unfrozen"
    BUDGET_CLOSED = "budget_closed"


@dataclass(frozen=True)
class ChangeRecord:
    """
    Base for all change records.

    Contract:
        Subclasses set the class-level ``kind`` and add their own fields.
        ``aggregate_id`` identifies the emitting aggregate; ``occurred_at``
        comes from the aggregate's injected clock.
    """

    kind: ClassVar[ChangeKind]

    aggregate_id: UUID
    occurred_at: datetime


class ChangeQueue:
    """
    Append-only queue of change records owned by one aggregate instance.

    Guarantees:
        - ``pending`` is a read-only snapshot in append order.
        - ``drain()`` returns everything pending and leaves the queue empty.
    """

    def __init__(self) -> None:
        self._records: list[ChangeRecord] = []

    def append(self, record: ChangeRecord) -> None:
        self._records.append(record)

    @property
    def pending(self) -> tuple[ChangeRecord, ...]:
        return tuple(self._records)

    def drain(self) -> tuple[ChangeRecord, ...]:
        """Return all pending records and clear the queue."""
        drained = tuple(self._records)
        self._records.clear()
        return drained

    def clear(self) -> None:
        self._records.clear()

    def kinds(self) -> list[ChangeKind]:
        return [record.kind for record in self._records]

    def of_kind(self, kind: ChangeKind) -> list[ChangeRecord]:
        return [record for record in self._records if record.kind is kind]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ChangeRecord]:
        return iter(tuple(self._records))

    def __bool__(self) -> bool:
        return bool(self._records)
