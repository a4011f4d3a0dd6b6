"""
Allocation Conflict Service (``portfolio_modules.allocation.service``).

Responsibility
--------------
Answers "does this allocation over-commit its person?" by pulling the
person's other active allocations from an injected lookup and running the
aggregate's pairwise conflict rule against them.

Architecture position
---------------------
**Modules layer** -- ZERO I/O of its own. The ``AllocationLookup``
collaborator is supplied by the hosting persistence layer; this package
only declares the protocol.

Failure modes
-------------
* Exceptions raised by the lookup propagate unchanged.

Concurrency
-----------
Results are only as consistent as the snapshot the lookup returns. Hosts
that create allocations concurrently must serialize creation per person.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Protocol
from uuid import UUID

from portfolio_config.schema import AllocationRules
from portfolio_kernel.domain.date_range import DateRange
from portfolio_kernel.logging_config import get_logger
from portfolio_modules.allocation.models import ResourceAllocation

logger = get_logger("modules.allocation.service")


class AllocationLookup(Protocol):
    """Collaborator query over persisted allocations."""

    def find_active_for_person(
        self,
        person_id: UUID,
        period: DateRange,
        exclude_id: UUID | None = None,
    ) -> Sequence[ResourceAllocation]:
        """Active allocations for ``person_id`` overlapping ``period``."""
        ...


@dataclass(frozen=True)
class AllocationConflict:
    """One over-committed pairing, described over its overlap window."""
    allocation_id: UUID
    other_allocation_id: UUID
    person_id: UUID
    overlap: DateRange
    combined_percentage: Decimal


class AllocationConflictService:
    """
    Conflict detection over a lookup snapshot.

    Contract:
        Stateless apart from its collaborators; every call re-queries the
        lookup.
    """

    def __init__(self, lookup: AllocationLookup, rules: AllocationRules | None = None):
        self._lookup = lookup
        self._rules = rules or AllocationRules()

    def find_conflicts(self, allocation: ResourceAllocation) -> list[AllocationConflict]:
        """Every allocation that pushes ``allocation``'s person above capacity."""
        if not allocation.is_active:
            return []

        candidates = self._lookup.find_active_for_person(
            allocation.person_id, allocation.period, exclude_id=allocation.id
        )
        conflicts = []
        for other in allocation.conflicts_in(candidates):
            overlap = allocation.period.get_overlap(other.period)
            if overlap is None:
                continue
            conflicts.append(AllocationConflict(
                allocation_id=allocation.id,
                other_allocation_id=other.id,
                person_id=allocation.person_id,
                overlap=overlap,
                combined_percentage=allocation.total_allocation_with(other),
            ))

        if conflicts:
            logger.warning("allocation_conflicts_found", extra={
                "allocation_id": str(allocation.id),
                "person_id": str(allocation.person_id),
                "conflict_count": len(conflicts),
            })
        return conflicts

    def is_conflicting(self, allocation: ResourceAllocation) -> bool:
        return bool(self.find_conflicts(allocation))

    def combined_load_for_date(self, person_id: UUID, day: date) -> Decimal:
        """Sum of effective percentages across the person's allocations on ``day``."""
        allocations = self._lookup.find_active_for_person(person_id, DateRange.single_day(day))
        total = sum(
            (a.effective_allocation_for_date(day) for a in allocations), Decimal("0")
        )
        logger.debug("allocation_load_computed", extra={
            "person_id": str(person_id),
            "day": day.isoformat(),
            "load": str(total),
        })
        return total

    def is_over_capacity_on(self, person_id: UUID, day: date) -> bool:
        return self.combined_load_for_date(person_id, day) > self._rules.full_capacity_percentage
