"""
Shared fixtures for module tests.

Provides an in-memory ``AllocationLookup`` standing in for the hosting
persistence layer.

DESIGN RULE: Every fixture is opt-in. No autouse.
"""

from collections.abc import Sequence
from uuid import UUID

import pytest

from portfolio_kernel.domain.date_range import DateRange
from portfolio_modules.allocation.models import ResourceAllocation


class InMemoryAllocationLookup:
    """List-backed allocation store answering the conflict-detection query."""

    def __init__(self) -> None:
        self.allocations: list[ResourceAllocation] = []
        self.queries: list[tuple[UUID, DateRange, UUID | None]] = []

    def add(self, *allocations: ResourceAllocation) -> None:
        self.allocations.extend(allocations)

    def find_active_for_person(
        self,
        person_id: UUID,
        period: DateRange,
        exclude_id: UUID | None = None,
    ) -> Sequence[ResourceAllocation]:
        self.queries.append((person_id, period, exclude_id))
        return [
            a for a in self.allocations
            if a.person_id == person_id
            and a.is_active
            and a.id != exclude_id
            and a.period.overlaps(period)
        ]


@pytest.fixture
def allocation_lookup() -> InMemoryAllocationLookup:
    return InMemoryAllocationLookup()
