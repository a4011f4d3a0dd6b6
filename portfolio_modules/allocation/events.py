"""Resource allocation change records."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar
from uuid import UUID

from portfolio_kernel.domain.changes import ChangeKind, ChangeRecord
from portfolio_kernel.domain.date_range import DateRange


@dataclass(frozen=True)
class AllocationCreated(ChangeRecord):
    kind: ClassVar[ChangeKind] = ChangeKind.ALLOCATION_CREATED

    project_id: UUID
    person_id: UUID
    percentage: Decimal
    period: DateRange
    role: str


@dataclass(frozen=True)
class AllocationUpdated(ChangeRecord):
    kind: ClassVar[ChangeKind] = ChangeKind.ALLOCATION_UPDATED

    project_id: UUID
    person_id: UUID
    old_percentage: Decimal
    new_percentage: Decimal
    reason: str


@dataclass(frozen=True)
class OverallocationDetected(ChangeRecord):
    """Raised when a single allocation goes above full capacity."""

    kind: ClassVar[ChangeKind] = ChangeKind.OVERALLOCATION_DETECTED

    project_id: UUID
    person_id: UUID
    percentage: Decimal
    period: DateRange


@dataclass(frozen=True)
class AllocationExtended(ChangeRecord):
    kind: ClassVar[ChangeKind] = ChangeKind.ALLOCATION_EXTENDED

    project_id: UUID
    person_id: UUID
    old_period: DateRange
    new_period: DateRange
    reason: str


@dataclass(frozen=True)
class AllocationReduced(ChangeRecord):
    kind: ClassVar[ChangeKind] = ChangeKind.ALLOCATION_REDUCED

    project_id: UUID
    person_id: UUID
    old_period: DateRange
    new_period: DateRange
    reason: str


@dataclass(frozen=True)
class AllocationRoleUpdated(ChangeRecord):
    kind: ClassVar[ChangeKind] = ChangeKind.ALLOCATION_ROLE_UPDATED

    project_id: UUID
    person_id: UUID
    old_role: str
    new_role: str
    reason: str


@dataclass(frozen=True)
class AllocationDeactivated(ChangeRecord):
    kind: ClassVar[ChangeKind] = ChangeKind.ALLOCATION_DEACTIVATED

    project_id: UUID
    person_id: UUID
    percentage: Decimal
    period: DateRange
    reason: str


@dataclass(frozen=True)
class AllocationReactivated(ChangeRecord):
    kind: ClassVar[ChangeKind] = ChangeKind.ALLOCATION_REACTIVATED

    project_id: UUID
    person_id: UUID
    percentage: Decimal
    period: DateRange
    reason: str
