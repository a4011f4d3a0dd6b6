"""
Resource Allocation Aggregate (``portfolio_modules.allocation.models``).

Responsibility
--------------
A person's percentage commitment to one project over one calendar period.
Enforces single-allocation limits (percentage ceiling, creation window,
maximum duration, role format) and answers the pairwise capacity
questions used for over-commitment detection.

Architecture position
---------------------
**Modules layer** -- pure in-memory aggregate, ZERO I/O. Consumed by
``AllocationConflictService`` and by the hosting system, which persists
the aggregate and drains its change queue.

Invariants enforced
-------------------
* Percentage within ``[0, max_percentage]`` (200 by default, to model
  overtime).
* At creation: start no more than ``max_lookback_years`` in the past, end
  no more than ``max_horizon_years`` in the future, inclusive duration at
  most ``max_duration_days``.
* Role is non-blank and at most ``max_role_length`` characters (trimmed).
* Every mutating operation validates fully before touching state.

Failure modes
-------------
* ``InvalidAllocationError`` -- malformed percentage, period, role or end
  date.
* ``AllocationStateError`` -- operation on an inactive allocation, on an
  elapsed period, or a repeated deactivate/reactivate.

Conflict model
--------------
Conflicts are pairwise: two active allocations for the same person whose
periods overlap conflict when their percentages sum above full capacity.
A single allocation above 100% is valid on its own (it raises an
overallocation record on update) and only conflicts relative to another
concurrent allocation. The aggregate sees no other instances; callers
supply the candidate set.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from uuid import UUID, uuid4

from portfolio_config.schema import AllocationRules
from portfolio_kernel.domain.aggregate import AggregateMetadata
from portfolio_kernel.domain.changes import ChangeQueue, ChangeRecord
from portfolio_kernel.domain.clock import Clock, SystemClock
from portfolio_kernel.domain.date_range import DateRange
from portfolio_kernel.exceptions import AllocationStateError, InvalidAllocationError
from portfolio_kernel.logging_config import get_logger
from portfolio_modules.allocation.events import (
    AllocationCreated,
    AllocationDeactivated,
    AllocationExtended,
    AllocationReactivated,
    AllocationReduced,
    AllocationRoleUpdated,
    AllocationUpdated,
    OverallocationDetected,
)
from portfolio_modules.allocation.workflows import ALLOCATION_WORKFLOW

logger = get_logger("modules.allocation.models")

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


class AllocationStatus(Enum):
    """Allocation activation states."""
    ACTIVE = "active"
    INACTIVE = "inactive"


def _add_years(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year + years)
    except ValueError:
        # Feb 29 in a non-leap target year
        return day.replace(year=day.year + years, day=28)


def _as_date(value: date) -> date:
    return value.date() if isinstance(value, datetime) else value


class ResourceAllocation:
    """
    Allocation of one person to one project.

    Contract
    --------
    * Created ``ACTIVE``; deactivation is the terminal soft state unless
      the period has not yet elapsed, in which case it may be reactivated.
    * Every successful mutation appends one or more change records to
      ``changes``; failures leave state and queue untouched.
    * All "today" decisions use the injected clock.
    """

    def __init__(
        self,
        project_id: UUID,
        person_id: UUID,
        percentage: Decimal | int | str,
        period: DateRange,
        role: str,
        created_by: UUID,
        notes: str = "",
        *,
        allocation_id: UUID | None = None,
        clock: Clock | None = None,
        rules: AllocationRules | None = None,
    ):
        self._clock = clock or SystemClock()
        self._rules = rules or AllocationRules()

        pct = self._validate_percentage(percentage)
        self._validate_period(period)
        role = self._validate_role(role)

        now = self._clock.now_utc()
        self._meta = AggregateMetadata(
            created_at=now, created_by=created_by, id=allocation_id or uuid4()
        )
        self._changes = ChangeQueue()
        self._project_id = project_id
        self._person_id = person_id
        self._percentage = pct
        self._period = period
        self._role = role
        self._notes = notes or ""
        self._status = AllocationStatus(ALLOCATION_WORKFLOW.initial_state)

        self._changes.append(AllocationCreated(
            aggregate_id=self.id,
            occurred_at=now,
            project_id=project_id,
            person_id=person_id,
            percentage=pct,
            period=period,
            role=role,
        ))
        logger.info("allocation_created", extra={
            "allocation_id": str(self.id),
            "project_id": str(project_id),
            "person_id": str(person_id),
            "percentage": str(pct),
            "period": str(period),
        })

    @classmethod
    def create(
        cls,
        project_id: UUID,
        person_id: UUID,
        percentage: Decimal | int | str,
        period: DateRange,
        role: str,
        created_by: UUID,
        notes: str = "",
        **kwargs,
    ) -> ResourceAllocation:
        """Validated factory; keyword options as for the constructor."""
        return cls(project_id, person_id, percentage, period, role, created_by, notes, **kwargs)

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
    def person_id(self) -> UUID:
        return self._person_id

    @property
    def percentage(self) -> Decimal:
        return self._percentage

    @property
    def period(self) -> DateRange:
        return self._period

    @property
    def role(self) -> str:
        return self._role

    @property
    def notes(self) -> str:
        return self._notes

    @property
    def status(self) -> AllocationStatus:
        return self._status

    @property
    def is_active(self) -> bool:
        return self._status is AllocationStatus.ACTIVE

    @property
    def metadata(self) -> AggregateMetadata:
        return self._meta

    @property
    def created_at(self) -> datetime:
        return self._meta.created_at

    @property
    def created_by(self) -> UUID | None:
        return self._meta.created_by

    @property
    def modified_at(self) -> datetime | None:
        return self._meta.updated_at

    @property
    def modified_by(self) -> UUID | None:
        return self._meta.updated_by

    @property
    def changes(self) -> ChangeQueue:
        return self._changes

    def drain_changes(self) -> tuple[ChangeRecord, ...]:
        return self._changes.drain()

    def clear_changes(self) -> None:
        self._changes.clear()

    # =========================================================================
    # Mutations
    # =========================================================================

    def update_percentage(
        self,
        new_percentage: Decimal | int | str,
        modified_by: UUID,
        reason: str = "",
    ) -> None:
        """
        Change the committed percentage.

        Emits ``AllocationUpdated``; additionally ``OverallocationDetected``
        when the new percentage is above full capacity.
        """
        self._require_active("modify")
        self._require_not_ended("modify")
        pct = self._validate_percentage(new_percentage)

        old = self._percentage
        self._percentage = pct
        now = self._touch(modified_by)
        self._append_note(f"Allocation changed from {old}% to {pct}%", reason)

        self._changes.append(AllocationUpdated(
            aggregate_id=self.id,
            occurred_at=now,
            project_id=self._project_id,
            person_id=self._person_id,
            old_percentage=old,
            new_percentage=pct,
            reason=reason,
        ))
        logger.info("allocation_percentage_updated", extra={
            "allocation_id": str(self.id),
            "old_percentage": str(old),
            "new_percentage": str(pct),
        })

        if self.is_over_allocated:
            self._changes.append(OverallocationDetected(
                aggregate_id=self.id,
                occurred_at=now,
                project_id=self._project_id,
                person_id=self._person_id,
                percentage=pct,
                period=self._period,
            ))
            logger.warning("allocation_overallocated", extra={
                "allocation_id": str(self.id),
                "person_id": str(self._person_id),
                "percentage": str(pct),
            })

    def extend(self, new_end: date, modified_by: UUID, reason: str = "") -> None:
        """Move the end date later. The start date is kept."""
        self._require_active("extend")
        new_end = _as_date(new_end)
        if new_end <= self._period.end:
            raise InvalidAllocationError(
                "New end date must be later than current end date.",
                allocation_id=self.id,
            )

        old_period = self._period
        self._period = DateRange(old_period.start, new_end)
        now = self._touch(modified_by)
        self._append_note(f"Allocation extended to {new_end:%Y-%m-%d}", reason)

        self._changes.append(AllocationExtended(
            aggregate_id=self.id,
            occurred_at=now,
            project_id=self._project_id,
            person_id=self._person_id,
            old_period=old_period,
            new_period=self._period,
            reason=reason,
        ))
        logger.info("allocation_extended", extra={
            "allocation_id": str(self.id),
            "old_period": str(old_period),
            "new_period": str(self._period),
        })

    def reduce(self, new_end: date, modified_by: UUID, reason: str = "") -> None:
        """Move the end date earlier, but never into the past."""
        self._require_active("reduce")
        new_end = _as_date(new_end)
        if new_end >= self._period.end:
            raise InvalidAllocationError(
                "New end date must be earlier than current end date.",
                allocation_id=self.id,
            )
        if new_end < self._clock.today():
            raise InvalidAllocationError(
                "Cannot set end date in the past.", allocation_id=self.id
            )
        if new_end < self._period.start:
            raise InvalidAllocationError(
                "New end date cannot be earlier than the allocation start date.",
                allocation_id=self.id,
            )

        old_period = self._period
        self._period = DateRange(old_period.start, new_end)
        now = self._touch(modified_by)
        self._append_note(f"Allocation reduced to {new_end:%Y-%m-%d}", reason)

        self._changes.append(AllocationReduced(
            aggregate_id=self.id,
            occurred_at=now,
            project_id=self._project_id,
            person_id=self._person_id,
            old_period=old_period,
            new_period=self._period,
            reason=reason,
        ))
        logger.info("allocation_reduced", extra={
            "allocation_id": str(self.id),
            "old_period": str(old_period),
            "new_period": str(self._period),
        })

    def update_role(self, new_role: str, modified_by: UUID, reason: str = "") -> None:
        self._require_active("modify")
        role = self._validate_role(new_role)

        old_role = self._role
        self._role = role
        now = self._touch(modified_by)
        self._append_note(f"Role changed from '{old_role}' to '{role}'", reason)

        self._changes.append(AllocationRoleUpdated(
            aggregate_id=self.id,
            occurred_at=now,
            project_id=self._project_id,
            person_id=self._person_id,
            old_role=old_role,
            new_role=role,
            reason=reason,
        ))
        logger.info("allocation_role_updated", extra={
            "allocation_id": str(self.id),
            "old_role": old_role,
            "new_role": role,
        })

    def deactivate(self, deactivated_by: UUID, reason: str = "") -> None:
        """Soft-terminate the allocation. Fails if already inactive."""
        transition = ALLOCATION_WORKFLOW.transition_for(self._status.value, "deactivate")
        if transition is None:
            raise AllocationStateError(self.id, "deactivate", "allocation is already inactive")

        self._status = AllocationStatus(transition.to_state)
        now = self._touch(deactivated_by)
        self._append_note("Allocation deactivated", reason)

        self._changes.append(AllocationDeactivated(
            aggregate_id=self.id,
            occurred_at=now,
            project_id=self._project_id,
            person_id=self._person_id,
            percentage=self._percentage,
            period=self._period,
            reason=reason,
        ))
        logger.info("allocation_deactivated", extra={"allocation_id": str(self.id)})

    def reactivate(self, reactivated_by: UUID, reason: str = "") -> None:
        """Re-enable an inactive allocation whose period has not elapsed."""
        transition = ALLOCATION_WORKFLOW.transition_for(self._status.value, "reactivate")
        if transition is None:
            raise AllocationStateError(self.id, "reactivate", "allocation is already active")
        if self.has_ended:
            raise AllocationStateError(
                self.id, "reactivate", "allocation period has already ended"
            )

        self._status = AllocationStatus(transition.to_state)
        now = self._touch(reactivated_by)
        self._append_note("Allocation reactivated", reason)

        self._changes.append(AllocationReactivated(
            aggregate_id=self.id,
            occurred_at=now,
            project_id=self._project_id,
            person_id=self._person_id,
            percentage=self._percentage,
            period=self._period,
            reason=reason,
        ))
        logger.info("allocation_reactivated", extra={"allocation_id": str(self.id)})

    def add_note(self, note: str, added_by: UUID) -> None:
        """Append a dated free-text note. Blank notes are ignored."""
        if not note or not note.strip():
            return
        self._append_note(note.strip())
        self._touch(added_by)

    # =========================================================================
    # Capacity queries
    # =========================================================================

    def overlaps_with(self, other: ResourceAllocation) -> bool:
        """Same person, both active, and the periods share at least one day."""
        return (
            self._person_id == other.person_id
            and self.is_active
            and other.is_active
            and self._period.overlaps(other.period)
        )

    def total_allocation_with(self, other: ResourceAllocation) -> Decimal:
        """Combined percentage during the overlap, or this percentage alone."""
        if not self.overlaps_with(other):
            return self._percentage
        return self._percentage + other.percentage

    def is_conflicting_with(self, candidates: Iterable[ResourceAllocation]) -> bool:
        """
        True when any other candidate overlaps this allocation and the
        combined percentage exceeds full capacity.

        ``candidates`` must be a consistent snapshot of the person's other
        allocations; entries with this allocation's id are skipped.
        """
        return any(True for _ in self.conflicts_in(candidates))

    def conflicts_in(
        self, candidates: Iterable[ResourceAllocation]
    ) -> list[ResourceAllocation]:
        """Every candidate that conflicts with this allocation, in input order."""
        limit = self._rules.full_capacity_percentage
        return [
            other
            for other in candidates
            if other.id != self.id
            and self.overlaps_with(other)
            and self.total_allocation_with(other) > limit
        ]

    def effective_allocation_for_date(self, day: date) -> Decimal:
        if not self.is_active or not self._period.contains(day):
            return _ZERO
        return self._percentage

    def expected_hours_for_period(
        self,
        period: DateRange,
        hours_per_day: Decimal | int | None = None,
    ) -> Decimal:
        """
        Expected working hours inside ``period``.

        Weekdays in the intersection of ``period`` and the allocation
        period, times ``hours_per_day``, times the percentage as a
        fraction. Zero when inactive or non-overlapping.
        """
        overlap = self._period.get_overlap(period)
        if overlap is None or not self.is_active:
            return _ZERO
        return self._effort_hours(overlap, hours_per_day)

    @property
    def total_effort_hours(self) -> Decimal:
        """Expected hours over the whole allocation period."""
        if not self.is_active:
            return _ZERO
        return self._effort_hours(self._period, None)

    def average_weekly_hours(self, hours_per_week: Decimal | int | None = None) -> Decimal:
        if hours_per_week is None:
            hours_per_week = self._rules.standard_hours_per_week
        return self._percentage / _HUNDRED * Decimal(hours_per_week)

    def _effort_hours(self, period: DateRange, hours_per_day: Decimal | int | None) -> Decimal:
        if hours_per_day is None:
            hours_per_day = self._rules.standard_hours_per_day
        return Decimal(period.weekday_count) * Decimal(hours_per_day) * (self._percentage / _HUNDRED)

    # =========================================================================
    # Derived flags
    # =========================================================================

    @property
    def is_current(self) -> bool:
        return self._period.is_current(self._clock.today())

    @property
    def has_started(self) -> bool:
        return self._period.has_started(self._clock.today())

    @property
    def has_ended(self) -> bool:
        return self._period.has_ended(self._clock.today())

    @property
    def is_over_allocated(self) -> bool:
        return self._percentage > self._rules.full_capacity_percentage

    @property
    def is_full_time(self) -> bool:
        return self._percentage >= self._rules.full_capacity_percentage

    @property
    def is_part_time(self) -> bool:
        return _ZERO < self._percentage < self._rules.full_capacity_percentage

    @property
    def duration_days(self) -> int:
        return self._period.duration_inclusive_days

    # =========================================================================
    # Internals
    # =========================================================================

    def _validate_percentage(self, percentage: Decimal | int | str) -> Decimal:
        if isinstance(percentage, (bool, float)):
            raise InvalidAllocationError(
                f"Allocation percentage must be a Decimal, int or str, got {type(percentage).__name__}."
            )
        try:
            pct = Decimal(str(percentage))
        except InvalidOperation as e:
            raise InvalidAllocationError(
                f"Allocation percentage is not a number: {percentage!r}."
            ) from e
        if not pct.is_finite():
            raise InvalidAllocationError("Allocation percentage must be finite.")
        if pct < 0:
            raise InvalidAllocationError("Allocation percentage cannot be negative.")
        if pct > self._rules.max_percentage:
            raise InvalidAllocationError(
                f"Allocation percentage cannot exceed {self._rules.max_percentage}%."
            )
        return pct

    def _validate_period(self, period: DateRange) -> None:
        if not isinstance(period, DateRange):
            raise InvalidAllocationError("Allocation period must be a DateRange.")
        today = self._clock.today()
        rules = self._rules
        if period.start < _add_years(today, -rules.max_lookback_years):
            raise InvalidAllocationError(
                f"Allocation start date cannot be more than {rules.max_lookback_years} "
                "year(s) in the past."
            )
        if period.end > _add_years(today, rules.max_horizon_years):
            raise InvalidAllocationError(
                f"Allocation end date cannot be more than {rules.max_horizon_years} "
                "years in the future."
            )
        if period.duration_inclusive_days > rules.max_duration_days:
            raise InvalidAllocationError(
                f"Allocation period cannot exceed {rules.max_duration_days} days."
            )

    def _validate_role(self, role: str) -> str:
        if not isinstance(role, str) or not role.strip():
            raise InvalidAllocationError("Role cannot be null or empty.")
        role = role.strip()
        if len(role) > self._rules.max_role_length:
            raise InvalidAllocationError(
                f"Role cannot exceed {self._rules.max_role_length} characters."
            )
        return role

    def _require_active(self, action: str) -> None:
        if not self.is_active:
            raise AllocationStateError(self.id, action, "allocation is inactive")

    def _require_not_ended(self, action: str) -> None:
        if self.has_ended:
            raise AllocationStateError(self.id, action, "allocation period has already ended")

    def _touch(self, actor: UUID) -> datetime:
        now = self._clock.now_utc()
        self._meta.touch(now, actor)
        return now

    def _append_note(self, text: str, reason: str = "") -> None:
        line = f"[{self._clock.today():%Y-%m-%d}] {text}"
        if reason and reason.strip():
            line = f"{line}: {reason.strip()}"
        self._notes = f"{self._notes}\n{line}" if self._notes else line

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResourceAllocation):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return (
            f"ResourceAllocation(id={self.id}, person_id={self._person_id}, "
            f"percentage={self._percentage}, period={self._period}, "
            f"status={self._status.value})"
        )
