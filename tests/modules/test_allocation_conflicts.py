"""
Tests for AllocationConflictService against an in-memory lookup.
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

from portfolio_kernel.domain.date_range import DateRange
from portfolio_modules.allocation.service import AllocationConflict, AllocationConflictService


class TestFindConflicts:

    def test_reports_overlap_and_combined_percentage(self, make_allocation, allocation_lookup):
        existing = make_allocation("70", date(2025, 1, 1), date(2025, 1, 31))
        allocation_lookup.add(existing)
        candidate = make_allocation("50", date(2025, 1, 15), date(2025, 2, 15))

        conflicts = AllocationConflictService(allocation_lookup).find_conflicts(candidate)

        assert conflicts == [
            AllocationConflict(
                allocation_id=candidate.id,
                other_allocation_id=existing.id,
                person_id=candidate.person_id,
                overlap=DateRange(date(2025, 1, 15), date(2025, 1, 31)),
                combined_percentage=Decimal("120"),
            )
        ]

    def test_within_capacity(self, make_allocation, allocation_lookup):
        allocation_lookup.add(make_allocation("40", date(2025, 1, 1), date(2025, 1, 31)))
        candidate = make_allocation("50", date(2025, 1, 15), date(2025, 2, 15))
        service = AllocationConflictService(allocation_lookup)
        assert service.find_conflicts(candidate) == []
        assert not service.is_conflicting(candidate)

    def test_candidate_excluded_from_its_own_query(self, make_allocation, allocation_lookup):
        candidate = make_allocation("150")
        allocation_lookup.add(candidate)

        service = AllocationConflictService(allocation_lookup)

        assert not service.is_conflicting(candidate)
        person, period, exclude_id = allocation_lookup.queries[-1]
        assert (person, period, exclude_id) == (candidate.person_id, candidate.period, candidate.id)

    def test_other_person_ignored(self, make_allocation, allocation_lookup):
        allocation_lookup.add(make_allocation("90", person=uuid4()))
        assert not AllocationConflictService(allocation_lookup).is_conflicting(make_allocation("90"))

    def test_inactive_candidate_has_no_conflicts(self, make_allocation, allocation_lookup, test_actor_id):
        allocation_lookup.add(make_allocation("90"))
        candidate = make_allocation("90")
        candidate.deactivate(test_actor_id)
        service = AllocationConflictService(allocation_lookup)
        assert service.find_conflicts(candidate) == []
        assert allocation_lookup.queries == []

    def test_multiple_conflicts(self, make_allocation, allocation_lookup):
        first = make_allocation("60")
        second = make_allocation("60", date(2025, 1, 20), date(2025, 2, 20))
        allocation_lookup.add(first, second)
        candidate = make_allocation("50")

        conflicts = AllocationConflictService(allocation_lookup).find_conflicts(candidate)

        assert [c.other_allocation_id for c in conflicts] == [first.id, second.id]
        assert conflicts[1].overlap == DateRange(date(2025, 1, 20), date(2025, 1, 31))


class TestCombinedLoad:

    def test_load_for_date(self, make_allocation, allocation_lookup, person_id):
        allocation_lookup.add(
            make_allocation("60"),
            make_allocation("50", date(2025, 1, 20), date(2025, 2, 20)),
        )
        service = AllocationConflictService(allocation_lookup)

        assert service.combined_load_for_date(person_id, date(2025, 1, 10)) == Decimal("60")
        assert service.combined_load_for_date(person_id, date(2025, 1, 25)) == Decimal("110")
        assert service.combined_load_for_date(person_id, date(2025, 3, 1)) == Decimal("0")

    def test_over_capacity_on(self, make_allocation, allocation_lookup, person_id):
        allocation_lookup.add(make_allocation("60"), make_allocation("50"))
        service = AllocationConflictService(allocation_lookup)
        assert service.is_over_capacity_on(person_id, date(2025, 1, 15))
        assert not service.is_over_capacity_on(person_id, date(2025, 2, 15))
