"""
Pytest fixtures for the portfolio kernel test suite.

Provides:
- Structured logging configured for every test session
- A deterministic clock fixed at 2025-01-10 12:00 UTC
- Actor/person/project ids and aggregate factories
"""

import json
import logging
from datetime import UTC, date, datetime
from decimal import Decimal
from io import StringIO
from uuid import UUID, uuid4

import pytest

from portfolio_config.schema import AllocationRules, BudgetRules
from portfolio_kernel.domain.clock import DeterministicClock
from portfolio_kernel.domain.date_range import DateRange
from portfolio_kernel.domain.values import Money
from portfolio_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from portfolio_modules.allocation.models import ResourceAllocation
from portfolio_modules.budget.models import Budget

TEST_ACTOR_ID = uuid4()
TEST_NOW = datetime(2025, 1, 10, 12, 0, 0, tzinfo=UTC)
TEST_TODAY = date(2025, 1, 10)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture portfolio_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, budget):
            budget.add_expense(Money.usd(10))
            logs = captured_logs()
            assert any(r["message"] == "budget_expense_added" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("portfolio_kernel")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


# =============================================================================
# Identity fixtures
# =============================================================================


@pytest.fixture
def test_actor_id() -> UUID:
    """Provide a consistent test actor ID."""
    return TEST_ACTOR_ID


@pytest.fixture
def person_id() -> UUID:
    return uuid4()


@pytest.fixture
def project_id() -> UUID:
    return uuid4()


# Clock fixtures


@pytest.fixture
def deterministic_clock():
    """Provide a deterministic clock fixed at 2025-01-10 12:00 UTC."""
    return DeterministicClock(TEST_NOW)


# =============================================================================
# Aggregate factories
# =============================================================================


@pytest.fixture
def make_allocation(deterministic_clock, test_actor_id, project_id, person_id):
    """
    Factory for ResourceAllocation instances on the deterministic clock.

    Defaults to 50% on January 2025 for the shared ``person_id``.
    """

    def _make(
        percentage="50",
        start=date(2025, 1, 1),
        end=date(2025, 1, 31),
        *,
        role="Developer",
        person=None,
        project=None,
        rules: AllocationRules | None = None,
        notes: str = "",
    ) -> ResourceAllocation:
        return ResourceAllocation.create(
            project or project_id,
            person or person_id,
            Decimal(str(percentage)),
            DateRange(start, end),
            role,
            test_actor_id,
            notes,
            clock=deterministic_clock,
            rules=rules,
        )

    return _make


@pytest.fixture
def make_budget(deterministic_clock, test_actor_id, project_id):
    """Factory for Budget instances on the deterministic clock."""

    def _make(
        allocated: Money | None = None,
        category: str = "Software",
        *,
        rules: BudgetRules | None = None,
    ) -> Budget:
        return Budget.create(
            project_id,
            category,
            allocated or Money.usd("1000"),
            created_by=test_actor_id,
            clock=deterministic_clock,
            rules=rules,
        )

    return _make
