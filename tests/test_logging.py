"""
Tests for portfolio_kernel.logging_config.

Covers the JSON envelope, LogContext binding, and how kernel errors and
aggregate activity show up in the emitted lines.
"""

import json
import logging
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from portfolio_kernel.domain.values import Money
from portfolio_kernel.exceptions import AllocationStateError, BudgetStateError
from portfolio_kernel.logging_config import (
    CONTEXT_FIELDS,
    LogContext,
    configure_logging,
    get_logger,
    reset_logging,
)
from portfolio_modules.budget.models import BudgetStatus


@pytest.fixture
def json_lines():
    """
    Route the portfolio_kernel logger to an in-memory stream at DEBUG.

    Returns a callable giving every emitted line as a dict. The suite-wide
    configuration is restored afterwards.
    """
    stream = StringIO()
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=stream)

    def _read() -> list[dict]:
        return [json.loads(line) for line in stream.getvalue().splitlines() if line]

    yield _read

    reset_logging()
    configure_logging(level=logging.DEBUG)


def _only(lines: list[dict], message: str) -> dict:
    matches = [line for line in lines if line["message"] == message]
    assert len(matches) == 1, f"expected one {message!r}, got {len(matches)}"
    return matches[0]


class TestEnvelope:

    def test_fixed_keys_lead_each_line(self, json_lines):
        get_logger("modules.budget").warning("budget_review_due")

        (line,) = json_lines()
        assert list(line)[:4] == ["ts", "level", "logger", "message"]
        assert line["level"] == "WARNING"
        assert line["logger"] == "portfolio_kernel.modules.budget"
        assert line["ts"].endswith("+00:00")

    def test_extra_cannot_override_envelope(self, json_lines):
        get_logger("x").info("real_message", extra={"level": "bogus", "role": "QA"})

        (line,) = json_lines()
        assert line["level"] == "INFO"
        assert line["role"] == "QA"

    def test_domain_values_rendered_as_text(self, json_lines):
        budget_id = uuid4()
        get_logger("x").info("snapshot", extra={
            "budget_id": budget_id,
            "utilization": Decimal("87.5"),
            "status": BudgetStatus.ACTIVE,
            "remaining": Money.usd("125"),
        })

        (line,) = json_lines()
        assert line["budget_id"] == str(budget_id)
        assert line["utilization"] == "87.5"
        assert line["status"] == "active"
        assert line["remaining"] == "125.00 USD"

    def test_level_filtering(self):
        stream = StringIO()
        reset_logging()
        try:
            configure_logging(stream=stream)
            logger = get_logger("x")
            logger.debug("allocation_load_computed")
            logger.info("allocation_created")
            messages = [json.loads(raw)["message"] for raw in stream.getvalue().splitlines()]
            assert messages == ["allocation_created"]
        finally:
            reset_logging()
            configure_logging(level=logging.DEBUG)


class TestExceptionFields:

    def test_allocation_state_error(self, json_lines):
        allocation_id = uuid4()
        try:
            raise AllocationStateError(allocation_id, "reactivate", "period has ended")
        except AllocationStateError:
            get_logger("x").exception("reactivate_rejected")

        line = _only(json_lines(), "reactivate_rejected")
        assert line["level"] == "ERROR"
        assert line["exc_type"] == "AllocationStateError"
        assert line["exc_code"] == "ALLOCATION_STATE_CONFLICT"
        assert line["exc_allocation_id"] == str(allocation_id)
        assert line["exc_action"] == "reactivate"
        assert "Traceback" in line["traceback"]

    def test_closed_budget_rejection(self, json_lines, make_budget):
        budget = make_budget()
        budget.close("done")
        try:
            budget.add_expense(Money.usd("5"))
        except BudgetStateError:
            get_logger("x").error("expense_rejected", exc_info=True)

        line = _only(json_lines(), "expense_rejected")
        assert line["exc_code"] == "BUDGET_STATE_CONFLICT"
        assert line["exc_budget_id"] == str(budget.id)
        assert line["exc_status"] == "closed"

    def test_plain_exception_has_no_code(self, json_lines):
        try:
            {}["missing"]
        except KeyError:
            get_logger("x").exception("lookup_failed")

        (line,) = json_lines()
        assert line["exc_type"] == "KeyError"
        assert "exc_code" not in line


class TestAggregateActivity:

    def test_budget_lifecycle_lines(self, json_lines, make_budget):
        budget = make_budget(Money.usd("100"))
        budget.add_expense(Money.usd("95"), "licences")
        budget.freeze("audit")

        lines = json_lines()
        messages = [line["message"] for line in lines]
        assert messages == [
            "budget_created",
            "budget_expense_added",
            "budget_nearing_limit",
            "budget_status_changed",
        ]
        changed = _only(lines, "budget_status_changed")
        assert (changed["from_status"], changed["to_status"]) == ("active", "frozen")

    def test_context_flows_into_aggregate_lines(self, json_lines, make_allocation, person_id):
        correlation_id = uuid4()
        with LogContext.bind(correlation_id=correlation_id, person_id=person_id):
            allocation = make_allocation("60")
            allocation.update_role("Tech Lead", uuid4())

        for line in json_lines():
            assert line["correlation_id"] == str(correlation_id)
            assert line["person_id"] == str(person_id)
        assert LogContext.get_all() == {}


class TestLogContext:

    def test_fields_follow_declaration_order(self):
        LogContext.set(trace_id="t", correlation_id="c", project_id="p")
        assert list(LogContext.get_all()) == ["correlation_id", "project_id", "trace_id"]

    def test_none_does_not_clear(self):
        LogContext.set(actor_id="a")
        LogContext.set(actor_id=None)
        assert LogContext.get_all() == {"actor_id": "a"}

    def test_nested_bind_unwinds(self):
        with LogContext.bind(project_id="p1"):
            with LogContext.bind(project_id="p2", aggregate_id="g"):
                assert LogContext.get_all() == {"aggregate_id": "g", "project_id": "p2"}
            assert LogContext.get_all() == {"project_id": "p1"}
        assert LogContext.get_all() == {}

    def test_bind_unwinds_on_error(self):
        with pytest.raises(BudgetStateError):
            with LogContext.bind(aggregate_id="b"):
                raise BudgetStateError("b", "freeze", "closed")
        assert LogContext.get_all() == {}

    def test_unknown_field_rejected(self):
        with pytest.raises(TypeError, match="tenant_id"):
            LogContext.set(tenant_id="x")
        with pytest.raises(TypeError):
            with LogContext.bind(budget_id="x"):
                pass

    def test_every_declared_field_bindable(self):
        LogContext.set(**{name: name.upper() for name in CONTEXT_FIELDS})
        assert LogContext.get_all() == {name: name.upper() for name in CONTEXT_FIELDS}

    def test_clear(self):
        LogContext.set(correlation_id="x", person_id="y")
        LogContext.clear()
        assert LogContext.get_all() == {}


class TestConfigureLogging:

    def test_second_call_is_ignored(self, json_lines):
        configure_logging(level=logging.ERROR, stream=StringIO())
        root = logging.getLogger("portfolio_kernel")
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG

    def test_does_not_propagate_to_root(self, json_lines):
        assert logging.getLogger("portfolio_kernel").propagate is False

    def test_reset_restores_defaults(self, json_lines):
        reset_logging()
        root = logging.getLogger("portfolio_kernel")
        assert root.handlers == []
        assert root.level == logging.WARNING
        assert root.propagate is True

    def test_explicit_handler_gets_json_formatter(self):
        stream = StringIO()
        handler = logging.StreamHandler(stream)
        reset_logging()
        try:
            configure_logging(handler=handler)
            get_logger("modules.allocation.service").info("allocation_conflicts_found")
            line = json.loads(stream.getvalue())
            assert line["logger"] == "portfolio_kernel.modules.allocation.service"
        finally:
            reset_logging()
            configure_logging(level=logging.DEBUG)
