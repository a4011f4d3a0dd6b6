"""
Typed Exception Hierarchy for the Portfolio Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Allocation and budget rules reject operations for two very different
reasons: the input is malformed, or the input is fine but the aggregate is
in a lifecycle state that forbids the operation. Callers react differently
to each (fix the form vs. refresh and re-check status), so they must be
able to catch by type, never by parsing message text.

Every exception:
  1. Has a TYPED class (catch by type, not message)
  2. Has a CODE class attribute (machine-readable, API-safe)
  3. Carries structured DATA (not just a message string)

Example:
    try:
        budget.add_expense(Money.of("250.00", "USD"))
    except BudgetStateError as e:
        notify_owner(f"Budget {e.budget_id} is {e.status}")
    except InvalidBudgetError as e:
        return {"error": e.code, "detail": str(e)}

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from PortfolioKernelError:

    PortfolioKernelError (base)
    |
    +-- ValidationError
    |   +-- InvalidAmountError
    |   +-- CurrencyMismatchError
    |   +-- DivideByZeroError
    |   +-- InvalidDateRangeError
    |   +-- InvalidAllocationError
    |   +-- InvalidBudgetError
    |
    +-- StateConflictError
    |   +-- AllocationStateError
    |   +-- BudgetStateError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Validation      | INVALID_AMOUNT              | Bad currency code or unparseable amount
                | CURRENCY_MISMATCH           | Mixed currencies in arithmetic/compare
                | DIVIDE_BY_ZERO              | Money divided by zero
                | INVALID_DATE_RANGE          | start > end, or negative duration
                | INVALID_ALLOCATION          | Percentage/period/role/end-date rules
                | INVALID_BUDGET              | Category/amount/currency rules
----------------|-----------------------------|-----------------------------------------
State           | ALLOCATION_STATE_CONFLICT   | Inactive, elapsed, or already toggled
                | BUDGET_STATE_CONFLICT       | Not Active, already frozen, closed
----------------|-----------------------------|-----------------------------------------
Configuration   | INVALID_CONFIGURATION       | Rule file has out-of-range values

===============================================================================
"""


class PortfolioKernelError(Exception):
    """
    Base exception for all portfolio kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "PORTFOLIO_KERNEL_ERROR"


# Validation exceptions


class ValidationError(PortfolioKernelError):
    """Base exception for malformed input. State is never partially applied."""

    code: str = "VALIDATION_ERROR"


class InvalidAmountError(ValidationError):
    """Money could not be constructed from the given amount or currency."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, reason: str, amount: object = None, currency: object = None):
        self.reason = reason
        self.amount = amount
        self.currency = currency
        super().__init__(reason)


class CurrencyMismatchError(ValidationError):
    """Attempted operation on mismatched currencies."""

    code: str = "CURRENCY_MISMATCH"

    def __init__(self, operation: str, currency1: str, currency2: str):
        self.operation = operation
        self.currency1 = currency1
        self.currency2 = currency2
        super().__init__(
            f"Cannot {operation} different currencies: {currency1} and {currency2}"
        )


class DivideByZeroError(ValidationError):
    """Money divided by a zero scalar."""

    code: str = "DIVIDE_BY_ZERO"

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__(f"Cannot divide {currency} amount by zero")


class InvalidDateRangeError(ValidationError):
    """Date range endpoints or duration are inconsistent."""

    code: str = "INVALID_DATE_RANGE"

    def __init__(self, reason: str, start: object = None, end: object = None):
        self.reason = reason
        self.start = start
        self.end = end
        super().__init__(reason)


class InvalidAllocationError(ValidationError):
    """Resource allocation input violates an allocation rule."""

    code: str = "INVALID_ALLOCATION"

    def __init__(self, reason: str, allocation_id: object = None):
        self.reason = reason
        self.allocation_id = allocation_id
        super().__init__(reason)


class InvalidBudgetError(ValidationError):
    """Budget input violates a budget rule."""

    code: str = "INVALID_BUDGET"

    def __init__(self, reason: str, budget_id: object = None):
        self.reason = reason
        self.budget_id = budget_id
        super().__init__(reason)


# Lifecycle state exceptions


class StateConflictError(PortfolioKernelError):
    """Base exception for operations not permitted in the current lifecycle state."""

    code: str = "STATE_CONFLICT"


class AllocationStateError(StateConflictError):
    """Operation not permitted for the allocation's active/elapsed state."""

    code: str = "ALLOCATION_STATE_CONFLICT"

    def __init__(self, allocation_id: object, action: str, reason: str):
        self.allocation_id = allocation_id
        self.action = action
        self.reason = reason
        super().__init__(f"Cannot {action} allocation {allocation_id}: {reason}")


class BudgetStateError(StateConflictError):
    """Operation not permitted for the budget's status."""

    code: str = "BUDGET_STATE_CONFLICT"

    def __init__(self, budget_id: object, action: str, status: str, reason: str = ""):
        self.budget_id = budget_id
        self.action = action
        self.status = status
        self.reason = reason or f"budget is {status}"
        super().__init__(f"Cannot {action} budget {budget_id}: {self.reason}")


# Configuration exceptions


class ConfigurationError(PortfolioKernelError):
    """Rule configuration holds a missing or out-of-range value."""

    code: str = "INVALID_CONFIGURATION"

    def __init__(self, field_path: str, reason: str):
        self.field_path = field_path
        self.reason = reason
        super().__init__(f"Invalid configuration at '{field_path}': {reason}")
