"""
Values -- Immutable, self-validating monetary value object.

Responsibility:
    Provides Money, the single representation of a monetary amount used by
    budgets and any other spending computation. Replaces raw Decimal/str
    wherever a currency-bearing amount appears in domain logic.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O. No outward
    dependencies except portfolio_kernel.exceptions.

Invariants enforced:
    - Currency is always a 3-letter alphabetic code, upper-cased.
    - Amount is always a Decimal rounded to 2 places (ROUND_HALF_UP) at
      construction, so every arithmetic result is rounded too.
    - Arithmetic and ordering never mix currencies.

Failure modes:
    - InvalidAmountError on construction with a bad currency or amount.
    - CurrencyMismatchError when add/subtract/compare mixes currencies.
    - DivideByZeroError when dividing by zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from portfolio_kernel.exceptions import (
    CurrencyMismatchError,
    DivideByZeroError,
    InvalidAmountError,
)

MONEY_DECIMAL_PLACES = 2
_QUANTUM = Decimal("0.01")
_HUNDRED = Decimal("100")

Scalar = Decimal | int | str


def _to_decimal(value: object, name: str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidAmountError(f"{name} must be numeric, got bool", amount=value)
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise InvalidAmountError(f"Invalid {name}: {value!r}", amount=value) from e


@dataclass(frozen=True, slots=True)
class Money:
    """
    Monetary amount value object.

    Contract:
        Pairs a Decimal amount with its currency code -- they are NEVER
        separated. Every operation returns a new instance.

    Guarantees:
        - Immutable and hashable (frozen dataclass with slots)
        - amount is a Decimal with exactly 2 decimal places
        - currency is an upper-case 3-letter code
        - Equality is structural and never raises: Money never equals a
          value of another type or another currency

    Non-goals:
        - Does NOT validate against an ISO 4217 registry
        - Does NOT perform currency conversion
    """

    amount: Decimal
    currency: str

    def __post_init__(self) -> None:
        if not isinstance(self.currency, str) or not self.currency.strip():
            raise InvalidAmountError(
                "Currency cannot be null or empty.", currency=self.currency
            )
        if len(self.currency) != 3 or not (self.currency.isascii() and self.currency.isalpha()):
            raise InvalidAmountError(
                "Currency must be a 3-letter ISO code (e.g., USD, EUR).",
                currency=self.currency,
            )
        amount = _to_decimal(self.amount, "amount")
        if not amount.is_finite():
            raise InvalidAmountError(f"Amount must be finite: {amount}", amount=amount)
        try:
            rounded = amount.quantize(_QUANTUM, rounding=ROUND_HALF_UP)
        except InvalidOperation as e:
            raise InvalidAmountError(
                f"Amount out of range: {amount}", amount=amount
            ) from e
        object.__setattr__(self, "amount", rounded)
        object.__setattr__(self, "currency", self.currency.upper())

    # -- Factories ----------------------------------------------------------

    @classmethod
    def of(cls, amount: Scalar, currency: str) -> Money:
        """Create Money from a Decimal, int or numeric string."""
        return cls(amount=_to_decimal(amount, "amount"), currency=currency)

    @classmethod
    def zero(cls, currency: str) -> Money:
        """Create a zero amount in the given currency."""
        return cls(amount=Decimal("0"), currency=currency)

    @classmethod
    def usd(cls, amount: Scalar) -> Money:
        return cls.of(amount, "USD")

    @classmethod
    def eur(cls, amount: Scalar) -> Money:
        return cls.of(amount, "EUR")

    @classmethod
    def gbp(cls, amount: Scalar) -> Money:
        return cls.of(amount, "GBP")

    # -- Introspection ------------------------------------------------------

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    @property
    def is_positive(self) -> bool:
        return self.amount > 0

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    def same_currency(self, other: Money) -> bool:
        """Check whether ``other`` carries the same currency code."""
        return self.currency == other.currency

    def _require_same_currency(self, other: Money, operation: str) -> None:
        if not self.same_currency(other):
            raise CurrencyMismatchError(operation, self.currency, other.currency)

    # -- Arithmetic ---------------------------------------------------------

    def add(self, other: Money) -> Money:
        """Add two Money values. Must be same currency."""
        self._require_same_currency(other, "add")
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def subtract(self, other: Money) -> Money:
        """Subtract ``other`` from this value. Must be same currency."""
        self._require_same_currency(other, "subtract")
        return Money(amount=self.amount - other.amount, currency=self.currency)

    def multiply(self, factor: Scalar) -> Money:
        """Scale by a scalar factor (e.g. a tax rate)."""
        return Money(
            amount=self.amount * _to_decimal(factor, "factor"), currency=self.currency
        )

    def divide(self, divisor: Scalar) -> Money:
        """Divide by a scalar. Raises DivideByZeroError for a zero divisor."""
        divisor = _to_decimal(divisor, "divisor")
        if divisor == 0:
            raise DivideByZeroError(self.currency)
        return Money(amount=self.amount / divisor, currency=self.currency)

    def negate(self) -> Money:
        return Money(amount=-self.amount, currency=self.currency)

    def abs(self) -> Money:
        return Money(amount=abs(self.amount), currency=self.currency)

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, factor: Scalar) -> Money:
        if not isinstance(factor, (Decimal, int, str)) or isinstance(factor, bool):
            return NotImplemented
        return self.multiply(factor)

    def __rmul__(self, factor: Scalar) -> Money:
        return self.__mul__(factor)

    def __truediv__(self, divisor: Scalar) -> Money:
        if not isinstance(divisor, (Decimal, int, str)) or isinstance(divisor, bool):
            return NotImplemented
        return self.divide(divisor)

    def __neg__(self) -> Money:
        return self.negate()

    def __abs__(self) -> Money:
        return self.abs()

    # -- Comparison ---------------------------------------------------------

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, "compare")
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, "compare")
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, "compare")
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, "compare")
        return self.amount >= other.amount

    # -- Budget helpers -----------------------------------------------------

    def variance_percentage(self, budgeted: Money) -> Decimal:
        """
        Percent variance of this amount from ``budgeted``.

        Postconditions:
            - Returns ``(amount - budgeted) / budgeted * 100``.
            - Returns 0 when ``budgeted`` is zero (zero base means zero
              variance, not an error).

        Raises:
            CurrencyMismatchError: If the currencies differ.
        """
        self._require_same_currency(budgeted, "calculate variance for")
        if budgeted.amount == 0:
            return Decimal("0")
        return (self.amount - budgeted.amount) / budgeted.amount * _HUNDRED

    def is_over(self, budgeted: Money) -> bool:
        """True when this amount exceeds ``budgeted``."""
        return self > budgeted

    # -- Formatting ---------------------------------------------------------

    def format(self, spec: str = ",.2f") -> str:
        return f"{format(self.amount, spec)} {self.currency}"

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"Money({str(self.amount)!r}, {self.currency!r})"
