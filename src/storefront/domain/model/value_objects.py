"""Money and Quantity.

Both are frozen dataclasses that validate on construction, so an
instance that exists is always usable.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from storefront.domain.exceptions import ValidationError

DEFAULT_CURRENCY = "IDR"


def _require_int(value: object, what: str) -> None:
    # bool is an int subclass; True units of anything is a bug
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{what} must be an integer, got {type(value).__name__}")


@functools.total_ordering
@dataclass(frozen=True)
class Money:
    """Amount in the smallest unit of ``currency``.

    Rupiah has no minor unit in practice, so ``Money(120000)`` is
    Rp120.000. Amounts are never negative.
    """

    amount: int
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        _require_int(self.amount, "Money amount")
        if self.amount < 0:
            raise ValidationError(f"Money amount cannot be negative, got {self.amount}")

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> Money:
        return cls(0, currency)

    @classmethod
    def of(cls, amount: str | int, currency: str = DEFAULT_CURRENCY) -> Money:
        """Parse a whole-unit amount such as ``"120000"`` or ``120000``."""
        try:
            value = Decimal(str(amount).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        if not value.is_finite() or value != value.to_integral_value():
            raise ValidationError(f"Invalid money amount: {amount!r}")
        return cls(int(value), currency)

    def __add__(self, other: Money) -> Money:
        return Money(self.amount + self._same_currency(other).amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        remaining = self.amount - self._same_currency(other).amount
        if remaining < 0:
            raise ValidationError("Money subtraction would result in a negative amount")
        return Money(remaining, self.currency)

    def __mul__(self, factor: int) -> Money:
        if isinstance(factor, bool) or not isinstance(factor, int):
            raise TypeError(f"Money can only be multiplied by an int, not {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def __lt__(self, other: Money) -> bool:
        return self.amount < self._same_currency(other).amount

    def __str__(self) -> str:
        grouped = f"{self.amount:,}"
        if self.currency == "IDR":
            return "Rp" + grouped.replace(",", ".")
        return f"{self.currency} {grouped}"

    def _same_currency(self, other: Money) -> Money:
        if other.currency != self.currency:
            raise ValidationError(f"Cannot combine {self.currency} with {other.currency}")
        return other


@dataclass(frozen=True)
class Quantity:
    """Number of units on a cart line or order; at least one."""

    value: int

    def __post_init__(self) -> None:
        _require_int(self.value, "Quantity")
        if self.value < 1:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)
