"""Decimal helpers for deposit and allocation amounts.

Amounts are abstract decimal quantities. Everything entering the allocator is
normalised to ``Decimal`` so proportional splits and the final rounding are
exact and deterministic.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Union

Amount = Union[Decimal, int, float, str]

ZERO = Decimal("0")


class InvalidAmountError(ValueError):
    """Raised when a value cannot be read as a decimal amount."""

    pass


def to_amount(value: Amount) -> Decimal:
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise InvalidAmountError(f"Not an amount: {value!r}")
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(value.strip() if isinstance(value, str) else value)
        except InvalidOperation:
            raise InvalidAmountError(f"Not an amount: {value!r}") from None
    elif isinstance(value, float):
        # str() keeps 0.1 as Decimal("0.1") instead of its binary expansion
        result = Decimal(str(value))
    else:
        raise InvalidAmountError(f"Not an amount: {value!r}")

    if not result.is_finite():
        raise InvalidAmountError(f"Amount must be finite, got {value!r}")
    return result


def sum_amounts(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def round_amount(value: Decimal, places: int = 2) -> Decimal:
    """Round half-up to ``places`` decimals (2 -> cents)."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def working_precision(values: Iterable[Decimal], places: int, guard: int = 28) -> int:
    """Significant digits needed to divide and quantize ``values`` to ``places`` decimals.

    Covers the widest integer part, the deepest fraction (small divisors give
    large quotients) and ``guard`` extra digits for the ratios themselves.
    """
    exponents = [v.adjusted() for v in values if v]
    if not exponents:
        return guard + places
    return max(0, max(exponents)) - min(0, min(exponents)) + places + guard
