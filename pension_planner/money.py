"""Decimal helpers for currency values."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Union[int, float, str, Decimal, None], default: Optional[Decimal] = None) -> Decimal:
    """Convert ``value`` to ``Decimal`` through its string form.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")`` rather
    than its binary expansion.  ``None`` or unparseable text returns
    ``default`` when one is given and raises ``ValueError`` otherwise.
    """
    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        if default is not None:
            return default
        raise ValueError(f"Not a number: {value!r}")
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation:
        if default is not None:
            return default
        raise ValueError(f"Not a number: {value!r}") from None
    if not result.is_finite():
        if default is not None:
            return default
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def cents(value: Decimal) -> Decimal:
    """Round to whole cents, halves away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def monthly(annual: Decimal) -> Decimal:
    return cents(annual / 12)


__all__ = ["CENT", "ZERO", "to_decimal", "cents", "monthly"]
