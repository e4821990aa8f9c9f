"""Survivorship option adjustment (Options A, B and C).

* **Option A** pays the full allowance with nothing to a survivor.
* **Option B** takes a small reduction, banded by the member's age, in
  exchange for a refund of remaining contributions; there is no survivor
  allowance.
* **Option C** is a joint-and-survivor election.  The member's allowance is
  reduced by a factor keyed on the (member age, beneficiary age) pair, and
  the beneficiary receives exactly two thirds of the reduced allowance for
  life.

Option C lookups are forgiving: when the exact pair is not tabulated the
nearest member age is used, and when no usable beneficiary age is supplied a
general approximation applies.  Both cases attach a warning rather than
raising.

Example
-------

>>> result = adjust_for_option(76000, "C", 59, 57)
>>> result.member_pension
Decimal('69274.00')
>>> round(result.survivor_pension, 2)
Decimal('46182.67')
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from .. import config
from ..models import Number, OptionAdjustmentResult, PensionOption
from ..money import ZERO, cents, to_decimal

logger = logging.getLogger(__name__)

SURVIVOR_FRACTION = Decimal(2) / Decimal(3)

OPTION_B_REDUCTION_BEFORE_60 = Decimal("0.01")
OPTION_B_REDUCTION_AT_60 = Decimal("0.03")
OPTION_B_REDUCTION_AFTER_60 = Decimal("0.05")

MISSING_BENEFICIARY_WARNING = "Valid Beneficiary Age needed for Option C. Using general approximation."

OptionCTable = Dict[Tuple[int, int], Decimal]


def load_option_c_table(path: Optional[Path] = None) -> Tuple[OptionCTable, Decimal]:
    """Return the ``(member_age, beneficiary_age) -> factor`` map and the general factor."""
    raw = config.load_table(config.BENEFIT_FACTOR_PATH, path)["option_c"]
    table = {(int(m), int(b)): factor for m, b, factor in raw["pairs"]}
    return table, raw["general_factor"]


def option_b_reduction(member_age: Number) -> Decimal:
    """Fractional Option B reduction for a member retiring at ``member_age``.

    Members under 60 lose 1%, exactly 60 loses 3% and over 60 loses 5%.  The
    plan summary words the bands as "up to 50" and "up to 60"; the bands used
    here are the ones the MSRB published figures follow (a 59 year old keeps
    99% of the Option A allowance).

    >>> option_b_reduction(59), option_b_reduction(60), option_b_reduction(65)
    (Decimal('0.01'), Decimal('0.03'), Decimal('0.05'))
    """
    age = to_decimal(member_age)
    if age < 60:
        return OPTION_B_REDUCTION_BEFORE_60
    if age == 60:
        return OPTION_B_REDUCTION_AT_60
    return OPTION_B_REDUCTION_AFTER_60


def _parse_beneficiary_age(value: Optional[Union[int, float, str]]) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        age = to_decimal(value)
    except ValueError:
        return None
    if age <= 0:
        return None
    return int(age.to_integral_value(rounding=ROUND_HALF_UP))


def option_c_factor(
    member_age: Number,
    beneficiary_age: Optional[Union[int, float, str]],
    table: Optional[OptionCTable] = None,
    general_factor: Optional[Decimal] = None,
) -> Tuple[Decimal, Optional[str]]:
    """Look up the Option C reduction factor.

    Returns ``(factor, warning)``.  ``warning`` is ``None`` only on an exact
    table hit.

    When the pair is missing, the tabulated member age closest to the
    member's age is used; ties go to the lower age.  Within that member age
    the closest beneficiary age is used, again preferring the lower one.
    """
    if table is None or general_factor is None:
        default_table, default_general = load_option_c_table()
        table = default_table if table is None else table
        general_factor = default_general if general_factor is None else general_factor

    bene = _parse_beneficiary_age(beneficiary_age)
    if bene is None:
        return general_factor, MISSING_BENEFICIARY_WARNING

    member = int(to_decimal(member_age).to_integral_value(rounding=ROUND_HALF_UP))
    key = (member, bene)
    if key in table:
        return table[key], None

    member_ages = sorted({m for m, _ in table})
    nearest_member = min(member_ages, key=lambda m: (abs(m - member), m))
    bene_ages = sorted(b for m, b in table if m == nearest_member)
    nearest_bene = min(bene_ages, key=lambda b: (abs(b - bene), b))
    factor = table[(nearest_member, nearest_bene)]
    warning = (
        f"Option C factor for member age {member} and beneficiary age {bene} is not "
        f"tabulated. Using factor for ages {nearest_member}/{nearest_bene}."
    )
    return factor, warning


def adjust_for_option(
    base_pension: Number,
    option: Union[PensionOption, str],
    member_age: Number,
    beneficiary_age: Optional[Union[int, float, str]] = None,
) -> OptionAdjustmentResult:
    """Apply the elected option to an annual base pension.

    Parameters
    ----------
    base_pension : number
        Annual allowance after the 80% cap.
    option : PensionOption or str
        ``A``, ``B`` or ``C``.
    member_age : number
        Member age at retirement.
    beneficiary_age : number, optional
        Required for an exact Option C factor.

    Returns
    -------
    OptionAdjustmentResult
        Member pension rounded to cents and, for Option C, a survivor pension
        equal to two thirds of it.
    """
    base = to_decimal(base_pension)
    opt = PensionOption.parse(option)

    if opt is PensionOption.A:
        return OptionAdjustmentResult(
            member_pension=cents(base),
            survivor_pension=ZERO,
            description="Option A: Full allowance, no survivor benefit",
        )

    if opt is PensionOption.B:
        reduction = option_b_reduction(member_age)
        pct = (reduction * 100).normalize()
        return OptionAdjustmentResult(
            member_pension=cents(base * (1 - reduction)),
            survivor_pension=ZERO,
            description=f"Option B: {pct:f}% reduction, return of remaining contributions",
        )

    factor, warning = option_c_factor(member_age, beneficiary_age)
    member = cents(base * factor)
    reduction_pct = ((1 - factor) * 100).normalize()
    if warning:
        logger.warning("Option C approximation: %s", warning)
    return OptionAdjustmentResult(
        member_pension=member,
        survivor_pension=member * SURVIVOR_FRACTION,
        description=f"Option C: {reduction_pct:f}% reduction, 66.67% survivor benefit",
        warning=warning,
    )


__all__ = [
    "adjust_for_option",
    "option_b_reduction",
    "option_c_factor",
    "load_option_c_table",
    "SURVIVOR_FRACTION",
    "MISSING_BENEFICIARY_WARNING",
]
