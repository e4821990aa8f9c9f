"""Social Security claiming-age adjustments.

Benefits claimed before full retirement age (FRA) are reduced and benefits
claimed after it earn delayed retirement credits:

* early: 5/9 of 1% per month for the first 36 months, then 5/12 of 1% per
  additional month (30% total at 62 when FRA is 67);
* delayed: 2/3 of 1% per month (8% a year) until age 70.

Claiming ages are clamped to 62..70 and fractional ages are converted to whole
months, so the factor is monotonic in the claiming age.

Example
-------

>>> claiming_adjustment_factor(62, 67)
Decimal('0.7')
>>> adjust_benefit(70, 67, 24000)
Decimal('29760.00')
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from .. import config
from ..models import Number
from ..money import cents, to_decimal

FIRST_TIER_MONTHS = 36
FIRST_TIER_RATE = Decimal(5) / Decimal(900)
SECOND_TIER_RATE = Decimal(5) / Decimal(1200)
MAX_EARLY_REDUCTION = Decimal("0.30")
DELAYED_CREDIT_RATE = Decimal(2) / Decimal(300)

SPOUSAL_SHARE = Decimal("0.5")
SPOUSAL_FIRST_TIER_RATE = Decimal(25) / Decimal(3600)

SURVIVOR_MIN_AGE = 60
SURVIVOR_MAX_REDUCTION = Decimal("0.285")


def _months(years: Decimal) -> int:
    return int((years * 12).to_integral_value(rounding=ROUND_HALF_UP))


def _clamp_claim_age(claiming_age: Number) -> Decimal:
    age = to_decimal(claiming_age)
    return max(Decimal(config.MIN_SS_CLAIMING_AGE), min(Decimal(config.MAX_SS_CLAIMING_AGE), age))


def _early_reduction(months_early: int, first_rate: Decimal) -> Decimal:
    first = min(months_early, FIRST_TIER_MONTHS)
    extra = max(0, months_early - FIRST_TIER_MONTHS)
    return first * first_rate + extra * SECOND_TIER_RATE


def claiming_adjustment_factor(claiming_age: Number, full_retirement_age: Number = config.FULL_RETIREMENT_AGE) -> Decimal:
    """Multiplier applied to the FRA benefit for a given claiming age."""
    claim = _clamp_claim_age(claiming_age)
    fra = to_decimal(full_retirement_age)
    if claim == fra:
        return Decimal(1)
    if claim < fra:
        reduction = min(_early_reduction(_months(fra - claim), FIRST_TIER_RATE), MAX_EARLY_REDUCTION)
        return (Decimal(1) - reduction).quantize(Decimal("0.000001"), rounding=ROUND_HALF_UP).normalize()
    max_months = max(0, _months(Decimal(config.MAX_SS_CLAIMING_AGE) - fra))
    months_late = min(_months(claim - fra), max_months)
    return (Decimal(1) + months_late * DELAYED_CREDIT_RATE).quantize(Decimal("0.000001"), rounding=ROUND_HALF_UP).normalize()


def adjust_benefit(claiming_age: Number, full_retirement_age: Number, full_benefit: Number) -> Decimal:
    """Adjusted benefit, in the same period as ``full_benefit``.

    Parameters
    ----------
    claiming_age : number
        Age benefits start.
    full_retirement_age : number
        FRA for the worker's birth year.
    full_benefit : number
        Benefit payable at FRA (monthly or annual).

    Returns
    -------
    Decimal
        ``full_benefit`` times the claiming factor, rounded to cents.
    """
    factor = claiming_adjustment_factor(claiming_age, full_retirement_age)
    return cents(to_decimal(full_benefit) * factor)


def spousal_benefit(worker_pia: Number, claiming_age: Number, full_retirement_age: Number = config.FULL_RETIREMENT_AGE) -> Decimal:
    """Spousal benefit on a worker's record.

    Up to half the worker's PIA at the spouse's FRA, reduced 25/36 of 1% per
    month for the first 36 months early and 5/12 of 1% beyond.  Delaying past
    FRA earns nothing.
    """
    full = to_decimal(worker_pia) * SPOUSAL_SHARE
    claim = _clamp_claim_age(claiming_age)
    fra = to_decimal(full_retirement_age)
    if claim >= fra:
        return cents(full)
    reduction = _early_reduction(_months(fra - claim), SPOUSAL_FIRST_TIER_RATE)
    return cents(full * (1 - reduction))


def survivor_benefit(deceased_benefit: Number, claiming_age: Number, full_retirement_age: Number = config.FULL_RETIREMENT_AGE) -> Decimal:
    """Widow(er) benefit: 100% at FRA falling linearly to 71.5% at age 60."""
    benefit = to_decimal(deceased_benefit)
    fra = to_decimal(full_retirement_age)
    claim = max(Decimal(SURVIVOR_MIN_AGE), to_decimal(claiming_age))
    if claim >= fra:
        return cents(benefit)
    span = _months(fra - SURVIVOR_MIN_AGE)
    reduction = SURVIVOR_MAX_REDUCTION * _months(fra - claim) / span
    return cents(benefit * (1 - reduction))


__all__ = [
    "claiming_adjustment_factor",
    "adjust_benefit",
    "spousal_benefit",
    "survivor_benefit",
    "MAX_EARLY_REDUCTION",
]
