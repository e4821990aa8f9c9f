"""Massachusetts cost-of-living adjustment.

The COLA is a percentage of the allowance but only on a capped base.  At the
statutory 3% on a $13,000 base the increase can never exceed $390 a year, no
matter how large the pension is.  Increases compound: each year's increase
is computed from the running adjusted amount.

Example
-------

>>> result = apply_cola(50000, 2)
>>> result.per_year_increase
(Decimal('390.00'), Decimal('390.00'))
>>> result.final_amount
Decimal('50780.00')
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, List

from .. import config
from ..models import COLAResult, Number
from ..money import ZERO, cents, to_decimal


def apply_cola(
    pension_before_cola: Number,
    years_in_retirement: int,
    rate: Number = config.COLA_RATE,
    base_amount: Number = config.COLA_BASE,
) -> COLAResult:
    """Compound the capped COLA for ``years_in_retirement`` years.

    Year zero (the retirement year itself) receives no adjustment.
    """
    amount = cents(to_decimal(pension_before_cola))
    rate_d = to_decimal(rate)
    base_d = to_decimal(base_amount)

    increases: List[Decimal] = []
    for _ in range(max(0, int(years_in_retirement))):
        increase = cents(rate_d * min(amount, base_d))
        increases.append(increase)
        amount += increase

    total = sum(increases, ZERO)
    return COLAResult(per_year_increase=tuple(increases), total_increase=total, final_amount=amount)


def max_annual_increase(rate: Number = config.COLA_RATE, base_amount: Number = config.COLA_BASE) -> Decimal:
    return cents(to_decimal(rate) * to_decimal(base_amount))


def cola_info(rate: Number = config.COLA_RATE, base_amount: Number = config.COLA_BASE) -> Dict[str, object]:
    """Describe a COLA configuration for display."""
    rate_d = to_decimal(rate)
    base_d = to_decimal(base_amount)
    cap = max_annual_increase(rate_d, base_d)
    return {
        "rate": rate_d,
        "base_amount": base_d,
        "max_annual_increase": cap,
        "description": (
            f"{(rate_d * 100).normalize():f}% COLA on the first ${base_d:,.0f} of the "
            f"allowance (maximum ${cap:,.2f} per year)"
        ),
    }


COLA_SCENARIOS = {
    "current": (Decimal("0.03"), Decimal("13000")),
    "increased_base": (Decimal("0.03"), Decimal("20000")),
    "increased_rate": (Decimal("0.035"), Decimal("13000")),
}


def compare_cola_scenarios(pension: Number, years_in_retirement: int) -> Dict[str, Dict[str, object]]:
    """Project the current COLA rule against the two proposed reforms."""
    results = {}
    for name, (rate, base) in COLA_SCENARIOS.items():
        projected = apply_cola(pension, years_in_retirement, rate, base)
        results[name] = {
            "rate": rate,
            "base_amount": base,
            "max_annual_increase": max_annual_increase(rate, base),
            "total_increase": projected.total_increase,
            "final_amount": projected.final_amount,
        }
    return results


__all__ = ["apply_cola", "max_annual_increase", "cola_info", "compare_cola_scenarios", "COLA_SCENARIOS"]
