"""End-to-end annual allowance for one member.

Chains the eligibility gate, the benefit-factor lookup, the 80% cap and the
option adjustment.  This is the calculation checked against the MSRB
reference figures, e.g. a Group 2 member hired before 2012, age 59 with 34
years on a $95,000 average salary:

>>> from pension_planner.models import PensionCalculationInput
>>> r = calculate_pension(PensionCalculationInput(95000, 59, 34, "GROUP_2", "before_2012", "B"))
>>> r.annual_pension, r.capped_at_80_percent
(Decimal('75240.00'), True)
"""

from __future__ import annotations

import logging
from typing import List

from ..models import PensionCalculationInput, PensionCalculationResult, PensionOption
from ..money import ZERO, monthly, to_decimal
from .benefit_factors import apply_benefit_cap, calculate_benefit_factor
from .eligibility import check_eligibility
from .options import adjust_for_option

logger = logging.getLogger(__name__)


def calculate_pension(calc_input: PensionCalculationInput) -> PensionCalculationResult:
    option = PensionOption.parse(calc_input.option)
    eligibility = check_eligibility(
        calc_input.age, calc_input.years_of_service, calc_input.group, calc_input.hire_era
    )
    if not eligibility.eligible:
        logger.info("Member not eligible: %s", eligibility.reason)
        return PensionCalculationResult(
            eligibility=eligibility,
            benefit_factor=ZERO,
            base_pension_before_cap=ZERO,
            base_pension_after_cap=ZERO,
            capped_at_80_percent=False,
            annual_pension=ZERO,
            monthly_pension=ZERO,
            survivor_pension=ZERO,
            option=option,
            description=eligibility.reason,
        )

    factor = calculate_benefit_factor(
        calc_input.age, calc_input.group, calc_input.hire_era, calc_input.years_of_service
    )
    warnings: List[str] = []
    if factor == 0:
        warnings.append(f"No benefit factor is tabulated for age {calc_input.age}.")

    salary = to_decimal(calc_input.average_salary)
    base = salary * to_decimal(calc_input.years_of_service) * factor
    after_cap, capped = apply_benefit_cap(base, salary)
    adjusted = adjust_for_option(after_cap, option, calc_input.age, calc_input.beneficiary_age)
    if adjusted.warning:
        warnings.append(adjusted.warning)

    return PensionCalculationResult(
        eligibility=eligibility,
        benefit_factor=factor,
        base_pension_before_cap=base,
        base_pension_after_cap=after_cap,
        capped_at_80_percent=capped,
        annual_pension=adjusted.member_pension,
        monthly_pension=monthly(adjusted.member_pension),
        survivor_pension=adjusted.survivor_pension,
        option=option,
        description=adjusted.description,
        warnings=tuple(warnings),
    )


__all__ = ["calculate_pension"]
