"""Year-by-year retirement income projection.

The projection walks ages from the first possible retirement age to the end
of the horizon and joins the pension (factor, cap, option, COLA) with Social
Security.  It is a small state machine:

``BEFORE_ELIGIBLE``
    The member cannot retire at this age yet (eligibility fails or no factor
    is tabulated).  The age is skipped and service keeps accruing.
``ACCRUING``
    A row is produced.  Years of service are frozen at the value reached in
    the first retirement row.  COLA years are counted from that row too, so the
    first row never carries COLA even when the start was pushed past the
    planned retirement age.
``CAPPED_STABLE``
    The allowance is at the 80% cap, the factor is at its 2.5% maximum and
    either COLA is off or the horizon is within five years.  Further rows
    could not change the pension, so the projection stops after this row.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Sequence

import pandas as pd

from .. import config
from ..models import (
    Group,
    HireEra,
    PensionOption,
    ProjectionParams,
    ProjectionSummary,
    ProjectionYear,
)
from ..money import ZERO, monthly, to_decimal
from .benefit_factors import apply_benefit_cap, calculate_benefit_factor, group_minimum_age
from .cola import apply_cola
from .eligibility import check_eligibility
from .options import adjust_for_option
from .social_security import adjust_benefit

logger = logging.getLogger(__name__)

STABLE_HORIZON_YEARS = 5


class ProjectionState(str, Enum):
    BEFORE_ELIGIBLE = "before_eligible"
    ACCRUING = "accruing"
    CAPPED_STABLE = "capped_stable"


def is_capped_stable(capped: bool, factor: Decimal, cola_enabled: bool, age: int, end_age: int) -> bool:
    """True once later rows can no longer change the pension."""
    return (
        capped
        and factor >= config.MAX_BENEFIT_FACTOR
        and (not cola_enabled or age >= end_age - STABLE_HORIZON_YEARS)
    )


def _project_year(
    params: ProjectionParams, age: int, yos: Decimal, factor: Decimal, first_age: int
) -> ProjectionYear:
    salary = to_decimal(params.average_salary)
    base = salary * yos * factor
    after_cap, capped = apply_benefit_cap(base, salary)
    adjusted = adjust_for_option(after_cap, params.option, age, params.beneficiary_age)
    pension = adjusted.member_pension

    cola_total = ZERO
    if params.cola_enabled and age > first_age:
        cola = apply_cola(pension, age - first_age, params.cola_rate, params.cola_base)
        cola_total = cola.total_increase
    total_pension = pension + cola_total

    social_security = ZERO
    if age >= params.social_security_claiming_age:
        social_security = adjust_benefit(
            params.social_security_claiming_age,
            config.FULL_RETIREMENT_AGE,
            params.social_security_annual_benefit,
        )
    combined = total_pension + social_security

    return ProjectionYear(
        age=age,
        years_of_service=yos,
        benefit_factor=factor,
        base_pension_before_cap=base,
        base_pension_after_cap=after_cap,
        capped_at_80_percent=capped,
        pension_with_option=pension,
        survivor_pension=adjusted.survivor_pension,
        cola_adjustment=cola_total,
        total_pension_annual=total_pension,
        social_security_annual=social_security,
        combined_total_annual=combined,
        monthly_pension=monthly(total_pension),
        monthly_social_security=monthly(social_security),
        monthly_combined=monthly(combined),
        warning=adjusted.warning,
    )


def project_retirement_benefits(params: ProjectionParams) -> List[ProjectionYear]:
    """Project annual pension and Social Security income.

    Parameters
    ----------
    params : ProjectionParams
        Member data and assumptions.  The projection starts at the later of
        the planned retirement age and the group's minimum age and runs to
        ``projection_end_age`` inclusive.

    Returns
    -------
    list of ProjectionYear
        One row per retirement age.  Ages where the member is not yet
        eligible are omitted.  The same parameters always give the same rows.
    """
    group = Group.parse(params.group)
    era = HireEra.parse(params.hire_era)
    PensionOption.parse(params.option)

    start_age = max(int(params.planned_retirement_age), group_minimum_age(group))
    end_age = int(params.projection_end_age)
    current_yos = to_decimal(params.current_years_of_service)

    rows: List[ProjectionYear] = []
    state = ProjectionState.BEFORE_ELIGIBLE
    frozen_yos: Optional[Decimal] = None
    first_age: Optional[int] = None

    for age in range(start_age, end_age + 1):
        if frozen_yos is None:
            yos = current_yos + max(0, age - int(params.current_age))
        else:
            yos = frozen_yos

        eligibility = check_eligibility(age, yos, group, era)
        factor = calculate_benefit_factor(age, group, era, yos) if eligibility.eligible else ZERO
        if not eligibility.eligible or factor == 0:
            logger.debug("Age %s skipped: %s", age, eligibility.reason or "no benefit factor")
            continue

        if frozen_yos is None:
            frozen_yos = yos
            first_age = age
        row = _project_year(params, age, frozen_yos, factor, first_age)
        rows.append(row)

        if is_capped_stable(row.capped_at_80_percent, factor, params.cola_enabled, age, end_age):
            state = ProjectionState.CAPPED_STABLE
            logger.debug("Projection stable at age %s, stopping", age)
            break
        state = ProjectionState.ACCRUING

    logger.debug("Projection produced %d rows, final state %s", len(rows), state.value)
    return rows


def summarize_projection(years: Sequence[ProjectionYear]) -> Optional[ProjectionSummary]:
    """Headline figures for a projection, or ``None`` when it is empty."""
    if not years:
        return None
    first, last = years[0], years[-1]
    return ProjectionSummary(
        start_age=first.age,
        end_age=last.age,
        total_projection_years=len(years),
        initial_monthly_pension=first.monthly_pension,
        final_monthly_pension=last.monthly_pension,
        peak_monthly_income=max(y.monthly_combined for y in years),
        total_cola_benefit=last.cola_adjustment,
        years_with_social_security=sum(1 for y in years if y.social_security_annual > 0),
        capped_at_80_percent=any(y.capped_at_80_percent for y in years),
    )


_MONEY_COLUMNS = [
    "base_pension_before_cap",
    "base_pension_after_cap",
    "pension_with_option",
    "survivor_pension",
    "cola_adjustment",
    "total_pension_annual",
    "social_security_annual",
    "combined_total_annual",
    "monthly_pension",
    "monthly_social_security",
    "monthly_combined",
]


def projection_to_frame(years: Sequence[ProjectionYear]) -> pd.DataFrame:
    """Projection rows as a DataFrame indexed by age, money as floats."""
    df = pd.DataFrame([asdict(y) for y in years])
    if df.empty:
        return df
    for col in _MONEY_COLUMNS + ["years_of_service", "benefit_factor"]:
        df[col] = df[col].astype(float)
    return df.set_index("age")


__all__ = [
    "ProjectionState",
    "is_capped_stable",
    "project_retirement_benefits",
    "summarize_projection",
    "projection_to_frame",
]
