"""Reference checks against MSRB published figures.

All scenarios use a $95,000 average salary for a Group 2 member hired before
April 2, 2012.
"""

from decimal import Decimal

import pytest

from pension_planner.calculators.pension import calculate_pension
from pension_planner.models import PensionCalculationInput


MSRB_CASES = [
    # age, yos, bene age, option A, option B, option C
    (56, 32, 54, "63840.00", "63201.60", "59071.15"),
    (57, 33, 55, "68970.00", "68280.30", "63514.47"),
    (58, 34, 56, "74290.00", "73547.10", "68071.93"),
    (59, 34, 57, "76000.00", "75240.00", "69274.00"),
]


def _calc(age, yos, option, bene=None):
    return calculate_pension(PensionCalculationInput(95000, age, yos, "GROUP_2", "before_2012", option, bene))


@pytest.mark.parametrize("age,yos,bene,a,b,c", MSRB_CASES)
def test_msrb_group2_options(age, yos, bene, a, b, c):
    assert _calc(age, yos, "A").annual_pension == Decimal(a)
    assert _calc(age, yos, "B").annual_pension == Decimal(b)
    assert _calc(age, yos, "C", bene).annual_pension == Decimal(c)


def test_age_59_is_capped_at_eighty_percent():
    result = _calc(59, 34, "A")
    assert result.base_pension_before_cap == Decimal("77520.000")
    assert result.base_pension_after_cap == Decimal("76000.00")
    assert result.capped_at_80_percent is True
    assert result.monthly_pension == Decimal("6333.33")


def test_option_c_survivor_reference():
    result = _calc(59, 34, "C", 57)
    assert abs(result.survivor_pension - Decimal("46182.67")) < Decimal("0.01")
    assert result.warnings == ()


def test_ineligible_member_gets_reason_and_zero():
    result = calculate_pension(PensionCalculationInput(95000, 50, 5, "GROUP_2", "before_2012"))
    assert result.eligibility.eligible is False
    assert result.annual_pension == 0
    assert result.description == result.eligibility.reason


def test_option_c_warning_is_surfaced():
    result = _calc(59, 34, "C")
    assert any("Beneficiary Age" in w for w in result.warnings)
