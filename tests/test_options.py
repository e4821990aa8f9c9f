"""Tests for the Option A/B/C survivorship adjustments."""

from decimal import Decimal

from pension_planner.calculators import options


def test_option_a_passes_through():
    result = options.adjust_for_option(76000, "A", 59)
    assert result.member_pension == Decimal("76000.00")
    assert result.survivor_pension == 0
    assert result.warning is None


def test_option_b_age_bands():
    assert options.adjust_for_option(76000, "B", 59).member_pension == Decimal("75240.00")
    assert options.adjust_for_option(76000, "B", 50).member_pension == Decimal("75240.00")
    assert options.adjust_for_option(76000, "B", 60).member_pension == Decimal("73720.00")
    assert options.adjust_for_option(76000, "B", 61).member_pension == Decimal("72200.00")
    assert options.adjust_for_option(76000, "B", 59).survivor_pension == 0


def test_option_c_exact_pair():
    result = options.adjust_for_option(76000, "C", 59, 57)
    assert result.member_pension == Decimal("69274.00")
    assert abs(result.survivor_pension - Decimal("46182.67")) < Decimal("0.01")
    assert result.warning is None


def test_option_c_survivor_is_two_thirds():
    for base, member_age, bene_age in [(76000, 59, 57), (63840, 56, 54), (50123.45, 65, 65), (41000, 62, None)]:
        result = options.adjust_for_option(base, "C", member_age, bene_age)
        ratio = result.survivor_pension / result.member_pension
        assert abs(ratio - Decimal(2) / Decimal(3)) < Decimal("1e-9")


def test_option_c_missing_beneficiary_uses_general_factor():
    for bene in (None, "", "abc", 0, -4):
        result = options.adjust_for_option(76000, "C", 59, bene)
        assert result.member_pension == Decimal("66880.00")
        assert result.warning == options.MISSING_BENEFICIARY_WARNING


def test_option_c_nearest_member_age_fallback_warns():
    factor, warning = options.option_c_factor(60, 58)
    assert factor == Decimal("0.9115")
    assert warning is not None and "60" in warning


def test_option_c_ties_prefer_lower_age():
    # 62 is three years from both 59 and 65
    factor, _ = options.option_c_factor(62, 57)
    assert factor == Decimal("0.9115")
    # beneficiary 54 is one year from both 53 and 55 under member age 55
    factor, warning = options.option_c_factor(55, 54)
    assert factor == Decimal("0.9295")
    assert warning is not None


def test_option_c_rounds_ages():
    factor, warning = options.option_c_factor(58.6, "57.2")
    assert factor == Decimal("0.9115")
    assert warning is None


def test_option_parse_accepts_loose_names():
    result = options.adjust_for_option(1000, "option b", 55)
    assert result.member_pension == Decimal("990.00")


def test_option_b_reduction_boundaries():
    assert options.option_b_reduction(Decimal("59.9")) == Decimal("0.01")
    assert options.option_b_reduction(60) == Decimal("0.03")
    assert options.option_b_reduction(Decimal("60.1")) == Decimal("0.05")
