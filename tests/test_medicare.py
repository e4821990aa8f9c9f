"""Tests for Medicare IRMAA tiers."""

from decimal import Decimal

from pension_planner.calculators.medicare import calculate_medicare_premiums


def test_standard_premium_below_first_threshold():
    result = calculate_medicare_premiums(90000)
    assert result.irmaa_tier == 0
    assert result.part_b_monthly == Decimal("174.70")
    assert result.annual_surcharge == 0
    assert calculate_medicare_premiums(103000).irmaa_tier == 0


def test_surcharge_tiers_single():
    result = calculate_medicare_premiums(140000)
    assert result.irmaa_tier == 2
    assert result.part_b_monthly == Decimal("349.40")
    assert result.part_d_surcharge_monthly == Decimal("33.30")
    assert result.annual_surcharge == Decimal("2496.00")
    assert calculate_medicare_premiums(600000).part_b_monthly == Decimal("594.00")


def test_married_thresholds_are_higher():
    result = calculate_medicare_premiums(250000, "married_joint")
    assert result.irmaa_tier == 1
    assert result.part_b_monthly == Decimal("244.60")
