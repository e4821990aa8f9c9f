"""Tests for the retirement eligibility rules."""

from pension_planner.calculators.eligibility import check_eligibility


def test_pre_2012_reference_cases():
    assert check_eligibility(55, 20, "GROUP_1", "before_2012").eligible is True
    result = check_eligibility(54, 9, "GROUP_1", "before_2012")
    assert result.eligible is False
    assert "20+ YOS" in result.reason


def test_pre_2012_twenty_years_at_any_age():
    assert check_eligibility(42, 20, "GROUP_4", "before_2012").eligible is True


def test_pre_2012_age_55_with_ten_years():
    assert check_eligibility(55, 10, "GROUP_1", "before_2012").eligible is True
    assert check_eligibility(54, 19, "GROUP_1", "before_2012").eligible is False


def test_post_2012_requires_ten_years():
    result = check_eligibility(62, 9, "GROUP_1", "after_2012")
    assert result.eligible is False
    assert "min 10 YOS" in result.reason


def test_post_2012_group_minimum_ages():
    result = check_eligibility(59, 12, "GROUP_1", "after_2012")
    assert result.eligible is False
    assert "Group 1 requires min age 60" in result.reason
    assert check_eligibility(60, 12, "GROUP_1", "after_2012").eligible is True
    assert check_eligibility(54, 12, "GROUP_2", "after_2012").eligible is False
    assert check_eligibility(55, 12, "GROUP_2", "after_2012").eligible is True
    assert check_eligibility(50, 12, "GROUP_4", "after_2012").eligible is True


def test_post_2012_group3_has_no_age_floor():
    assert check_eligibility(45, 10, "GROUP_3", "after_2012").eligible is True


def test_missing_hire_era():
    for era in (None, "", "sometime"):
        result = check_eligibility(60, 25, "GROUP_1", era)
        assert result.eligible is False
        assert result.reason == "Service entry period not selected."
