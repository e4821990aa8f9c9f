"""Tests for input validation and the validation cache."""

from pension_planner.calculators.validation import (
    ValidationCache,
    validate_optimization_input,
    validate_pension_input,
)


def _pension(**overrides):
    data = {
        "average_salary": "95000",
        "age": 59,
        "years_of_service": 34,
        "group": "GROUP_2",
        "hire_era": "before_2012",
        "option": "A",
    }
    data.update(overrides)
    return data


def _optimization(**overrides):
    data = {
        "current_age": 55,
        "life_expectancy": 85,
        "pension_monthly_benefit": 5000,
        "social_security_full_benefit": 2500,
        "retirement_income_goal": 6000,
    }
    data.update(overrides)
    return data


def test_valid_pension_input():
    result = validate_pension_input(_pension())
    assert result.is_valid is True
    assert result.errors == {}


def test_missing_and_non_numeric_fields():
    result = validate_pension_input(_pension(average_salary=None, years_of_service="lots"))
    assert result.is_valid is False
    assert result.errors["average_salary"] == "Average salary is required"
    assert result.errors["years_of_service"] == "Years of service must be a number"


def test_service_limits():
    assert "years_of_service" in validate_pension_input(_pension(years_of_service=45)).warnings
    assert "years_of_service" in validate_pension_input(_pension(years_of_service=55)).errors
    assert "years_of_service" in validate_pension_input(_pension(years_of_service=0)).errors


def test_salary_warnings():
    low = validate_pension_input(_pension(average_salary=15000))
    assert low.is_valid is True
    assert "average_salary" in low.warnings
    assert "average_salary" in validate_pension_input(_pension(average_salary=350000)).warnings


def test_age_ranges():
    assert "social_security_claiming_age" in validate_pension_input(_pension(social_security_claiming_age=61)).errors
    assert "planned_retirement_age" in validate_pension_input(_pension(planned_retirement_age=50)).errors
    assert validate_pension_input(_pension(planned_retirement_age=62, social_security_claiming_age=67)).is_valid


def test_unknown_enums_are_errors():
    result = validate_pension_input(_pension(group="Group 7", hire_era="someday", option="Z"))
    assert set(result.errors) == {"group", "hire_era", "option"}


def test_option_c_without_beneficiary_is_only_a_warning():
    result = validate_pension_input(_pension(option="C"))
    assert result.is_valid is True
    assert "beneficiary_age" in result.warnings
    assert result.messages == list(result.warnings.values())


def test_optimization_input():
    assert validate_optimization_input(_optimization()).is_valid is True
    missing = validate_optimization_input(_optimization(retirement_income_goal=""))
    assert missing.errors["retirement_income_goal"] == "Retirement income goal is required"
    short = validate_optimization_input(_optimization(life_expectancy=60, current_age=62))
    assert "life_expectancy" in short.errors


def test_cache_returns_memoised_result():
    cache = ValidationCache()
    first = validate_pension_input(_pension(), cache=cache)
    second = validate_pension_input(_pension(), cache=cache)
    assert first is second
    assert len(cache) == 1


def test_cache_clears_when_full():
    cache = ValidationCache(max_size=2)
    for age in (56, 57):
        validate_pension_input(_pension(age=age), cache=cache)
    assert len(cache) == 2
    validate_pension_input(_pension(age=58), cache=cache)
    assert len(cache) == 0
