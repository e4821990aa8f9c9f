"""Tests for batch scenario evaluation and comparison."""

import threading
from dataclasses import replace
from decimal import Decimal

import pytest

from pension_planner.calculators import scenarios
from pension_planner.calculators.projection import project_retirement_benefits
from pension_planner.models import ProjectionParams


def _scenario(scenario_id, salary=95000, group="GROUP_2", yos=30, end_age=80):
    params = ProjectionParams(
        current_age=55,
        planned_retirement_age=60,
        current_years_of_service=yos,
        average_salary=salary,
        group=group,
        hire_era="before_2012",
        social_security_claiming_age=67,
        social_security_annual_benefit=30000,
        projection_end_age=end_age,
    )
    return scenarios.RetirementScenario(scenario_id, f"Scenario {scenario_id}", params)


def test_batch_isolates_failures():
    batch = [_scenario("a"), _scenario("b", salary=120000), _scenario("bad", group="GROUP_9")]
    results = scenarios.calculate_scenarios(batch)
    assert [r.scenario_id for r in results] == ["a", "b", "bad"]
    assert results[0].error is None
    assert results[0].annual_pension == Decimal("76000.00")
    assert results[2].error is not None
    assert results[2].total_monthly_income == 0
    assert results[2].lifetime_income == 0


def test_ineligible_scenario_is_placeholder():
    result = scenarios.calculate_scenario(_scenario("short", end_age=59))
    assert result.error is not None
    assert result.annual_pension == 0


def test_cancelled_batch_returns_nothing_new():
    event = threading.Event()
    event.set()
    assert scenarios.calculate_scenarios([_scenario("a"), _scenario("b")], cancel_event=event) == []


def test_compare_requires_two_matching_items():
    single = [_scenario("a")]
    results = scenarios.calculate_scenarios(single)
    with pytest.raises(ValueError):
        scenarios.compare_scenarios(single, results)
    pair = [_scenario("a"), _scenario("b")]
    with pytest.raises(ValueError):
        scenarios.compare_scenarios(pair + [_scenario("c")], scenarios.calculate_scenarios(pair))


def test_compare_picks_best():
    batch = [_scenario("a"), _scenario("b", salary=120000)]
    results = scenarios.calculate_scenarios(batch)
    comparison = scenarios.compare_scenarios(batch, results)
    assert comparison.best_for_income == "b"
    assert comparison.best_for_lifetime == "b"
    assert comparison.best_for_taxes == "a"
    assert comparison.differences[0]["scenario_id"] == "b"
    assert comparison.differences[0]["monthly_income_difference"] > 0


def test_results_to_frame():
    df = scenarios.results_to_frame(scenarios.calculate_scenarios([_scenario("a"), _scenario("b")]))
    assert list(df.index) == ["a", "b"]
    assert df.loc["a", "annual_pension"] == 76000.0


def test_lifetime_income_stops_at_life_expectancy():
    scenario = replace(_scenario("short_life"), life_expectancy=70)
    years = project_retirement_benefits(scenario.params)
    assert years[-1].age > 70
    expected = sum(y.combined_total_annual for y in years if y.age <= 70)
    assert scenarios.calculate_scenario(scenario).lifetime_income == expected.quantize(Decimal("0.01"))


def test_lifetime_income_carries_last_row_forward():
    scenario = replace(_scenario("long_life"), life_expectancy=85)
    years = project_retirement_benefits(scenario.params)
    assert years[-1].age == 75
    expected = sum(y.combined_total_annual for y in years) + years[-1].combined_total_annual * 10
    assert scenarios.calculate_scenario(scenario).lifetime_income == expected.quantize(Decimal("0.01"))
