"""Tests for the claiming-strategy optimizer."""

import re
from dataclasses import replace
from decimal import Decimal

from pension_planner.calculators import optimizer
from pension_planner.calculators.performance import PerformanceMonitor
from pension_planner.models import Group, OptimizationInput


def _data(**overrides) -> OptimizationInput:
    base = OptimizationInput(
        current_age=55,
        life_expectancy=85,
        pension_monthly_benefit=5000,
        social_security_full_benefit=2500,
        group="GROUP_2",
        retirement_income_goal=6000,
    )
    return replace(base, **overrides)


def test_pension_reduction_factor():
    assert optimizer.pension_reduction_factor(55, Group.GROUP_2) == Decimal("0.70")
    assert optimizer.pension_reduction_factor(60, Group.GROUP_2) == 1
    assert optimizer.pension_reduction_factor(62, Group.GROUP_1) == Decimal("0.82")
    assert optimizer.pension_reduction_factor(50, Group.GROUP_1) == Decimal("0.70")


def test_score_formula():
    assert optimizer.score_scenario(Decimal("1000000"), Decimal("10000"), 65, 67, Decimal("5000")) == 80.0
    assert optimizer.score_scenario(Decimal("1000000"), Decimal("10000"), 60, 62, Decimal("5000")) == 70.0
    assert optimizer.score_scenario(Decimal("1000000"), Decimal("4000"), 65, 67, Decimal("5000")) == 52.0


def test_full_grid_is_ranked():
    result = optimizer.optimize_claiming_strategy(_data())
    assert len(result.scenarios) == 6 * 9
    scores = [s.score for s in result.scenarios]
    assert scores == sorted(scores, reverse=True)
    assert result.recommended == result.scenarios[0]
    assert result.monte_carlo is None


def test_grid_drops_ages_already_passed():
    result = optimizer.optimize_claiming_strategy(_data(current_age=63))
    assert {s.pension_claiming_age for s in result.scenarios} == {65, 67, 70}
    assert min(s.ss_claiming_age for s in result.scenarios) == 63
    assert len(result.scenarios) == 3 * 8


def test_alternatives_are_named_with_tradeoffs():
    result = optimizer.optimize_claiming_strategy(_data())
    assert 1 <= len(result.alternatives) <= 3
    pattern = re.compile(r"^(Early|Standard|Delayed) Pension \+ (Early|Full|Delayed) Social Security$")
    for alt in result.alternatives:
        assert pattern.match(alt.name)
        assert alt.scenario in result.scenarios[1:4]


def test_tradeoff_descriptions():
    best = optimizer.build_scenario(_data(), 60, 67)
    other = optimizer.build_scenario(_data(), 55, 62)
    tradeoffs = optimizer.describe_tradeoffs(other, best)
    assert any(t.endswith("less monthly income") for t in tradeoffs)
    assert "Earlier access to pension benefits" in tradeoffs
    assert "Earlier access to Social Security" in tradeoffs


def test_net_income_never_exceeds_gross():
    result = optimizer.optimize_claiming_strategy(_data())
    assert all(s.net_monthly_income <= s.monthly_income for s in result.scenarios)


def test_break_even_age():
    assert optimizer.break_even_age(62, 1400, 67, 2000) == 78.7
    assert optimizer.break_even_age(62, 2000, 67, 2000) is None


def test_break_even_analysis():
    early, late = optimizer.break_even_analysis(2000, 67)
    assert early.early_monthly == Decimal("1400.00")
    assert early.break_even_age == 78.7
    assert early.recommendation == "Wait for full retirement"
    assert early.early_total == Decimal("386400.00")
    assert late.later_monthly == Decimal("2480.00")
    assert late.break_even_age == 82.5
    assert late.recommendation == "Claim at full retirement"


def test_monte_carlo_is_optional_and_reproducible():
    data = _data(include_monte_carlo=True, monte_carlo_paths=500, seed=3)
    first = optimizer.optimize_claiming_strategy(data)
    second = optimizer.optimize_claiming_strategy(data)
    assert first.monte_carlo.paths == 500
    assert 0.0 <= first.monte_carlo.success_rate <= 100.0
    assert first.monte_carlo == second.monte_carlo


def test_monitor_records_timings():
    monitor = PerformanceMonitor()
    optimizer.optimize_claiming_strategy(_data(include_monte_carlo=True, monte_carlo_paths=200, seed=1), monitor=monitor)
    names = [m.name for m in monitor.metrics]
    assert names == ["optimize_scenarios", "monte_carlo"]
