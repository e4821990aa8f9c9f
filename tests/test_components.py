"""Tests for chart and insight helpers."""

from pension_planner.calculators import monte_carlo, optimizer, projection
from pension_planner.components import charts, insights
from pension_planner.models import MonteCarloParams, OptimizationInput, ProjectionParams


def _years():
    return projection.project_retirement_benefits(ProjectionParams(
        current_age=55,
        planned_retirement_age=60,
        current_years_of_service=30,
        average_salary=95000,
        group="GROUP_2",
        hire_era="before_2012",
        social_security_annual_benefit=36000,
    ))


def test_projection_chart_has_two_series():
    fig = charts.projection_chart(_years())
    assert [t.name for t in fig.data] == ["Pension", "Social Security"]
    assert list(fig.data[0].x)[0] == 60


def test_fan_chart_from_simulation():
    result = monte_carlo.run_monte_carlo(
        MonteCarloParams(retirement_age=60, life_expectancy=70, pension_annual=50000, social_security_annual=20000),
        n_paths=100,
        seed=1,
    )
    fig = charts.fan_chart(result)
    assert len(fig.data) == 3
    assert len(fig.data[2].y) == 10
    assert "simulations" in insights.monte_carlo_insight(result)


def test_strategy_heatmap_shape():
    result = optimizer.optimize_claiming_strategy(OptimizationInput(
        current_age=55, life_expectancy=85, pension_monthly_benefit=4000, social_security_full_benefit=2000,
        group="GROUP_2", retirement_income_goal=5000,
    ))
    fig = charts.strategy_heatmap(result)
    assert len(fig.data[0].z) == 6
    assert len(fig.data[0].z[0]) == 9
    text = insights.optimization_insight(result)
    assert f"pension at {result.recommended.pension_claiming_age}" in text


def test_success_gauge_clamps():
    fig = charts.success_gauge(140.0)
    assert fig.data[0].value == 100.0


def test_success_gauge_uses_insight_bands():
    fig = charts.success_gauge(72.5)
    gauge = fig.data[0]
    assert gauge.value == 72.5
    assert gauge.number.font.color == insights.success_band(72.5)[1]
    assert [tuple(s.range) for s in gauge.gauge.steps] == [(85.0, 100.0), (60.0, 85.0), (0.0, 60.0)]
    assert "Moderate" in gauge.title.text


def test_success_band_edges():
    assert insights.success_band(85.0)[0] == "high"
    assert insights.success_band(84.9)[0] == "moderate"
    assert insights.success_band(59.9)[0] == "low"


def test_projection_insight():
    assert "not eligible" in insights.projection_insight(None)
    text = insights.projection_insight(projection.summarize_projection(_years()))
    assert "age 60" in text
    assert "80% maximum" in text
