"""Tests for the capped-base COLA."""

from decimal import Decimal

from pension_planner.calculators import cola


def test_no_cola_in_retirement_year():
    result = cola.apply_cola(50000, 0)
    assert result.per_year_increase == ()
    assert result.total_increase == 0
    assert result.final_amount == Decimal("50000.00")


def test_flat_ceiling_for_large_pension():
    result = cola.apply_cola(50000, 3)
    assert result.per_year_increase == (Decimal("390.00"),) * 3
    assert result.total_increase == Decimal("1170.00")
    assert result.final_amount == Decimal("51170.00")


def test_compounds_on_running_amount():
    result = cola.apply_cola(10000, 2)
    assert result.per_year_increase == (Decimal("300.00"), Decimal("309.00"))
    assert result.final_amount == Decimal("10609.00")


def test_running_amount_crosses_base():
    result = cola.apply_cola(12800, 2)
    assert result.per_year_increase == (Decimal("384.00"), Decimal("390.00"))
    assert result.final_amount == Decimal("13574.00")


def test_single_year_increase_never_exceeds_390():
    for pension in (1000, 12999.99, 13000, 13001, 40000, 250000):
        result = cola.apply_cola(pension, 10)
        assert all(inc <= Decimal("390") for inc in result.per_year_increase)


def test_compare_cola_scenarios():
    results = cola.compare_cola_scenarios(50000, 1)
    assert results["current"]["max_annual_increase"] == Decimal("390.00")
    assert results["increased_base"]["max_annual_increase"] == Decimal("600.00")
    assert results["increased_rate"]["max_annual_increase"] == Decimal("455.00")
    assert results["increased_base"]["final_amount"] == Decimal("50600.00")


def test_cola_info_description():
    info = cola.cola_info()
    assert info["max_annual_increase"] == Decimal("390.00")
    assert "$13,000" in info["description"]
    assert "3% COLA" in info["description"]
