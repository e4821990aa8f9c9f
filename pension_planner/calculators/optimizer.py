"""Pension and Social Security claiming-strategy optimizer.

The optimizer scores every combination of pension start age and Social
Security claiming age, ranks them and explains the runners-up.  It also runs
a break-even analysis for Social Security timing and, on request, a Monte
Carlo simulation of the recommended strategy.

Scoring weighs lifetime benefits and monthly income, penalises claiming
anything before 65 and adds a bonus when the monthly income goal is met:

``score = lifetime / 1e6 × 40 + monthly / 1e4 × 30 − 2 × max(0, 65 − earliest) + 10·[meets goal]``
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .. import config
from ..models import (
    AlternativeScenario,
    BreakEvenComparison,
    FilingStatus,
    Group,
    MonteCarloParams,
    Number,
    OptimizationInput,
    OptimizationResult,
    OptimizationScenario,
    TaxInput,
)
from ..money import cents, to_decimal
from .benefit_factors import full_factor_age
from .monte_carlo import run_monte_carlo
from .performance import PerformanceMonitor
from .social_security import adjust_benefit
from .taxes import estimate_taxes

logger = logging.getLogger(__name__)

PENSION_REDUCTION_PER_YEAR = Decimal("0.06")
MAX_PENSION_REDUCTION = Decimal("0.30")
EARLINESS_PIVOT_AGE = 65
MAX_ALTERNATIVES = 3


def pension_reduction_factor(claiming_age: int, group: Group) -> Decimal:
    """Multiplier on the full pension for starting before the group's full-factor age."""
    years_early = max(0, full_factor_age(group) - claiming_age)
    return 1 - min(PENSION_REDUCTION_PER_YEAR * years_early, MAX_PENSION_REDUCTION)


def score_scenario(lifetime: Decimal, monthly_income: Decimal, pension_age: int, ss_age: int, goal: Decimal) -> float:
    score = float(lifetime) / 1e6 * 40 + float(monthly_income) / 1e4 * 30
    score -= max(0, (EARLINESS_PIVOT_AGE - min(pension_age, ss_age)) * 2)
    if goal > 0 and monthly_income >= goal:
        score += 10
    return round(score, 6)


def _claiming_grid(current_age: int) -> Tuple[List[int], List[int]]:
    pension_ages = [a for a in config.PENSION_CLAIMING_AGES if a >= current_age] or [current_age]
    ss_ages = [a for a in config.SS_CLAIMING_AGES if a >= current_age] or [config.MAX_SS_CLAIMING_AGE]
    return pension_ages, ss_ages


def _net_monthly(
    data: OptimizationInput, monthly_pension: Decimal, monthly_ss: Decimal, age: int
) -> Decimal:
    other = to_decimal(data.other_monthly_income)
    taxes = estimate_taxes(TaxInput(
        pension_income=monthly_pension * 12,
        social_security_income=monthly_ss * 12,
        other_income=other * 12,
        filing_status=data.filing_status,
        age=age,
        state=data.state,
    ))
    return cents(monthly_pension + monthly_ss + other - taxes.total_tax / 12)


def build_scenario(data: OptimizationInput, pension_age: int, ss_age: int) -> OptimizationScenario:
    group = Group.parse(data.group)
    pension = cents(to_decimal(data.pension_monthly_benefit) * pension_reduction_factor(pension_age, group))
    social_security = adjust_benefit(ss_age, data.full_retirement_age, data.social_security_full_benefit)
    monthly_income = pension + social_security

    life = int(data.life_expectancy)
    lifetime = pension * 12 * max(0, life - pension_age) + social_security * 12 * max(0, life - ss_age)
    goal = to_decimal(data.retirement_income_goal)

    return OptimizationScenario(
        pension_claiming_age=pension_age,
        ss_claiming_age=ss_age,
        monthly_pension=pension,
        monthly_social_security=social_security,
        monthly_income=monthly_income,
        net_monthly_income=_net_monthly(data, pension, social_security, max(pension_age, ss_age)),
        lifetime_benefits=cents(lifetime),
        score=score_scenario(lifetime, monthly_income, pension_age, ss_age, goal),
    )


def rank_scenarios(scenarios: Sequence[OptimizationScenario]) -> List[OptimizationScenario]:
    """Best first; equal scores keep the earlier (younger) combination first."""
    return sorted(scenarios, key=lambda s: s.score, reverse=True)


def _scenario_name(scenario: OptimizationScenario, group: Group, fra: int) -> str:
    full_age = full_factor_age(group)
    if scenario.pension_claiming_age < full_age:
        pension = "Early"
    elif scenario.pension_claiming_age == full_age:
        pension = "Standard"
    else:
        pension = "Delayed"
    if scenario.ss_claiming_age < fra:
        ss = "Early"
    elif scenario.ss_claiming_age == fra:
        ss = "Full"
    else:
        ss = "Delayed"
    return f"{pension} Pension + {ss} Social Security"


def describe_tradeoffs(alternative: OptimizationScenario, recommended: OptimizationScenario) -> Tuple[str, ...]:
    tradeoffs = []
    income_gap = recommended.monthly_income - alternative.monthly_income
    if income_gap > 0:
        tradeoffs.append(f"${income_gap:,.0f} less monthly income")
    lifetime_gap = recommended.lifetime_benefits - alternative.lifetime_benefits
    if lifetime_gap > 0:
        tradeoffs.append(f"${lifetime_gap:,.0f} less lifetime benefits")
    if alternative.pension_claiming_age < recommended.pension_claiming_age:
        tradeoffs.append("Earlier access to pension benefits")
    if alternative.ss_claiming_age < recommended.ss_claiming_age:
        tradeoffs.append("Earlier access to Social Security")
    return tuple(tradeoffs)


def break_even_age(early_age: Number, early_benefit: Number, later_age: Number, later_benefit: Number) -> Optional[float]:
    """Age at which cumulative later-claim benefits catch up with early ones.

    Benefits are monthly.  Returns ``None`` when waiting pays no more.

    >>> break_even_age(62, 1400, 67, 2000)
    78.7
    """
    early_b = to_decimal(early_benefit)
    later_b = to_decimal(later_benefit)
    diff = later_b - early_b
    if diff <= 0:
        return None
    months_between = (to_decimal(later_age) - to_decimal(early_age)) * 12
    months_to_recover = early_b * months_between / diff
    return round(float(to_decimal(later_age) + months_to_recover / 12), 1)


def _total_to(lifespan: int, claim_age: int, monthly_benefit: Decimal) -> Decimal:
    return cents(monthly_benefit * 12 * max(0, lifespan - claim_age))


def break_even_analysis(
    social_security_full_benefit: Number,
    full_retirement_age: int = config.FULL_RETIREMENT_AGE,
    lifespan: int = config.BREAK_EVEN_LIFESPAN,
) -> Tuple[BreakEvenComparison, ...]:
    """Compare claiming at 62 against FRA, and FRA against 70."""
    pia = to_decimal(social_security_full_benefit)
    fra = int(full_retirement_age)
    early = config.MIN_SS_CLAIMING_AGE
    late = config.MAX_SS_CLAIMING_AGE
    benefit = {age: adjust_benefit(age, fra, pia) for age in (early, fra, late)}

    comparisons = []
    be = break_even_age(early, benefit[early], fra, benefit[fra])
    comparisons.append(BreakEvenComparison(
        early_age=early,
        later_age=fra,
        early_monthly=benefit[early],
        later_monthly=benefit[fra],
        break_even_age=be,
        early_total=_total_to(lifespan, early, benefit[early]),
        later_total=_total_to(lifespan, fra, benefit[fra]),
        recommendation="Consider early claiming" if be is None or be > 80 else "Wait for full retirement",
    ))
    be = break_even_age(fra, benefit[fra], late, benefit[late])
    comparisons.append(BreakEvenComparison(
        early_age=fra,
        later_age=late,
        early_monthly=benefit[fra],
        later_monthly=benefit[late],
        break_even_age=be,
        early_total=_total_to(lifespan, fra, benefit[fra]),
        later_total=_total_to(lifespan, late, benefit[late]),
        recommendation="Consider delaying to 70" if be is not None and be < 82 else "Claim at full retirement",
    ))
    return tuple(comparisons)


def monte_carlo_params(data: OptimizationInput, scenario: OptimizationScenario) -> MonteCarloParams:
    return MonteCarloParams(
        retirement_age=min(scenario.pension_claiming_age, scenario.ss_claiming_age),
        life_expectancy=int(data.life_expectancy),
        pension_annual=float(scenario.monthly_pension * 12),
        social_security_annual=float(scenario.monthly_social_security * 12),
        other_annual_income=float(to_decimal(data.other_monthly_income) * 12),
        current_savings=float(to_decimal(data.current_savings)),
        healthcare_annual_premium=float(to_decimal(data.healthcare_monthly_premium) * 12),
        income_goal_monthly=float(to_decimal(data.retirement_income_goal)),
        inflation_scenario=data.inflation_scenario,
        market_scenario=data.market_scenario,
        cola_rate=float(config.COLA_RATE),
        cola_base=float(config.COLA_BASE),
    )


def optimize_claiming_strategy(
    data: OptimizationInput,
    monitor: Optional[PerformanceMonitor] = None,
    rng: Optional[np.random.Generator] = None,
) -> OptimizationResult:
    """Rank claiming strategies and explain the recommendation.

    Parameters
    ----------
    data : OptimizationInput
        Member benefits, goals and assumptions.
    monitor : PerformanceMonitor, optional
        Receives timings for the grid search and the simulation.
    rng : numpy.random.Generator, optional
        Randomness for the Monte Carlo stage; ``data.seed`` is used otherwise.

    Returns
    -------
    OptimizationResult
    """
    monitor = monitor or PerformanceMonitor()
    group = Group.parse(data.group)
    FilingStatus.parse(data.filing_status)

    with monitor.measure("optimize_scenarios"):
        pension_ages, ss_ages = _claiming_grid(int(data.current_age))
        ranked = rank_scenarios([build_scenario(data, p, s) for p in pension_ages for s in ss_ages])

    recommended = ranked[0]
    alternatives = tuple(
        AlternativeScenario(
            name=_scenario_name(alt, group, data.full_retirement_age),
            scenario=alt,
            tradeoffs=describe_tradeoffs(alt, recommended),
        )
        for alt in ranked[1:1 + MAX_ALTERNATIVES]
    )
    break_even = break_even_analysis(data.social_security_full_benefit, data.full_retirement_age)

    simulation = None
    if data.include_monte_carlo:
        with monitor.measure("monte_carlo", paths=data.monte_carlo_paths):
            simulation = run_monte_carlo(
                monte_carlo_params(data, recommended),
                n_paths=data.monte_carlo_paths,
                seed=data.seed,
                rng=rng,
            )

    logger.info(
        "Recommended pension at %s and Social Security at %s (score %.2f) from %d scenarios",
        recommended.pension_claiming_age,
        recommended.ss_claiming_age,
        recommended.score,
        len(ranked),
    )
    return OptimizationResult(
        recommended=recommended,
        alternatives=alternatives,
        scenarios=tuple(ranked),
        break_even=break_even,
        monte_carlo=simulation,
    )


__all__ = [
    "optimize_claiming_strategy",
    "build_scenario",
    "rank_scenarios",
    "score_scenario",
    "pension_reduction_factor",
    "describe_tradeoffs",
    "break_even_age",
    "break_even_analysis",
    "monte_carlo_params",
]
