"""Batch evaluation and comparison of retirement scenarios.

A scenario is a named set of projection parameters plus tax settings.
Scenarios are evaluated on a small thread pool (four at a time by default).
One failing scenario never sinks the batch: the failure is logged and a
zero-valued result carrying the error message takes its place.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Union

import pandas as pd

from .. import config
from ..models import FilingStatus, ProjectionParams, TaxInput
from ..money import ZERO, cents, to_decimal
from .projection import project_retirement_benefits
from .taxes import estimate_taxes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetirementScenario:
    scenario_id: str
    name: str
    params: ProjectionParams
    filing_status: Union[FilingStatus, str] = FilingStatus.SINGLE
    state: str = "MA"
    life_expectancy: int = 85


@dataclass(frozen=True)
class ScenarioResult:
    scenario_id: str
    name: str
    annual_pension: Decimal
    monthly_pension: Decimal
    monthly_social_security: Decimal
    total_monthly_income: Decimal
    lifetime_income: Decimal
    net_monthly_after_tax: Decimal
    effective_tax_rate: Decimal
    replacement_ratio: Decimal
    survivor_pension: Decimal
    error: Optional[str] = None


@dataclass(frozen=True)
class ScenarioComparison:
    best_for_income: str
    best_for_lifetime: str
    best_for_taxes: str
    differences: List[Dict[str, object]]


def empty_result(scenario: RetirementScenario, error: str) -> ScenarioResult:
    return ScenarioResult(
        scenario_id=scenario.scenario_id,
        name=scenario.name,
        annual_pension=ZERO,
        monthly_pension=ZERO,
        monthly_social_security=ZERO,
        total_monthly_income=ZERO,
        lifetime_income=ZERO,
        net_monthly_after_tax=ZERO,
        effective_tax_rate=ZERO,
        replacement_ratio=ZERO,
        survivor_pension=ZERO,
        error=error,
    )


def calculate_scenario(scenario: RetirementScenario) -> ScenarioResult:
    """Project one scenario and derive its headline figures.

    The first projection row is the retirement year.  Lifetime income adds
    the projected rows up to and including the life-expectancy age and carries
    the last of them forward when the projection stopped early.
    """
    years = project_retirement_benefits(scenario.params)
    if not years:
        return empty_result(scenario, "Member is not eligible to retire within the projection horizon.")

    life = int(scenario.life_expectancy)
    lived = [y for y in years if y.age <= life]
    first = years[0]
    lifetime = sum((y.combined_total_annual for y in lived), ZERO)
    if lived:
        last = lived[-1]
        lifetime += last.combined_total_annual * max(0, life - last.age)

    taxes = estimate_taxes(TaxInput(
        pension_income=first.total_pension_annual,
        social_security_income=first.social_security_annual,
        filing_status=scenario.filing_status,
        age=first.age,
        state=scenario.state,
    ))
    salary = to_decimal(scenario.params.average_salary)
    replacement = (first.combined_total_annual / salary).quantize(Decimal("0.0001")) if salary > 0 else ZERO

    return ScenarioResult(
        scenario_id=scenario.scenario_id,
        name=scenario.name,
        annual_pension=first.total_pension_annual,
        monthly_pension=first.monthly_pension,
        monthly_social_security=first.monthly_social_security,
        total_monthly_income=first.monthly_combined,
        lifetime_income=cents(lifetime),
        net_monthly_after_tax=cents(taxes.net_income / 12),
        effective_tax_rate=taxes.effective_rate,
        replacement_ratio=replacement,
        survivor_pension=cents(first.survivor_pension),
    )


def _safe_calculate(scenario: RetirementScenario, cancel_event: Optional[threading.Event]) -> Optional[ScenarioResult]:
    if cancel_event is not None and cancel_event.is_set():
        return None
    try:
        return calculate_scenario(scenario)
    except Exception as exc:
        logger.exception("Scenario %s failed", scenario.scenario_id)
        return empty_result(scenario, str(exc))


def calculate_scenarios(
    scenarios: Sequence[RetirementScenario],
    max_concurrency: int = config.BATCH_CONCURRENCY,
    cancel_event: Optional[threading.Event] = None,
) -> List[ScenarioResult]:
    """Evaluate scenarios with at most ``max_concurrency`` in flight.

    Results come back in input order.  When ``cancel_event`` is set,
    scenarios that have not started are dropped and the finished ones are
    returned.
    """
    if not scenarios:
        return []
    with ThreadPoolExecutor(max_workers=max(1, max_concurrency)) as pool:
        futures = [pool.submit(_safe_calculate, s, cancel_event) for s in scenarios]
        results = [f.result() for f in futures]
    finished = [r for r in results if r is not None]
    if len(finished) < len(results):
        logger.info("Scenario batch cancelled after %d of %d", len(finished), len(results))
    return finished


def compare_scenarios(
    scenarios: Sequence[RetirementScenario], results: Sequence[ScenarioResult]
) -> ScenarioComparison:
    """Pick the best scenario on income, lifetime income and tax rate.

    Raises
    ------
    ValueError
        If fewer than two scenarios are given or the two sequences differ in
        length.
    """
    if len(scenarios) < 2 or len(results) < 2:
        raise ValueError("At least two scenarios are required for comparison")
    if len(scenarios) != len(results):
        raise ValueError("Scenarios and results must have the same length")

    valid = [r for r in results if r.error is None] or list(results)
    best_income = max(valid, key=lambda r: r.total_monthly_income)
    best_lifetime = max(valid, key=lambda r: r.lifetime_income)
    best_taxes = min(valid, key=lambda r: r.effective_tax_rate)

    baseline = results[0]
    differences = [
        {
            "scenario_id": r.scenario_id,
            "monthly_income_difference": r.total_monthly_income - baseline.total_monthly_income,
            "lifetime_income_difference": r.lifetime_income - baseline.lifetime_income,
            "net_monthly_difference": r.net_monthly_after_tax - baseline.net_monthly_after_tax,
        }
        for r in results[1:]
    ]
    return ScenarioComparison(
        best_for_income=best_income.scenario_id,
        best_for_lifetime=best_lifetime.scenario_id,
        best_for_taxes=best_taxes.scenario_id,
        differences=differences,
    )


def results_to_frame(results: Sequence[ScenarioResult]) -> pd.DataFrame:
    df = pd.DataFrame([asdict(r) for r in results])
    if df.empty:
        return df
    money = [c for c in df.columns if c not in ("scenario_id", "name", "error")]
    df[money] = df[money].astype(float)
    return df.set_index("scenario_id")


__all__ = [
    "RetirementScenario",
    "ScenarioResult",
    "ScenarioComparison",
    "calculate_scenario",
    "calculate_scenarios",
    "compare_scenarios",
    "results_to_frame",
    "empty_result",
]
