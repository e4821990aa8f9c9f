"""Monte Carlo simulation of retirement income under economic uncertainty.

Each path simulates one retirement, year by year:

* inflation follows a mean-reverting AR(1) process with uniform shocks;
* market returns carry their own shock plus a component correlated with the
  inflation shock;
* the pension grows by the Massachusetts capped COLA, Social Security by a
  fixed 2.5% COLA and other income by simulated inflation;
* savings fund a 4% draw that grows with market returns;
* healthcare premiums grow at 4% ± 2% a year and are subtracted.

Net income is discounted at 3% and the present value compared with 80% of
the income goal over the horizon.  A path meeting the threshold counts as a
success.

Paths are independent, so the work is split into chunks.  Each chunk is a
vectorised numpy simulation with its own generator seeded from the caller's
generator, and chunks run on a thread pool.  Results are gathered in chunk
order, so a fixed seed gives identical output however the threads are
scheduled.

Example
-------

>>> params = MonteCarloParams(retirement_age=60, life_expectancy=85,
...                           pension_annual=60000, social_security_annual=24000,
...                           income_goal_monthly=5000)
>>> result = run_monte_carlo(params, n_paths=1000, seed=7)
>>> 0.0 <= result.success_rate <= 100.0
True
"""

from __future__ import annotations

import logging
import math
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Optional

import numpy as np

from .. import config
from ..models import MonteCarloParams, MonteCarloResult, RiskMetrics, YearlyProjection

logger = logging.getLogger(__name__)

PERCENTILES = (5, 10, 25, 50, 75, 90, 95)


def _load_economic_assumptions(path: Optional[Path] = None) -> Dict[str, Dict]:
    return config.load_table(config.ECONOMIC_ASSUMPTIONS_PATH, path, as_decimal=False)


def pension_cola_path(pension_annual: float, years: int, rate: float, base: float) -> np.ndarray:
    """Deterministic pension stream under the capped COLA, one value per year."""
    path = np.empty(years)
    amount = float(pension_annual)
    for t in range(years):
        path[t] = amount
        amount += rate * min(amount, base)
    return path


def _simulate_chunk(
    params: MonteCarloParams,
    n_paths: int,
    years: int,
    rng: np.random.Generator,
    assumptions: Dict[str, Dict],
    cancel_event: Optional[threading.Event] = None,
) -> Optional[Dict[str, np.ndarray]]:
    if cancel_event is not None and cancel_event.is_set():
        return None

    infl = assumptions["inflation"][params.inflation_scenario]
    mkt = assumptions["market"][params.market_scenario]
    hc = assumptions["healthcare"]

    infl_shocks = rng.uniform(-1.0, 1.0, size=(n_paths, years))
    mkt_shocks = rng.uniform(-1.0, 1.0, size=(n_paths, years))
    hc_shocks = rng.uniform(-1.0, 1.0, size=(n_paths, years))

    # AR(1) is sequential in time but vectorised across paths
    inflation = np.empty((n_paths, years))
    prev = np.full(n_paths, infl["mean"])
    for t in range(years):
        prev = infl["mean"] + infl["persistence"] * (prev - infl["mean"]) + infl_shocks[:, t] * infl["volatility"]
        inflation[:, t] = prev

    rho = mkt["inflation_correlation"]
    returns = mkt["mean"] + mkt["volatility"] * (
        math.sqrt(1.0 - rho * rho) * mkt_shocks + rho * infl_shocks
    )

    t_idx = np.arange(years)
    cum_inflation = np.cumprod(1.0 + inflation, axis=1)
    growth = np.cumprod(1.0 + returns, axis=1)
    hc_factor = (1.0 + hc["mean_inflation"] + hc_shocks * hc["volatility"]) ** t_idx

    pension = pension_cola_path(params.pension_annual, years, params.cola_rate, params.cola_base)
    social_security = params.social_security_annual * (1.0 + assumptions["social_security_cola"]) ** t_idx

    income = (
        pension
        + social_security
        + params.other_annual_income * cum_inflation
        + params.current_savings * growth * assumptions["withdrawal_rate"]
        - params.healthcare_annual_premium * hc_factor
    )
    discount = (1.0 + assumptions["discount_rate"]) ** (t_idx + 1)
    present_value = (income / discount).sum(axis=1)
    return {
        "present_value": present_value,
        "income": income,
        "mean_return": returns.mean(axis=1),
    }


def _pick(sorted_values: np.ndarray, pct: float) -> float:
    n = len(sorted_values)
    idx = min(n - 1, int(math.floor(n * pct / 100.0)))
    return float(sorted_values[idx])


def _empty_result(cancelled: bool) -> MonteCarloResult:
    return MonteCarloResult(
        paths=0,
        success_rate=0.0,
        percentiles={p: 0.0 for p in PERCENTILES},
        median_outcome=0.0,
        mean_outcome=0.0,
        standard_deviation=0.0,
        worst_case=0.0,
        best_case=0.0,
        risk_metrics=RiskMetrics(100.0, 0.0, 0.0, 0.0),
        cancelled=cancelled,
    )


def summarize_paths(
    present_value: np.ndarray,
    income: np.ndarray,
    mean_returns: np.ndarray,
    threshold: float,
    retirement_age: int,
    risk_free_rate: float,
    cancelled: bool = False,
) -> MonteCarloResult:
    """Reduce simulated paths to percentiles, success rate and risk metrics."""
    ordered = np.sort(present_value)
    n = len(ordered)
    success = present_value >= threshold
    success_rate = 100.0 * float(np.mean(success))

    shortfalls = threshold - present_value[~success]
    expected_shortfall = float(shortfalls.mean()) if shortfalls.size else 0.0
    return_std = float(np.std(mean_returns))
    sharpe = (float(np.mean(mean_returns)) - risk_free_rate) / return_std if return_std > 0 else 0.0

    yearly = []
    for t in range(income.shape[1]):
        p10, p50, p90 = np.percentile(income[:, t], [10, 50, 90])
        yearly.append(YearlyProjection(t + 1, retirement_age + t, float(p50), float(p10), float(p90)))

    return MonteCarloResult(
        paths=n,
        success_rate=success_rate,
        percentiles={p: _pick(ordered, p) for p in PERCENTILES},
        median_outcome=_pick(ordered, 50),
        mean_outcome=float(np.mean(ordered)),
        standard_deviation=float(np.std(ordered)),
        worst_case=float(ordered[0]),
        best_case=float(ordered[-1]),
        risk_metrics=RiskMetrics(
            probability_of_shortfall=100.0 - success_rate,
            expected_shortfall=expected_shortfall,
            value_at_risk_95=_pick(ordered, 5),
            sharpe_ratio=sharpe,
        ),
        yearly_projections=tuple(yearly),
        cancelled=cancelled,
    )


def run_monte_carlo(
    params: MonteCarloParams,
    n_paths: int = config.MONTE_CARLO_PATHS,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    chunk_size: int = config.MONTE_CARLO_CHUNK_SIZE,
    max_workers: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
    assumptions: Optional[Dict[str, Dict]] = None,
) -> MonteCarloResult:
    """Simulate ``n_paths`` retirements and summarise the outcomes.

    Parameters
    ----------
    params : MonteCarloParams
        Income streams, horizon and economic scenario names.
    n_paths : int
        Number of simulated paths.
    seed : int, optional
        Seed for a fresh generator; ignored when ``rng`` is given.
    rng : numpy.random.Generator, optional
        Source of randomness.  Each chunk draws its own seed from it.
    chunk_size : int
        Paths per vectorised chunk.
    max_workers : int, optional
        Thread pool size.
    cancel_event : threading.Event, optional
        When set, chunks that have not started are skipped and the result is
        built from the chunks already finished.
    assumptions : dict, optional
        Economic presets matching ``data/economic_assumptions.json``.

    Returns
    -------
    MonteCarloResult
    """
    assumptions = assumptions or _load_economic_assumptions()
    if params.inflation_scenario not in assumptions["inflation"]:
        raise ValueError(f"Unknown inflation scenario: {params.inflation_scenario!r}")
    if params.market_scenario not in assumptions["market"]:
        raise ValueError(f"Unknown market scenario: {params.market_scenario!r}")

    rng = rng or np.random.default_rng(seed)
    years = max(1, int(params.life_expectancy) - int(params.retirement_age))
    n_paths = max(0, int(n_paths))
    chunk_size = max(1, int(chunk_size))
    sizes = [min(chunk_size, n_paths - start) for start in range(0, n_paths, chunk_size)]
    chunk_seeds = rng.integers(0, 2**32, size=len(sizes))

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = [
            pool.submit(
                _simulate_chunk, params, size, years, np.random.default_rng(int(s)), assumptions, cancel_event
            )
            for size, s in zip(sizes, chunk_seeds)
        ]
        chunks = [f.result() for f in futures]

    done = [c for c in chunks if c is not None]
    cancelled = len(done) < len(chunks)
    if cancelled:
        logger.info("Monte Carlo cancelled after %d of %d chunks", len(done), len(chunks))
    if not done:
        return _empty_result(cancelled)

    threshold = params.income_goal_monthly * 12 * years * assumptions["success_threshold"]
    result = summarize_paths(
        np.concatenate([c["present_value"] for c in done]),
        np.vstack([c["income"] for c in done]),
        np.concatenate([c["mean_return"] for c in done]),
        threshold,
        params.retirement_age,
        assumptions["risk_free_rate"],
        cancelled,
    )
    logger.debug("Monte Carlo %d paths, success %.1f%%", result.paths, result.success_rate)
    return result


__all__ = ["run_monte_carlo", "summarize_paths", "pension_cola_path", "PERCENTILES"]
