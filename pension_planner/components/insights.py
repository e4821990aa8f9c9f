"""Plain-language summaries of calculation results.

These are short rule-based sentences a UI can show next to the numbers.
"""

from typing import List, Optional, Tuple

from ..models import MonteCarloResult, OptimizationResult, ProjectionSummary

# Lower bounds (percent) of the success-rate bands, best first.
SUCCESS_BANDS = (
    (85.0, "high", "#16a34a"),
    (60.0, "moderate", "#d97706"),
    (0.0, "low", "#dc2626"),
)


def success_band(success_rate: float) -> Tuple[str, str]:
    """Return ``(label, colour)`` for a success rate in percent."""
    for floor, label, colour in SUCCESS_BANDS:
        if success_rate >= floor:
            return label, colour
    return SUCCESS_BANDS[-1][1], SUCCESS_BANDS[-1][2]


def projection_insight(summary: Optional[ProjectionSummary]) -> str:
    if summary is None:
        return "You are not eligible to retire within the projection period."
    text = (
        f"Your pension starts at age {summary.start_age} at ${summary.initial_monthly_pension:,.0f} "
        f"a month and reaches ${summary.final_monthly_pension:,.0f} by age {summary.end_age}."
    )
    if summary.capped_at_80_percent:
        text += " Your benefit is at the 80% maximum, so more service will not raise it."
    if summary.years_with_social_security:
        text += f" Peak combined income is ${summary.peak_monthly_income:,.0f} a month."
    return text


def optimization_insight(result: OptimizationResult) -> str:
    best = result.recommended
    lines: List[str] = [
        f"Starting your pension at {best.pension_claiming_age} and Social Security at "
        f"{best.ss_claiming_age} gives ${best.monthly_income:,.0f} a month "
        f"(${best.net_monthly_income:,.0f} after tax)."
    ]
    for comparison in result.break_even:
        if comparison.break_even_age is not None:
            lines.append(
                f"Waiting from {comparison.early_age} to {comparison.later_age} breaks even at age "
                f"{comparison.break_even_age:.1f}: {comparison.recommendation.lower()}."
            )
    if result.monte_carlo is not None:
        lines.append(monte_carlo_insight(result.monte_carlo))
    return " ".join(lines)


def monte_carlo_insight(result: MonteCarloResult) -> str:
    success = result.success_rate
    label, _ = success_band(success)
    outlook = f"{label} chance of meeting your income goal"
    return (
        f"Across {result.paths:,} simulations you have a {outlook} ({success:.1f}%). "
        f"Median lifetime income in today's dollars is ${result.median_outcome:,.0f}."
    )
