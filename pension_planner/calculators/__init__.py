"""Helper package that exposes the pension and retirement calculators.

Each module is small and focused on one piece of the benefit engine:

* ``benefit_factors`` – statutory age factors by group and hire era, 80% cap.
* ``eligibility`` – age and service thresholds for retirement.
* ``options`` – Option A/B/C survivorship adjustments.
* ``cola`` – capped-base cost-of-living adjustment.
* ``pension`` – the full annual allowance for one member.
* ``social_security`` – claiming-age, spousal and survivor adjustments.
* ``taxes`` and ``medicare`` – federal/state tax and IRMAA premiums.
* ``projection`` – year-by-year pension plus Social Security income.
* ``optimizer`` and ``monte_carlo`` – claiming-strategy ranking and simulation.
* ``scenarios`` – fail-soft batch evaluation and comparison.
* ``validation`` and ``performance`` – input checks and timing.

See individual docstrings for details.
"""

from . import (  # noqa: F401
    benefit_factors,
    cola,
    eligibility,
    medicare,
    monte_carlo,
    optimizer,
    options,
    pension,
    performance,
    projection,
    scenarios,
    social_security,
    taxes,
    validation,
)

__all__ = [
    "benefit_factors",
    "cola",
    "eligibility",
    "medicare",
    "monte_carlo",
    "optimizer",
    "options",
    "pension",
    "performance",
    "projection",
    "scenarios",
    "social_security",
    "taxes",
    "validation",
]
