"""Massachusetts public-employee pension and Social Security planner.

The top-level package re-exports the main entry points:

>>> from pension_planner import check_eligibility
>>> check_eligibility(55, 20, "GROUP_1", "before_2012").eligible
True
"""

from .calculators.benefit_factors import calculate_benefit_factor
from .calculators.eligibility import check_eligibility
from .calculators.optimizer import optimize_claiming_strategy
from .calculators.options import adjust_for_option
from .calculators.pension import calculate_pension
from .calculators.projection import project_retirement_benefits, summarize_projection
from .calculators.taxes import estimate_taxes

__version__ = "0.1.0"

__all__ = [
    "calculate_benefit_factor",
    "check_eligibility",
    "adjust_for_option",
    "calculate_pension",
    "project_retirement_benefits",
    "summarize_projection",
    "estimate_taxes",
    "optimize_claiming_strategy",
]
