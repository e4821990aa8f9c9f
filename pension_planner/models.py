"""Typed input and result records shared by the calculators.

Every record is constructed fresh per calculation and is immutable once
returned.  Money fields are :class:`decimal.Decimal`; ratios and ages are
plain numbers.

Enum parsers are forgiving about spelling so that values coming from a form
layer ("Group 2", "2", "group_2") resolve to the same member:

>>> Group.parse("Group 2")
<Group.GROUP_2: 'GROUP_2'>
>>> PensionOption.parse("c")
<PensionOption.C: 'C'>
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

Number = Union[int, float, str, Decimal]


class Group(str, Enum):
    GROUP_1 = "GROUP_1"
    GROUP_2 = "GROUP_2"
    GROUP_3 = "GROUP_3"
    GROUP_4 = "GROUP_4"

    @classmethod
    def parse(cls, value: Union["Group", str, int]) -> "Group":
        if isinstance(value, cls):
            return value
        digits = re.findall(r"\d", str(value))
        if len(digits) == 1 and digits[0] in "1234":
            return cls("GROUP_" + digits[0])
        raise ValueError(f"Unknown retirement group: {value!r}")

    @property
    def number(self) -> int:
        return int(self.value[-1])


class HireEra(str, Enum):
    BEFORE_2012 = "before_2012"
    AFTER_2012 = "after_2012"

    @classmethod
    def parse(cls, value: Union["HireEra", str]) -> "HireEra":
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        if text in ("before_2012", "pre_2012", "before"):
            return cls.BEFORE_2012
        if text in ("after_2012", "post_2012", "after"):
            return cls.AFTER_2012
        raise ValueError(f"Unknown hire era: {value!r}")


class PensionOption(str, Enum):
    A = "A"
    B = "B"
    C = "C"

    @classmethod
    def parse(cls, value: Union["PensionOption", str]) -> "PensionOption":
        if isinstance(value, cls):
            return value
        text = str(value).strip().upper()
        if text.startswith("OPTION"):
            text = text[len("OPTION"):].strip(" _")
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"Unknown pension option: {value!r}") from None


class FilingStatus(str, Enum):
    SINGLE = "single"
    MARRIED_JOINT = "married_joint"
    MARRIED_SEPARATE = "married_separate"
    HEAD_OF_HOUSEHOLD = "head_of_household"

    @classmethod
    def parse(cls, value: Union["FilingStatus", str]) -> "FilingStatus":
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        aliases = {
            "married": cls.MARRIED_JOINT,
            "married_filing_jointly": cls.MARRIED_JOINT,
            "married_filing_separately": cls.MARRIED_SEPARATE,
            "hoh": cls.HEAD_OF_HOUSEHOLD,
        }
        if text in aliases:
            return aliases[text]
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"Unknown filing status: {value!r}") from None


# ---------- Pension ----------
@dataclass(frozen=True)
class EligibilityResult:
    eligible: bool
    reason: str = ""


@dataclass(frozen=True)
class PensionCalculationInput:
    average_salary: Number
    age: int
    years_of_service: Number
    group: Union[Group, str]
    hire_era: Union[HireEra, str]
    option: Union[PensionOption, str] = PensionOption.A
    beneficiary_age: Optional[Union[int, float, str]] = None


@dataclass(frozen=True)
class OptionAdjustmentResult:
    member_pension: Decimal
    survivor_pension: Decimal
    description: str
    warning: Optional[str] = None


@dataclass(frozen=True)
class PensionCalculationResult:
    eligibility: EligibilityResult
    benefit_factor: Decimal
    base_pension_before_cap: Decimal
    base_pension_after_cap: Decimal
    capped_at_80_percent: bool
    annual_pension: Decimal
    monthly_pension: Decimal
    survivor_pension: Decimal
    option: PensionOption
    description: str
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class COLAResult:
    per_year_increase: Tuple[Decimal, ...]
    total_increase: Decimal
    final_amount: Decimal


# ---------- Projection ----------
@dataclass(frozen=True)
class ProjectionParams:
    current_age: int
    planned_retirement_age: int
    current_years_of_service: Number
    average_salary: Number
    group: Union[Group, str]
    hire_era: Union[HireEra, str]
    option: Union[PensionOption, str] = PensionOption.A
    beneficiary_age: Optional[Union[int, float, str]] = None
    cola_enabled: bool = True
    cola_rate: Number = Decimal("0.03")
    cola_base: Number = Decimal("13000")
    social_security_claiming_age: int = 67
    social_security_annual_benefit: Number = Decimal("0")
    projection_end_age: int = 80


@dataclass(frozen=True)
class ProjectionYear:
    age: int
    years_of_service: Decimal
    benefit_factor: Decimal
    base_pension_before_cap: Decimal
    base_pension_after_cap: Decimal
    capped_at_80_percent: bool
    pension_with_option: Decimal
    survivor_pension: Decimal
    cola_adjustment: Decimal
    total_pension_annual: Decimal
    social_security_annual: Decimal
    combined_total_annual: Decimal
    monthly_pension: Decimal
    monthly_social_security: Decimal
    monthly_combined: Decimal
    warning: Optional[str] = None


@dataclass(frozen=True)
class ProjectionSummary:
    start_age: int
    end_age: int
    total_projection_years: int
    initial_monthly_pension: Decimal
    final_monthly_pension: Decimal
    peak_monthly_income: Decimal
    total_cola_benefit: Decimal
    years_with_social_security: int
    capped_at_80_percent: bool


# ---------- Taxes ----------
@dataclass(frozen=True)
class TaxInput:
    pension_income: Number
    social_security_income: Number = Decimal("0")
    other_income: Number = Decimal("0")
    filing_status: Union[FilingStatus, str] = FilingStatus.SINGLE
    age: Number = 65
    spouse_age: Optional[Number] = None
    state: str = "MA"
    year: int = 2024


@dataclass(frozen=True)
class TaxRecommendation:
    kind: str
    description: str
    estimated_savings: Decimal


@dataclass(frozen=True)
class TaxResult:
    gross_income: Decimal
    provisional_income: Decimal
    social_security_taxable_portion: Decimal
    federal_taxable_income: Decimal
    federal_tax: Decimal
    state_taxable_income: Decimal
    state_tax: Decimal
    total_tax: Decimal
    net_income: Decimal
    effective_rate: Decimal
    marginal_rate: Decimal
    recommendations: Tuple[TaxRecommendation, ...] = ()


# ---------- Optimizer ----------
@dataclass(frozen=True)
class OptimizationInput:
    current_age: int
    life_expectancy: int
    pension_monthly_benefit: Number
    social_security_full_benefit: Number
    group: Union[Group, str] = Group.GROUP_1
    full_retirement_age: int = 67
    retirement_income_goal: Number = Decimal("0")
    filing_status: Union[FilingStatus, str] = FilingStatus.SINGLE
    state: str = "MA"
    other_monthly_income: Number = Decimal("0")
    current_savings: Number = Decimal("0")
    healthcare_monthly_premium: Number = Decimal("0")
    include_monte_carlo: bool = False
    monte_carlo_paths: int = 10000
    inflation_scenario: str = "moderate"
    market_scenario: str = "moderate"
    seed: Optional[int] = None


@dataclass(frozen=True)
class OptimizationScenario:
    pension_claiming_age: int
    ss_claiming_age: int
    monthly_pension: Decimal
    monthly_social_security: Decimal
    monthly_income: Decimal
    net_monthly_income: Decimal
    lifetime_benefits: Decimal
    score: float


@dataclass(frozen=True)
class AlternativeScenario:
    name: str
    scenario: OptimizationScenario
    tradeoffs: Tuple[str, ...]


@dataclass(frozen=True)
class BreakEvenComparison:
    early_age: int
    later_age: int
    early_monthly: Decimal
    later_monthly: Decimal
    break_even_age: Optional[float]
    early_total: Decimal
    later_total: Decimal
    recommendation: str


# ---------- Monte Carlo ----------
@dataclass(frozen=True)
class MonteCarloParams:
    retirement_age: int
    life_expectancy: int
    pension_annual: float
    social_security_annual: float
    other_annual_income: float = 0.0
    current_savings: float = 0.0
    healthcare_annual_premium: float = 0.0
    income_goal_monthly: float = 0.0
    inflation_scenario: str = "moderate"
    market_scenario: str = "moderate"
    cola_rate: float = 0.03
    cola_base: float = 13000.0


@dataclass(frozen=True)
class YearlyProjection:
    year: int
    age: int
    median_income: float
    p10_income: float
    p90_income: float


@dataclass(frozen=True)
class RiskMetrics:
    probability_of_shortfall: float
    expected_shortfall: float
    value_at_risk_95: float
    sharpe_ratio: float


@dataclass(frozen=True)
class MonteCarloResult:
    paths: int
    success_rate: float
    percentiles: Dict[int, float]
    median_outcome: float
    mean_outcome: float
    standard_deviation: float
    worst_case: float
    best_case: float
    risk_metrics: RiskMetrics
    yearly_projections: Tuple[YearlyProjection, ...] = ()
    cancelled: bool = False


@dataclass(frozen=True)
class OptimizationResult:
    recommended: OptimizationScenario
    alternatives: Tuple[AlternativeScenario, ...]
    scenarios: Tuple[OptimizationScenario, ...]
    break_even: Tuple[BreakEvenComparison, ...]
    monte_carlo: Optional[MonteCarloResult] = None


# ---------- Validation ----------
@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: Dict[str, str] = field(default_factory=dict)
    warnings: Dict[str, str] = field(default_factory=dict)

    @property
    def messages(self) -> List[str]:
        """Errors followed by warnings, ready to show to a user."""
        return list(self.errors.values()) + list(self.warnings.values())


__all__ = [
    "Number",
    "Group",
    "HireEra",
    "PensionOption",
    "FilingStatus",
    "EligibilityResult",
    "PensionCalculationInput",
    "OptionAdjustmentResult",
    "PensionCalculationResult",
    "COLAResult",
    "ProjectionParams",
    "ProjectionYear",
    "ProjectionSummary",
    "TaxInput",
    "TaxRecommendation",
    "TaxResult",
    "OptimizationInput",
    "OptimizationScenario",
    "AlternativeScenario",
    "BreakEvenComparison",
    "MonteCarloParams",
    "YearlyProjection",
    "RiskMetrics",
    "MonteCarloResult",
    "OptimizationResult",
    "ValidationResult",
]
