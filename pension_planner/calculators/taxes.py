"""Retirement income tax estimation.

This module estimates federal and state income tax on a retiree's pension,
Social Security and other income.  The defaults embed IRS data for 2024 for
the four main filing statuses plus Massachusetts' flat income tax.

The federal calculation follows the usual retiree steps:

1. *Provisional income* is pension and other income plus half of Social
   Security.  Compared with the filing-status thresholds it decides whether
   0%, 50% or 85% of the Social Security benefit is taxable.
2. The standard deduction, plus the additional amount for each filer aged 65
   or older, is subtracted from pension, other income and taxable Social
   Security.
3. Progressive brackets are applied to what remains.

Massachusetts taxes pension and other income at a flat rate after its own
deduction and personal exemption and does not tax Social Security.  Unknown
states are treated as having no income tax.  Less common provisions such as
the AMT or credits are omitted.

Example
-------

>>> # Federal tax on $45 400 of taxable income for a single filer in 2024
>>> compute_federal_tax(45400)
Decimal('5216.00')

>>> result = estimate_taxes(TaxInput(pension_income=60000, age=60))
>>> result.state_tax
Decimal('2560.00')

The underlying brackets can be customised by passing a dictionary matching the
schema in ``data/tax_tables.json``.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from .. import config
from ..models import FilingStatus, Number, TaxInput, TaxRecommendation, TaxResult
from ..money import ZERO, cents, to_decimal
from .medicare import calculate_medicare_premiums

logger = logging.getLogger(__name__)

HIGH_BURDEN_SHARE = Decimal("0.25")
HIGH_BURDEN_SAVINGS = Decimal("0.15")
SS_TIMING_RATE = Decimal("0.85") * Decimal("0.22")
ROTH_CONVERSION_CEILING = Decimal("100000")
ROTH_CONVERSION_SAVINGS = Decimal("5000")
QCD_AGE = Decimal("70.5")
QCD_SAVINGS = Decimal("2500")


def _load_tax_tables(path: Optional[Path] = None) -> Dict[str, Dict]:
    """Load tax tables from JSON.  If ``path`` is not provided, load the
    default file shipped with the package.

    Parameters
    ----------
    path : Path, optional
        Path to a JSON file containing the tax tables.

    Returns
    -------
    dict
        The parsed tax tables, with numbers as ``Decimal``.
    """
    return config.load_table(config.TAX_TABLE_PATH, path)


def _progressive_tax(amount: Decimal, brackets: List[Dict]) -> Decimal:
    tax = ZERO
    remaining = amount
    for bracket in brackets:
        rate = bracket["rate"]
        start = bracket["start"]
        end = bracket["end"]
        if remaining <= 0 or amount <= start:
            break
        width = remaining if end is None else end - start
        portion = min(remaining, width)
        tax += portion * rate
        remaining -= portion
    return tax


def compute_federal_tax(
    taxable_income: Number,
    filing_status: Union[FilingStatus, str] = FilingStatus.SINGLE,
    year: int = 2024,
    tax_tables: Optional[Dict[str, Dict]] = None,
) -> Decimal:
    """Compute federal income tax on income that is already net of deductions."""
    tables = tax_tables or _load_tax_tables()
    status = FilingStatus.parse(filing_status)
    brackets = tables[str(year)]["federal"][status.value]["brackets"]
    income = max(ZERO, to_decimal(taxable_income))
    return cents(_progressive_tax(income, brackets))


def marginal_rate(
    taxable_income: Number,
    filing_status: Union[FilingStatus, str] = FilingStatus.SINGLE,
    year: int = 2024,
    tax_tables: Optional[Dict[str, Dict]] = None,
) -> Decimal:
    """Federal bracket rate that applies to the next dollar of income."""
    tables = tax_tables or _load_tax_tables()
    status = FilingStatus.parse(filing_status)
    brackets = tables[str(year)]["federal"][status.value]["brackets"]
    income = max(ZERO, to_decimal(taxable_income))
    for bracket in brackets:
        if bracket["end"] is None or income < bracket["end"]:
            return bracket["rate"]
    return brackets[-1]["rate"]


def federal_deduction(
    filing_status: Union[FilingStatus, str],
    age: Number,
    spouse_age: Optional[Number] = None,
    year: int = 2024,
    tax_tables: Optional[Dict[str, Dict]] = None,
) -> Decimal:
    """Standard deduction plus the additional amount for filers 65 or older."""
    tables = tax_tables or _load_tax_tables()
    status = FilingStatus.parse(filing_status)
    info = tables[str(year)]["federal"][status.value]
    deduction = info["standard_deduction"]
    if to_decimal(age) >= 65:
        deduction += info["additional_65"]
    if status is FilingStatus.MARRIED_JOINT and spouse_age is not None and to_decimal(spouse_age) >= 65:
        deduction += info["additional_65"]
    return deduction


def taxable_social_security(
    social_security: Number,
    other_income: Number,
    filing_status: Union[FilingStatus, str] = FilingStatus.SINGLE,
    year: int = 2024,
    tax_tables: Optional[Dict[str, Dict]] = None,
) -> Tuple[Decimal, Decimal]:
    """Return ``(provisional_income, taxable_benefit)``.

    ``other_income`` is everything taxable apart from Social Security,
    pension included.  The taxable share is a step function: 0% at or below
    the first threshold, 50% up to the second and 85% above it.
    """
    tables = tax_tables or _load_tax_tables()
    status = FilingStatus.parse(filing_status)
    first, second = tables[str(year)]["federal"][status.value]["ss_thresholds"]
    ss = max(ZERO, to_decimal(social_security))
    provisional = to_decimal(other_income) + ss / 2
    if ss == 0 or provisional <= first:
        return provisional, ZERO
    if provisional <= second:
        return provisional, cents(ss * Decimal("0.5"))
    return provisional, cents(ss * Decimal("0.85"))


def compute_state_tax(
    income: Number,
    state: Optional[str] = "MA",
    filing_status: Union[FilingStatus, str] = FilingStatus.SINGLE,
    year: int = 2024,
    tax_tables: Optional[Dict[str, Dict]] = None,
) -> Tuple[Decimal, Decimal]:
    """Return ``(state_taxable_income, state_tax)``.

    ``income`` should exclude Social Security.  A state-specific standard
    deduction and personal exemption are applied if present.  The state rules
    may define either a flat rate or progressive brackets; states without a
    table owe nothing.
    """
    tables = tax_tables or _load_tax_tables()
    state_info = tables[str(year)].get("state", {}).get((state or "").upper())
    if not state_info:
        return ZERO, ZERO

    status = FilingStatus.parse(filing_status)
    status_info = state_info.get(status.value, state_info)
    deductions = status_info.get("standard_deduction", ZERO) + status_info.get("personal_exemption", ZERO)
    taxable = max(ZERO, to_decimal(income) - deductions)

    if "brackets" in status_info:
        return taxable, cents(_progressive_tax(taxable, status_info["brackets"]))
    rate = status_info.get("rate")
    if rate is None:
        return taxable, ZERO
    return taxable, cents(taxable * rate)


def tax_recommendations(
    tax_input: TaxInput,
    total_tax: Decimal,
    provisional_income: Decimal,
    federal_taxable_income: Decimal,
    taxable_ss: Decimal = ZERO,
    tax_tables: Optional[Dict[str, Dict]] = None,
) -> List[TaxRecommendation]:
    """Rule-based planning hints with rough annual savings."""
    tables = tax_tables or _load_tax_tables()
    status = FilingStatus.parse(tax_input.filing_status)
    pension = to_decimal(tax_input.pension_income)
    ss = to_decimal(tax_input.social_security_income)
    other = to_decimal(tax_input.other_income)
    first_threshold = tables[str(tax_input.year)]["federal"][status.value]["ss_thresholds"][0]

    recs: List[TaxRecommendation] = []
    if pension > 0 and total_tax > pension * HIGH_BURDEN_SHARE:
        recs.append(TaxRecommendation(
            "high_tax_burden",
            "Taxes exceed 25% of your pension. Review withholding and income timing.",
            cents(total_tax * HIGH_BURDEN_SAVINGS),
        ))
    if ss > 0 and provisional_income > first_threshold:
        recs.append(TaxRecommendation(
            "social_security_timing",
            "Part of your Social Security is taxable. Coordinating withdrawals and "
            "claiming age could reduce the taxable share.",
            cents(ss * SS_TIMING_RATE),
        ))
    if federal_taxable_income < ROTH_CONVERSION_CEILING:
        recs.append(TaxRecommendation(
            "roth_conversion",
            "You are in a lower bracket. Partial Roth conversions now may lower "
            "future required distributions.",
            ROTH_CONVERSION_SAVINGS,
        ))
    if to_decimal(tax_input.age) >= QCD_AGE:
        recs.append(TaxRecommendation(
            "qualified_charitable_distribution",
            "Qualified charitable distributions from an IRA are excluded from income.",
            QCD_SAVINGS,
        ))

    magi = pension + other + taxable_ss
    premiums = calculate_medicare_premiums(magi, status, tax_input.year, tables)
    if premiums.irmaa_tier > 0:
        recs.append(TaxRecommendation(
            "medicare_irmaa",
            f"Income places you in Medicare IRMAA tier {premiums.irmaa_tier}. "
            "Lowering income below the tier threshold avoids the surcharge.",
            premiums.annual_surcharge,
        ))
    return recs


def estimate_taxes(tax_input: TaxInput, tax_tables: Optional[Dict[str, Dict]] = None) -> TaxResult:
    """Estimate federal and state tax on one year of retirement income.

    Parameters
    ----------
    tax_input : TaxInput
        Income components, filing status, ages and state.
    tax_tables : dict, optional
        Tables matching ``data/tax_tables.json``.

    Returns
    -------
    TaxResult
        Taxes, rates and planning recommendations.  Zero or negative income
        gives a zero-tax result rather than an error.
    """
    tables = tax_tables or _load_tax_tables()
    status = FilingStatus.parse(tax_input.filing_status)
    year = tax_input.year
    pension = to_decimal(tax_input.pension_income)
    ss = to_decimal(tax_input.social_security_income)
    other = to_decimal(tax_input.other_income)

    provisional, taxable_ss = taxable_social_security(ss, pension + other, status, year, tables)
    deduction = federal_deduction(status, tax_input.age, tax_input.spouse_age, year, tables)
    federal_taxable = max(ZERO, pension + other + taxable_ss - deduction)
    federal_tax = compute_federal_tax(federal_taxable, status, year, tables)
    state_taxable, state_tax = compute_state_tax(pension + other, tax_input.state, status, year, tables)

    total = federal_tax + state_tax
    gross = pension + ss + other
    effective = (total / gross).quantize(Decimal("0.0001")) if gross > 0 else ZERO
    recs = tax_recommendations(tax_input, total, provisional, federal_taxable, taxable_ss, tables)

    logger.debug(
        "Tax estimate %s/%s: gross=%s federal=%s state=%s", status.value, tax_input.state, gross, federal_tax, state_tax
    )
    return TaxResult(
        gross_income=gross,
        provisional_income=provisional,
        social_security_taxable_portion=taxable_ss,
        federal_taxable_income=federal_taxable,
        federal_tax=federal_tax,
        state_taxable_income=state_taxable,
        state_tax=state_tax,
        total_tax=total,
        net_income=gross - total,
        effective_rate=effective,
        marginal_rate=marginal_rate(federal_taxable, status, year, tables),
        recommendations=tuple(recs),
    )


__all__ = [
    "compute_federal_tax",
    "compute_state_tax",
    "marginal_rate",
    "federal_deduction",
    "taxable_social_security",
    "tax_recommendations",
    "estimate_taxes",
    "_load_tax_tables",
]
