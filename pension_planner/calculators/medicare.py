"""Medicare Part B premiums and IRMAA surcharges.

Higher-income retirees pay an income-related monthly adjustment amount
(IRMAA) on top of the standard Part B premium, plus a Part D surcharge.  The
tier is chosen from modified adjusted gross income and filing status using
the tables under ``medicare`` in ``data/tax_tables.json``.

Example
-------

>>> calculate_medicare_premiums(90000).irmaa_tier
0
>>> calculate_medicare_premiums(140000).part_b_monthly
Decimal('349.40')
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional, Union

from .. import config
from ..models import FilingStatus, Number
from ..money import cents, to_decimal


@dataclass(frozen=True)
class MedicarePremiums:
    irmaa_tier: int
    part_b_monthly: Decimal
    part_d_surcharge_monthly: Decimal
    annual_total: Decimal
    annual_surcharge: Decimal


def calculate_medicare_premiums(
    magi: Number,
    filing_status: Union[FilingStatus, str] = FilingStatus.SINGLE,
    year: int = 2024,
    tax_tables: Optional[Dict[str, Dict]] = None,
) -> MedicarePremiums:
    """Premiums for one beneficiary at the given income."""
    tables = tax_tables or config.load_table(config.TAX_TABLE_PATH)
    status = FilingStatus.parse(filing_status)
    tiers = tables[str(year)]["medicare"][status.value]
    income = to_decimal(magi)

    tier_index = len(tiers) - 1
    for i, tier in enumerate(tiers):
        if tier["max_magi"] is None or income <= tier["max_magi"]:
            tier_index = i
            break
    tier = tiers[tier_index]
    base_part_b = tiers[0]["part_b"]

    part_b = to_decimal(tier["part_b"])
    part_d = to_decimal(tier["part_d"])
    annual_total = cents((part_b + part_d) * 12)
    annual_surcharge = cents((part_b - base_part_b + part_d) * 12)
    return MedicarePremiums(
        irmaa_tier=tier_index,
        part_b_monthly=cents(part_b),
        part_d_surcharge_monthly=cents(part_d),
        annual_total=annual_total,
        annual_surcharge=annual_surcharge,
    )


__all__ = ["MedicarePremiums", "calculate_medicare_premiums"]
