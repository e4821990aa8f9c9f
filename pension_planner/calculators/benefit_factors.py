"""Massachusetts benefit-factor lookup.

The retirement allowance is ``salary × years of service × factor`` where the
factor is a fraction per year of service set by statute for each group and
age.  Two tables exist:

* the default table, used for members hired before April 2, 2012 and for
  later hires with 30 or more years of service;
* a restricted table with lower factors for members hired on or after
  April 2, 2012 with fewer than 30 years of service.

Lookup rules
------------
* exact age match returns the tabulated factor;
* an age below the table's first age returns ``0`` (not applicable);
* an age above the last age returns the last factor ("67 or older");
* a fractional age between tabulated points floors to the nearest lower age
  in the default table and returns ``0`` in the restricted table.

Example
-------

>>> calculate_benefit_factor(55, "GROUP_2", "before_2012", 30)
Decimal('0.020')
>>> calculate_benefit_factor(60, "GROUP_2", "before_2012", 30)
Decimal('0.025')
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from .. import config
from ..models import Group, HireEra, Number
from ..money import ZERO, cents, to_decimal

DEFAULT_TABLE = "default"
RESTRICTED_TABLE = "post_2012_under_30_yos"


def _load_factor_tables(path: Optional[Path] = None) -> Dict[str, Dict]:
    return config.load_table(config.BENEFIT_FACTOR_PATH, path)


def select_table(hire_era: Union[HireEra, str], years_of_service: Number) -> str:
    """Name of the factor table that applies to this member."""
    era = HireEra.parse(hire_era)
    if era is HireEra.AFTER_2012 and to_decimal(years_of_service) < config.RESTRICTED_TABLE_YOS_THRESHOLD:
        return RESTRICTED_TABLE
    return DEFAULT_TABLE


def _group_table(table_name: str, group: Group, tables: Dict[str, Dict]) -> Dict[Decimal, Decimal]:
    raw = tables[table_name][group.value]
    return {Decimal(age): factor for age, factor in raw.items()}


def calculate_benefit_factor(
    age: Number,
    group: Union[Group, str],
    hire_era: Union[HireEra, str],
    years_of_service: Number,
    tables: Optional[Dict[str, Dict]] = None,
) -> Decimal:
    """Return the benefit factor for ``age`` as a decimal fraction.

    Parameters
    ----------
    age : number
        Member age at retirement.  Fractional ages are accepted.
    group : Group or str
        Retirement group (1 to 4).
    hire_era : HireEra or str
        ``before_2012`` or ``after_2012``.
    years_of_service : number
        Creditable service; selects the restricted table for post-2012 hires
        with fewer than 30 years.
    tables : dict, optional
        Factor tables matching ``data/benefit_factors.json``.

    Returns
    -------
    Decimal
        Factor per year of service, or ``0`` when the age is not tabulated.
    """
    tables = tables or _load_factor_tables()
    grp = Group.parse(group)
    table_name = select_table(hire_era, years_of_service)
    table = _group_table(table_name, grp, tables)
    age_d = to_decimal(age)

    if age_d in table:
        return table[age_d]
    ages = sorted(table)
    if age_d < ages[0]:
        return ZERO
    if age_d > ages[-1]:
        return table[ages[-1]]
    if table_name == RESTRICTED_TABLE:
        return ZERO
    floor_age = max(a for a in ages if a <= age_d)
    return table[floor_age]


def full_factor_age(group: Union[Group, str], tables: Optional[Dict[str, Dict]] = None) -> int:
    """First age at which the default table reaches the maximum factor."""
    tables = tables or _load_factor_tables()
    table = _group_table(DEFAULT_TABLE, Group.parse(group), tables)
    for age in sorted(table):
        if table[age] >= config.MAX_BENEFIT_FACTOR:
            return int(age)
    return int(max(table))


def group_minimum_age(group: Union[Group, str]) -> int:
    return config.GROUP_MINIMUM_AGE.get(Group.parse(group).number, config.DEFAULT_MINIMUM_AGE)


def apply_benefit_cap(base_pension: Decimal, average_salary: Number) -> Tuple[Decimal, bool]:
    """Limit the allowance to 80% of average salary.

    Returns ``(pension_after_cap, capped)``.  The cap is compared after the
    base is rounded to cents so the result never exceeds it.
    """
    cap = to_decimal(average_salary) * config.MAX_BENEFIT_PERCENTAGE
    rounded = cents(base_pension)
    if rounded > cap:
        return cap, True
    return rounded, False


def benefit_percentage(years_of_service: Number, factor: Decimal) -> Decimal:
    """Benefit as a percentage of salary, capped at 80."""
    pct = to_decimal(years_of_service) * factor * 100
    return min(pct, config.MAX_BENEFIT_PERCENTAGE * 100)


__all__ = [
    "calculate_benefit_factor",
    "select_table",
    "full_factor_age",
    "group_minimum_age",
    "apply_benefit_cap",
    "benefit_percentage",
    "DEFAULT_TABLE",
    "RESTRICTED_TABLE",
]
