"""Retirement eligibility rules.

Members hired before April 2, 2012 may retire with 20 years of service at any
age, or at 55 with 10 years.  Later hires need 10 years plus a group minimum
age (Group 1: 60, Group 2: 55, Group 4: 50); Group 3 has no age floor beyond
the 10-year rule.

Eligibility failure is a normal result, not an exception.  Callers must stop
when ``eligible`` is false instead of looking up a factor anyway, since a
zero factor from the table cannot be told apart from an untabulated age.

>>> check_eligibility(55, 20, "GROUP_1", "before_2012").eligible
True
>>> check_eligibility(54, 9, "GROUP_1", "before_2012").eligible
False
"""

from __future__ import annotations

import logging
from typing import Union

from ..models import EligibilityResult, Group, HireEra, Number
from ..money import to_decimal

logger = logging.getLogger(__name__)

POST_2012_MINIMUM_AGE = {Group.GROUP_1: 60, Group.GROUP_2: 55, Group.GROUP_4: 50}
POST_2012_MINIMUM_YOS = 10


def check_eligibility(
    age: Number,
    years_of_service: Number,
    group: Union[Group, str],
    hire_era: Union[HireEra, str, None],
) -> EligibilityResult:
    """Evaluate the statutory age/service thresholds for one member."""
    try:
        era = HireEra.parse(hire_era) if hire_era else None
    except ValueError:
        era = None
    if era is None:
        return EligibilityResult(False, "Service entry period not selected.")

    age_d = to_decimal(age)
    yos = to_decimal(years_of_service)

    if era is HireEra.BEFORE_2012:
        if yos >= 20 or (age_d >= 55 and yos >= 10):
            return EligibilityResult(True, "")
        return EligibilityResult(
            False,
            "Not eligible: For service before 04/02/2012, requires 20+ YOS "
            "or Age 55+ with 10+ YOS.",
        )

    if yos < POST_2012_MINIMUM_YOS:
        return EligibilityResult(
            False, "Not eligible: Requires min 10 YOS for service on/after 04/02/2012."
        )
    grp = Group.parse(group)
    min_age = POST_2012_MINIMUM_AGE.get(grp)
    if min_age is not None and age_d < min_age:
        logger.debug("Group %s below post-2012 minimum age %s (age %s)", grp.number, min_age, age_d)
        return EligibilityResult(
            False,
            f"Not eligible: Group {grp.number} requires min age {min_age} "
            "for service on/after 04/02/2012.",
        )
    return EligibilityResult(True, "")


__all__ = ["check_eligibility", "POST_2012_MINIMUM_AGE", "POST_2012_MINIMUM_YOS"]
