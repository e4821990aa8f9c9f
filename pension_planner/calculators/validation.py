"""Input validation for pension and optimization requests.

Validators take the raw mapping a form layer produces (values may be strings)
and return a :class:`ValidationResult` of field-keyed error and warning
messages.  Callers should not run a calculation when ``is_valid`` is false.
Warnings never block a calculation.

Example
-------

>>> result = validate_pension_input({"average_salary": "95000", "age": 59,
...     "years_of_service": 34, "group": "GROUP_2", "hire_era": "before_2012"})
>>> result.is_valid
True
>>> validate_pension_input({"age": 59}).errors["average_salary"]
'Average salary is required'
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Callable, Dict, Hashable, Mapping, Optional

from ..models import FilingStatus, Group, HireEra, PensionOption, ValidationResult
from ..money import to_decimal

MAX_CACHE_SIZE = 100


class ValidationCache:
    """Memo of validation results owned by one caller.

    The whole cache is dropped once it grows past ``max_size`` entries.
    """

    def __init__(self, max_size: int = MAX_CACHE_SIZE) -> None:
        self.max_size = max_size
        self._entries: Dict[Hashable, ValidationResult] = {}

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def key(kind: str, data: Mapping[str, Any]) -> Hashable:
        return (kind,) + tuple(sorted((str(k), repr(v)) for k, v in data.items()))

    def get(self, key: Hashable) -> Optional[ValidationResult]:
        return self._entries.get(key)

    def put(self, key: Hashable, result: ValidationResult) -> None:
        self._entries[key] = result
        if len(self._entries) > self.max_size:
            self._entries.clear()

    def clear(self) -> None:
        self._entries.clear()


def _number(
    data: Mapping[str, Any], key: str, label: str, errors: Dict[str, str], required: bool = True
) -> Optional[Decimal]:
    value = data.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            errors[key] = f"{label} is required"
        return None
    try:
        return to_decimal(value)
    except ValueError:
        errors[key] = f"{label} must be a number"
        return None


def _in_range(
    value: Optional[Decimal], key: str, label: str, low: int, high: int, errors: Dict[str, str]
) -> None:
    if value is not None and not (low <= value <= high):
        errors[key] = f"{label} must be between {low} and {high}"


def _choice(data: Mapping[str, Any], key: str, label: str, parser: Callable, errors: Dict[str, str], required: bool = True) -> Any:
    value = data.get(key)
    if value in (None, ""):
        if required:
            errors[key] = f"{label} is required"
        return None
    try:
        return parser(value)
    except ValueError:
        errors[key] = f"{label} is not recognised: {value}"
        return None


def _cached(kind: str, data: Mapping[str, Any], cache: Optional[ValidationCache], run: Callable) -> ValidationResult:
    if cache is None:
        return run(data)
    key = ValidationCache.key(kind, data)
    hit = cache.get(key)
    if hit is not None:
        return hit
    result = run(data)
    cache.put(key, result)
    return result


def _validate_pension(data: Mapping[str, Any]) -> ValidationResult:
    errors: Dict[str, str] = {}
    warnings: Dict[str, str] = {}

    salary = _number(data, "average_salary", "Average salary", errors)
    if salary is not None:
        if salary <= 0:
            errors["average_salary"] = "Average salary must be greater than 0"
        elif salary < 20000:
            warnings["average_salary"] = "Average salary seems low. Please verify."
        elif salary > 300000:
            warnings["average_salary"] = "Average salary seems high. Please verify."

    age = _number(data, "age", "Age", errors)
    _in_range(age, "age", "Age", 18, 100, errors)

    yos = _number(data, "years_of_service", "Years of service", errors)
    if yos is not None:
        if yos <= 0:
            errors["years_of_service"] = "Years of service must be greater than 0"
        elif yos > 50:
            errors["years_of_service"] = "Years of service cannot exceed 50"
        elif yos > 40:
            warnings["years_of_service"] = "More than 40 years of service is unusual. Please verify."

    _choice(data, "group", "Retirement group", Group.parse, errors)
    _choice(data, "hire_era", "Service entry period", HireEra.parse, errors)
    option = _choice(data, "option", "Retirement option", PensionOption.parse, errors, required=False)

    if option is PensionOption.C:
        bene = _number(data, "beneficiary_age", "Beneficiary age", {}, required=False)
        if bene is None or bene <= 0:
            warnings["beneficiary_age"] = "Valid Beneficiary Age needed for Option C. Using general approximation."

    planned = _number(data, "planned_retirement_age", "Planned retirement age", errors, required=False)
    _in_range(planned, "planned_retirement_age", "Planned retirement age", 55, 75, errors)
    if planned is not None and age is not None and planned < age and "planned_retirement_age" not in errors:
        errors["planned_retirement_age"] = "Planned retirement age cannot be before current age"

    ss_age = _number(data, "social_security_claiming_age", "Social Security claiming age", errors, required=False)
    _in_range(ss_age, "social_security_claiming_age", "Social Security claiming age", 62, 70, errors)

    return ValidationResult(not errors, errors, warnings)


def _validate_optimization(data: Mapping[str, Any]) -> ValidationResult:
    errors: Dict[str, str] = {}
    warnings: Dict[str, str] = {}

    age = _number(data, "current_age", "Current age", errors)
    _in_range(age, "current_age", "Current age", 18, 100, errors)
    life = _number(data, "life_expectancy", "Life expectancy", errors)
    _in_range(life, "life_expectancy", "Life expectancy", 60, 120, errors)
    if age is not None and life is not None and life <= age and "life_expectancy" not in errors:
        errors["life_expectancy"] = "Life expectancy must be greater than current age"

    pension = _number(data, "pension_monthly_benefit", "Monthly pension benefit", errors)
    if pension is not None and pension < 0:
        errors["pension_monthly_benefit"] = "Monthly pension benefit cannot be negative"
    ss = _number(data, "social_security_full_benefit", "Social Security benefit", errors)
    if ss is not None and ss < 0:
        errors["social_security_full_benefit"] = "Social Security benefit cannot be negative"

    goal = _number(data, "retirement_income_goal", "Retirement income goal", errors)
    if goal is not None and goal <= 0:
        errors["retirement_income_goal"] = "Retirement income goal must be greater than 0"
    elif goal is not None and pension is not None and ss is not None and goal > (pension + ss) * 2:
        warnings["retirement_income_goal"] = "Income goal is more than twice your projected benefits."

    fra = _number(data, "full_retirement_age", "Full retirement age", errors, required=False)
    _in_range(fra, "full_retirement_age", "Full retirement age", 66, 67, errors)
    _choice(data, "group", "Retirement group", Group.parse, errors, required=False)
    _choice(data, "filing_status", "Filing status", FilingStatus.parse, errors, required=False)

    return ValidationResult(not errors, errors, warnings)


def validate_pension_input(data: Mapping[str, Any], cache: Optional[ValidationCache] = None) -> ValidationResult:
    return _cached("pension", data, cache, _validate_pension)


def validate_optimization_input(data: Mapping[str, Any], cache: Optional[ValidationCache] = None) -> ValidationResult:
    return _cached("optimization", data, cache, _validate_optimization)


__all__ = [
    "ValidationCache",
    "validate_pension_input",
    "validate_optimization_input",
    "MAX_CACHE_SIZE",
]
