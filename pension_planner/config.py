"""Default assumptions and loaders for the statutory tables.

Numeric defaults live here as module constants.  The tables themselves ship
as JSON under ``data/`` and can be swapped by passing a path to the loaders,
mirroring how tax tables are customised.
"""

from __future__ import annotations

import copy
import json
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

DATA_DIR = Path(__file__).resolve().parent / "data"

BENEFIT_FACTOR_PATH = DATA_DIR / "benefit_factors.json"
TAX_TABLE_PATH = DATA_DIR / "tax_tables.json"
ECONOMIC_ASSUMPTIONS_PATH = DATA_DIR / "economic_assumptions.json"

MAX_BENEFIT_PERCENTAGE = Decimal("0.80")
MAX_BENEFIT_FACTOR = Decimal("0.025")
RESTRICTED_TABLE_YOS_THRESHOLD = 30

COLA_RATE = Decimal("0.03")
COLA_BASE = Decimal("13000")

FULL_RETIREMENT_AGE = 67
MIN_SS_CLAIMING_AGE = 62
MAX_SS_CLAIMING_AGE = 70

PROJECTION_END_AGE = 80
GROUP_MINIMUM_AGE = {1: 60, 2: 55, 3: 55, 4: 50}
DEFAULT_MINIMUM_AGE = 55

PENSION_CLAIMING_AGES = (55, 60, 62, 65, 67, 70)
SS_CLAIMING_AGES = tuple(range(MIN_SS_CLAIMING_AGE, MAX_SS_CLAIMING_AGE + 1))
BREAK_EVEN_LIFESPAN = 85

MONTE_CARLO_PATHS = 10000
MONTE_CARLO_CHUNK_SIZE = 2500
BATCH_CONCURRENCY = 4


def _read_json(path: Path, as_decimal: bool) -> Dict:
    with open(path, "r", encoding="utf-8") as f:
        if as_decimal:
            return json.load(f, parse_float=Decimal, parse_int=Decimal)
        return json.load(f)


@lru_cache(maxsize=None)
def _cached(path: str, as_decimal: bool) -> Dict:
    return _read_json(Path(path), as_decimal)


def load_table(default_path: Path, path: Optional[Path] = None, as_decimal: bool = True) -> Dict:
    """Load a JSON table, parsing numbers as ``Decimal`` unless told otherwise.

    The default files are parsed once per process and each caller gets its own
    deep copy, so editing a returned table never leaks into later calls.  An
    explicit ``path`` is read on every call so edits to a custom file are
    picked up.
    """
    if path is not None:
        return _read_json(Path(path), as_decimal)
    return copy.deepcopy(_cached(str(default_path), as_decimal))


__all__ = [
    "DATA_DIR",
    "BENEFIT_FACTOR_PATH",
    "TAX_TABLE_PATH",
    "ECONOMIC_ASSUMPTIONS_PATH",
    "MAX_BENEFIT_PERCENTAGE",
    "MAX_BENEFIT_FACTOR",
    "RESTRICTED_TABLE_YOS_THRESHOLD",
    "COLA_RATE",
    "COLA_BASE",
    "FULL_RETIREMENT_AGE",
    "MIN_SS_CLAIMING_AGE",
    "MAX_SS_CLAIMING_AGE",
    "PROJECTION_END_AGE",
    "GROUP_MINIMUM_AGE",
    "DEFAULT_MINIMUM_AGE",
    "PENSION_CLAIMING_AGES",
    "SS_CLAIMING_AGES",
    "BREAK_EVEN_LIFESPAN",
    "MONTE_CARLO_PATHS",
    "MONTE_CARLO_CHUNK_SIZE",
    "BATCH_CONCURRENCY",
    "load_table",
]
