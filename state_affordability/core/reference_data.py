"""Read-only access to the per-state reference dataset.

The dataset is keyed by state display name; each record is a flat mapping of
dataset keys (occupation codes, cost-of-living codes, home values by size,
mortgage terms) to numbers or numeric strings. All reads are defensive:
missing or malformed values become 0 and lookups never raise.
"""

from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

DATA_ENV_VAR = "STATE_AFFORDABILITY_DATA"
DEFAULT_DATA_PATH = Path(__file__).resolve().parents[1] / "data" / "state_data.json"

STATE_ABBREVIATIONS: Mapping[str, str] = MappingProxyType(
    {
        "Alabama": "AL",
        "Alaska": "AK",
        "Arizona": "AZ",
        "Arkansas": "AR",
        "California": "CA",
        "Colorado": "CO",
        "Connecticut": "CT",
        "Delaware": "DE",
        "District of Columbia": "DC",
        "Florida": "FL",
        "Georgia": "GA",
        "Hawaii": "HI",
        "Idaho": "ID",
        "Illinois": "IL",
        "Indiana": "IN",
        "Iowa": "IA",
        "Kansas": "KS",
        "Kentucky": "KY",
        "Louisiana": "LA",
        "Maine": "ME",
        "Maryland": "MD",
        "Massachusetts": "MA",
        "Michigan": "MI",
        "Minnesota": "MN",
        "Mississippi": "MS",
        "Missouri": "MO",
        "Montana": "MT",
        "Nebraska": "NE",
        "Nevada": "NV",
        "New Hampshire": "NH",
        "New Jersey": "NJ",
        "New Mexico": "NM",
        "New York": "NY",
        "North Carolina": "NC",
        "North Dakota": "ND",
        "Ohio": "OH",
        "Oklahoma": "OK",
        "Oregon": "OR",
        "Pennsylvania": "PA",
        "Rhode Island": "RI",
        "South Carolina": "SC",
        "South Dakota": "SD",
        "Tennessee": "TN",
        "Texas": "TX",
        "Utah": "UT",
        "Vermont": "VT",
        "Virginia": "VA",
        "Washington": "WA",
        "West Virginia": "WV",
        "Wisconsin": "WI",
        "Wyoming": "WY",
    }
)

KID_BUCKETS = ("0", "1", "2", "3+")

COST_OF_LIVING_KEYS: Mapping[Tuple[str, str], str] = MappingProxyType(
    {
        ("single", "0"): "cost_of_living_single_no_kids",
        ("single", "1"): "cost_of_living_single_one_kid",
        ("single", "2"): "cost_of_living_single_two_kids",
        ("single", "3+"): "cost_of_living_single_three_plus_kids",
        ("marriedOneIncome", "0"): "cost_of_living_married_one_income_no_kids",
        ("marriedOneIncome", "1"): "cost_of_living_married_one_income_one_kid",
        ("marriedOneIncome", "2"): "cost_of_living_married_one_income_two_kids",
        ("marriedOneIncome", "3+"): "cost_of_living_married_one_income_three_plus_kids",
        ("marriedTwoIncome", "0"): "cost_of_living_married_two_income_no_kids",
        ("marriedTwoIncome", "1"): "cost_of_living_married_two_income_one_kid",
        ("marriedTwoIncome", "2"): "cost_of_living_married_two_income_two_kids",
        ("marriedTwoIncome", "3+"): "cost_of_living_married_two_income_three_plus_kids",
    }
)

HOME_VALUE_KEYS: Mapping[str, str] = MappingProxyType(
    {
        "small": "typical_home_value_small",
        "medium": "typical_home_value_single_family_normal",
        "large": "typical_home_value_large",
        "veryLarge": "typical_home_value_very_large",
    }
)

MORTGAGE_RATE_KEY = "average_mortgage_rate_fixed_30_year"
DOWN_PAYMENT_KEY = "median_mortgage_down_payment_percent"

_NON_OCCUPATION_KEYS = frozenset(
    set(COST_OF_LIVING_KEYS.values()) | set(HOME_VALUE_KEYS.values()) | {MORTGAGE_RATE_KEY, DOWN_PAYMENT_KEY, "name", "abbr"}
)


def safe_number(value: Any) -> float:
    """Coerce an untyped dataset value to a finite float, 0 when impossible."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        parsed = float(value)
    elif isinstance(value, str):
        try:
            parsed = float(value.replace(",", "").strip())
        except ValueError:
            parsed = math.nan
    else:
        parsed = math.nan
    if not math.isfinite(parsed):
        if value is not None:
            logger.debug("Coerced malformed reference value %r to 0", value)
        return 0.0
    return parsed


def kid_bucket(kids: float) -> str:
    if kids <= 0:
        return "0"
    if kids < 2:
        return "1"
    if kids < 3:
        return "2"
    return "3+"


def _as_fraction(value: float) -> float:
    # Whole percents (6.5, 20) are stored alongside fractions (0.065, 0.2).
    return value / 100.0 if value > 1 else value


@dataclass(frozen=True)
class StateData:
    name: str
    abbr: str
    values: Mapping[str, Any] = field(default_factory=dict)

    def number(self, key: str) -> float:
        return safe_number(self.values.get(key))


@dataclass(frozen=True)
class ReferenceData:
    states: Mapping[str, StateData]

    def __iter__(self):
        return iter(self.states.values())

    def __len__(self) -> int:
        return len(self.states)

    def get(self, identifier: str) -> Optional[StateData]:
        return get_state(self, identifier)


def get_state(reference: ReferenceData, identifier: Any) -> Optional[StateData]:
    """Return the state by display name or two-letter abbreviation, else None."""
    if not isinstance(identifier, str) or not identifier.strip():
        return None
    wanted = identifier.strip().lower()
    for state in reference.states.values():
        if state.name.lower() == wanted or state.abbr.lower() == wanted:
            return state
    return None


def household_cost(state: StateData, household_type: str, kids: float) -> float:
    key = COST_OF_LIVING_KEYS.get((household_type, kid_bucket(kids)))
    if key is None:
        key = COST_OF_LIVING_KEYS[("single", kid_bucket(kids))]
    return state.number(key)


def salary_for(state: StateData, occupation: Optional[str], override: Any = None) -> float:
    """Return the manual override when positive, else the occupation salary for the state."""
    override_value = safe_number(override)
    if override_value > 0:
        return override_value
    if not occupation:
        return 0.0
    return state.number(occupation)


def home_value(state: StateData, size: str) -> float:
    key = HOME_VALUE_KEYS.get(size)
    return state.number(key) if key else 0.0


def mortgage_rate(state: StateData) -> float:
    return _as_fraction(state.number(MORTGAGE_RATE_KEY))


def down_payment_percent(state: StateData) -> float:
    return _as_fraction(state.number(DOWN_PAYMENT_KEY))


def occupation_keys(reference: ReferenceData) -> Tuple[str, ...]:
    keys = set()
    for state in reference.states.values():
        keys.update(k for k in state.values if k not in _NON_OCCUPATION_KEYS)
    return tuple(sorted(keys))


def _records(raw: Any) -> Iterable[Tuple[str, Dict[str, Any]]]:
    if isinstance(raw, dict) and isinstance(raw.get("states"), list):
        raw = raw["states"]
    if isinstance(raw, list):
        for item in raw:
            if isinstance(item, dict) and isinstance(item.get("name"), str):
                yield item["name"], item
        return
    for name, record in raw.items():
        if isinstance(record, dict):
            yield name, record


def build_reference_data(raw: Any) -> ReferenceData:
    """Normalize a parsed dataset into ReferenceData."""
    if not isinstance(raw, (dict, list)):
        raise ValueError("reference data: root must be a JSON object or array")
    states: Dict[str, StateData] = {}
    for name, record in _records(raw):
        abbr = record.get("abbr") if isinstance(record.get("abbr"), str) else STATE_ABBREVIATIONS.get(name, "")
        states[name] = StateData(name=name, abbr=abbr, values=MappingProxyType(dict(record)))
    return ReferenceData(states=MappingProxyType(states))


@lru_cache(maxsize=None)
def _load_cached(path: str) -> ReferenceData:
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    reference = build_reference_data(raw)
    logger.info("Loaded reference data for %d states from %s", len(reference), path)
    return reference


def load_reference_data(path: str | Path | None = None) -> ReferenceData:
    """Load the dataset once per process; defaults to the bundled sample."""
    source = path or os.environ.get(DATA_ENV_VAR) or DEFAULT_DATA_PATH
    return _load_cached(str(Path(source).resolve()))
