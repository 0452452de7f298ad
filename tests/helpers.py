import json
from pathlib import Path

from state_affordability.core.inputs import SimulationSettings, UserInputs
from state_affordability.core.reference_data import COST_OF_LIVING_KEYS, StateData, build_reference_data


def make_state(
    name: str = "Testland",
    abbr: str = "TL",
    salary: float = 80_000,
    cost_of_living: float = 20_000,
    home_value: float = 300_000,
    mortgage_rate: float = 0.06,
    down_payment: float = 0.20,
    **extra,
) -> StateData:
    values = {key: cost_of_living for key in COST_OF_LIVING_KEYS.values()}
    values.update(
        {
            "software_developer": salary,
            "typical_home_value_small": home_value * 0.7,
            "typical_home_value_single_family_normal": home_value,
            "typical_home_value_large": home_value * 1.5,
            "typical_home_value_very_large": home_value * 2.2,
            "average_mortgage_rate_fixed_30_year": mortgage_rate,
            "median_mortgage_down_payment_percent": down_payment,
        }
    )
    values.update(extra)
    return StateData(name=name, abbr=abbr, values=values)


def make_inputs(**overrides) -> UserInputs:
    fields = dict(
        age=25,
        location_certainty="sure",
        selected_states=["TL"],
        household_type="single",
        occupation="software_developer",
        savings_rate=0.03,
        allocation_percent=0.5,
        home_size="medium",
    )
    fields.update(overrides)
    return UserInputs(**fields)


def flat_settings(**overrides) -> SimulationSettings:
    """Settings with no income, inflation or home price growth."""
    fields = dict(income_growth_rate=0.0, inflation_rate=0.0, home_price_growth_rate=0.0)
    fields.update(overrides)
    return SimulationSettings(**fields)


def make_reference(*states: StateData):
    return build_reference_data({state.name: dict(state.values, abbr=state.abbr) for state in states})


def write_dataset(tmp_path: Path, data, filename: str = "state_data.json") -> Path:
    path = tmp_path / filename
    path.write_text(json.dumps(data), encoding="utf-8")
    return path
