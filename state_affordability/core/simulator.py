from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

import pandas as pd

from .budget import cost_of_living_at_year, income_at_year, minimum_debt_payments
from .classification import classify
from .engine import SimulationResult, run_household_path
from .inputs import SimulationSettings, UserInputs
from .reference_data import (
    ReferenceData,
    StateData,
    down_payment_percent,
    get_state,
    home_value,
    load_reference_data,
    mortgage_rate,
)

logger = logging.getLogger(__name__)

AUTO_STRATEGY = "balanced"
NOTE_MISSING_OCCUPATION = "Missing occupation data for this state."

_CAMEL_FIELDS = {
    "state_abbr": "stateAbbr",
    "viability_rating": "viabilityRating",
    "disposable_income": "disposableIncome",
    "combined_income": "combinedIncome",
    "min_debt_percent": "minDebtPercent",
    "min_credit_percent": "minCreditPercent",
    "savings_percent": "savingsPercent",
    "years_to_home": "yearsToHome",
    "years_to_debt_free": "yearsToDebtFree",
    "home_value": "homeValue",
    "mortgage_rate": "mortgageRate",
    "down_payment_percent": "downPaymentPercent",
    "credit_card_plan": "creditCardPlan",
    "monthly_mortgage_payment": "monthlyMortgagePayment",
    "required_allocation_percent": "requiredAllocationPercent",
    "recommended_allocation_percent": "recommendedAllocationPercent",
}


@dataclass
class StateResult:
    state: str
    state_abbr: str
    classification: str
    viability_rating: float
    disposable_income: float
    combined_income: float
    min_debt_percent: float
    min_credit_percent: float
    savings_percent: float
    years_to_home: Optional[int]
    years_to_debt_free: Optional[int]
    home_value: float
    mortgage_rate: float
    down_payment_percent: float
    strategy: str
    credit_card_plan: str  # "upfront-only" or "reserve"
    notes: List[str] = field(default_factory=list)
    monthly_mortgage_payment: Optional[float] = None
    required_allocation_percent: Optional[float] = None
    recommended_allocation_percent: Optional[float] = None

    def to_dict(self) -> Dict[str, object]:
        """camelCase shape read by the results, refine and report consumers."""
        return {_CAMEL_FIELDS.get(key, key): value for key, value in asdict(self).items()}


def resolve_strategy(inputs: UserInputs, strategy: Optional[str] = None) -> str:
    chosen = strategy or inputs.strategy_mode
    return AUTO_STRATEGY if chosen in (None, "", "auto") else chosen


def calculate_state_result(
    state: StateData,
    inputs: UserInputs,
    strategy: Optional[str] = None,
    settings: Optional[SimulationSettings] = None,
    simulation: Optional[SimulationResult] = None,
) -> StateResult:
    """Simulate one state and classify the outcome."""
    settings = settings or SimulationSettings()
    combined_income = income_at_year(state, inputs, settings, 0)
    disposable_income = combined_income - cost_of_living_at_year(state, inputs, settings, 0)

    notes: List[str] = []
    if combined_income <= 0:
        notes.append(NOTE_MISSING_OCCUPATION)

    simulation = simulation or run_household_path(state, inputs, settings)
    notes.extend(note for note in simulation.notes if note not in notes)

    min_debt_percent = min_credit_percent = savings_percent = 0.0
    if disposable_income > 0:
        loan_min, credit_min = minimum_debt_payments(
            inputs.student_loan_balance, inputs.credit_card_balance, inputs, settings, disposable_income
        )
        min_debt_percent = loan_min / disposable_income
        min_credit_percent = credit_min / disposable_income
        savings_percent = max(0.0, inputs.allocation_percent - min_debt_percent - min_credit_percent)

    outcome = classify(
        simulation.years_to_home,
        simulation.years_to_debt_free,
        simulation.required_allocation_percent,
        inputs.allocation_percent,
        disposable_income,
    )

    result = StateResult(
        state=state.name,
        state_abbr=state.abbr,
        classification=outcome.tier,
        viability_rating=outcome.rating,
        disposable_income=disposable_income,
        combined_income=combined_income,
        min_debt_percent=min_debt_percent,
        min_credit_percent=min_credit_percent,
        savings_percent=savings_percent,
        years_to_home=simulation.years_to_home,
        years_to_debt_free=simulation.years_to_debt_free,
        home_value=home_value(state, inputs.home_size),
        mortgage_rate=mortgage_rate(state),
        down_payment_percent=down_payment_percent(state),
        strategy=resolve_strategy(inputs, strategy),
        credit_card_plan="reserve" if inputs.advanced.annual_credit_card_debt > 0 else "upfront-only",
        notes=notes,
        monthly_mortgage_payment=simulation.monthly_mortgage_payment,
        required_allocation_percent=simulation.required_allocation_percent,
        recommended_allocation_percent=simulation.recommended_allocation_percent,
    )
    logger.debug(
        "state=%s classification=%s rating=%.1f", result.state_abbr, result.classification, result.viability_rating
    )
    return result


def select_states(inputs: UserInputs, reference: ReferenceData) -> List[StateData]:
    if inputs.location_certainty == "unknown":
        return list(reference)
    selected: List[StateData] = []
    for identifier in inputs.selected_states:
        state = get_state(reference, identifier)
        if state is None:
            logger.debug("Skipping unknown state identifier %r", identifier)
            continue
        if all(state.name != chosen.name for chosen in selected):
            selected.append(state)
    return selected


def calculate_results(
    inputs: UserInputs,
    reference: Optional[ReferenceData] = None,
    settings: Optional[SimulationSettings] = None,
) -> List[StateResult]:
    """One StateResult per selected state (every state when location is unknown), in input order."""
    if reference is None:
        reference = load_reference_data()
    strategy = None if inputs.strategy_mode == "auto" else inputs.strategy_mode
    return [calculate_state_result(state, inputs, strategy, settings) for state in select_states(inputs, reference)]


def results_frame(results: List[StateResult]) -> pd.DataFrame:
    columns = list(StateResult.__dataclass_fields__)
    return pd.DataFrame([asdict(result) for result in results], columns=columns)
