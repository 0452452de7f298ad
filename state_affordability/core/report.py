"""Secondary derivations for the results pages and the state report.

Everything here replays the simulator's own history or re-runs the simulator;
no year loop is duplicated.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional

import pandas as pd

from .budget import partner_present
from .engine import SimulationResult, run_household_path
from .inputs import HOME_SIZES, SimulationSettings, UserInputs
from .mortgage import amortization_schedule
from .reference_data import StateData, down_payment_percent, home_value, mortgage_rate
from .simulator import StateResult

HOME_SIZE_LABELS = {"small": "Small", "medium": "Medium", "large": "Large", "veryLarge": "Very Large"}
VIABLE_HOME_YEARS = 50

BREAKDOWN_COLUMNS = [
    "year",
    "age",
    "debt_payment",
    "savings_for_home",
    "mortgage_payment",
    "total_allocated",
    "remaining_debt",
    "savings_balance",
    "home_value",
    "mortgage_balance",
    "home_equity",
    "net_worth",
    "notes",
]


def _mortgage_balances(simulation: SimulationResult, state: StateData, settings: SimulationSettings) -> pd.Series:
    """Remaining principal by whole years since purchase (index 0 is the purchase year)."""
    if simulation.home_purchase_value is None:
        return pd.Series(dtype=float)
    principal = simulation.home_purchase_value * (1 - down_payment_percent(state))
    schedule = amortization_schedule(principal, mortgage_rate(state), settings.mortgage_term_years)
    yearly = schedule["ending_balance"].iloc[11::12].reset_index(drop=True)
    yearly.index = yearly.index + 1
    return pd.concat([pd.Series([max(principal, 0.0)]), yearly])


def yearly_breakdown(
    state: StateData,
    inputs: UserInputs,
    settings: Optional[SimulationSettings] = None,
    max_years: int = 30,
) -> pd.DataFrame:
    """Year-by-year table of allocations, balances and net worth with milestone notes."""
    settings = settings or SimulationSettings()
    simulation = run_household_path(state, inputs, settings, stop_at_milestones=False)
    balances = _mortgage_balances(simulation, state, settings)
    purchase_year = simulation.years_to_home

    rows = []
    previous_kids = max(0, int(inputs.kids))
    for record in simulation.history[:max_years]:
        year = record["year"]
        notes: List[str] = []
        if record["kids"] > previous_kids:
            notes.append("Child arrives - cost of living increases")
        previous_kids = record["kids"]
        if year > 0 and partner_present(inputs, year) and not partner_present(inputs, year - 1):
            notes.append("Partner joins household - income increases")
        if simulation.years_to_debt_free == year:
            notes.append("Debt-free milestone reached")
        if purchase_year == year:
            notes.append("Down payment saved - home purchased")

        mortgage_balance = 0.0
        home_equity = 0.0
        if purchase_year is not None and year >= purchase_year:
            mortgage_balance = float(balances.get(year - purchase_year, 0.0))
            home_equity = record["home_value"] - mortgage_balance
        debt_payment = record["loan_payment"] + record["credit_payment"]
        remaining_debt = record["loan_balance"] + record["cc_balance"]

        rows.append(
            {
                "year": year + 1,
                "age": record["age"],
                "debt_payment": debt_payment,
                "savings_for_home": record["savings_contribution"],
                "mortgage_payment": record["mortgage_payment"],
                "total_allocated": debt_payment + record["savings_contribution"] + record["mortgage_payment"],
                "remaining_debt": remaining_debt,
                "savings_balance": record["savings_balance"],
                "home_value": record["home_value"] if purchase_year is not None and year >= purchase_year else 0.0,
                "mortgage_balance": mortgage_balance,
                "home_equity": home_equity,
                "net_worth": record["savings_balance"] + home_equity - remaining_debt,
                "notes": "; ".join(notes),
            }
        )

    return pd.DataFrame(rows, columns=BREAKDOWN_COLUMNS).set_index("year")


def net_worth_projection(
    state: StateData,
    inputs: UserInputs,
    settings: Optional[SimulationSettings] = None,
    max_years: int = 30,
) -> pd.Series:
    breakdown = yearly_breakdown(state, inputs, settings, max_years=max_years)
    return breakdown["net_worth"].rename("net_worth")


def home_size_comparison(
    state: StateData, inputs: UserInputs, settings: Optional[SimulationSettings] = None
) -> pd.DataFrame:
    """Years to purchase for every size tier, holding all other inputs fixed."""
    settings = settings or SimulationSettings()
    rows = []
    for size in HOME_SIZES:
        simulation = run_household_path(state, replace(inputs, home_size=size), settings)
        years = simulation.years_to_home
        rows.append(
            {
                "size": size,
                "label": HOME_SIZE_LABELS[size],
                "home_value": home_value(state, size),
                "years_to_home": years,
                "viable": years is not None and years <= VIABLE_HOME_YEARS,
            }
        )
    return pd.DataFrame(rows).set_index("size")


def build_recommendations(result: StateResult, inputs: UserInputs) -> List[str]:
    improvements: List[str] = []

    required = result.required_allocation_percent or 0.0
    if inputs.allocation_percent < required:
        improvements.append(
            f"Raise allocation percentage: at least {required:.0%} of disposable income is needed to cover "
            f"minimum obligations; {result.recommended_allocation_percent or required:.0%} is recommended."
        )

    if result.savings_percent < 0.2:
        improvements.append(
            f"Increase savings allocation: currently at {result.savings_percent:.1%}. "
            "Increasing to 20%+ would significantly accelerate home ownership."
        )

    if result.years_to_debt_free is not None and result.years_to_debt_free > 5:
        improvements.append(
            "Accelerate debt payoff: paying an extra 5-10% toward student loans could reduce the debt-free timeline "
            f"from {result.years_to_debt_free} years to about {max(3, result.years_to_debt_free - 2)} years."
        )
    elif result.years_to_debt_free is None and inputs.student_loan_balance + inputs.credit_card_balance > 0:
        improvements.append(
            "Debt is not shrinking: payments barely cover interest. Raise the allocation to start reducing the balance."
        )

    if inputs.savings_rate < 0.03:
        improvements.append(
            f"Maximize savings rate: current rate of {inputs.savings_rate:.1%}. "
            "Consider high-yield savings accounts or conservative investments for 3-5% returns."
        )

    if result.home_value > 0 and result.years_to_home is not None and result.years_to_home > 10:
        improvements.append(
            "Consider a smaller home initially: a small or medium home could be purchased "
            f"{max(2, result.years_to_home - 8)} years sooner, then upgrade later."
        )

    if inputs.allocation_percent < 0.3:
        improvements.append(
            f"Increase overall allocation: allocating {inputs.allocation_percent + 0.1:.0%} instead of "
            f"{inputs.allocation_percent:.0%} of disposable income could shorten timelines by 20-30%."
        )

    if inputs.advanced.annual_credit_card_debt > 0:
        improvements.append(
            "Build a sinking fund for recurring big-ticket purchases so they do not return to the credit card."
        )

    improvements.append("Automate savings: set up automatic transfers to ensure consistent savings each month.")
    improvements.append(
        "Track expenses: monitor spending to identify areas where you can redirect funds to savings or debt payoff."
    )

    if inputs.household_type == "single" and inputs.advanced.partner_timing == "yes":
        improvements.append(
            "Partner income boost: when your partner joins the household, your combined income will "
            "significantly improve your timelines."
        )

    return improvements
