from __future__ import annotations

from typing import Tuple

import numpy as np

from .inputs import SimulationSettings, UserInputs
from .reference_data import StateData, household_cost, salary_for


def grow(value: float, rate: float, years: float) -> float:
    """Compound growth; non-finite inputs or results leave the value untouched."""
    if not (np.isfinite(value) and np.isfinite(rate) and np.isfinite(years)):
        return value
    grown = value * (1 + rate) ** years
    return float(grown) if np.isfinite(grown) else value


def kids_at_year(inputs: UserInputs, year: int) -> int:
    """Kid count at a simulated year; future children only ever add to it."""
    kids = max(0, int(inputs.kids))
    advanced = inputs.advanced
    if not advanced.future_kids:
        return kids
    age = inputs.age + year
    if advanced.first_child_age is not None and age >= advanced.first_child_age:
        kids = max(kids, 1)
    if advanced.second_child_age is not None and age >= advanced.second_child_age:
        kids = max(kids, 2)
    return kids


def base_incomes(state: StateData, inputs: UserInputs) -> Tuple[float, float]:
    """Return (primary, partner) annual salary before growth."""
    primary = salary_for(state, inputs.occupation, inputs.salary_override)
    partner = 0.0
    if inputs.household_type == "marriedTwoIncome":
        partner = salary_for(state, inputs.partner_occupation, inputs.partner_salary_override)
    return primary, partner


def partner_present(inputs: UserInputs, year: int) -> bool:
    advanced = inputs.advanced
    if advanced.partner_timing != "yes" or advanced.partner_age is None:
        return True
    return inputs.age + year >= advanced.partner_age


def income_at_year(state: StateData, inputs: UserInputs, settings: SimulationSettings, year: int) -> float:
    primary, partner = base_incomes(state, inputs)
    base = primary + (partner if partner_present(inputs, year) else 0.0)
    return grow(base, settings.income_growth_rate, year)


def cost_of_living_at_year(state: StateData, inputs: UserInputs, settings: SimulationSettings, year: int) -> float:
    base = household_cost(state, inputs.household_type, kids_at_year(inputs, year))
    return grow(base, settings.inflation_rate, year)


def disposable_income_at_year(state: StateData, inputs: UserInputs, settings: SimulationSettings, year: int) -> float:
    income = income_at_year(state, inputs, settings, year)
    cost = cost_of_living_at_year(state, inputs, settings, year)
    return max(0.0, income - cost)


def minimum_debt_payments(
    loan_balance: float, cc_balance: float, inputs: UserInputs, settings: SimulationSettings, disposable: float
) -> Tuple[float, float]:
    """Return (loan minimum, credit minimum): interest plus a principal progress buffer.

    Neither minimum exceeds the balance plus the year's interest.
    """
    loan_interest = loan_balance * inputs.student_loan_rate
    loan_min = loan_interest
    if loan_balance > 0:
        loan_min += disposable * settings.loan_progress_buffer_percent
    cc_interest = cc_balance * inputs.credit_card_apr
    credit_min = cc_interest
    if cc_balance > 0:
        credit_min += disposable * settings.credit_progress_buffer_percent
    loan_min = min(loan_min, max(0.0, loan_balance + loan_interest))
    credit_min = min(credit_min, max(0.0, cc_balance + cc_interest))
    return loan_min, credit_min
