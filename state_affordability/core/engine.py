from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional

from .budget import (
    cost_of_living_at_year,
    disposable_income_at_year,
    grow,
    income_at_year,
    kids_at_year,
    minimum_debt_payments,
)
from .inputs import SimulationSettings, UserInputs
from .mortgage import annual_mortgage_payment, monthly_mortgage_payment
from .reference_data import StateData, down_payment_percent, home_value, mortgage_rate

NOTE_NO_DISPOSABLE = "Disposable income is zero or negative at the current household size."
NOTE_NO_DISPOSABLE_LATER = "Disposable income falls to zero in year {year}; projection stopped."
NOTE_SHORTFALL = "Allocation is insufficient to cover minimum debt and credit card payments."
NOTE_MORTGAGE_SHORTFALL = (
    "Allocation is insufficient to sustain the mortgage and minimum debt payments after purchase; projection stopped."
)
NOTE_PURCHASE_DEFERRED = "Down payment was reached before the mortgage was sustainable; purchase deferred."
NOTE_MISSING_HOME_VALUE = "Missing home value data for this state."


@dataclass
class SimulationResult:
    years_to_home: Optional[int]
    years_to_debt_free: Optional[int]
    monthly_mortgage_payment: float
    required_allocation_percent: float
    recommended_allocation_percent: float
    notes: List[str] = field(default_factory=list)
    history: List[dict] = field(default_factory=list)
    home_purchase_value: Optional[float] = None


def _add_note(notes: List[str], message: str) -> None:
    if message not in notes:
        notes.append(message)


def recommended_allocation(required: float) -> float:
    """Round up to the next 5% step, capped at 100%."""
    if not math.isfinite(required) or required <= 0:
        return 0.0
    steps = math.ceil(round(required * 20, 9))
    return min(1.0, steps / 20)


def _sustainable_peak_ratio(
    state: StateData,
    inputs: UserInputs,
    settings: SimulationSettings,
    year: int,
    loan_balance: float,
    cc_balance: float,
) -> Optional[float]:
    """Peak obligation ratio over the coming years, or None when the mortgage would not fit the allocation."""
    base_home_value = home_value(state, inputs.home_size)
    rate = mortgage_rate(state)
    down_payment = down_payment_percent(state)
    window = min(settings.sustainability_window_years, settings.max_years - year - 1)
    # With no years left to project, the purchase year itself has to fit.
    checked_years = range(year + 1, year + 1 + window) if window > 0 else (year,)
    peak_ratio = 0.0

    for future_year in checked_years:
        disposable = disposable_income_at_year(state, inputs, settings, future_year)
        if disposable <= 0:
            return None
        future_value = grow(base_home_value, settings.home_price_growth_rate, future_year)
        mortgage = annual_mortgage_payment(future_value, rate, down_payment, settings.mortgage_term_years)
        loan_min, credit_min = minimum_debt_payments(loan_balance, cc_balance, inputs, settings, disposable)
        ratio = (mortgage + loan_min + credit_min) / disposable
        if ratio > inputs.allocation_percent:
            return None
        peak_ratio = max(peak_ratio, ratio)
        loan_balance = max(0.0, loan_balance * (1 + inputs.student_loan_rate) - loan_min)
        cc_balance = max(0.0, cc_balance * (1 + inputs.credit_card_apr) - credit_min)
    return peak_ratio


def run_household_path(
    state: StateData,
    inputs: UserInputs,
    settings: Optional[SimulationSettings] = None,
    stop_at_milestones: bool = True,
) -> SimulationResult:
    """Advance one household year by year until both milestones are met or progress stops.

    With stop_at_milestones=False the projection keeps running to max_years so
    report consumers get a full history; milestone years are unaffected.
    """
    settings = settings or SimulationSettings()
    base_home_value = home_value(state, inputs.home_size)
    rate = mortgage_rate(state)
    down_payment = down_payment_percent(state)
    allocation = inputs.allocation_percent

    savings_balance = 0.0
    loan_balance = max(0.0, inputs.student_loan_balance)
    cc_balance = max(0.0, inputs.credit_card_balance)
    home_purchased = False
    home_purchase_year: Optional[int] = None
    home_purchase_value: Optional[float] = None
    years_to_debt_free: Optional[int] = None
    max_required_ratio = 0.0
    last_year = 0

    notes: List[str] = []
    history: List[dict] = []

    if base_home_value <= 0:
        _add_note(notes, NOTE_MISSING_HOME_VALUE)

    for year in range(settings.max_years):
        income = income_at_year(state, inputs, settings, year)
        cost_of_living = cost_of_living_at_year(state, inputs, settings, year)
        disposable = max(0.0, income - cost_of_living)
        if disposable <= 0:
            _add_note(notes, NOTE_NO_DISPOSABLE if year == 0 else NOTE_NO_DISPOSABLE_LATER.format(year=year))
            break
        last_year = year

        budget = disposable * allocation
        loan_min, credit_min = minimum_debt_payments(loan_balance, cc_balance, inputs, settings, disposable)
        loan_interest = loan_balance * inputs.student_loan_rate
        cc_interest = cc_balance * inputs.credit_card_apr

        current_home_value = grow(base_home_value, settings.home_price_growth_rate, year)
        mortgage_due = 0.0
        if home_purchased:
            mortgage_due = annual_mortgage_payment(current_home_value, rate, down_payment, settings.mortgage_term_years)

        required = loan_min + credit_min + mortgage_due
        required_ratio = required / disposable
        max_required_ratio = max(max_required_ratio, required_ratio)

        if budget < required:
            if home_purchased:
                _add_note(notes, NOTE_MORTGAGE_SHORTFALL)
                break
            _add_note(notes, NOTE_SHORTFALL)

        # Mortgage first once purchased; savings stop after purchase.
        remaining = budget - mortgage_due
        loan_payment = min(remaining, loan_min)
        credit_payment = min(remaining - loan_payment, credit_min)
        savings_contribution = 0.0 if home_purchased else remaining - loan_payment - credit_payment

        loan_balance = max(0.0, loan_balance + loan_interest - loan_payment)
        cc_balance = max(0.0, cc_balance + cc_interest - credit_payment)
        respend = inputs.advanced.annual_credit_card_debt
        period = settings.cc_refresh_period_years
        if respend > 0 and period > 0 and (year + 1) % period == 0:
            cc_balance += respend

        savings_balance = (savings_balance + savings_contribution) * (1 + inputs.savings_rate)

        if not home_purchased and base_home_value > 0:
            target = current_home_value * (down_payment + settings.closing_cost_rate)
            if savings_balance >= target:
                peak_ratio = _sustainable_peak_ratio(state, inputs, settings, year, loan_balance, cc_balance)
                if peak_ratio is not None:
                    max_required_ratio = max(max_required_ratio, peak_ratio)
                    home_purchased = True
                    home_purchase_year = year
                    home_purchase_value = current_home_value
                    savings_balance = max(0.0, savings_balance - target)
                else:
                    _add_note(notes, NOTE_PURCHASE_DEFERRED)

        if years_to_debt_free is None and loan_balance <= 0 and cc_balance <= 0:
            years_to_debt_free = year

        history.append(
            {
                "year": year,
                "age": inputs.age + year,
                "kids": kids_at_year(inputs, year),
                "income": income,
                "cost_of_living": cost_of_living,
                "disposable_income": disposable,
                "budget": budget,
                "loan_payment": loan_payment,
                "credit_payment": credit_payment,
                "mortgage_payment": mortgage_due,
                "savings_contribution": savings_contribution,
                "savings_balance": savings_balance,
                "loan_balance": loan_balance,
                "cc_balance": cc_balance,
                "home_value": current_home_value,
                "home_purchased": home_purchased,
                "required_ratio": required_ratio,
            }
        )

        if stop_at_milestones and home_purchased and years_to_debt_free is not None:
            break

    if home_purchase_value is not None:
        monthly_payment = monthly_mortgage_payment(home_purchase_value, rate, down_payment, settings.mortgage_term_years)
    else:
        final_value = grow(base_home_value, settings.home_price_growth_rate, last_year)
        monthly_payment = monthly_mortgage_payment(final_value, rate, down_payment, settings.mortgage_term_years)

    return SimulationResult(
        years_to_home=home_purchase_year,
        years_to_debt_free=years_to_debt_free,
        monthly_mortgage_payment=monthly_payment,
        required_allocation_percent=max_required_ratio,
        recommended_allocation_percent=recommended_allocation(max_required_ratio),
        notes=notes,
        history=history,
        home_purchase_value=home_purchase_value,
    )
