from __future__ import annotations

from .inputs import AdvancedInputs, SimulationSettings, UserInputs


def default_settings() -> SimulationSettings:
    return SimulationSettings(
        income_growth_rate=0.03,
        inflation_rate=0.025,
        home_price_growth_rate=0.03,
        closing_cost_rate=0.02,
        loan_progress_buffer_percent=0.03,
        credit_progress_buffer_percent=0.01,
        cc_refresh_period_years=5,
        max_years=80,
        sustainability_window_years=5,
        mortgage_term_years=30,
    )


def base_scenario() -> UserInputs:
    """Provide a reasonable starting point for the UI."""
    return UserInputs(
        age=25,
        location_certainty="sure",
        selected_states=[],
        household_type="single",
        kids=0,
        income_source="occupation",
        occupation="",
        partner_income_source="occupation",
        partner_occupation="",
        student_loan_balance=0.0,
        student_loan_rate=0.063,
        credit_card_balance=0.0,
        credit_card_apr=0.216,
        savings_rate=0.03,
        allocation_percent=0.8,
        home_size="medium",
        strategy_mode="auto",
        advanced=AdvancedInputs(future_kids=False, student_loan_style="standard"),
    )
