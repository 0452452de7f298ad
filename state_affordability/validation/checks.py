from __future__ import annotations

from state_affordability.core.inputs import (
    HOME_SIZES,
    HOUSEHOLD_TYPES,
    LOCATION_CERTAINTIES,
    STRATEGY_MODES,
    AdvancedInputs,
    SimulationSettings,
    UserInputs,
)


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ValueError(message)


def validate_location(inputs: UserInputs) -> None:
    _require(inputs.location_certainty in LOCATION_CERTAINTIES, "Location certainty must be 'sure', 'deciding' or 'unknown'.")
    if inputs.location_certainty != "unknown":
        _require(len(inputs.selected_states) > 0, "Select at least one state before continuing.")


def validate_household(inputs: UserInputs) -> None:
    _require(inputs.age >= 0, "Age cannot be negative.")
    _require(inputs.household_type in HOUSEHOLD_TYPES, "Unknown household type.")
    _require(inputs.kids >= 0, "Number of kids cannot be negative.")
    if inputs.income_source == "salary":
        _require(bool(inputs.salary_override and inputs.salary_override > 0), "Enter a primary salary to continue.")
    else:
        _require(bool(inputs.occupation), "Select a primary occupation to continue.")
    if inputs.household_type == "marriedTwoIncome":
        if inputs.partner_income_source == "salary":
            _require(
                bool(inputs.partner_salary_override and inputs.partner_salary_override > 0),
                "Enter a partner salary for two-income households.",
            )
        else:
            _require(bool(inputs.partner_occupation), "Select a partner occupation for two-income households.")


def validate_finances(inputs: UserInputs) -> None:
    _require(inputs.student_loan_balance >= 0, "Student loan balance cannot be negative.")
    _require(inputs.student_loan_rate >= 0, "Student loan rate cannot be negative.")
    _require(inputs.credit_card_balance >= 0, "Credit card balance cannot be negative.")
    _require(inputs.credit_card_apr >= 0, "Credit card APR cannot be negative.")
    _require(inputs.savings_rate >= 0, "Savings rate cannot be negative.")
    _require(0 <= inputs.allocation_percent <= 1, "Allocation percent must be between 0 and 1.")
    _require(inputs.home_size in HOME_SIZES, "Unknown home size.")
    _require(inputs.strategy_mode in STRATEGY_MODES, "Unknown strategy mode.")


def validate_advanced(inputs: AdvancedInputs) -> None:
    _require(inputs.annual_credit_card_debt >= 0, "Recurring credit card spend cannot be negative.")
    _require(inputs.partner_timing in (None, "yes", "no", "already"), "Partner timing must be 'yes', 'no' or 'already'.")
    _require(
        inputs.student_loan_style in {"standard", "accelerated", "unsure"},
        "Student loan style must be 'standard', 'accelerated' or 'unsure'.",
    )
    if inputs.future_kids and inputs.first_child_age is not None and inputs.second_child_age is not None:
        _require(inputs.second_child_age >= inputs.first_child_age, "Second child age must not precede the first.")


def validate_settings(settings: SimulationSettings) -> None:
    _require(settings.max_years > 0, "Simulation horizon must be positive.")
    _require(settings.mortgage_term_years > 0, "Mortgage term must be positive.")
    _require(settings.cc_refresh_period_years > 0, "Credit card refresh period must be positive.")
    _require(settings.sustainability_window_years >= 0, "Sustainability window cannot be negative.")
    _require(settings.closing_cost_rate >= 0, "Closing cost rate cannot be negative.")


def validate_inputs(inputs: UserInputs, settings: SimulationSettings | None = None) -> None:
    validate_location(inputs)
    validate_household(inputs)
    validate_finances(inputs)
    validate_advanced(inputs.advanced)
    if settings is not None:
        validate_settings(settings)
