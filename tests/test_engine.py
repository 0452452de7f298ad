import math

import pytest

from state_affordability.core.engine import (
    NOTE_MISSING_HOME_VALUE,
    NOTE_MORTGAGE_SHORTFALL,
    NOTE_NO_DISPOSABLE,
    NOTE_PURCHASE_DEFERRED,
    NOTE_SHORTFALL,
    recommended_allocation,
    run_household_path,
)
from state_affordability.core.inputs import AdvancedInputs, SimulationSettings
from tests.helpers import flat_settings, make_inputs, make_state


def _years(value):
    return math.inf if value is None else value


def test_debt_free_household_buys_after_saving_down_payment(state, inputs):
    result = run_household_path(state, inputs, flat_settings())

    # 22% of $300k (down payment plus closing costs) is reached in the third year.
    assert result.years_to_home == 2
    assert result.years_to_debt_free == 0
    assert result.home_purchase_value == 300_000
    assert result.monthly_mortgage_payment == pytest.approx(1438.92, abs=0.01)
    assert result.required_allocation_percent == pytest.approx(1438.92 * 12 / 60_000, rel=1e-4)
    assert result.recommended_allocation_percent == pytest.approx(0.30)
    assert result.notes == []


def test_zero_disposable_income_stops_immediately():
    state = make_state(salary=30_000, cost_of_living=30_000)
    result = run_household_path(state, make_inputs(), SimulationSettings())

    assert result.years_to_home is None
    assert result.years_to_debt_free is None
    assert result.history == []
    assert result.notes == [NOTE_NO_DISPOSABLE]


def test_allocation_below_interest_never_clears_debt():
    state = make_state(salary=50_000, cost_of_living=30_000)
    inputs = make_inputs(student_loan_balance=50_000, student_loan_rate=0.08, allocation_percent=0.05)
    result = run_household_path(state, inputs, SimulationSettings())

    assert result.years_to_debt_free is None
    assert result.years_to_home is None
    assert NOTE_SHORTFALL in result.notes
    assert result.required_allocation_percent > inputs.allocation_percent
    balances = [row["loan_balance"] for row in result.history]
    assert balances[-1] > balances[0]


def test_balances_and_payments_never_negative():
    inputs = make_inputs(
        student_loan_balance=35_000,
        student_loan_rate=0.06,
        credit_card_balance=6_000,
        credit_card_apr=0.22,
        allocation_percent=0.6,
        advanced=AdvancedInputs(annual_credit_card_debt=3_000),
    )
    result = run_household_path(make_state(), inputs, SimulationSettings(), stop_at_milestones=False)

    assert len(result.history) == 80
    for row in result.history:
        for key in ("loan_balance", "cc_balance", "savings_balance", "loan_payment", "credit_payment", "savings_contribution"):
            assert row[key] >= 0, (row["year"], key)


def test_debt_free_year_is_frozen_despite_respend():
    settings = flat_settings()
    inputs = make_inputs(credit_card_apr=0.2, advanced=AdvancedInputs(annual_credit_card_debt=5_000))
    result = run_household_path(make_state(), inputs, settings, stop_at_milestones=False)

    assert result.years_to_debt_free == 0
    assert result.history[3]["cc_balance"] == 0
    assert result.history[4]["cc_balance"] == 5_000
    assert result.history[5]["credit_payment"] > 0


def test_purchase_deferred_when_mortgage_exceeds_allocation():
    state = make_state(salary=80_000, cost_of_living=30_000)
    result = run_household_path(state, make_inputs(allocation_percent=0.3), flat_settings())

    assert result.years_to_home is None
    assert NOTE_PURCHASE_DEFERRED in result.notes
    assert all(row["mortgage_payment"] == 0 for row in result.history)


def test_post_purchase_shortfall_stops_projection():
    state = make_state(cost_of_living_single_one_kid=60_000)
    inputs = make_inputs(advanced=AdvancedInputs(future_kids=True, first_child_age=33))
    result = run_household_path(state, inputs, flat_settings(), stop_at_milestones=False)

    assert result.years_to_home == 2
    assert NOTE_MORTGAGE_SHORTFALL in result.notes
    assert len(result.history) == 8


def test_missing_home_value_noted():
    state = make_state(typical_home_value_single_family_normal="N/A")
    result = run_household_path(state, make_inputs(), flat_settings())

    assert result.years_to_home is None
    assert result.monthly_mortgage_payment == 0.0
    assert NOTE_MISSING_HOME_VALUE in result.notes


def test_runs_are_deterministic(state):
    inputs = make_inputs(student_loan_balance=20_000, student_loan_rate=0.05)
    assert run_household_path(state, inputs) == run_household_path(state, inputs)


def test_more_allocation_never_slows_progress():
    state = make_state(salary=80_000, cost_of_living=30_000)
    previous_home = previous_debt = math.inf
    for allocation in (0.3, 0.5, 0.8):
        inputs = make_inputs(student_loan_balance=20_000, student_loan_rate=0.05, allocation_percent=allocation)
        result = run_household_path(state, inputs, flat_settings())
        assert _years(result.years_to_home) <= previous_home
        assert _years(result.years_to_debt_free) <= previous_debt
        previous_home = _years(result.years_to_home)
        previous_debt = _years(result.years_to_debt_free)
    assert previous_home < math.inf


def test_growth_delays_but_does_not_prevent_purchase(state, inputs):
    result = run_household_path(state, inputs, SimulationSettings())
    assert result.years_to_home is not None and result.years_to_home > 0
    assert result.home_purchase_value > 300_000


@pytest.mark.parametrize(
    "required, recommended",
    [(0.0, 0.0), (0.2878, 0.30), (0.30, 0.30), (0.301, 0.35), (0.97, 1.0), (1.4, 1.0), (math.nan, 0.0)],
)
def test_recommended_allocation_rounds_up_to_five_percent(required, recommended):
    assert recommended_allocation(required) == pytest.approx(recommended)


def test_purchase_in_final_year_must_still_fit_allocation():
    state = make_state(salary=80_000, cost_of_living=30_000)
    # Savings reach the target only in the last simulated year.
    result = run_household_path(state, make_inputs(allocation_percent=0.3), flat_settings(max_years=5))

    assert len(result.history) == 5
    assert result.years_to_home is None
    assert NOTE_PURCHASE_DEFERRED in result.notes
    assert result.required_allocation_percent == 0.0


def test_affordable_purchase_in_final_year_is_accepted(state, inputs):
    result = run_household_path(state, inputs, flat_settings(max_years=3))

    assert result.years_to_home == 2
    assert result.required_allocation_percent == pytest.approx(1438.92 * 12 / 60_000, rel=1e-4)
