import pandas as pd
import pytest

from state_affordability.core.inputs import AdvancedInputs
from state_affordability.core.report import (
    BREAKDOWN_COLUMNS,
    build_recommendations,
    home_size_comparison,
    net_worth_projection,
    yearly_breakdown,
)
from state_affordability.core.simulator import calculate_state_result
from tests.helpers import flat_settings, make_inputs, make_state


def test_breakdown_tracks_purchase_and_equity(state, inputs):
    breakdown = yearly_breakdown(state, inputs, flat_settings(), max_years=10)

    assert list(breakdown.index) == list(range(1, 11))
    assert list(breakdown.columns) == BREAKDOWN_COLUMNS[1:]
    assert "Debt-free milestone reached" in breakdown.loc[1, "notes"]
    assert "home purchased" in breakdown.loc[3, "notes"]

    assert breakdown.loc[2, "home_equity"] == 0.0
    assert breakdown.loc[3, "mortgage_balance"] == pytest.approx(240_000)
    assert breakdown.loc[3, "home_equity"] == pytest.approx(60_000)
    assert breakdown.loc[4, "mortgage_balance"] < 240_000
    assert breakdown.loc[4, "mortgage_payment"] == pytest.approx(1438.92 * 12, abs=0.2)
    assert breakdown.loc[4, "savings_for_home"] == 0.0
    assert (breakdown["net_worth"].diff().dropna() > 0).all()


def test_breakdown_notes_household_changes():
    state = make_state(registered_nurse=50_000, cost_of_living_married_two_income_one_kid=40_000)
    inputs = make_inputs(
        age=27,
        household_type="marriedTwoIncome",
        partner_occupation="registered_nurse",
        advanced=AdvancedInputs(future_kids=True, first_child_age=31, partner_timing="yes", partner_age=29),
    )
    breakdown = yearly_breakdown(state, inputs, flat_settings(), max_years=8)

    assert "Partner joins household" in breakdown.loc[3, "notes"]
    assert "Child arrives" in breakdown.loc[5, "notes"]


def test_breakdown_counts_remaining_debt_against_net_worth(state):
    inputs = make_inputs(credit_card_balance=8_000, credit_card_apr=0.2)
    breakdown = yearly_breakdown(state, inputs, flat_settings(), max_years=3)
    first = breakdown.loc[1]
    assert first["remaining_debt"] > 0
    assert first["net_worth"] == pytest.approx(first["savings_balance"] - first["remaining_debt"])


def test_net_worth_projection_series(state, inputs):
    series = net_worth_projection(state, inputs, flat_settings(), max_years=5)
    assert series.name == "net_worth"
    assert len(series) == 5


def test_home_size_comparison(state, inputs):
    sizes = home_size_comparison(state, inputs, flat_settings())

    assert list(sizes.index) == ["small", "medium", "large", "veryLarge"]
    assert sizes.loc["small", "years_to_home"] <= sizes.loc["medium", "years_to_home"]
    assert sizes.loc["medium", "viable"]
    assert pd.isna(sizes.loc["veryLarge", "years_to_home"])
    assert not sizes.loc["veryLarge", "viable"]


def test_recommendations_flag_underfunded_allocation():
    state = make_state(salary=50_000, cost_of_living=30_000)
    inputs = make_inputs(student_loan_balance=50_000, student_loan_rate=0.08, allocation_percent=0.05, savings_rate=0.01)
    result = calculate_state_result(state, inputs)
    recommendations = build_recommendations(result, inputs)

    assert recommendations[0].startswith("Raise allocation percentage")
    assert any(text.startswith("Debt is not shrinking") for text in recommendations)
    assert any(text.startswith("Maximize savings rate") for text in recommendations)
    assert any(text.startswith("Automate savings") for text in recommendations)


def test_recommendations_for_comfortable_household(state, inputs):
    result = calculate_state_result(state, inputs, settings=flat_settings())
    recommendations = build_recommendations(result, inputs)

    assert not any(text.startswith("Raise allocation") for text in recommendations)
    assert not any(text.startswith("Increase savings allocation") for text in recommendations)
