from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))


import pandas as pd
import streamlit as st

from state_affordability.core.inputs import HOME_SIZES, HOUSEHOLD_TYPES, STRATEGY_MODES, AdvancedInputs, UserInputs
from state_affordability.core.reference_data import load_reference_data, occupation_keys
from state_affordability.core.report import (
    build_recommendations,
    home_size_comparison,
    yearly_breakdown,
)
from state_affordability.core.scenarios import base_scenario, default_settings
from state_affordability.core.simulator import StateResult, calculate_results, results_frame
from state_affordability.core.what_if import WhatIfScenario, run_what_if
from state_affordability.validation.checks import validate_inputs


st.set_page_config(page_title="Where Can I Afford a Home?", layout="wide")

HOUSEHOLD_LABELS = {
    "single": "Single",
    "marriedOneIncome": "Married, one income",
    "marriedTwoIncome": "Married, two incomes",
}
HOME_SIZE_LABELS = {"small": "Small", "medium": "Medium", "large": "Large", "veryLarge": "Very large"}


def sidebar_inputs(reference) -> UserInputs:
    defaults = base_scenario()
    states = {state.name: state.abbr for state in reference}
    occupations = list(occupation_keys(reference))

    with st.sidebar.expander("Location & Household", expanded=True):
        location_certainty = st.radio(
            "How sure are you about where to live?", options=["sure", "deciding", "unknown"], horizontal=True
        )
        selected_states = []
        if location_certainty == "sure":
            choice = st.selectbox("State", options=list(states))
            selected_states = [states[choice]] if choice else []
        elif location_certainty == "deciding":
            choices = st.multiselect("States", options=list(states))
            selected_states = [states[name] for name in choices]

        age = st.number_input("Age", min_value=0, max_value=100, value=int(defaults.age), step=1)
        household_type = st.selectbox(
            "Household", options=list(HOUSEHOLD_TYPES), format_func=lambda key: HOUSEHOLD_LABELS[key]
        )
        kids = st.number_input("Kids today", min_value=0, max_value=10, value=defaults.kids, step=1)

    with st.sidebar.expander("Income", expanded=True):
        income_source = st.radio("Primary income", options=["occupation", "salary"], horizontal=True)
        occupation = ""
        salary_override = None
        if income_source == "occupation":
            occupation = st.selectbox("Primary occupation", options=occupations) or ""
        else:
            salary_override = float(st.number_input("Primary salary (annual)", min_value=0, max_value=2_000_000, value=60_000, step=5_000))

        partner_income_source = "occupation"
        partner_occupation = ""
        partner_salary_override = None
        if household_type == "marriedTwoIncome":
            partner_income_source = st.radio("Partner income", options=["occupation", "salary"], horizontal=True)
            if partner_income_source == "occupation":
                partner_occupation = st.selectbox("Partner occupation", options=occupations) or ""
            else:
                partner_salary_override = float(
                    st.number_input("Partner salary (annual)", min_value=0, max_value=2_000_000, value=50_000, step=5_000)
                )

    with st.sidebar.expander("Debts & Strategy", expanded=False):
        student_loan_balance = st.number_input("Student loan balance", min_value=0, max_value=1_000_000, value=0, step=1_000)
        student_loan_rate = st.number_input(
            "Student loan rate (annual %)", min_value=0.0, max_value=20.0, value=defaults.student_loan_rate * 100, step=0.1
        )
        credit_card_balance = st.number_input("Credit card balance", min_value=0, max_value=500_000, value=0, step=500)
        credit_card_apr = st.number_input(
            "Credit card APR (%)", min_value=0.0, max_value=40.0, value=defaults.credit_card_apr * 100, step=0.1
        )
        savings_rate = st.slider("Savings interest rate (%)", min_value=0.0, max_value=10.0, value=defaults.savings_rate * 100, step=0.1)
        allocation = st.slider(
            "Share of disposable income for debt & savings (%)",
            min_value=0.0,
            max_value=100.0,
            value=defaults.allocation_percent * 100,
            step=1.0,
        )
        home_size = st.selectbox(
            "Target home size", options=list(HOME_SIZES), index=1, format_func=lambda key: HOME_SIZE_LABELS[key]
        )
        strategy_mode = st.selectbox("Strategy", options=list(STRATEGY_MODES), index=len(STRATEGY_MODES) - 1)

    with st.sidebar.expander("Advanced", expanded=False):
        future_kids = st.checkbox("Planning for kids", value=False)
        first_child_age = second_child_age = None
        if future_kids:
            first_child_age = float(st.number_input("Age at first child", min_value=0, max_value=80, value=30))
            second_child_age = float(st.number_input("Age at second child", min_value=0, max_value=80, value=33))
        partner_timing = st.selectbox("Partner joining later?", options=["no", "yes", "already"])
        partner_age = None
        if partner_timing == "yes":
            partner_age = float(st.number_input("Your age when partner joins", min_value=0, max_value=100, value=30))
        annual_credit_card_debt = st.number_input(
            "Recurring big-ticket card spend (every 5 years)", min_value=0, max_value=200_000, value=0, step=500
        )
        student_loan_style = st.selectbox("Student loan repayment", options=["standard", "accelerated", "unsure"])

    return UserInputs(
        age=float(age),
        location_certainty=location_certainty,
        selected_states=selected_states,
        household_type=household_type,
        kids=int(kids),
        income_source=income_source,
        occupation=occupation,
        salary_override=salary_override,
        partner_income_source=partner_income_source,
        partner_occupation=partner_occupation,
        partner_salary_override=partner_salary_override,
        student_loan_balance=float(student_loan_balance),
        student_loan_rate=student_loan_rate / 100.0,
        credit_card_balance=float(credit_card_balance),
        credit_card_apr=credit_card_apr / 100.0,
        savings_rate=savings_rate / 100.0,
        allocation_percent=allocation / 100.0,
        home_size=home_size,
        strategy_mode=strategy_mode,
        advanced=AdvancedInputs(
            future_kids=future_kids,
            first_child_age=first_child_age,
            second_child_age=second_child_age,
            partner_timing=partner_timing,
            partner_age=partner_age,
            annual_credit_card_debt=float(annual_credit_card_debt),
            student_loan_style=student_loan_style,
        ),
    )


def _years(value) -> str:
    return "Not reached" if pd.isna(value) else f"{int(value)} yrs"


def render_results_table(results: list[StateResult]) -> None:
    st.subheader("Results by state")
    df = results_frame(results)
    if df.empty:
        st.info("No matching states in the reference data.")
        return
    df = df.sort_values("viability_rating", ascending=False)
    table = pd.DataFrame(
        {
            "State": df["state"],
            "Classification": df["classification"],
            "Rating": df["viability_rating"].map(lambda x: f"{x:.1f}/10"),
            "Disposable income": df["disposable_income"].map(lambda x: f"${x:,.0f}"),
            "Years to home": df["years_to_home"].map(_years),
            "Years to debt-free": df["years_to_debt_free"].map(_years),
            "Required allocation": df["required_allocation_percent"].map(lambda x: f"{x*100:.0f}%"),
        }
    )
    st.table(table)


def render_state_detail(result: StateResult, sim_inputs: UserInputs, reference) -> None:
    state = reference.get(result.state)
    settings = default_settings()
    cols = st.columns(4)
    cols[0].metric("Viability", f"{result.viability_rating:.1f}/10", result.classification, delta_color="off")
    cols[1].metric("Years to home", _years(result.years_to_home))
    cols[2].metric("Years to debt-free", _years(result.years_to_debt_free))
    cols[3].metric("Mortgage (monthly)", f"${(result.monthly_mortgage_payment or 0):,.0f}")

    for note in result.notes:
        st.warning(note)

    breakdown = yearly_breakdown(state, sim_inputs, settings, max_years=30)
    st.markdown("**Net worth and balances**")
    st.line_chart(breakdown[["net_worth", "savings_balance", "remaining_debt", "home_equity"]], height=260)
    with st.expander("Year-by-year breakdown", expanded=False):
        st.dataframe(breakdown.reset_index(), use_container_width=True)

    st.markdown("**Home size comparison**")
    sizes = home_size_comparison(state, sim_inputs, settings)
    sizes_display = pd.DataFrame(
        {
            "Home size": sizes["label"],
            "Home value": sizes["home_value"].map(lambda x: f"${x:,.0f}"),
            "Years to purchase": sizes["years_to_home"].map(_years),
            "Viable": sizes["viable"].map(lambda x: "Yes" if x else "No"),
        }
    )
    st.table(sizes_display)

    st.markdown("**Recommendations**")
    for text in build_recommendations(result, sim_inputs):
        st.markdown(f"- {text}")


def main():
    st.title("Where Can I Afford a Home?")
    st.write(
        "Project, state by state, how long it takes to become debt-free and save a home down payment given your income, "
        "cost of living, debts and savings habits."
    )

    reference = load_reference_data()
    sim_inputs = sidebar_inputs(reference)

    tab_results, tab_detail, tab_refine = st.tabs(["Results", "State detail", "Refine"])

    try:
        validate_inputs(sim_inputs)
    except ValueError as exc:
        st.error(str(exc))
        return

    results = calculate_results(sim_inputs, reference=reference, settings=default_settings())

    with tab_results:
        render_results_table(results)

    with tab_detail:
        if not results:
            st.info("Select at least one state.")
        else:
            names = [result.state for result in results]
            chosen = st.selectbox("State", options=names)
            render_state_detail(results[names.index(chosen)], sim_inputs, reference)

    with tab_refine:
        st.subheader("Adjust and re-run")
        with st.form(key="refine_form"):
            allocation = st.slider(
                "Allocation (%)", min_value=0.0, max_value=100.0, value=sim_inputs.allocation_percent * 100, step=1.0
            )
            home_size = st.selectbox(
                "Home size",
                options=list(HOME_SIZES),
                index=HOME_SIZES.index(sim_inputs.home_size),
                format_func=lambda key: HOME_SIZE_LABELS[key],
            )
            savings_rate = st.slider(
                "Savings interest rate (%)", min_value=0.0, max_value=10.0, value=sim_inputs.savings_rate * 100, step=0.1
            )
            run_refine_btn = st.form_submit_button("Re-run", type="primary")

        if run_refine_btn:
            scenario = WhatIfScenario(
                allocation_percent=allocation / 100.0,
                home_size=home_size,
                savings_rate=savings_rate / 100.0,
            )
            refined = run_what_if(sim_inputs, scenario, reference=reference, settings=default_settings())
            render_results_table(refined)


if __name__ == "__main__":
    main()
