from __future__ import annotations

import pandas as pd


def monthly_payment(principal: float, annual_rate: float, term_months: int) -> float:
    monthly_rate = annual_rate / 12.0
    if term_months <= 0:
        return 0.0
    if monthly_rate == 0:
        return principal / term_months
    factor = (1 + monthly_rate) ** term_months
    return principal * monthly_rate * factor / (factor - 1)


def monthly_mortgage_payment(
    home_value: float, annual_rate: float, down_payment_percent: float, term_years: int = 30
) -> float:
    """Fixed-rate payment on the financed share of the home value."""
    principal = home_value * (1 - down_payment_percent)
    if home_value <= 0 or annual_rate <= 0 or principal <= 0:
        return 0.0
    return monthly_payment(principal, annual_rate, term_years * 12)


def annual_mortgage_payment(
    home_value: float, annual_rate: float, down_payment_percent: float, term_years: int = 30
) -> float:
    return monthly_mortgage_payment(home_value, annual_rate, down_payment_percent, term_years) * 12


def amortization_schedule(
    principal: float, annual_rate: float, term_years: int = 30, horizon_months: int | None = None
) -> pd.DataFrame:
    term_months = term_years * 12
    horizon = min(horizon_months or term_months, term_months)

    balance = max(principal, 0.0)
    payment = monthly_payment(balance, annual_rate, term_months)
    records = []

    for month in range(1, horizon + 1):
        interest = balance * (annual_rate / 12.0)
        principal_paid = min(payment - interest, balance)
        ending_balance = max(balance - principal_paid, 0.0)

        records.append(
            {
                "month": month,
                "payment": payment,
                "interest": interest,
                "principal": principal_paid,
                "ending_balance": ending_balance,
            }
        )

        balance = ending_balance

    columns = ["month", "payment", "interest", "principal", "ending_balance"]
    return pd.DataFrame.from_records(records, columns=columns).set_index("month")
