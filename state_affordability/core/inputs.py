import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

HOUSEHOLD_TYPES = ("single", "marriedOneIncome", "marriedTwoIncome")
HOME_SIZES = ("small", "medium", "large", "veryLarge")
STRATEGIES = ("conservative", "balanced", "aggressive")
STRATEGY_MODES = STRATEGIES + ("auto",)
LOCATION_CERTAINTIES = ("sure", "deciding", "unknown")


def _number(value: Any, default: float = 0.0) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    return result if math.isfinite(result) else default


def _optional_number(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return _number(value)


def _pick(data: Dict[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    if camel in data:
        return data[camel]
    return data.get(snake, default)


@dataclass
class AdvancedInputs:
    future_kids: bool = False
    first_child_age: Optional[float] = None
    second_child_age: Optional[float] = None
    partner_timing: Optional[str] = None  # "yes", "no" or "already"
    partner_age: Optional[float] = None
    annual_credit_card_debt: float = 0.0  # re-spend added every refresh period
    student_loan_style: str = "standard"  # "standard", "accelerated" or "unsure"

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AdvancedInputs":
        data = data if isinstance(data, dict) else {}
        return cls(
            future_kids=bool(_pick(data, "futureKids", "future_kids", False)),
            first_child_age=_optional_number(_pick(data, "firstChildAge", "first_child_age")),
            second_child_age=_optional_number(_pick(data, "secondChildAge", "second_child_age")),
            partner_timing=_pick(data, "partnerTiming", "partner_timing"),
            partner_age=_optional_number(_pick(data, "partnerAge", "partner_age")),
            annual_credit_card_debt=max(0.0, _number(_pick(data, "annualCreditCardDebt", "annual_credit_card_debt"))),
            student_loan_style=_pick(data, "studentLoanStyle", "student_loan_style", "standard") or "standard",
        )


@dataclass
class UserInputs:
    age: float = 25
    location_certainty: str = "sure"  # "sure", "deciding" or "unknown"
    selected_states: List[str] = field(default_factory=list)
    household_type: str = "single"
    kids: int = 0
    income_source: str = "occupation"  # "occupation" or "salary"
    occupation: str = ""
    salary_override: Optional[float] = None
    partner_income_source: str = "occupation"
    partner_occupation: str = ""
    partner_salary_override: Optional[float] = None
    student_loan_balance: float = 0.0
    student_loan_rate: float = 0.0
    credit_card_balance: float = 0.0
    credit_card_apr: float = 0.0
    savings_rate: float = 0.0
    allocation_percent: float = 0.0
    home_size: str = "medium"
    strategy_mode: str = "auto"
    advanced: AdvancedInputs = field(default_factory=AdvancedInputs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserInputs":
        """Build inputs from the form payload (camelCase or snake_case keys)."""
        selected = _pick(data, "selectedStates", "selected_states", []) or []
        if isinstance(selected, str):
            selected = [selected]
        return cls(
            age=max(0.0, _number(data.get("age"))),
            location_certainty=_pick(data, "locationCertainty", "location_certainty", "sure"),
            selected_states=[str(s) for s in selected],
            household_type=_pick(data, "householdType", "household_type", "single"),
            kids=max(0, int(_number(data.get("kids")))),
            income_source=_pick(data, "incomeSource", "income_source", "occupation"),
            occupation=_pick(data, "occupation", "occupation", "") or "",
            salary_override=_optional_number(_pick(data, "salaryOverride", "salary_override")),
            partner_income_source=_pick(data, "partnerIncomeSource", "partner_income_source", "occupation"),
            partner_occupation=_pick(data, "partnerOccupation", "partner_occupation", "") or "",
            partner_salary_override=_optional_number(_pick(data, "partnerSalaryOverride", "partner_salary_override")),
            student_loan_balance=max(0.0, _number(_pick(data, "studentLoanBalance", "student_loan_balance"))),
            student_loan_rate=max(0.0, _number(_pick(data, "studentLoanRate", "student_loan_rate"))),
            credit_card_balance=max(0.0, _number(_pick(data, "creditCardBalance", "credit_card_balance"))),
            credit_card_apr=max(0.0, _number(_pick(data, "creditCardApr", "credit_card_apr"))),
            savings_rate=max(0.0, _number(_pick(data, "savingsRate", "savings_rate"))),
            allocation_percent=min(1.0, max(0.0, _number(_pick(data, "allocationPercent", "allocation_percent")))),
            home_size=_pick(data, "homeSize", "home_size", "medium"),
            strategy_mode=_pick(data, "strategyMode", "strategy_mode", "auto"),
            advanced=AdvancedInputs.from_dict(data.get("advanced")),
        )


@dataclass
class SimulationSettings:
    income_growth_rate: float = 0.03
    inflation_rate: float = 0.025
    home_price_growth_rate: float = 0.03
    closing_cost_rate: float = 0.02  # added on top of the down payment target
    loan_progress_buffer_percent: float = 0.03
    credit_progress_buffer_percent: float = 0.01
    cc_refresh_period_years: int = 5
    max_years: int = 80
    sustainability_window_years: int = 5
    mortgage_term_years: int = 30
