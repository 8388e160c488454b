# models.py
from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class InputParameters:
    # People
    age1: int
    age2: int

    # Portfolio & market
    starting_portfolio: float
    inflation_rate: float
    stock_return_rate: float
    cash_threshold: float  # years of annual need held as cash

    # Social Security (monthly amounts)
    ss1_amount: float
    ss1_start_age: int
    ss2_amount: float
    ss2_start_age: int
    cola_percentage: float

    # Spending & rental
    base_annual_expense: float
    base_rental_income: float
    rental_income_growth_rate: float


@dataclass(frozen=True)
class YearInputs:
    """
    Per-year overrides. None means "not entered" and is treated as the default
    (the parameter base for annual_expense/rental_income, zero otherwise).
    """
    # Base values, still grown by that year's multiplier
    annual_expense: Optional[float] = None
    rental_income: Optional[float] = None

    # Literal dollar amounts for the year, never inflated
    fixed_expense: Optional[float] = None
    tuition: Optional[float] = None
    one_off_expenses: Optional[float] = None
    income1: Optional[float] = None
    income2: Optional[float] = None


# zero-based simulation year -> overrides for that year
YearOverrides = Dict[int, YearInputs]


@dataclass(frozen=True)
class YearlySnapshot:
    age1: int
    age2: int
    annual_expense: float
    fixed_expense: float
    tuition: float
    one_off_expenses: float
    total_expenses: float
    rental_income: float
    income1: float
    income2: float
    ss1: float
    ss2: float
    effective_tax_rate: float  # total tax / total expenses
    total_income: float
    annual_need: float
    cash: float
    stock: float
    net_worth: float
    inflation_adjusted: float


@dataclass
class SavedData:
    input_params: InputParameters
    year_inputs: YearOverrides = field(default_factory=dict)
