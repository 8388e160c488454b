# engine.simulator.py

import logging
import numpy as np
import pandas as pd
from dataclasses import asdict, fields
from typing import List, Optional

# --- Utilities and Models ---
from models import InputParameters, YearInputs, YearOverrides, YearlySnapshot
from utils.ss_utils import calculate_annual_ss_benefit
from utils.tax_utils import MASSACHUSETTS_BRACKETS, TaxBracket

from engine.tax_engine import TaxpayerInfo, calculate_taxes

logger = logging.getLogger(__name__)

# Projection runs until both people are past this age
END_AGE = 92
TAX_FILING_STATUS = "married"

_NO_OVERRIDES = YearInputs()


def _override_or(value: Optional[float], default: float) -> float:
    return default if value is None else value


def _replenish_cash(cash: float, stock: float, threshold: float):
    """Moves stock into cash until cash reaches threshold or stock runs out."""
    if cash < threshold and stock > 0:
        replenish_amount = min(threshold - cash, stock)
        stock -= replenish_amount
        cash += replenish_amount
    return cash, stock


def _effective_tax_rate(total_tax: float, total_expenses: float) -> float:
    # 0 expenses -> nan/inf
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(total_tax) / np.float64(total_expenses))


# =========================================================================
# CORE PROJECTION
# =========================================================================
def project(
    params: InputParameters,
    overrides: Optional[YearOverrides] = None,
    state_brackets: List[TaxBracket] = MASSACHUSETTS_BRACKETS,
) -> List[YearlySnapshot]:
    """
    Projects cash and stock balances year by year under the two-bucket
    strategy, from the starting ages until both people are past END_AGE.

    Args:
        params: Base parameters for the run.
        overrides: Sparse per-year inputs keyed by zero-based year index.
        state_brackets: State tax schedule used for every year.

    Returns:
        One YearlySnapshot per simulated year, in year order.
    """
    overrides = overrides or {}
    results: List[YearlySnapshot] = []

    current_age1 = params.age1
    current_age2 = params.age2
    cash = 0.0
    stock = params.starting_portfolio
    inflation_multiplier = 1.0
    rental_income_multiplier = 1.0

    while current_age1 <= END_AGE or current_age2 <= END_AGE:
        year = current_age1 - params.age1
        year_inputs = overrides.get(year) or _NO_OVERRIDES

        # =========================================================================
        # --- STEP 1: EXPENSES ---
        # --- only the base annual expense is inflated
        # =========================================================================
        base_annual_expense = _override_or(year_inputs.annual_expense, params.base_annual_expense)
        annual_expense = base_annual_expense * inflation_multiplier

        fixed_expense = _override_or(year_inputs.fixed_expense, 0.0)
        tuition = _override_or(year_inputs.tuition, 0.0)
        one_off_expenses = _override_or(year_inputs.one_off_expenses, 0.0)
        income1 = _override_or(year_inputs.income1, 0.0)
        income2 = _override_or(year_inputs.income2, 0.0)

        total_expenses = annual_expense + fixed_expense + tuition + one_off_expenses

        # =========================================================================
        # --- STEP 2: INCOME ---
        # =========================================================================
        base_rental_income = _override_or(year_inputs.rental_income, params.base_rental_income)
        rental_income = base_rental_income * rental_income_multiplier

        ss1 = calculate_annual_ss_benefit(current_age1, params.ss1_start_age, params.ss1_amount, params.cola_percentage)
        ss2 = calculate_annual_ss_benefit(current_age2, params.ss2_start_age, params.ss2_amount, params.cola_percentage)

        total_income = rental_income + income1 + income2 + ss1 + ss2

        # =========================================================================
        # --- STEP 3: TAX AND ANNUAL NEED ---
        # --- tax is assessed on total expenses
        # =========================================================================
        tax_result = calculate_taxes(
            TaxpayerInfo(gross_income=total_expenses, filing_status=TAX_FILING_STATUS, itemized_deductions=0.0),
            state_brackets,
        )

        annual_need = (total_expenses - total_income) + tax_result.total_tax
        effective_tax_rate = _effective_tax_rate(tax_result.total_tax, total_expenses)

        actual_cash_threshold = abs(annual_need) * params.cash_threshold

        # =========================================================================
        # --- STEP 4: BUCKETS ---
        # --- growth first, then refill / withdraw / refill
        # =========================================================================
        stock = stock * (1 + params.stock_return_rate)

        if annual_need > 0:
            cash, stock = _replenish_cash(cash, stock, actual_cash_threshold)

            if cash >= annual_need:
                cash -= annual_need
            else:
                shortfall = annual_need - cash
                cash = 0.0
                stock = max(0.0, stock - shortfall)
        else:
            cash += abs(annual_need)

        cash, stock = _replenish_cash(cash, stock, actual_cash_threshold)

        net_worth = cash + stock
        inflation_adjusted = net_worth / (1 + params.inflation_rate) ** year

        results.append(YearlySnapshot(
            age1=current_age1,
            age2=current_age2,
            annual_expense=annual_expense,
            fixed_expense=fixed_expense,
            tuition=tuition,
            one_off_expenses=one_off_expenses,
            total_expenses=total_expenses,
            rental_income=rental_income,
            income1=income1,
            income2=income2,
            ss1=ss1,
            ss2=ss2,
            effective_tax_rate=effective_tax_rate,
            total_income=total_income,
            annual_need=annual_need,
            cash=cash,
            stock=stock,
            net_worth=net_worth,
            inflation_adjusted=inflation_adjusted,
        ))

        # Update for next year
        current_age1 += 1
        current_age2 += 1
        inflation_multiplier *= (1 + params.inflation_rate)
        rental_income_multiplier *= (1 + params.rental_income_growth_rate)

    if results:
        logger.debug(
            f"Projected {len(results)} years: final net worth ${results[-1].net_worth:,.0f} "
            f"(${results[-1].inflation_adjusted:,.0f} in year-0 dollars)"
        )

    return results


# =========================================================================
# RESULTS TABLE
# =========================================================================
SNAPSHOT_COLUMNS = [f.name for f in fields(YearlySnapshot)]


def snapshots_to_dataframe(snapshots: List[YearlySnapshot]) -> pd.DataFrame:
    """One row per simulated year, indexed by the zero-based year."""
    df = pd.DataFrame([asdict(s) for s in snapshots], columns=SNAPSHOT_COLUMNS)
    df.index.name = "year"
    return df
