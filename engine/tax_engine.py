"""
Progressive income tax calculator for the two-bucket projection.
It contains the tax formulas only; bracket tables and deductions come
from utils.tax_utils.
"""
from dataclasses import dataclass
from typing import List
import logging

# Configure logging for solver messages
logger = logging.getLogger(__name__)

from utils.tax_utils import (
    FEDERAL_BRACKETS,
    STANDARD_DEDUCTIONS,
    TaxBracket,
    TaxFilingStatus, # For type hints
    get_max_rate,
)

# Inverse solver settings
SOLVER_TOLERANCE = 0.01
SOLVER_MAX_ITERATIONS = 100
SOLVER_UPPER_BOUND_BUFFER = 1.5


@dataclass(frozen=True)
class TaxpayerInfo:
    gross_income: float
    filing_status: TaxFilingStatus
    itemized_deductions: float = 0.0


@dataclass(frozen=True)
class TaxResult:
    federal_tax: float
    state_tax: float
    total_tax: float
    net_income: float


# --- 1. Internal Helper Functions ---

def _deduction_amount(info: TaxpayerInfo) -> float:
    """Standard vs. itemized: whichever is larger."""
    standard_deduction = STANDARD_DEDUCTIONS[info.filing_status]
    itemized = info.itemized_deductions or 0.0
    return max(itemized, standard_deduction)


def _federal_brackets(filing_status: TaxFilingStatus) -> List[TaxBracket]:
    return FEDERAL_BRACKETS["married" if filing_status == "married" else "single"]


# --- 2. Bracket Walk ---

def progressive_tax(taxable_income: float, brackets: List[TaxBracket]) -> float:
    """
    Tax owed on taxable_income under a marginal-rate schedule.

    Each slice of income up to a bracket's upper limit is taxed at that
    bracket's rate. taxable_income must already be clamped to >= 0.
    """
    total_tax = 0.0
    remaining_income = taxable_income
    previous_limit = 0.0

    for upper_limit, rate in brackets:
        bracket_width = upper_limit - previous_limit
        if remaining_income > bracket_width:
            total_tax += bracket_width * rate
            remaining_income -= bracket_width
        else:
            total_tax += remaining_income * rate
            break
        previous_limit = upper_limit

    return total_tax


# --- 3. Main Orchestrator Functions ---

def calculate_taxes(info: TaxpayerInfo, state_brackets: List[TaxBracket]) -> TaxResult:
    """
    Calculates federal and state income tax after deductions.

    Returns:
        TaxResult with every amount rounded to cents.
    """
    # 1. Federal taxable income (TI = gross - deduction)
    deduction = _deduction_amount(info)
    federal_taxable_income = max(0.0, info.gross_income - deduction)

    # 2. Federal income tax
    federal_tax = progressive_tax(federal_taxable_income, _federal_brackets(info.filing_status))

    # 3. State income tax (no state deduction is applied)
    state_deduction = 0.0
    state_taxable_income = max(0.0, info.gross_income - state_deduction)
    state_tax = progressive_tax(state_taxable_income, state_brackets)

    # 4. Take-home
    net_income = info.gross_income - federal_tax - state_tax

    return TaxResult(
        federal_tax=round(federal_tax, 2),
        state_tax=round(state_tax, 2),
        total_tax=round(federal_tax + state_tax, 2),
        net_income=round(net_income, 2),
    )


def calculate_pre_tax_income(
    info: TaxpayerInfo,
    after_tax_income: float,
    brackets: List[TaxBracket],
) -> float:
    """
    Gross income needed to keep after_tax_income once tax under `brackets`
    is paid. Inverse of progressive_tax, solved by bisection.

    The gross income on `info` is ignored; only filing status and itemized
    deductions are used. If the iteration cap is reached the last midpoint
    is returned as an estimate.
    """
    deduction = _deduction_amount(info)
    max_rate = get_max_rate(brackets)

    # Tax is never negative, so gross >= after-tax. The top rate bounds it above.
    low = after_tax_income
    high = (after_tax_income + deduction) / (1 - max_rate) * SOLVER_UPPER_BOUND_BUFFER
    guess = (low + high) / 2

    for _ in range(SOLVER_MAX_ITERATIONS):
        guess = (low + high) / 2
        taxable_income = max(0.0, guess - deduction)
        resulting_after_tax = guess - progressive_tax(taxable_income, brackets)
        difference = resulting_after_tax - after_tax_income

        if abs(difference) < SOLVER_TOLERANCE:
            return round(guess, 2)

        if difference > 0:
            high = guess
        else:
            low = guess

    logger.debug(
        f"Pre-tax solver hit {SOLVER_MAX_ITERATIONS} iterations for target "
        f"${after_tax_income:,.2f}; returning estimate ${guess:,.2f}"
    )
    return round(guess, 2)
