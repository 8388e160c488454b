# utils/tax_utils.py
import logging
import numpy as np
from typing import Dict, List, Literal, NamedTuple

logger = logging.getLogger(__name__)

# Define the acceptable set of filing statuses for type hinting
TaxFilingStatus = Literal["single", "married"]


class TaxBracket(NamedTuple):
    upper_limit: float
    rate: float


# =============================================================================
# 1. Federal Ordinary Income Tax Brackets (2024, simplified)
# =============================================================================

FEDERAL_BRACKETS_SINGLE: List[TaxBracket] = [
    TaxBracket(11_600, 0.10),
    TaxBracket(47_150, 0.12),
    TaxBracket(100_525, 0.22),
    TaxBracket(191_950, 0.24),
    TaxBracket(243_725, 0.32),
    TaxBracket(609_350, 0.35),
    TaxBracket(np.inf, 0.37),
]

FEDERAL_BRACKETS_MARRIED: List[TaxBracket] = [
    TaxBracket(23_200, 0.10),
    TaxBracket(94_300, 0.12),
    TaxBracket(201_050, 0.22),
    TaxBracket(383_900, 0.24),
    TaxBracket(487_450, 0.32),
    TaxBracket(731_200, 0.35),
    TaxBracket(np.inf, 0.37),
]

FEDERAL_BRACKETS: Dict[TaxFilingStatus, List[TaxBracket]] = {
    "single": FEDERAL_BRACKETS_SINGLE,
    "married": FEDERAL_BRACKETS_MARRIED,
}

# =============================================================================
# 2. Federal Standard Deduction (2024)
# =============================================================================
STANDARD_DEDUCTIONS: Dict[TaxFilingStatus, float] = {
    "single": 14_600,
    "married": 29_200,
}

# =============================================================================
# 3. State Tax Parameters
# =============================================================================

# MASSACHUSETTS (MA): flat 5% on all income, same for every filing status
MASSACHUSETTS_BRACKETS: List[TaxBracket] = [
    TaxBracket(np.inf, 0.05),
]

NO_STATE_TAX_BRACKETS: List[TaxBracket] = [
    TaxBracket(np.inf, 0.0),
]

STATE_BRACKETS: Dict[str, List[TaxBracket]] = {
    "MA": MASSACHUSETTS_BRACKETS,
}


def get_state_brackets(state_of_residence: str) -> List[TaxBracket]:
    """Returns the bracket schedule for a two-letter state code."""
    state_code = (state_of_residence or "").strip().upper()
    brackets = STATE_BRACKETS.get(state_code)
    if brackets is None:
        logger.warning(
            f"State Tax Calculations Not Available for '{state_code}'. "
            "Defaulting to $0 state income taxes for this simulation."
        )
        return NO_STATE_TAX_BRACKETS
    return brackets


def get_max_rate(brackets: List[TaxBracket]) -> float:
    """Highest marginal rate in a schedule."""
    return max(bracket.rate for bracket in brackets)
