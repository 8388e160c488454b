# utils/currency.py
import math
from typing import Any, Union

# ----------------------------------------------------------------------
# Helper: numeric input cleaning
# ----------------------------------------------------------------------

def clean_currency(val: Any) -> float:
    """
    Cleans a currency string (e.g., "$140,000.00") into a float (140000.0).
    Anything that does not parse, including NaN and infinity, becomes 0.0.
    """
    if val is None or isinstance(val, bool):
        return 0.0

    try:
        if isinstance(val, (int, float)):
            number = float(val)
        else:
            # Strip non-digit, non-decimal characters, then convert to float.
            cleaned_val = str(val).replace('$', '').replace(',', '').strip()
            if not cleaned_val:
                return 0.0
            number = float(cleaned_val)
    except (ValueError, OverflowError):
        return 0.0

    return number if math.isfinite(number) else 0.0


# Plain numbers (ages, years of cash) take the same path as currency
clean_number = clean_currency


def clean_percent(raw_input: Union[str, float, int, None]) -> float:
    """
    Converts a percentage entry ('3.25', '3.25%', 3.25) into a decimal
    fraction (0.0325). The percentage is rounded to 2 places and the
    fraction to 4 places. Unparseable input becomes 0.0.
    """
    if raw_input is None:
        return 0.0

    s = str(raw_input).replace('%', '').replace(',', '').replace(' ', '').strip()
    try:
        percentage_value = float(s)
    except ValueError:
        return 0.0
    if not math.isfinite(percentage_value):
        return 0.0

    rounded_percentage = round(percentage_value, 2)
    return round(rounded_percentage / 100, 4)


# ----------------------------------------------------------------------
# Helper: display formatting
# ----------------------------------------------------------------------

def format_currency_output(val, decimals=0):
    """
    Formats a float/int into a clean currency string ($1,234,567).

    Args:
        val (float): The numerical value to format.
        decimals (int): Number of decimal places.
    """
    if val is None:
        val = 0.0
    if val < 0:
        return f"-${-val:,.{decimals}f}"
    return f"${val:,.{decimals}f}"


def format_percent_output(value: Union[float, None], decimal_places: int = 2) -> str:
    """Formats a float (0.2345) to a display string ('23.45%')."""
    if value is None:
        return ""
    value = float(value)
    return f"{value * 100:.{decimal_places}f}%"
