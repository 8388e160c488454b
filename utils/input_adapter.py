from models import InputParameters, YearInputs, YearOverrides
from utils.json_store import DEFAULT_INPUTS
from utils.currency import clean_number
from dataclasses import fields, replace
from typing import Any, Dict

# Parameters that are whole years
INTEGER_FIELDS = {"age1", "age2", "ss1_start_age", "ss2_start_age"}

# Results grid cells that write straight back into the yearly overrides
EDITABLE_FIELDS = ("fixed_expense", "tuition", "one_off_expenses", "income1", "income2")

# Form entries typed as percentages
PERCENT_FIELDS = {"inflation_rate", "cola_percentage", "stock_return_rate", "rental_income_growth_rate"}

_YEAR_INPUT_FIELDS = {f.name for f in fields(YearInputs)}


def get_input_params(**kwargs: Any) -> InputParameters:
    """
    Dynamically generates InputParameters by merging the defaults and all
    supplied values, using reflection (dataclasses.fields) to ensure only
    valid fields are passed.
    """

    # 1. Start with defaults loaded from config/default_inputs.json
    inputs_dict: Dict[str, Any] = DEFAULT_INPUTS.copy()

    # 2. Supplied values override any matching defaults.
    inputs_dict.update(kwargs)

    # 3. Keep only InputParameters fields and coerce them to numbers.
    final_inputs = {}
    for f in fields(InputParameters):
        value = clean_number(inputs_dict.get(f.name))
        final_inputs[f.name] = int(value) if f.name in INTEGER_FIELDS else value

    # 4. Create the InputParameters object
    return InputParameters(**final_inputs)


def get_default_input_params() -> InputParameters:
    return get_input_params()


def update_year_input(
    overrides: YearOverrides,
    year: int,
    field: str,
    value: Any,
) -> YearOverrides:
    """
    Returns a copy of overrides with a single field set for one year.
    Other fields of that year and all other years are kept as they were.
    """
    if field not in _YEAR_INPUT_FIELDS:
        raise ValueError(f"Unknown yearly input field '{field}'")
    if year < 0:
        raise ValueError(f"Year index must be non-negative, got {year}")

    current = overrides.get(year, YearInputs())
    updated = dict(overrides)
    updated[year] = replace(current, **{field: clean_number(value)})
    return updated
