# utils/planner_session.py
#
# Holds the editable state behind the inputs form and results grid.
#
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, List, Optional, Union

import pandas as pd

from engine.simulator import project, snapshots_to_dataframe
from models import InputParameters, SavedData, YearlySnapshot, YearOverrides
from utils.currency import clean_percent
from utils.input_adapter import (
    EDITABLE_FIELDS,
    PERCENT_FIELDS,
    get_default_input_params,
    get_input_params,
    update_year_input,
)
from utils.json_store import DEFAULT_FILENAME, SavedDataError, load_saved_data, save_saved_data
from utils.tax_utils import MASSACHUSETTS_BRACKETS, TaxBracket

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load file. Please check the file format."


class PlannerSession:
    """
    Current parameters, yearly overrides and the projection computed from
    them. Every change recomputes the whole projection.
    """
    def __init__(
        self,
        input_params: Optional[InputParameters] = None,
        year_inputs: Optional[YearOverrides] = None,
        state_brackets: List[TaxBracket] = MASSACHUSETTS_BRACKETS,
    ):
        self.input_params = input_params or get_default_input_params()
        self.year_inputs: YearOverrides = dict(year_inputs or {})
        self.state_brackets = state_brackets
        self.snapshots: List[YearlySnapshot] = []
        self.recalculate()

    def recalculate(self) -> List[YearlySnapshot]:
        self.snapshots = project(self.input_params, self.year_inputs, self.state_brackets)
        return self.snapshots

    # ----------------------------------------------------------------------
    # Editing
    # ----------------------------------------------------------------------
    def update_params(self, **changes: Any) -> None:
        """Applies form values; unparseable entries become 0."""
        merged = {**asdict(self.input_params), **changes}
        self.input_params = get_input_params(**merged)
        self.recalculate()

    def update_form(self, **entries: Any) -> None:
        """Like update_params, but rate fields are entered as percentages ('3.25' -> 0.0325)."""
        changes = {
            name: clean_percent(value) if name in PERCENT_FIELDS else value
            for name, value in entries.items()
        }
        self.update_params(**changes)

    def reset_params(self) -> None:
        self.input_params = get_default_input_params()
        self.recalculate()

    def update_cell(self, year: int, field: str, value: Any) -> None:
        """Writes a grid edit into the overrides for that year."""
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"'{field}' is not an editable results column")
        self.year_inputs = update_year_input(self.year_inputs, year, field, value)
        self.recalculate()

    # ----------------------------------------------------------------------
    # Persistence
    # ----------------------------------------------------------------------
    def to_saved_data(self) -> SavedData:
        return SavedData(input_params=self.input_params, year_inputs=dict(self.year_inputs))

    def save(self, file_path: Union[str, Path] = DEFAULT_FILENAME) -> Path:
        return save_saved_data(self.to_saved_data(), file_path)

    def load(self, file_path: Union[str, Path]) -> str:
        """
        Replaces parameters and overrides with a saved file. On failure the
        current state is kept and a generic message is returned.
        """
        try:
            data = load_saved_data(file_path)
        except SavedDataError as e:
            logger.error(f"Error loading saved simulation {file_path}: {e}")
            return LOAD_FAILED_MESSAGE

        self.input_params = data.input_params
        self.year_inputs = data.year_inputs
        self.recalculate()
        return f"Successfully loaded: {Path(file_path).name}"

    # ----------------------------------------------------------------------
    # Results
    # ----------------------------------------------------------------------
    def to_dataframe(self) -> pd.DataFrame:
        return snapshots_to_dataframe(self.snapshots)
