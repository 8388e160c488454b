# utils/json_store.py
import json
import logging
import re
from dataclasses import fields
from pathlib import Path
from typing import IO, Any, Dict, Union

from models import InputParameters, SavedData, YearInputs, YearOverrides
from utils.currency import clean_number

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "simulation-data.json"
INPUT_PARAMS_KEY = "inputParams"
YEARLY_INPUTS_KEY = "yearlyInputs"

_YEAR_INPUT_FIELDS = {f.name for f in fields(YearInputs)}


class SavedDataError(Exception):
    """Base class for saved-state failures."""


class SavedDataParseError(SavedDataError, ValueError):
    """The document is not a valid saved simulation."""


class SavedDataReadError(SavedDataError, OSError):
    """The file could not be read."""


# ----------------------------------------------------------------------
# Field names: camelCase on disk, snake_case in memory
# ----------------------------------------------------------------------

def to_snake_case(name: str) -> str:
    """'ss1StartAge' -> 'ss1_start_age'. Snake case input is returned unchanged."""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def to_camel_case(name: str) -> str:
    """'ss1_start_age' -> 'ss1StartAge'."""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


# ----------------------------------------------------------------------
# Reading
# ----------------------------------------------------------------------

def _load_document(source: Union[str, bytes, IO]) -> Dict[str, Any]:
    """Decode JSON text, bytes or a file-like object into the top-level dict."""
    try:
        if hasattr(source, "read"):
            document = json.load(source)
        else:
            document = json.loads(source)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise SavedDataParseError("Failed to parse JSON file") from e

    if not isinstance(document, dict):
        raise SavedDataParseError("Saved data must be a JSON object")
    return document


def _input_params_dict(document: Dict[str, Any]) -> Dict[str, Any]:
    """The inputParams section with snake_case keys; values are left as found."""
    raw_params = document.get(INPUT_PARAMS_KEY)
    if not isinstance(raw_params, dict):
        raise SavedDataParseError(f"'{INPUT_PARAMS_KEY}' is missing or not an object")
    return {to_snake_case(key): value for key, value in raw_params.items()}


def _year_inputs_from_dict(year: int, raw: Any) -> YearInputs:
    if not isinstance(raw, dict):
        raise SavedDataParseError(f"Inputs for year {year} must be an object")

    values = {}
    for key, value in raw.items():
        name = to_snake_case(key)
        # Unknown fields (e.g. display-only ages) and blanks are dropped
        if name not in _YEAR_INPUT_FIELDS or value is None:
            continue
        values[name] = clean_number(value)
    return YearInputs(**values)


def _year_overrides_from_dict(raw_yearly: Any) -> YearOverrides:
    if raw_yearly is None:
        return {}
    if not isinstance(raw_yearly, dict):
        raise SavedDataParseError(f"'{YEARLY_INPUTS_KEY}' must be an object keyed by year")

    overrides: YearOverrides = {}
    for key, raw in raw_yearly.items():
        try:
            year = int(key)
        except (TypeError, ValueError) as e:
            raise SavedDataParseError(f"Invalid year key '{key}'") from e
        if year < 0:
            raise SavedDataParseError(f"Invalid year key '{key}'")
        overrides[year] = _year_inputs_from_dict(year, raw)
    return overrides


def parse_saved_data(source: Union[str, bytes, IO]) -> SavedData:
    """
    Builds SavedData from a saved JSON document.

    Parameters missing from the document fall back to the defaults; values
    that are not numbers become 0.
    """
    from utils.input_adapter import get_input_params

    document = _load_document(source)
    try:
        params = get_input_params(**_input_params_dict(document))
    except (TypeError, ValueError, OverflowError) as e:
        raise SavedDataParseError(f"Invalid '{INPUT_PARAMS_KEY}': {e}") from e
    year_inputs = _year_overrides_from_dict(document.get(YEARLY_INPUTS_KEY))
    return SavedData(input_params=params, year_inputs=year_inputs)


def load_saved_data(file_path: Union[str, Path]) -> SavedData:
    path = Path(file_path)
    logger.info(f"Loading saved simulation from: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = parse_saved_data(f)
    except OSError as e:
        raise SavedDataReadError(f"Failed to read file: {path}") from e

    logger.info(f"Successfully loaded {len(data.year_inputs)} yearly input rows from {path}")
    return data


def read_input_params_file(file_path: Union[str, Path]) -> Dict[str, Any]:
    """Raw inputParams section of a saved file, snake_case keys."""
    with Path(file_path).open("r", encoding="utf-8") as f:
        return _input_params_dict(_load_document(f))


# ----------------------------------------------------------------------
# Writing
# ----------------------------------------------------------------------

def saved_data_to_dict(data: SavedData) -> Dict[str, Any]:
    input_params = {
        to_camel_case(f.name): getattr(data.input_params, f.name)
        for f in fields(InputParameters)
    }

    yearly_inputs = {}
    for year in sorted(data.year_inputs):
        year_inputs = data.year_inputs[year]
        entered = {
            to_camel_case(f.name): getattr(year_inputs, f.name)
            for f in fields(YearInputs)
            if getattr(year_inputs, f.name) is not None
        }
        yearly_inputs[str(year)] = entered

    return {INPUT_PARAMS_KEY: input_params, YEARLY_INPUTS_KEY: yearly_inputs}


def create_saved_data_json(data: SavedData) -> str:
    """Pretty-printed JSON document for a saved simulation."""
    return json.dumps(saved_data_to_dict(data), indent=2)


def save_saved_data(data: SavedData, file_path: Union[str, Path] = DEFAULT_FILENAME) -> Path:
    path = Path(file_path)
    logger.info(f"Saving simulation to: {path}")

    path.write_text(create_saved_data_json(data), encoding="utf-8")

    logger.info(f"Successfully saved simulation to {path}")
    return path


CONFIG_DIR = Path(__file__).parent.parent / "config"

DEFAULT_INPUTS = read_input_params_file(CONFIG_DIR / "default_inputs.json")
