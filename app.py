# app.py
import argparse
import logging
import sys

import pandas as pd

# -----------------------------------------------------------
# Core Imports
# -----------------------------------------------------------

from utils.currency import format_currency_output, format_percent_output
from utils.planner_session import LOAD_FAILED_MESSAGE, PlannerSession
from utils.tax_utils import get_state_brackets

logger = logging.getLogger(__name__)

CURRENCY_COLUMNS = [
    "annual_expense", "fixed_expense", "tuition", "one_off_expenses", "total_expenses",
    "rental_income", "income1", "income2", "ss1", "ss2", "total_income",
    "annual_need", "cash", "stock", "net_worth", "inflation_adjusted",
]


def format_results_table(df: pd.DataFrame) -> pd.DataFrame:
    """Currency and percent strings for display; the numeric frame is left alone."""
    display = df.copy()
    for column in CURRENCY_COLUMNS:
        display[column] = display[column].map(format_currency_output)
    display["effective_tax_rate"] = display["effective_tax_rate"].map(format_percent_output)
    return display


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="2-Bucket Investment Simulator")
    parser.add_argument("saved_file", nargs="?", help="saved simulation JSON (defaults if omitted)")
    parser.add_argument("--csv", help="write the yearly projection to this CSV file")
    parser.add_argument("--save", help="write the current parameters and yearly inputs to this JSON file")
    parser.add_argument("--state", default="MA", help="two-letter state code for state income tax (default MA)")
    parser.add_argument(
        "--set", dest="entries", action="append", default=[], metavar="FIELD=VALUE",
        help="override a parameter as typed in the form, rates in percent (e.g. inflation_rate=2.5)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    session = PlannerSession(state_brackets=get_state_brackets(args.state))
    if args.saved_file:
        status = session.load(args.saved_file)
        if status == LOAD_FAILED_MESSAGE:
            print(status, file=sys.stderr)
            return 1
        logger.info(status)

    if args.entries:
        entries = {}
        for entry in args.entries:
            name, sep, value = entry.partition("=")
            if not sep:
                parser.error(f"--set expects FIELD=VALUE, got '{entry}'")
            entries[name.strip()] = value.strip()
        session.update_form(**entries)

    df = session.to_dataframe()

    with pd.option_context("display.max_rows", None, "display.max_columns", None, "display.width", 250):
        print(format_results_table(df).to_string())

    if session.snapshots:
        final = session.snapshots[-1]
        print(f"\nFinal net worth (age {final.age1}/{final.age2}): {format_currency_output(final.net_worth)}")
        print(f"Final net worth in today's dollars: {format_currency_output(final.inflation_adjusted)}")

    if args.csv:
        df.to_csv(args.csv, header=True)
        logger.info(f"Saved projection to {args.csv}")
    if args.save:
        session.save(args.save)

    return 0


if __name__ == "__main__":
    sys.exit(main())
