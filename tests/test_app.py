"""
Tests for the command-line runner.
"""

import json

import pandas as pd

from app import format_results_table, main
from utils.planner_session import LOAD_FAILED_MESSAGE, PlannerSession


class TestFormatResultsTable:

    def test_formats_money_and_rates(self):
        df = PlannerSession().to_dataframe()
        display = format_results_table(df)

        assert display.loc[0, "net_worth"] == "$1,010,420"
        assert display.loc[0, "effective_tax_rate"] == "9.16%"
        assert display.loc[0, "age1"] == 55
        # the numeric frame is not modified
        assert df.loc[0, "net_worth"] == 1_010_420.0


class TestMain:

    def test_defaults_print_table(self, capsys):
        assert main([]) == 0

        out = capsys.readouterr().out
        assert "Final net worth (age 92/93)" in out
        assert "today's dollars" in out

    def test_saved_file_and_csv(self, tmp_path):
        saved = tmp_path / "plan.json"
        saved.write_text(json.dumps({"inputParams": {"age1": 80, "age2": 80}}), encoding="utf-8")
        csv_path = tmp_path / "out.csv"

        assert main([str(saved), "--csv", str(csv_path)]) == 0

        df = pd.read_csv(csv_path, index_col="year")
        assert len(df) == 13
        assert df["age1"].iloc[0] == 80

    def test_save_writes_document(self, tmp_path):
        out = tmp_path / "saved.json"
        assert main(["--save", str(out)]) == 0

        document = json.loads(out.read_text(encoding="utf-8"))
        assert document["inputParams"]["baseAnnualExpense"] == 50_000
        assert document["yearlyInputs"] == {}

    def test_form_entries_and_state(self, tmp_path):
        taxed = tmp_path / "ma.csv"
        untaxed = tmp_path / "zz.csv"

        assert main(["--set", "inflation_rate=0", "--csv", str(taxed)]) == 0
        assert main(["--set", "inflation_rate=0", "--state", "ZZ", "--csv", str(untaxed)]) == 0

        ma = pd.read_csv(taxed, index_col="year")
        zz = pd.read_csv(untaxed, index_col="year")
        assert ma.loc[1, "annual_expense"] == 50_000
        assert ma.loc[0, "annual_need"] - zz.loc[0, "annual_need"] == 2_500

    def test_bad_file_exits_with_error(self, tmp_path, capsys):
        bad = tmp_path / "bad.json"
        bad.write_text("nope", encoding="utf-8")

        assert main([str(bad)]) == 1
        assert LOAD_FAILED_MESSAGE in capsys.readouterr().err
