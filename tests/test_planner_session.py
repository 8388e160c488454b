"""
Tests for the editable planner state.
"""

import math

import pytest

from models import YearInputs
from utils.input_adapter import get_default_input_params
from utils.planner_session import LOAD_FAILED_MESSAGE, PlannerSession
from utils.tax_utils import NO_STATE_TAX_BRACKETS


@pytest.fixture
def session():
    return PlannerSession()


class TestRecalculation:

    def test_starts_with_default_projection(self, session):
        assert session.input_params == get_default_input_params()
        assert session.year_inputs == {}
        assert len(session.snapshots) == 38

    def test_update_params_recomputes(self, session):
        session.update_params(starting_portfolio="2,000,000")

        assert session.input_params.starting_portfolio == 2_000_000.0
        assert session.snapshots[0].net_worth > 2_000_000

    def test_update_params_keeps_other_values(self, session):
        session.update_params(age1=60)
        session.update_params(age2=61)

        assert session.input_params.age1 == 60
        assert session.input_params.age2 == 61
        assert session.snapshots[0].age1 == 60

    def test_unparseable_entry_becomes_zero(self, session):
        session.update_params(base_annual_expense="abc")

        assert session.input_params.base_annual_expense == 0.0
        assert session.snapshots[0].annual_expense == 0.0

    def test_reset_params(self, session):
        session.update_params(stock_return_rate=0.1)
        session.update_cell(0, "tuition", 1_000)
        session.reset_params()

        assert session.input_params == get_default_input_params()
        # overrides survive a parameter reset
        assert session.year_inputs[0].tuition == 1_000.0

    def test_update_cell_recomputes_from_that_year(self, session):
        before = list(session.snapshots)
        session.update_cell(5, "one_off_expenses", "$30,000")

        assert session.year_inputs == {5: YearInputs(one_off_expenses=30_000.0)}
        assert session.snapshots[5].one_off_expenses == 30_000.0
        assert session.snapshots[:5] == before[:5]
        assert session.snapshots[5].net_worth < before[5].net_worth

    def test_update_form_reads_rates_as_percentages(self, session):
        session.update_form(inflation_rate="2.5%", stock_return_rate="7", starting_portfolio="$900,000")

        assert session.input_params.inflation_rate == pytest.approx(0.025)
        assert session.input_params.stock_return_rate == pytest.approx(0.07)
        assert session.input_params.starting_portfolio == 900_000.0

    def test_only_grid_columns_are_editable(self, session):
        with pytest.raises(ValueError):
            session.update_cell(0, "annual_expense", 10_000)
        assert session.year_inputs == {}

    def test_non_finite_form_entries_become_zero(self, session):
        session.update_form(age1="nan", inflation_rate="inf", starting_portfolio="1e400")

        assert session.input_params.age1 == 0
        assert session.input_params.inflation_rate == 0.0
        assert session.input_params.starting_portfolio == 0.0
        assert all(math.isfinite(s.net_worth) for s in session.snapshots)

    def test_state_brackets_are_used(self):
        untaxed = PlannerSession(state_brackets=NO_STATE_TAX_BRACKETS)
        taxed = PlannerSession()
        assert untaxed.snapshots[0].annual_need < taxed.snapshots[0].annual_need

    def test_dataframe_matches_snapshots(self, session):
        df = session.to_dataframe()
        assert len(df) == len(session.snapshots)
        assert df["net_worth"].iloc[-1] == session.snapshots[-1].net_worth


class TestPersistence:

    def test_save_then_load(self, session, tmp_path):
        session.update_params(age1=58, base_annual_expense=72_000)
        session.update_cell(2, "income2", 15_000)
        path = session.save(tmp_path / "plan.json")

        restored = PlannerSession()
        status = restored.load(path)

        assert status == "Successfully loaded: plan.json"
        assert restored.input_params == session.input_params
        assert restored.year_inputs == session.year_inputs
        assert restored.snapshots == session.snapshots

    def test_failed_load_keeps_state(self, session, tmp_path, caplog):
        session.update_cell(1, "tuition", 9_000)
        params_before = session.input_params
        overrides_before = dict(session.year_inputs)
        snapshots_before = list(session.snapshots)

        path = tmp_path / "broken.json"
        path.write_text("[]", encoding="utf-8")

        assert session.load(path) == LOAD_FAILED_MESSAGE
        assert session.input_params == params_before
        assert session.year_inputs == overrides_before
        assert session.snapshots == snapshots_before
        assert "broken.json" in caplog.text

    @pytest.mark.parametrize("raw_age", ["NaN", "Infinity", "1e400", "\"nan\""])
    def test_non_finite_ages_load_as_zero(self, session, tmp_path, raw_age):
        path = tmp_path / "odd.json"
        path.write_text('{"inputParams": {"age1": ' + raw_age + '}}', encoding="utf-8")

        assert session.load(path) == "Successfully loaded: odd.json"
        assert session.input_params.age1 == 0
        assert all(math.isfinite(s.net_worth) for s in session.snapshots)

    def test_rejected_document_keeps_state(self, session, tmp_path, monkeypatch):
        def reject(**kwargs):
            raise ValueError("bad parameter")

        params_before = session.input_params
        path = tmp_path / "plan.json"
        path.write_text('{"inputParams": {}}', encoding="utf-8")

        monkeypatch.setattr("utils.input_adapter.get_input_params", reject)
        assert session.load(path) == LOAD_FAILED_MESSAGE
        assert session.input_params is params_before

    def test_missing_file(self, session, tmp_path):
        assert session.load(tmp_path / "missing.json") == LOAD_FAILED_MESSAGE

    def test_saved_data_is_a_copy(self, session):
        session.update_cell(0, "income1", 10)
        saved = session.to_saved_data()
        session.update_cell(1, "income1", 20)

        assert list(saved.year_inputs) == [0]
