# Path: tests/unit/test_store.py
"""
Unit Tests for fsgen/store.py

Tests company bookkeeping and path-based edits.
"""

import pytest

from fsgen.metrics.aggregation import calculate_bs_total
from fsgen.model.company import BreakdownItem, Company
from fsgen.model.paths import UnknownPathError
from fsgen.store import CompanyNotFoundError, CompanyStore


@pytest.fixture
def store(demo_company):
    """Store holding the ABC Limited sample under id 1."""
    return CompanyStore([demo_company])


class TestCompanies:
    """Test add, get, list and delete."""

    def test_get_and_list(self, store, demo_company):
        """Added companies are returned by id and listed."""
        assert store.get_company(1) is demo_company
        assert store.list_companies() == [demo_company]

    def test_duplicate_id_rejected(self, store):
        """Ids are unique."""
        with pytest.raises(ValueError):
            store.add_company(Company.create(1, "Clash"))

    def test_missing_company(self, store):
        """Unknown ids raise CompanyNotFoundError, a LookupError."""
        with pytest.raises(CompanyNotFoundError):
            store.get_company(42)
        with pytest.raises(LookupError):
            store.delete_company(42)

    def test_delete(self, store):
        """Deletion removes the whole company."""
        store.delete_company(1)
        assert store.list_companies() == []

    def test_next_id(self, store):
        """Next id follows the highest id held."""
        assert CompanyStore().next_id() == 1
        store.add_company(Company.create(5, "Five"))
        assert store.next_id() == 6

    def test_update_company(self, store):
        """Top-level details are replaced in place."""
        company = store.update_company(1, name="ABC Ltd", address="Pune")
        assert company.name == "ABC Ltd"
        assert store.get_company(1).address == "Pune"

    def test_update_company_rejects_unknown_fields(self, store):
        """Fields outside the model are refused."""
        with pytest.raises(ValueError):
            store.update_company(1, colour="blue")

    def test_update_company_rejects_wrong_statement_type(self, store):
        """Statements can only be replaced by the same statement type."""
        with pytest.raises(TypeError):
            store.update_company(1, balance_sheet={"equity": {}})
        with pytest.raises(TypeError):
            store.update_company(1, cash_flow=store.get_company(1).profit_loss)

    def test_update_company_replaces_statement(self, store):
        """A statement of the right type is swapped in."""
        blank = Company.create(9, "Blank")
        company = store.update_company(1, balance_sheet=blank.balance_sheet)
        assert company.balance_sheet is blank.balance_sheet
        assert calculate_bs_total(company.balance_sheet).total_assets == 0


class TestStatementEdits:
    """Test path updates."""

    def test_update_bs_parses_text(self, store):
        """Text amounts are parsed; parentheses are negative."""
        store.update_company_bs(1, "equity.other_equity.current", "(1,200)")
        assert store.get_company(1).balance_sheet.equity.other_equity.current == -1200.0

    def test_update_bs_affects_totals(self, store):
        """An edit flows into the balance sheet totals."""
        store.update_company_bs(1, "current_assets.financial_assets.others.current", 1_000)
        totals = calculate_bs_total(store.get_company(1).balance_sheet)
        assert totals.current_assets == pytest.approx(37_601_000)

    def test_update_pl_unknown_path(self, store):
        """Typos raise instead of creating keys."""
        with pytest.raises(UnknownPathError):
            store.update_company_pl(1, "expenses.salaries.current", 10)

    def test_update_cf_previous(self, store):
        """The previous column is addressable."""
        store.update_company_cf(1, "cash_and_cash_equivalents_at_end.previous", 10)
        assert store.get_company(1).cash_flow.cash_and_cash_equivalents_at_end.previous == 10.0

    def test_bad_column(self, store):
        """Only current and previous can be written."""
        with pytest.raises(ValueError):
            store.update_company_bs(1, "equity.other_equity.note", 1)


class TestBreakdownEdits:
    """Test breakdown updates."""

    def test_update_breakdown_pushes_totals(self, store):
        """The mapped leaf receives the list totals."""
        store.update_breakdown(1, "13", [
            {"id": "1", "description": "Raw materials", "current": 7_000_000, "previous": 6_000_000},
            BreakdownItem(id="2", description="Finished goods", current=5_500_000, previous=4_000_000),
        ])
        company = store.get_company(1)
        assert company.balance_sheet.current_assets.inventories.current == pytest.approx(12_500_000)
        assert company.balance_sheet.current_assets.inventories.previous == pytest.approx(10_000_000)
        assert all(isinstance(item, BreakdownItem) for item in company.breakdowns["13"])

    def test_update_eps_breakdown(self, store):
        """EPS keys store profit / shares in the leaf."""
        store.update_breakdown(1, 64, [
            {"id": "net-profit", "description": "Net profit", "current": 4_200_000, "previous": 3_920_000},
            {"id": "equity-shares", "description": "Equity shares", "current": 1_000_000, "previous": 1_000_000},
        ])
        basic = store.get_company(1).profit_loss.earnings_per_share_continuing.basic
        assert basic.current == pytest.approx(4.2)
        assert basic.previous == pytest.approx(3.92)

    def test_clearing_a_breakdown_keeps_leaf(self, store):
        """An empty list is stored but leaves the amount as entered."""
        store.update_breakdown(1, "13", [])
        assert store.get_company(1).balance_sheet.current_assets.inventories.current == 12_000_000


class TestRegenerateCashFlow:
    """Test in-place cash flow regeneration."""

    def test_regenerate(self, store):
        """The stored company receives the derived cash flow."""
        company = store.regenerate_cash_flow(1)
        assert company.cash_flow.operating_activities.profit_before_tax.current == pytest.approx(7_000_000)
        assert store.get_company(1).cash_flow.cash_and_cash_equivalents_at_end.current == 6_000_000
