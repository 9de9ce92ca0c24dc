# Path: tests/unit/test_cash_flow.py
"""
Unit Tests for fsgen/metrics/cash_flow.py

Tests the indirect-method derivation: sign convention, column handling,
idempotence and the tax-paid floor.
"""

import pytest

from fsgen.metrics.cash_flow import generate_cash_flow_data, merge_cash_flow
from fsgen.metrics.validation import validate_cash_flow
from fsgen.model.paths import iter_leaves


class TestOperatingSection:
    """Test the regenerated operating activities."""

    def test_profit_before_tax_from_pl(self, demo_company):
        """PBT is income less expenses less exceptional items."""
        cf = generate_cash_flow_data(demo_company)
        assert cf.operating_activities.profit_before_tax.current == pytest.approx(7_000_000)

    def test_adjustments(self, demo_company):
        """Depreciation and finance costs are added back; the rest are zero."""
        adj = generate_cash_flow_data(demo_company).operating_activities.adjustments
        assert adj.depreciation_and_amortisation.current == pytest.approx(3_000_000)
        assert adj.finance_costs.current == pytest.approx(2_000_000)
        assert adj.interest_income.current == 0.0
        assert adj.other_adjustments.current == 0.0

    def test_working_capital(self, demo_company):
        """Working capital lines from balance sheet movements."""
        wc = generate_cash_flow_data(demo_company).operating_activities.changes_in_working_capital
        assert wc.trade_receivables.current == pytest.approx(-2_000_000)
        assert wc.inventories.current == pytest.approx(-2_000_000)
        assert wc.trade_payables.current == pytest.approx(1_000_000)
        # other assets -450k, other liabilities +200k, provisions +50k
        assert wc.other_working_capital_changes.current == pytest.approx(-200_000)

    def test_asset_increase_is_outflow(self, empty_company):
        """A rise in receivables reduces operating cash."""
        receivables = empty_company.balance_sheet.current_assets.financial_assets.trade_receivables
        receivables.current, receivables.previous = 150, 100
        wc = generate_cash_flow_data(empty_company).operating_activities.changes_in_working_capital
        assert wc.trade_receivables.current == pytest.approx(-50)

    def test_liability_increase_is_inflow(self, empty_company):
        """A rise in trade payables adds to operating cash."""
        payables = empty_company.balance_sheet.current_liabilities.financial_liabilities.trade_payables
        payables.micro_small_enterprises_dues.current = 30
        payables.other_creditors_dues.current = 70
        wc = generate_cash_flow_data(empty_company).operating_activities.changes_in_working_capital
        assert wc.trade_payables.current == pytest.approx(100)

    def test_income_taxes_paid(self, demo_company):
        """Tax paid = opening liability + current tax - closing liability, stored negative."""
        cf = generate_cash_flow_data(demo_company)
        assert cf.operating_activities.income_taxes_paid.current == pytest.approx(-2_700_000)

    def test_tax_refund_is_floored(self, empty_company):
        """A computed refund is reported as zero tax paid."""
        empty_company.balance_sheet.current_liabilities.current_tax_liabilities.current = 5_000
        empty_company.profit_loss.tax_expense.current_tax.current = 1_000
        cf = generate_cash_flow_data(empty_company)
        assert cf.operating_activities.income_taxes_paid.current == 0.0


class TestCashBalances:
    """Test opening and closing cash."""

    def test_balances_from_balance_sheet(self, demo_company):
        """Opening is last year's BS cash; closing is this year's."""
        cf = generate_cash_flow_data(demo_company)
        assert cf.cash_and_cash_equivalents_at_beginning.current == pytest.approx(5_000_000)
        assert cf.cash_and_cash_equivalents_at_end.current == pytest.approx(6_000_000)

    def test_closing_always_matches_bs(self, balanced_company):
        """After regeneration the cash flow closing check passes."""
        balanced_company.cash_flow.cash_and_cash_equivalents_at_end.current = 0
        merged = merge_cash_flow(balanced_company)
        assert validate_cash_flow(merged)[0].type == "success"


class TestColumnsAndPurity:
    """Test what the derivation leaves alone."""

    def test_previous_column_preserved(self, demo_company):
        """Every previous value and note key is kept."""
        before = [(path, leaf.previous, leaf.note) for path, leaf in iter_leaves(demo_company.cash_flow)]
        cf = generate_cash_flow_data(demo_company)
        after = [(path, leaf.previous, leaf.note) for path, leaf in iter_leaves(cf)]
        assert after == before

    def test_investing_and_financing_pass_through(self, demo_company):
        """Non-operating sections are copied unchanged."""
        cf = generate_cash_flow_data(demo_company)
        assert cf.investing_activities == demo_company.cash_flow.investing_activities
        assert cf.financing_activities == demo_company.cash_flow.financing_activities

    def test_input_not_modified(self, demo_company):
        """The company's stored cash flow is untouched."""
        snapshot = demo_company.copy()
        generate_cash_flow_data(demo_company)
        assert demo_company == snapshot

    def test_result_is_independent(self, demo_company):
        """The returned tree shares no leaves with the company."""
        cf = generate_cash_flow_data(demo_company)
        cf.investing_activities.purchase_of_investments.current = 0
        assert demo_company.cash_flow.investing_activities.purchase_of_investments.current == -1_500_000

    def test_idempotent(self, demo_company):
        """Regenerating an already regenerated company changes nothing."""
        once = merge_cash_flow(demo_company)
        twice = merge_cash_flow(once)
        assert twice.cash_flow == once.cash_flow
