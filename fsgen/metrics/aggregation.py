"""
Statement roll-ups.

calculate_bs_total / calculate_pl_total / calculate_cf_total reduce a statement
tree to its subtotals. Every subtotal is computed by the same column function
for "current" and for "previous"; the previous-column result is stored in the
matching *_prev field. Inputs are coerced so NaN/inf never reach a total.
"""

import logging
from dataclasses import dataclass, fields

from fsgen.model.company import (
    BalanceSheetData,
    CashFlowData,
    Company,
    ProfitLossData,
    camel_case,
    coerce_amount,
)

logger = logging.getLogger(__name__)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _sum(leaves, column: str) -> float:
    return sum(coerce_amount(getattr(leaf, column)) for leaf in leaves)


def _paired(cls, column_fn, tree):
    cur = column_fn(tree, "current")
    prev = column_fn(tree, "previous")
    values = dict(cur)
    values.update({f"{name}_prev": value for name, value in prev.items()})
    return cls(**values)


class _Totals:
    def to_dict(self) -> dict:
        """camelCase keys as used by the editor (totalAssets, totalAssetsPrev, ...)."""
        return {camel_case(f.name): getattr(self, f.name) for f in fields(self)}


# ── Balance Sheet ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class BSTotals(_Totals):
    non_current_assets: float
    current_assets: float
    total_assets: float
    equity: float
    non_current_liabilities: float
    current_liabilities: float
    total_equity_and_liabilities: float
    non_current_assets_prev: float
    current_assets_prev: float
    total_assets_prev: float
    equity_prev: float
    non_current_liabilities_prev: float
    current_liabilities_prev: float
    total_equity_and_liabilities_prev: float

    @property
    def total_liabilities(self) -> float:
        """Historical name for the Equity & Liabilities total."""
        return self.total_equity_and_liabilities

    @property
    def total_liabilities_prev(self) -> float:
        return self.total_equity_and_liabilities_prev

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["totalLiabilities"] = self.total_equity_and_liabilities
        data["totalLiabilitiesPrev"] = self.total_equity_and_liabilities_prev
        return data


def non_current_asset_leaves(bs: BalanceSheetData) -> list:
    nca = bs.non_current_assets
    return [
        nca.property_plant_equipment,
        nca.capital_work_in_progress,
        nca.investment_property,
        nca.goodwill,
        nca.other_intangible_assets,
        nca.intangible_assets_under_development,
        nca.biological_assets_other_than_bearer_plants,
        nca.financial_assets.investments,
        nca.financial_assets.trade_receivables,
        nca.financial_assets.loans,
        nca.deferred_tax_assets,
        nca.other_non_current_assets,
    ]


def current_asset_leaves(bs: BalanceSheetData) -> list:
    ca = bs.current_assets
    fa = ca.financial_assets
    return [
        ca.inventories,
        fa.investments,
        fa.trade_receivables,
        fa.cash_and_cash_equivalents,
        fa.bank_balances_other_than_cash,
        fa.loans,
        fa.others,
        ca.current_tax_assets,
        ca.other_current_assets,
    ]


def equity_leaves(bs: BalanceSheetData) -> list:
    return [bs.equity.equity_share_capital, bs.equity.other_equity]


def non_current_liability_leaves(bs: BalanceSheetData) -> list:
    ncl = bs.non_current_liabilities
    fl = ncl.financial_liabilities
    return [
        fl.borrowings,
        fl.lease_liabilities,
        fl.trade_payables.micro_small_enterprises_dues,
        fl.trade_payables.other_creditors_dues,
        fl.other_financial_liabilities,
        ncl.provisions,
        ncl.deferred_tax_liabilities,
        ncl.other_non_current_liabilities,
    ]


def current_liability_leaves(bs: BalanceSheetData) -> list:
    cl = bs.current_liabilities
    fl = cl.financial_liabilities
    return [
        fl.borrowings,
        fl.lease_liabilities,
        fl.trade_payables.micro_small_enterprises_dues,
        fl.trade_payables.other_creditors_dues,
        fl.other_financial_liabilities,
        cl.other_current_liabilities,
        cl.provisions,
        cl.current_tax_liabilities,
    ]


def _bs_column(bs: BalanceSheetData, column: str) -> dict:
    non_current_assets = _sum(non_current_asset_leaves(bs), column)
    current_assets = _sum(current_asset_leaves(bs), column)
    equity = _sum(equity_leaves(bs), column)
    non_current_liabilities = _sum(non_current_liability_leaves(bs), column)
    current_liabilities = _sum(current_liability_leaves(bs), column)
    return {
        "non_current_assets": non_current_assets,
        "current_assets": current_assets,
        "total_assets": non_current_assets + current_assets,
        "equity": equity,
        "non_current_liabilities": non_current_liabilities,
        "current_liabilities": current_liabilities,
        "total_equity_and_liabilities": equity + non_current_liabilities + current_liabilities,
    }


def calculate_bs_total(bs: BalanceSheetData) -> BSTotals:
    return _paired(BSTotals, _bs_column, bs)


# ── Profit & Loss ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PLTotals(_Totals):
    total_income: float
    total_expenses: float
    profit_before_exceptional_items_and_tax: float
    profit_before_tax: float
    total_tax: float
    profit_for_the_period: float
    profit_loss_from_discontinued_operations_after_tax: float
    profit_loss_for_the_period: float
    other_comprehensive_income: float
    total_comprehensive_income: float
    total_income_prev: float
    total_expenses_prev: float
    profit_before_exceptional_items_and_tax_prev: float
    profit_before_tax_prev: float
    total_tax_prev: float
    profit_for_the_period_prev: float
    profit_loss_from_discontinued_operations_after_tax_prev: float
    profit_loss_for_the_period_prev: float
    other_comprehensive_income_prev: float
    total_comprehensive_income_prev: float


def expense_leaves(pl: ProfitLossData) -> list:
    ex = pl.expenses
    return [
        ex.cost_of_materials_consumed,
        ex.purchases_of_stock_in_trade,
        ex.changes_in_inventories,
        ex.employee_benefits_expense,
        ex.finance_costs,
        ex.depreciation_and_amortisation,
        ex.other_expenses,
    ]


def oci_leaves(pl: ProfitLossData) -> list:
    nr = pl.other_comprehensive_income.items_not_reclassified
    r = pl.other_comprehensive_income.items_reclassified
    return [
        nr.remeasurement_of_net_defined_benefit,
        nr.equity_instruments_through_oci,
        nr.income_tax_not_reclassified,
        r.exchange_differences,
        r.debt_instruments_through_oci,
        r.income_tax_reclassified,
    ]


def _pl_column(pl: ProfitLossData, column: str) -> dict:
    total_income = _sum([pl.revenue_from_operations.amount, pl.other_income.amount], column)
    total_expenses = _sum(expense_leaves(pl), column)
    before_exceptional = total_income - total_expenses
    profit_before_tax = before_exceptional - _sum([pl.exceptional_items.amount], column)
    total_tax = _sum([pl.tax_expense.current_tax, pl.tax_expense.deferred_tax], column)
    profit_for_the_period = profit_before_tax - total_tax
    discontinued_after_tax = (
        _sum([pl.profit_loss_from_discontinued_operations], column)
        - _sum([pl.tax_expenses_of_discontinued_operations], column)
    )
    profit_loss_for_the_period = profit_for_the_period + discontinued_after_tax
    oci = _sum(oci_leaves(pl), column)
    return {
        "total_income": total_income,
        "total_expenses": total_expenses,
        "profit_before_exceptional_items_and_tax": before_exceptional,
        "profit_before_tax": profit_before_tax,
        "total_tax": total_tax,
        "profit_for_the_period": profit_for_the_period,
        "profit_loss_from_discontinued_operations_after_tax": discontinued_after_tax,
        "profit_loss_for_the_period": profit_loss_for_the_period,
        "other_comprehensive_income": oci,
        "total_comprehensive_income": profit_loss_for_the_period + oci,
    }


def calculate_pl_total(pl: ProfitLossData) -> PLTotals:
    return _paired(PLTotals, _pl_column, pl)


# ── Cash Flow ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CFTotals(_Totals):
    adjustments: float
    working_capital: float
    cash_generated_from_operations: float
    net_cash_from_operating: float
    net_cash_from_investing: float
    net_cash_from_financing: float
    net_increase_in_cash: float
    opening_cash: float
    calculated_closing: float
    stored_closing: float
    adjustments_prev: float
    working_capital_prev: float
    cash_generated_from_operations_prev: float
    net_cash_from_operating_prev: float
    net_cash_from_investing_prev: float
    net_cash_from_financing_prev: float
    net_increase_in_cash_prev: float
    opening_cash_prev: float
    calculated_closing_prev: float
    stored_closing_prev: float

    @property
    def closing_difference(self) -> float:
        """Calculated closing cash minus the stored closing balance (current column)."""
        return self.calculated_closing - self.stored_closing


def investing_leaves(cf: CashFlowData) -> list:
    inv = cf.investing_activities
    return [
        inv.purchase_of_property_plant_and_equipment,
        inv.proceeds_from_sale_of_property_plant_and_equipment,
        inv.purchase_of_investments,
        inv.proceeds_from_investments,
        inv.other_investing_cash_flows,
    ]


def financing_leaves(cf: CashFlowData) -> list:
    fin = cf.financing_activities
    return [
        fin.proceeds_from_share_capital,
        fin.proceeds_from_borrowings,
        fin.repayment_of_borrowings,
        fin.dividends_paid,
        fin.interest_paid,
        fin.other_financing_cash_flows,
    ]


def _cf_column(cf: CashFlowData, column: str) -> dict:
    op = cf.operating_activities
    adj = op.adjustments
    wc = op.changes_in_working_capital
    adjustments = _sum(
        [adj.depreciation_and_amortisation, adj.finance_costs, adj.interest_income, adj.other_adjustments],
        column,
    )
    working_capital = _sum(
        [wc.trade_receivables, wc.inventories, wc.trade_payables, wc.other_working_capital_changes],
        column,
    )
    cash_generated = _sum([op.profit_before_tax], column) + adjustments + working_capital
    # income taxes paid is stored as a negative outflow
    net_operating = cash_generated + _sum([op.income_taxes_paid], column)
    net_investing = _sum(investing_leaves(cf), column)
    net_financing = _sum(financing_leaves(cf), column)
    net_increase = net_operating + net_investing + net_financing
    opening = _sum([cf.cash_and_cash_equivalents_at_beginning], column)
    return {
        "adjustments": adjustments,
        "working_capital": working_capital,
        "cash_generated_from_operations": cash_generated,
        "net_cash_from_operating": net_operating,
        "net_cash_from_investing": net_investing,
        "net_cash_from_financing": net_financing,
        "net_increase_in_cash": net_increase,
        "opening_cash": opening,
        "calculated_closing": opening + net_increase,
        "stored_closing": _sum([cf.cash_and_cash_equivalents_at_end], column),
    }


def calculate_cf_total(cf: CashFlowData) -> CFTotals:
    return _paired(CFTotals, _cf_column, cf)


# ── Statement of Changes in Equity ────────────────────────────────────────────

@dataclass(frozen=True)
class EquityMovement:
    """One year of the other-equity reconciliation."""
    opening: float
    profit_for_the_year: float
    other_comprehensive_income: float
    dividends: float
    closing: float

    @property
    def total_comprehensive_income(self) -> float:
        return self.profit_for_the_year + self.other_comprehensive_income


@dataclass(frozen=True)
class ChangesInEquity:
    share_capital_opening: float
    share_capital_movement: float
    share_capital_closing: float
    share_capital_opening_prev: float
    share_capital_movement_prev: float
    share_capital_closing_prev: float
    other_equity: EquityMovement
    other_equity_prev: EquityMovement


def calculate_changes_in_equity(company: Company) -> ChangesInEquity:
    """
    Statement of changes in equity built from the balance sheet and P&L.

    The previous year's opening other equity is backed out of its closing
    balance (closing − profit − OCI), so the reconciliation only needs two
    balance sheet dates. Dividends come from the cash flow and are negative.
    """
    bs = company.balance_sheet
    pl = calculate_pl_total(company.profit_loss)
    share_capital = bs.equity.equity_share_capital
    other_equity = bs.equity.other_equity
    dividends = company.cash_flow.financing_activities.dividends_paid

    current_year = EquityMovement(
        opening=other_equity.previous,
        profit_for_the_year=pl.profit_loss_for_the_period,
        other_comprehensive_income=pl.other_comprehensive_income,
        dividends=dividends.current,
        closing=other_equity.current,
    )
    previous_year = EquityMovement(
        opening=other_equity.previous - pl.profit_loss_for_the_period_prev - pl.other_comprehensive_income_prev,
        profit_for_the_year=pl.profit_loss_for_the_period_prev,
        other_comprehensive_income=pl.other_comprehensive_income_prev,
        dividends=dividends.previous,
        closing=other_equity.previous,
    )
    return ChangesInEquity(
        share_capital_opening=share_capital.previous,
        share_capital_movement=share_capital.current - share_capital.previous,
        share_capital_closing=share_capital.current,
        # No earlier balance is recorded: the prior year opens at its own closing
        share_capital_opening_prev=share_capital.previous,
        share_capital_movement_prev=0.0,
        share_capital_closing_prev=share_capital.previous,
        other_equity=current_year,
        other_equity_prev=previous_year,
    )
