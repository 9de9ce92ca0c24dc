"""
Indirect-method cash flow derivation.

generate_cash_flow_data() rebuilds the operating section and the two cash
balances from the balance sheet and P&L of the current year. Investing and
financing lines pass through unchanged. Only the "current" column of the
regenerated leaves is written; "previous" and note keys are kept.

Known limitations (kept deliberately, see DESIGN.md):
  - Interest income add-back is always 0: the schema has no interest income
    line separate from Other Income.
  - Income taxes paid is floored at 0, so a net refund is never reported.
"""

import copy
import logging

from fsgen.model.company import BalanceSheetData, CashFlowData, Company, coerce_amount

logger = logging.getLogger(__name__)

# Placeholder until an interest income line exists in the P&L schema
INTEREST_INCOME_ADD_BACK = 0.0


def _delta(leaves) -> float:
    """Σcurrent − Σprevious over a group of balance sheet leaves."""
    return (
        sum(coerce_amount(leaf.current) for leaf in leaves)
        - sum(coerce_amount(leaf.previous) for leaf in leaves)
    )


def _working_capital_changes(bs: BalanceSheetData) -> dict:
    ca = bs.current_assets
    cl = bs.current_liabilities
    payables = cl.financial_liabilities.trade_payables

    # Asset increase = outflow (negated); liability increase = inflow
    trade_receivables = -_delta([ca.financial_assets.trade_receivables])
    inventories = -_delta([ca.inventories])
    trade_payables = _delta([payables.micro_small_enterprises_dues, payables.other_creditors_dues])

    other_assets = -_delta([ca.other_current_assets, ca.financial_assets.others, ca.financial_assets.loans])
    other_liabilities = _delta([cl.other_current_liabilities, cl.financial_liabilities.other_financial_liabilities])
    provisions = _delta([cl.provisions])

    return {
        "trade_receivables": trade_receivables,
        "inventories": inventories,
        "trade_payables": trade_payables,
        "other_working_capital_changes": other_assets + other_liabilities + provisions,
    }


def _income_taxes_paid(company: Company) -> float:
    tax_liability = company.balance_sheet.current_liabilities.current_tax_liabilities
    current_tax = coerce_amount(company.profit_loss.tax_expense.current_tax.current)
    paid = coerce_amount(tax_liability.previous) + current_tax - coerce_amount(tax_liability.current)
    if paid < 0:
        logger.debug("Tax paid computes to a refund of %.2f; floored at 0", -paid)
    # Outflow is stored negative
    return -max(0.0, paid)


def _profit_before_tax(company: Company) -> float:
    pl = company.profit_loss
    ex = pl.expenses
    total_income = coerce_amount(pl.revenue_from_operations.amount.current) + coerce_amount(pl.other_income.amount.current)
    total_expenses = sum(coerce_amount(leaf.current) for leaf in (
        ex.cost_of_materials_consumed,
        ex.purchases_of_stock_in_trade,
        ex.changes_in_inventories,
        ex.employee_benefits_expense,
        ex.finance_costs,
        ex.depreciation_and_amortisation,
        ex.other_expenses,
    ))
    return total_income - total_expenses - coerce_amount(pl.exceptional_items.amount.current)


def generate_cash_flow_data(company: Company) -> CashFlowData:
    """Return a new CashFlowData derived from company; company is not modified."""
    bs = company.balance_sheet
    ex = company.profit_loss.expenses
    cash = bs.current_assets.financial_assets.cash_and_cash_equivalents

    cf = copy.deepcopy(company.cash_flow)
    op = cf.operating_activities

    op.profit_before_tax.current = _profit_before_tax(company)

    op.adjustments.depreciation_and_amortisation.current = ex.depreciation_and_amortisation.current
    op.adjustments.finance_costs.current = ex.finance_costs.current
    op.adjustments.interest_income.current = INTEREST_INCOME_ADD_BACK
    op.adjustments.other_adjustments.current = 0.0

    for name, value in _working_capital_changes(bs).items():
        getattr(op.changes_in_working_capital, name).current = value

    op.income_taxes_paid.current = _income_taxes_paid(company)

    cf.cash_and_cash_equivalents_at_beginning.current = cash.previous
    cf.cash_and_cash_equivalents_at_end.current = cash.current

    logger.debug(
        "Derived cash flow for %s: PBT=%.2f WC=%s tax=%.2f opening=%.2f closing=%.2f",
        company.name,
        op.profit_before_tax.current,
        {k: round(getattr(op.changes_in_working_capital, k).current, 2)
         for k in ("trade_receivables", "inventories", "trade_payables", "other_working_capital_changes")},
        op.income_taxes_paid.current,
        cf.cash_and_cash_equivalents_at_beginning.current,
        cf.cash_and_cash_equivalents_at_end.current,
    )
    return cf


def merge_cash_flow(company: Company) -> Company:
    """Copy of company with the regenerated cash flow installed."""
    merged = company.copy()
    merged.cash_flow = generate_cash_flow_data(company)
    return merged
