"""
Statement tables as pandas DataFrames.

Each statement is laid out from a short recipe of headers, leaf runs (by
internal note key) and totals (attributes of the aggregation result). Columns:

  Particulars | Note | Current | Previous | Kind

Kind is 'header', 'item' or 'total' and drives bold/shading in the exports.
Note holds the display note number from build_note_index ("" when unnumbered).
"""

import logging

import pandas as pd

from fsgen.metrics.aggregation import (
    calculate_bs_total,
    calculate_cf_total,
    calculate_changes_in_equity,
    calculate_pl_total,
)
from fsgen.metrics.notes import NOTE_TITLES, NoteIndex, build_note_index
from fsgen.model.company import Company
from fsgen.model.paths import leaf_for_note

logger = logging.getLogger(__name__)

COLUMNS = ["Particulars", "Note", "Current", "Previous", "Kind"]

_TITLE_PREFIXES = ("Non-current liabilities - ", "Current liabilities - ", "Equity - ", "Cash Flow - ")


def _keys(first: int, last: int) -> list:
    return [str(k) for k in range(first, last + 1)]


# ── Layouts ───────────────────────────────────────────────────────────────────

BALANCE_SHEET_LAYOUT = [
    ("header", "ASSETS"),
    ("header", "Non-current assets"),
    ("items", _keys(1, 12)),
    ("total", "Total non-current assets", "non_current_assets"),
    ("header", "Current assets"),
    ("items", _keys(13, 21)),
    ("total", "Total current assets", "current_assets"),
    ("total", "Total Assets", "total_assets"),
    ("header", "EQUITY AND LIABILITIES"),
    ("header", "Equity"),
    ("items", _keys(22, 23)),
    ("total", "Total equity", "equity"),
    ("header", "Non-current liabilities"),
    ("items", _keys(24, 31)),
    ("total", "Total non-current liabilities", "non_current_liabilities"),
    ("header", "Current liabilities"),
    ("items", _keys(32, 39)),
    ("total", "Total current liabilities", "current_liabilities"),
    ("total", "Total Equity and Liabilities", "total_equity_and_liabilities"),
]

PROFIT_LOSS_LAYOUT = [
    ("items", _keys(40, 41)),
    ("total", "Total Income", "total_income"),
    ("header", "Expenses"),
    ("items", _keys(42, 48)),
    ("total", "Total expenses", "total_expenses"),
    ("total", "Profit/(loss) before exceptional items and tax", "profit_before_exceptional_items_and_tax"),
    ("items", ["49"]),
    ("total", "Profit/(loss) before tax", "profit_before_tax"),
    ("header", "Tax expense"),
    ("items", _keys(50, 51)),
    ("total", "Profit/(loss) for the period from continuing operations", "profit_for_the_period"),
    ("items", _keys(53, 54)),
    ("total", "Profit/(loss) from discontinued operations (after tax)",
     "profit_loss_from_discontinued_operations_after_tax"),
    ("total", "Profit/(loss) for the period", "profit_loss_for_the_period"),
    ("header", "Other Comprehensive Income"),
    ("items", _keys(57, 62)),
    ("total", "Total other comprehensive income", "other_comprehensive_income"),
    ("total", "Total Comprehensive Income for the period", "total_comprehensive_income"),
    ("header", "Earnings per equity share"),
    ("items", _keys(64, 69)),
]

CASH_FLOW_LAYOUT = [
    ("header", "A. Cash flow from operating activities"),
    ("items", ["70"]),
    ("header", "Adjustments for:"),
    ("items", _keys(71, 74)),
    ("header", "Changes in working capital:"),
    ("items", _keys(75, 78)),
    ("total", "Cash generated from operations", "cash_generated_from_operations"),
    ("items", ["79"]),
    ("total", "Net cash from operating activities", "net_cash_from_operating"),
    ("header", "B. Cash flow from investing activities"),
    ("items", _keys(80, 84)),
    ("total", "Net cash used in investing activities", "net_cash_from_investing"),
    ("header", "C. Cash flow from financing activities"),
    ("items", _keys(85, 90)),
    ("total", "Net cash used in financing activities", "net_cash_from_financing"),
    ("total", "Net increase/(decrease) in cash and cash equivalents", "net_increase_in_cash"),
    ("items", ["91"]),
    ("total", "Cash and cash equivalents at the end of the year (calculated)", "calculated_closing"),
    ("items", ["92"]),
]


def line_label(note_key: str) -> str:
    title = NOTE_TITLES[note_key]
    for prefix in _TITLE_PREFIXES:
        if title.startswith(prefix):
            return title[len(prefix):]
    return title


def _build_frame(company: Company, layout: list, totals, index: NoteIndex) -> pd.DataFrame:
    rows = []
    for entry in layout:
        kind = entry[0]
        if kind == "header":
            rows.append([entry[1], "", None, None, "header"])
        elif kind == "items":
            for key in entry[1]:
                leaf = leaf_for_note(company, key)
                rows.append([line_label(key), index.number_for(key) or "", leaf.current, leaf.previous, "item"])
        else:
            _, label, attr = entry
            rows.append([label, "", getattr(totals, attr), getattr(totals, f"{attr}_prev"), "total"])
    return pd.DataFrame(rows, columns=COLUMNS)


def statement_frames(company: Company, index: NoteIndex = None) -> dict:
    """Balance sheet, P&L and cash flow as DataFrames keyed by statement name."""
    index = index or build_note_index(company)
    return {
        "balance_sheet": _build_frame(company, BALANCE_SHEET_LAYOUT, calculate_bs_total(company.balance_sheet), index),
        "profit_loss": _build_frame(company, PROFIT_LOSS_LAYOUT, calculate_pl_total(company.profit_loss), index),
        "cash_flow": _build_frame(company, CASH_FLOW_LAYOUT, calculate_cf_total(company.cash_flow), index),
    }


def changes_in_equity_frame(company: Company) -> pd.DataFrame:
    """Other equity reconciliation, one column per year."""
    soce = calculate_changes_in_equity(company)
    cur, prev = soce.other_equity, soce.other_equity_prev
    rows = [
        ["Equity share capital - opening", soce.share_capital_opening, soce.share_capital_opening_prev],
        ["Changes in equity share capital", soce.share_capital_movement, soce.share_capital_movement_prev],
        ["Equity share capital - closing", soce.share_capital_closing, soce.share_capital_closing_prev],
        ["Other equity - opening", cur.opening, prev.opening],
        ["Profit for the year", cur.profit_for_the_year, prev.profit_for_the_year],
        ["Other comprehensive income", cur.other_comprehensive_income, prev.other_comprehensive_income],
        ["Dividends", cur.dividends, prev.dividends],
        ["Other equity - closing", cur.closing, prev.closing],
    ]
    return pd.DataFrame(rows, columns=["Particulars", "Current", "Previous"])
