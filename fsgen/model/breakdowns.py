"""
Breakdown resolution.

A note line item has two possible sources of truth: the amount typed straight
into the statement leaf, or the total of an itemised schedule filed under the
same note key. resolve_leaf_value() decides which one wins and returns it as
a LeafValue:

  Direct(current, previous)                          no usable schedule
  DerivedFromBreakdown(kind, current, previous, items) schedule total wins

Schedule priority for one key: share capital, borrowings, trade payables,
PPE, EPS, generic.
"""

import logging
from dataclasses import dataclass
from typing import Union

from fsgen.model.company import Company, coerce_amount
from fsgen.model.paths import NOTE_LOCATIONS, leaf_for_note

logger = logging.getLogger(__name__)

EPS_NOTE_KEYS = ("64", "65", "66", "67", "68", "69")
NET_PROFIT_ID = "net-profit"
EQUITY_SHARES_ID = "equity-shares"
_EQUITY_SHARE_LABELS = (
    "equity shares",
    "no.of equity shares",
    "no. of equity shares",
    "no of equity shares",
    "number of equity shares",
)


# ── Leaf values ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Direct:
    current: float
    previous: float


@dataclass(frozen=True)
class DerivedFromBreakdown:
    kind: str                # 'share_capital', 'borrowings', 'trade_payables', 'ppe', 'eps', 'generic'
    current: float
    previous: float
    items: tuple = ()


LeafValue = Union[Direct, DerivedFromBreakdown]


# ── Schedule totals ───────────────────────────────────────────────────────────

def generic_totals(items) -> tuple:
    """(Σcurrent, Σprevious) over generic breakdown rows."""
    return (
        sum(coerce_amount(i.current) for i in items),
        sum(coerce_amount(i.previous) for i in items),
    )


def ppe_totals(items) -> tuple:
    """(gross block, accumulated depreciation, net block) of a PPE schedule."""
    gross = sum(coerce_amount(i.gross_block) for i in items)
    depreciation = sum(coerce_amount(i.depreciation) for i in items)
    return gross, depreciation, gross - depreciation


def share_capital_totals(data) -> tuple:
    """Issued, subscribed and paid-up capital per column."""
    return (
        sum(coerce_amount(i.current_amount) for i in data.issued),
        sum(coerce_amount(i.previous_amount) for i in data.issued),
    )


def borrowings_totals(data) -> tuple:
    """Secured plus unsecured borrowings per column."""
    rows = list(data.secured) + list(data.unsecured)
    return (
        sum(coerce_amount(i.current_amount) for i in rows),
        sum(coerce_amount(i.previous_amount) for i in rows),
    )


def trade_payables_total(data) -> float:
    """All five ageing buckets over all four sections (current column only)."""
    return sum(coerce_amount(item.total) for section in data.sections for item in section)


def _find_eps_inputs(items) -> tuple:
    net_profit = next((i for i in items if i.id == NET_PROFIT_ID), None)
    shares = next((i for i in items if i.id == EQUITY_SHARES_ID), None)
    if net_profit is None:
        net_profit = next((i for i in items if "net profit" in i.description.lower().strip()), None)
    if shares is None:
        shares = next(
            (i for i in items if any(label in i.description.lower().strip() for label in _EQUITY_SHARE_LABELS)),
            None,
        )
    # Positional fallback: first row is profit, second is share count
    if net_profit is None and len(items) > 0:
        net_profit = items[0]
    if shares is None and len(items) > 1:
        shares = items[1]
    return net_profit, shares


def eps_totals(items) -> tuple:
    """Earnings per share = net profit / number of equity shares, per column; 0 without shares."""
    net_profit, shares = _find_eps_inputs(items)

    def _eps(column: str) -> float:
        profit = coerce_amount(getattr(net_profit, column)) if net_profit else 0.0
        count = coerce_amount(getattr(shares, column)) if shares else 0.0
        return profit / count if count > 0 else 0.0

    return _eps("current"), _eps("previous")


# ── Resolution ────────────────────────────────────────────────────────────────

def _has_rows(*sections) -> bool:
    return any(len(section) > 0 for section in sections)


def resolve_leaf_value(company: Company, note_key: str) -> LeafValue:
    """Resolve the authoritative (current, previous) pair for a note key."""
    key = str(note_key)
    leaf = leaf_for_note(company, key)

    share_capital = company.share_capital_details.get(key)
    if share_capital is not None and _has_rows(share_capital.issued):
        current, previous = share_capital_totals(share_capital)
        return DerivedFromBreakdown("share_capital", current, previous, tuple(share_capital.issued))

    borrowings = company.borrowings_details.get(key)
    if borrowings is not None and _has_rows(borrowings.secured, borrowings.unsecured):
        current, previous = borrowings_totals(borrowings)
        rows = tuple(borrowings.secured) + tuple(borrowings.unsecured)
        return DerivedFromBreakdown("borrowings", current, previous, rows)

    payables = company.trade_payables_details.get(key)
    if payables is not None and _has_rows(*payables.sections):
        rows = tuple(item for section in payables.sections for item in section)
        return DerivedFromBreakdown("trade_payables", trade_payables_total(payables), leaf.previous, rows)

    ppe = company.ppe_breakdowns.get(key)
    if ppe:
        _, _, net = ppe_totals(ppe)
        return DerivedFromBreakdown("ppe", net, leaf.previous, tuple(ppe))

    generic = company.breakdowns.get(key)
    if generic:
        if key in EPS_NOTE_KEYS:
            current, previous = eps_totals(generic)
            return DerivedFromBreakdown("eps", current, previous, tuple(generic))
        current, previous = generic_totals(generic)
        return DerivedFromBreakdown("generic", current, previous, tuple(generic))

    return Direct(leaf.current, leaf.previous)


def scheduled_note_keys(company: Company) -> list:
    """Every note key that has at least one schedule filed against it, sorted numerically."""
    keys = set(company.breakdowns) | set(company.ppe_breakdowns)
    keys |= set(company.share_capital_details) | set(company.borrowings_details)
    keys |= set(company.trade_payables_details)
    return sorted(keys, key=lambda k: (not k.isdigit(), int(k) if k.isdigit() else 0, k))


def apply_breakdowns(company: Company) -> Company:
    """
    Return a copy of company with every schedule total pushed into its leaf.
    The input is never modified.
    """
    resolved = company.copy()
    for key in scheduled_note_keys(company):
        if key not in NOTE_LOCATIONS:
            logger.debug("Breakdown under note %r has no statement leaf, skipped", key)
            continue
        value = resolve_leaf_value(resolved, key)
        if isinstance(value, DerivedFromBreakdown):
            leaf = leaf_for_note(resolved, key)
            leaf.current = value.current
            leaf.previous = value.previous
            logger.debug("Note %s ← %s schedule (%.2f, %.2f)", key, value.kind, value.current, value.previous)
    return resolved

