"""
Dot-path access to statement leaves.

Paths are snake_case attribute chains relative to one statement tree, e.g.
"current_assets.financial_assets.cash_and_cash_equivalents". Valid paths are
derived from the dataclass fields, so a typo raises instead of silently creating
a new key.
"""

import logging
from dataclasses import fields, is_dataclass
from typing import Iterator

from fsgen.model.company import (
    AmountWithNote,
    BalanceSheetData,
    CashFlowData,
    ProfitLossData,
)

logger = logging.getLogger(__name__)

COLUMNS = ("current", "previous")

STATEMENT_TYPES = {
    "balance_sheet": BalanceSheetData,
    "profit_loss": ProfitLossData,
    "cash_flow": CashFlowData,
}


class UnknownPathError(KeyError):
    """Raised when a dot path does not name a leaf of the statement tree."""


def leaf_paths(tree_type) -> list:
    """Every leaf path of a statement dataclass, in declaration (statement) order."""
    paths = []
    for f in fields(tree_type):
        if f.type is AmountWithNote:
            paths.append(f.name)
        elif is_dataclass(f.type):
            paths.extend(f"{f.name}.{sub}" for sub in leaf_paths(f.type))
    return paths


def iter_leaves(tree, prefix: str = "") -> Iterator:
    """Yield (path, leaf) for every AmountWithNote in a statement tree instance."""
    for f in fields(tree):
        value = getattr(tree, f.name)
        path = f"{prefix}{f.name}"
        if isinstance(value, AmountWithNote):
            yield path, value
        elif is_dataclass(value):
            yield from iter_leaves(value, prefix=f"{path}.")


def get_leaf(tree, path: str) -> AmountWithNote:
    node = tree
    for key in path.split("."):
        if not is_dataclass(node) or key not in {f.name for f in fields(node)}:
            raise UnknownPathError(path)
        node = getattr(node, key)
    if not isinstance(node, AmountWithNote):
        raise UnknownPathError(path)
    return node


def set_amount(tree, path: str, column: str, value) -> AmountWithNote:
    """Write a coerced amount into one column of the leaf at path."""
    if column not in COLUMNS:
        raise ValueError(f"column must be one of {COLUMNS}, got {column!r}")
    leaf = get_leaf(tree, path)
    setattr(leaf, column, value)
    return leaf


def set_path_value(tree, path: str, value) -> AmountWithNote:
    """
    Logical-path update, e.g. "equity.other_equity.current".
    The last segment names the column.
    """
    leaf_path, _, column = path.rpartition(".")
    if not leaf_path:
        raise UnknownPathError(path)
    return set_amount(tree, leaf_path, column, value)


# ── Note key lookup ───────────────────────────────────────────────────────────

def _note_locations() -> dict:
    locations = {}
    for statement, tree_type in STATEMENT_TYPES.items():
        for path, leaf in iter_leaves(tree_type()):
            locations[leaf.note] = (statement, path)
    return locations


# note key → (statement, path), fixed by the schema
NOTE_LOCATIONS = _note_locations()


def statement_for_path(path: str) -> str:
    """Which statement ('balance_sheet', 'profit_loss' or 'cash_flow') a leaf path belongs to."""
    root = path.split(".", 1)[0]
    for statement, tree_type in STATEMENT_TYPES.items():
        if root in {f.name for f in fields(tree_type)}:
            return statement
    raise UnknownPathError(path)


def statement_tree(company, statement: str):
    return getattr(company, statement)


def leaf_for_note(company, note_key: str) -> AmountWithNote:
    """The leaf carrying internal note key note_key in this company."""
    try:
        statement, path = NOTE_LOCATIONS[str(note_key)]
    except KeyError:
        raise UnknownPathError(note_key) from None
    return get_leaf(statement_tree(company, statement), path)
