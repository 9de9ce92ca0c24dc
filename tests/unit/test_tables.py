# Path: tests/unit/test_tables.py
"""
Unit Tests for fsgen/exports/tables.py

Tests the statement DataFrames that feed the Word and PDF exports.
"""

import pytest

from fsgen.exports.tables import COLUMNS, changes_in_equity_frame, line_label, statement_frames
from fsgen.metrics.notes import build_note_index


def _row(frame, label):
    return frame[frame["Particulars"] == label].iloc[0]


class TestStatementFrames:
    """Test statement_frames."""

    def test_keys_and_columns(self, demo_company):
        """Three statements with the standard columns."""
        frames = statement_frames(demo_company)
        assert set(frames) == {"balance_sheet", "profit_loss", "cash_flow"}
        for frame in frames.values():
            assert list(frame.columns) == COLUMNS

    def test_balance_sheet_totals(self, demo_company):
        """Total rows come from the aggregation engine."""
        bs = statement_frames(demo_company)["balance_sheet"]
        total = _row(bs, "Total Assets")
        assert total["Kind"] == "total"
        assert total["Current"] == pytest.approx(78_900_000)
        assert total["Previous"] == pytest.approx(68_600_000)
        assert _row(bs, "Total Equity and Liabilities")["Current"] == pytest.approx(78_900_000)

    def test_every_leaf_appears_once(self, demo_company):
        """Item rows cover each statement's leaves exactly once."""
        frames = statement_frames(demo_company)
        counts = {name: int((frame["Kind"] == "item").sum()) for name, frame in frames.items()}
        # P&L display mirrors (52, 55, 56, 63) are replaced by computed totals
        assert counts == {"balance_sheet": 39, "profit_loss": 26, "cash_flow": 23}

    def test_note_numbers(self, demo_company):
        """Item rows carry display numbers; zero rows carry none."""
        index = build_note_index(demo_company)
        bs = statement_frames(demo_company, index)["balance_sheet"]
        assert _row(bs, "(a) Property, Plant and Equipment")["Note"] == index.number_for("1")
        assert _row(bs, "(d) Goodwill")["Note"] == ""

    def test_headers_have_no_amounts(self, demo_company):
        """Header rows are labels only."""
        bs = statement_frames(demo_company)["balance_sheet"]
        headers = bs[bs["Kind"] == "header"]
        assert headers["Current"].isna().all()


class TestLineLabel:
    """Test statement labels."""

    def test_prefixes_are_stripped(self):
        """Section prefixes are dropped inside a statement."""
        assert line_label("24") == "Financial Liabilities - Borrowings"
        assert line_label("70") == "Profit before tax"
        assert line_label("40") == "Revenue from Operations"


class TestChangesInEquityFrame:
    """Test changes_in_equity_frame."""

    def test_rows(self, demo_company):
        """Share capital and other equity reconciliation rows."""
        frame = changes_in_equity_frame(demo_company)
        assert list(frame.columns) == ["Particulars", "Current", "Previous"]
        assert len(frame) == 8
        assert _row(frame, "Other equity - closing")["Current"] == pytest.approx(37_300_000)
        assert _row(frame, "Dividends")["Current"] == pytest.approx(-1_000_000)
