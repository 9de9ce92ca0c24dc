# Path: tests/unit/test_exports.py
"""
Unit Tests for fsgen/exports/word_export.py and pdf_export.py

Tests that both exports produce well-formed documents.
"""

import io
import logging

import pytest
from docx import Document

from fsgen.exports.pdf_export import generate_pdf_report
from fsgen.exports.word_export import generate_word_report
from fsgen.model.company import TradePayableItem, TradePayablesData
from fsgen.settings import Settings
from fsgen.utils.formatters import format_amount


@pytest.fixture
def settings():
    return Settings(firm_name="Mehta & Co")


class TestWordExport:
    """Test generate_word_report."""

    def test_returns_docx_bytes(self, demo_company, settings):
        """Output is a zip container (docx)."""
        data = generate_word_report(demo_company, settings)
        assert data[:2] == b"PK"

    def test_content(self, demo_company, settings):
        """The document names the company and carries the statements and notes."""
        doc = Document(io.BytesIO(generate_word_report(demo_company, settings)))
        text = "\n".join(p.text for p in doc.paragraphs)
        assert "ABC Limited" in text
        assert "Balance Sheet" in text
        assert "Notes to Accounts" in text
        assert "Note 1: Corporate Information" in text
        assert "Validation Summary" in text

    def test_empty_company(self, empty_company):
        """A company with no amounts still exports."""
        assert generate_word_report(empty_company)[:2] == b"PK"

    def test_logs_completion(self, demo_company, caplog):
        """Success is logged at INFO."""
        with caplog.at_level(logging.INFO, logger="fsgen.exports.word_export"):
            generate_word_report(demo_company)
        assert "Word report generated for ABC Limited" in caplog.text

    def test_trade_payables_ageing_columns(self, demo_company):
        """Every ageing bucket has a column, so the row adds up to its total."""
        demo_company.trade_payables_details["35"] = TradePayablesData(
            others=[TradePayableItem(id="o1", description="Supplier", less_than_1_year=100, not_due=900)],
        )
        demo_company.balance_sheet.current_liabilities.financial_liabilities.trade_payables.other_creditors_dues.current = 1000
        doc = Document(io.BytesIO(generate_word_report(demo_company)))
        table = next(t for t in doc.tables if "Not due" in [c.text for c in t.rows[0].cells])
        fmt = demo_company.formatting
        assert [c.text for c in table.rows[0].cells] == [
            "Particulars", "< 1 year", "1-2 years", "2-3 years", "> 3 years", "Not due", "Total",
        ]
        assert [c.text for c in table.rows[1].cells] == [
            "Supplier", format_amount(100, fmt), format_amount(0, fmt), format_amount(0, fmt),
            format_amount(0, fmt), format_amount(900, fmt), format_amount(1000, fmt),
        ]


class TestPdfExport:
    """Test generate_pdf_report."""

    def test_returns_pdf_bytes(self, demo_company, settings):
        """Output starts with the PDF signature."""
        data = generate_pdf_report(demo_company, settings)
        assert data[:4] == b"%PDF"

    def test_empty_company(self, empty_company):
        """A company with no amounts still exports."""
        assert generate_pdf_report(empty_company)[:4] == b"%PDF"

    def test_unbalanced_company(self, demo_company):
        """Validation errors are reported, not raised."""
        demo_company.balance_sheet.equity.other_equity.current = 0
        assert generate_pdf_report(demo_company)[:4] == b"%PDF"
