# Path: tests/unit/test_main.py
"""
Unit Tests for fsgen/main.py

Tests the CLI subcommands end to end on temporary files.
"""

import pytest

from sample_data import write_amount_sheet

from fsgen.main import build_parser, main
from fsgen.parser.company_loader import load_company, save_company


class TestArgumentParsing:
    """Test the parser."""

    def test_command_required(self):
        """Running without a subcommand is a usage error."""
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_export_format_choices(self):
        """Only docx and pdf are accepted."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["export", "a.json", "--format", "xlsx", "--out", "a.xlsx"])


class TestCommands:
    """Test each subcommand."""

    def test_demo(self, tmp_path, capsys):
        """demo writes a loadable company file."""
        out = tmp_path / "abc.json"
        assert main(["demo", "--out", str(out)]) == 0
        assert load_company(out).name == "ABC Limited"
        assert "Demo company written" in capsys.readouterr().out

    def test_validate(self, demo_file, capsys):
        """validate prints each rule and exits 0 without --strict."""
        assert main(["validate", str(demo_file)]) == 0
        out = capsys.readouterr().out
        assert "Balance Sheet Balanced" in out
        assert "0 error(s), 1 warning(s), 2 passed" in out

    def test_validate_strict_fails_on_error(self, tmp_path, demo_company):
        """--strict turns an error result into exit code 1."""
        demo_company.balance_sheet.equity.other_equity.current = 0
        path = save_company(demo_company, tmp_path / "broken.json")
        assert main(["validate", str(path)]) == 0
        assert main(["validate", str(path), "--strict"]) == 1

    def test_validate_strict_passes_on_warning(self, demo_file):
        """Warnings alone do not fail --strict."""
        assert main(["validate", str(demo_file), "--strict"]) == 0

    def test_missing_file(self, tmp_path, capsys):
        """Unreadable input exits 2 with a message."""
        assert main(["validate", str(tmp_path / "nope.json")]) == 2
        assert "Error:" in capsys.readouterr().err

    def test_malformed_company(self, tmp_path, capsys):
        """A non-numeric company id exits 2 instead of raising."""
        path = tmp_path / "bad-id.json"
        path.write_text('{"id": "abc-1", "name": "X"}', encoding="utf-8")
        assert main(["validate", str(path)]) == 2
        assert "Error:" in capsys.readouterr().err

    def test_totals(self, demo_file, capsys):
        """totals prints every statement's subtotals."""
        assert main(["totals", str(demo_file)]) == 0
        out = capsys.readouterr().out
        assert "totalAssets" in out
        assert "7,89,00,000" in out
        assert "netIncreaseInCash" in out

    def test_notes(self, demo_file, capsys):
        """notes lists numbered notes."""
        assert main(["notes", str(demo_file)]) == 0
        out = capsys.readouterr().out
        assert "Corporate Information" in out
        assert "non_current_assets.property_plant_equipment" in out

    def test_cashflow_write(self, demo_file, tmp_path, capsys):
        """cashflow --write saves the regenerated statement."""
        out = tmp_path / "regenerated.json"
        assert main(["cashflow", str(demo_file), "--write", str(out)]) == 0
        company = load_company(out)
        assert company.cash_flow.operating_activities.profit_before_tax.current == 7_000_000
        assert "Profit before tax" in capsys.readouterr().out

    def test_amounts(self, demo_file, tmp_path):
        """amounts applies a CSV sheet and writes a new file."""
        sheet = write_amount_sheet(tmp_path / "sheet.csv", ["49,250000,0"])
        out = tmp_path / "updated.json"
        assert main(["amounts", str(demo_file), str(sheet), "--out", str(out)]) == 0
        assert load_company(out).profit_loss.exceptional_items.amount.current == 250_000
        assert load_company(demo_file).profit_loss.exceptional_items.amount.current == 0

    @pytest.mark.parametrize("fmt,signature", [("docx", b"PK"), ("pdf", b"%PDF")])
    def test_export(self, demo_file, tmp_path, fmt, signature):
        """export writes the requested document type."""
        out = tmp_path / f"abc.{fmt}"
        assert main(["export", str(demo_file), "--format", fmt, "--out", str(out)]) == 0
        assert out.read_bytes()[:len(signature)] == signature
