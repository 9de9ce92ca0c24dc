"""
fsgen - Ind AS Financial Statement Generator
Command-line entry point.

Usage:
    fsgen demo --out abc.json                      # Write the ABC Limited sample
    fsgen validate abc.json [--strict]             # Cross-statement checks
    fsgen totals abc.json                          # Statement subtotals
    fsgen notes abc.json                           # Display note numbering
    fsgen cashflow abc.json [--write out.json]     # Regenerate the cash flow
    fsgen amounts abc.json sheet.csv --out new.json
    fsgen export abc.json --format docx --out abc.docx

Statement commands work on the resolved view of the company: every breakdown
schedule total is pushed into its leaf first. The input file is never changed.
"""

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

from fsgen.exports.tables import statement_frames
from fsgen.metrics.aggregation import calculate_bs_total, calculate_cf_total, calculate_pl_total
from fsgen.metrics.cash_flow import merge_cash_flow
from fsgen.metrics.notes import build_note_index
from fsgen.metrics.validation import run_all_validations, summarise_validations
from fsgen.model.breakdowns import apply_breakdowns
from fsgen.parser.company_loader import (
    CompanyFileError,
    apply_amounts,
    get_demo_company,
    load_company,
    read_amounts_csv,
    save_company,
)
from fsgen.settings import load_settings
from fsgen.utils.formatters import format_amount

logger = logging.getLogger(__name__)

STATUS_MARKS = {"success": "[OK]", "warning": "[WARN]", "error": "[FAIL]"}


def _load_resolved(path):
    return apply_breakdowns(load_company(path))


# ── Commands ─────────────────────────────────────────────────────────────────

def cmd_demo(args, settings) -> int:
    path = save_company(get_demo_company(), args.out)
    print(f"Demo company written to {path}")
    return 0


def cmd_validate(args, settings) -> int:
    company = _load_resolved(args.file)
    results = run_all_validations(company)
    for result in results:
        print(f"{STATUS_MARKS[result.type]:<7} {result.message}")
        if result.details:
            print(f"        {result.details}")
    counts = summarise_validations(results)
    print(f"\n{counts['error']} error(s), {counts['warning']} warning(s), {counts['success']} passed")
    if args.strict and counts["error"]:
        return 1
    return 0


def _print_totals(title: str, totals, formatting) -> None:
    print(f"\n{title}")
    data = totals.to_dict()
    rows = {
        name: [format_amount(value, formatting), format_amount(data[f"{name}Prev"], formatting)]
        for name, value in data.items()
        if not name.endswith("Prev")
    }
    print(pd.DataFrame.from_dict(rows, orient="index", columns=["Current", "Previous"]).to_string())


def cmd_totals(args, settings) -> int:
    company = _load_resolved(args.file)
    fmt = company.formatting
    _print_totals("Balance Sheet", calculate_bs_total(company.balance_sheet), fmt)
    _print_totals("Profit and Loss", calculate_pl_total(company.profit_loss), fmt)
    _print_totals("Cash Flow", calculate_cf_total(company.cash_flow), fmt)
    return 0


def cmd_notes(args, settings) -> int:
    company = _load_resolved(args.file)
    index = build_note_index(company)
    for note in index.list:
        source = note.path or ""
        print(f"{note.number:>3}  {note.title:<70} {source}")
    return 0


def cmd_cashflow(args, settings) -> int:
    company = merge_cash_flow(_load_resolved(args.file))
    frame = statement_frames(company)["cash_flow"]
    frame = frame[frame["Kind"] != "header"].copy()
    for column in ("Current", "Previous"):
        frame[column] = frame[column].map(lambda v: format_amount(v, company.formatting))
    print(frame[["Particulars", "Current", "Previous"]].to_string(index=False))
    if args.write:
        save_company(company, args.write)
        print(f"\nCompany with regenerated cash flow written to {args.write}")
    return 0


def cmd_amounts(args, settings) -> int:
    company = load_company(args.file)
    apply_amounts(company, read_amounts_csv(args.csv))
    save_company(company, args.out)
    print(f"Amounts applied; written to {args.out}")
    return 0


def cmd_export(args, settings) -> int:
    company = _load_resolved(args.file)
    if args.format == "pdf":
        from fsgen.exports.pdf_export import generate_pdf_report
        data = generate_pdf_report(company, settings)
    else:
        from fsgen.exports.word_export import generate_word_report
        data = generate_word_report(company, settings)
    out = Path(args.out)
    out.write_bytes(data)
    print(f"{args.format.upper()} report written to {out} ({len(data):,} bytes)")
    return 0


# ── Argument parsing ─────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fsgen",
        description="Ind AS financial statement generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("demo", help="Write the ABC Limited sample company")
    p.add_argument("--out", required=True, help="Output JSON path")
    p.set_defaults(func=cmd_demo)

    p = sub.add_parser("validate", help="Run cross-statement checks")
    p.add_argument("file", help="Company JSON file")
    p.add_argument("--strict", action="store_true", help="Exit 1 when any check fails")
    p.set_defaults(func=cmd_validate)

    p = sub.add_parser("totals", help="Print statement subtotals")
    p.add_argument("file", help="Company JSON file")
    p.set_defaults(func=cmd_totals)

    p = sub.add_parser("notes", help="Print display note numbering")
    p.add_argument("file", help="Company JSON file")
    p.set_defaults(func=cmd_notes)

    p = sub.add_parser("cashflow", help="Regenerate the cash flow from BS and P&L")
    p.add_argument("file", help="Company JSON file")
    p.add_argument("--write", help="Save the company with the regenerated cash flow here")
    p.set_defaults(func=cmd_cashflow)

    p = sub.add_parser("amounts", help="Apply a note,current,previous CSV sheet")
    p.add_argument("file", help="Company JSON file")
    p.add_argument("csv", help="Amount sheet")
    p.add_argument("--out", required=True, help="Output JSON path")
    p.set_defaults(func=cmd_amounts)

    p = sub.add_parser("export", help="Export statements to Word or PDF")
    p.add_argument("file", help="Company JSON file")
    p.add_argument("--format", choices=["docx", "pdf"], default="docx")
    p.add_argument("--out", required=True, help="Output document path")
    p.set_defaults(func=cmd_export)

    return parser


def main(argv=None) -> int:
    settings = load_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))

    args = build_parser().parse_args(argv)
    try:
        return args.func(args, settings)
    except CompanyFileError as e:
        logger.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        logger.error("Cannot write output: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
