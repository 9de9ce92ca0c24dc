"""
Word document generation using python-docx.
Produces the full set of financial statements as an editable .docx.

Structure:
  - Cover page: company details, reporting unit, preparer
  - Balance Sheet, Statement of Profit and Loss, Cash Flow Statement
  - Statement of Changes in Equity
  - Notes to Accounts: numbered from the note index, with breakdown schedules
  - Validation summary
"""

import io
import logging
from datetime import date

from docx import Document
from docx.enum.table import WD_TABLE_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Cm, Pt, RGBColor

from fsgen.exports.tables import changes_in_equity_frame, statement_frames
from fsgen.metrics.notes import ACCOUNTING_POLICIES, CORPORATE_INFO, build_note_index
from fsgen.metrics.validation import run_all_validations, summarise_validations
from fsgen.model.breakdowns import DerivedFromBreakdown, resolve_leaf_value
from fsgen.model.company import Company
from fsgen.model.paths import leaf_for_note
from fsgen.utils.formatters import format_amount, get_unit_label

logger = logging.getLogger(__name__)

# ── Colours ──────────────────────────────────────────────────────────────────
NAVY_RGB  = RGBColor(0x1B, 0x2A, 0x4A)
GREY_RGB  = RGBColor(0x6B, 0x72, 0x80)
GREEN_RGB = RGBColor(0x16, 0xA3, 0x4A)
AMBER_RGB = RGBColor(0xD9, 0x77, 0x06)
RED_RGB   = RGBColor(0xDC, 0x26, 0x26)
WHITE_RGB = RGBColor(0xFF, 0xFF, 0xFF)

RESULT_RGB = {
    "success": GREEN_RGB,
    "warning": AMBER_RGB,
    "error":   RED_RGB,
}
RESULT_FILL = {
    "success": "DCFCE7",
    "warning": "FEF3C7",
    "error":   "FEE2E2",
}

STATEMENT_TITLES = [
    ("balance_sheet", "Balance Sheet"),
    ("profit_loss",   "Statement of Profit and Loss"),
    ("cash_flow",     "Cash Flow Statement"),
]


# ── XML helpers ───────────────────────────────────────────────────────────────

def _set_cell_bg(cell, hex_color: str):
    """Set table cell background colour via XML."""
    tcPr = cell._tc.get_or_add_tcPr()
    shd = OxmlElement("w:shd")
    shd.set(qn("w:val"),   "clear")
    shd.set(qn("w:color"), "auto")
    shd.set(qn("w:fill"),  hex_color.lstrip("#"))
    tcPr.append(shd)


def _set_para_border_bottom(para, color="1B2A4A", size="6"):
    """Add a bottom border to a paragraph (used for heading underlines)."""
    pPr = para._p.get_or_add_pPr()
    pBdr = OxmlElement("w:pBdr")
    bottom = OxmlElement("w:bottom")
    bottom.set(qn("w:val"),   "single")
    bottom.set(qn("w:sz"),    size)
    bottom.set(qn("w:space"), "1")
    bottom.set(qn("w:color"), color)
    pBdr.append(bottom)
    pPr.append(pBdr)


# ── Formatting helpers ────────────────────────────────────────────────────────

def _add_heading(doc: Document, text: str, level: int = 1) -> None:
    """Add a heading with navy colour and bottom border."""
    p = doc.add_heading(text, level=level)
    for run in p.runs:
        run.font.color.rgb = NAVY_RGB
    if level <= 2:
        _set_para_border_bottom(p)


def _add_small_text(doc: Document, text: str, italic: bool = False) -> None:
    p = doc.add_paragraph()
    run = p.add_run(text)
    run.font.size = Pt(9)
    run.font.color.rgb = GREY_RGB
    run.font.italic = italic


def _add_info_table(doc: Document, rows: list) -> None:
    """Add a 2-column label/value info table."""
    table = doc.add_table(rows=len(rows), cols=2)
    table.style = "Table Grid"
    for r_idx, (label, value) in enumerate(rows):
        cells = table.rows[r_idx].cells
        cells[0].text = label
        cells[1].text = str(value)
        cells[0].width = Cm(5)
        cells[1].width = Cm(11)
        for run in cells[0].paragraphs[0].runs:
            run.font.bold = True
            run.font.color.rgb = NAVY_RGB
            run.font.size = Pt(10)
        for run in cells[1].paragraphs[0].runs:
            run.font.size = Pt(10)
        _set_cell_bg(cells[0], "F3F4F6")


def _header_row(table, texts: list) -> None:
    for cell, text in zip(table.rows[0].cells, texts):
        cell.text = ""
        _set_cell_bg(cell, "1B2A4A")
        para = cell.paragraphs[0]
        para.alignment = WD_ALIGN_PARAGRAPH.CENTER
        run = para.add_run(text)
        run.font.bold = True
        run.font.color.rgb = WHITE_RGB
        run.font.size = Pt(9)


def _add_statement_table(doc: Document, frame, formatting, year_labels: tuple) -> None:
    """One statement frame as a 4-column table; headers and totals in bold."""
    table = doc.add_table(rows=1, cols=4)
    table.style = "Table Grid"
    table.alignment = WD_TABLE_ALIGNMENT.LEFT
    _header_row(table, ["Particulars", "Note", year_labels[0], year_labels[1]])

    for row in frame.itertuples(index=False):
        if row.Kind == "header":
            texts = [row.Particulars, "", "", ""]
        else:
            texts = [
                row.Particulars,
                row.Note,
                format_amount(row.Current, formatting),
                format_amount(row.Previous, formatting),
            ]
        cells = table.add_row().cells
        for c_idx, (cell, text) in enumerate(zip(cells, texts)):
            cell.text = ""
            para = cell.paragraphs[0]
            para.alignment = WD_ALIGN_PARAGRAPH.RIGHT if c_idx >= 2 else WD_ALIGN_PARAGRAPH.LEFT
            run = para.add_run(str(text))
            run.font.size = Pt(9)
            run.font.bold = row.Kind in ("header", "total")
            if row.Kind == "total":
                _set_cell_bg(cell, "F3F4F6")


def _add_amount_table(doc: Document, headers: list, rows: list) -> None:
    table = doc.add_table(rows=1, cols=len(headers))
    table.style = "Table Grid"
    _header_row(table, headers)
    for values in rows:
        cells = table.add_row().cells
        for c_idx, (cell, text) in enumerate(zip(cells, values)):
            cell.text = ""
            para = cell.paragraphs[0]
            para.alignment = WD_ALIGN_PARAGRAPH.RIGHT if c_idx > 0 else WD_ALIGN_PARAGRAPH.LEFT
            run = para.add_run(str(text))
            run.font.size = Pt(9)


def _add_breakdown(doc: Document, company: Company, key: str, year_labels: tuple) -> None:
    """Schedule rows backing a note, when one exists."""
    value = resolve_leaf_value(company, key)
    if not isinstance(value, DerivedFromBreakdown):
        return
    fmt = company.formatting
    if value.kind == "ppe":
        rows = [
            [item.description, format_amount(item.gross_block, fmt), format_amount(item.depreciation, fmt),
             format_amount(item.net_block, fmt)]
            for item in value.items
        ]
        _add_amount_table(doc, ["Asset", "Gross block", "Depreciation", "Net block"], rows)
    elif value.kind == "trade_payables":
        rows = [
            [item.description or "-", format_amount(item.less_than_1_year, fmt),
             format_amount(item.one_to_two_years, fmt), format_amount(item.two_to_three_years, fmt),
             format_amount(item.more_than_3_years, fmt), format_amount(item.not_due, fmt),
             format_amount(item.total, fmt)]
            for item in value.items
        ]
        _add_amount_table(doc, ["Particulars", "< 1 year", "1-2 years", "2-3 years", "> 3 years", "Not due", "Total"], rows)
    elif value.kind in ("share_capital", "borrowings"):
        rows = [
            [item.description, format_amount(item.current_amount, fmt), format_amount(item.previous_amount, fmt)]
            for item in value.items
        ]
        _add_amount_table(doc, ["Particulars", year_labels[0], year_labels[1]], rows)
    elif value.kind == "eps":
        # Share counts and profit are shown unscaled
        rows = [[item.description, f"{item.current:,.0f}", f"{item.previous:,.0f}"] for item in value.items]
        rows.append(["Earnings per share", f"{value.current:.2f}", f"{value.previous:.2f}"])
        _add_amount_table(doc, ["Particulars", year_labels[0], year_labels[1]], rows)
    else:
        rows = [
            [item.description, format_amount(item.current, fmt), format_amount(item.previous, fmt)]
            for item in value.items
        ]
        _add_amount_table(doc, ["Particulars", year_labels[0], year_labels[1]], rows)


# ── Report ────────────────────────────────────────────────────────────────────

def generate_word_report(company: Company, settings=None) -> bytes:
    """
    Generate the financial statements as a Word document and return as bytes.
    """
    firm_name = getattr(settings, "firm_name", "") or ""
    try:
        doc = _build_document(company, firm_name)
        buffer = io.BytesIO()
        doc.save(buffer)
    except Exception:
        logger.error("Word export failed for %s", company.name, exc_info=True)
        raise
    logger.info("Word report generated for %s", company.name)
    return buffer.getvalue()


def _build_document(company: Company, firm_name: str) -> Document:
    doc = Document()

    for section in doc.sections:
        section.top_margin    = Cm(2.0)
        section.bottom_margin = Cm(2.0)
        section.left_margin   = Cm(2.0)
        section.right_margin  = Cm(2.0)

    fmt = company.formatting
    index = build_note_index(company)
    frames = statement_frames(company, index)
    year_labels = (company.year_end or "Current year", company.prev_year_end or "Previous year")
    unit_note = f"All amounts in {get_unit_label(fmt.unit_of_measurement)} unless otherwise stated."

    # ── COVER PAGE ───────────────────────────────────────────────────────────
    title_para = doc.add_paragraph()
    title_run = title_para.add_run(company.name or "Company")
    title_run.font.size = Pt(22)
    title_run.font.bold = True
    title_run.font.color.rgb = NAVY_RGB

    sub_para = doc.add_paragraph()
    sub_run = sub_para.add_run(f"Financial Statements for the year {company.financial_year}")
    sub_run.font.size = Pt(14)
    sub_run.font.color.rgb = GREY_RGB

    doc.add_paragraph()
    _add_info_table(doc, [
        ("Registered Office", company.address or "Not provided"),
        ("CIN",               company.cin or "Not provided"),
        ("PAN",               company.pan or "Not provided"),
        ("Sector",            company.sector),
        ("Financial Year",    company.financial_year),
        ("Reporting Unit",    get_unit_label(fmt.unit_of_measurement)),
        ("Prepared by",       firm_name or "Not stated"),
        ("Date",              date.today().strftime("%d %B %Y")),
    ])
    doc.add_page_break()

    # ── STATEMENTS ───────────────────────────────────────────────────────────
    for key, title in STATEMENT_TITLES:
        _add_heading(doc, title, level=1)
        _add_small_text(doc, unit_note, italic=True)
        _add_statement_table(doc, frames[key], fmt, year_labels)
        doc.add_page_break()

    _add_heading(doc, "Statement of Changes in Equity", level=1)
    _add_small_text(doc, unit_note, italic=True)
    soce = changes_in_equity_frame(company)
    _add_amount_table(
        doc,
        ["Particulars", year_labels[0], year_labels[1]],
        [[r.Particulars, format_amount(r.Current, fmt), format_amount(r.Previous, fmt)] for r in soce.itertuples()],
    )
    doc.add_page_break()

    # ── NOTES TO ACCOUNTS ────────────────────────────────────────────────────
    _add_heading(doc, "Notes to Accounts", level=1)
    for note in index.list:
        _add_heading(doc, f"Note {note.number}: {note.title}", level=2)
        text = company.note_details.get(note.original_note, "")
        if text:
            for line in text.split("\n"):
                if line.strip():
                    p = doc.add_paragraph(line.strip())
                    for run in p.runs:
                        run.font.size = Pt(10)
        if note.original_note in (CORPORATE_INFO, ACCOUNTING_POLICIES):
            continue
        leaf = leaf_for_note(company, note.original_note)
        _add_amount_table(
            doc,
            ["Particulars", year_labels[0], year_labels[1]],
            [[note.title, format_amount(leaf.current, fmt), format_amount(leaf.previous, fmt)]],
        )
        _add_breakdown(doc, company, note.original_note, year_labels)
        doc.add_paragraph()

    # ── VALIDATION SUMMARY ───────────────────────────────────────────────────
    doc.add_page_break()
    _add_heading(doc, "Validation Summary", level=1)
    results = run_all_validations(company)
    counts = summarise_validations(results)
    _add_small_text(
        doc,
        f"{counts['error']} error(s), {counts['warning']} warning(s), {counts['success']} passed. "
        "Checks are advisory and do not block export.",
    )
    table = doc.add_table(rows=1, cols=3)
    table.style = "Table Grid"
    _header_row(table, ["Check", "Result", "Details"])
    for result in results:
        cells = table.add_row().cells
        for c_idx, (cell, text) in enumerate(zip(cells, [result.message, result.type.upper(), result.details or ""])):
            cell.text = ""
            run = cell.paragraphs[0].add_run(text)
            run.font.size = Pt(9)
            if c_idx == 1:
                _set_cell_bg(cell, RESULT_FILL.get(result.type, "F3F4F6"))
                run.font.color.rgb = RESULT_RGB.get(result.type, GREY_RGB)
                run.font.bold = True

    doc.add_paragraph()
    footer_p = doc.add_paragraph()
    footer_p.alignment = WD_ALIGN_PARAGRAPH.CENTER
    footer_run = footer_p.add_run(f"Prepared by {firm_name or 'fsgen'} | {date.today().strftime('%d %B %Y')}")
    footer_run.font.size = Pt(8)
    footer_run.font.color.rgb = GREY_RGB
    footer_run.font.italic = True
    return doc
