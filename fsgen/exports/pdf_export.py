"""
PDF statement generation using reportlab.
Produces the primary statements, changes in equity and the validation summary
with a cover page and per-page headers/footers.
"""

import io
import logging
from datetime import date
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import (
    BaseDocTemplate, Frame, HRFlowable, NextPageTemplate, PageBreak,
    PageTemplate, Paragraph, Spacer, Table, TableStyle,
)

from fsgen.exports.tables import changes_in_equity_frame, statement_frames
from fsgen.metrics.notes import build_note_index
from fsgen.metrics.validation import run_all_validations, summarise_validations
from fsgen.model.company import Company
from fsgen.utils.formatters import format_amount, get_unit_label

logger = logging.getLogger(__name__)

# ── Colour palette ──────────────────────────────────────────────────────────
NAVY       = colors.HexColor("#1B2A4A")
NAVY_MID   = colors.HexColor("#2C3E6B")
GREY       = colors.HexColor("#6B7280")
LIGHT_GREY = colors.HexColor("#F3F4F6")
WHITE      = colors.white
RED_COL    = colors.HexColor("#DC2626")
GREEN      = colors.HexColor("#16A34A")
AMBER      = colors.HexColor("#D97706")
GREEN_BG   = colors.HexColor("#DCFCE7")
AMBER_BG   = colors.HexColor("#FEF3C7")
RED_BG     = colors.HexColor("#FEE2E2")

RESULT_COLORS = {
    "success": (GREEN, GREEN_BG),
    "warning": (AMBER, AMBER_BG),
    "error":   (RED_COL, RED_BG),
}

STATEMENT_TITLES = [
    ("balance_sheet", "Balance Sheet"),
    ("profit_loss",   "Statement of Profit and Loss"),
    ("cash_flow",     "Cash Flow Statement"),
]


def _pdf_text(text: str) -> str:
    # Base-14 fonts have no rupee or not-equal glyphs
    return str(text).replace("₹", "INR").replace("≠", "!=")


# ── Styles ──────────────────────────────────────────────────────────────────

def _get_styles():
    styles = getSampleStyleSheet()

    styles.add(ParagraphStyle("CoverLabel",   parent=styles["Normal"],
        fontSize=10, textColor=NAVY, fontName="Helvetica-Bold"))
    styles.add(ParagraphStyle("CoverValue",   parent=styles["Normal"],
        fontSize=10, textColor=colors.black, fontName="Helvetica"))
    styles.add(ParagraphStyle("SectionHeading", parent=styles["Normal"],
        fontSize=13, textColor=NAVY, fontName="Helvetica-Bold",
        spaceBefore=10, spaceAfter=6))
    styles.add(ParagraphStyle("BodySmall",    parent=styles["Normal"],
        fontSize=8, textColor=GREY, fontName="Helvetica", leading=11, spaceAfter=3))

    return styles


# ── Canvas callbacks ─────────────────────────────────────────────────────────

def _make_cover_cb(company_name: str, firm_name: str, report_date: str):
    """Return a canvas callback that draws the cover-page chrome."""

    def _draw(canvas, doc):
        canvas.saveState()
        w, h = A4

        canvas.setFillColor(NAVY)
        canvas.rect(0, h - 5 * cm, w, 5 * cm, fill=True, stroke=False)
        canvas.setFillColor(WHITE)
        canvas.setFont("Helvetica-Bold", 22)
        canvas.drawString(1.5 * cm, h - 3 * cm, _pdf_text(company_name))

        canvas.setStrokeColor(NAVY)
        canvas.setLineWidth(0.5)
        canvas.line(1.5 * cm, 1.4 * cm, w - 1.5 * cm, 1.4 * cm)
        canvas.setFillColor(GREY)
        canvas.setFont("Helvetica", 7)
        canvas.drawString(1.5 * cm, 0.8 * cm, _pdf_text(company_name))
        canvas.drawCentredString(w / 2, 0.8 * cm, report_date)
        canvas.drawRightString(w - 1.5 * cm, 0.8 * cm, _pdf_text(firm_name))

        canvas.restoreState()

    return _draw


def _make_page_cb(company_name: str, firm_name: str, report_date: str):
    """Return a canvas callback for all non-cover pages."""

    def _draw(canvas, doc):
        canvas.saveState()
        w, h = A4

        canvas.setFillColor(NAVY)
        canvas.rect(0, h - 1.5 * cm, w, 1.5 * cm, fill=True, stroke=False)
        canvas.setFillColor(WHITE)
        canvas.setFont("Helvetica-Bold", 9)
        canvas.drawString(1.5 * cm, h - 1.0 * cm, _pdf_text(company_name))
        canvas.setFont("Helvetica", 9)
        canvas.drawRightString(w - 1.5 * cm, h - 1.0 * cm, f"Page {doc.page}")

        canvas.setStrokeColor(NAVY)
        canvas.setLineWidth(0.5)
        canvas.line(1.5 * cm, 1.4 * cm, w - 1.5 * cm, 1.4 * cm)
        canvas.setFillColor(GREY)
        canvas.setFont("Helvetica", 7)
        canvas.drawString(1.5 * cm, 0.8 * cm, report_date)
        canvas.drawRightString(w - 1.5 * cm, 0.8 * cm, _pdf_text(firm_name))

        canvas.restoreState()

    return _draw


# ── Story helpers ────────────────────────────────────────────────────────────

_TABLE_BASE = [
    ("BACKGROUND",    (0, 0), (-1, 0),  NAVY),
    ("TEXTCOLOR",     (0, 0), (-1, 0),  WHITE),
    ("FONTNAME",      (0, 0), (-1, 0),  "Helvetica-Bold"),
    ("FONTSIZE",      (0, 0), (-1, -1), 8),
    ("GRID",          (0, 0), (-1, -1), 0.3, GREY),
    ("ALIGN",         (2, 0), (-1, -1), "RIGHT"),
    ("VALIGN",        (0, 0), (-1, -1), "MIDDLE"),
    ("TOPPADDING",    (0, 0), (-1, -1), 3),
    ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
]


def _statement_table(frame, formatting, year_labels: tuple) -> Table:
    rows = [["Particulars", "Note", year_labels[0], year_labels[1]]]
    style = list(_TABLE_BASE)
    for r_idx, row in enumerate(frame.itertuples(index=False), start=1):
        if row.Kind == "header":
            rows.append([_pdf_text(row.Particulars), "", "", ""])
            style.append(("FONTNAME", (0, r_idx), (-1, r_idx), "Helvetica-Bold"))
            continue
        rows.append([
            _pdf_text(row.Particulars)[:80],
            row.Note,
            format_amount(row.Current, formatting),
            format_amount(row.Previous, formatting),
        ])
        if row.Kind == "total":
            style.append(("FONTNAME", (0, r_idx), (-1, r_idx), "Helvetica-Bold"))
            style.append(("BACKGROUND", (0, r_idx), (-1, r_idx), LIGHT_GREY))

    t = Table(rows, colWidths=[10 * cm, 1.5 * cm, 3.25 * cm, 3.25 * cm], repeatRows=1)
    t.setStyle(TableStyle(style))
    return t


def _validation_table(results: list) -> Table:
    rows = [["Check", "Result", "Details"]]
    style = list(_TABLE_BASE[:5]) + [("VALIGN", (0, 0), (-1, -1), "MIDDLE")]
    for r_idx, result in enumerate(results, start=1):
        rows.append([result.message, result.type.upper(), _pdf_text(result.details or "")[:90]])
        fg, bg = RESULT_COLORS.get(result.type, (GREY, LIGHT_GREY))
        style.append(("TEXTCOLOR", (1, r_idx), (1, r_idx), fg))
        style.append(("BACKGROUND", (1, r_idx), (1, r_idx), bg))
        style.append(("FONTNAME", (1, r_idx), (1, r_idx), "Helvetica-Bold"))
    t = Table(rows, colWidths=[5 * cm, 2 * cm, 11 * cm], repeatRows=1)
    t.setStyle(TableStyle(style))
    return t


# ── Report ───────────────────────────────────────────────────────────────────

def generate_pdf_report(company: Company, settings=None) -> bytes:
    """
    Generate the statements as a PDF and return as bytes.

    Sections:
      Page 1 : Cover (company details)
      Page 2+: Balance Sheet, Profit and Loss, Cash Flow, Changes in Equity
      Last   : Validation summary
    """
    firm_name = getattr(settings, "firm_name", "") or "fsgen"
    try:
        data = _build_pdf(company, firm_name)
    except Exception:
        logger.error("PDF export failed for %s", company.name, exc_info=True)
        raise
    logger.info("PDF report generated for %s", company.name)
    return data


def _build_pdf(company: Company, firm_name: str) -> bytes:
    buffer = io.BytesIO()
    w, h = A4
    report_date = date.today().strftime("%d %B %Y")
    fmt = company.formatting
    styles = _get_styles()
    year_labels = (company.year_end or "Current year", company.prev_year_end or "Previous year")
    unit_note = _pdf_text(f"All amounts in {get_unit_label(fmt.unit_of_measurement)} unless otherwise stated.")

    cover_frame = Frame(
        1.5 * cm, 2 * cm, w - 3 * cm, h - 8 * cm,
        leftPadding=0, rightPadding=0, topPadding=0, bottomPadding=0,
    )
    content_frame = Frame(
        1.5 * cm, 2 * cm, w - 3 * cm, h - 3.8 * cm,
        leftPadding=0, rightPadding=0, topPadding=0, bottomPadding=0,
    )
    doc = BaseDocTemplate(
        buffer,
        pagesize=A4,
        pageTemplates=[
            PageTemplate(id="cover", frames=[cover_frame],
                         onPage=_make_cover_cb(company.name, firm_name, report_date)),
            PageTemplate(id="content", frames=[content_frame],
                         onPage=_make_page_cb(company.name, firm_name, report_date)),
        ],
    )

    story = []

    # ── Cover ────────────────────────────────────────────────────────────────
    story.append(Spacer(1, 0.5 * cm))
    info_rows = [
        ("Registered Office", company.address or "Not provided"),
        ("CIN",               company.cin or "Not provided"),
        ("PAN",               company.pan or "Not provided"),
        ("Financial Year",    company.financial_year),
        ("Reporting Unit",    get_unit_label(fmt.unit_of_measurement)),
        ("Prepared by",       firm_name),
        ("Date",              report_date),
    ]
    info = Table(
        [[Paragraph(label, styles["CoverLabel"]), Paragraph(escape(_pdf_text(value)), styles["CoverValue"])]
         for label, value in info_rows],
        colWidths=[5 * cm, 12 * cm],
    )
    info.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (0, -1), LIGHT_GREY),
        ("GRID",       (0, 0), (-1, -1), 0.3, GREY),
        ("VALIGN",     (0, 0), (-1, -1), "MIDDLE"),
    ]))
    story.append(info)
    story.append(NextPageTemplate("content"))
    story.append(PageBreak())

    # ── Statements ───────────────────────────────────────────────────────────
    frames = statement_frames(company, build_note_index(company))
    for key, title in STATEMENT_TITLES:
        story.append(Paragraph(title, styles["SectionHeading"]))
        story.append(HRFlowable(width="100%", thickness=1, color=NAVY))
        story.append(Paragraph(unit_note, styles["BodySmall"]))
        story.append(_statement_table(frames[key], fmt, year_labels))
        story.append(PageBreak())

    story.append(Paragraph("Statement of Changes in Equity", styles["SectionHeading"]))
    story.append(HRFlowable(width="100%", thickness=1, color=NAVY))
    story.append(Paragraph(unit_note, styles["BodySmall"]))
    soce_rows = [["Particulars", year_labels[0], year_labels[1]]]
    for row in changes_in_equity_frame(company).itertuples(index=False):
        soce_rows.append([row.Particulars, format_amount(row.Current, fmt), format_amount(row.Previous, fmt)])
    soce = Table(soce_rows, colWidths=[10 * cm, 4 * cm, 4 * cm], repeatRows=1)
    soce.setStyle(TableStyle(_TABLE_BASE[:5] + [("ALIGN", (1, 0), (-1, -1), "RIGHT")]))
    story.append(soce)

    # ── Validation ───────────────────────────────────────────────────────────
    results = run_all_validations(company)
    counts = summarise_validations(results)
    story.append(Spacer(1, 0.6 * cm))
    story.append(Paragraph("Validation Summary", styles["SectionHeading"]))
    story.append(HRFlowable(width="100%", thickness=1, color=NAVY))
    story.append(Paragraph(
        f"{counts['error']} error(s), {counts['warning']} warning(s), {counts['success']} passed. "
        "Checks are advisory and do not block export.",
        styles["BodySmall"],
    ))
    story.append(_validation_table(results))

    doc.build(story)
    buffer.seek(0)
    return buffer.getvalue()
