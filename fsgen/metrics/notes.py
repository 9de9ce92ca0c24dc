"""
Notes to accounts numbering.

Display note numbers are positional: the catalogue below is walked in statement
order (corporate information, accounting policies, balance sheet, P&L, cash
flow) and every entry with a non-zero leaf takes the next number. Numbers are
recomputed from scratch on every call, so zeroing a line shifts every later
number down by one.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from fsgen.model.company import Company
from fsgen.model.paths import NOTE_LOCATIONS, leaf_for_note

logger = logging.getLogger(__name__)

CORPORATE_INFO = "corporate-info"
ACCOUNTING_POLICIES = "accounting-policies"

STATIC_NOTES = [
    (CORPORATE_INFO, "Corporate Information"),
    (ACCOUNTING_POLICIES, "Significant Accounting Policies"),
]

NOTE_TITLES = {
    # Balance Sheet: non-current assets
    "1": "(a) Property, Plant and Equipment",
    "2": "(b) Capital work-in-progress",
    "3": "(c) Investment Property",
    "4": "(d) Goodwill",
    "5": "(e) Other Intangible assets",
    "6": "(f) Intangible assets under development",
    "7": "(g) Biological Assets other than bearer plants",
    "8": "(h)(i) Financial Assets - Investments",
    "9": "(h)(ii) Financial Assets - Trade receivables",
    "10": "(h)(iii) Financial Assets - Loans",
    "11": "(i) Deferred tax assets (net)",
    "12": "(j) Other non-current assets",
    # Balance Sheet: current assets
    "13": "(a) Inventories",
    "14": "(b)(i) Financial Assets - Investments",
    "15": "(b)(ii) Financial Assets - Trade receivables",
    "16": "(b)(iii) Financial Assets - Cash and cash equivalents",
    "17": "(b)(iv) Financial Assets - Bank balances other than (iii) above",
    "18": "(b)(v) Financial Assets - Loans",
    "19": "(b)(vi) Financial Assets - Others",
    "20": "(c) Current Tax Assets (Net)",
    "21": "(d) Other current assets",
    # Balance Sheet: equity
    "22": "Equity - Equity Share capital",
    "23": "Equity - Other Equity",
    # Balance Sheet: non-current liabilities
    "24": "Non-current liabilities - Financial Liabilities - Borrowings",
    "25": "Non-current liabilities - Financial Liabilities - Lease liabilities",
    "26": "Non-current liabilities - Trade Payables (Micro & Small Enterprises)",
    "27": "Non-current liabilities - Trade Payables (Other creditors)",
    "28": "Non-current liabilities - Other financial liabilities",
    "29": "Non-current liabilities - Provisions",
    "30": "Non-current liabilities - Deferred tax liabilities (Net)",
    "31": "Non-current liabilities - Other non-current liabilities",
    # Balance Sheet: current liabilities
    "32": "Current liabilities - Financial Liabilities - Borrowings",
    "33": "Current liabilities - Financial Liabilities - Lease liabilities",
    "34": "Current liabilities - Trade Payables (Micro & Small Enterprises)",
    "35": "Current liabilities - Trade Payables (Other creditors)",
    "36": "Current liabilities - Other financial liabilities",
    "37": "Current liabilities - Other current liabilities",
    "38": "Current liabilities - Provisions",
    "39": "Current liabilities - Current Tax Liabilities (Net)",
    # Profit & Loss
    "40": "Revenue from Operations",
    "41": "Other Income",
    "42": "Cost of materials consumed",
    "43": "Purchases of Stock-in-Trade",
    "44": "Changes in inventories of finished goods, stock-in-trade and WIP",
    "45": "Employee benefits expense",
    "46": "Finance costs",
    "47": "Depreciation and amortisation expense",
    "48": "Other expenses",
    "49": "Exceptional Items",
    "50": "Tax Expense - Current tax",
    "51": "Tax Expense - Deferred tax",
    "52": "Profit/(Loss) for the period from continuing operations",
    "53": "Profit/(loss) from discontinued operations",
    "54": "Tax expenses of discontinued operations",
    "55": "Profit/(loss) from discontinued operations (after tax)",
    "56": "Profit/(loss) for the period",
    "57": "OCI - Items not reclassified: Remeasurement of net defined benefit plans",
    "58": "OCI - Items not reclassified: Equity instruments through OCI",
    "59": "OCI - Items not reclassified: Income tax",
    "60": "OCI - Items reclassified: Exchange differences",
    "61": "OCI - Items reclassified: Debt instruments through OCI",
    "62": "OCI - Items reclassified: Income tax",
    "63": "Total Comprehensive Income for the period",
    "64": "EPS (Continuing) - Basic",
    "65": "EPS (Continuing) - Diluted",
    "66": "EPS (Discontinued) - Basic",
    "67": "EPS (Discontinued) - Diluted",
    "68": "EPS (Total) - Basic",
    "69": "EPS (Total) - Diluted",
    # Cash Flow
    "70": "Cash Flow - Profit before tax",
    "71": "Cash Flow - Depreciation and amortisation",
    "72": "Cash Flow - Finance costs",
    "73": "Cash Flow - Interest income",
    "74": "Cash Flow - Other adjustments",
    "75": "Cash Flow - Trade receivables",
    "76": "Cash Flow - Inventories",
    "77": "Cash Flow - Trade payables",
    "78": "Cash Flow - Other assets / liabilities",
    "79": "Cash Flow - Income taxes paid",
    "80": "Cash Flow - Purchase of property, plant and equipment",
    "81": "Cash Flow - Proceeds from sale of property, plant and equipment",
    "82": "Cash Flow - Purchase of investments",
    "83": "Cash Flow - Proceeds from investments",
    "84": "Cash Flow - Other investing cash flows",
    "85": "Cash Flow - Proceeds from issue of share capital",
    "86": "Cash Flow - Proceeds from borrowings",
    "87": "Cash Flow - Repayment of borrowings",
    "88": "Cash Flow - Dividends paid",
    "89": "Cash Flow - Interest paid",
    "90": "Cash Flow - Other financing cash flows",
    "91": "Cash Flow - Cash and cash equivalents at the beginning of the year",
    "92": "Cash Flow - Cash and cash equivalents at the end of the year",
}


# ── Data structures ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ResolvedNote:
    original_note: str
    number: str
    title: str
    path: Optional[str] = None


@dataclass
class NoteIndex:
    map: Dict[str, Optional[str]] = field(default_factory=dict)  # internal key → display number or None
    list: List[ResolvedNote] = field(default_factory=list)  # numbered notes, in display order

    def number_for(self, note_key: str) -> Optional[str]:
        return self.map.get(str(note_key))

    def note_for_number(self, number) -> Optional[ResolvedNote]:
        wanted = str(number)
        return next((note for note in self.list if note.number == wanted), None)


# ── Lookup ────────────────────────────────────────────────────────────────────

def get_financial_path(note_key: str) -> Optional[str]:
    """Dot path of a balance sheet or P&L note inside its statement tree (keys 1–69)."""
    location = NOTE_LOCATIONS.get(str(note_key))
    if location is None:
        return None
    statement, path = location
    if statement == "cash_flow":
        return None
    return path


def note_catalogue() -> list:
    """(key, title) pairs in display order."""
    return list(STATIC_NOTES) + [(key, NOTE_TITLES[key]) for key in NOTE_LOCATIONS]


def build_note_index(company: Company) -> NoteIndex:
    index = NoteIndex()
    counter = 1
    static_keys = {key for key, _ in STATIC_NOTES}
    for key, title in note_catalogue():
        has_value = key in static_keys or leaf_for_note(company, key).has_value
        if not has_value:
            index.map[key] = None
            continue
        number = str(counter)
        counter += 1
        index.map[key] = number
        index.list.append(ResolvedNote(key, number, title, get_financial_path(key)))
    logger.debug("Note index for %s: %d numbered notes", company.name, len(index.list))
    return index
