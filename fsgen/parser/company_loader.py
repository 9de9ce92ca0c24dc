"""
Company record loading and saving.

Handles:
  - JSON company files in the editor's camelCase shape
  - CSV amount sheets (note, current, previous) applied onto a company
  - Free-text amount entry: "(1,200)" → -1200.0, "₹ 5,00,000" → 500000.0, "-" → 0.0
  - The bundled "ABC Limited" demonstration company
"""

import json
import logging
import re
from io import StringIO
from pathlib import Path

import numpy as np
import pandas as pd

from fsgen.model.company import Company
from fsgen.model.paths import NOTE_LOCATIONS, leaf_for_note

logger = logging.getLogger(__name__)

_BLANKS = ("", "-", "—", "n/a", "N/A", "nil", "Nil")


class CompanyFileError(ValueError):
    """A company or amount file could not be read or does not have the expected shape."""


# ── Amount parsing ────────────────────────────────────────────────────────────

def parse_amount(val) -> float:
    """Parse user-entered text to a finite float; anything unreadable is 0.0."""
    if val is None:
        return 0.0
    if isinstance(val, (int, float, np.number)):
        result = float(val)
        return result if np.isfinite(result) else 0.0
    s = str(val).strip()
    if s in _BLANKS:
        return 0.0
    negative = s.startswith("(") and s.endswith(")")
    s = re.sub(r"[₹$()\s,]", "", s)
    s = s.replace("Rs.", "").replace("Rs", "")
    try:
        result = float(s)
    except ValueError:
        logger.debug("Unparsable amount %r treated as 0", val)
        return 0.0
    if not np.isfinite(result):
        return 0.0
    return -result if negative else result


# ── JSON files ────────────────────────────────────────────────────────────────

def load_company(path) -> Company:
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as fh:
            data = json.load(fh)
    except OSError as e:
        raise CompanyFileError(f"Cannot read company file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CompanyFileError(f"{path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise CompanyFileError(f"{path} does not contain a company object")
    try:
        company = Company.from_dict(data)
    except (TypeError, ValueError, AttributeError) as e:
        raise CompanyFileError(f"{path} has malformed company data: {e}") from e
    logger.info("Loaded company %s (%s) from %s", company.id, company.name, path)
    return company


def save_company(company: Company, path) -> Path:
    path = Path(path)
    try:
        with path.open("w", encoding="utf-8") as fh:
            json.dump(company.to_dict(), fh, indent=2, ensure_ascii=False)
    except OSError as e:
        raise CompanyFileError(f"Cannot write company file {path}: {e}") from e
    logger.info("Saved company %s to %s", company.id, path)
    return path


# ── CSV amount sheets ─────────────────────────────────────────────────────────

def _read_csv(content: bytes) -> pd.DataFrame:
    for enc in ["utf-8", "utf-8-sig", "latin1"]:
        try:
            return pd.read_csv(StringIO(content.decode(enc)), dtype=str, keep_default_na=False)
        except UnicodeDecodeError:
            continue
    raise CompanyFileError("Could not decode CSV file")


def read_amounts_csv(path) -> pd.DataFrame:
    """
    Read an amount sheet with columns note, current, previous.
    Returns a frame with note as str and both amounts parsed to float.
    """
    try:
        content = Path(path).read_bytes()
    except OSError as e:
        raise CompanyFileError(f"Cannot read amount sheet {path}: {e}") from e
    df = _read_csv(content)
    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = {"note", "current", "previous"} - set(df.columns)
    if missing:
        raise CompanyFileError(f"Amount sheet {path} is missing columns: {', '.join(sorted(missing))}")
    df = df[["note", "current", "previous"]].copy()
    df["note"] = df["note"].astype(str).str.strip()
    df["current"] = df["current"].map(parse_amount)
    df["previous"] = df["previous"].map(parse_amount)
    return df


def apply_amounts(company: Company, amounts: pd.DataFrame) -> Company:
    """Write each row's amounts into the leaf with that note key. Unknown keys are skipped."""
    applied = 0
    for row in amounts.itertuples(index=False):
        if row.note not in NOTE_LOCATIONS:
            logger.warning("Amount sheet row for unknown note %r skipped", row.note)
            continue
        leaf = leaf_for_note(company, row.note)
        leaf.current = row.current
        leaf.previous = row.previous
        applied += 1
    logger.info("Applied %d amount rows to %s", applied, company.name)
    return company


# ── Demo data ─────────────────────────────────────────────────────────────────

def _a(current, previous) -> dict:
    return {"current": current, "previous": previous}


def get_demo_company() -> Company:
    """Return the ABC Limited sample company used for demonstrations."""
    return Company.from_dict({
        "id": 1,
        "name": "ABC Limited",
        "address": "123 Business Park, Mumbai, Maharashtra 400001",
        "cin": "U12345MH2020PLC123456",
        "sector": "Secondary",
        "specifications": "Manufacturing",
        "pan": "AAAAA1234A",
        "financialYear": "2024-25",
        "yearEnd": "2024-25",
        "prevYearEnd": "2023-24",
        "balanceSheet": {
            "nonCurrentAssets": {
                "propertyPlantEquipment": _a(30_000_000, 28_000_000),
                "capitalWorkInProgress": _a(2_000_000, 1_500_000),
                "otherIntangibleAssets": _a(2_000_000, 1_500_000),
                "intangibleAssetsUnderDevelopment": _a(500_000, 400_000),
                "financialAssets": {
                    "investments": _a(5_000_000, 4_000_000),
                    "loans": _a(1_000_000, 900_000),
                },
                "deferredTaxAssets": _a(300_000, 250_000),
                "otherNonCurrentAssets": _a(500_000, 400_000),
            },
            "currentAssets": {
                "inventories": _a(12_000_000, 10_000_000),
                "financialAssets": {
                    "investments": _a(2_000_000, 1_500_000),
                    "tradeReceivables": _a(15_000_000, 13_000_000),
                    "cashAndCashEquivalents": _a(6_000_000, 5_000_000),
                    "loans": _a(1_000_000, 800_000),
                },
                "otherCurrentAssets": _a(1_600_000, 1_350_000),
            },
            "equity": {
                "equityShareCapital": _a(10_000_000, 10_000_000),
                "otherEquity": _a(37_300_000, 32_450_000),
            },
            "nonCurrentLiabilities": {
                "financialLiabilities": {
                    "borrowings": _a(15_000_000, 12_000_000),
                },
                "provisions": _a(500_000, 400_000),
                "deferredTaxLiabilities": _a(800_000, 700_000),
            },
            "currentLiabilities": {
                "financialLiabilities": {
                    "borrowings": _a(5_000_000, 4_000_000),
                    "tradePayables": {
                        "microSmallEnterprisesDues": _a(500_000, 400_000),
                        "otherCreditorsDues": _a(7_500_000, 6_600_000),
                    },
                },
                "otherCurrentLiabilities": _a(2_000_000, 1_800_000),
                "provisions": _a(300_000, 250_000),
            },
        },
        "profitLoss": {
            "revenueFromOperations": {"amount": _a(80_000_000, 70_000_000)},
            "otherIncome": {"amount": _a(2_000_000, 1_500_000)},
            "expenses": {
                "costOfMaterialsConsumed": _a(35_000_000, 30_000_000),
                "purchasesOfStockInTrade": _a(5_000_000, 4_000_000),
                "changesInInventories": _a(2_000_000, 1_500_000),
                "employeeBenefitsExpense": _a(15_000_000, 13_000_000),
                "financeCosts": _a(2_000_000, 1_800_000),
                "depreciationAndAmortisation": _a(3_000_000, 2_800_000),
                "otherExpenses": _a(13_000_000, 12_000_000),
            },
            "taxExpense": {
                "currentTax": _a(2_700_000, 2_400_000),
                "deferredTax": _a(100_000, 80_000),
            },
            "earningsPerShareDiscontinued": {"basic": _a(4.8, 0)},
        },
        "cashFlow": {
            "operatingActivities": {
                "profitBeforeTax": _a(6_500_000, 6_000_000),
                "adjustments": {
                    "depreciationAndAmortisation": _a(3_000_000, 2_800_000),
                    "financeCosts": _a(2_000_000, 1_800_000),
                    "interestIncome": _a(-500_000, -450_000),
                    "otherAdjustments": _a(250_000, 200_000),
                },
                "changesInWorkingCapital": {
                    "tradeReceivables": _a(-2_000_000, -1_500_000),
                    "inventories": _a(-1_000_000, -800_000),
                    "tradePayables": _a(1_200_000, 1_000_000),
                    "otherWorkingCapitalChanges": _a(500_000, 400_000),
                },
                "incomeTaxesPaid": _a(-2_800_000, -2_500_000),
            },
            "investingActivities": {
                "purchaseOfPropertyPlantAndEquipment": _a(-3_500_000, -3_200_000),
                "proceedsFromSaleOfPropertyPlantAndEquipment": _a(500_000, 400_000),
                "purchaseOfInvestments": _a(-1_500_000, -1_200_000),
                "proceedsFromInvestments": _a(800_000, 600_000),
                "otherInvestingCashFlows": _a(-250_000, -200_000),
            },
            "financingActivities": {
                "proceedsFromShareCapital": _a(1_000_000, 500_000),
                "proceedsFromBorrowings": _a(2_500_000, 2_000_000),
                "repaymentOfBorrowings": _a(-1_500_000, -1_200_000),
                "dividendsPaid": _a(-1_000_000, -900_000),
                "interestPaid": _a(-2_000_000, -1_800_000),
                "otherFinancingCashFlows": _a(-150_000, -120_000),
            },
            "cashAndCashEquivalentsAtBeginning": _a(5_000_000, 4_500_000),
            "cashAndCashEquivalentsAtEnd": _a(6_000_000, 5_000_000),
        },
        "noteDetails": {},
        "breakdowns": {
            "66": [
                {"id": "net-profit", "description": "Net profit", "current": 19_200_000, "previous": 0},
                {"id": "equity-shares", "description": "No.of Equity Shares", "current": 4_000_000, "previous": 0},
            ],
        },
        "ppeBreakdowns": {
            "1": [
                {"id": "1", "description": "Land", "grossBlock": 30_000_000, "depreciation": 10_000_000},
                {"id": "2", "description": "Buildings", "grossBlock": 10_000_000, "depreciation": 0},
                {"id": "3", "description": "Plant and Equipment", "grossBlock": 0, "depreciation": 0},
                {"id": "4", "description": "Furniture and Fixtures", "grossBlock": 0, "depreciation": 0},
                {"id": "5", "description": "Vehicles", "grossBlock": 0, "depreciation": 0},
                {"id": "6", "description": "Office Equipment", "grossBlock": 0, "depreciation": 0},
            ],
        },
        "settings": {
            "template": {
                "primaryColor": "#2563eb",
                "secondaryColor": "#64748b",
                "fontStyle": "arial",
                "fontSize": 12,
                "paperSize": "A4",
            },
            "formatting": {
                "decimalPoints": 0,
                "unitOfMeasurement": "full-number",
                "numberStyle": "indian",
                "customNumberGrouping": "3,2",
            },
        },
    })
