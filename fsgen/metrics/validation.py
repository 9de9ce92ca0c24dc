"""
Cross-statement integrity checks.
Runs accounting identities over a company snapshot and reports error / warning /
success per rule. Failures are results, never exceptions: editing and export
carry on regardless.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from fsgen.metrics.aggregation import calculate_bs_total, calculate_cf_total
from fsgen.model.company import Company, coerce_amount

logger = logging.getLogger(__name__)

# Currency-unit rounding allowance; a difference must exceed this to fail
BALANCE_TOLERANCE = 1.0

RESULT_TYPES = ("error", "warning", "success")


@dataclass
class ValidationResult:
    """Outcome of one validation rule."""
    id: str
    type: str            # 'error', 'warning', 'success'
    message: str
    details: Optional[str] = None
    values: dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.type == "success"

    def to_dict(self) -> dict:
        data = {"id": self.id, "type": self.type, "message": self.message}
        if self.details is not None:
            data["details"] = self.details
        return data


# ── Rules ─────────────────────────────────────────────────────────────────────

def validate_balance_sheet(company: Company) -> list:
    totals = calculate_bs_total(company.balance_sheet)
    assets = totals.total_assets
    equity_and_liabilities = totals.total_equity_and_liabilities
    diff = abs(assets - equity_and_liabilities)
    values = {"total_assets": assets, "total_equity_and_liabilities": equity_and_liabilities, "difference": diff}

    if diff > BALANCE_TOLERANCE:
        return [ValidationResult(
            id="bs-balance",
            type="error",
            message="Balance Sheet Mismatch",
            details=(
                f"Assets ({assets:.2f}) ≠ Equity & Liabilities ({equity_and_liabilities:.2f}). "
                f"Diff: {diff:.2f}"
            ),
            values=values,
        )]
    return [ValidationResult(
        id="bs-balance",
        type="success",
        message="Balance Sheet Balanced",
        details="Total Assets match Total Equity & Liabilities",
        values=values,
    )]


def validate_cash_flow(company: Company) -> list:
    results = []
    cf_closing = coerce_amount(company.cash_flow.cash_and_cash_equivalents_at_end.current)
    bs_cash = coerce_amount(company.balance_sheet.current_assets.financial_assets.cash_and_cash_equivalents.current)
    diff = abs(cf_closing - bs_cash)
    values = {"cf_closing": cf_closing, "bs_cash": bs_cash, "difference": diff}

    if diff > BALANCE_TOLERANCE:
        results.append(ValidationResult(
            id="cf-bs-match",
            type="error",
            message="Cash Flow Closing Balance Mismatch",
            details=f"CF Closing ({cf_closing:.2f}) ≠ BS Cash ({bs_cash:.2f}). Diff: {diff:.2f}",
            values=values,
        ))
    else:
        results.append(ValidationResult(
            id="cf-bs-match",
            type="success",
            message="Cash Flow Matches Balance Sheet",
            details="Closing Cash Balance matches Balance Sheet figure",
            values=values,
        ))

    # Statement's own arithmetic: opening + net movement should reach the stored closing
    totals = calculate_cf_total(company.cash_flow)
    gap = abs(totals.closing_difference)
    values = {
        "calculated_closing": totals.calculated_closing,
        "stored_closing": totals.stored_closing,
        "difference": gap,
    }
    if gap > BALANCE_TOLERANCE:
        results.append(ValidationResult(
            id="cf-reconciliation",
            type="warning",
            message="Cash Flow Does Not Reconcile",
            details=(
                f"Opening + net movement ({totals.calculated_closing:.2f}) ≠ "
                f"stored closing ({totals.stored_closing:.2f}). Diff: {gap:.2f}"
            ),
            values=values,
        ))
    else:
        results.append(ValidationResult(
            id="cf-reconciliation",
            type="success",
            message="Cash Flow Reconciles",
            details="Opening cash plus net movement equals closing cash",
            values=values,
        ))
    return results


def run_all_validations(company: Company) -> list:
    """All rules in display order: balance sheet first, then cash flow."""
    results = validate_balance_sheet(company) + validate_cash_flow(company)
    for result in results:
        if result.type == "error":
            logger.warning("%s: %s (%s)", company.name, result.message, result.details)
        elif result.type == "warning":
            logger.info("%s: %s (%s)", company.name, result.message, result.details)
    return results


def summarise_validations(results: list) -> dict:
    """Counts per result type, as shown on the dashboard banner."""
    summary = {kind: 0 for kind in RESULT_TYPES}
    for result in results:
        summary[result.type] = summary.get(result.type, 0) + 1
    return summary
