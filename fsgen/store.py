"""
In-memory multi-company store.

Holds every open Company record and applies edits by logical path. The
engines in fsgen.metrics never mutate; all mutation happens here.
"""

import logging
from dataclasses import fields

from fsgen.metrics.cash_flow import generate_cash_flow_data
from fsgen.model.breakdowns import DerivedFromBreakdown, resolve_leaf_value
from fsgen.model.company import BreakdownItem, Company
from fsgen.model.paths import NOTE_LOCATIONS, leaf_for_note, set_path_value
from fsgen.parser.company_loader import parse_amount

logger = logging.getLogger(__name__)

_STATEMENT_FIELDS = {"balance_sheet", "profit_loss", "cash_flow"}


class CompanyNotFoundError(LookupError):
    """No company with the requested id is held by the store."""


class CompanyStore:
    def __init__(self, companies=None):
        self._companies = {}
        for company in companies or []:
            self.add_company(company)

    # ── Companies ─────────────────────────────────────────────────────────────

    def add_company(self, company: Company) -> Company:
        if company.id in self._companies:
            raise ValueError(f"Company id {company.id} already exists")
        self._companies[company.id] = company
        logger.info("Added company %s (%s)", company.id, company.name)
        return company

    def delete_company(self, company_id: int) -> None:
        if self._companies.pop(company_id, None) is None:
            raise CompanyNotFoundError(company_id)
        logger.info("Deleted company %s", company_id)

    def get_company(self, company_id: int) -> Company:
        try:
            return self._companies[company_id]
        except KeyError:
            raise CompanyNotFoundError(company_id) from None

    def list_companies(self) -> list:
        return list(self._companies.values())

    def next_id(self) -> int:
        return max(self._companies, default=0) + 1

    def update_company(self, company_id: int, **updates) -> Company:
        """Replace top-level company details (name, address, formatting, ...)."""
        company = self.get_company(company_id)
        allowed = {f.name for f in fields(Company)} - {"id"}
        unknown = set(updates) - allowed
        if unknown:
            raise ValueError(f"Unknown company fields: {', '.join(sorted(unknown))}")
        for name in _STATEMENT_FIELDS & set(updates):
            expected = type(getattr(company, name))
            if not isinstance(updates[name], expected):
                raise TypeError(f"{name} must be a {expected.__name__}")
        for name, value in updates.items():
            setattr(company, name, value)
        return company

    # ── Statement edits ───────────────────────────────────────────────────────

    def _update_statement(self, company_id: int, statement: str, path: str, value):
        company = self.get_company(company_id)
        if isinstance(value, str):
            value = parse_amount(value)
        leaf = set_path_value(getattr(company, statement), path, value)
        logger.debug("Company %s %s.%s = %s", company_id, statement, path, value)
        return leaf

    def update_company_bs(self, company_id: int, path: str, value):
        return self._update_statement(company_id, "balance_sheet", path, value)

    def update_company_pl(self, company_id: int, path: str, value):
        return self._update_statement(company_id, "profit_loss", path, value)

    def update_company_cf(self, company_id: int, path: str, value):
        return self._update_statement(company_id, "cash_flow", path, value)

    # ── Breakdowns ────────────────────────────────────────────────────────────

    def update_breakdown(self, company_id: int, note_key: str, items) -> Company:
        """
        Replace the generic breakdown list for a note and push the resolved
        totals into the mapped statement leaf.
        """
        company = self.get_company(company_id)
        key = str(note_key)
        company.breakdowns[key] = [
            item if isinstance(item, BreakdownItem) else BreakdownItem.from_dict(item)
            for item in items
        ]
        if key in NOTE_LOCATIONS:
            value = resolve_leaf_value(company, key)
            if isinstance(value, DerivedFromBreakdown):
                leaf = leaf_for_note(company, key)
                leaf.current = value.current
                leaf.previous = value.previous
        return company

    def regenerate_cash_flow(self, company_id: int) -> Company:
        company = self.get_company(company_id)
        company.cash_flow = generate_cash_flow_data(company)
        logger.info("Regenerated cash flow for company %s", company_id)
        return company
