# Path: tests/conftest.py
"""
Pytest Configuration and Shared Fixtures for fsgen

Provides the company records used across the test modules:
- empty_company: every leaf present and zero
- demo_company: the bundled ABC Limited sample
- balanced_company: a small hand-checked record that balances
"""

import sys
from pathlib import Path

import pytest

# Add repo root to path for imports
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))
sys.path.insert(0, str(ROOT / "tests" / "fixtures"))

from fsgen.model.company import Company
from fsgen.parser.company_loader import get_demo_company, save_company

FSGEN_ENV_VARS = (
    "FSGEN_LOG_LEVEL",
    "FSGEN_UNIT",
    "FSGEN_DECIMALS",
    "FSGEN_NUMBER_STYLE",
    "FSGEN_FIRM_NAME",
)


# ==============================================================================
# COMPANY FIXTURES
# ==============================================================================

@pytest.fixture
def empty_company():
    """Company with no amounts entered."""
    return Company.create(1, "Empty Co", financial_year="2024-25",
                          year_end="31 March 2025", prev_year_end="31 March 2024")


@pytest.fixture
def demo_company():
    """ABC Limited sample company."""
    return get_demo_company()


@pytest.fixture
def balanced_company():
    """
    Small company whose balance sheet balances in both years.

    Assets:  PPE 2000/1800, inventories 500/400, cash 1000/800  = 3500/3000
    E & L:   share capital 1000/1000, other equity 1500/1200,
             trade payables (other creditors) 1000/800          = 3500/3000
    P&L:     revenue 5000/4000, employees 3000/2500, other 1200/1000,
             current tax 200/100                                -> profit 600/400
    """
    company = Company.create(2, "Balanced Pvt Ltd", financial_year="2024-25",
                             year_end="31 March 2025", prev_year_end="31 March 2024")
    bs = company.balance_sheet
    pl = company.profit_loss
    cf = company.cash_flow

    def put(leaf, current, previous):
        leaf.current = current
        leaf.previous = previous

    put(bs.non_current_assets.property_plant_equipment, 2000, 1800)
    put(bs.current_assets.inventories, 500, 400)
    put(bs.current_assets.financial_assets.cash_and_cash_equivalents, 1000, 800)
    put(bs.equity.equity_share_capital, 1000, 1000)
    put(bs.equity.other_equity, 1500, 1200)
    put(bs.current_liabilities.financial_liabilities.trade_payables.other_creditors_dues, 1000, 800)

    put(pl.revenue_from_operations.amount, 5000, 4000)
    put(pl.expenses.employee_benefits_expense, 3000, 2500)
    put(pl.expenses.other_expenses, 1200, 1000)
    put(pl.tax_expense.current_tax, 200, 100)

    put(cf.cash_and_cash_equivalents_at_end, 1000, 800)
    return company


@pytest.fixture
def demo_file(tmp_path, demo_company):
    """ABC Limited written to a JSON file."""
    return save_company(demo_company, tmp_path / "abc.json")


# ==============================================================================
# ENVIRONMENT FIXTURES
# ==============================================================================

@pytest.fixture
def clean_env(monkeypatch):
    """Remove every FSGEN_* variable for the duration of a test."""
    for name in FSGEN_ENV_VARS:
        # setenv first so teardown also removes values a .env file adds
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    yield
