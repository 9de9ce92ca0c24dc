"""
Company financial data model.

One Company record holds a full set of statements (Balance Sheet, Profit & Loss,
Cash Flow) as fixed trees of AmountWithNote leaves, plus the itemised breakdown
schedules that back individual notes.

Conventions:
  - Every leaf has a hard-coded internal note key, unique across the record:
      Balance Sheet  1 – 39
      Profit & Loss 40 – 69
      Cash Flow     70 – 92
  - current / previous are always finite floats (anything else is stored as 0).
  - JSON uses the camelCase keys of the editor; Python attributes are snake_case.
"""

import copy
import logging
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)


# ── Numeric coercion ──────────────────────────────────────────────────────────

def coerce_amount(value) -> float:
    """Return value as a finite float. None, NaN, inf and unparsable input become 0.0."""
    if value is None:
        return 0.0
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not np.isfinite(result):
        return 0.0
    return result


def camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _json_name(f) -> str:
    return f.metadata.get("json", camel_case(f.name))


# ── Leaf ──────────────────────────────────────────────────────────────────────

@dataclass
class AmountWithNote:
    """A single monetary line item with its internal note key."""
    current: float = 0.0
    previous: float = 0.0
    note: Optional[str] = None

    def __setattr__(self, name, value):
        if name in ("current", "previous"):
            value = coerce_amount(value)
        super().__setattr__(name, value)

    @property
    def has_value(self) -> bool:
        return self.current != 0 or self.previous != 0

    def to_dict(self) -> dict:
        data = {"current": self.current, "previous": self.previous}
        if self.note is not None:
            data["note"] = self.note
        return data


def _leaf(note: str, **meta):
    return field(default_factory=lambda: AmountWithNote(note=note), metadata=meta)


def _group(cls):
    return field(default_factory=cls)


# ── Balance Sheet ─────────────────────────────────────────────────────────────

@dataclass
class NonCurrentFinancialAssets:
    investments: AmountWithNote = _leaf("8")
    trade_receivables: AmountWithNote = _leaf("9")
    loans: AmountWithNote = _leaf("10")


@dataclass
class NonCurrentAssets:
    property_plant_equipment: AmountWithNote = _leaf("1")
    capital_work_in_progress: AmountWithNote = _leaf("2")
    investment_property: AmountWithNote = _leaf("3")
    goodwill: AmountWithNote = _leaf("4")
    other_intangible_assets: AmountWithNote = _leaf("5")
    intangible_assets_under_development: AmountWithNote = _leaf("6")
    biological_assets_other_than_bearer_plants: AmountWithNote = _leaf("7")
    financial_assets: NonCurrentFinancialAssets = _group(NonCurrentFinancialAssets)
    deferred_tax_assets: AmountWithNote = _leaf("11")
    other_non_current_assets: AmountWithNote = _leaf("12")


@dataclass
class CurrentFinancialAssets:
    investments: AmountWithNote = _leaf("14")
    trade_receivables: AmountWithNote = _leaf("15")
    cash_and_cash_equivalents: AmountWithNote = _leaf("16")
    bank_balances_other_than_cash: AmountWithNote = _leaf("17")
    loans: AmountWithNote = _leaf("18")
    others: AmountWithNote = _leaf("19")


@dataclass
class CurrentAssets:
    inventories: AmountWithNote = _leaf("13")
    financial_assets: CurrentFinancialAssets = _group(CurrentFinancialAssets)
    current_tax_assets: AmountWithNote = _leaf("20")
    other_current_assets: AmountWithNote = _leaf("21")


@dataclass
class Equity:
    equity_share_capital: AmountWithNote = _leaf("22")
    other_equity: AmountWithNote = _leaf("23")


@dataclass
class NonCurrentTradePayables:
    micro_small_enterprises_dues: AmountWithNote = _leaf("26")
    other_creditors_dues: AmountWithNote = _leaf("27")


@dataclass
class NonCurrentFinancialLiabilities:
    borrowings: AmountWithNote = _leaf("24")
    lease_liabilities: AmountWithNote = _leaf("25")
    trade_payables: NonCurrentTradePayables = _group(NonCurrentTradePayables)
    other_financial_liabilities: AmountWithNote = _leaf("28")


@dataclass
class NonCurrentLiabilities:
    financial_liabilities: NonCurrentFinancialLiabilities = _group(NonCurrentFinancialLiabilities)
    provisions: AmountWithNote = _leaf("29")
    deferred_tax_liabilities: AmountWithNote = _leaf("30")
    other_non_current_liabilities: AmountWithNote = _leaf("31")


@dataclass
class CurrentTradePayables:
    micro_small_enterprises_dues: AmountWithNote = _leaf("34")
    other_creditors_dues: AmountWithNote = _leaf("35")


@dataclass
class CurrentFinancialLiabilities:
    borrowings: AmountWithNote = _leaf("32")
    lease_liabilities: AmountWithNote = _leaf("33")
    trade_payables: CurrentTradePayables = _group(CurrentTradePayables)
    other_financial_liabilities: AmountWithNote = _leaf("36")


@dataclass
class CurrentLiabilities:
    financial_liabilities: CurrentFinancialLiabilities = _group(CurrentFinancialLiabilities)
    other_current_liabilities: AmountWithNote = _leaf("37")
    provisions: AmountWithNote = _leaf("38")
    current_tax_liabilities: AmountWithNote = _leaf("39")


@dataclass
class BalanceSheetData:
    # Assets first, then equity and liabilities (statement order)
    non_current_assets: NonCurrentAssets = _group(NonCurrentAssets)
    current_assets: CurrentAssets = _group(CurrentAssets)
    equity: Equity = _group(Equity)
    non_current_liabilities: NonCurrentLiabilities = _group(NonCurrentLiabilities)
    current_liabilities: CurrentLiabilities = _group(CurrentLiabilities)


# ── Profit & Loss ─────────────────────────────────────────────────────────────

@dataclass
class RevenueFromOperations:
    amount: AmountWithNote = _leaf("40")


@dataclass
class OtherIncome:
    amount: AmountWithNote = _leaf("41")


@dataclass
class ProfitLossExpenses:
    cost_of_materials_consumed: AmountWithNote = _leaf("42")
    purchases_of_stock_in_trade: AmountWithNote = _leaf("43")
    changes_in_inventories: AmountWithNote = _leaf("44")
    employee_benefits_expense: AmountWithNote = _leaf("45")
    finance_costs: AmountWithNote = _leaf("46")
    depreciation_and_amortisation: AmountWithNote = _leaf("47")
    other_expenses: AmountWithNote = _leaf("48")


@dataclass
class ExceptionalItems:
    amount: AmountWithNote = _leaf("49")


@dataclass
class TaxExpense:
    current_tax: AmountWithNote = _leaf("50")
    deferred_tax: AmountWithNote = _leaf("51")


@dataclass
class ItemsNotReclassified:
    remeasurement_of_net_defined_benefit: AmountWithNote = _leaf("57")
    equity_instruments_through_oci: AmountWithNote = _leaf("58", json="equityInstrumentsThroughOCI")
    income_tax_not_reclassified: AmountWithNote = _leaf("59")


@dataclass
class ItemsReclassified:
    exchange_differences: AmountWithNote = _leaf("60")
    debt_instruments_through_oci: AmountWithNote = _leaf("61", json="debtInstrumentsThroughOCI")
    income_tax_reclassified: AmountWithNote = _leaf("62")


@dataclass
class OtherComprehensiveIncome:
    items_not_reclassified: ItemsNotReclassified = _group(ItemsNotReclassified)
    items_reclassified: ItemsReclassified = _group(ItemsReclassified)


@dataclass
class EPSContinuing:
    basic: AmountWithNote = _leaf("64")
    diluted: AmountWithNote = _leaf("65")


@dataclass
class EPSDiscontinued:
    basic: AmountWithNote = _leaf("66")
    diluted: AmountWithNote = _leaf("67")


@dataclass
class EPSTotal:
    basic: AmountWithNote = _leaf("68")
    diluted: AmountWithNote = _leaf("69")


@dataclass
class ProfitLossData:
    revenue_from_operations: RevenueFromOperations = _group(RevenueFromOperations)
    other_income: OtherIncome = _group(OtherIncome)
    expenses: ProfitLossExpenses = _group(ProfitLossExpenses)
    exceptional_items: ExceptionalItems = _group(ExceptionalItems)
    tax_expense: TaxExpense = _group(TaxExpense)
    # Display mirrors: the aggregation engine is authoritative for these four
    profit_loss_from_continuing_operations: AmountWithNote = _leaf("52")
    profit_loss_from_discontinued_operations: AmountWithNote = _leaf("53")
    tax_expenses_of_discontinued_operations: AmountWithNote = _leaf("54")
    profit_loss_from_discontinued_operations_after_tax: AmountWithNote = _leaf("55")
    profit_loss_for_the_period: AmountWithNote = _leaf("56")
    other_comprehensive_income: OtherComprehensiveIncome = _group(OtherComprehensiveIncome)
    total_comprehensive_income_for_the_period: AmountWithNote = _leaf("63")
    earnings_per_share_continuing: EPSContinuing = _group(EPSContinuing)
    earnings_per_share_discontinued: EPSDiscontinued = _group(EPSDiscontinued)
    earnings_per_share_total: EPSTotal = _group(EPSTotal)


# ── Cash Flow ─────────────────────────────────────────────────────────────────

@dataclass
class CashFlowAdjustments:
    depreciation_and_amortisation: AmountWithNote = _leaf("71")
    finance_costs: AmountWithNote = _leaf("72")
    interest_income: AmountWithNote = _leaf("73")
    other_adjustments: AmountWithNote = _leaf("74")


@dataclass
class ChangesInWorkingCapital:
    trade_receivables: AmountWithNote = _leaf("75")
    inventories: AmountWithNote = _leaf("76")
    trade_payables: AmountWithNote = _leaf("77")
    other_working_capital_changes: AmountWithNote = _leaf("78")


@dataclass
class CashFlowOperatingActivities:
    profit_before_tax: AmountWithNote = _leaf("70")
    adjustments: CashFlowAdjustments = _group(CashFlowAdjustments)
    changes_in_working_capital: ChangesInWorkingCapital = _group(ChangesInWorkingCapital)
    income_taxes_paid: AmountWithNote = _leaf("79")


@dataclass
class CashFlowInvestingActivities:
    purchase_of_property_plant_and_equipment: AmountWithNote = _leaf("80")
    proceeds_from_sale_of_property_plant_and_equipment: AmountWithNote = _leaf("81")
    purchase_of_investments: AmountWithNote = _leaf("82")
    proceeds_from_investments: AmountWithNote = _leaf("83")
    other_investing_cash_flows: AmountWithNote = _leaf("84")


@dataclass
class CashFlowFinancingActivities:
    proceeds_from_share_capital: AmountWithNote = _leaf("85")
    proceeds_from_borrowings: AmountWithNote = _leaf("86")
    repayment_of_borrowings: AmountWithNote = _leaf("87")
    dividends_paid: AmountWithNote = _leaf("88")
    interest_paid: AmountWithNote = _leaf("89")
    other_financing_cash_flows: AmountWithNote = _leaf("90")


@dataclass
class CashFlowData:
    operating_activities: CashFlowOperatingActivities = _group(CashFlowOperatingActivities)
    investing_activities: CashFlowInvestingActivities = _group(CashFlowInvestingActivities)
    financing_activities: CashFlowFinancingActivities = _group(CashFlowFinancingActivities)
    cash_and_cash_equivalents_at_beginning: AmountWithNote = _leaf("91")
    cash_and_cash_equivalents_at_end: AmountWithNote = _leaf("92")


# ── Tree (de)serialisation ────────────────────────────────────────────────────

def tree_to_dict(tree) -> dict:
    """Serialise a statement tree to the camelCase JSON shape."""
    data = {}
    for f in fields(tree):
        value = getattr(tree, f.name)
        if isinstance(value, AmountWithNote):
            data[_json_name(f)] = value.to_dict()
        else:
            data[_json_name(f)] = tree_to_dict(value)
    return data


def tree_from_dict(tree_type, data: Optional[dict]):
    """
    Build a statement tree from camelCase JSON.
    Missing groups and leaves fall back to zero with their canonical note key,
    so the result is always fully populated.
    """
    data = data or {}
    kwargs = {}
    for f in fields(tree_type):
        raw = data.get(_json_name(f))
        if f.type is AmountWithNote:
            leaf = f.default_factory()
            if isinstance(raw, dict):
                leaf.current = raw.get("current")
                leaf.previous = raw.get("previous")
                if raw.get("note") not in (None, leaf.note):
                    logger.debug("Ignoring note key %r for %s", raw.get("note"), f.name)
            kwargs[f.name] = leaf
        elif is_dataclass(f.type):
            kwargs[f.name] = tree_from_dict(f.type, raw if isinstance(raw, dict) else None)
    return tree_type(**kwargs)


# ── Breakdown schedules ───────────────────────────────────────────────────────

class _Record:
    """Flat breakdown row: float fields are coerced, str fields default to ''."""

    def __post_init__(self):
        for f in fields(self):
            if f.type is float:
                object.__setattr__(self, f.name, coerce_amount(getattr(self, f.name)))
            elif f.type is str and getattr(self, f.name) is None:
                object.__setattr__(self, f.name, "")

    def to_dict(self) -> dict:
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if "items" in f.metadata:
                value = [item.to_dict() for item in value]
            data[_json_name(f)] = value
        return data

    @classmethod
    def from_dict(cls, data: Optional[dict]):
        data = data or {}
        kwargs = {}
        for f in fields(cls):
            key = _json_name(f)
            if key not in data:
                continue
            raw = data[key]
            if "items" in f.metadata:
                item_type = f.metadata["items"]
                kwargs[f.name] = [item_type.from_dict(item) for item in (raw or [])]
            elif f.type is str:
                kwargs[f.name] = "" if raw is None else str(raw)
            else:
                kwargs[f.name] = raw
        return cls(**kwargs)


def _items(item_type):
    return field(default_factory=list, metadata={"items": item_type})


@dataclass
class BreakdownItem(_Record):
    id: str = ""
    description: str = ""
    current: float = 0.0
    previous: float = 0.0


@dataclass
class PPEBreakdownItem(_Record):
    id: str = ""
    description: str = ""
    gross_block: float = 0.0
    depreciation: float = 0.0

    @property
    def net_block(self) -> float:
        return self.gross_block - self.depreciation


@dataclass
class ShareCapitalItem(_Record):
    id: str = ""
    description: str = ""
    current_amount: float = 0.0
    previous_amount: float = 0.0


@dataclass
class ReconciliationItem(_Record):
    id: str = ""
    description: str = ""
    current_count: float = 0.0
    current_amount: float = 0.0
    previous_count: float = 0.0
    previous_amount: float = 0.0


@dataclass
class ShareholderItem(_Record):
    id: str = ""
    name: str = ""
    current_count: float = 0.0
    current_percentage: float = 0.0
    previous_count: float = 0.0
    previous_percentage: float = 0.0


@dataclass
class PromoterItem(_Record):
    id: str = ""
    name: str = ""
    current_count: float = 0.0
    current_percentage: float = 0.0
    change_percentage: float = 0.0


@dataclass
class ShareCapitalData(_Record):
    authorised: list = _items(ShareCapitalItem)
    issued: list = _items(ShareCapitalItem)
    reconciliation: list = _items(ReconciliationItem)
    shareholders: list = _items(ShareholderItem)
    promoters: list = _items(PromoterItem)


@dataclass
class BorrowingItem(_Record):
    id: str = ""
    description: str = ""
    current_amount: float = 0.0
    previous_amount: float = 0.0


@dataclass
class BorrowingsData(_Record):
    secured: list = _items(BorrowingItem)
    unsecured: list = _items(BorrowingItem)
    security_details: str = ""


@dataclass
class TradePayableItem(_Record):
    id: str = ""
    description: str = ""
    less_than_1_year: float = 0.0
    one_to_two_years: float = 0.0
    two_to_three_years: float = 0.0
    more_than_3_years: float = 0.0
    not_due: float = 0.0

    @property
    def total(self) -> float:
        return (self.less_than_1_year + self.one_to_two_years + self.two_to_three_years
                + self.more_than_3_years + self.not_due)


@dataclass
class TradePayablesData(_Record):
    msme: list = _items(TradePayableItem)
    others: list = _items(TradePayableItem)
    disputed_msme: list = _items(TradePayableItem)
    disputed_others: list = _items(TradePayableItem)
    disclosures: str = ""

    @property
    def sections(self) -> list:
        return [self.msme, self.others, self.disputed_msme, self.disputed_others]


# ── Settings ──────────────────────────────────────────────────────────────────

UNITS_OF_MEASUREMENT = (
    "full-number", "thousands", "ten-thousands", "lakhs",
    "crores", "ten-crores", "hundred-crores",
)
NUMBER_STYLES = ("indian", "international", "none", "custom")


@dataclass
class FormattingSettings:
    unit_of_measurement: str = "full-number"
    decimal_points: int = 0
    number_style: str = "indian"
    custom_number_grouping: str = "3,2"
    # Presentation-only keys (table design, signature blocks) are kept verbatim
    extra: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        data = dict(self.extra)
        data.update({
            "unitOfMeasurement": self.unit_of_measurement,
            "decimalPoints": self.decimal_points,
            "numberStyle": self.number_style,
            "customNumberGrouping": self.custom_number_grouping,
        })
        return data

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "FormattingSettings":
        data = dict(data or {})
        unit = data.pop("unitOfMeasurement", "full-number")
        if unit not in UNITS_OF_MEASUREMENT:
            logger.warning("Unknown unit of measurement %r, using full-number", unit)
            unit = "full-number"
        style = data.pop("numberStyle", "indian")
        if style not in NUMBER_STYLES:
            logger.warning("Unknown number style %r, using indian", style)
            style = "indian"
        try:
            decimals = max(0, int(data.pop("decimalPoints", 0)))
        except (TypeError, ValueError):
            decimals = 0
        grouping = data.pop("customNumberGrouping", None) or "3,2"
        return cls(unit, decimals, style, str(grouping), data)


# ── Company ───────────────────────────────────────────────────────────────────

SECTORS = ("Primary", "Secondary", "Tertiary", "Quaternary")


def _keyed(mapping: Optional[dict], load) -> dict:
    return {str(key): load(value) for key, value in (mapping or {}).items()}


@dataclass
class Company:
    id: int
    name: str = ""
    address: str = ""
    cin: str = ""
    sector: str = "Secondary"
    specifications: str = ""
    pan: str = ""
    financial_year: str = ""
    year_end: str = ""
    prev_year_end: str = ""
    balance_sheet: BalanceSheetData = _group(BalanceSheetData)
    profit_loss: ProfitLossData = _group(ProfitLossData)
    cash_flow: CashFlowData = _group(CashFlowData)
    note_details: dict = field(default_factory=dict)
    breakdowns: dict = field(default_factory=dict)
    ppe_breakdowns: dict = field(default_factory=dict)
    share_capital_details: dict = field(default_factory=dict)
    borrowings_details: dict = field(default_factory=dict)
    trade_payables_details: dict = field(default_factory=dict)
    formatting: FormattingSettings = _group(FormattingSettings)
    template: dict = field(default_factory=dict)

    @classmethod
    def create(cls, company_id: int, name: str, **details) -> "Company":
        """New company with every statement leaf present and zero."""
        return cls(id=company_id, name=name, **details)

    def copy(self) -> "Company":
        return copy.deepcopy(self)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "cin": self.cin,
            "sector": self.sector,
            "specifications": self.specifications,
            "pan": self.pan,
            "financialYear": self.financial_year,
            "yearEnd": self.year_end,
            "prevYearEnd": self.prev_year_end,
            "balanceSheet": tree_to_dict(self.balance_sheet),
            "profitLoss": tree_to_dict(self.profit_loss),
            "cashFlow": tree_to_dict(self.cash_flow),
            "noteDetails": dict(self.note_details),
            "breakdowns": {k: [i.to_dict() for i in v] for k, v in self.breakdowns.items()},
            "ppeBreakdowns": {k: [i.to_dict() for i in v] for k, v in self.ppe_breakdowns.items()},
            "shareCapitalDetails": {k: v.to_dict() for k, v in self.share_capital_details.items()},
            "borrowingsDetails": {k: v.to_dict() for k, v in self.borrowings_details.items()},
            "tradePayablesDetails": {k: v.to_dict() for k, v in self.trade_payables_details.items()},
            "settings": {"template": dict(self.template), "formatting": self.formatting.to_dict()},
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Company":
        settings = data.get("settings") or {}
        sector = data.get("sector") or "Secondary"
        if sector not in SECTORS:
            logger.warning("Unknown sector %r for company %r", sector, data.get("name"))
        return cls(
            id=int(data.get("id") or 0),
            name=data.get("name") or "",
            address=data.get("address") or "",
            cin=data.get("cin") or "",
            sector=sector,
            specifications=data.get("specifications") or "",
            pan=data.get("pan") or "",
            financial_year=data.get("financialYear") or "",
            year_end=data.get("yearEnd") or "",
            prev_year_end=data.get("prevYearEnd") or "",
            balance_sheet=tree_from_dict(BalanceSheetData, data.get("balanceSheet")),
            profit_loss=tree_from_dict(ProfitLossData, data.get("profitLoss")),
            cash_flow=tree_from_dict(CashFlowData, data.get("cashFlow")),
            note_details={str(k): str(v) for k, v in (data.get("noteDetails") or {}).items()},
            breakdowns=_keyed(data.get("breakdowns"),
                              lambda items: [BreakdownItem.from_dict(i) for i in items or []]),
            ppe_breakdowns=_keyed(data.get("ppeBreakdowns"),
                                  lambda items: [PPEBreakdownItem.from_dict(i) for i in items or []]),
            share_capital_details=_keyed(data.get("shareCapitalDetails"), ShareCapitalData.from_dict),
            borrowings_details=_keyed(data.get("borrowingsDetails"), BorrowingsData.from_dict),
            trade_payables_details=_keyed(data.get("tradePayablesDetails"), TradePayablesData.from_dict),
            formatting=FormattingSettings.from_dict(settings.get("formatting")),
            template=dict(settings.get("template") or {}),
        )
