"""Canonical transaction and financial report structures."""

from dataclasses import asdict, dataclass, field

INCOME = "income"
EXPENSE = "expense"

OPERATING = "operating"
INVESTING = "investing"
FINANCING = "financing"


@dataclass(frozen=True)
class Transaction:
    """A finalized, categorized transaction."""
    id: str
    date: str
    description: str
    amount: float
    type: str
    category: str
    transaction_type: str = OPERATING
    is_capitalized: bool = False
    counterparty: str = ""
    needs_clarification: bool = False

    @property
    def signed_amount(self) -> float:
        """Amount with income positive and expense negative."""
        return self.amount if self.type == INCOME else -self.amount

    def to_dict(self) -> dict:
        """Serialize using the field names report renderers expect."""
        return {
            "id": self.id,
            "date": self.date,
            "description": self.description,
            "amount": self.amount,
            "type": self.type,
            "category": self.category,
            "counterparty": self.counterparty,
            "transactionType": self.transaction_type,
            "isCapitalized": self.is_capitalized,
            "needsClarification": self.needs_clarification,
        }


@dataclass
class CategoryAmount:
    name: str
    value: float


@dataclass
class PnLMonth:
    month: str
    period: str
    revenue: float = 0.0
    expenses: float = 0.0
    profit: float = 0.0


@dataclass
class PnLData:
    """Profit and loss statement for the whole period."""
    total_revenue: float = 0.0
    total_operating_expenses: float = 0.0
    depreciation: float = 0.0
    operating_profit: float = 0.0
    net_profit: float = 0.0
    operating_margin: float = 0.0
    net_margin: float = 0.0
    monthly_data: list[PnLMonth] = field(default_factory=list)
    expense_by_category: list[CategoryAmount] = field(default_factory=list)


@dataclass
class CashFlowMonth:
    month: str
    period: str
    inflow: float = 0.0
    outflow: float = 0.0
    net: float = 0.0


@dataclass
class CashFlowDetails:
    capital_expenditures: float = 0.0
    debt_proceeds: float = 0.0
    debt_repayments: float = 0.0
    dividends: float = 0.0
    owner_contributions: float = 0.0


@dataclass
class CashFlowData:
    """Cash flow statement split by activity."""
    net_cash_flow: float = 0.0
    operating_activities: float = 0.0
    investing_activities: float = 0.0
    financing_activities: float = 0.0
    details: CashFlowDetails = field(default_factory=CashFlowDetails)
    monthly_data: list[CashFlowMonth] = field(default_factory=list)


@dataclass
class Assets:
    cash: float = 0.0
    receivables: float = 0.0
    equipment: float = 0.0
    accumulated_depreciation: float = 0.0
    net_equipment: float = 0.0
    total_assets: float = 0.0


@dataclass
class Liabilities:
    payables: float = 0.0
    total_liabilities: float = 0.0


@dataclass
class Equity:
    retained_earnings: float = 0.0
    owner_contributions: float = 0.0
    total_equity: float = 0.0


@dataclass
class BalanceSheetData:
    """Balance sheet assembled from cash, debts and equipment."""
    assets: Assets = field(default_factory=Assets)
    liabilities: Liabilities = field(default_factory=Liabilities)
    equity: Equity = field(default_factory=Equity)
    total_liabilities_and_equity: float = 0.0

    @property
    def imbalance(self) -> float:
        """Assets minus liabilities and equity; zero when the identity holds."""
        return self.assets.total_assets - self.total_liabilities_and_equity

    @property
    def is_balanced(self) -> bool:
        return abs(self.imbalance) < 0.01


@dataclass
class CounterpartyBalance:
    name: str
    income: float = 0.0
    expense: float = 0.0
    balance: float = 0.0


@dataclass
class DebtEntry:
    counterparty: str
    amount: float


@dataclass
class DebtReport:
    receivables: list[DebtEntry] = field(default_factory=list)
    payables: list[DebtEntry] = field(default_factory=list)
    total_receivables: float = 0.0
    total_payables: float = 0.0


@dataclass
class DateRange:
    start: str = ""
    end: str = ""


@dataclass
class FinancialReport:
    """All statements derived from one list of transactions."""
    pnl: PnLData = field(default_factory=PnLData)
    cash_flow: CashFlowData = field(default_factory=CashFlowData)
    balance_sheet: BalanceSheetData = field(default_factory=BalanceSheetData)
    counterparty_report: list[CounterpartyBalance] = field(default_factory=list)
    debt_report: DebtReport = field(default_factory=DebtReport)
    date_range: DateRange = field(default_factory=DateRange)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["balance_sheet"]["imbalance"] = self.balance_sheet.imbalance
        data["balance_sheet"]["is_balanced"] = self.balance_sheet.is_balanced
        return data
