"""Financial statements derived from a categorized transaction list."""

import logging
from collections import defaultdict
from datetime import date

from .categories import (
    DEPRECIATION_CATEGORY,
    DIVIDENDS_PAID,
    INTERNAL_COUNTERPARTIES,
    LOAN_GIVEN,
    LOAN_RECEIVED,
    LOAN_REPAID,
    LOAN_RETURNED,
    OWNER_CONTRIBUTION,
)
from .models import (
    EXPENSE,
    FINANCING,
    INCOME,
    INVESTING,
    OPERATING,
    Assets,
    BalanceSheetData,
    CashFlowData,
    CashFlowDetails,
    CashFlowMonth,
    CategoryAmount,
    CounterpartyBalance,
    DateRange,
    DebtEntry,
    DebtReport,
    Equity,
    FinancialReport,
    Liabilities,
    PnLData,
    PnLMonth,
    Transaction,
)

logger = logging.getLogger(__name__)

# Equipment is written off straight-line over three years
DEPRECIATION_MONTHS = 36

_MONTH_ABBREVIATIONS = (
    "янв.", "февр.", "март", "апр.", "май", "июнь",
    "июль", "авг.", "сент.", "окт.", "нояб.", "дек.",
)


def month_label(period: str) -> str:
    """Russian short month label for a YYYY-MM period, e.g. 'янв. 2024 г.'."""
    year, month = period.split("-")
    return f"{_MONTH_ABBREVIATIONS[int(month) - 1]} {year} г."


def months_spanned(start: str, end: str) -> int:
    """Calendar months from start to end, counting both endpoints."""
    first = date.fromisoformat(start)
    last = date.fromisoformat(end)
    return (last.year - first.year) * 12 + (last.month - first.month) + 1


def filter_by_date_range(
    transactions: list[Transaction],
    start: str | None = None,
    end: str | None = None,
) -> list[Transaction]:
    """Keep transactions dated within the inclusive ISO date bounds."""
    return [
        tx for tx in transactions
        if (start is None or tx.date >= start) and (end is None or tx.date <= end)
    ]


def _is_internal(counterparty: str) -> bool:
    lowered = counterparty.lower()
    return any(fragment in lowered for fragment in INTERNAL_COUNTERPARTIES)


def _sum_category(transactions: list[Transaction], category: str) -> float:
    return sum(tx.amount for tx in transactions if tx.category == category)


def _build_debt_report(transactions: list[Transaction]) -> DebtReport:
    """Net loans given and received per counterparty.

    Only balances that are still positive after rounding are reported.
    """
    receivables: dict[str, float] = defaultdict(float)
    payables: dict[str, float] = defaultdict(float)

    for tx in transactions:
        counterparty = tx.counterparty.strip()
        if not counterparty:
            continue

        if tx.category == LOAN_GIVEN:
            receivables[counterparty] += tx.amount
        elif tx.category == LOAN_RETURNED:
            receivables[counterparty] -= tx.amount
        elif tx.category == LOAN_RECEIVED:
            payables[counterparty] += tx.amount
        elif tx.category == LOAN_REPAID:
            payables[counterparty] -= tx.amount

    receivable_entries = [
        DebtEntry(counterparty=name, amount=amount)
        for name, amount in receivables.items() if round(amount) > 0
    ]
    payable_entries = [
        DebtEntry(counterparty=name, amount=amount)
        for name, amount in payables.items() if round(amount) > 0
    ]
    return DebtReport(
        receivables=receivable_entries,
        payables=payable_entries,
        total_receivables=sum(entry.amount for entry in receivable_entries),
        total_payables=sum(entry.amount for entry in payable_entries),
    )


def _build_counterparty_report(transactions: list[Transaction]) -> list[CounterpartyBalance]:
    balances: dict[str, CounterpartyBalance] = {}

    for tx in transactions:
        counterparty = tx.counterparty.strip()
        if not counterparty or _is_internal(counterparty):
            continue

        entry = balances.setdefault(counterparty, CounterpartyBalance(name=counterparty))
        if tx.type == INCOME:
            entry.income += tx.amount
        else:
            entry.expense += tx.amount
        entry.balance += tx.signed_amount

    return sorted(balances.values(), key=lambda entry: abs(entry.balance), reverse=True)


def generate_financial_report(
    transactions: list[Transaction],
    depreciation_months: int = DEPRECIATION_MONTHS,
) -> FinancialReport:
    """Build P&L, cash flow, balance sheet, counterparty and debt reports.

    Equipment purchases are excluded from expenses and depreciated
    straight-line over ``depreciation_months``, charged for every calendar
    month the transactions span. Empty input produces an all-zero report.
    """
    if not transactions:
        return FinancialReport()

    ordered = sorted(transactions, key=lambda tx: tx.date)
    first_date, last_date = ordered[0].date, ordered[-1].date

    # Depreciation
    equipment_cost = sum(tx.amount for tx in ordered if tx.type == EXPENSE and tx.is_capitalized)
    monthly_depreciation = equipment_cost / depreciation_months if equipment_cost > 0 else 0.0
    total_depreciation = monthly_depreciation * months_spanned(first_date, last_date)

    # Monthly buckets, keyed by YYYY-MM so they sort chronologically
    revenue_by_month: dict[str, float] = defaultdict(float)
    opex_by_month: dict[str, float] = defaultdict(float)
    inflow_by_month: dict[str, float] = defaultdict(float)
    outflow_by_month: dict[str, float] = defaultdict(float)
    expense_by_category: dict[str, float] = defaultdict(float)

    for tx in ordered:
        period = tx.date[:7]
        if tx.type == INCOME:
            inflow_by_month[period] += tx.amount
            if tx.transaction_type == OPERATING:
                revenue_by_month[period] += tx.amount
        else:
            outflow_by_month[period] += tx.amount
            if tx.transaction_type == OPERATING and not tx.is_capitalized:
                opex_by_month[period] += tx.amount
                expense_by_category[tx.category] += tx.amount

    if total_depreciation > 0:
        expense_by_category[DEPRECIATION_CATEGORY] = total_depreciation

    periods = sorted(inflow_by_month.keys() | outflow_by_month.keys())

    # Profit and loss
    pnl_months = []
    for period in periods:
        expenses = opex_by_month[period] + monthly_depreciation
        pnl_months.append(PnLMonth(
            month=month_label(period),
            period=period,
            revenue=revenue_by_month[period],
            expenses=expenses,
            profit=revenue_by_month[period] - expenses,
        ))

    total_revenue = sum(revenue_by_month.values())
    total_operating_expenses = sum(opex_by_month.values())
    operating_profit = total_revenue - total_operating_expenses
    net_profit = operating_profit - total_depreciation

    pnl = PnLData(
        total_revenue=total_revenue,
        total_operating_expenses=total_operating_expenses,
        depreciation=total_depreciation,
        operating_profit=operating_profit,
        net_profit=net_profit,
        operating_margin=operating_profit / (total_revenue or 1),
        net_margin=net_profit / (total_revenue or 1),
        monthly_data=pnl_months,
        expense_by_category=sorted(
            (CategoryAmount(name=name, value=value) for name, value in expense_by_category.items()),
            key=lambda item: item.value,
            reverse=True,
        ),
    )

    # Cash flow
    activities = {OPERATING: 0.0, INVESTING: 0.0, FINANCING: 0.0}
    for tx in ordered:
        activities[tx.transaction_type] = activities.get(tx.transaction_type, 0.0) + tx.signed_amount

    owner_contributions = _sum_category(ordered, OWNER_CONTRIBUTION)
    dividends = _sum_category(ordered, DIVIDENDS_PAID)

    cash_flow = CashFlowData(
        net_cash_flow=sum(activities.values()),
        operating_activities=activities[OPERATING],
        investing_activities=activities[INVESTING],
        financing_activities=activities[FINANCING],
        details=CashFlowDetails(
            capital_expenditures=equipment_cost,
            debt_proceeds=_sum_category(ordered, LOAN_RECEIVED),
            debt_repayments=_sum_category(ordered, LOAN_REPAID),
            dividends=dividends,
            owner_contributions=owner_contributions,
        ),
        monthly_data=[
            CashFlowMonth(
                month=month_label(period),
                period=period,
                inflow=inflow_by_month[period],
                outflow=outflow_by_month[period],
                net=inflow_by_month[period] - outflow_by_month[period],
            )
            for period in periods
        ],
    )

    debt_report = _build_debt_report(ordered)

    # Balance sheet
    net_equipment = equipment_cost - total_depreciation
    retained_earnings = net_profit - dividends
    total_equity = retained_earnings + owner_contributions
    total_liabilities = debt_report.total_payables

    balance_sheet = BalanceSheetData(
        assets=Assets(
            cash=cash_flow.net_cash_flow,
            receivables=debt_report.total_receivables,
            equipment=equipment_cost,
            accumulated_depreciation=total_depreciation,
            net_equipment=net_equipment,
            total_assets=cash_flow.net_cash_flow + debt_report.total_receivables + net_equipment,
        ),
        liabilities=Liabilities(payables=total_liabilities, total_liabilities=total_liabilities),
        equity=Equity(
            retained_earnings=retained_earnings,
            owner_contributions=owner_contributions,
            total_equity=total_equity,
        ),
        total_liabilities_and_equity=total_liabilities + total_equity,
    )
    if not balance_sheet.is_balanced:
        logger.warning(
            "Balance sheet does not balance: assets differ from liabilities and equity by %.2f",
            balance_sheet.imbalance,
        )

    return FinancialReport(
        pnl=pnl,
        cash_flow=cash_flow,
        balance_sheet=balance_sheet,
        counterparty_report=_build_counterparty_report(ordered),
        debt_report=debt_report,
        date_range=DateRange(start=first_date, end=last_date),
    )
