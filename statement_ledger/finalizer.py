"""Turn raw parsed transactions into categorized ledger entries."""

from .categories import EQUIPMENT_CATEGORY, FINANCING_CATEGORIES
from .classifier import CategoryClassifier
from .counterparty import extract_counterparty
from .models import FINANCING, INVESTING, OPERATING, Transaction
from .parsers.base import RawTransaction


def finalize(raw: RawTransaction, classifier: CategoryClassifier) -> Transaction:
    """Categorize a raw transaction and decide its cash flow activity.

    Equipment purchases are capitalized as investing activity, loans,
    dividends and founder contributions are financing activity, and
    everything else is operating.
    """
    counterparty = raw.counterparty or extract_counterparty(raw.description, raw.operation)
    category = classifier.classify(raw.description, counterparty, raw.operation)

    transaction_type = OPERATING
    is_capitalized = False
    if category == EQUIPMENT_CATEGORY:
        transaction_type = INVESTING
        is_capitalized = True
    elif category in FINANCING_CATEGORIES:
        transaction_type = FINANCING

    return Transaction(
        id=raw.id,
        date=raw.date,
        description=raw.description,
        amount=abs(raw.amount),
        type=raw.type,
        category=category,
        transaction_type=transaction_type,
        is_capitalized=is_capitalized,
        counterparty=counterparty,
        needs_clarification=False,
    )


def finalize_all(
    raw_transactions: list[RawTransaction],
    classifier: CategoryClassifier | None = None,
) -> list[Transaction]:
    classifier = classifier or CategoryClassifier()
    return [finalize(raw, classifier) for raw in raw_transactions]
