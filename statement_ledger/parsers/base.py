"""Base class and shared types for bank statement parsers."""

import re
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date

from ..models import EXPENSE, INCOME


class StatementError(ValueError):
    """A statement file could not be turned into transactions."""


class UnsupportedFormatError(StatementError):
    """The file type is not one of the supported statement formats."""


class StatementParseError(StatementError):
    """The file was read but its layout was not recognized."""


@dataclass
class RawTransaction:
    """A transaction as extracted from a statement, before categorization."""
    id: str
    date: str
    description: str
    amount: float
    type: str
    counterparty: str = ""
    operation: str = ""
    raw_text: str = ""


@dataclass
class Matched:
    transaction: RawTransaction


@dataclass
class Skipped:
    line: str
    reason: str


ParseOutcome = Matched | Skipped


@dataclass
class StatementData:
    """Parsed data from a statement file."""
    bank: str
    transactions: list[RawTransaction] = field(default_factory=list)
    skipped: list[Skipped] = field(default_factory=list)
    extracted_text: str = ""

    @property
    def income_count(self) -> int:
        return sum(1 for tx in self.transactions if tx.type == INCOME)

    @property
    def expense_count(self) -> int:
        return sum(1 for tx in self.transactions if tx.type == EXPENSE)

    @property
    def total_amount(self) -> float:
        return sum(tx.amount for tx in self.transactions)


_ISO_DATE_RE = re.compile(r"^(\d{4})[.\-/](\d{1,2})[.\-/](\d{1,2})$")
_DAY_FIRST_DATE_RE = re.compile(r"^(\d{1,2})[.\-/](\d{1,2})[.\-/](\d{4}|\d{2})$")


def expand_year(year: int) -> int:
    """Expand a two-digit year: below 50 is 20xx, otherwise 19xx."""
    if year >= 100:
        return year
    return 2000 + year if year < 50 else 1900 + year


def parse_date(value: str) -> str | None:
    """Normalize YYYY-MM-DD, DD.MM.YYYY or DD.MM.YY to ISO, or None."""
    if not value:
        return None
    tokens = value.strip().strip('"').split()
    if not tokens:
        return None
    token = tokens[0]

    match = _ISO_DATE_RE.match(token)
    if match:
        year, month, day = (int(part) for part in match.groups())
    else:
        match = _DAY_FIRST_DATE_RE.match(token)
        if not match:
            return None
        day, month, year = (int(part) for part in match.groups())
        year = expand_year(year)

    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def parse_amount(value: str) -> float | None:
    """Parse a signed amount with currency symbols and grouping spaces.

    A comma is the decimal separator unless a later period says otherwise.
    """
    if not value:
        return None
    cleaned = re.sub(r"[^\d,.+\-]", "", value.replace("\u2212", "-"))
    if not re.search(r"\d", cleaned):
        return None

    negative = cleaned.startswith("-")
    cleaned = cleaned.lstrip("+-")

    if "," in cleaned and "." in cleaned:
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    else:
        cleaned = cleaned.replace(",", ".")

    try:
        amount = float(cleaned)
    except ValueError:
        return None
    return -amount if negative else amount


def new_transaction_id(prefix: str = "tx") -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def direction(amount: float) -> str:
    """Income for zero or positive amounts, expense for negative ones."""
    return INCOME if amount >= 0 else EXPENSE


class BaseBankParser(ABC):
    """Abstract base class for bank statement text parsers.

    To add support for a new bank:
    1. Create a new file in statement_ledger/parsers/ (e.g., jusan.py)
    2. Create a class that inherits from BaseBankParser
    3. Implement bank_name(), matches() and parse_text()
    4. Decorate it with @register_parser; it will be auto-discovered
    """

    # Lower values are tried first when sniffing which bank issued a statement
    priority: int = 100

    @classmethod
    @abstractmethod
    def bank_name(cls) -> str:
        """Return the bank identifier (e.g., 'kaspi', 'halyk')."""
        pass

    @abstractmethod
    def matches(self, text: str) -> bool:
        """Return True if the extracted text looks like this bank's statement."""
        pass

    @abstractmethod
    def parse_text(self, text: str) -> StatementData:
        """Parse extracted statement text into raw transactions.

        Raises:
            StatementParseError: If the statement layout is not recognized
                or no transactions could be found
        """
        pass

    def _new_transaction(
        self,
        tx_date: str,
        description: str,
        amount: float,
        operation: str = "",
        raw_text: str = "",
    ) -> RawTransaction:
        return RawTransaction(
            id=new_transaction_id(self.bank_name()),
            date=tx_date,
            description=description,
            amount=abs(amount),
            type=direction(amount),
            operation=operation,
            raw_text=raw_text,
        )
