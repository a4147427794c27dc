"""Kaspi Bank statement parser.

Also used as the fallback for statements whose bank is not recognized.
"""

import logging
import re

from . import register_parser
from .base import (
    BaseBankParser,
    Matched,
    ParseOutcome,
    Skipped,
    StatementData,
    StatementParseError,
    parse_amount,
    parse_date,
)

logger = logging.getLogger(__name__)

TABLE_HEADER = "Дата Сумма Операция Детали"

_PAGE_HEADER_RE = re.compile(r"АО\s*«Kaspi\s*Bank»,\s*БИК\s*CASPKZKA,\s*www\.kaspi\.kz")
_TABLE_HEADER_RE = re.compile(r"Дата\s+Сумма\s+Операция\s+Детали")
_DATE_SPLIT_RE = re.compile(r"(?<!\d)(\d{2}\.\d{2}\.\d{2})\s+")
_LINE_RE = re.compile(
    r"^(?P<date>\d{2}\.\d{2}\.\d{2})\s+"
    r"(?P<amount>[+\-\u2212]?\s*\d+(?:\s\d{3})*,\d{2})\s*(?:₸|KZT|тг)\s+"
    r"(?P<operation>[^\W\d_]+)\s+"
    r"(?P<details>.+)$"
)

_LETTERHEAD_MARKERS = ("«Kaspi Bank»", "KASPI BANK", "КАСПИ БАНК")

_SERVICE_MARKERS = (
    "ВЫПИСКА",
    "Краткое содержание",
    "Доступно на",
    "Валюта счета",
    "Сумма заблокирована",
)


@register_parser
class KaspiParser(BaseBankParser):
    """Parser for Kaspi Bank (Kaspi Gold) statements."""

    priority = 10

    @classmethod
    def bank_name(cls) -> str:
        return "kaspi"

    def matches(self, text: str) -> bool:
        # Layout markers only: card names like "Kaspi Gold" also appear in other banks' statements
        if "CASPKZKA" in text or _TABLE_HEADER_RE.search(text):
            return True
        return any(marker in text for marker in _LETTERHEAD_MARKERS)

    def parse_text(self, text: str) -> StatementData:
        """Parse transactions from Kaspi statement text."""
        data = StatementData(bank=self.bank_name(), extracted_text=text)
        parsing = False

        for line in self._split_lines(text):
            if line == TABLE_HEADER:
                parsing = True
                continue

            if any(marker in line for marker in _SERVICE_MARKERS):
                continue

            # Summary blocks above the table also carry dd.mm.yy dates
            if not parsing:
                continue

            outcome = self._parse_transaction_line(line)
            if isinstance(outcome, Matched):
                data.transactions.append(outcome.transaction)
            else:
                logger.debug("Skipped line (%s): %s", outcome.reason, outcome.line)
                data.skipped.append(outcome)

        if not parsing:
            raise StatementParseError(
                "Could not find the transaction table header "
                f"('{TABLE_HEADER}') in the statement."
            )
        if not data.transactions:
            raise StatementParseError(
                "No transactions found in the statement. Please check the file and upload it again."
            )
        return data

    def _split_lines(self, text: str) -> list[str]:
        """Rebuild one line per transaction.

        Page headers are removed, lines wrapped by the PDF layout are joined
        back together and a break is inserted before every dd.mm.yy date.
        """
        text = _PAGE_HEADER_RE.sub(" ", text)
        text = " ".join(text.split())
        text = _TABLE_HEADER_RE.sub(f"\n{TABLE_HEADER}\n", text)
        text = _DATE_SPLIT_RE.sub(r"\n\1 ", text)
        return [line.strip() for line in text.split("\n") if line.strip()]

    def _parse_transaction_line(self, line: str) -> ParseOutcome:
        """Parse a single 'date amount operation details' line."""
        # "12.01.24 - 5 000,00 ₸ Покупка ИП Магнум"
        match = _LINE_RE.match(line)
        if not match:
            return Skipped(line=line, reason="line does not match transaction pattern")

        tx_date = parse_date(match.group("date"))
        if tx_date is None:
            return Skipped(line=line, reason=f"invalid date {match.group('date')}")

        amount = parse_amount(match.group("amount"))
        if amount is None:
            return Skipped(line=line, reason=f"invalid amount {match.group('amount')}")

        operation = match.group("operation")
        details = match.group("details").strip()
        return Matched(self._new_transaction(
            tx_date=tx_date,
            description=f"{operation} {details}".strip(),
            amount=amount,
            operation=operation,
            raw_text=line,
        ))
