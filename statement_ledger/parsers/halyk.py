"""Halyk Bank statement parser."""

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

DEFAULT_DESCRIPTION = "Операция"

_DATE_RE = re.compile(r"\d{2}\.\d{2}\.\d{4}")
_AMOUNT_RE = re.compile(r"(?P<sign>[+\-\u2212]?)\s*(?P<value>\d+(?:[  ]\d{3})*,\d{2})\s*(?:₸|KZT)")

# Period, opening/closing balance and total rows also carry dates and amounts
_SUMMARY_MARKERS = ("остаток", "итого", "период", "баланс")


@register_parser
class HalykParser(BaseBankParser):
    """Parser for Halyk Bank (Народный банк) statements."""

    priority = 20

    @classmethod
    def bank_name(cls) -> str:
        return "halyk"

    def matches(self, text: str) -> bool:
        lowered = text.lower()
        return any(marker in lowered for marker in ("halyk", "халык", "народный банк"))

    def parse_text(self, text: str) -> StatementData:
        """Parse transactions from Halyk statement text."""
        data = StatementData(bank=self.bank_name(), extracted_text=text)
        lines = [line.strip() for line in text.split("\n") if line.strip()]

        for index, line in enumerate(lines):
            next_line = lines[index + 1] if index + 1 < len(lines) else None
            outcome = self._parse_transaction_line(line, next_line)
            if isinstance(outcome, Matched):
                data.transactions.append(outcome.transaction)
            else:
                logger.debug("Skipped line (%s): %s", outcome.reason, outcome.line)
                data.skipped.append(outcome)

        if not data.transactions:
            raise StatementParseError(
                "No transactions found in the Halyk statement. "
                "Please check the file and upload it again."
            )
        return data

    def _parse_transaction_line(self, line: str, next_line: str | None = None) -> ParseOutcome:
        """Parse a dated line whose amount is on the same or the following line."""
        # "05.02.2024 Оплата ТОО Арна -12 500,00 ₸"
        date_match = _DATE_RE.search(line)
        if not date_match:
            return Skipped(line=line, reason="no date")

        if any(marker in line.lower() for marker in _SUMMARY_MARKERS):
            return Skipped(line=line, reason="summary line")

        tx_date = parse_date(date_match.group(0))
        if tx_date is None:
            return Skipped(line=line, reason=f"invalid date {date_match.group(0)}")

        # Dates are removed first so their digits are not read as part of the amount
        rest = _DATE_RE.sub(" ", line)
        amount_match = _AMOUNT_RE.search(rest)
        residual = rest
        if amount_match:
            residual = rest.replace(amount_match.group(0), " ")
        elif next_line is not None:
            amount_match = _AMOUNT_RE.search(next_line)

        if not amount_match:
            return Skipped(line=line, reason="no amount")

        amount = parse_amount(amount_match.group("sign") + amount_match.group("value"))
        if amount is None:
            return Skipped(line=line, reason=f"invalid amount {amount_match.group(0)}")

        description = " ".join(residual.split())
        if not description and next_line is not None:
            description = " ".join(_AMOUNT_RE.sub(" ", _DATE_RE.sub(" ", next_line)).split())

        return Matched(self._new_transaction(
            tx_date=tx_date,
            description=description or DEFAULT_DESCRIPTION,
            amount=amount,
            raw_text=line,
        ))
