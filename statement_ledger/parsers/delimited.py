"""Parser for delimited-text (CSV) statement exports."""

import csv
import logging
from pathlib import Path

from .base import (
    Matched,
    ParseOutcome,
    RawTransaction,
    Skipped,
    StatementData,
    StatementParseError,
    direction,
    new_transaction_id,
    parse_amount,
    parse_date,
)

logger = logging.getLogger(__name__)

# How many non-empty lines may precede the header row
HEADER_SEARCH_LINES = 5

DATE_HEADERS = ("дата", "date")
DESCRIPTION_HEADERS = ("описание", "description", "назначение", "детали", "details")
AMOUNT_HEADERS = ("сумма", "amount")

# Russian-language bank exports are usually UTF-8 or Windows-1251
ENCODINGS = ("utf-8-sig", "cp1251")


def read_text_file(path: str | Path) -> str:
    """Read a text export, trying each known encoding in turn."""
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    raw = path.read_bytes()
    for encoding in ENCODINGS[:-1]:
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError:
            logger.debug("%s is not %s encoded", path.name, encoding)
    return raw.decode(ENCODINGS[-1])


def _split_row(line: str, separator: str) -> list[str]:
    return next(csv.reader([line], delimiter=separator), [])


def _find_column(headers: list[str], keywords: tuple[str, ...]) -> int:
    for index, header in enumerate(headers):
        if any(keyword in header for keyword in keywords):
            return index
    return -1


class DelimitedTextParser:
    """Parse CSV exports whose header row uses any of the known column names.

    The header may be preceded by a few lines of bank metadata. The separator
    is ``;`` when the header line contains one, otherwise ``,``.
    """

    def bank_name(self) -> str:
        return "csv"

    def parse(self, path: str | Path) -> StatementData:
        """Read a CSV file from disk and parse it."""
        return self.parse_text(read_text_file(path))

    def parse_text(self, text: str) -> StatementData:
        """Parse CSV text into raw transactions.

        Raises:
            StatementParseError: If the file is empty, has no recognizable
                header or yields no transactions
        """
        lines = [line for line in text.strip().splitlines() if line.strip()]
        if not lines:
            raise StatementParseError("The CSV file is empty.")

        header_index, separator, headers = self._find_header(lines)
        columns = (
            _find_column(headers, DATE_HEADERS),
            _find_column(headers, DESCRIPTION_HEADERS),
            _find_column(headers, AMOUNT_HEADERS),
        )
        logger.debug("CSV header on line %d, separator %r: %s", header_index + 1, separator, headers)

        data = StatementData(bank=self.bank_name(), extracted_text=text)
        for line in lines[header_index + 1:]:
            outcome = self._parse_row(line, separator, len(headers), columns)
            if isinstance(outcome, Matched):
                data.transactions.append(outcome.transaction)
            else:
                logger.debug("Skipped row (%s): %s", outcome.reason, outcome.line)
                data.skipped.append(outcome)

        if not data.transactions:
            raise StatementParseError(
                "No transactions found in the CSV file. "
                "Check that the rows contain a valid date and amount."
            )
        return data

    def _find_header(self, lines: list[str]) -> tuple[int, str, list[str]]:
        for index, line in enumerate(lines[:HEADER_SEARCH_LINES]):
            separator = ";" if ";" in line else ","
            headers = [cell.strip().lower() for cell in _split_row(line, separator)]

            if all(
                _find_column(headers, keywords) != -1
                for keywords in (DATE_HEADERS, DESCRIPTION_HEADERS, AMOUNT_HEADERS)
            ):
                return index, separator, headers

        raise StatementParseError(
            "Could not find a header row with the required columns "
            "(date, description, amount) in the CSV file."
        )

    def _parse_row(
        self,
        line: str,
        separator: str,
        width: int,
        columns: tuple[int, int, int],
    ) -> ParseOutcome:
        row = _split_row(line, separator)
        # Wrapped descriptions and footer notes have fewer fields than the header
        if len(row) < width:
            return Skipped(line=line, reason=f"expected {width} fields, got {len(row)}")

        date_index, description_index, amount_index = columns

        amount = parse_amount(row[amount_index])
        if amount is None:
            return Skipped(line=line, reason=f"invalid amount {row[amount_index]!r}")

        tx_date = parse_date(row[date_index])
        if tx_date is None:
            return Skipped(line=line, reason=f"invalid date {row[date_index]!r}")

        return Matched(RawTransaction(
            id=new_transaction_id("csv"),
            date=tx_date,
            description=row[description_index].strip().strip('"'),
            amount=abs(amount),
            type=direction(amount),
            raw_text=line,
        ))
