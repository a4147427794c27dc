"""Tests for Halyk parser module."""

import pytest

from statement_ledger.models import EXPENSE, INCOME
from statement_ledger.parsers.base import Matched, Skipped, StatementParseError
from statement_ledger.parsers.halyk import DEFAULT_DESCRIPTION, HalykParser


HALYK_TEXT = """АО «Народный Банк Казахстана» Halyk Bank
Выписка по счету KZ126010000000000000
Период: 01.02.2024 - 29.02.2024
Входящий остаток на 01.02.2024 100 000,00 ₸
05.02.2024 Оплата ТОО Арна -12 500,00 ₸
10.02.2024 Поступление от клиента +300 000,00 KZT
15.02.2024
-7 000,00 ₸ Комиссия банка
Исходящий остаток на 29.02.2024 380 500,00 ₸
"""


@pytest.fixture
def parser():
    """Create a Halyk parser instance."""
    return HalykParser()


class TestHalykParserMeta:
    """Tests for parser metadata."""

    def test_bank_name(self, parser):
        """Test bank name is correct."""
        assert parser.bank_name() == "halyk"

    def test_matches(self, parser):
        """Test Halyk statements are recognized in either script."""
        assert parser.matches("HALYK BANK")
        assert parser.matches("Халык Банк")
        assert parser.matches("Народный банк Казахстана")
        assert not parser.matches("Kaspi Bank")


class TestParseText:
    """Tests for parsing extracted statement text."""

    def test_transaction_count(self, parser):
        """Test dated rows with amounts become transactions."""
        data = parser.parse_text(HALYK_TEXT)

        assert data.bank == "halyk"
        assert len(data.transactions) == 3

    def test_expense_row(self, parser):
        """Test an outgoing payment on one line."""
        tx = parser.parse_text(HALYK_TEXT).transactions[0]

        assert tx.date == "2024-02-05"
        assert tx.amount == 12500.0
        assert tx.type == EXPENSE
        assert tx.description == "Оплата ТОО Арна"

    def test_income_row(self, parser):
        """Test an incoming payment with the KZT suffix."""
        tx = parser.parse_text(HALYK_TEXT).transactions[1]

        assert tx.amount == 300000.0
        assert tx.type == INCOME
        assert tx.description == "Поступление от клиента"

    def test_amount_on_next_line(self, parser):
        """Test the amount and description are taken from the following line."""
        tx = parser.parse_text(HALYK_TEXT).transactions[2]

        assert tx.date == "2024-02-15"
        assert tx.amount == 7000.0
        assert tx.type == EXPENSE
        assert tx.description == "Комиссия банка"

    def test_summary_lines_are_skipped(self, parser):
        """Test balance and period lines are not transactions."""
        data = parser.parse_text(HALYK_TEXT)

        reasons = [s.reason for s in data.skipped if "остаток" in s.line or "Период" in s.line]
        assert reasons == ["summary line"] * 3

    def test_no_transactions_raises(self, parser):
        """Test text without any dated amounts."""
        with pytest.raises(StatementParseError, match="No transactions"):
            parser.parse_text("Halyk Bank\nВыписка по счету\n")


class TestParseLine:
    """Tests for single line parsing."""

    def test_date_digits_not_read_as_amount(self, parser):
        """Test the year of a date is not taken as part of the amount."""
        outcome = parser._parse_transaction_line("05.02.2024 Оплата 1 500,00 ₸")

        assert isinstance(outcome, Matched)
        assert outcome.transaction.amount == 1500.0

    def test_default_description(self, parser):
        """Test the placeholder description when no text is left."""
        outcome = parser._parse_transaction_line("05.02.2024 -500,00 ₸", "20.02.2024 -1,00 ₸")

        assert isinstance(outcome, Matched)
        assert outcome.transaction.description == DEFAULT_DESCRIPTION

    def test_no_amount(self, parser):
        """Test a dated line without any amount nearby."""
        outcome = parser._parse_transaction_line("05.02.2024 Оплата", "Просто текст")

        assert isinstance(outcome, Skipped)
        assert outcome.reason == "no amount"

    def test_no_date(self, parser):
        """Test lines without a date are skipped."""
        outcome = parser._parse_transaction_line("Оплата -500,00 ₸")

        assert isinstance(outcome, Skipped)
        assert outcome.reason == "no date"
