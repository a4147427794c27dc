"""Tests for counterparty module."""

from statement_ledger.counterparty import DEFAULT_COUNTERPARTY, extract_counterparty


class TestFixedLabels:
    """Tests for self-transfer phrases."""

    def test_deposit(self):
        """Test transfers to the own deposit."""
        assert extract_counterparty("Перевод на Kaspi Депозит") == "Kaspi Депозит"

    def test_deposit_withdrawal(self):
        """Test transfers from the own deposit."""
        assert extract_counterparty("Пополнение С Kaspi Депозита") == "Kaspi Депозит"

    def test_atm(self):
        """Test Kaspi ATM withdrawals."""
        assert extract_counterparty("Снятие в Kaspi Банкомате") == "Kaspi Банкомат"

    def test_other_card(self):
        """Test top-ups from another bank's card."""
        assert extract_counterparty("Пополнение с карты другого банка") == "Другая карта"


class TestPatterns:
    """Tests for the name patterns."""

    def test_sole_proprietor(self):
        """Test sole proprietor prefix with a name."""
        assert extract_counterparty("Оплата ИП Иванов А.") == "ИП Иванов А."

    def test_llp(self):
        """Test LLP prefix with a name."""
        assert extract_counterparty("ТОО Арна") == "ТОО Арна"

    def test_operation_prefix_is_ignored(self):
        """Test the operation label in front of the details is skipped."""
        result = extract_counterparty("Перевод Гульмира М.", operation="Перевод")
        assert result == "Гульмира М."

    def test_leading_token(self):
        """Test a single brand name at the start."""
        assert extract_counterparty("Magnum 123 Астана") == "Magnum"


class TestFallbacks:
    """Tests for the fallback chain."""

    def test_operation_when_description_empty(self):
        """Test the operation label is used when there is no description."""
        assert extract_counterparty("", operation="Покупка") == "Покупка"

    def test_default_when_everything_empty(self):
        """Test the constant default is returned for empty input."""
        assert extract_counterparty("   ") == DEFAULT_COUNTERPARTY

    def test_never_empty(self):
        """Test a non-empty name is always returned."""
        for text in ["", "-", "...", "12 345", "Оплата"]:
            assert extract_counterparty(text).strip()
