"""Tests for classifier module."""

import pytest

from statement_ledger.categories import (
    EQUIPMENT_CATEGORY,
    LOAN_RECEIVED,
    LOAN_REPAID,
    OTHER_CATEGORY,
    SELF_TRANSFER_CATEGORY,
    TRANSFER_CATEGORY,
    all_categories,
)
from statement_ledger.classifier import CategoryClassifier, ClassificationResult


@pytest.fixture
def classifier():
    """Create a classifier with the built-in keyword table."""
    return CategoryClassifier()


@pytest.fixture
def rules_classifier():
    """Create a classifier with user classification rules."""
    return CategoryClassifier(
        classification_rules={
            "Арна": "Аренда",
            "Fix Price": "Магазины",  # Multi-word pattern
            " дом ": "Недвижимость",  # Boundary pattern
            "kaspi": "Магазины",
        }
    )


class TestKeywordClassification:
    """Tests for the built-in keyword table."""

    def test_rent(self, classifier):
        """Test rent payments are recognized."""
        assert classifier.classify("Аренда офиса") == "Аренда"

    def test_case_insensitive(self, classifier):
        """Test matching ignores case."""
        assert classifier.classify("АРЕНДА ОФИСА") == "Аренда"

    def test_equipment(self, classifier):
        """Test equipment purchases are recognized."""
        assert classifier.classify("Покупка компьютер Lenovo") == EQUIPMENT_CATEGORY

    def test_loan_received_wins_over_generic_credit(self, classifier):
        """Test the specific loan phrase is checked before the bare word."""
        assert classifier.classify("Получение кредита в банке") == LOAN_RECEIVED

    def test_loan_repayment(self, classifier):
        """Test loan repayment is recognized."""
        assert classifier.classify("Погашение кредита") == LOAN_REPAID

    def test_shop_is_not_utilities(self, classifier):
        """Test 'магазин' does not match the gas utility keywords."""
        assert classifier.classify("Оплата в магазин Sulpak") == "Магазины"

    def test_transfer_is_not_utilities(self, classifier):
        """Test 'перевода' does not match the water utility keywords."""
        assert classifier.classify("Зачисление перевода от клиента") == TRANSFER_CATEGORY
        assert classifier.classify("Оплата за воду") == "Коммунальные услуги"
        assert classifier.classify("ТОО Астана-Водоснабжение") == "Коммунальные услуги"

    def test_counterparty_and_operation_are_searched(self, classifier):
        """Test keywords are found in counterparty and operation too."""
        assert classifier.classify("Платеж", counterparty="Beeline") == "Связь и интернет"
        assert classifier.classify("", operation="Налог") == "Налоги"

    def test_unmatched_is_other(self, classifier):
        """Test unmatched text falls back to the default category."""
        assert classifier.classify("qqq 123") == OTHER_CATEGORY

    def test_empty_input(self, classifier):
        """Test empty input still produces a category."""
        assert classifier.classify("") == OTHER_CATEGORY

    def test_deterministic_and_closed(self, classifier):
        """Test every result is one of the known categories."""
        samples = [
            "Перевод на Kaspi Депозит",
            "Покупка ТОО Арна",
            "Пополнение с карты другого банка",
            "Зарплата за январь",
            "xyz",
            "",
        ]
        for text in samples:
            first = classifier.classify(text)
            assert first == classifier.classify(text)
            assert first in classifier.categories


class TestSpecialCases:
    """Tests for self-transfer overrides."""

    def test_deposit_transfer(self, classifier):
        """Test transfers to the own deposit are self-transfers."""
        assert classifier.classify("Перевод на Kaspi Депозит") == SELF_TRANSFER_CATEGORY

    def test_atm_withdrawal(self, classifier):
        """Test Kaspi ATM withdrawals are self-transfers, not ATM spending."""
        assert classifier.classify("Снятие в Kaspi Банкомате") == SELF_TRANSFER_CATEGORY

    def test_card_transfer(self, classifier):
        """Test card-to-card transfers."""
        assert classifier.classify("Пополнение с карты другого банка") == TRANSFER_CATEGORY

    def test_special_case_wins_over_rules(self, rules_classifier):
        """Test special cases are checked before user rules."""
        assert rules_classifier.classify("Перевод на Kaspi Депозит") == SELF_TRANSFER_CATEGORY


class TestExplain:
    """Tests for classification tracing."""

    def test_keyword_phase(self, classifier):
        """Test the deciding keyword is reported."""
        result = classifier.explain("Аренда офиса")
        assert result == ClassificationResult(category="Аренда", keyword="аренда", phase="keyword")

    def test_special_phase(self, classifier):
        """Test special case matches are reported."""
        result = classifier.explain("Снятие в Kaspi Банкомате")
        assert result.phase == "special"
        assert result.keyword == "в kaspi банкомате"

    def test_default_phase(self, classifier):
        """Test the default category has no keyword."""
        result = classifier.explain("qqq")
        assert result.phase == "default"
        assert result.keyword is None


class TestClassificationRules:
    """Tests for user classification rules."""

    def test_rule_before_keyword_table(self, rules_classifier):
        """Test rules win over the built-in table ('тоо ' is a supplier keyword)."""
        result = rules_classifier.explain("Покупка ТОО Арна")
        assert result.category == "Аренда"
        assert result.phase == "rule"

    def test_multi_word_rule_without_spaces(self, rules_classifier):
        """Test multi-word rules match when PDF extraction dropped the spaces."""
        result = rules_classifier._check_rules("покупка fixprice павлодар")
        assert result == ("Магазины", "Fix Price")

    def test_boundary_rule_does_not_match_substring(self, rules_classifier):
        """Test patterns with boundary spaces don't match inside words."""
        assert rules_classifier._check_rules("продукты домашние") is None

    def test_boundary_rule_matches_word(self, rules_classifier):
        """Test patterns with boundary spaces match whole words."""
        result = rules_classifier._check_rules("ремонт дом на окраине")
        assert result == ("Недвижимость", " дом ")

    def test_unknown_category_rejected(self):
        """Test rules must name an existing category."""
        with pytest.raises(ValueError, match="Groceries"):
            CategoryClassifier(classification_rules={"woolworths": "Groceries"})


class TestInjectedTaxonomy:
    """Tests for substituting a minimal taxonomy."""

    def test_custom_taxonomy(self):
        """Test a classifier built from a custom table."""
        classifier = CategoryClassifier(taxonomy=(("Еда", ("хлеб", "молоко")),), special_cases=())

        assert classifier.classify("Хлеб белый") == "Еда"
        assert classifier.classify("Аренда офиса") == OTHER_CATEGORY
        assert classifier.categories == ["Еда", OTHER_CATEGORY]

    def test_table_order_is_priority(self):
        """Test the first matching category in declaration order wins."""
        classifier = CategoryClassifier(
            taxonomy=(("Первая", ("кофе",)), ("Вторая", ("кофе с молоком",))),
            special_cases=(),
        )
        assert classifier.classify("кофе с молоком") == "Первая"


class TestAllCategories:
    """Tests for category listing."""

    def test_default_is_last(self):
        """Test the default category is listed once, at the end."""
        categories = all_categories()
        assert categories[-1] == OTHER_CATEGORY
        assert categories.count(TRANSFER_CATEGORY) == 1
        assert SELF_TRANSFER_CATEGORY in categories
