"""Keyword-based transaction category classifier."""

from dataclasses import dataclass

from .categories import (
    DEFAULT_TAXONOMY,
    OTHER_CATEGORY,
    SPECIAL_CASES,
    all_categories,
)

Taxonomy = tuple[tuple[str, tuple[str, ...]], ...]


@dataclass(frozen=True)
class ClassificationResult:
    """Category chosen for a transaction and the keyword that decided it."""
    category: str
    keyword: str | None
    phase: str  # "special", "rule", "keyword" or "default"


class CategoryClassifier:
    """Classify transactions by the first matching keyword.

    Evaluation order:
    1. special cases (self-transfers, card-to-card transfers)
    2. user rules from config.yaml, in the order they were given
    3. the keyword taxonomy, top to bottom

    Anything unmatched falls back to ``"Прочее"``.
    """

    def __init__(
        self,
        taxonomy: Taxonomy = DEFAULT_TAXONOMY,
        special_cases: Taxonomy = SPECIAL_CASES,
        classification_rules: dict[str, str] | None = None,
    ):
        self.taxonomy = taxonomy
        self.special_cases = special_cases
        self.categories = all_categories(taxonomy, special_cases)
        self.classification_rules = dict(classification_rules or {})

        unknown = sorted(
            {c for c in self.classification_rules.values() if c not in self.categories}
        )
        if unknown:
            raise ValueError(
                f"Classification rules reference unknown categories: {', '.join(unknown)}"
            )

    def _check_rules(self, text: str) -> tuple[str, str] | None:
        """Match user rules against lower-cased text.

        Multi-word patterns also match when PDF extraction dropped the spaces.
        Patterns with leading or trailing spaces only match on word boundaries.
        """
        text_no_spaces = text.replace(" ", "")

        for pattern, category in self.classification_rules.items():
            pattern_lower = pattern.lower()
            has_boundary_spaces = pattern.startswith(" ") or pattern.endswith(" ")

            if has_boundary_spaces:
                if pattern_lower in text:
                    return category, pattern
            elif " " in pattern:
                if pattern_lower in text or pattern_lower.replace(" ", "") in text_no_spaces:
                    return category, pattern
            elif pattern_lower in text:
                return category, pattern
        return None

    @staticmethod
    def _first_match(text: str, table: Taxonomy) -> tuple[str, str] | None:
        for category, keywords in table:
            for keyword in keywords:
                if keyword in text:
                    return category, keyword
        return None

    def explain(
        self, description: str, counterparty: str = "", operation: str = ""
    ) -> ClassificationResult:
        """Classify and report which keyword and phase produced the category."""
        text = f"{description or ''} {counterparty or ''} {operation or ''}".lower()

        match = self._first_match(text, self.special_cases)
        if match:
            return ClassificationResult(category=match[0], keyword=match[1], phase="special")

        match = self._check_rules(text)
        if match:
            return ClassificationResult(category=match[0], keyword=match[1], phase="rule")

        match = self._first_match(text, self.taxonomy)
        if match:
            return ClassificationResult(category=match[0], keyword=match[1], phase="keyword")

        return ClassificationResult(category=OTHER_CATEGORY, keyword=None, phase="default")

    def classify(self, description: str, counterparty: str = "", operation: str = "") -> str:
        """Return the category label for a transaction."""
        return self.explain(description, counterparty, operation).category
