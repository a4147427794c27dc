"""Bank statement parser registry with auto-discovery."""

import importlib
import logging
import pkgutil
import re
from pathlib import Path
from typing import Type

from .base import (
    BaseBankParser,
    Matched,
    ParseOutcome,
    RawTransaction,
    Skipped,
    StatementData,
    StatementError,
    StatementParseError,
    UnsupportedFormatError,
)

logger = logging.getLogger(__name__)

# Parser used when the issuing bank cannot be recognized
DEFAULT_BANK = "kaspi"

# Registry of all available parsers
_parsers: dict[str, Type[BaseBankParser]] = {}


def register_parser(parser_class: Type[BaseBankParser]) -> Type[BaseBankParser]:
    """Decorator to register a parser class."""
    _parsers[parser_class.bank_name()] = parser_class
    return parser_class


def get_parser(bank_name: str) -> BaseBankParser:
    """Get a parser instance for the specified bank.

    Args:
        bank_name: The bank identifier (e.g., 'kaspi')

    Returns:
        An instance of the appropriate parser

    Raises:
        ValueError: If no parser exists for the specified bank
    """
    if bank_name not in _parsers:
        available = ", ".join(_parsers.keys()) or "none"
        raise ValueError(
            f"No parser available for bank '{bank_name}'. "
            f"Available parsers: {available}"
        )
    return _parsers[bank_name]()


def list_available_parsers() -> list[str]:
    """List all available bank parsers in sniffing order."""
    return [cls.bank_name() for cls in sorted(_parsers.values(), key=lambda cls: cls.priority)]


def detect_parser(text: str) -> BaseBankParser:
    """Pick the parser whose bank markers appear in the text.

    Falls back to the DEFAULT_BANK parser when no bank is recognized.
    """
    for bank_name in list_available_parsers():
        parser = _parsers[bank_name]()
        if parser.matches(text):
            logger.info("Detected %s statement", bank_name)
            return parser

    logger.info("Bank not recognized, falling back to the %s parser", DEFAULT_BANK)
    return get_parser(DEFAULT_BANK)


_STATEMENT_KEYWORDS = (
    "выписка", "счет", "карта", "баланс", "остаток", "операция", "перевод", "платеж",
    "комиссия", "statement", "account", "card", "balance", "transaction", "transfer",
    "payment", "kaspi", "каспи", "halyk", "халык", "народный банк", "дебет", "кредит",
    "списание", "зачисление", "поступление", "снятие",
)
_DATE_RE = re.compile(r"\d{1,2}[/.\-]\d{1,2}[/.\-]\d{2,4}|\d{4}[/.\-]\d{1,2}[/.\-]\d{1,2}")
_AMOUNT_RE = re.compile(r"\d+[\s,.]\d{2}\s*(?:₸|тг|тенге|kzt)?")


def looks_like_statement(text: str) -> bool:
    """Heuristic check that extracted text resembles a bank statement."""
    if not text or len(text) < 100:
        return False
    lowered = text.lower()
    has_keywords = any(keyword in lowered for keyword in _STATEMENT_KEYWORDS)
    return has_keywords and bool(_DATE_RE.search(lowered) or _AMOUNT_RE.search(lowered))


def _discover_parsers() -> None:
    """Auto-discover and import all parser modules in this package."""
    package_dir = Path(__file__).parent

    for module_info in pkgutil.iter_modules([str(package_dir)]):
        if module_info.name not in ("base", "__init__"):
            importlib.import_module(f".{module_info.name}", __package__)


# Auto-discover parsers on import
_discover_parsers()

__all__ = [
    "BaseBankParser",
    "DEFAULT_BANK",
    "Matched",
    "ParseOutcome",
    "RawTransaction",
    "Skipped",
    "StatementData",
    "StatementError",
    "StatementParseError",
    "UnsupportedFormatError",
    "detect_parser",
    "get_parser",
    "list_available_parsers",
    "looks_like_statement",
    "register_parser",
]
