"""End-to-end processing of an uploaded statement file."""

import logging
from pathlib import Path
from typing import Callable

from .classifier import CategoryClassifier
from .finalizer import finalize_all
from .models import Transaction
from .parsers import (
    StatementData,
    StatementParseError,
    UnsupportedFormatError,
    detect_parser,
    looks_like_statement,
)
from .parsers.delimited import DelimitedTextParser
from .pdf_text import extract_pdf_text

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]
StatementReader = Callable[..., StatementData]

SUPPORTED_EXTENSIONS = (".csv", ".pdf")


def _noop_progress(_message: str) -> None:
    pass


def read_csv_statement(
    path: str | Path,
    on_progress: ProgressCallback = _noop_progress,
    password: str | None = None,
) -> StatementData:
    """Parse a CSV export."""
    on_progress("Processing CSV file...")
    return DelimitedTextParser().parse(path)


def read_pdf_statement(
    path: str | Path,
    on_progress: ProgressCallback = _noop_progress,
    password: str | None = None,
) -> StatementData:
    """Extract the text of a PDF statement and parse it with the matching bank parser."""
    on_progress("Processing PDF file...")
    text = extract_pdf_text(path, password=password, on_progress=on_progress)

    if not text.strip():
        raise StatementParseError(
            "The PDF has no extractable text. Scanned statements are not supported."
        )
    if not looks_like_statement(text):
        logger.warning("%s does not look like a bank statement", Path(path).name)

    return detect_parser(text).parse_text(text)


def select_parser(file_name: str | Path) -> StatementReader:
    """Choose the reader for a statement file by its extension.

    Raises:
        UnsupportedFormatError: If the extension is neither .csv nor .pdf
    """
    suffix = Path(file_name).suffix.lower()
    if suffix == ".csv":
        return read_csv_statement
    if suffix == ".pdf":
        return read_pdf_statement
    raise UnsupportedFormatError(
        f"Unsupported file format '{suffix or Path(file_name).name}'. "
        f"Only CSV and PDF files are supported."
    )


def parse_statement(
    path: str | Path,
    progress_callback: ProgressCallback | None = None,
    password: str | None = None,
) -> StatementData:
    """Read and parse a statement file without categorizing it."""
    on_progress = progress_callback or _noop_progress
    on_progress("Starting file processing...")

    reader = select_parser(path)
    return reader(path, on_progress=on_progress, password=password)


def process_and_categorize_transactions(
    path: str | Path,
    progress_callback: ProgressCallback | None = None,
    classifier: CategoryClassifier | None = None,
    password: str | None = None,
) -> list[Transaction]:
    """Parse a statement file and categorize every transaction in it.

    Args:
        path: Path to a .csv or .pdf statement
        progress_callback: Receives a human-readable message at each phase
        classifier: Classifier to use; the built-in keyword table by default
        password: Password for encrypted PDF statements

    Returns:
        Categorized transactions in statement order

    Raises:
        UnsupportedFormatError: If the file type is not supported
        StatementParseError: If no transactions could be extracted
        FileNotFoundError: If the file does not exist
    """
    on_progress = progress_callback or _noop_progress
    data = parse_statement(path, progress_callback=on_progress, password=password)

    on_progress(f"Found {len(data.transactions)} transactions. Categorizing...")
    transactions = finalize_all(data.transactions, classifier)

    logger.info(
        "Processed %s: %d transactions, %d lines skipped",
        Path(path).name, len(transactions), len(data.skipped),
    )
    on_progress("Processing complete!")
    return transactions


def format_parse_summary(data: StatementData) -> str:
    """One-line summary of a parsed statement for display."""
    summary = (
        f"{data.bank}: {len(data.transactions)} transactions "
        f"({data.income_count} income, {data.expense_count} expense), "
        f"total {data.total_amount:,.2f}"
    )
    if data.skipped:
        summary += f", {len(data.skipped)} lines skipped"
    return summary
