"""Text extraction from PDF statements."""

import logging
from pathlib import Path
from typing import Callable

import pdfplumber

logger = logging.getLogger(__name__)


def extract_pdf_text(
    pdf_path: str | Path,
    password: str | None = None,
    on_progress: Callable[[str], None] | None = None,
) -> str:
    """Extract the text layer of a PDF, page by page, in document order.

    Scanned statements without a text layer produce an empty string.
    """
    pdf_path = Path(pdf_path)

    if not pdf_path.exists():
        raise FileNotFoundError(f"PDF file not found: {pdf_path}")

    pages: list[str] = []
    with pdfplumber.open(pdf_path, password=password) as pdf:
        total = len(pdf.pages)
        for number, page in enumerate(pdf.pages, start=1):
            if on_progress:
                on_progress(f"Extracting text from page {number} of {total}...")
            pages.append(page.extract_text() or "")

    text = "\n".join(pages)
    logger.debug("Extracted %d characters from %d page(s) of %s", len(text), len(pages), pdf_path.name)
    return text
