"""Leading-page text extraction with PyMuPDF."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import fitz  # PyMuPDF

from errors import NoExtractableText, UnreadablePdf

PDF_MAX_PAGES = int(os.getenv("PDF_MAX_PAGES", "2"))
PDF_MAX_CHARS = int(os.getenv("PDF_MAX_CHARS", "3000"))

LOGGER = logging.getLogger(__name__)

# MuPDF prints recoverable parse warnings straight to stderr.
fitz.TOOLS.mupdf_display_errors(False)


def extract_leading_text(
    pdf_path: str | Path,
    max_pages: int = PDF_MAX_PAGES,
    max_chars: int = PDF_MAX_CHARS,
) -> str:
    """Return the text of the first ``max_pages`` pages, cut to ``max_chars``.

    Title, authors and year live on the first page or two, so the rest of the
    document is never read.
    """
    try:
        doc = fitz.open(str(pdf_path))
    except (OSError, RuntimeError, ValueError) as exc:
        raise UnreadablePdf(f"Could not open {pdf_path} as a PDF: {exc}") from exc

    try:
        pages = []
        for page_number in range(min(max_pages, doc.page_count)):
            pages.append(doc[page_number].get_text("text"))
    except (RuntimeError, ValueError) as exc:
        raise UnreadablePdf(f"Could not read text from {pdf_path}: {exc}") from exc
    finally:
        doc.close()

    text = "\n".join(pages).strip()
    if not text:
        raise NoExtractableText(
            f"No text could be extracted from {pdf_path}. The file may be a scanned image."
        )

    LOGGER.info("Extracted %s chars from %s page(s) of %s", len(text), len(pages), pdf_path)
    return text[:max_chars]
