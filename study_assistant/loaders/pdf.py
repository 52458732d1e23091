from __future__ import annotations

"""PDF text extraction and cleanup."""

import re
from pathlib import Path
from typing import Any

from study_assistant.loaders.chunking import normalize_text
from study_assistant.rag.types import ExtractedPage, ExtractedText


class PDFLoaderError(RuntimeError):
    """Raised when PDF loading fails."""
    pass


_HYPHEN_BREAK_RE = re.compile(r"(\w)-\n(\w)")


def _clean_page_text(text: str) -> str:
    """Join words hyphenated across line breaks and collapse whitespace."""
    if not text:
        return ""
    cleaned = text.replace("\r\n", "\n")
    cleaned = _HYPHEN_BREAK_RE.sub(r"\1\2", cleaned)
    return normalize_text(cleaned)


def _read_document(reader: Any) -> ExtractedText:
    pages: list[ExtractedPage] = []
    for number, page in enumerate(reader, start=1):
        text = _clean_page_text(page.get_text() or "")
        pages.append(ExtractedPage(page_number=number, text=text))
    info = {key: value for key, value in (reader.metadata or {}).items() if value}
    return ExtractedText(
        text="\n".join(page.text for page in pages if page.text),
        pages=pages,
        page_count=len(pages),
        info=info,
    )


def extract_pdf_text(path: Path | str) -> ExtractedText:
    """Extract cleaned text and per-page spans from a PDF on disk."""
    try:
        import fitz
    except ImportError as exc:
        raise PDFLoaderError("PyMuPDF is required to load PDF files") from exc

    try:
        with fitz.open(str(path)) as reader:
            return _read_document(reader)
    except Exception as exc:
        raise PDFLoaderError(f"Failed to extract text from PDF: {exc}") from exc


def extract_pdf_bytes(data: bytes) -> ExtractedText:
    """Extract cleaned text and per-page spans from PDF bytes."""
    try:
        import fitz
    except ImportError as exc:
        raise PDFLoaderError("PyMuPDF is required to load PDF files") from exc

    try:
        with fitz.open(stream=data, filetype="pdf") as reader:
            return _read_document(reader)
    except Exception as exc:
        raise PDFLoaderError(f"Failed to extract text from PDF: {exc}") from exc
