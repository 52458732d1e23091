from __future__ import annotations

"""Plain text extraction for notes and pre-extracted documents."""

from pathlib import Path

from study_assistant.rag.types import ExtractedText


def extract_text_file(path: Path | str) -> ExtractedText:
    """Read a UTF-8 text file as an extraction without page spans."""
    return extract_text_bytes(Path(path).read_bytes())


def extract_text_bytes(data: bytes) -> ExtractedText:
    """Decode text bytes; chunks built from it carry page 0."""
    return ExtractedText(text=data.decode("utf-8", errors="ignore"))
