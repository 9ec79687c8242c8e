"""Raw text extraction from PDF statements (pdfplumber)."""

from __future__ import annotations

from os import PathLike

import pdfplumber


def extract_text(pdf_path: str | PathLike[str]) -> str:
    """Return the text of all pages joined by newlines.

    Pages without a text layer contribute nothing. Errors opening or parsing
    the file propagate to the caller.
    """

    chunks: list[str] = []
    with pdfplumber.open(pdf_path) as pdf:
        for page in pdf.pages:
            txt = page.extract_text() or ""
            if txt:
                chunks.append(txt)
    return "\n".join(chunks)
