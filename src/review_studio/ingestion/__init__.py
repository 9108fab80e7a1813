"""Uploaded document handling.

Converts text, markdown and PDF uploads into the plain text that review
actions run over.
"""

from __future__ import annotations

from review_studio.ingestion.document_loader import (
    SUPPORTED_SUFFIXES,
    decode_text,
    extract_pdf_text,
    load_document_text,
)


__all__ = [
    "SUPPORTED_SUFFIXES",
    "decode_text",
    "extract_pdf_text",
    "load_document_text",
]
