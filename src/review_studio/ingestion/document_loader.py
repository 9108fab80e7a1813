"""Text extraction for uploaded review documents.

Plain text and markdown uploads are decoded directly. PDFs are converted
to markdown with PyMuPDF4LLM, limited to the leading pages configured in
IngestionSettings so large submissions stay within model context.
"""

from __future__ import annotations

from pathlib import PurePath

from review_studio.core.config import get_settings
from review_studio.core.exceptions import PDFParseError, UnsupportedDocumentError
from review_studio.core.logging import get_logger


logger = get_logger(__name__)

TEXT_SUFFIXES = frozenset({".txt", ".md", ".markdown"})
PDF_SUFFIX = ".pdf"
SUPPORTED_SUFFIXES = TEXT_SUFFIXES | {PDF_SUFFIX}
"""Extensions accepted by the upload widgets."""


def decode_text(data: bytes) -> str:
    """Decode uploaded text as UTF-8, replacing invalid bytes.

    A leading byte order mark is dropped.
    """
    return data.decode("utf-8-sig", errors="replace")


def extract_pdf_text(data: bytes, *, filename: str = "document.pdf", max_pages: int = 5) -> str:
    """Convert the leading pages of a PDF to markdown.

    Args:
        data: Raw PDF bytes.
        filename: Name used in error context.
        max_pages: Number of leading pages to convert.

    Returns:
        Markdown text of the converted pages.

    Raises:
        PDFParseError: If the PDF cannot be opened or converted.
    """
    try:
        # Lazy import to avoid loading PyMuPDF until a PDF is uploaded
        import pymupdf
        import pymupdf4llm

        with pymupdf.open(stream=data, filetype="pdf") as document:
            page_count = document.page_count
            pages = list(range(min(max_pages, page_count)))
            if not pages:
                return ""
            markdown = pymupdf4llm.to_markdown(document, pages=pages, show_progress=False)

    except ImportError as exc:
        raise PDFParseError(
            "pymupdf4llm is not installed. Install with: pip install pymupdf4llm",
            source_file=filename,
        ) from exc
    except Exception as exc:
        raise PDFParseError(
            f"Failed to parse PDF: {exc}",
            source_file=filename,
            details={"error_type": type(exc).__name__},
        ) from exc

    logger.info(
        "PDF converted",
        filename=filename,
        page_count=page_count,
        pages_converted=len(pages),
        chars=len(markdown),
    )
    return markdown


def load_document_text(filename: str, data: bytes, *, max_pages: int | None = None) -> str:
    """Extract review text from an uploaded file.

    Args:
        filename: Uploaded file name; its extension selects the converter.
        data: Raw file bytes.
        max_pages: PDF page limit; IngestionSettings.max_pdf_pages when omitted.

    Returns:
        The document text.

    Raises:
        UnsupportedDocumentError: If the extension is not supported or the
            file exceeds the upload limit.
        PDFParseError: If a PDF cannot be converted.
    """
    settings = get_settings().ingestion
    suffix = PurePath(filename).suffix.lower()

    if suffix not in SUPPORTED_SUFFIXES:
        raise UnsupportedDocumentError(
            f"Unsupported file type: {suffix or '(none)'}",
            source_file=filename,
            details={"supported": sorted(SUPPORTED_SUFFIXES)},
        )

    limit = settings.max_upload_mb * 1024 * 1024
    if len(data) > limit:
        raise UnsupportedDocumentError(
            f"File is larger than {settings.max_upload_mb} MB",
            source_file=filename,
            details={"size_bytes": len(data)},
        )

    if suffix == PDF_SUFFIX:
        return extract_pdf_text(
            data,
            filename=filename,
            max_pages=max_pages if max_pages is not None else settings.max_pdf_pages,
        )

    return decode_text(data)


__all__ = [
    "SUPPORTED_SUFFIXES",
    "decode_text",
    "extract_pdf_text",
    "load_document_text",
]
