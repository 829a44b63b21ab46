import asyncio
import logging
from io import BytesIO
import re
from typing import Iterable, Optional, Union

import pdfplumber
from docx import Document

from core.exceptions import ExtractionFailure


logger = logging.getLogger(__name__)

PDF_MIME_TYPES = frozenset({"application/pdf", "application/x-pdf"})
DOCX_MIME_TYPES = frozenset(
    {"application/vnd.openxmlformats-officedocument.wordprocessingml.document"}
)

Stream = Union[BytesIO, bytes, bytearray, memoryview]


def is_supported_document(content_type: Optional[str]) -> bool:
    """Whether text extraction is attempted for this MIME type."""
    return _base_mime(content_type) in PDF_MIME_TYPES | DOCX_MIME_TYPES


async def extract_document_text(file_stream: Stream, content_type: Optional[str]) -> Optional[str]:
    """Extract text from a recognized document type.

    Returns None when the MIME type is not one we know how to read, so callers
    can tell "skipped" apart from "no text". Raises ExtractionFailure for
    structurally corrupt files.
    """
    mime = _base_mime(content_type)
    if mime in PDF_MIME_TYPES:
        return await extract_text_from_pdf_stream(file_stream)
    if mime in DOCX_MIME_TYPES:
        return await extract_text_from_docx_stream(file_stream)
    logger.info("Skipping text extraction for unsupported type %s", content_type)
    return None


async def extract_text_from_pdf_stream(file_stream: Stream) -> str:
    """Return normalized text from a PDF stream without blocking the event loop."""
    stream = _prepare_stream(file_stream)
    try:
        return await asyncio.to_thread(_extract_pdf_text_sync, stream)
    except Exception as exc:
        raise ExtractionFailure(f"Failed to parse PDF: {exc}") from exc


async def extract_text_from_docx_stream(file_stream: Stream) -> str:
    """Return normalized text from a DOCX stream, including table cells, without blocking the event loop."""
    stream = _prepare_stream(file_stream)
    try:
        return await asyncio.to_thread(_extract_docx_text_sync, stream)
    except Exception as exc:
        raise ExtractionFailure(f"Failed to parse DOCX: {exc}") from exc


def _extract_pdf_text_sync(file_stream: BytesIO) -> str:
    """Sync PDF parsing used behind the async wrapper."""
    chunks: list[str] = []

    with pdfplumber.open(file_stream) as pdf:
        for idx, page in enumerate(pdf.pages, start=1):
            try:
                page_text = page.extract_text() or ""
            except Exception as exc:  # pragma: no cover - pdfplumber internals
                logger.warning("Skipping unreadable PDF page %s: %s", idx, exc)
                continue
            if page_text:
                chunks.append(page_text)

    text = _normalize_text(chunks)
    if not text:
        logger.info("PDF contained no extractable text")
    return text


def _extract_docx_text_sync(file_stream: BytesIO) -> str:
    """Sync DOCX parsing used behind the async wrapper."""
    doc = Document(file_stream)
    text = _normalize_text(_iter_docx_text(doc))
    if not text:
        logger.info("DOCX contained no extractable text")
    return text


def _iter_docx_text(doc) -> Iterable[str]:
    for para in doc.paragraphs:
        if para.text:
            yield para.text

    for table in doc.tables:
        for row in table.rows:
            for cell in row.cells:
                if cell.text:
                    yield cell.text


def _normalize_text(chunks: Iterable[str]) -> str:
    """Trim, collapse whitespace, and join text chunks with stable line breaks."""
    cleaned: list[str] = []
    for chunk in chunks:
        stripped = chunk.strip()
        if stripped:
            cleaned.append(stripped)

    if not cleaned:
        return ""

    text = "\n".join(cleaned)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def _prepare_stream(file_stream: Stream) -> BytesIO:
    if isinstance(file_stream, (bytes, bytearray, memoryview)):
        stream = BytesIO(file_stream)
    else:
        stream = file_stream

    if stream.closed:
        raise ValueError("file_stream is closed")

    stream.seek(0)
    return stream


def _base_mime(content_type: Optional[str]) -> str:
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()
