from __future__ import annotations

import logging
from io import BytesIO
from typing import Callable

from docx import Document
from pypdf import PdfReader

from cv_reviewer.core.config import settings
from cv_reviewer.core.errors import ReviewFailure, file_too_large
from cv_reviewer.parsing.file_signatures import (
    DOCX_MIME_TYPE,
    PDF_MIME_TYPE,
    RESUME_MIME_TYPE_LABELS,
    TEXT_MIME_TYPE,
    normalize_mime_type,
    validate_upload_signature,
)
from cv_reviewer.schemas.review import SubmissionInput, UploadedFile

logger = logging.getLogger(__name__)

UNSUPPORTED_FILE_MESSAGE = "Unsupported file type. Please upload a PDF, DOCX, or text file."


def _extract_pdf(content: bytes) -> str:
    reader = PdfReader(BytesIO(content))
    page_chunks: list[str] = []
    for page in reader.pages:
        page_text = page.extract_text() or ""
        if page_text.strip():
            page_chunks.append(page_text)
    return "\n\n".join(page_chunks)


def _extract_docx(content: bytes) -> str:
    document = Document(BytesIO(content))
    lines = [paragraph.text for paragraph in document.paragraphs if paragraph.text.strip()]
    for table in document.tables:
        for row in table.rows:
            for cell in row.cells:
                lines.extend(p.text for p in cell.paragraphs if p.text.strip())
    return "\n".join(lines)


def _extract_txt(content: bytes) -> str:
    return content.decode("utf-8", errors="replace")


_EXTRACTORS: dict[str, Callable[[bytes], str]] = {
    PDF_MIME_TYPE: _extract_pdf,
    DOCX_MIME_TYPE: _extract_docx,
    TEXT_MIME_TYPE: _extract_txt,
}


def extract_text_from_upload(upload: UploadedFile) -> str | ReviewFailure:
    mime_type = normalize_mime_type(upload.declared_mime_type)
    extractor = _EXTRACTORS.get(mime_type)
    if extractor is None:
        logger.info("review_upload_rejected mime=%s file=%s", mime_type or "<none>", upload.file_name)
        return ReviewFailure(kind="unsupported_file_type", message=UNSUPPORTED_FILE_MESSAGE)

    if upload.size_bytes > settings.max_upload_bytes:
        logger.info("review_upload_too_large size=%s limit=%s", upload.size_bytes, settings.max_upload_bytes)
        return file_too_large(settings.max_upload_bytes)

    label = RESUME_MIME_TYPE_LABELS[mime_type]
    try:
        validate_upload_signature(mime_type=mime_type, content=upload.content)
        return extractor(upload.content)
    except Exception as exc:  # noqa: BLE001 - any decoder fault means an unreadable upload
        logger.warning(
            "review_extraction_failed type=%s file=%s size=%s: %s",
            label,
            upload.file_name,
            upload.size_bytes,
            exc,
        )
        return ReviewFailure(
            kind="extraction_failed",
            message=f"Failed to extract text from {label.upper()}",
            cause=exc,
        )


def normalize_submission(submission: SubmissionInput) -> str | ReviewFailure:
    """Turn pasted text or an uploaded file into the CV text to review.

    An uploaded file wins over pasted text. Pasted text is passed through
    untouched; it is only trimmed to decide whether it is empty.
    """
    upload = submission.uploaded_file
    if upload is None and not submission.raw_text:
        return ReviewFailure(kind="no_input", message="Either text or file must be provided")

    if upload is not None:
        extracted = extract_text_from_upload(upload)
        if isinstance(extracted, ReviewFailure):
            return extracted
        cv_text = extracted
    else:
        cv_text = submission.raw_text or ""

    if not cv_text.strip():
        return ReviewFailure(kind="empty_content", message="No text content found to analyze")
    return cv_text
