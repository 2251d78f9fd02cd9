from __future__ import annotations

from io import BytesIO
from zipfile import ZipFile

PDF_MIME_TYPE = "application/pdf"
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MIME_TYPE = "text/plain"

RESUME_MIME_TYPE_LABELS = {
    PDF_MIME_TYPE: "pdf",
    DOCX_MIME_TYPE: "docx",
    TEXT_MIME_TYPE: "txt",
}

PDF_MAGIC = b"%PDF-"
ZIP_MAGICS = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")


def normalize_mime_type(raw: str | None) -> str:
    value = (raw or "").split(";", 1)[0]
    return value.strip().lower()


def _is_zip_payload(content: bytes) -> bool:
    return any(content.startswith(prefix) for prefix in ZIP_MAGICS)


def _zip_has_paths(content: bytes, prefixes: tuple[str, ...]) -> bool:
    try:
        with ZipFile(BytesIO(content)) as archive:
            names = archive.namelist()
        return any(any(name.startswith(prefix) for prefix in prefixes) for name in names)
    except Exception:
        return False


def validate_upload_signature(*, mime_type: str, content: bytes) -> None:
    """Reject payloads whose bytes cannot be the declared binary format."""
    if mime_type == PDF_MIME_TYPE:
        if not content.startswith(PDF_MAGIC):
            raise ValueError("File signature does not match PDF content.")
        return

    if mime_type == DOCX_MIME_TYPE:
        if not _is_zip_payload(content) or not _zip_has_paths(content, ("word/",)):
            raise ValueError("File signature does not match DOCX content.")
        return
