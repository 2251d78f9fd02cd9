import logging

from fastapi import APIRouter, File, Form, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from cv_reviewer.core.config import settings
from cv_reviewer.core.errors import ReviewFailure, file_too_large
from cv_reviewer.schemas.review import ErrorResponse, Review, SubmissionInput, UploadedFile
from cv_reviewer.services.review_service import review_submission

logger = logging.getLogger(__name__)

router = APIRouter()

UPLOAD_CHUNK_BYTES = 1024 * 64


def _error_response(failure: ReviewFailure) -> JSONResponse:
    return JSONResponse(status_code=failure.status_code, content={"error": failure.message})


async def _read_upload(file: UploadFile) -> UploadedFile | ReviewFailure:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(UPLOAD_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > settings.max_upload_bytes:
            logger.info("review_upload_too_large file=%s limit=%s", file.filename, settings.max_upload_bytes)
            return file_too_large(settings.max_upload_bytes)
        chunks.append(chunk)
    return UploadedFile(
        content=b"".join(chunks),
        declared_mime_type=file.content_type or "",
        size_bytes=total,
        file_name=file.filename or "",
    )


@router.post(
    "/review",
    response_model=Review,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def review_cv(
    text: str | None = Form(default=None),
    file: UploadFile | None = File(default=None),
):
    try:
        upload = None
        # browsers submit an unnamed empty part when no file was picked
        if file is not None and (file.filename or file.size):
            upload = await _read_upload(file)
            if isinstance(upload, ReviewFailure):
                return _error_response(upload)

        submission = SubmissionInput(raw_text=text, uploaded_file=upload)
        result = await run_in_threadpool(review_submission, submission)
    except Exception:
        logger.exception("review_unexpected_error")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Unexpected server error"},
        )

    if isinstance(result, ReviewFailure):
        return _error_response(result)
    return result
