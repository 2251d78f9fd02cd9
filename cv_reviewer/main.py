import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import sentry_sdk

from cv_reviewer import __version__
from cv_reviewer.api.v1.health import router as health_router
from cv_reviewer.api.v1.review import router as review_router
from cv_reviewer.core.config import settings
from cv_reviewer.core.cors import cors_allow_origin_regex, cors_allowed_origins

logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

logger = logging.getLogger(__name__)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = sorted({str((err.get("loc") or ("body",))[-1]) for err in exc.errors()})
    logger.info("review_request_invalid path=%s fields=%s", request.url.path, fields)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": f"Invalid request field(s): {', '.join(fields)}"},
    )


app = FastAPI(title="CV Reviewer API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allowed_origins(),
    allow_origin_regex=cors_allow_origin_regex(),
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)
app.add_exception_handler(RequestValidationError, _request_validation_handler)

app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(review_router, prefix="/v1", tags=["Review"])
