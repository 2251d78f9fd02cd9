from __future__ import annotations

import logging
import time

from cv_reviewer.ai.config import load_ai_config
from cv_reviewer.ai.factory import get_ai_client
from cv_reviewer.ai.types import ChatMessage
from cv_reviewer.core.config import settings
from cv_reviewer.core.errors import ReviewFailure
from cv_reviewer.services.prompts import REVIEW_SYSTEM_PROMPT

logger = logging.getLogger(__name__)

UPSTREAM_ERROR_MESSAGE = "The review model is unavailable right now. Please try again later."


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def review_llm_configured() -> bool:
    api_key = (settings.openai_api_key or "").strip()
    return bool(api_key) and not _looks_like_placeholder(api_key)


def invoke_review_model(prompt: str) -> str | ReviewFailure:
    """Send one review request to the configured model and return its raw text."""
    if not review_llm_configured():
        logger.error("review_llm_missing_credentials provider=%s", settings.ai_provider)
        return ReviewFailure(kind="missing_credentials", message="OPENAI_API_KEY is not set on server")

    cfg = load_ai_config(settings)
    started = time.perf_counter()
    try:
        client = get_ai_client(cfg)
        content = client.complete(
            [
                ChatMessage(role="system", content=REVIEW_SYSTEM_PROMPT),
                ChatMessage(role="user", content=prompt),
            ],
            temperature=settings.review_temperature,
            max_tokens=settings.review_max_tokens,
            json_mode=settings.openai_response_format == "json",
        )
    except Exception as exc:  # noqa: BLE001 - single attempt, every fault is terminal
        logger.warning(
            "review_llm_failed model=%s prompt_len=%s latency_ms=%s: %s",
            cfg.model,
            len(prompt),
            int((time.perf_counter() - started) * 1000),
            exc,
        )
        return ReviewFailure(kind="upstream_error", message=UPSTREAM_ERROR_MESSAGE, cause=exc)

    latency_ms = int((time.perf_counter() - started) * 1000)
    if not content or not content.strip():
        logger.warning("review_llm_empty model=%s latency_ms=%s", cfg.model, latency_ms)
        return ReviewFailure(kind="upstream_error", message="The review model returned an empty response.")

    logger.info("review_llm_ok model=%s prompt_len=%s response_len=%s latency_ms=%s", cfg.model, len(prompt), len(content), latency_ms)
    return content
