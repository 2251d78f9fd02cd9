from __future__ import annotations

import json
import logging
import math
from typing import Any

from cv_reviewer.core.config import settings
from cv_reviewer.core.errors import ReviewFailure
from cv_reviewer.schemas.review import MAX_REVIEW_ITEMS, NO_SCORE, Review

logger = logging.getLogger(__name__)

REVIEW_LIST_FIELDS = ("strengths", "weaknesses", "suggestions")
MIN_SCORE = 1
MAX_SCORE = 10


def _loads_object(text: str) -> dict[str, Any] | None:
    try:
        value = json.loads(text)
    except (ValueError, RecursionError):
        return None
    return value if isinstance(value, dict) else None


def parse_model_json(raw: str) -> dict[str, Any] | None:
    """Whole string first, then the span from the first '{' to the last '}'."""
    parsed = _loads_object(raw)
    if parsed is not None:
        return parsed

    start = raw.find("{")
    end = raw.rfind("}")
    if start == -1 or end <= start:
        return None
    return _loads_object(raw[start : end + 1])


def _encodable(text: str) -> str:
    # lone surrogates such as a JSON "\ud800" escape cannot be encoded as UTF-8
    return text.encode("utf-8", "replace").decode("utf-8")


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return _encodable(value)
    if isinstance(value, (bool, dict, list)):
        return _encodable(json.dumps(value, ensure_ascii=False))
    return str(value)


def _coerce_items(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    items = [text for text in (_as_text(element) for element in value) if text]
    return items[:MAX_REVIEW_ITEMS]


def _as_number(value: Any) -> float | None:
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _coerce_score(value: Any) -> int:
    number = _as_number(value)
    if number is None or not math.isfinite(number):
        return NO_SCORE
    # half-up, so 6.5 -> 7
    rounded = math.floor(number + 0.5)
    return min(MAX_SCORE, max(MIN_SCORE, rounded))


def coerce_review(payload: dict[str, Any]) -> Review:
    return Review(
        strengths=_coerce_items(payload.get("strengths")),
        weaknesses=_coerce_items(payload.get("weaknesses")),
        suggestions=_coerce_items(payload.get("suggestions")),
        score=_coerce_score(payload.get("score")),
    )


def sanitize_model_response(raw: str) -> Review | ReviewFailure:
    payload = parse_model_json(raw)
    if payload is None:
        excerpt = raw[: settings.log_message_max_chars]
        logger.warning("review_parse_failed response_len=%s excerpt=%r", len(raw), excerpt)
        return ReviewFailure(kind="parse_failure", message="Failed to parse model response")

    review = coerce_review(payload)
    if not review.has_score:
        logger.info("review_score_missing raw_score=%r", payload.get("score"))
    return review
