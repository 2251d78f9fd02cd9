from __future__ import annotations

import logging

from cv_reviewer.core.errors import ReviewFailure
from cv_reviewer.parsing.extract import normalize_submission
from cv_reviewer.schemas.review import Review, SubmissionInput
from cv_reviewer.services.prompts import build_review_prompt
from cv_reviewer.services.review_llm import invoke_review_model
from cv_reviewer.services.sanitizer import sanitize_model_response

logger = logging.getLogger(__name__)


def review_submission(submission: SubmissionInput) -> Review | ReviewFailure:
    """Normalize, prompt, invoke once, sanitize. Stops at the first failure."""
    cv_text = normalize_submission(submission)
    if isinstance(cv_text, ReviewFailure):
        return cv_text

    prompt = build_review_prompt(cv_text)

    raw = invoke_review_model(prompt)
    if isinstance(raw, ReviewFailure):
        return raw

    review = sanitize_model_response(raw)
    if isinstance(review, ReviewFailure):
        return review

    logger.info(
        "review_completed source=%s cv_len=%s score=%s items=%s/%s/%s",
        "file" if submission.uploaded_file is not None else "text",
        len(cv_text),
        review.score,
        len(review.strengths),
        len(review.weaknesses),
        len(review.suggestions),
    )
    return review
