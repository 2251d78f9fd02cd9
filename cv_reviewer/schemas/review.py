from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field

MAX_REVIEW_ITEMS = 10
NO_SCORE = 0


@dataclass(frozen=True)
class UploadedFile:
    content: bytes
    declared_mime_type: str
    size_bytes: int
    file_name: str = ""


@dataclass(frozen=True)
class SubmissionInput:
    raw_text: str | None = None
    uploaded_file: UploadedFile | None = None


class Review(BaseModel):
    """Structured critique returned to the caller.

    ``score`` is 1-10 for a usable score. ``0`` means the model gave no usable
    score and must not be read as a rating. Unlike JavaScript Number() coercion,
    null, "" and [] scores map to 0 here rather than clamping to 1, and null
    list items are dropped rather than kept as "null".
    """

    strengths: list[str] = Field(default_factory=list, max_length=MAX_REVIEW_ITEMS)
    weaknesses: list[str] = Field(default_factory=list, max_length=MAX_REVIEW_ITEMS)
    suggestions: list[str] = Field(default_factory=list, max_length=MAX_REVIEW_ITEMS)
    score: int = Field(default=NO_SCORE, ge=0, le=10)

    @property
    def has_score(self) -> bool:
        return self.score != NO_SCORE


class ErrorResponse(BaseModel):
    error: str
