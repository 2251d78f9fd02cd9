from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ErrorKind = Literal[
    "no_input",
    "unsupported_file_type",
    "file_too_large",
    "extraction_failed",
    "empty_content",
    "missing_credentials",
    "upstream_error",
    "parse_failure",
]

_STATUS_BY_KIND: dict[str, int] = {
    "no_input": 400,
    "unsupported_file_type": 400,
    "extraction_failed": 400,
    "empty_content": 400,
    "file_too_large": 413,
    "missing_credentials": 500,
    "upstream_error": 500,
    "parse_failure": 502,
}


@dataclass(frozen=True)
class ReviewFailure:
    """A failed pipeline stage.

    Stages return this value instead of raising so the caller has to branch on
    it. ``message`` is safe to show to the user; ``cause`` is the underlying
    exception, if any, and is only ever logged.
    """

    kind: ErrorKind
    message: str
    cause: BaseException | None = None

    @property
    def status_code(self) -> int:
        return _STATUS_BY_KIND.get(self.kind, 500)


def file_too_large(limit_bytes: int) -> ReviewFailure:
    limit_mb = limit_bytes / (1024 * 1024)
    return ReviewFailure(
        kind="file_too_large",
        message=f"File too large. Maximum allowed size is {limit_mb:g} MB.",
    )
