from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    ai_provider: str
    openai_api_key: str | None
    openai_model: str
    openai_base_url: str | None
    openai_timeout_s: float
    openai_response_format: str
    review_temperature: float
    review_max_tokens: int
    max_upload_bytes: int
    log_level: str
    log_message_max_chars: int
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool


def load_settings() -> Settings:
    return Settings(
        ai_provider=(_get_env("AI_PROVIDER", "openai") or "openai").strip().lower(),
        openai_api_key=(_get_env("OPENAI_API_KEY") or "").strip() or None,
        openai_model=(_get_env("OPENAI_MODEL", "gpt-4o-mini") or "gpt-4o-mini").strip(),
        openai_base_url=(_get_env("OPENAI_BASE_URL") or "").strip() or None,
        openai_timeout_s=_get_env_float("OPENAI_TIMEOUT_S", 30.0),
        openai_response_format=(_get_env("OPENAI_RESPONSE_FORMAT", "json") or "json").strip().lower(),
        review_temperature=_get_env_float("REVIEW_TEMPERATURE", 0.2),
        review_max_tokens=_get_env_int("REVIEW_MAX_TOKENS", 1200),
        max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 5 * 1024 * 1024),
        log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
        log_message_max_chars=_get_env_int("LOG_MESSAGE_MAX_CHARS", 800),
        sentry_dsn=_get_env("SENTRY_DSN"),
        cors_allowed_origins=_get_env_list(
            "CORS_ALLOWED_ORIGINS",
            [
                "http://localhost:3000",
                "http://127.0.0.1:3000",
                "http://localhost:5173",
            ],
        ),
        cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
        cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
    )


settings = load_settings()

if settings.max_upload_bytes <= 0:
    raise RuntimeError("MAX_UPLOAD_BYTES must be a positive number of bytes.")
