from dataclasses import dataclass

from cv_reviewer.core.config import Settings, settings as default_settings


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    api_key: str | None
    base_url: str | None
    timeout_s: float


def load_ai_config(settings: Settings | None = None) -> AIConfig:
    settings = settings or default_settings
    return AIConfig(
        provider=settings.ai_provider,
        model=settings.openai_model,
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        timeout_s=settings.openai_timeout_s,
    )
