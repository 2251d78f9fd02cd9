from functools import lru_cache

from cv_reviewer.ai.config import AIConfig
from cv_reviewer.ai.types import AIClient

from cv_reviewer.ai.providers.openai_provider import OpenAIProvider


@lru_cache(maxsize=4)
def get_ai_client(cfg: AIConfig) -> AIClient:
    if cfg.provider == "openai":
        return OpenAIProvider(
            model=cfg.model,
            api_key=cfg.api_key,
            base_url=cfg.base_url,
            timeout_s=cfg.timeout_s,
        )

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
