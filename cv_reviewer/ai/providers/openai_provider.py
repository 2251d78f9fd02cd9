from __future__ import annotations

from typing import Optional, Sequence

from openai import OpenAI

from cv_reviewer.ai.types import ChatMessage


class OpenAIProvider:
    """Blocking chat-completions client for OpenAI and compatible backends.

    Retries are disabled: one request is made per call and its failure is
    reported to the caller as-is.
    """

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 30.0,
    ):
        self.model = model
        key = (api_key or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")

        self._client = OpenAI(
            api_key=key,
            base_url=base_url or None,
            timeout=timeout_s,
            max_retries=0,
        )

    def complete(
        self,
        messages: Sequence[ChatMessage],
        *,
        temperature: float,
        max_tokens: int,
        json_mode: bool = True,
    ) -> str:
        payload = [{"role": m.role, "content": m.content} for m in messages]

        create_kwargs = {
            "model": self.model,
            "messages": payload,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_mode:
            create_kwargs["response_format"] = {"type": "json_object"}

        response = self._client.chat.completions.create(**create_kwargs)
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
