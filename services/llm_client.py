from __future__ import annotations

import time
from typing import Any, Dict, Optional

from openai import OpenAI

from config.settings import Settings, get_settings
from config.llm_routes import ROUTES
from utils.llm_logger import log_call, sha256_text


class LLMClient:
    """Text-generation gateway: per-use-case routing plus call tracing."""

    def __init__(self, settings: Optional[Settings] = None, client: Optional[Any] = None) -> None:
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = OpenAI(api_key=self.settings.openai_api_key)
        return self._client

    def generate(self, prompt: str, *, use_case: str = "pr_extraction") -> str:
        route = ROUTES.get(use_case, {})
        provider = route.get("provider", "openai")
        model = route.get("model") or self.settings.openai_model or "gpt-4o-mini"
        op = route.get("operation", use_case)

        if provider != "openai":
            raise NotImplementedError(f"Provider not implemented: {provider}")

        kwargs: Dict[str, Any] = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
        }
        # Only pass temperature if the route sets one (some models only accept default)
        if route.get("temperature") is not None:
            kwargs["temperature"] = route["temperature"]
        if route.get("max_tokens"):
            kwargs["max_tokens"] = route["max_tokens"]

        t0 = time.time()
        try:
            resp = self.client.chat.completions.create(**kwargs)
        except Exception as e:
            log_call(
                caller=f"llm_client.generate:{use_case}",
                provider=provider,
                model=model,
                operation=op,
                prompt_hash=sha256_text(prompt),
                duration_ms=int((time.time() - t0) * 1000),
                status="error",
                error=str(e),
            )
            raise
        duration_ms = int((time.time() - t0) * 1000)

        usage_obj = None
        usage = getattr(resp, "usage", None)
        if usage:
            usage_obj = {
                "prompt_tokens": getattr(usage, "prompt_tokens", None),
                "completion_tokens": getattr(usage, "completion_tokens", None),
                "total_tokens": getattr(usage, "total_tokens", None),
            }

        log_call(
            caller=f"llm_client.generate:{use_case}",
            provider=provider,
            model=model,
            operation=op,
            prompt_hash=sha256_text(prompt),
            duration_ms=duration_ms,
            status="ok",
            usage=usage_obj,
        )

        choices = getattr(resp, "choices", None) or []
        if not choices:
            return ""
        return choices[0].message.content or ""
