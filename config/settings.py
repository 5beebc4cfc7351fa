from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


def _as_bool(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    openai_api_key: str | None
    openai_model: str | None

    apollo_api_key: str | None
    apollo_base_url: str

    # Timeouts/limits
    fetch_timeout_seconds: float
    fetch_max_redirects: int
    people_timeout_seconds: float
    content_char_limit: int

    # Retry policy for the whole pipeline
    max_retries: int
    retry_delay_seconds: float

    # Core/runtime
    db_path: str
    run_env: str
    log_level: str

    # Logging/tracing
    llm_trace: bool = False
    llm_log_path: str = "logs/llm_calls.jsonl"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        apollo_api_key=os.getenv("APOLLO_API_KEY"),
        apollo_base_url=os.getenv("APOLLO_BASE_URL", "https://api.apollo.io/api/v1"),
        fetch_timeout_seconds=float(os.getenv("FETCH_TIMEOUT_SECONDS", "30")),
        fetch_max_redirects=int(os.getenv("FETCH_MAX_REDIRECTS", "5")),
        people_timeout_seconds=float(os.getenv("PEOPLE_TIMEOUT_SECONDS", "15")),
        content_char_limit=int(os.getenv("CONTENT_CHAR_LIMIT", "8000")),
        max_retries=int(os.getenv("MAX_RETRIES", "2")),
        retry_delay_seconds=float(os.getenv("RETRY_DELAY_SECONDS", "3")),
        db_path=os.getenv("DB_PATH", "funding_records.db"),
        run_env=os.getenv("RUN_ENV", "local"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        llm_trace=_as_bool(os.getenv("LLM_TRACE", "false")),
        llm_log_path=os.getenv("LLM_LOG_PATH", "logs/llm_calls.jsonl"),
    )


def require_credentials(settings: Settings) -> None:
    """Fail fast when the real collaborators are about to be built without keys."""
    missing = []
    if not settings.openai_api_key:
        missing.append("OPENAI_API_KEY")
    if not settings.apollo_api_key:
        missing.append("APOLLO_API_KEY")
    if missing:
        raise RuntimeError(f"Missing required credentials: {', '.join(missing)}")
