"""Per-URL extraction run: acquire -> extract -> resolve -> assemble, with whole-run retries.

Each attempt rebuilds the pipeline context from scratch; there is no partial resume,
so an acquisition failure on attempt 2 re-runs extraction and contact lookups on
attempt 3 as well.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from config.settings import Settings, get_settings, require_credentials
from models.final_record import FinalRecord
from pipelines.runner import Pipeline, RunContext
from pipelines.steps import AcquireContent, AssembleRecord, ExtractFields, ResolveContacts
from services.apollo_client import ApolloClient
from services.assembler import terminal_failure_record
from services.contact_resolver import ContactResolver
from services.content_acquirer import ContentAcquirer
from services.errors import FetchError, LLMError
from services.http_client import RequestsFetcher
from services.llm_client import LLMClient
from services.structured_extractor import StructuredExtractor


logger = logging.getLogger(__name__)


def _failure_kind(error: Exception) -> str:
    """Log label for an attempt failure; every kind is retried the same way."""
    if isinstance(error, FetchError):
        return f"{error.kind.value}, {'transient' if error.retryable else 'permanent'}"
    if isinstance(error, LLMError):
        return error.kind.value
    return type(error).__name__


class RetryOrchestrator:
    def __init__(
        self,
        acquirer: ContentAcquirer,
        extractor: StructuredExtractor,
        resolver: ContactResolver,
        *,
        max_retries: int = 2,
        retry_delay_seconds: float = 3.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.acquirer = acquirer
        self.extractor = extractor
        self.resolver = resolver
        self.max_retries = max(0, max_retries)
        self.retry_delay_seconds = retry_delay_seconds
        self.sleep = sleep

    def _pipeline(self) -> Pipeline:
        return Pipeline(
            [
                AcquireContent(self.acquirer),
                ExtractFields(self.extractor),
                ResolveContacts(self.resolver),
                AssembleRecord(),
            ]
        )

    def run(self, url: str) -> FinalRecord:
        """Produce exactly one record for url. Never raises."""
        total_attempts = self.max_retries + 1
        last_error = "Unknown error"
        for attempt in range(1, total_attempts + 1):
            log_extra = {"step": "process", "attempt": attempt, "url": url}
            try:
                ctx = self._pipeline().run(RunContext(url=url, meta={"attempt": attempt}))
                if ctx.record is None:
                    raise RuntimeError("Pipeline finished without a record")
                logger.info("Extraction succeeded", extra={**log_extra, "status": "ok"})
                return ctx.record
            except Exception as e:
                last_error = str(e) or type(e).__name__
                logger.warning("Attempt %d/%d failed (%s): %s", attempt, total_attempts, _failure_kind(e), last_error, extra={**log_extra, "status": "error", "error": type(e).__name__})
            if attempt < total_attempts:
                self.sleep(self.retry_delay_seconds)

        logger.error("All %d attempts failed", total_attempts, extra={"step": "process", "status": "failed", "url": url, "error": last_error})
        return terminal_failure_record(last_error)


def submit_in_background(
    url: str,
    orchestrator: RetryOrchestrator,
    persist: Optional[Callable[[FinalRecord], object]] = None,
) -> threading.Thread:
    """Start a detached run for url and return the thread without waiting on it.

    The record reaches the caller only through persist; persist failures are logged.
    """

    def _work() -> None:
        record = orchestrator.run(url)
        if persist is None:
            return
        try:
            persist(record)
        except Exception as e:
            logger.error("Persisting record failed: %s", e, extra={"step": "persist", "status": "error", "url": url, "error": type(e).__name__})

    thread = threading.Thread(target=_work, name=f"process:{url}")
    thread.start()
    return thread


def build_default_orchestrator(settings: Optional[Settings] = None) -> RetryOrchestrator:
    """Wire the real HTTP, OpenAI and Apollo collaborators from settings."""
    settings = settings or get_settings()
    require_credentials(settings)
    acquirer = ContentAcquirer(
        RequestsFetcher(),
        timeout=settings.fetch_timeout_seconds,
        max_redirects=settings.fetch_max_redirects,
    )
    extractor = StructuredExtractor(LLMClient(settings), char_limit=settings.content_char_limit)
    people = ApolloClient(
        settings.apollo_api_key,
        base_url=settings.apollo_base_url,
        timeout=settings.people_timeout_seconds,
    )
    return RetryOrchestrator(
        acquirer,
        extractor,
        ContactResolver(people),
        max_retries=settings.max_retries,
        retry_delay_seconds=settings.retry_delay_seconds,
    )
