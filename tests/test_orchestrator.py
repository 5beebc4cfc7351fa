from __future__ import annotations

import dataclasses
import json
import logging
import threading
from typing import List

import pytest

from config.settings import get_settings
from models.executive import ExecutiveCandidate
from models.extracted_fields import Classification
from pipelines.process_press_release import RetryOrchestrator, build_default_orchestrator, submit_in_background
from ports.http import HttpResponse
from services.contact_resolver import CEO_TITLES, ContactResolver
from services.content_acquirer import ContentAcquirer
from services.structured_extractor import StructuredExtractor


STORY = (
    "Acme Inc, a SaaS platform for logistics teams, today announced it has raised $12 million "
    "in a Series A round led by Acme Ventures. The funding will be used to expand the engineering "
    "team and accelerate go-to-market efforts across North America and Europe this year."
)
PAGE = f"<html><head><title>Acme Raises $12M</title></head><body><div class='bw-release-story'>{STORY}</div></body></html>"

SCENARIO_A = json.dumps(
    {
        "companyName": "Acme Inc",
        "leadInvestor": "Acme Ventures",
        "followOnInvestors": [],
        "amountRaised": "$12M",
        "classification": "SaaS Company",
        "isScam": False,
        "confidence": 85,
    }
)

ALLOWED_CLASSIFICATIONS = {c.value for c in Classification} | {"UNKNOWN"}


class SequenceFetcher:
    """Returns the queued responses in order, repeating the last one."""

    def __init__(self, *responses: HttpResponse) -> None:
        self.responses = list(responses)
        self.urls: List[str] = []

    def get(self, url, *, headers, timeout, max_redirects):
        self.urls.append(url)
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


class SequenceGenerator:
    def __init__(self, *responses: str) -> None:
        self.responses = list(responses)
        self.calls = 0

    def generate(self, prompt, *, use_case="pr_extraction"):
        self.calls += 1
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


class CeoOnlyPeople:
    def __init__(self) -> None:
        self.searches = 0

    def search_by_org_and_titles(self, org, titles):
        self.searches += 1
        if titles == CEO_TITLES:
            return [ExecutiveCandidate(first_name="Ada", last_name="Lovelace", title="CEO")]
        return []

    def enrich(self, first_name, last_name, org):
        return "a@acme.com" if first_name == "Ada" else None


def _orchestrator(fetcher, generator, people=None, sleeps=None):
    return RetryOrchestrator(
        ContentAcquirer(fetcher),
        StructuredExtractor(generator),
        ContactResolver(people or CeoOnlyPeople()),
        max_retries=2,
        retry_delay_seconds=3.0,
        sleep=(sleeps.append if sleeps is not None else (lambda s: None)),
    )


def _assert_invariants(record):
    assert 0 <= record.confidence <= 100
    assert record.classification in ALLOWED_CLASSIFICATIONS
    assert bool(record.extraction_errors) == (record.company_name == "EXTRACTION FAILED")


def test_successful_run_builds_full_record():
    sleeps: List[float] = []
    record = _orchestrator(SequenceFetcher(HttpResponse(200, PAGE)), SequenceGenerator(SCENARIO_A), sleeps=sleeps).run(
        "https://www.businesswire.com/news/home/20240101/en/Acme-Raises-12M"
    )

    assert record.company_name == "Acme Inc"
    assert record.ceo_email == "a@acme.com"
    assert record.cmo_email == "EMAIL NOT FOUND"
    assert record.amount_raised == "$12M"
    assert record.classification == "SaaS"
    assert record.confidence == 85
    assert record.extraction_errors == ()
    assert sleeps == []
    _assert_invariants(record)


def test_non_json_generation_exhausts_three_attempts():
    sleeps: List[float] = []
    fetcher = SequenceFetcher(HttpResponse(200, PAGE))
    generator = SequenceGenerator("I could not find any funding information.")
    people = CeoOnlyPeople()
    record = _orchestrator(fetcher, generator, people, sleeps).run("https://example.com/acme-raises")

    assert generator.calls == 3
    assert len(fetcher.urls) == 3
    assert sleeps == [3.0, 3.0]
    assert people.searches == 0
    assert record.company_name == "EXTRACTION FAILED"
    assert record.classification == "UNKNOWN"
    assert len(record.extraction_errors) == 1
    assert "parse" in record.extraction_errors[0].lower()
    _assert_invariants(record)


def test_persistent_not_found_yields_sentinel_record():
    sleeps: List[float] = []
    fetcher = SequenceFetcher(HttpResponse(404, ""))
    generator = SequenceGenerator(SCENARIO_A)
    record = _orchestrator(fetcher, generator, sleeps=sleeps).run("https://example.com/")

    assert len(fetcher.urls) == 3
    assert sleeps == [3.0, 3.0]
    assert generator.calls == 0
    assert record.to_payload()["companyName"] == "EXTRACTION FAILED"
    assert record.ceo_email == "EMAIL NOT FOUND"
    assert record.cmo_email == "EMAIL NOT FOUND"
    assert record.confidence == 0
    assert list(record.extraction_errors) == ["Article not found (404)"]


def test_forbidden_wire_url_falls_back_to_url_content():
    generator = SequenceGenerator(SCENARIO_A)
    url = "https://www.businesswire.com/news/home/20240101/en/Acme-Raises-50-Million-Series-B"

    class CapturingExtractor(StructuredExtractor):
        def extract(self, text, url):
            self.seen_text = text
            return super().extract(text, url)

    extractor = CapturingExtractor(generator)
    orch = RetryOrchestrator(
        ContentAcquirer(SequenceFetcher(HttpResponse(403, ""))),
        extractor,
        ContactResolver(CeoOnlyPeople()),
        sleep=lambda s: None,
    )
    record = orch.run(url)
    assert record.company_name == "Acme Inc"
    assert "Acme Raises 50 Million Series B" in extractor.seen_text


def test_retry_reruns_whole_sequence_after_transient_failure():
    sleeps: List[float] = []
    fetcher = SequenceFetcher(HttpResponse(503, ""), HttpResponse(200, PAGE))
    generator = SequenceGenerator(SCENARIO_A)
    record = _orchestrator(fetcher, generator, sleeps=sleeps).run("https://example.com/")

    assert record.company_name == "Acme Inc"
    assert sleeps == [3.0]
    assert len(fetcher.urls) == 2
    assert generator.calls == 1


def test_generation_failure_restarts_from_acquisition():
    fetcher = SequenceFetcher(HttpResponse(200, PAGE))
    generator = SequenceGenerator("garbage", SCENARIO_A)
    record = _orchestrator(fetcher, generator).run("https://example.com/acme")
    assert record.company_name == "Acme Inc"
    assert len(fetcher.urls) == 2


def test_unexpected_exception_never_escapes():
    class ExplodingExtractor:
        def extract(self, text, url):
            raise KeyError("boom")

    orch = RetryOrchestrator(
        ContentAcquirer(SequenceFetcher(HttpResponse(200, PAGE))),
        ExplodingExtractor(),  # type: ignore[arg-type]
        ContactResolver(CeoOnlyPeople()),
        sleep=lambda s: None,
    )
    record = orch.run("https://example.com/acme")
    assert record.is_terminal_failure
    assert record.extraction_errors == ("'boom'",)


def test_submit_in_background_hands_record_to_persist():
    done = threading.Event()
    persisted = []

    def _persist(record):
        persisted.append(record)
        done.set()

    orch = _orchestrator(SequenceFetcher(HttpResponse(200, PAGE)), SequenceGenerator(SCENARIO_A))
    thread = submit_in_background("https://example.com/acme", orch, _persist)
    assert done.wait(timeout=10)
    thread.join(timeout=10)
    assert persisted[0].company_name == "Acme Inc"


def test_background_persist_failure_is_contained():
    def _persist(record):
        raise RuntimeError("sheet unavailable")

    orch = _orchestrator(SequenceFetcher(HttpResponse(200, PAGE)), SequenceGenerator(SCENARIO_A))
    thread = submit_in_background("https://example.com/acme", orch, _persist)
    thread.join(timeout=10)
    assert not thread.is_alive()


def test_default_orchestrator_requires_credentials():
    base = get_settings()
    with pytest.raises(RuntimeError, match="OPENAI_API_KEY"):
        build_default_orchestrator(dataclasses.replace(base, openai_api_key=None, apollo_api_key="k"))

    orch = build_default_orchestrator(dataclasses.replace(base, openai_api_key="sk-test", apollo_api_key="k", max_retries=1, retry_delay_seconds=0.5))
    assert orch.max_retries == 1
    assert orch.retry_delay_seconds == 0.5


def test_attempt_logs_label_failure_kind(caplog):
    caplog.set_level(logging.WARNING, logger="pipelines.process_press_release")
    _orchestrator(SequenceFetcher(HttpResponse(404, "")), SequenceGenerator(SCENARIO_A)).run("https://example.com/")
    messages = [r.getMessage() for r in caplog.records if r.name == "pipelines.process_press_release"]
    assert any("(NotFound, permanent)" in m for m in messages)

    caplog.clear()
    _orchestrator(SequenceFetcher(HttpResponse(503, "")), SequenceGenerator(SCENARIO_A)).run("https://example.com/")
    messages = [r.getMessage() for r in caplog.records if r.name == "pipelines.process_press_release"]
    assert any("(NetworkUnreachable, transient)" in m for m in messages)
