from __future__ import annotations

import json
import sqlite3
import sys
from typing import List

import pytest


def _run_cli_with_args(args_list: List[str]):
    """Simulate CLI execution of cli.py with given args (non-interactive)."""
    argv_backup = sys.argv[:]
    try:
        sys.argv = ["cli.py"] + args_list
        # Reload cli fresh to re-parse args and pick up monkeypatches
        if "cli" in sys.modules:
            del sys.modules["cli"]
        import cli  # type: ignore
        try:
            return cli.main()  # type: ignore[attr-defined]
        except SystemExit as e:
            code = int(getattr(e, "code", 0) or 0)
            if code not in (0, None):
                raise
    finally:
        sys.argv = argv_backup


class _StubOrchestrator:
    def __init__(self, record):
        self.record = record
        self.urls = []

    def run(self, url):
        self.urls.append(url)
        return self.record


@pytest.fixture
def stub_orchestrator(monkeypatch):
    import pipelines.process_press_release as ppr
    from models.executive import ExecutiveContacts
    from models.extracted_fields import Classification, ExtractedFields
    from services.assembler import assemble_record

    record = assemble_record(
        ExtractedFields(company_name="Acme Inc", lead_investor="Acme Ventures", amount_raised="$12M", classification=Classification.SAAS, confidence=85),
        ExecutiveContacts(ceo_email="a@acme.com"),
    )
    stub = _StubOrchestrator(record)
    monkeypatch.setattr(ppr, "build_default_orchestrator", lambda settings=None: stub)
    monkeypatch.setenv("RUN_ENV", "test")
    monkeypatch.setenv("LLM_TRACE", "false")
    monkeypatch.delenv("RUN_ID", raising=False)
    from config.settings import get_settings
    get_settings.cache_clear()
    return stub


def test_cli_process_writes_db_and_prints_json(tmp_path, capsys, stub_orchestrator):
    db_path = tmp_path / "cli_process.db"
    _run_cli_with_args(["--db", str(db_path), "bootstrap"])
    _run_cli_with_args(["--db", str(db_path), "process", "--url", "https://example.com/acme", "--write-db", "--json"])

    out = capsys.readouterr().out
    payload = json.loads(out[out.index("{"):])
    assert payload["companyName"] == "Acme Inc"
    assert payload["cmoEmail"] == "EMAIL NOT FOUND"
    assert stub_orchestrator.urls == ["https://example.com/acme"]

    conn = sqlite3.connect(str(db_path))
    try:
        row = conn.execute("SELECT company_name, ceo_email, source_url FROM funding_records").fetchone()
    finally:
        conn.close()
    assert row == ("Acme Inc", "a@acme.com", "https://example.com/acme")


def test_cli_process_background_persists_after_return(tmp_path, capsys, stub_orchestrator):
    db_path = tmp_path / "cli_bg.db"
    thread = _run_cli_with_args(["--db", str(db_path), "process", "--url", "https://example.com/acme", "--write-db", "--background"])
    assert "Submitted https://example.com/acme" in capsys.readouterr().out
    thread.join(timeout=10)
    capsys.readouterr()

    _run_cli_with_args(["--db", str(db_path), "report-recent", "--limit", "3"])
    rows = json.loads(capsys.readouterr().out)
    assert len(rows) == 1
    assert rows[0]["company_name"] == "Acme Inc"


def test_cli_process_rejects_relative_url(tmp_path, stub_orchestrator):
    with pytest.raises(SystemExit):
        _run_cli_with_args(["--db", str(tmp_path / "x.db"), "process", "--url", "example.com/acme"])
    assert stub_orchestrator.urls == []
