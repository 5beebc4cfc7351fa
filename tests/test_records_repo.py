from __future__ import annotations

import sqlite3

from db import schema
from db.connection import get_connection
from db.repos.records_repo import RecordsRepo, format_row
from models.final_record import FinalRecord
from services.assembler import terminal_failure_record


def _record(**overrides) -> FinalRecord:
    data = dict(
        company_name="Acme Inc",
        ceo_email="a@acme.com",
        lead_investor="Acme Ventures",
        follow_on_investors=("Beta Capital", "Gamma Partners"),
        amount_raised="$12M",
        classification="SaaS",
        confidence=85,
    )
    data.update(overrides)
    return FinalRecord(**data)


def test_format_row_column_order():
    row = format_row(_record(is_scam=True), processed_at="2024-01-01T00:00:00+00:00")
    assert row == (
        "Acme Inc",
        "a@acme.com",
        "EMAIL NOT FOUND",
        "Acme Ventures",
        "Beta Capital, Gamma Partners",
        "$12M",
        "SaaS",
        "FLAGGED AS SUSPICIOUS",
        "2024-01-01T00:00:00+00:00",
    )
    assert format_row(_record())[7] == ""


def test_bootstrap_is_idempotent(tmp_path):
    conn = get_connection(str(tmp_path / "records.db"))
    schema.bootstrap(conn)
    schema.bootstrap(conn)
    cur = conn.execute("SELECT name FROM sqlite_master WHERE type='table' AND name='funding_records'")
    assert cur.fetchone() is not None


def test_append_and_recent(tmp_path):
    db_path = tmp_path / "records.db"
    conn = get_connection(str(db_path))
    schema.bootstrap(conn)
    repo = RecordsRepo(conn)

    first = repo.append(_record(), source_url="https://example.com/a")
    second = repo.append(terminal_failure_record("Article not found (404)"), source_url="https://example.com/")
    assert second > first
    assert repo.count() == 2

    rows = repo.recent(limit=5)
    assert [r["id"] for r in rows] == [second, first]
    assert rows[0]["company_name"] == "EXTRACTION FAILED"
    assert rows[0]["classification"] == "UNKNOWN"
    assert rows[0]["extraction_errors"] == ["Article not found (404)"]
    assert rows[1]["follow_on_investors"] == "Beta Capital, Gamma Partners"
    assert rows[1]["source_url"] == "https://example.com/a"
    assert rows[1]["processed_at"]

    # Committed: visible from a separate connection
    other = sqlite3.connect(str(db_path))
    try:
        assert other.execute("SELECT COUNT(*) FROM funding_records").fetchone()[0] == 2
    finally:
        other.close()
