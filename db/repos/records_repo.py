from __future__ import annotations

import json
import sqlite3
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from models.final_record import FinalRecord


SCAM_MARKER = "FLAGGED AS SUSPICIOUS"

ROW_COLUMNS = (
    "company_name",
    "ceo_email",
    "cmo_email",
    "lead_investor",
    "follow_on_investors",
    "amount_raised",
    "classification",
    "scam_flag",
    "processed_at",
)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def format_row(record: FinalRecord, processed_at: Optional[str] = None) -> Tuple[str, ...]:
    """Spreadsheet-style row: company, CEO, CMO, lead, follow-ons, amount, class, scam marker, timestamp."""
    return (
        record.company_name,
        record.ceo_email,
        record.cmo_email,
        record.lead_investor,
        ", ".join(record.follow_on_investors),
        record.amount_raised,
        record.classification,
        SCAM_MARKER if record.is_scam else "",
        processed_at or _utc_now_iso(),
    )


class RecordsRepo:
    """Append-only store for final records (RecordSinkPort)."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self._lock = threading.Lock()

    def append(self, record: FinalRecord, source_url: Optional[str] = None, processed_at: Optional[str] = None) -> int:
        row = format_row(record, processed_at)
        sql = (
            f"INSERT INTO funding_records ({', '.join(ROW_COLUMNS)}, confidence, extraction_errors_json, source_url) "
            f"VALUES ({', '.join('?' for _ in ROW_COLUMNS)}, ?, ?, ?) RETURNING id;"
        )
        params = row + (record.confidence, json.dumps(list(record.extraction_errors), ensure_ascii=False), source_url)
        with self._lock:
            cur = self.conn.cursor()
            cur.execute(sql, params)
            new_id = int(cur.fetchone()[0])
            self.conn.commit()
        return new_id

    def recent(self, limit: int = 10) -> List[Dict[str, Any]]:
        sql = (
            f"SELECT id, {', '.join(ROW_COLUMNS)}, confidence, extraction_errors_json, source_url "
            "FROM funding_records ORDER BY id DESC LIMIT ?;"
        )
        cur = self.conn.cursor()
        cur.execute(sql, (int(limit),))
        names = [d[0] for d in cur.description]
        rows: List[Dict[str, Any]] = []
        for raw in cur.fetchall():
            item = dict(zip(names, raw))
            try:
                item["extraction_errors"] = json.loads(item.pop("extraction_errors_json") or "[]")
            except json.JSONDecodeError:
                item["extraction_errors"] = []
            rows.append(item)
        return rows

    def count(self) -> int:
        cur = self.conn.cursor()
        cur.execute("SELECT COUNT(*) FROM funding_records;")
        return int(cur.fetchone()[0])
