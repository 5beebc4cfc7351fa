from __future__ import annotations

import sqlite3


def bootstrap(conn: sqlite3.Connection) -> None:
    """Create the funding records table and indexes (idempotent)."""
    cur = conn.cursor()

    # Column order mirrors the exported row layout
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS funding_records (\n"
            "  id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "  company_name TEXT NOT NULL,\n"
            "  ceo_email TEXT NOT NULL,\n"
            "  cmo_email TEXT NOT NULL,\n"
            "  lead_investor TEXT NOT NULL,\n"
            "  follow_on_investors TEXT NOT NULL DEFAULT '',\n"
            "  amount_raised TEXT NOT NULL,\n"
            "  classification TEXT NOT NULL,\n"
            "  scam_flag TEXT NOT NULL DEFAULT '',\n"
            "  processed_at TEXT NOT NULL,\n"
            "  confidence INTEGER NOT NULL DEFAULT 0,\n"
            "  extraction_errors_json TEXT NOT NULL DEFAULT '[]',\n"
            "  source_url TEXT\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_funding_records_company ON funding_records(company_name);")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_funding_records_processed ON funding_records(processed_at);")

    conn.commit()
