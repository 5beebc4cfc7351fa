import argparse
import json
import os
import sys
import uuid as _uuid

from config.settings import get_settings
from db import schema
from db.connection import get_connection
from db.repos.records_repo import RecordsRepo
import pipelines.process_press_release as ppr
from services.domain_utils import is_http_url
from services.reporting import llm_usage_for_run, print_summary
from utils.logging_setup import init_logging


def _ensure_run_id() -> str:
    if not os.getenv("RUN_ID"):
        os.environ["RUN_ID"] = _uuid.uuid4().hex
    return os.environ["RUN_ID"]


def cmd_bootstrap(args):
    conn = get_connection(args.db)
    schema.bootstrap(conn)
    print("Schema ready")


def cmd_process(args):
    url = (args.url or "").strip()
    if not is_http_url(url):
        print(f"Invalid URL (expected absolute http(s) URL): {url}", file=sys.stderr)
        sys.exit(2)

    run_id = _ensure_run_id()
    orchestrator = ppr.build_default_orchestrator()

    repo = None
    if args.write_db:
        conn = get_connection(args.db)
        schema.bootstrap(conn)
        repo = RecordsRepo(conn)

    def _persist(record):
        if repo is not None:
            row_id = repo.append(record, source_url=url)
            print(f"DB write complete: record_id={row_id}")
        if args.json:
            print(json.dumps(record.to_payload(), indent=2, ensure_ascii=False))
        else:
            settings = get_settings()
            usage = llm_usage_for_run(run_id) if settings.llm_trace else None
            print_summary(record, source_url=url, usage=usage)

    if args.background:
        thread = ppr.submit_in_background(url, orchestrator, _persist)
        print(f"Submitted {url} (run_id={run_id}, worker={thread.name})")
        return thread

    record = orchestrator.run(url)
    _persist(record)
    return record


def cmd_report_recent(args):
    conn = get_connection(args.db)
    schema.bootstrap(conn)
    rows = RecordsRepo(conn).recent(limit=args.limit)
    print(json.dumps(rows, indent=2, ensure_ascii=False))


def main():
    settings = get_settings()
    init_logging(settings.log_level)
    parser = argparse.ArgumentParser(description="Funding announcement extraction CLI")
    parser.add_argument("--db", default=settings.db_path, help="Path to SQLite DB (default from settings)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_boot = sub.add_parser("bootstrap", help="Create tables and indexes")
    p_boot.set_defaults(func=cmd_bootstrap)

    p_proc = sub.add_parser("process", help="Extract a funding record from one press release URL")
    p_proc.add_argument("--url", required=True, help="Press release URL")
    p_proc.add_argument("--write-db", action="store_true", help="Append the record to SQLite")
    p_proc.add_argument("--background", action="store_true", help="Submit and return without waiting for the record")
    p_proc.add_argument("--json", action="store_true", help="Print the record as JSON instead of a summary")
    p_proc.set_defaults(func=cmd_process)

    p_rr = sub.add_parser("report-recent", help="List recently stored records")
    p_rr.add_argument("--limit", type=int, default=5)
    p_rr.set_defaults(func=cmd_report_recent)

    args = parser.parse_args()
    return args.func(args)


if __name__ == "__main__":
    main()
