from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

from models.final_record import FinalRecord
from utils.llm_logger import iter_calls


def llm_usage_for_run(run_id: str, log_path: Optional[Path] = None) -> Dict[str, Dict[str, int]]:
    """Aggregate traced LLM calls for run_id.

    Returns dict like { 'openai': {'calls': N, 'tokens': T, 'errors': E} }
    """
    if log_path is None:
        from config.settings import get_settings
        log_path = Path(get_settings().llm_log_path)
    result: Dict[str, Dict[str, int]] = {}
    for rec in iter_calls(log_path, run_id=run_id):
        provider = rec.get("provider") or "unknown"
        usage = rec.get("usage") or {}
        bucket = result.setdefault(provider, {"calls": 0, "tokens": 0, "errors": 0})
        bucket["calls"] += 1
        if rec.get("status") == "error":
            bucket["errors"] += 1
        try:
            bucket["tokens"] += int(usage.get("total_tokens") or 0)
        except (TypeError, ValueError):
            pass
    return result


def print_summary(record: FinalRecord, source_url: Optional[str] = None, usage: Optional[Dict[str, Dict[str, int]]] = None) -> None:
    """Print a human-readable summary of one processed press release."""
    print("\n" + "=" * 60)
    print("FUNDING ANNOUNCEMENT - SUMMARY")
    print("=" * 60)
    if source_url:
        print(f"URL: {source_url}")
    print(f"Company: {record.company_name}")
    print(f"Amount Raised: {record.amount_raised}")
    print(f"Lead Investor: {record.lead_investor}")
    follow_on = ", ".join(record.follow_on_investors) or "-"
    print(f"Follow-on Investors: {follow_on}")
    print(f"Classification: {record.classification}")
    print(f"CEO Email: {record.ceo_email}")
    print(f"CMO Email: {record.cmo_email}")
    print(f"Confidence: {record.confidence}")
    if record.is_scam:
        print("WARNING: announcement flagged as suspicious")
    if record.extraction_errors:
        print("Errors:")
        for err in record.extraction_errors:
            print(f"  - {err}")
    if usage:
        print("LLM Usage:")
        for provider, stats in usage.items():
            print(f"  {provider}: calls={stats.get('calls', 0)}, tokens={stats.get('tokens', 0)}")
    print("=" * 60)
