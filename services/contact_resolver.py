from __future__ import annotations

import concurrent.futures as _fut
import logging
from typing import List, Optional, Tuple

from models.executive import ExecutiveCandidate, ExecutiveContacts
from models.final_record import SENTINEL_COMPANY_NAMES
from ports.people import PeopleDataPort


logger = logging.getLogger(__name__)

CEO_TITLES = ["CEO", "Chief Executive Officer", "Founder", "Co-Founder"]
CMO_TITLES = ["CMO", "Chief Marketing Officer", "VP Marketing", "Vice President Marketing", "Head of Marketing"]

ROLE_TITLES = {"ceo": CEO_TITLES, "cmo": CMO_TITLES}


def score_title(title: Optional[str], synonyms: List[str]) -> int:
    """100 for an exact synonym, 80 when a synonym appears inside the title, else 50."""
    low = (title or "").strip().lower()
    if not low:
        return 50
    lowered = [s.lower() for s in synonyms]
    if low in lowered:
        return 100
    if any(s in low for s in lowered):
        return 80
    return 50


def select_candidate(candidates: List[ExecutiveCandidate], synonyms: List[str]) -> Optional[ExecutiveCandidate]:
    best: Optional[ExecutiveCandidate] = None
    for cand in candidates:
        scored = cand.model_copy(update={"match_score": score_title(cand.title, synonyms)})
        # Strict comparison keeps the earliest result on ties
        if best is None or scored.match_score > best.match_score:
            best = scored
    return best


class ContactResolver:
    """Find CEO and CMO emails for a company. Never raises; failures become None."""

    def __init__(self, people: PeopleDataPort, *, max_workers: int = 2) -> None:
        self.people = people
        self.max_workers = max_workers

    def resolve(self, company_name: Optional[str]) -> ExecutiveContacts:
        name = (company_name or "").strip()
        if not name or name in SENTINEL_COMPANY_NAMES:
            logger.info("Skipping contact lookup, no usable company name", extra={"step": "resolve", "status": "skipped"})
            return ExecutiveContacts()

        with _fut.ThreadPoolExecutor(max_workers=self.max_workers) as ex:
            ceo_future = ex.submit(self._resolve_role, name, "ceo")
            cmo_future = ex.submit(self._resolve_role, name, "cmo")
            ceo_name, ceo_email = ceo_future.result()
            cmo_name, cmo_email = cmo_future.result()

        credits = getattr(self.people, "credits_used", None)
        if credits is not None:
            logger.info("Contact lookup for %s done (people-data credits used: %d)", name, credits, extra={"step": "resolve"})

        return ExecutiveContacts(ceo_email=ceo_email, cmo_email=cmo_email, ceo_name=ceo_name, cmo_name=cmo_name)

    def _resolve_role(self, company: str, role: str) -> Tuple[Optional[str], Optional[str]]:
        try:
            return self._lookup(company, role)
        except Exception as e:
            logger.warning("%s lookup failed for %s: %s", role.upper(), company, e, extra={"step": "resolve", "status": "error", "error": type(e).__name__})
            return None, None

    def _lookup(self, company: str, role: str) -> Tuple[Optional[str], Optional[str]]:
        titles = ROLE_TITLES[role]
        candidates = self.people.search_by_org_and_titles(company, list(titles))
        best = select_candidate(candidates or [], titles)
        if best is None:
            logger.info("No %s candidates for %s", role.upper(), company, extra={"step": "resolve", "status": "miss"})
            return None, None
        email = self.people.enrich(best.first_name, best.last_name, company)
        if not email:
            logger.info("No verified email for %s (%s)", best.full_name, role.upper(), extra={"step": "resolve", "status": "miss"})
            return best.full_name or None, None
        logger.info("Found %s %s (score %d)", role.upper(), best.full_name, best.match_score, extra={"step": "resolve", "status": "ok"})
        return best.full_name or None, email
