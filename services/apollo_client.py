"""Apollo.io people search + enrichment (PeopleDataPort).

Search never returns emails; a verified address needs a /people/match call,
which costs one credit per hit.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional

import requests

from models.executive import ExecutiveCandidate


logger = logging.getLogger(__name__)

_STATUS_MESSAGES = {
    401: "Invalid Apollo API key",
    402: "Apollo API quota exceeded",
    429: "Apollo API rate limit exceeded",
}


class ApolloClient:
    def __init__(
        self,
        api_key: Optional[str],
        *,
        base_url: str = "https://api.apollo.io/api/v1",
        timeout: float = 15.0,
        per_page: int = 5,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not api_key:
            raise ValueError("APOLLO_API_KEY is required for people lookups")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.per_page = per_page
        self.session = session or requests.Session()
        self.credits_used = 0
        # CEO and CMO lookups share one client across resolver threads
        self._credits_lock = threading.Lock()

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-Api-Key": self.api_key,
            "Cache-Control": "no-cache",
        }

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        resp = self.session.post(f"{self.base_url}{path}", json=payload, headers=self._headers(), timeout=self.timeout)
        if resp.status_code in _STATUS_MESSAGES:
            logger.error("%s (POST %s)", _STATUS_MESSAGES[resp.status_code], path, extra={"provider": "apollo", "status": resp.status_code})
        resp.raise_for_status()
        data = resp.json()
        return data if isinstance(data, dict) else {}

    def search_by_org_and_titles(self, org: str, titles: List[str]) -> List[ExecutiveCandidate]:
        logger.info("Searching Apollo for %s at %s", " OR ".join(titles), org, extra={"provider": "apollo"})
        data = self._post(
            "/mixed_people/search",
            {
                "q_organization_name": org,
                "person_titles": list(titles),
                "page": 1,
                "per_page": self.per_page,
            },
        )
        candidates: List[ExecutiveCandidate] = []
        for person in data.get("people") or []:
            if not isinstance(person, dict):
                continue
            candidates.append(
                ExecutiveCandidate(
                    first_name=person.get("first_name") or "",
                    last_name=person.get("last_name") or "",
                    title=person.get("title") or "",
                )
            )
        return candidates

    def enrich(self, first_name: str, last_name: str, org: str) -> Optional[str]:
        logger.info("Enriching contact %s %s at %s", first_name, last_name, org, extra={"provider": "apollo"})
        data = self._post(
            "/people/match",
            {
                "first_name": first_name,
                "last_name": last_name,
                "organization_name": org,
                "reveal_personal_emails": False,
                "reveal_phone_number": False,
            },
        )
        person = data.get("person") or {}
        email = person.get("email") if isinstance(person, dict) else None
        if not email:
            return None
        with self._credits_lock:
            self.credits_used += 1
            used = self.credits_used
        logger.info("Verified email found for %s %s (credits used: %d)", first_name, last_name, used, extra={"provider": "apollo"})
        return str(email)
