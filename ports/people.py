from __future__ import annotations

from typing import List, Optional, Protocol

from models.executive import ExecutiveCandidate


class PeopleDataPort(Protocol):
    def search_by_org_and_titles(self, org: str, titles: List[str]) -> List[ExecutiveCandidate]:
        ...

    def enrich(self, first_name: str, last_name: str, org: str) -> Optional[str]:
        ...
