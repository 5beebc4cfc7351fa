from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Protocol


@dataclass(frozen=True)
class HttpResponse:
    status: int
    body: str


class HttpFetcherPort(Protocol):
    def get(self, url: str, *, headers: Dict[str, str], timeout: float, max_redirects: int) -> HttpResponse:
        """Return the final response; raise FetchError on transport failure."""
        ...
