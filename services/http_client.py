from __future__ import annotations

import logging
from typing import Dict, Optional

import requests

from ports.http import HttpResponse
from services.errors import FetchError, FetchErrorKind


logger = logging.getLogger(__name__)

_DNS_MARKERS = ("name or service not known", "nodename nor servname", "getaddrinfo", "nameresolution", "name resolution")


class RequestsFetcher:
    """HttpFetcherPort over a requests.Session; transport failures become FetchError."""

    def __init__(self, session: Optional[requests.Session] = None) -> None:
        self.session = session or requests.Session()

    def get(self, url: str, *, headers: Dict[str, str], timeout: float, max_redirects: int) -> HttpResponse:
        self.session.max_redirects = max_redirects
        try:
            resp = self.session.get(url, headers=headers, timeout=timeout, allow_redirects=True)
        except requests.exceptions.Timeout as e:
            raise FetchError(FetchErrorKind.TIMEOUT, "Request timed out - website is too slow to respond") from e
        except requests.exceptions.TooManyRedirects as e:
            raise FetchError(FetchErrorKind.BAD_REQUEST, f"Too many redirects (limit {max_redirects})") from e
        except requests.exceptions.ConnectionError as e:
            if any(marker in str(e).lower() for marker in _DNS_MARKERS):
                raise FetchError(FetchErrorKind.NETWORK_UNREACHABLE, "Website not found - check if URL is correct") from e
            raise FetchError(FetchErrorKind.NETWORK_UNREACHABLE, "Connection refused - website may be down") from e
        except requests.exceptions.RequestException as e:
            raise FetchError(FetchErrorKind.BAD_REQUEST, f"Unable to access this link: {e}") from e
        logger.debug("GET %s -> %s (%d bytes)", url, resp.status_code, len(resp.text or ""))
        return HttpResponse(status=resp.status_code, body=resp.text or "")
