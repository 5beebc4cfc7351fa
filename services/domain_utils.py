from __future__ import annotations

from typing import List, Optional
from urllib.parse import urlparse

import tldextract


# Bundled public-suffix snapshot only; no network lookup at import or call time
_EXTRACT = tldextract.TLDExtract(suffix_list_urls=())


def extract_apex_domain(url_or_domain: Optional[str]) -> Optional[str]:
    if not url_or_domain:
        return None
    try:
        text = str(url_or_domain).strip().lower()
        if not text.startswith('http://') and not text.startswith('https://'):
            text = f"http://{text}"
        ext = _EXTRACT(text)
        if ext.domain and ext.suffix:
            return f"{ext.domain}.{ext.suffix}"
        return None
    except Exception:
        return None


def is_http_url(url: Optional[str]) -> bool:
    """Absolute http(s) URL with a host."""
    if not url or not isinstance(url, str):
        return False
    try:
        u = urlparse(url.strip())
    except ValueError:
        return False
    return u.scheme in ("http", "https") and bool(u.netloc)


def path_segments(url: str) -> List[str]:
    """Non-empty path segments, still percent-encoded."""
    try:
        path = urlparse(url).path or ''
    except ValueError:
        return []
    return [p for p in path.split('/') if p]
