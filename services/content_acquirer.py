from __future__ import annotations

import logging
from typing import Tuple

from bs4 import BeautifulSoup

from models.acquired_content import AcquiredContent, AcquisitionMethod
from ports.http import HttpFetcherPort
from services.errors import FetchError, FetchErrorKind
from services.url_heuristics import synthesize_from_url


logger = logging.getLogger(__name__)

# Browser-like headers; several wire services reject the default requests UA
BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate",
    "DNT": "1",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Sec-Fetch-User": "?1",
    "Cache-Control": "max-age=0",
}

STRIP_SELECTORS = (
    "script, style, noscript, nav, footer, aside, "
    ".advertisement, .ad, .ads, .social-share, "
    ".cookie-banner, #cookie-banner, .cookie-consent, .subscription-wall"
)

# Site-specific containers first, generic layouts last
CONTENT_SELECTORS = [
    # Business Wire
    ".bw-release-story",
    "#bw-release-story",
    # PR Newswire
    "section.release-body",
    ".release-body",
    # GlobeNewswire
    "#main-body-container",
    ".main-body-container",
    # Reuters
    'article [data-module="ArticleBody"]',
    ".ArticleBody-container",
    ".StandardArticleBody_container",
    # Generic news layouts
    "article .article-body",
    "article .content",
    "article .post-content",
    ".article-content",
    ".story-body",
    ".entry-content",
    "main article",
    "article",
    "main",
    ".main-content",
]

MIN_SELECTOR_CHARS = 200
MIN_CONTENT_CHARS = 100


def _status_error(status: int) -> FetchError | None:
    if status in (401, 403):
        return FetchError(FetchErrorKind.AUTH_DENIED, "Access denied - site requires authentication or blocks bots", status=status)
    if status == 404:
        return FetchError(FetchErrorKind.NOT_FOUND, "Article not found (404)", status=status)
    if status == 429:
        return FetchError(FetchErrorKind.RATE_LIMITED, "Rate limited - too many requests", status=status)
    if status >= 500:
        # Left to the orchestrator's retry; not retried here
        return FetchError(FetchErrorKind.NETWORK_UNREACHABLE, f"HTTP {status}: Server error while accessing article", status=status)
    if status >= 400:
        return FetchError(FetchErrorKind.BAD_REQUEST, f"HTTP {status}: Unable to access article", status=status)
    return None


def parse_press_release_html(html: str) -> Tuple[str, str]:
    """Return (title, normalized text) for a fetched press-release page.

    Raises FetchError(EmptyContent) when the page carries no usable text.
    """
    soup = BeautifulSoup(html, "html.parser")

    title = soup.title.get_text(strip=True) if soup.title else ""
    if not title:
        h1 = soup.find("h1")
        title = h1.get_text(strip=True) if h1 else ""
    meta = soup.find("meta", attrs={"name": "description"})
    description = (meta.get("content") or "").strip() if meta else ""

    for tag in soup.select(STRIP_SELECTORS):
        tag.decompose()

    main = ""
    for selector in CONTENT_SELECTORS:
        node = soup.select_one(selector)
        if node is None:
            continue
        text = node.get_text(" ", strip=True)
        if len(text) > MIN_SELECTOR_CHARS:
            logger.debug("Content found using selector %s", selector)
            main = text
            break

    if not main:
        body = soup.body or soup
        main = body.get_text(" ", strip=True)

    if len(main) < MIN_CONTENT_CHARS:
        raise FetchError(FetchErrorKind.EMPTY_CONTENT, "No meaningful content found on the page")

    content = f"Title: {title}\n\nDescription: {description}\n\nContent: {main}"
    return title, " ".join(content.split())


class ContentAcquirer:
    """Fetch a press release, falling back to URL-derived content when the fetch fails."""

    def __init__(self, fetcher: HttpFetcherPort, *, timeout: float = 30.0, max_redirects: int = 5) -> None:
        self.fetcher = fetcher
        self.timeout = timeout
        self.max_redirects = max_redirects

    def acquire(self, url: str) -> AcquiredContent:
        try:
            content = self.fetch_direct(url)
            logger.info("Content acquired via direct fetch (%d chars)", len(content.text), extra={"step": "acquire", "status": "ok"})
            return content
        except FetchError as e:
            direct_error = e
        except Exception as e:
            # Injected fetchers may raise anything; every failure counts as a failed strategy
            direct_error = FetchError(FetchErrorKind.BAD_REQUEST, f"Unable to access this link: {e}")
            direct_error.__cause__ = e
        logger.info("Direct fetch failed (%s), trying URL heuristic", direct_error, extra={"step": "acquire", "status": "fallback", "error": direct_error.kind.value})

        fallback = synthesize_from_url(url)
        if fallback is None:
            error = FetchError(
                direct_error.kind,
                direct_error.message,
                status=direct_error.status,
                fallback_note="URL heuristic could not derive a title",
            )
            logger.warning("Acquisition failed: %s; %s", error, error.fallback_note, extra={"step": "acquire", "status": "error", "error": error.kind.value})
            raise error from direct_error
        logger.info("Content synthesized from %s URL: %s", fallback.family, fallback.title, extra={"step": "acquire", "status": "ok"})
        return AcquiredContent(
            text=fallback.text,
            method=AcquisitionMethod.URL_HEURISTIC,
            title=fallback.title,
            source_url=url,
        )

    def fetch_direct(self, url: str) -> AcquiredContent:
        resp = self.fetcher.get(url, headers=dict(BROWSER_HEADERS), timeout=self.timeout, max_redirects=self.max_redirects)
        error = _status_error(resp.status)
        if error is not None:
            raise error
        html = resp.body
        if not html or len(html) < MIN_CONTENT_CHARS:
            raise FetchError(FetchErrorKind.EMPTY_CONTENT, "Empty or invalid response received", status=resp.status)
        title, text = parse_press_release_html(html)
        return AcquiredContent(text=text, method=AcquisitionMethod.DIRECT_FETCH, title=title, source_url=url)
