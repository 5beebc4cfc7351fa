"""Best-effort content synthesis from a press-release URL alone.

Used when the page itself cannot be fetched. Wire services put the headline
into the URL slug, so the slug is turned back into a title and wrapped in a
minimal pseudo press release for the extractor. Nothing in here raises.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional
from urllib.parse import unquote

from services.domain_utils import extract_apex_domain, path_segments


logger = logging.getLogger(__name__)

# Encoded symbols worth keeping in a headline (matched case-insensitively before decoding)
SYMBOL_TOKENS = {
    "%24": "$",
    "%e2%82%ac": "€",
    "%c2%a3": "£",
    "%c2%a5": "¥",
    "%26": "&",
}

_EXTENSION_RE = re.compile(r"\.(?:s?html?|aspx?|php)$", re.IGNORECASE)
_RELEASE_ID_RE = re.compile(r"[-_]\d{6,}$")
_SEPARATOR_RE = re.compile(r"[-_+]+")
_SYMBOL_RE = re.compile("|".join(re.escape(k) for k in SYMBOL_TOKENS), re.IGNORECASE)
_ANNOUNCEMENT_WORDS = ("raises", "announces", "funding", "secures", "closes")


@dataclass(frozen=True)
class HeuristicContent:
    title: str
    text: str
    family: str


@dataclass(frozen=True)
class _Family:
    name: str
    domain: str
    label: str
    pick_segment: Callable[[List[str]], Optional[str]]
    strip_release_id: bool = False


def _last_segment(segments: List[str]) -> Optional[str]:
    return segments[-1] if segments else None


def _announcement_segment(segments: List[str]) -> Optional[str]:
    for seg in segments:
        low = seg.lower()
        if any(word in low for word in _ANNOUNCEMENT_WORDS):
            return seg
    return _last_segment(segments)


FAMILIES: List[_Family] = [
    # /news/home/20240101/en/Acme-Raises-50-Million-Series-B
    _Family("businesswire", "businesswire.com", "Business Wire", _last_segment),
    # /news-releases/acme-raises-50-million-series-b-302012345.html
    _Family("prnewswire", "prnewswire.com", "PR Newswire", _announcement_segment, strip_release_id=True),
    # /news-release/2024/01/01/2805123/0/en/Acme-Raises-50-Million.html
    _Family("globenewswire", "globenewswire.com", "GlobeNewswire", _last_segment),
    # /834567/acme-raises-50-million
    _Family("accesswire", "accesswire.com", "ACCESSWIRE", _last_segment, strip_release_id=True),
]


def classify_url(url: str) -> Optional[_Family]:
    apex = extract_apex_domain(url)
    if not apex:
        return None
    for family in FAMILIES:
        if apex == family.domain:
            return family
    return None


def title_from_segment(segment: Optional[str], *, strip_release_id: bool = False) -> str:
    """Turn a URL slug into a readable headline ("Acme-Raises-%2450M" -> "Acme Raises $50M")."""
    if not segment:
        return ""
    text = _SYMBOL_RE.sub(lambda m: SYMBOL_TOKENS[m.group(0).lower()], segment)
    text = unquote(text)
    text = _EXTENSION_RE.sub("", text)
    if strip_release_id:
        text = _RELEASE_ID_RE.sub("", text)
    text = _SEPARATOR_RE.sub(" ", text)
    return " ".join(text.split())


def _wire_content(title: str, label: str) -> str:
    return (
        f"Title: {title}\n\n"
        f"This is a {label} press release about: {title}\n\n"
        "Based on the URL structure, this appears to be a business or funding announcement about:\n"
        f"{title}\n\n"
        f"The URL suggests this is a significant business announcement published via {label}."
    )


def _generic_content(title: str, url: str) -> str:
    return (
        f"Title: {title}\n\n"
        f"URL: {url}\n\n"
        "This appears to be a business or funding announcement based on the URL structure.\n"
        "The specific content could not be accessed due to access restrictions."
    )


def synthesize_from_url(url: str) -> Optional[HeuristicContent]:
    """Pseudo content for url, or None when no title can be derived."""
    try:
        segments = path_segments(url)
        family = classify_url(url)
        if family is not None:
            title = title_from_segment(family.pick_segment(segments), strip_release_id=family.strip_release_id)
            if title:
                return HeuristicContent(title=title, text=_wire_content(title, family.label), family=family.name)
        title = title_from_segment(_last_segment(segments))
        if title:
            return HeuristicContent(title=title, text=_generic_content(title, url), family="generic")
    except Exception as e:
        logger.debug("URL heuristic failed for %s: %s", url, e)
    return None
