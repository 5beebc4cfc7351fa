from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from models.extracted_fields import Classification, ExtractedFields
from ports.llm import TextGeneratorPort
from services.errors import LLMError, LLMErrorKind


logger = logging.getLogger(__name__)

EXTRACTION_KEYS = (
    "companyName",
    "leadInvestor",
    "followOnInvestors",
    "amountRaised",
    "classification",
    "isScam",
    "confidence",
)

# Placeholders the model uses for "unknown"; treated as absent
_ABSENT_MARKERS = {"", "not found", "n/a", "na", "none", "null", "unknown", "extraction failed"}
_TRUE_STRINGS = {"true", "yes", "y", "1"}

TRUNCATION_MARKER = "...(truncated)"

_CUE_WINDOW = 60
_LEADING_CUES = (
    "led by",
    "participation from",
    "participation of",
    "investors such as",
    "investors include",
    "joined by",
    "backed by",
    "along with",
    "alongside",
    "investment from",
    "funding from",
    "financing from",
    "including",
)
_TRAILING_CUES = ("participated", "participating", "joined", "invested", "led the", "co-led", "returned")


@dataclass(frozen=True)
class ParsedExtraction:
    fields: ExtractedFields


@dataclass(frozen=True)
class ParseFailure:
    reason: str
    raw_text: str


ParseResult = Union[ParsedExtraction, ParseFailure]


def build_prompt(text: str, url: str, char_limit: int = 8000) -> str:
    clipped = text[:char_limit]
    if len(text) > char_limit:
        clipped = f"{clipped} {TRUNCATION_MARKER}"
    categories = ", ".join(c.value for c in Classification)
    return f"""You are an expert at extracting structured data from press releases about company funding announcements.

Analyze the following press release content and URL, then extract the requested information.

URL: {url}

CONTENT:
{clipped}

Respond ONLY with one valid JSON object in exactly this format:

{{
  "companyName": "The company that raised the funding (not an investor or parent company)",
  "leadInvestor": "The investor that led the round",
  "followOnInvestors": ["Other participating or follow-on investors"],
  "amountRaised": "Amount in the form '$150M' or '$4.05B' (M for millions, B for billions)",
  "classification": "One of: {categories}",
  "isScam": false,
  "confidence": 85
}}

GUIDELINES:
1. Company name: the company that received the funding, never one of its investors. If the content is unclear, derive it from the URL (e.g. "tae-technologies-raises" -> "TAE Technologies").
2. Funding amount: recognize forms like "$150 million", "$4.05 billion", "150M" and normalize them to "$<number>M" or "$<number>B".
3. Investors: the lead investor is the one who led the round; everyone else who participated is a follow-on investor. Do not repeat the lead investor in followOnInvestors.
4. Classification: choose the most specific category from the list above.
5. If a value is clearly not present, use "NOT FOUND" for strings and [] for arrays.
6. Confidence is an integer from 0 to 100 reflecting how clear and complete the information is.
7. Set isScam to true only for clearly fraudulent or suspicious announcements.

Respond with ONLY the JSON object, no additional text."""


def _clean_str(value: Any, key: str, notes: List[str]) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        notes.append(f"{key}: expected string, got {type(value).__name__}")
        return None
    text = " ".join(value.split())
    if text.lower() in _ABSENT_MARKERS:
        return None
    return text


def _coerce_bool(value: Any, notes: List[str]) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        notes.append("isScam: coerced number to boolean")
        return value != 0
    if isinstance(value, str):
        notes.append("isScam: coerced string to boolean")
        return value.strip().lower() in _TRUE_STRINGS
    notes.append(f"isScam: unsupported type {type(value).__name__}, defaulting to false")
    return False


def _coerce_confidence(value: Any, notes: List[str]) -> int:
    number: Optional[float] = None
    if isinstance(value, bool):
        number = None
    elif isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().rstrip("%"))
        except ValueError:
            number = None
    if number is None or not math.isfinite(number):
        if value is not None:
            notes.append(f"confidence: non-numeric value {value!r}, defaulting to 0")
        return 0
    confidence = int(round(number))
    if confidence < 0 or confidence > 100:
        notes.append(f"confidence: {confidence} clamped to [0, 100]")
        confidence = min(100, max(0, confidence))
    return confidence


def investor_evidence(source_text: str) -> str:
    """Article body that may name investors.

    Fetched pages carry a "Title: ... Description: ... Content: ..." header; only the
    body after "Content:" counts. URL-derived pseudo content has no body at all.
    """
    text = source_text or ""
    head, sep, body = text.partition(" Content: ")
    if sep and head.startswith("Title:"):
        return body
    if text.startswith("Title:"):
        return ""
    return text


def count_listing_mentions(name: str, text: str) -> int:
    """Mentions of name framed as an investor in the round ("led by X", "X also participated")."""
    low = text.lower()
    needle = name.lower()
    count = 0
    prev_end = 0
    start = low.find(needle)
    while start != -1:
        end = start + len(needle)
        before = low[max(prev_end, start - _CUE_WINDOW):start]
        after = low[end:end + _CUE_WINDOW].split(". ", 1)[0]
        if any(cue in before for cue in _LEADING_CUES) or any(cue in after for cue in _TRAILING_CUES):
            count += 1
        prev_end = end
        start = low.find(needle, end)
    return count


def _clean_investors(value: Any, lead: Optional[str], source_text: str, notes: List[str]) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        notes.append(f"followOnInvestors: expected array, got {type(value).__name__}")
        return []
    seen = set()
    investors: List[str] = []
    for item in value:
        name = _clean_str(item, "followOnInvestors[]", notes)
        if not name or name in seen:
            continue
        seen.add(name)
        investors.append(name)
    if lead and lead in seen:
        # Only keep the lead among follow-ons when the body lists it as an investor twice
        if count_listing_mentions(lead, investor_evidence(source_text)) < 2:
            investors = [i for i in investors if i != lead]
            notes.append("followOnInvestors: removed duplicate of leadInvestor")
    return investors


def parse_extraction_response(raw: str, source_text: str = "") -> ParseResult:
    """Validate a generation response against the extraction schema.

    Returns ParsedExtraction with sanitized fields, or ParseFailure carrying the raw
    text. Never raises.
    """
    try:
        data = json.loads((raw or "").strip())
    except json.JSONDecodeError as e:
        return ParseFailure(reason=f"response is not valid JSON ({e.msg})", raw_text=raw)
    if not isinstance(data, dict):
        return ParseFailure(reason=f"expected a JSON object, got {type(data).__name__}", raw_text=raw)
    if not any(key in data for key in EXTRACTION_KEYS):
        return ParseFailure(reason="JSON object has none of the expected fields", raw_text=raw)

    notes: List[str] = []
    company = _clean_str(data.get("companyName"), "companyName", notes)
    lead = _clean_str(data.get("leadInvestor"), "leadInvestor", notes)
    amount = _clean_str(data.get("amountRaised"), "amountRaised", notes)
    follow_on = _clean_investors(data.get("followOnInvestors"), lead, source_text, notes)

    classification = Classification.coerce(data.get("classification"))
    if classification is None:
        notes.append(f"classification: {data.get('classification')!r} not in closed set, using Other")
        classification = Classification.OTHER

    fields = ExtractedFields(
        company_name=company,
        lead_investor=lead,
        follow_on_investors=follow_on,
        amount_raised=amount,
        classification=classification,
        is_scam=_coerce_bool(data.get("isScam"), notes),
        confidence=_coerce_confidence(data.get("confidence"), notes),
        raw_response=raw,
        validation_notes=notes,
    )
    return ParsedExtraction(fields=fields)


class StructuredExtractor:
    """One generation call per extraction; retrying is the orchestrator's job."""

    def __init__(self, generator: TextGeneratorPort, *, char_limit: int = 8000) -> None:
        self.generator = generator
        self.char_limit = char_limit

    def extract(self, text: str, url: str) -> ExtractedFields:
        prompt = build_prompt(text, url, self.char_limit)
        try:
            raw = self.generator.generate(prompt)
        except LLMError:
            raise
        except Exception as e:
            raise LLMError(LLMErrorKind.INVALID_RESPONSE, f"Generation request failed: {e}") from e

        if not raw or not raw.strip():
            raise LLMError(LLMErrorKind.INVALID_RESPONSE, "Generation service returned an empty response", raw_text=raw)

        result = parse_extraction_response(raw, source_text=text)
        if isinstance(result, ParseFailure):
            logger.warning("Unparseable extraction response: %.200s", result.raw_text, extra={"step": "extract", "status": "error"})
            raise LLMError(
                LLMErrorKind.PARSE_FAILURE,
                f"Failed to parse extraction response: {result.reason}",
                raw_text=result.raw_text,
            )
        fields = result.fields
        if fields.validation_notes:
            logger.debug("Extraction sanitized: %s", "; ".join(fields.validation_notes))
        return fields
