from __future__ import annotations

from enum import Enum
from typing import Optional


class FetchErrorKind(str, Enum):
    NOT_FOUND = "NotFound"
    AUTH_DENIED = "AuthDenied"
    RATE_LIMITED = "RateLimited"
    TIMEOUT = "Timeout"
    NETWORK_UNREACHABLE = "NetworkUnreachable"
    EMPTY_CONTENT = "EmptyContent"
    BAD_REQUEST = "BadRequest"


_RETRYABLE_KINDS = {
    FetchErrorKind.RATE_LIMITED,
    FetchErrorKind.TIMEOUT,
    FetchErrorKind.NETWORK_UNREACHABLE,
}


class FetchError(Exception):
    """Content acquisition failure. str(err) is the user-facing reason."""

    def __init__(self, kind: FetchErrorKind, message: str, *, status: Optional[int] = None, fallback_note: Optional[str] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status = status
        self.fallback_note = fallback_note

    @property
    def retryable(self) -> bool:
        if self.status is not None and self.status >= 500:
            return True
        return self.kind in _RETRYABLE_KINDS


class LLMErrorKind(str, Enum):
    INVALID_RESPONSE = "InvalidResponse"
    PARSE_FAILURE = "ParseFailure"


class LLMError(Exception):
    """Generation-service failure; raw_text keeps the offending response for diagnostics."""

    def __init__(self, kind: LLMErrorKind, message: str, *, raw_text: Optional[str] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.raw_text = raw_text
