from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Classification(str, Enum):
    WEB3 = "Web3"
    AI = "AI"
    AI_SAAS = "AI SaaS"
    SAAS = "SaaS"
    SOFTWARE = "Software"
    FINTECH = "Fintech"
    BIOTECH = "Biotech"
    CLEANTECH = "CleanTech"
    INVESTMENT_FIRM = "Investment Firm"
    OTHER = "Other"

    @classmethod
    def coerce(cls, value: object) -> Optional["Classification"]:
        """Match a free-form label against the closed set; None when nothing fits.

        Case-insensitive, and tolerant of a trailing "Company" ("SaaS Company" -> SaaS).
        """
        if not isinstance(value, str):
            return None
        label = " ".join(value.split()).lower()
        if label.endswith(" company"):
            label = label[: -len(" company")]
        for member in cls:
            if member.value.lower() == label:
                return member
        return None


class ExtractedFields(BaseModel):
    """Sanitized output of one generation call; None marks an absent field."""

    company_name: Optional[str] = None
    lead_investor: Optional[str] = None
    follow_on_investors: list[str] = Field(default_factory=list)
    amount_raised: Optional[str] = None
    classification: Classification = Classification.OTHER
    is_scam: bool = False
    confidence: int = Field(default=0, ge=0, le=100)

    # Raw validation state
    raw_response: str = ""
    validation_notes: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")
