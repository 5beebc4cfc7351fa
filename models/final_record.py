from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.extracted_fields import Classification


NOT_FOUND = "NOT FOUND"
EMAIL_NOT_FOUND = "EMAIL NOT FOUND"
EXTRACTION_FAILED = "EXTRACTION FAILED"
UNKNOWN_CLASSIFICATION = "UNKNOWN"

SENTINEL_COMPANY_NAMES = frozenset({NOT_FOUND, EXTRACTION_FAILED})


class FinalRecord(BaseModel):
    """Output record handed to the persistence sink; immutable once built."""

    company_name: str = Field(alias="companyName")
    ceo_email: str = Field(default=EMAIL_NOT_FOUND, alias="ceoEmail")
    cmo_email: str = Field(default=EMAIL_NOT_FOUND, alias="cmoEmail")
    lead_investor: str = Field(alias="leadInvestor")
    follow_on_investors: tuple[str, ...] = Field(default=(), alias="followOnInvestors")
    amount_raised: str = Field(alias="amountRaised")
    classification: str = Field(default=Classification.OTHER.value)
    is_scam: bool = Field(default=False, alias="isScam")
    confidence: int = Field(default=0, ge=0, le=100)
    extraction_errors: tuple[str, ...] = Field(default=(), alias="extractionErrors")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    @field_validator("classification", mode="before")
    @classmethod
    def _closed_classification(cls, value: object) -> str:
        if isinstance(value, Classification):
            return value.value
        if value == UNKNOWN_CLASSIFICATION:
            return UNKNOWN_CLASSIFICATION
        member = Classification.coerce(value)
        return (member or Classification.OTHER).value

    @property
    def is_terminal_failure(self) -> bool:
        return bool(self.extraction_errors)

    def to_payload(self) -> dict:
        """camelCase dict, the shape external consumers expect."""
        data = self.model_dump(by_alias=True)
        data["followOnInvestors"] = list(self.follow_on_investors)
        data["extractionErrors"] = list(self.extraction_errors)
        return data
