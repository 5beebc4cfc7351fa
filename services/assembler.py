from __future__ import annotations

from typing import Optional

from models.executive import ExecutiveContacts
from models.extracted_fields import ExtractedFields
from models.final_record import (
    EMAIL_NOT_FOUND,
    EXTRACTION_FAILED,
    NOT_FOUND,
    UNKNOWN_CLASSIFICATION,
    FinalRecord,
)


def _or(value: Optional[str], sentinel: str) -> str:
    return value if value else sentinel


def assemble_record(fields: ExtractedFields, contacts: Optional[ExecutiveContacts] = None) -> FinalRecord:
    """Merge extracted fields and resolved contacts into the output record."""
    contacts = contacts or ExecutiveContacts()
    return FinalRecord(
        company_name=_or(fields.company_name, NOT_FOUND),
        ceo_email=_or(contacts.ceo_email, EMAIL_NOT_FOUND),
        cmo_email=_or(contacts.cmo_email, EMAIL_NOT_FOUND),
        lead_investor=_or(fields.lead_investor, NOT_FOUND),
        follow_on_investors=tuple(fields.follow_on_investors),
        amount_raised=_or(fields.amount_raised, NOT_FOUND),
        classification=fields.classification,
        is_scam=fields.is_scam,
        confidence=fields.confidence,
        extraction_errors=(),
    )


def terminal_failure_record(message: str) -> FinalRecord:
    """Sentinel record for a URL whose every attempt failed."""
    return FinalRecord(
        company_name=EXTRACTION_FAILED,
        ceo_email=EMAIL_NOT_FOUND,
        cmo_email=EMAIL_NOT_FOUND,
        lead_investor=EXTRACTION_FAILED,
        follow_on_investors=(),
        amount_raised=EXTRACTION_FAILED,
        classification=UNKNOWN_CLASSIFICATION,
        is_scam=False,
        confidence=0,
        extraction_errors=(message or "Unknown error",),
    )
