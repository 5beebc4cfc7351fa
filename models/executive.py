from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ExecutiveCandidate(BaseModel):
    """People-directory search hit; match_score is filled in by the resolver."""

    first_name: str = ""
    last_name: str = ""
    title: str = ""
    match_score: int = Field(default=0, ge=0, le=100)

    model_config = ConfigDict(extra="ignore")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class ExecutiveContacts(BaseModel):
    """Resolver output; absent roles stay None."""

    ceo_email: Optional[str] = None
    cmo_email: Optional[str] = None
    ceo_name: Optional[str] = None
    cmo_name: Optional[str] = None

    model_config = ConfigDict(extra="ignore")
