from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class AcquisitionMethod(str, Enum):
    DIRECT_FETCH = "direct-fetch"
    URL_HEURISTIC = "url-heuristic"


class AcquiredContent(BaseModel):
    text: str
    method: AcquisitionMethod
    title: str = ""
    source_url: str | None = None

    model_config = ConfigDict(frozen=True)
