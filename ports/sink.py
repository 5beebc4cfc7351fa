from __future__ import annotations

from typing import Protocol

from models.final_record import FinalRecord


class RecordSinkPort(Protocol):
    def append(self, record: FinalRecord) -> int:
        ...
