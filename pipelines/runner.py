from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, List, Optional

from models.acquired_content import AcquiredContent
from models.executive import ExecutiveContacts
from models.extracted_fields import ExtractedFields
from models.final_record import FinalRecord
from utils.logging_setup import init_logging


@dataclass
class RunContext:
    url: str
    content: Optional[AcquiredContent] = None
    fields: Optional[ExtractedFields] = None
    contacts: Optional[ExecutiveContacts] = None
    record: Optional[FinalRecord] = None
    meta: dict = field(default_factory=dict)


class Step(Protocol):
    def run(self, ctx: RunContext) -> RunContext:
        ...


class Pipeline:
    def __init__(self, steps: List[Step]):
        self.steps = steps

    def run(self, ctx: RunContext) -> RunContext:
        # Make logging idempotent for any direct runner use
        init_logging()
        for step in self.steps:
            ctx = step.run(ctx)
        return ctx
