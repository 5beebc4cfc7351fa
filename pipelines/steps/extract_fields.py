from __future__ import annotations

from pipelines.runner import RunContext
from services.structured_extractor import StructuredExtractor


class ExtractFields:
    def __init__(self, extractor: StructuredExtractor) -> None:
        self.extractor = extractor

    def run(self, ctx: RunContext) -> RunContext:
        if ctx.content is None:
            raise RuntimeError("ExtractFields requires acquired content")
        ctx.fields = self.extractor.extract(ctx.content.text, ctx.url)
        ctx.meta["validation_notes"] = list(ctx.fields.validation_notes)
        return ctx
