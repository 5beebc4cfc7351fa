from __future__ import annotations

from pipelines.runner import RunContext
from services.assembler import assemble_record


class AssembleRecord:
    def run(self, ctx: RunContext) -> RunContext:
        if ctx.fields is None:
            raise RuntimeError("AssembleRecord requires extracted fields")
        ctx.record = assemble_record(ctx.fields, ctx.contacts)
        return ctx
