from __future__ import annotations

from pipelines.runner import RunContext
from services.content_acquirer import ContentAcquirer


class AcquireContent:
    def __init__(self, acquirer: ContentAcquirer) -> None:
        self.acquirer = acquirer

    def run(self, ctx: RunContext) -> RunContext:
        ctx.content = self.acquirer.acquire(ctx.url)
        ctx.meta["acquisition_method"] = ctx.content.method.value
        ctx.meta["content_chars"] = len(ctx.content.text)
        return ctx
