from __future__ import annotations

from pipelines.runner import RunContext
from services.contact_resolver import ContactResolver


class ResolveContacts:
    """Never fails the attempt; the resolver absorbs its own errors."""

    def __init__(self, resolver: ContactResolver) -> None:
        self.resolver = resolver

    def run(self, ctx: RunContext) -> RunContext:
        company = ctx.fields.company_name if ctx.fields is not None else None
        ctx.contacts = self.resolver.resolve(company)
        return ctx
