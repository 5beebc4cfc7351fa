from __future__ import annotations

from typing import Protocol


class TextGeneratorPort(Protocol):
    def generate(self, prompt: str, *, use_case: str = "pr_extraction") -> str:
        ...
