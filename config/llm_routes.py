from __future__ import annotations

import os


# Central routing for LLM use-cases. Edit here to change per-operation defaults.
# Per-route model can be overridden via env vars for quick testing.
#
# Keys are use_case identifiers consumed by services/llm_client.py
ROUTES: dict[str, dict] = {
    # Funding-announcement field extraction (OpenAI chat)
    "pr_extraction": {
        "provider": os.getenv("LLM_EXTRACTION_PROVIDER", "openai"),
        "model": os.getenv("OPENAI_MODEL_EXTRACTION"),  # falls back to global OPENAI_MODEL
        "temperature": 0,
        "max_tokens": 1000,
        # Logical operation name for logging (not a vendor API name)
        "operation": "pr_extraction",
    },
}
