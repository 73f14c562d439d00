"""Provider/runtime configuration for the LLM layer.

Architectural role:
    Centralizes model and endpoint selection plus credential lookup for
    `vibe.llm.service` and `vibe.llm.client`.

Determinism:
    Values are resolved at import time from the process environment (after
    `.env` is loaded). API keys are resolved per call in `load_key`, so tests and
    long-running processes pick up key changes without a restart.

Failure behavior:
    Missing key material is represented as `None` and reported by `client` as
    `MissingApiKeyError`.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Every pipeline targets the same structured-output capable model.
MODEL_NAME = os.getenv("MODEL_NAME", "gpt-4o-2024-08-06")

# OpenAI-compatible chat completions endpoint.
LLM_URL = os.getenv("LLM_URL", "https://api.openai.com/v1/chat/completions")

LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "120"))

# Key file consulted when the matching `*_API_KEY` variable is unset.
LLM_KEY_FILE = os.getenv("LLM_KEY_FILE", "config/openai.key")


def load_key(path=LLM_KEY_FILE):
    """Load API key from environment override or key file.

    Resolution order:
        1. Environment variable inferred from file stem (for example
           `config/openai.key` -> `OPENAI_API_KEY`).
        2. Raw file contents at `path`.

    Args:
        path: Configured key file path or `None`.

    Returns:
        Key string or `None` when not available.

    Edge cases:
        - `None` path returns `None`.
        - Missing or empty file returns `None`.
    """
    if not path:
        return None
    key_name = os.path.splitext(os.path.basename(path))[0].upper() + "_API_KEY"
    env_value = os.getenv(key_name)
    if env_value:
        return env_value
    if not os.path.exists(path):
        return None
    with open(path, "r") as f:
        return f.read().strip() or None
