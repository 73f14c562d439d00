"""Generation pipelines.

Each pipeline is one LLM-backed unit with its own JSON-schema contract:
    - `keywords`: prompt -> search keywords (runs first).
    - `color`: keywords + reference images -> color variables.
    - `fonts`: keywords -> Google Font stylesheet + font variables.
    - `layout`: keywords -> size/spacing/animation variables.
    - `text`: keywords -> short themed greeting.

Pipelines raise `VibeError` subclasses; the orchestrator decides what a failure
means for the overall response.
"""
