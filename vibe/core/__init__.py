"""Core orchestration package.

Architectural role:
    Exposes the request-orchestration layer that sits between the HTTP adapter
    and the generation pipelines.

Composition:
    - `engine`: per-request fan-out/fan-in over the pipelines.
    - `messages`: chat message contract shared by the API and pipelines.
    - `ui_changes`: merge of partial UI change maps and CSS variable naming.
"""
