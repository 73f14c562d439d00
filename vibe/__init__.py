"""Themed-UI generation backend.

Architectural role:
    Turns a short natural-language theme prompt into a CSS variable set, a font
    stylesheet, layout parameters, and a themed greeting by orchestrating several
    structured-output LLM calls plus web image search and palette extraction.

Package split:
    - `api`: HTTP boundary, request parsing, response contracts.
    - `core`: per-request fan-out/fan-in orchestration and result merging.
    - `pipelines`: one LLM-backed unit per UI concern (keywords, color, font,
      layout, text).
    - `llm`: provider configuration, payload construction, and transport.
    - `retrieval`: web image search and Google Fonts lookups.
    - `image`: palette extraction, resizing, and collage stitching.
"""
