"""Web retrieval subpackage.

Architectural role:
    Provides web image search and binary image fetching used by the color
    pipeline. Fetched content is treated as untrusted input: URLs are checked
    for http(s) schemes and bodies are size-capped before decoding.
"""
