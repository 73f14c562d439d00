"""LLM access package.

Architectural role:
    Provides provider configuration, structured-output payload construction, and
    the HTTP transport used by the generation pipelines.

Module split:
    - `provider_config`: environment-driven model, endpoint, and key settings.
    - `service`: JSON-schema payload builder and async request helper.
    - `client`: completions transport and response-envelope parsing.
"""
