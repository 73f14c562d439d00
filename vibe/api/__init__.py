"""HTTP adapter package.

Composition:
    - `http_api`: FastAPI application and endpoints.
    - `schemas`: response transport models.
    - `main`: uvicorn entrypoint.
"""
