"""
Server entrypoint.

Configures root logging from `LOG_LEVEL` (forced to DEBUG when
`DEBUG == "true"`) and serves `vibe.api.http_api.app` with uvicorn on
`HOST`:`PORT`.
"""

import logging
import os

import uvicorn
from dotenv import load_dotenv

load_dotenv()

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG = os.getenv("DEBUG") == "true"


def configure_logging():
    level = logging.DEBUG if DEBUG else getattr(logging, LOG_LEVEL, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run():
    """Configure logging and block serving the HTTP API."""
    configure_logging()

    from vibe.api.http_api import app

    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    run()
