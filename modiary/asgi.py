"""ASGI entrypoint (e.g. `uvicorn modiary.asgi:app`)."""

import logging

from .application import app, create_app

logging.basicConfig(level=logging.INFO)

__all__ = ["app", "create_app"]
