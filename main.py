"""Module-level ``app`` for WSGI servers and ``flask --app main run``.

Importing this module sets up logging from ``LOG_LEVEL`` and builds the
recipe API around a fresh in-memory store. To start an embedded server
instead, run ``python -m recipe_service.server``.
"""

import logging
import os

from recipe_service import create_app

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())

app = create_app()


__all__ = ["app"]
