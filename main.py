#!/usr/bin/env python
"""Application entry point."""
import logging

import uvicorn

from motor_relay.app_factory import create_app
from motor_relay.settings import settings

logging.basicConfig(level=settings.LOG_LEVEL)

app = create_app(settings)

if __name__ == "__main__":
    try:
        uvicorn.run(app, **settings.uvicorn_kwargs())
    except OSError as exc:
        logging.error("Server failed to start: %s", exc)
        raise
