import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from motor_relay.lifecycle import Relay
from motor_relay.settings import Settings, settings as default_settings
from motor_relay.web import router as web_router


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        scheme = "wss" if settings.tls_enabled else "ws"
        logging.info("Motor control relay running on port %s (%s)", settings.APP_PORT, scheme.upper())
        logging.info("Devices and browsers must connect using %s://", scheme)
        if not settings.tls_enabled:
            logging.info("Set SSL_CERTFILE and SSL_KEYFILE to serve over TLS")
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.state.relay = Relay(send_timeout=settings.SEND_TIMEOUT)
    app.include_router(web_router)
    return app
