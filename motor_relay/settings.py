"""Application configuration settings."""

import os
from typing import Any, Dict

from dotenv import load_dotenv
from pydantic import BaseModel


# Ensure environment variables from a .env file are loaded before accessing them.
load_dotenv()


class Settings(BaseModel):
    APP_HOST: str = os.getenv("APP_HOST", "0.0.0.0")
    APP_PORT: int = int(os.getenv("APP_PORT", "4777"))
    SSL_CERTFILE: str = os.getenv("SSL_CERTFILE", "")
    SSL_KEYFILE: str = os.getenv("SSL_KEYFILE", "")
    SEND_TIMEOUT: float = float(os.getenv("SEND_TIMEOUT", "5.0"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def tls_enabled(self) -> bool:
        return bool(self.SSL_CERTFILE and self.SSL_KEYFILE)

    def uvicorn_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``uvicorn.run``; TLS only when both files are set."""
        kwargs: Dict[str, Any] = {"host": self.APP_HOST, "port": self.APP_PORT}
        if self.tls_enabled:
            kwargs["ssl_certfile"] = self.SSL_CERTFILE
            kwargs["ssl_keyfile"] = self.SSL_KEYFILE
        return kwargs


settings = Settings()
