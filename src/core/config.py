"""Settings read from the environment (and a .env file, if present)."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_API_BASE = "http://localhost:8000"
DEFAULT_STORE_URL = "sqlite:///ttt_client.db"
DEFAULT_TIMEOUT_SECONDS = 10.0

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    api_base: str = DEFAULT_API_BASE
    store_url: str = DEFAULT_STORE_URL
    request_timeout: Optional[float] = DEFAULT_TIMEOUT_SECONDS
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 3000

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()

        # A timeout of 0 (or a negative one) means wait forever.
        timeout = float(os.getenv("TTT_REQUEST_TIMEOUT", DEFAULT_TIMEOUT_SECONDS))
        return cls(
            api_base=os.getenv("TTT_API_BASE", DEFAULT_API_BASE).rstrip("/"),
            store_url=os.getenv("TTT_STORE_URL", DEFAULT_STORE_URL),
            request_timeout=timeout if timeout > 0 else None,
            log_level=os.getenv("TTT_LOG_LEVEL", "INFO").upper(),
            host=os.getenv("TTT_HOST", "127.0.0.1"),
            port=int(os.getenv("TTT_PORT", "3000")),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
