"""Entrypoint: run the local web UI."""

import uvicorn

from src.core.config import Settings, configure_logging
from src.web.app import create_app


def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
