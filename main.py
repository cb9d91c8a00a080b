"""Thin entrypoint.
Resolves the port from the environment once and starts the bootstrap.
"""
import logging

from app.app import app
from app.config import load_settings
from app.server import BindFailure, start

logger = logging.getLogger("main")


def main() -> None:
    settings = load_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        started = start(app, settings.port, host=settings.host, log_level=settings.log_level)
    except BindFailure as e:
        logger.error("%s", e)
        raise SystemExit(1) from e
    if not started:
        # Application startup failed; same status uvicorn.run uses
        raise SystemExit(3)


if __name__ == "__main__":
    main()
