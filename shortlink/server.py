"""
Command line entry point: ``shortlink`` runs the service under uvicorn.
"""

import logging
import sys

import uvicorn
from pydantic import ValidationError

from shortlink.core.logging_config import configure_logging

logger = logging.getLogger(__name__)


def main() -> None:
    configure_logging()
    try:
        from shortlink.core.setting import settings
    except ValidationError as e:
        logger.critical(f"Invalid configuration, refusing to start:\n{e}")
        sys.exit(1)

    logging.getLogger().setLevel(settings.LOG_LEVEL)
    logger.info(f"Starting server on {settings.HOST}:{settings.PORT}")
    uvicorn.run(
        "shortlink.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
