"""
Application Runner

Starts the reviewer assignment service under uvicorn using the
environment configuration.
Use: python run.py
"""

import uvicorn

from app.config import get_settings
from app.logging_config import get_logger, setup_logging


def main():
    """Run the application with uvicorn."""
    settings = get_settings()
    setup_logging(settings)
    logger = get_logger("run")

    logger.info(
        "Launching server",
        host=settings.host,
        port=settings.port,
        storage_backend=settings.storage_backend
    )

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
        access_log=settings.log_requests,
        log_config=None
    )


if __name__ == "__main__":
    main()
