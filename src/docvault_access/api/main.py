"""DocVault Access API entry point."""

import os

import uvicorn

from ..config.logging_config import LoggingConfig, get_logger
from .app import create_app

LoggingConfig.configure()
logger = get_logger(__name__)

app = create_app()


def main() -> None:
    """Run the application."""
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    debug = os.getenv("DEBUG", "false").lower() == "true"

    logger.info(f"Starting DocVault Access API on {host}:{port}")

    uvicorn.run(
        "docvault_access.api.main:app",
        host=host,
        port=port,
        reload=debug,
        log_level="debug" if debug else "info",
        access_log=True,
    )


if __name__ == "__main__":
    main()
