"""Process entrypoint for the contact backend."""

import logging
import sys

import uvicorn
from pydantic import ValidationError

from portfolio_site.api.app import create_app
from portfolio_site.app_logging import configure_logging
from portfolio_site.config import Settings
from portfolio_site.containers import build_container

logger = logging.getLogger(__name__)


def load_settings() -> Settings:
    """Load settings, logging every missing or invalid key before failing."""
    try:
        return Settings()
    except ValidationError as exc:
        keys = sorted(
            {str(error["loc"][0]).upper() for error in exc.errors() if error["loc"]}
        )
        logger.error("Missing or invalid required settings: %s", ", ".join(keys))
        raise


def main() -> None:
    """Start the HTTP server, refusing to run on incomplete configuration."""
    configure_logging()
    try:
        settings = load_settings()
    except ValidationError:
        sys.exit(1)
    app = create_app(build_container(settings))
    logger.info("Contact backend listening on port %s", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)  # noqa: S104


if __name__ == "__main__":
    main()
