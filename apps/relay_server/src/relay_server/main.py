from __future__ import annotations

import logging

import uvicorn
from dotenv import load_dotenv

from relay_server.config import Settings
from relay_server.http import create_app
from relay_server.logging_config import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    load_dotenv()
    settings = Settings()
    setup_logging(settings.log_level)

    app = create_app(settings=settings)
    logger.info("Blob relay listening on %s:%d (%s)", settings.app_host, settings.app_port, settings.app_env)
    uvicorn.run(app, host=settings.app_host, port=settings.app_port, log_config=None)


if __name__ == "__main__":
    main()
