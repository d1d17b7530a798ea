import logging

import uvicorn

from messvote.api.api_run import create_app
from messvote.utilities.config import APP_HOST, APP_PORT, LOG_LEVEL, setup_logging
from messvote.utilities.network import server_urls

logger = logging.getLogger("messvote_app")


def main():
    setup_logging()
    app = create_app()
    for url in server_urls(APP_HOST, APP_PORT):
        logger.info(f"Mess Vote API available at {url}")
    uvicorn.run(app, host=APP_HOST, port=APP_PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
