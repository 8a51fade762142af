#!/usr/bin/env python3
"""
Run the House Value Engine API server.
"""

import logging

import uvicorn

from utils.config import Config


def main():
    """Start the web server."""
    config = Config.load()

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info(
        "Starting House Value Engine on http://%s:%s", config.host, config.port
    )

    uvicorn.run(
        "web.app:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
