"""Main entry point for the Voice Translator service.

Starts the FastAPI + Socket.IO server with uvicorn.
"""

import logging

import uvicorn
from dotenv import load_dotenv

from voice_translator.config import get_config
from voice_translator.observability.logger import setup_logging
from voice_translator.server.app import create_app

logger = logging.getLogger(__name__)


def main() -> None:
    """Main entry point for the Voice Translator service."""
    load_dotenv()  # Load .env before the configuration reads the environment

    config = get_config()
    setup_logging(config.observability.log_level, json_logs=config.observability.json_logs)

    logger.info(f"Starting Voice Translator on {config.server.host}:{config.server.port}")

    app = create_app(config)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=config.observability.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)
    server.run()


if __name__ == "__main__":
    main()
