# character_extractor/main.py

import logging
import sys

import uvicorn
from components.api_app.main import create_app
from shared.initializer import (
    create_arg_parser,
    initialize_service_from_args,
)

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(levelname)s:%(name)s:%(message)s",
        stream=sys.stdout,
    )


def main() -> None:
    """
    Initializes the extraction service and serves the API with uvicorn.
    """
    parser = create_arg_parser()
    parser.description = "Run the Character Extractor API server."
    args = parser.parse_args()

    configure_logging(args.log_level)

    config, service = initialize_service_from_args(args)
    app = create_app(service)

    logger.info(
        f"Character Extractor API will be served on "
        f"http://{config.server.host}:{config.server.port}"
    )
    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=args.log_level.lower(),
    )


def run() -> None:
    try:
        main()
    except KeyboardInterrupt:
        print("Server shut down gracefully.")


if __name__ == "__main__":
    run()
