"""
Centralized application initializer.

This component is responsible for parsing command-line arguments, loading
configurations, and initializing the core backend services (embedding model,
extraction engine, ExtractionService).
It provides a single, reliable entry point for building the application's core,
which the API server (or any other front end) can then use.
"""

import argparse
import logging
from typing import Tuple

from components.embedding_system import create_embedding_model
from components.extraction_engine import CharacterExtractionEngine
from components.extraction_service.main import ExtractionService

from shared.config import Config, load_config

logger = logging.getLogger(__name__)


def create_arg_parser() -> argparse.ArgumentParser:
    """
    Creates and returns the command-line argument parser.

    Returns:
        An ArgumentParser instance with all common arguments defined.
    """
    parser = argparse.ArgumentParser(description="Character Extractor Server.")
    parser.add_argument(
        "-c",
        "--config",
        help="Path to the config folder to use for all config files.",
    )
    parser.add_argument(
        "-a",
        "--app-config",
        help="Path to the app.toml file to use.",
    )
    parser.add_argument(
        "-p",
        "--prompts-config",
        help="Path to the prompts.toml file to use.",
    )
    parser.add_argument(
        "--port",
        type=int,
        help="Port to run the server on.",
    )
    parser.add_argument(
        "--host",
        type=str,
        help="Host to run the server on.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level.",
    )
    return parser


def initialize_service_from_args(
    args: argparse.Namespace,
) -> Tuple[Config, ExtractionService]:
    """
    Loads configuration and initializes all core components based on command-line
    arguments.

    This function orchestrates the entire backend setup process:
    1. Loads configuration from files.
    2. Applies command-line overrides.
    3. Initializes the embedding model.
    4. Initializes the extraction engine.
    5. Initializes the core ExtractionService.

    Args:
        args: Parsed command-line arguments from an ArgumentParser.

    Returns:
        A tuple containing the loaded Config object and the fully initialized
        ExtractionService instance.
    """
    logger.info("Initializing application core services...")

    # 1. Load configuration from TOML files
    config = load_config(
        config_dir=args.config,
        app_config_path=args.app_config,
        prompts_config_path=args.prompts_config,
    )

    # 2. Apply command-line overrides to the configuration
    if args.host:
        logger.info(f"Overriding server host with: {args.host}")
        config.server.host = args.host
    if args.port:
        logger.info(f"Overriding server port with: {args.port}")
        config.server.port = args.port

    # 3. Initialize the embedding model shared by documents and queries
    logger.info("Initializing embedding model...")
    embed_model = create_embedding_model(config.embedding_model)

    # 4. Initialize the extraction engine
    logger.info("Initializing extraction engine...")
    engine = CharacterExtractionEngine(config)

    # 5. Initialize the core ExtractionService
    logger.info("Initializing ExtractionService...")
    service = ExtractionService(config=config, embed_model=embed_model, engine=engine)

    logger.info("Core services initialized successfully.")
    return config, service
