"""Logging configuration for the CLI."""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)

_VALID_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def setup_logging(verbosity: int = 0) -> None:
    """Setup logging configuration.

    Args:
        verbosity: Verbosity level (0-2). Without -v the LOG_LEVEL
            environment variable is honored.
    """
    env_level = os.getenv("LOG_LEVEL", "WARNING").upper()
    if env_level not in _VALID_LEVELS:
        env_level = "WARNING"

    # Map verbosity to log level
    log_level = {
        0: env_level,
        1: "INFO",
    }.get(verbosity, "DEBUG")

    # Remove all existing handlers
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.setLevel(log_level)

    # Create console handler with rich formatting
    console_handler = RichHandler(
        console=console,
        show_time=verbosity > 1,
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root_logger.addHandler(console_handler)

    # Set library log levels
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("pysolr").setLevel(logging.WARNING)
