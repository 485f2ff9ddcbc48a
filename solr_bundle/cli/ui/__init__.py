"""Console helpers for the CLI."""

from .logging import console, setup_logging

__all__ = ["console", "setup_logging"]
