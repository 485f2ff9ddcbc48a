"""Configuration loader module."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv

from ..constants import (
    DEFAULT_CONFIG_FILE,
    ENV_CONFIG_PATH,
    ENV_LIBRARY_VERSION,
    ROOT_KEY,
)
from .base import (
    ClientLibrary,
    ConfigurationError,
    MalformedValueError,
    MissingConfigurationError,
    resolve_library,
)
from .validation import ValidationResult, validate_config

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Configuration loader class."""

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """Initialize configuration loader.

        Args:
            config_dir: Directory containing configuration files.
                Defaults to current directory.
        """
        self.config_dir = Path(config_dir or os.getcwd())

        # Load environment variables from .env file
        env_file = self.config_dir / ".env"
        if env_file.exists():
            load_dotenv(env_file)

    def resolve_path(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Resolve the configuration file path.

        Args:
            path: Explicit path. Defaults to the SOLR_BUNDLE_CONFIG
                variable, then to solr_bundle.yaml in the config directory.

        Returns:
            Configuration file path.
        """
        path = path or os.getenv(ENV_CONFIG_PATH)
        if path:
            path = Path(path)
            return path if path.is_absolute() else self.config_dir / path
        return self.config_dir / DEFAULT_CONFIG_FILE

    def load(self, path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
        """Load a raw configuration document.

        Args:
            path: Configuration file path. See ``resolve_path``.

        Returns:
            Raw configuration document, unwrapped from the solr_bundle
            root key when present.

        Raises:
            MissingConfigurationError: If the file does not exist.
            ConfigurationError: If the file cannot be parsed.
            MalformedValueError: If the document is not a mapping.
        """
        path = self.resolve_path(path)
        if not path.exists():
            raise MissingConfigurationError(f"Configuration file not found: {path}")

        document = self._load_file(path)
        logger.info(f"Loaded configuration from {path}")

        if document is None:
            return {}
        if not isinstance(document, dict):
            raise MalformedValueError(
                f"Expected a mapping at the document root, got {type(document).__name__}"
            )
        if set(document) == {ROOT_KEY}:
            return document[ROOT_KEY] or {}
        return document

    def library(self) -> ClientLibrary:
        """Client library descriptor, honoring SOLR_BUNDLE_LIBRARY_VERSION."""
        override = os.getenv(ENV_LIBRARY_VERSION)
        if override:
            logger.debug(f"Using client library version {override} from environment")
            return ClientLibrary(version=override)
        return ClientLibrary.detect()

    def _load_file(self, path: Path) -> Any:
        """Load configuration file.

        Args:
            path: Path of the file to load.

        Returns:
            Parsed document.

        Raises:
            ConfigurationError: If file loading fails.
        """
        if path.suffix not in (".yaml", ".yml", ".json"):
            raise ConfigurationError(
                f"Unsupported configuration file format: {path.suffix or path.name}"
            )

        try:
            with open(path) as f:
                if path.suffix == ".json":
                    return json.load(f)
                return yaml.safe_load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load {path}: {e}")


def get_config(
    path: Optional[Union[str, Path]] = None,
    config_dir: Optional[Union[str, Path]] = None,
    library=None,
) -> ValidationResult:
    """Get configuration.

    This is a convenience function that creates a loader, loads the
    document and validates it in one step.

    Args:
        path: Configuration file path.
        config_dir: Directory containing configuration files.
            Defaults to current directory.
        library: Client library descriptor or version string.
            Defaults to the environment override, then the installed library.

    Returns:
        Validated configuration.

    Raises:
        ConfigurationError: If configuration loading or validation fails.
    """
    loader = ConfigLoader(config_dir)
    raw = loader.load(path)
    library = loader.library() if library is None else resolve_library(library)
    return validate_config(raw, library=library)
