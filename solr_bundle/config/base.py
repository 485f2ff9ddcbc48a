"""Base configuration classes and utilities."""

import logging
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version as distribution_version
from typing import Optional, Sequence, Tuple

from packaging.version import InvalidVersion, Version

from ..constants import (
    DEFAULT_CLIENT_CLASS,
    LEGACY_OPTIONS_REMOVED_IN,
    LIBRARY_NAME,
    PACKAGE_NAME,
)

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Base configuration error."""
    pass


class MissingConfigurationError(ConfigurationError):
    """Missing configuration error."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Invalid configuration error.

    Carries the dotted path of the offending node and a human readable
    reason. Deliberately not a ``ValueError``: pydantic re-raises anything
    else from validators untouched, so the typed error reaches the caller.
    """

    def __init__(
        self,
        reason: str,
        path: Optional[str] = None,
        deprecations: Sequence["DeprecationNotice"] = (),
    ):
        self.reason = reason
        self.path = path
        self.deprecations: Tuple[DeprecationNotice, ...] = tuple(deprecations)
        super().__init__(reason)

    def at(self, prefix: str) -> "InvalidConfigurationError":
        """Prefix the error path with the path of an enclosing node.

        Args:
            prefix: Dotted path of the enclosing node.

        Returns:
            The same error, for re-raising.
        """
        if prefix:
            self.path = f"{prefix}.{self.path}" if self.path else prefix
        return self

    def __str__(self) -> str:
        if self.path:
            return f'Invalid configuration for path "{self.path}": {self.reason}'
        return f"Invalid configuration: {self.reason}"


class MutualExclusionError(InvalidConfigurationError):
    """Two mutually exclusive options are both set."""
    pass


class EmptyCollectionError(InvalidConfigurationError):
    """A collection that requires at least one element is empty."""
    pass


class IncompatibleVersionError(InvalidConfigurationError):
    """A legacy option is used with a library version that dropped it."""
    pass


class MalformedValueError(InvalidConfigurationError):
    """A value does not have the expected type or shape."""
    pass


@dataclass(frozen=True)
class DeprecationNotice:
    """Deprecation notice for a legacy configuration option."""

    message: str  # Human readable advice
    version: str  # Bundle version that deprecated the option
    path: str = ""  # Dotted configuration path
    package: str = PACKAGE_NAME

    def __str__(self) -> str:
        location = f" ({self.path})" if self.path else ""
        return (
            f"Since {self.package} {self.version}: {self.message}{location}"
        )


@dataclass(frozen=True)
class ClientLibrary:
    """Capabilities of the installed search client library.

    Resolved once when the configuration is built and passed to the
    validator, which uses it to pick the default client class and to
    decide whether legacy options are deprecated or rejected.
    """

    name: str = LIBRARY_NAME
    version: str = "0"
    default_client_class: str = DEFAULT_CLIENT_CLASS

    def __post_init__(self):
        try:
            Version(self.version)
        except InvalidVersion:
            raise MalformedValueError(
                f'"{self.version}" is not a valid {self.name} version'
            )

    @classmethod
    def detect(cls, name: str = LIBRARY_NAME) -> "ClientLibrary":
        """Detect the installed library version.

        Args:
            name: Distribution name of the client library.

        Returns:
            Library descriptor, with version "0" when not installed.
        """
        try:
            detected = distribution_version(name)
        except PackageNotFoundError:
            logger.debug(f"{name} is not installed, assuming version 0")
            detected = "0"
        return cls(name=name, version=detected)

    @property
    def supports_legacy_options(self) -> bool:
        """Whether options deprecated in 4.1 are still accepted."""
        return Version(self.version) < Version(LEGACY_OPTIONS_REMOVED_IN)


def resolve_library(library=None) -> ClientLibrary:
    """Turn a library descriptor, a version string or None into a descriptor."""
    if library is None:
        return ClientLibrary.detect()
    if isinstance(library, ClientLibrary):
        return library
    return ClientLibrary(version=str(library))
