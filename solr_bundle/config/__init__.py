"""
Configuration Package for the Solr bundle

This package validates the bundle configuration: the endpoints of a Solr
service and the clients, load balancers and plugins built on top of them.
Raw documents (usually YAML) are checked against a pydantic schema, their
shorthand forms are normalized, and the result is an immutable ``Config``.

Key Components:
1. Validation:
   - Defaults for endpoints and clients
   - Comma separated list normalization
   - Load balancer shorthands and endpoint weights
   - Mutually exclusive options

2. Compatibility:
   - Deprecation notices for legacy options
   - Rejection of legacy options on newer client libraries

3. Loading:
   - YAML and JSON files
   - .env files and environment overrides

Example Usage:
    from solr_bundle.config import validate_config

    result = validate_config({
        "endpoints": {"main": {"host": "solr.local", "core": "products"}},
        "clients": {"default": {"endpoints": "main"}},
    })
    config = result.config
    for notice in result.deprecations:
        print(notice)
"""

from .base import (
    ClientLibrary,
    ConfigurationError,
    DeprecationNotice,
    EmptyCollectionError,
    IncompatibleVersionError,
    InvalidConfigurationError,
    MalformedValueError,
    MissingConfigurationError,
    MutualExclusionError,
)
from .loader import ConfigLoader, get_config
from .reference import reference_config
from .validation import (
    ClientConfig,
    Config,
    EndpointConfig,
    LoadBalancerConfig,
    PluginConfig,
    ValidationResult,
    validate_config,
)

__all__ = [
    "ClientConfig",
    "ClientLibrary",
    "Config",
    "ConfigLoader",
    "ConfigurationError",
    "DeprecationNotice",
    "EmptyCollectionError",
    "EndpointConfig",
    "IncompatibleVersionError",
    "InvalidConfigurationError",
    "LoadBalancerConfig",
    "MalformedValueError",
    "MissingConfigurationError",
    "MutualExclusionError",
    "PluginConfig",
    "ValidationResult",
    "get_config",
    "reference_config",
    "validate_config",
]
