"""
Solr bundle - configuration and wiring of Solr clients

This package exposes the configuration of a Solr integration: named
endpoints, clients bound to them, client-side load balancing and client
plugins. A raw configuration document is validated into an immutable,
fully defaulted configuration, which is then wired into a
dependency_injector container holding ready-to-use pysolr clients.

Key Features:
- Declarative pydantic schema with defaults for every option
- Shorthand normalization (comma separated lists, load balancer switches)
- Precise errors naming the offending configuration path
- Deprecation notices for legacy options, rejected on newer libraries
- YAML/JSON loading with .env support
- Container wiring and a named client registry
- A small CLI to validate and inspect configurations

Example Usage:
    from solr_bundle.di import create_container

    container = create_container("config/solr_bundle.yaml")
    solr = container.client()
    products = container.registry().get_client("products")
"""

import logging
from importlib.metadata import version

__version__ = version("solr-bundle")

logger = logging.getLogger(__name__)

__all__ = ["__version__"]
