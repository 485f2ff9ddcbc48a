"""Constants module for the Solr bundle."""

# Package metadata
PACKAGE_NAME = "solr-bundle"
ROOT_KEY = "solr_bundle"

# Environment variables
ENV_CONFIG_PATH = "SOLR_BUNDLE_CONFIG"
ENV_LIBRARY_VERSION = "SOLR_BUNDLE_LIBRARY_VERSION"
DEFAULT_CONFIG_FILE = "solr_bundle.yaml"

# Wrapped client library
LIBRARY_NAME = "pysolr"
DEFAULT_CLIENT_CLASS = "pysolr.Solr"
QUERY_UPDATE = "update"

# Legacy options are rejected from this library version on
LEGACY_OPTIONS_REMOVED_IN = "6.0"
LEGACY_OPTIONS_DEPRECATED_IN = "4.1"

# Default values
DEFAULT_CLIENT_NAME = "default"
DEFAULT_ENDPOINT_NAME = "default"
DEFAULT_SCHEME = "http"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8983
DEFAULT_PATH = "/"
DEFAULT_WEIGHT = 1

# Solr serves cores below this context path
SOLR_CONTEXT = "solr"
