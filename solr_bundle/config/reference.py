"""Reference configuration with every supported option at its default."""

from typing import Any, Dict, Optional

from ..constants import DEFAULT_CLIENT_NAME, DEFAULT_ENDPOINT_NAME, ROOT_KEY
from .base import ClientLibrary
from .validation import ClientConfig, EndpointConfig

# Deprecated options are left out of the reference
_LEGACY_ENDPOINT_OPTIONS = {"timeout"}
_LEGACY_CLIENT_OPTIONS = {"adapter_class"}


def reference_config(library: Optional[ClientLibrary] = None) -> Dict[str, Any]:
    """Build the reference configuration document.

    Args:
        library: Client library providing the default client class.
            Defaults to the pysolr descriptor.

    Returns:
        Document wrapped in the solr_bundle root key.
    """
    library = library or ClientLibrary()
    endpoint = EndpointConfig().model_dump(
        mode="json", exclude=_LEGACY_ENDPOINT_OPTIONS
    )
    client = ClientConfig(
        client_class=library.default_client_class,
        endpoints=[DEFAULT_ENDPOINT_NAME],
        default_endpoint=DEFAULT_ENDPOINT_NAME,
    ).model_dump(mode="json", exclude=_LEGACY_CLIENT_OPTIONS)

    return {
        ROOT_KEY: {
            "default_client": DEFAULT_CLIENT_NAME,
            "endpoints": {DEFAULT_ENDPOINT_NAME: endpoint},
            "clients": {DEFAULT_CLIENT_NAME: client},
        }
    }
