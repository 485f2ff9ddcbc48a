"""Named access to the configured clients."""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from .constants import DEFAULT_CLIENT_NAME

logger = logging.getLogger(__name__)


class ClientNotFoundError(LookupError):
    """No client is configured under the requested name."""
    pass


class ClientRegistry:
    """Registry of configured clients.

    Clients are held as factories and only created when first requested.
    """

    def __init__(
        self,
        clients: Mapping[str, Callable[[], Any]],
        default_client: str = DEFAULT_CLIENT_NAME,
    ):
        """Initialize registry.

        Args:
            clients: Client factories by name.
            default_client: Name of the client returned by default.
        """
        self._clients: Dict[str, Callable[[], Any]] = dict(clients)
        self._default_client = default_client

    @property
    def default_client_name(self) -> str:
        return self._default_client

    def get_client_names(self) -> List[str]:
        """Get the names of all configured clients."""
        return list(self._clients)

    def get_client(self, name: Optional[str] = None) -> Any:
        """Get a client.

        Args:
            name: Client name. Defaults to the default client.

        Returns:
            Client instance.

        Raises:
            ClientNotFoundError: If no client has that name.
        """
        name = self._default_client if name is None else name
        try:
            factory = self._clients[name]
        except KeyError:
            raise ClientNotFoundError(f'Client with name "{name}" does not exist')

        logger.debug(f"Resolving client {name}")
        return factory()
