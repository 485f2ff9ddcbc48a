"""Endpoint and load balancer values wired into the container."""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Union

from .config.validation import EndpointConfig, LoadBalancerConfig
from .constants import (
    DEFAULT_HOST,
    DEFAULT_PATH,
    DEFAULT_PORT,
    DEFAULT_SCHEME,
    SOLR_CONTEXT,
)


@dataclass(frozen=True)
class Endpoint:
    """Network address of a Solr server, optionally bound to a core."""

    key: str  # Endpoint name
    scheme: str = DEFAULT_SCHEME
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    path: str = DEFAULT_PATH
    core: Optional[str] = None

    @classmethod
    def from_config(cls, key: str, config: EndpointConfig) -> "Endpoint":
        """Create an endpoint from its validated configuration."""
        return cls(
            key=key,
            scheme=config.scheme,
            host=config.host,
            port=config.port,
            path=config.path,
            core=config.core,
        )

    @property
    def server_url(self) -> str:
        """Server URL, always ending with a slash."""
        path = self.path.strip("/")
        path = f"/{path}/" if path else "/"
        return f"{self.scheme}://{self.host}:{self.port}{path}"

    @property
    def url(self) -> str:
        """URL of the core, or of the Solr context when no core is set."""
        base = f"{self.server_url}{SOLR_CONTEXT}"
        return f"{base}/{self.core}" if self.core else base


@dataclass(frozen=True)
class LoadBalancer:
    """Weighted endpoints of a client and the query types kept off them."""

    endpoints: Dict[str, Endpoint] = field(default_factory=dict)
    weights: Dict[str, Union[int, float]] = field(default_factory=dict)
    blocked_query_types: Tuple[str, ...] = ()

    @classmethod
    def from_config(
        cls, config: LoadBalancerConfig, endpoints: Dict[str, Endpoint]
    ) -> "LoadBalancer":
        return cls(
            endpoints=dict(endpoints),
            weights=dict(config.endpoints),
            blocked_query_types=tuple(config.blocked_query_types),
        )

    def is_blocked(self, query_type: str) -> bool:
        """Whether queries of this type bypass the load balancer."""
        return query_type in self.blocked_query_types
