"""Dependency injection container."""

import importlib
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from dependency_injector import containers, providers

from ..config import (
    ClientConfig,
    Config,
    EndpointConfig,
    InvalidConfigurationError,
    PluginConfig,
    get_config,
)
from ..constants import DEFAULT_ENDPOINT_NAME
from ..endpoint import Endpoint, LoadBalancer
from ..registry import ClientRegistry

logger = logging.getLogger(__name__)


def build_container(
    config: Config,
    services: Optional[Mapping[str, Any]] = None,
) -> containers.DynamicContainer:
    """Wire a validated configuration into a container.

    The container exposes:
        config: the validated configuration
        endpoints: endpoints by name
        clients: clients by name
        load_balancers: load balancers by client name, for clients using one
        plugins: plugins by client name, then plugin name
        registry: a ClientRegistry over the clients
        client: the default client

    Args:
        config: Validated configuration.
        services: Externally defined services referenced by adapter_service
            and plugin_service. Values may be providers or plain objects.

    Returns:
        Wired container.

    Raises:
        InvalidConfigurationError: If the configuration references unknown
            endpoints, services or classes.
    """
    services = {
        name: service if isinstance(service, providers.Provider) else providers.Object(service)
        for name, service in (services or {}).items()
    }

    endpoint_configs, client_configs = effective_sections(config)

    container = containers.DynamicContainer()
    container.config = providers.Object(config)

    endpoints = {
        name: providers.Singleton(Endpoint.from_config, name, endpoint)
        for name, endpoint in endpoint_configs.items()
    }

    clients = {}
    load_balancers = {}
    plugins = {}
    for name, client in client_configs.items():
        path = f"clients.{name}"
        clients[name] = _client_provider(client, endpoint_configs, endpoints, services, path)

        if client.load_balancer.enabled:
            load_balancers[name] = providers.Singleton(
                LoadBalancer.from_config,
                client.load_balancer,
                providers.Dict(
                    {
                        endpoint: _endpoint(endpoints, endpoint, f"{path}.load_balancer.endpoints")
                        for endpoint in client.load_balancer.endpoints
                    }
                ),
            )

        plugins[name] = providers.Dict(
            {
                plugin_name: _plugin_provider(plugin, services, f"{path}.plugins.{plugin_name}")
                for plugin_name, plugin in client.plugins.items()
            }
        )
        logger.debug(f"Wired client {name} ({client.client_class})")

    container.endpoints = providers.Dict(endpoints)
    container.clients = providers.Dict(clients)
    container.load_balancers = providers.Dict(load_balancers)
    container.plugins = providers.Dict(plugins)
    container.registry = providers.Singleton(
        ClientRegistry,
        clients=providers.Object(clients),
        default_client=config.default_client,
    )
    container.client = container.registry.provided.get_client.call()

    return container


def create_container(
    path: Optional[Union[str, Path]] = None,
    services: Optional[Mapping[str, Any]] = None,
    config_dir: Optional[Union[str, Path]] = None,
    library=None,
) -> containers.DynamicContainer:
    """Load, validate and wire the configuration in one step.

    Args:
        path: Configuration file path.
        services: Externally defined services.
        config_dir: Directory containing configuration files.
        library: Client library descriptor or version string.

    Returns:
        Wired container.
    """
    result = get_config(path, config_dir=config_dir, library=library)
    return build_container(result.config, services)


def effective_sections(
    config: Config,
) -> Tuple[Dict[str, EndpointConfig], Dict[str, ClientConfig]]:
    """Endpoints and clients to wire for a configuration.

    Without any endpoint or client configured, a default one is used.

    Raises:
        InvalidConfigurationError: If the default client is not configured.
    """
    endpoint_configs = dict(config.endpoints) or {DEFAULT_ENDPOINT_NAME: EndpointConfig()}
    client_configs = dict(config.clients) or {config.default_client: ClientConfig()}
    if config.default_client not in client_configs:
        raise InvalidConfigurationError(
            f'The default client "{config.default_client}" is not configured',
            path="default_client",
        )
    return endpoint_configs, client_configs


def select_endpoint(client: ClientConfig, endpoint_names: Iterable[str]) -> str:
    """Name of the endpoint a client sends its requests to.

    The client's default endpoint, else its first endpoint, else the first
    configured endpoint.
    """
    if client.default_endpoint:
        return client.default_endpoint
    if client.endpoints:
        return client.endpoints[0]
    return next(iter(endpoint_names))


def _client_provider(
    client: ClientConfig,
    endpoint_configs: Dict[str, EndpointConfig],
    endpoints: Dict[str, providers.Provider],
    services: Dict[str, providers.Provider],
    path: str,
) -> providers.Provider:
    for name in client.endpoints:
        _endpoint(endpoints, name, f"{path}.endpoints")

    endpoint_name = select_endpoint(client, endpoints)
    kwargs: Dict[str, Any] = {
        "url": _endpoint(endpoints, endpoint_name, f"{path}.default_endpoint").provided.url,
    }

    # The legacy per-endpoint timeout applies when the adapter has none
    timeout = client.adapter_timeout
    if timeout is None:
        timeout = endpoint_configs[endpoint_name].timeout
    if timeout is not None:
        kwargs["timeout"] = _timeout(timeout, f"{path}.adapter_timeout")

    if client.adapter_service:
        kwargs["session"] = _service(services, client.adapter_service, f"{path}.adapter_service")
    elif client.adapter_class:
        kwargs["session"] = providers.Singleton(
            _import_class(client.adapter_class, f"{path}.adapter_class")
        )

    return providers.Singleton(
        _import_class(client.client_class, f"{path}.client_class"),
        **kwargs,
    )


def _plugin_provider(
    plugin: PluginConfig,
    services: Dict[str, providers.Provider],
    path: str,
) -> providers.Provider:
    if plugin.plugin_service:
        return _service(services, plugin.plugin_service, f"{path}.plugin_service")
    if plugin.plugin_class:
        return providers.Singleton(_import_class(plugin.plugin_class, f"{path}.plugin_class"))
    raise InvalidConfigurationError(
        "Either plugin_class or plugin_service must be set", path=path
    )


def _endpoint(
    endpoints: Dict[str, providers.Provider], name: str, path: str
) -> providers.Provider:
    try:
        return endpoints[name]
    except KeyError:
        raise InvalidConfigurationError(f'Unknown endpoint "{name}"', path=path)


def _service(
    services: Dict[str, providers.Provider], name: str, path: str
) -> providers.Provider:
    try:
        return services[name]
    except KeyError:
        raise InvalidConfigurationError(f'Unknown service "{name}"', path=path)


def _timeout(value: Union[int, float, str], path: str) -> float:
    if not isinstance(value, str):
        return value
    try:
        return float(value)
    except ValueError:
        raise InvalidConfigurationError(f'"{value}" is not a valid timeout', path=path)


def _import_class(dotted_path: str, path: str) -> Any:
    """Import a class from its dotted path."""
    module_name, _, attribute = dotted_path.rpartition(".")
    try:
        return getattr(importlib.import_module(module_name), attribute)
    except (ImportError, AttributeError, ValueError) as e:
        raise InvalidConfigurationError(f'Cannot import "{dotted_path}": {e}', path=path)
