"""Configuration validation using Pydantic models.

The models below are the declarative schema of the bundle configuration.
Shorthand forms accepted from users (comma separated lists, boolean load
balancer switches, endpoint lists without weights) are rewritten by small
pure normalizers registered as ``before`` validators, and cross-field rules
live in ``after`` validators. ``validate_config`` walks a raw document node
by node so that every error carries the dotted path it was raised for.
"""

import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, TypeVar, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    ValidationError,
    ValidationInfo,
    field_serializer,
    field_validator,
    model_validator,
)

from ..constants import (
    DEFAULT_CLIENT_CLASS,
    DEFAULT_CLIENT_NAME,
    DEFAULT_HOST,
    DEFAULT_PATH,
    DEFAULT_PORT,
    DEFAULT_SCHEME,
    DEFAULT_WEIGHT,
    LEGACY_OPTIONS_DEPRECATED_IN,
    QUERY_UPDATE,
)
from .base import (
    ClientLibrary,
    DeprecationNotice,
    EmptyCollectionError,
    IncompatibleVersionError,
    InvalidConfigurationError,
    MalformedValueError,
    MutualExclusionError,
    resolve_library,
)

logger = logging.getLogger(__name__)

_LIST_SEPARATOR = re.compile(r"\s*,\s*")

Scalar = Union[int, float, str]
Weight = Union[int, float]

_Model = TypeVar("_Model", bound=BaseModel)


# Normalizers


def split_list(value: Any) -> Any:
    """Split a comma separated string into a list of names.

    Lists pass through unchanged and null becomes an empty list, so the
    function is idempotent on already normalized values.
    """
    if isinstance(value, str):
        return _LIST_SEPARATOR.split(value)
    if value is None:
        return []
    return value


def normalize_weighted_endpoints(value: Any) -> Any:
    """Normalize load balancer endpoints into a name to weight mapping.

    Accepts a comma separated string, a plain list of names or an explicit
    mapping. Entries without a string key are list entries: their value is
    the endpoint name and they get the default weight.

    Args:
        value: Raw endpoints value.

    Returns:
        Mapping of endpoint name to weight.

    Raises:
        MalformedValueError: If a listed endpoint name is not a scalar or a
            weight is not a number.
    """
    value = split_list(value)
    if isinstance(value, Mapping):
        entries = value.items()
    elif isinstance(value, (list, tuple)):
        entries = enumerate(value)
    else:
        return value

    normalized = {}
    for name, weight in entries:
        if not isinstance(name, str):
            name, weight = weight, DEFAULT_WEIGHT
        if not isinstance(name, (str, int, float)) or isinstance(name, bool):
            raise MalformedValueError(
                f"Endpoint names must be strings, got {type(name).__name__}",
                path="endpoints",
            )
        name = str(name)
        normalized[name] = _weight(weight, f"endpoints.{name}")
    return normalized


def _weight(value: Any, path: str) -> Weight:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        for number in (int, float):
            try:
                return number(value)
            except ValueError:
                pass
    raise MalformedValueError(f'Weight must be a number, got "{value}"', path=path)


def coerce_load_balancer(value: Any) -> Any:
    """Expand the boolean and null shorthands of the load balancer node."""
    if value is None or value is True:
        return {"enabled": True}
    if value is False:
        return {"enabled": False}
    if isinstance(value, Mapping):
        value = dict(value)
        if value.get("enabled") is None:
            value["enabled"] = True
    return value


def keyed_by_name(value: Any) -> Any:
    """Key a named section by entry name.

    A section is either a mapping keyed by name or a list of mappings each
    carrying a ``name`` attribute. A ``name`` attribute inside a mapping
    entry replaces its key and is removed from the entry.

    Raises:
        MalformedValueError: If a list entry has no name.
    """
    if value is None:
        return {}
    if isinstance(value, Mapping):
        entries = value.items()
    elif isinstance(value, (list, tuple)):
        for entry in value:
            if not isinstance(entry, Mapping) or entry.get("name") is None:
                raise MalformedValueError(
                    'List entries must be mappings with a "name" attribute'
                )
        entries = enumerate(value)
    else:
        return value

    keyed = {}
    for name, entry in entries:
        if isinstance(entry, Mapping) and entry.get("name") is not None:
            entry = dict(entry)
            name = entry.pop("name")
        keyed[str(name)] = entry
    return keyed


def _freeze(value: Mapping) -> Mapping:
    """Read-only view of a validated mapping."""
    return MappingProxyType(dict(value))


def _is_empty(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value in ("", "0")
    if isinstance(value, (int, float)):
        return value == 0
    return False


def _scalar(value: Any, info: ValidationInfo) -> Any:
    if value is None or (
        isinstance(value, (int, float, str)) and not isinstance(value, bool)
    ):
        return value
    raise MalformedValueError(
        f"Expected a scalar value, got {type(value).__name__}",
        path=info.field_name,
    )


def _legacy_option(
    value: Any, info: ValidationInfo, deprecated: str, unsupported: str
) -> Any:
    """Record a deprecation for a legacy option and reject it on new libraries.

    ``unsupported`` may reference ``{library}``, the client library name.
    """
    if value is None:
        return value

    context = info.context or {}
    library = resolve_library(context.get("library"))
    node_path = context.get("path")
    option_path = f"{node_path}.{info.field_name}" if node_path else info.field_name

    notice = DeprecationNotice(
        message=deprecated,
        version=LEGACY_OPTIONS_DEPRECATED_IN,
        path=option_path,
    )
    logger.warning(str(notice))
    notices = context.get("notices")
    if notices is not None:
        notices.append(notice)

    if not library.supports_legacy_options:
        raise IncompatibleVersionError(
            unsupported.format(library=library.name), path=info.field_name
        )
    return value


# Schema


class _Node(BaseModel):
    """Base for configuration nodes."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        coerce_numbers_to_str=True,
    )


class EndpointConfig(_Node):
    """Endpoint configuration validation model."""

    scheme: str = Field(DEFAULT_SCHEME, description="URL scheme")
    host: str = Field(DEFAULT_HOST, description="Solr host")
    port: int = Field(DEFAULT_PORT, description="Solr port")
    path: str = Field(DEFAULT_PATH, description="Base path")
    core: Optional[str] = Field(None, description="Core or collection name")
    timeout: Optional[Scalar] = Field(
        None, description="Deprecated, configure adapter_timeout on the client"
    )

    @field_validator("timeout", mode="before")
    @classmethod
    def check_timeout_type(cls, value: Any, info: ValidationInfo) -> Any:
        return _scalar(value, info)

    @field_validator("timeout")
    @classmethod
    def check_legacy_timeout(cls, value: Any, info: ValidationInfo) -> Any:
        return _legacy_option(
            value,
            info,
            "Configuring a timeout per endpoint is deprecated. "
            "Configure the timeout on the client adapter instead.",
            "Configuring a timeout per endpoint is not supported by "
            "{library} >= 6.0. "
            "Configure the timeout on the client adapter instead.",
        )


class LoadBalancerConfig(_Node):
    """Load balancer configuration validation model."""

    enabled: bool = Field(False, description="Whether the load balancer is used")
    endpoints: Mapping[str, Weight] = Field(
        default_factory=dict,
        validate_default=True,
        description="Endpoint name to weight",
    )
    blocked_query_types: Tuple[str, ...] = Field(
        (QUERY_UPDATE,),
        description="Query types always sent to the default endpoint",
    )

    @model_validator(mode="before")
    @classmethod
    def expand_shorthand(cls, data: Any) -> Any:
        return coerce_load_balancer(data)

    @field_validator("endpoints", mode="before")
    @classmethod
    def normalize_endpoints(cls, value: Any) -> Any:
        return normalize_weighted_endpoints(value)

    @field_validator("endpoints")
    @classmethod
    def freeze_endpoints(cls, value: Mapping[str, Weight]) -> Mapping[str, Weight]:
        return _freeze(value)

    @field_serializer("endpoints", mode="wrap")
    def serialize_endpoints(
        self, value: Mapping[str, Weight], handler: SerializerFunctionWrapHandler
    ) -> Any:
        return handler(dict(value))

    @field_validator("blocked_query_types", mode="before")
    @classmethod
    def normalize_blocked_query_types(cls, value: Any) -> Any:
        return split_list(value)

    @model_validator(mode="after")
    def check_endpoints(self) -> "LoadBalancerConfig":
        """An enabled load balancer needs endpoints to balance over."""
        if self.enabled and not self.endpoints:
            raise EmptyCollectionError(
                "The load balancer should have at least 1 endpoint defined",
                path="endpoints",
            )
        return self


class PluginConfig(_Node):
    """Plugin configuration validation model."""

    plugin_class: Optional[str] = Field(None, description="Plugin class path")
    plugin_service: Optional[str] = Field(None, description="Plugin service name")

    @model_validator(mode="before")
    @classmethod
    def allow_null(cls, data: Any) -> Any:
        return {} if data is None else data

    @model_validator(mode="after")
    def check_exclusive(self) -> "PluginConfig":
        if not _is_empty(self.plugin_class) and not _is_empty(self.plugin_service):
            raise MutualExclusionError(
                "Only one of plugin_class or plugin_service can be set"
            )
        return self


class ClientConfig(_Node):
    """Client configuration validation model."""

    client_class: str = Field(DEFAULT_CLIENT_CLASS, description="Client class path")
    adapter_class: Optional[str] = Field(
        None, description="Deprecated, configure adapter_service instead"
    )
    adapter_timeout: Optional[Scalar] = Field(None, description="Adapter timeout")
    adapter_service: Optional[str] = Field(None, description="Adapter service name")
    endpoints: Tuple[str, ...] = Field((), description="Endpoint names")
    default_endpoint: Optional[str] = Field(None, description="Default endpoint name")
    load_balancer: LoadBalancerConfig = Field(default_factory=LoadBalancerConfig)
    plugins: Mapping[str, PluginConfig] = Field(
        default_factory=dict, validate_default=True
    )

    @field_validator("client_class")
    @classmethod
    def check_client_class(cls, value: str) -> str:
        if not value:
            raise MalformedValueError(
                "The value cannot be empty", path="client_class"
            )
        return value

    @field_validator("adapter_timeout", mode="before")
    @classmethod
    def check_timeout_type(cls, value: Any, info: ValidationInfo) -> Any:
        return _scalar(value, info)

    @field_validator("adapter_class")
    @classmethod
    def check_legacy_adapter_class(cls, value: Any, info: ValidationInfo) -> Any:
        return _legacy_option(
            value,
            info,
            "Configuring an adapter class is deprecated. "
            "Configure an adapter service instead.",
            'Configuring an "adapter_class" is not supported by '
            "{library} >= 6.0. "
            "Configure an adapter service instead.",
        )

    @field_validator("endpoints", mode="before")
    @classmethod
    def normalize_endpoints(cls, value: Any) -> Any:
        return split_list(value)

    @field_validator("plugins", mode="before")
    @classmethod
    def normalize_plugins(cls, value: Any) -> Any:
        return keyed_by_name(value)

    @field_validator("plugins")
    @classmethod
    def freeze_plugins(
        cls, value: Mapping[str, PluginConfig]
    ) -> Mapping[str, PluginConfig]:
        return _freeze(value)

    @field_serializer("plugins", mode="wrap")
    def serialize_plugins(
        self, value: Mapping[str, PluginConfig], handler: SerializerFunctionWrapHandler
    ) -> Any:
        return handler(dict(value))

    @model_validator(mode="after")
    def check_adapter(self) -> "ClientConfig":
        """Validate adapter options."""
        if not _is_empty(self.adapter_timeout) and not _is_empty(self.adapter_service):
            raise MutualExclusionError(
                'Setting "adapter_timeout" is only supported for the default '
                'adapter and not in combination with "adapter_service"'
            )
        if not _is_empty(self.adapter_class) and not _is_empty(self.adapter_service):
            raise MutualExclusionError(
                'Only one of "adapter_class" or "adapter_service" can be set'
            )
        return self


class Config(_Node):
    """Complete bundle configuration."""

    default_client: str = Field(DEFAULT_CLIENT_NAME, description="Default client name")
    endpoints: Mapping[str, EndpointConfig] = Field(
        default_factory=dict, validate_default=True
    )
    clients: Mapping[str, ClientConfig] = Field(
        default_factory=dict, validate_default=True
    )

    @field_validator("default_client", mode="before")
    @classmethod
    def check_default_client(cls, value: Any) -> Any:
        if value is None or value == "":
            raise MalformedValueError(
                "The value cannot be empty", path="default_client"
            )
        return value

    @field_validator("endpoints", "clients", mode="before")
    @classmethod
    def normalize_sections(cls, value: Any) -> Any:
        return keyed_by_name(value)

    @field_validator("endpoints", "clients")
    @classmethod
    def freeze_sections(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return _freeze(value)

    @field_serializer("endpoints", "clients", mode="wrap")
    def serialize_sections(
        self, value: Mapping[str, Any], handler: SerializerFunctionWrapHandler
    ) -> Any:
        return handler(dict(value))

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Configuration dictionary of plain mappings, lists and scalars.
        """
        return self.model_dump(mode="json")


# Validation


@dataclass(frozen=True)
class ValidationResult:
    """Validated configuration and the deprecations found on the way."""

    config: Config
    deprecations: Tuple[DeprecationNotice, ...] = ()


def validate_config(raw: Any, library=None) -> ValidationResult:
    """Validate and normalize a raw configuration document.

    Args:
        raw: Parsed configuration document (mappings, lists and scalars).
        library: Client library descriptor or version string.
            Defaults to the installed library.

    Returns:
        Canonical configuration and deprecation notices.

    Raises:
        InvalidConfigurationError: If the document is invalid. The error
            names the offending path and carries the deprecations found
            before the failure.
    """
    notices: List[DeprecationNotice] = []
    context = {"library": resolve_library(library), "notices": notices}
    try:
        config = _validate_tree(raw, context)
    except InvalidConfigurationError as e:
        e.deprecations = tuple(notices)
        raise
    return ValidationResult(config=config, deprecations=tuple(notices))


def _validate_tree(raw: Any, context: Dict[str, Any]) -> Config:
    document = _mapping(raw, "")
    sections = {name: document.pop(name, None) for name in ("endpoints", "clients")}

    # default_client and unknown root keys come first
    head = _build(Config, document, "", context)

    endpoints = {
        name: _build(
            EndpointConfig,
            _mapping(entry, f"endpoints.{name}"),
            f"endpoints.{name}",
            context,
        )
        for name, entry in _named(sections["endpoints"], "endpoints").items()
    }
    clients = {
        name: _build_client(entry, f"clients.{name}", context)
        for name, entry in _named(sections["clients"], "clients").items()
    }
    return head.model_copy(
        update={"endpoints": _freeze(endpoints), "clients": _freeze(clients)}
    )


def _build_client(entry: Any, path: str, context: Dict[str, Any]) -> ClientConfig:
    client = _mapping(entry, path)
    library: ClientLibrary = context["library"]
    client.setdefault("client_class", library.default_client_class)

    if "load_balancer" in client:
        client["load_balancer"] = _build(
            LoadBalancerConfig,
            client["load_balancer"],
            f"{path}.load_balancer",
            context,
        )
    if "plugins" in client:
        client["plugins"] = {
            name: _build(PluginConfig, plugin, f"{path}.plugins.{name}", context)
            for name, plugin in _named(client["plugins"], f"{path}.plugins").items()
        }
    return _build(ClientConfig, client, path, context)


def _build(
    model: Type[_Model], value: Any, path: str, context: Dict[str, Any]
) -> _Model:
    """Validate one node, attaching its path to any error."""
    try:
        return model.model_validate(value, context={**context, "path": path})
    except InvalidConfigurationError as e:
        raise e.at(path)
    except ValidationError as e:
        raise _malformed(e).at(path) from e


def _malformed(exc: ValidationError) -> MalformedValueError:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error["loc"])
    if error["type"] == "extra_forbidden":
        reason = f'Unrecognized option "{error["loc"][-1]}"'
    else:
        reason = error["msg"]
    return MalformedValueError(reason, path=location or None)


def _mapping(value: Any, path: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise MalformedValueError(
            f"Expected a mapping, got {type(value).__name__}", path=path or None
        )
    return dict(value)


def _named(value: Any, path: str) -> Dict[str, Any]:
    try:
        keyed = keyed_by_name(value)
    except InvalidConfigurationError as e:
        raise e.at(path)
    if not isinstance(keyed, dict):
        raise MalformedValueError(
            f"Expected a mapping or a list, got {type(value).__name__}", path=path
        )
    return keyed
