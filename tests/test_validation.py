"""Tests for configuration validation."""

import copy
import logging

import pytest
from pydantic import ValidationError

from solr_bundle.config import (
    ClientLibrary,
    Config,
    EmptyCollectionError,
    IncompatibleVersionError,
    LoadBalancerConfig,
    MalformedValueError,
    MutualExclusionError,
    validate_config,
)
from solr_bundle.config.validation import (
    coerce_load_balancer,
    keyed_by_name,
    normalize_weighted_endpoints,
    split_list,
)

LEGACY = "5.2.0"
CURRENT = "6.3.0"


def validate(raw, library=LEGACY):
    return validate_config(raw, library=library).config


def client(raw_client, library=LEGACY):
    return validate({"clients": {"default": raw_client}}, library).clients["default"]


# Top level


def test_empty_document_uses_defaults():
    config = validate({})
    assert config.default_client == "default"
    assert config.endpoints == {}
    assert config.clients == {}


def test_null_document_is_empty():
    assert validate(None) == validate({})


def test_default_client_defaults_when_absent():
    config = validate({"clients": {"main": {}}})
    assert config.default_client == "default"


def test_default_client_is_kept():
    assert validate({"default_client": "main"}).default_client == "main"


@pytest.mark.parametrize("value", ["", None])
def test_default_client_cannot_be_empty(value):
    with pytest.raises(MalformedValueError) as e:
        validate({"default_client": value})
    assert e.value.path == "default_client"


def test_unknown_root_option_is_rejected():
    with pytest.raises(MalformedValueError) as e:
        validate({"default_clients": "main"})
    assert e.value.path == "default_clients"
    assert 'Unrecognized option "default_clients"' in str(e.value)


def test_root_must_be_a_mapping():
    with pytest.raises(MalformedValueError):
        validate(["endpoints"])


def test_input_is_not_mutated():
    raw = {
        "endpoints": [{"name": "main", "host": "solr.local"}],
        "clients": {
            "default": {
                "endpoints": "main",
                "load_balancer": {"endpoints": ["main"]},
                "plugins": [{"name": "audit", "plugin_class": "app.Audit"}],
            }
        },
    }
    snapshot = copy.deepcopy(raw)
    validate(raw)
    assert raw == snapshot


def test_config_is_immutable():
    config = validate({})
    with pytest.raises(ValidationError):
        config.default_client = "other"


def test_config_collections_are_read_only():
    config = validate(
        {
            "endpoints": {"main": {}},
            "clients": {
                "default": {
                    "endpoints": "main",
                    "load_balancer": {"endpoints": ["main"]},
                    "plugins": {"audit": {"plugin_service": "audit"}},
                }
            },
        }
    )
    client = config.clients["default"]

    with pytest.raises(TypeError):
        config.endpoints["other"] = config.endpoints["main"]
    with pytest.raises(TypeError):
        config.clients["other"] = client
    with pytest.raises(TypeError):
        client.plugins["other"] = client.plugins["audit"]
    with pytest.raises(TypeError):
        client.load_balancer.endpoints["other"] = 2
    with pytest.raises(AttributeError):
        client.endpoints.append("other")
    with pytest.raises(AttributeError):
        client.load_balancer.blocked_query_types.append("select")

    assert list(config.endpoints) == ["main"]
    assert list(client.load_balancer.endpoints) == ["main"]


def test_defaults_are_read_only():
    config = validate({})
    with pytest.raises(TypeError):
        config.endpoints["other"] = None
    with pytest.raises(TypeError):
        client({}).plugins["other"] = None


# Endpoints


def test_endpoint_defaults():
    endpoint = validate({"endpoints": {"main": {}}}).endpoints["main"]
    assert endpoint.scheme == "http"
    assert endpoint.host == "127.0.0.1"
    assert endpoint.port == 8983
    assert endpoint.path == "/"
    assert endpoint.core is None


def test_null_endpoint_uses_defaults():
    endpoint = validate({"endpoints": {"main": None}}).endpoints["main"]
    assert endpoint.host == "127.0.0.1"


def test_endpoint_fields_default_independently():
    endpoint = validate(
        {"endpoints": {"main": {"host": "solr.local", "core": "products"}}}
    ).endpoints["main"]
    assert endpoint.host == "solr.local"
    assert endpoint.core == "products"
    assert endpoint.scheme == "http"
    assert endpoint.port == 8983


def test_endpoint_port_accepts_numeric_string():
    assert validate({"endpoints": {"main": {"port": "8080"}}}).endpoints["main"].port == 8080


def test_endpoint_port_must_be_numeric():
    with pytest.raises(MalformedValueError) as e:
        validate({"endpoints": {"main": {"port": "http"}}})
    assert e.value.path == "endpoints.main.port"


def test_endpoint_core_accepts_numbers():
    assert validate({"endpoints": {"main": {"core": 1}}}).endpoints["main"].core == "1"


def test_unknown_endpoint_option_is_rejected():
    with pytest.raises(MalformedValueError) as e:
        validate({"endpoints": {"main": {"hots": "solr.local"}}})
    assert e.value.path == "endpoints.main.hots"


def test_endpoints_accept_named_list():
    config = validate(
        {"endpoints": [{"name": "main", "host": "a"}, {"name": "replica", "host": "b"}]}
    )
    assert config.endpoints["main"].host == "a"
    assert config.endpoints["replica"].host == "b"


def test_named_list_entries_need_a_name():
    with pytest.raises(MalformedValueError) as e:
        validate({"endpoints": [{"host": "a"}]})
    assert e.value.path == "endpoints"


def test_duplicate_names_keep_the_last_entry():
    config = validate(
        {"endpoints": [{"name": "main", "host": "a"}, {"name": "main", "host": "b"}]}
    )
    assert config.endpoints["main"].host == "b"


# Clients


def test_client_defaults():
    result = client({})
    assert result.client_class == "pysolr.Solr"
    assert result.adapter_timeout is None
    assert result.adapter_service is None
    assert result.endpoints == ()
    assert result.default_endpoint is None
    assert result.load_balancer.enabled is False
    assert result.plugins == {}


def test_null_client_uses_defaults():
    assert validate({"clients": {"default": None}}).clients["default"].client_class == "pysolr.Solr"


def test_client_class_defaults_to_library_client():
    library = ClientLibrary(version="4.0", default_client_class="custom.Client")
    assert client({}, library).client_class == "custom.Client"


def test_client_class_cannot_be_empty():
    with pytest.raises(MalformedValueError) as e:
        client({"client_class": ""})
    assert e.value.path == "clients.default.client_class"


def test_client_endpoints_split_comma_separated_string():
    assert client({"endpoints": "a, b,c"}).endpoints == ("a", "b", "c")


def test_client_endpoints_keep_lists():
    assert client({"endpoints": ["a", "b"]}).endpoints == ("a", "b")


def test_adapter_timeout_and_service_are_exclusive():
    with pytest.raises(MutualExclusionError) as e:
        validate({"clients": {"default": {"adapter_timeout": 5, "adapter_service": "svc"}}})
    assert e.value.path == "clients.default"
    assert "adapter_timeout" in e.value.reason


def test_empty_adapter_timeout_allows_service():
    result = client({"adapter_timeout": 0, "adapter_service": "svc"})
    assert result.adapter_service == "svc"


def test_adapter_timeout_alone_is_valid():
    assert client({"adapter_timeout": 5}).adapter_timeout == 5


def test_adapter_timeout_must_be_scalar():
    with pytest.raises(MalformedValueError) as e:
        client({"adapter_timeout": [5]})
    assert e.value.path == "clients.default.adapter_timeout"


def test_plugin_class_and_service_are_exclusive():
    with pytest.raises(MutualExclusionError) as e:
        client({"plugins": {"audit": {"plugin_class": "app.Audit", "plugin_service": "audit"}}})
    assert e.value.path == "clients.default.plugins.audit"
    assert "plugin_class" in e.value.reason


def test_plugins_accept_named_list():
    result = client({"plugins": [{"name": "audit", "plugin_service": "audit"}]})
    assert result.plugins["audit"].plugin_service == "audit"
    assert result.plugins["audit"].plugin_class is None


# Load balancer


def test_load_balancer_disabled_by_default():
    load_balancer = client({}).load_balancer
    assert load_balancer.enabled is False
    assert load_balancer.endpoints == {}
    assert load_balancer.blocked_query_types == ("update",)


def test_load_balancer_true_shorthand():
    assert coerce_load_balancer(True) == {"enabled": True}
    assert coerce_load_balancer(None) == {"enabled": True}

    # Defaults before the endpoints check runs
    load_balancer = LoadBalancerConfig.model_construct(**coerce_load_balancer(True))
    assert load_balancer.enabled is True
    assert load_balancer.endpoints == {}
    assert load_balancer.blocked_query_types == ("update",)


def test_load_balancer_true_requires_endpoints():
    with pytest.raises(EmptyCollectionError) as e:
        client({"load_balancer": True})
    assert e.value.path == "clients.default.load_balancer.endpoints"


def test_load_balancer_null_enables_it():
    with pytest.raises(EmptyCollectionError):
        client({"load_balancer": None})


def test_load_balancer_enabled_without_endpoints():
    with pytest.raises(EmptyCollectionError):
        validate({"clients": {"default": {"load_balancer": {"enabled": True}}}})


def test_load_balancer_false_never_requires_endpoints():
    load_balancer = client({"load_balancer": False}).load_balancer
    assert load_balancer.enabled is False
    assert load_balancer.blocked_query_types == ("update",)

    load_balancer = client({"load_balancer": {"enabled": False, "endpoints": []}}).load_balancer
    assert load_balancer.enabled is False


def test_load_balancer_mapping_enables_it():
    load_balancer = client({"load_balancer": {"endpoints": "e1"}}).load_balancer
    assert load_balancer.enabled is True
    assert load_balancer.endpoints == {"e1": 1}


def test_load_balancer_endpoint_list_gets_default_weight():
    load_balancer = client({"load_balancer": {"endpoints": ["e1", "e2"]}}).load_balancer
    assert load_balancer.endpoints == {"e1": 1, "e2": 1}


def test_load_balancer_explicit_weights_are_kept():
    load_balancer = client({"load_balancer": {"endpoints": {"e1": 3, "e2": 1}}}).load_balancer
    assert load_balancer.endpoints == {"e1": 3, "e2": 1}


def test_load_balancer_comma_separated_endpoints():
    load_balancer = client({"load_balancer": {"endpoints": "e1, e2"}}).load_balancer
    assert load_balancer.endpoints == {"e1": 1, "e2": 1}


def test_load_balancer_blocked_query_types():
    load_balancer = client(
        {"load_balancer": {"endpoints": "e1", "blocked_query_types": "update, ping"}}
    ).load_balancer
    assert load_balancer.blocked_query_types == ("update", "ping")


def test_load_balancer_fractional_weights_are_kept():
    load_balancer = client({"load_balancer": {"endpoints": {"e1": 0.5, "e2": 1.5}}}).load_balancer
    assert load_balancer.endpoints == {"e1": 0.5, "e2": 1.5}


def test_load_balancer_numeric_string_weights():
    load_balancer = client({"load_balancer": {"endpoints": {"e1": "2", "e2": "0.5"}}}).load_balancer
    assert load_balancer.endpoints == {"e1": 2, "e2": 0.5}


def test_load_balancer_weight_must_be_a_number():
    with pytest.raises(MalformedValueError) as e:
        client({"load_balancer": {"endpoints": {"e1": "heavy"}}})
    assert e.value.path == "clients.default.load_balancer.endpoints.e1"


# Normalizers


def test_split_list():
    assert split_list("a, b,c") == ["a", "b", "c"]
    assert split_list("a") == ["a"]
    assert split_list(None) == []


def test_split_list_is_idempotent():
    once = split_list("a , b")
    assert split_list(once) == once == ["a", "b"]


def test_normalize_weighted_endpoints_is_idempotent():
    once = normalize_weighted_endpoints(["e1", "e2"])
    assert normalize_weighted_endpoints(once) == once == {"e1": 1, "e2": 1}


def test_normalize_weighted_endpoints_treats_non_string_keys_as_list_entries():
    assert normalize_weighted_endpoints({0: "e1", "e2": 4}) == {"e1": 1, "e2": 4}


def test_keyed_by_name():
    assert keyed_by_name([{"name": "a", "host": "h"}]) == {"a": {"host": "h"}}
    assert keyed_by_name({1: {}}) == {"1": {}}
    assert keyed_by_name(None) == {}


def test_keyed_by_name_uses_name_attribute_of_mapping_entries():
    assert keyed_by_name({"first": {"name": "main", "host": "h"}}) == {"main": {"host": "h"}}
    config = validate({"endpoints": {"first": {"name": "main", "host": "a"}}})
    assert list(config.endpoints) == ["main"]
    assert config.endpoints["main"].host == "a"


# Deprecations and library versions


def test_legacy_endpoint_timeout_is_deprecated(caplog):
    with caplog.at_level(logging.WARNING):
        result = validate_config({"endpoints": {"main": {"timeout": 5}}}, library=LEGACY)

    assert result.config.endpoints["main"].timeout == 5
    [notice] = result.deprecations
    assert notice.package == "solr-bundle"
    assert notice.version == "4.1"
    assert notice.path == "endpoints.main.timeout"
    assert "timeout per endpoint is deprecated" in notice.message
    assert "timeout per endpoint is deprecated" in caplog.text


def test_legacy_endpoint_timeout_rejected_on_new_library():
    with pytest.raises(IncompatibleVersionError) as e:
        validate_config({"endpoints": {"main": {"timeout": 5}}}, library=CURRENT)
    assert e.value.path == "endpoints.main.timeout"
    assert ">= 6.0" in e.value.reason
    assert len(e.value.deprecations) == 1


def test_legacy_adapter_class_is_deprecated():
    result = validate_config(
        {"clients": {"default": {"adapter_class": "requests.Session"}}}, library=LEGACY
    )
    assert result.config.clients["default"].adapter_class == "requests.Session"
    [notice] = result.deprecations
    assert notice.path == "clients.default.adapter_class"


def test_legacy_adapter_class_rejected_on_new_library():
    with pytest.raises(IncompatibleVersionError) as e:
        validate_config(
            {"clients": {"default": {"adapter_class": "requests.Session"}}}, library="6.0"
        )
    assert e.value.path == "clients.default.adapter_class"


def test_adapter_class_and_service_are_exclusive():
    with pytest.raises(MutualExclusionError) as e:
        client({"adapter_class": "requests.Session", "adapter_service": "svc"})
    assert e.value.path == "clients.default"


def test_no_deprecations_without_legacy_options():
    result = validate_config({"endpoints": {"main": {}}}, library=CURRENT)
    assert result.deprecations == ()


def test_client_library_legacy_support():
    assert ClientLibrary(version="5.9.1").supports_legacy_options
    assert not ClientLibrary(version="6.0").supports_legacy_options
    assert not ClientLibrary(version="7.0.0").supports_legacy_options


def test_client_library_rejects_invalid_version():
    with pytest.raises(MalformedValueError):
        ClientLibrary(version="not a version")


def test_client_library_detects_missing_distribution():
    library = ClientLibrary.detect("solr-bundle-missing-distribution")
    assert library.version == "0"
    assert library.supports_legacy_options


# Errors


def test_error_message_names_path():
    with pytest.raises(MutualExclusionError) as e:
        client({"adapter_timeout": 5, "adapter_service": "svc"})
    assert str(e.value).startswith('Invalid configuration for path "clients.default": ')


def test_to_dict_round_trips():
    config = validate(
        {
            "endpoints": {"main": {"core": "products"}},
            "clients": {"default": {"endpoints": "main", "load_balancer": {"endpoints": ["main"]}}},
        }
    )
    assert validate(config.to_dict()) == config
    assert isinstance(config, Config)
