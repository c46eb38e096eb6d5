"""Connector layer for flexibility services.

Key components:
- ConnectorResolver: Ordered, layer-filtered connector set per namespace
- build_url / send_request: Generic request primitive with token handshake
- ConnectorRegistry: Identifier -> factory mapping for the module loader
- StaticFileConnector, LrepConnector, KeyUserConnector: Built-in connectors
"""

from .base import (
    ALL_LAYERS,
    BaseConnector,
    ConfigurationError,
    ConnectorError,
    ConnectorModule,
    ConnectorRegistry,
    Layer,
    ResolutionError,
    TransportError,
)
from .http_client import (
    XSRF_TOKEN_FETCH,
    XSRF_TOKEN_HEADER,
    ResponseEnvelope,
    send_request,
)
from .loader import ModuleLoader, RegistryModuleLoader
from .lrep import KeyUserConnector, LrepConnector
from .resolver import (
    APPLY_CONNECTOR_NAMESPACE,
    STATIC_FILE_CONNECTOR,
    WRITE_CONNECTOR_NAMESPACE,
    ConnectorConfig,
    ConnectorResolver,
    filter_valid_layers,
)
from .static_file import StaticFileConnector
from .utils import (
    build_url,
    empty_flex_data_response,
    get_subset_of_object,
    log_and_resolve_default,
)


def register_builtin_connectors(registry: ConnectorRegistry) -> ConnectorRegistry:
    """Register the built-in connectors under the apply and write namespaces."""
    registry.register(APPLY_CONNECTOR_NAMESPACE + STATIC_FILE_CONNECTOR, StaticFileConnector)
    for namespace in (APPLY_CONNECTOR_NAMESPACE, WRITE_CONNECTOR_NAMESPACE):
        registry.register(namespace + "LrepConnector", LrepConnector)
        registry.register(namespace + "KeyUserConnector", KeyUserConnector)
    return registry


default_registry = register_builtin_connectors(ConnectorRegistry())


__all__ = [
    # Protocol and base
    "ConnectorModule",
    "BaseConnector",
    "ConnectorRegistry",
    "Layer",
    "ALL_LAYERS",
    # Errors
    "ConnectorError",
    "ConfigurationError",
    "ResolutionError",
    "TransportError",
    # Requests
    "ResponseEnvelope",
    "send_request",
    "XSRF_TOKEN_HEADER",
    "XSRF_TOKEN_FETCH",
    # Utils
    "build_url",
    "empty_flex_data_response",
    "get_subset_of_object",
    "log_and_resolve_default",
    # Resolution
    "ModuleLoader",
    "RegistryModuleLoader",
    "ConnectorConfig",
    "ConnectorResolver",
    "filter_valid_layers",
    "APPLY_CONNECTOR_NAMESPACE",
    "WRITE_CONNECTOR_NAMESPACE",
    "STATIC_FILE_CONNECTOR",
    # Connectors
    "StaticFileConnector",
    "LrepConnector",
    "KeyUserConnector",
    "default_registry",
    "register_builtin_connectors",
]
