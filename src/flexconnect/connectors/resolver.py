"""Connector set resolution.

Builds the ordered list of connectors a flexibility operation talks to:
the built-in static file connector (optional, always first) followed by
the configured services in their configured order. Every entry gets its
connector module attached and its layers narrowed to what the module
supports.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Optional, Sequence

from .base import ALL_LAYERS, ConnectorRegistry
from .loader import ModuleLoader, RegistryModuleLoader

if TYPE_CHECKING:
    from flexconnect.config import Config, FlexServiceDeclaration

logger = logging.getLogger(__name__)

APPLY_CONNECTOR_NAMESPACE = "flexconnect/apply/connectors/"
WRITE_CONNECTOR_NAMESPACE = "flexconnect/write/connectors/"
STATIC_FILE_CONNECTOR = "StaticFileConnector"


@dataclass
class ConnectorConfig:
    """A configured connector and, once resolved, its module.

    layers of None means "whatever the module declares"; an empty list
    is a restriction to no layers.
    """

    connector: str
    custom: bool = False
    layers: Optional[List[str]] = None
    url: Optional[str] = None
    connector_module: Optional[Any] = None

    @classmethod
    def from_declaration(cls, declaration: "FlexServiceDeclaration") -> "ConnectorConfig":
        """Create an unresolved entry from a service declaration."""
        return cls(
            connector=declaration.connector,
            custom=declaration.custom,
            layers=list(declaration.layers) if declaration.layers is not None else None,
            url=declaration.url,
        )

    def load_identifier(self, namespace: str) -> str:
        """Identifier to load the connector module with."""
        return self.connector if self.custom else namespace + self.connector


def filter_valid_layers(layers: Sequence[str], valid_layers: Sequence[str]) -> List[str]:
    """Keep the requested layers a module supports.

    A module whose first declared layer is "ALL" supports every layer.
    """
    accepts_all = bool(valid_layers) and valid_layers[0] == ALL_LAYERS
    return [layer for layer in layers if accepts_all or layer in valid_layers]


class ConnectorResolver:
    """Resolves configured services into loaded connectors.

    The resolver does not cache; every call builds fresh ConnectorConfig
    entries. Module instances are cached by the loader.
    """

    def __init__(self, services: Sequence["FlexServiceDeclaration"], loader: ModuleLoader):
        """Initialize the resolver.

        Args:
            services: Configured service declarations, in order
            loader: Module loader used to load all connectors of a resolution
        """
        self.services = list(services)
        self.loader = loader

    @classmethod
    def from_config(
        cls,
        config: Optional["Config"] = None,
        registry: Optional[ConnectorRegistry] = None,
    ) -> "ConnectorResolver":
        """Create a resolver for the process configuration and registry."""
        if config is None:
            from flexconnect.config import config
        if registry is None:
            from flexconnect.connectors import default_registry as registry

        return cls(config.flex_services, RegistryModuleLoader(registry))

    async def resolve(self, namespace: str, include_static_file_connector: bool) -> List[ConnectorConfig]:
        """Provide all connectors for the given namespace.

        Args:
            namespace: Prefix for non-custom connector identifiers
            include_static_file_connector: Prepend the static file connector

        Returns:
            Resolved connectors, static file connector first when included

        Raises:
            ResolutionError: If any connector module fails to load
        """
        connectors: List[ConnectorConfig] = []
        if include_static_file_connector:
            connectors.append(ConnectorConfig(connector=STATIC_FILE_CONNECTOR))
        connectors.extend(ConnectorConfig.from_declaration(service) for service in self.services)

        identifiers = [connector.load_identifier(namespace) for connector in connectors]
        modules = await self.loader.load(identifiers)

        for connector, module in zip(connectors, modules):
            module_layers = list(module.layers)
            if connector.layers is None:
                connector.layers = module_layers
            else:
                connector.layers = filter_valid_layers(connector.layers, module_layers)
            connector.connector_module = module

        logger.debug(
            "Resolved %d connector(s) in %s: %s",
            len(connectors),
            namespace,
            ", ".join(connector.connector for connector in connectors),
        )
        return connectors

    async def resolve_for_apply(self) -> List[ConnectorConfig]:
        """Provide the connectors to read flex data from, static file connector included."""
        return await self.resolve(APPLY_CONNECTOR_NAMESPACE, True)

    async def resolve_for_write(self) -> List[ConnectorConfig]:
        """Provide the connectors to write flex data to."""
        return await self.resolve(WRITE_CONNECTOR_NAMESPACE, False)
