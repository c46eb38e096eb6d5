"""Core connector abstractions and protocols.

Defines the foundation for flexibility data connectors:
- Layer: Named scopes a connector may serve
- ConnectorModule Protocol: Contract every loadable connector satisfies
- ConnectorError hierarchy: Typed exceptions
- ConnectorRegistry: Identifier -> factory mapping used by the module loader
"""

from abc import ABC
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, runtime_checkable

# =============================================================================
# Layers
# =============================================================================


class Layer(str, Enum):
    """Layers a connector may serve or accept changes for."""

    ALL = "ALL"
    VENDOR = "VENDOR"
    PARTNER = "PARTNER"
    CUSTOMER_BASE = "CUSTOMER_BASE"
    CUSTOMER = "CUSTOMER"
    PUBLIC = "PUBLIC"
    USER = "USER"


# Marker a module puts first in its layer list to accept any requested layer
ALL_LAYERS = Layer.ALL.value


# =============================================================================
# Connector Error Hierarchy
# =============================================================================


class ConnectorError(Exception):
    """Base exception for connector errors."""

    def __init__(self, message: str, connector_name: str = "", details: Optional[Dict[str, Any]] = None):
        self.connector_name = connector_name
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(ConnectorError, ValueError):
    """Incomplete or invalid configuration passed by the caller."""

    pass


class ResolutionError(ConnectorError):
    """A connector module could not be loaded."""

    def __init__(self, message: str, identifier: str = "", connector_name: str = ""):
        super().__init__(message, connector_name, {"identifier": identifier})
        self.identifier = identifier


class TransportError(ConnectorError):
    """HTTP exchange failed or returned a status outside [200, 400).

    status is 0 when no response was received at all.
    """

    def __init__(self, status: int, message: str = "", connector_name: str = ""):
        super().__init__(message, connector_name, {"status": status})
        self.status = status
        self.message = message

    def __str__(self) -> str:
        return f"{self.status} {self.message}".strip()


# =============================================================================
# Connector Protocol
# =============================================================================


@runtime_checkable
class ConnectorModule(Protocol):
    """Protocol defining what a loadable connector exposes.

    Connector specific operations (load_flex_data, write, ...) are
    looked up by callers; only the layer declaration is required.
    """

    layers: Sequence[str]


class BaseConnector(ABC):
    """Abstract base class for connectors.

    Subclasses declare their supported layers; ["ALL"] accepts any layer.
    """

    _name: str = "base"
    layers: Sequence[str] = ()

    @property
    def name(self) -> str:
        """Connector name."""
        return self._name

    def supports_layer(self, layer: str) -> bool:
        """Check if connector serves the given layer."""
        if self.layers and self.layers[0] == ALL_LAYERS:
            return True
        return layer in self.layers


# =============================================================================
# Connector Registry
# =============================================================================


ConnectorFactory = Callable[[], Any]


class ConnectorRegistry:
    """Registry of loadable connectors.

    Maps a load identifier (e.g. "flexconnect/apply/connectors/LrepConnector")
    to a factory: a connector class, a plain callable, or a coroutine
    function returning the connector module. Identifiers are case-sensitive
    since they double as load paths.
    """

    def __init__(self):
        self._factories: Dict[str, ConnectorFactory] = {}

    def register(self, identifier: str, factory: ConnectorFactory) -> None:
        """Register a connector factory.

        Args:
            identifier: Full load identifier
            factory: Callable producing the connector module
        """
        self._factories[identifier] = factory

    def unregister(self, identifier: str) -> None:
        """Unregister a connector."""
        self._factories.pop(identifier, None)

    def get(self, identifier: str) -> Optional[ConnectorFactory]:
        """Get a connector factory by identifier."""
        return self._factories.get(identifier)

    def list_connectors(self) -> List[str]:
        """List all registered identifiers."""
        return list(self._factories.keys())

    def is_registered(self, identifier: str) -> bool:
        """Check if an identifier is registered."""
        return identifier in self._factories
