"""Connector module loading.

Turns load identifiers into connector modules. Identifiers are looked
up in a ConnectorRegistry first; custom identifiers of the form
"package.module:attribute" are imported directly.

All identifiers of one load call are loaded concurrently and the call
fails as a whole if any single identifier cannot be loaded.
"""

import asyncio
import importlib
import inspect
import logging
from typing import Any, Dict, List, Protocol, Sequence

from .base import ConnectorRegistry, ResolutionError

logger = logging.getLogger(__name__)


class ModuleLoader(Protocol):
    """Anything that can load connector modules by identifier."""

    async def load(self, identifiers: Sequence[str]) -> List[Any]:
        """Load modules, returned in identifier order."""
        ...


def import_object(path: str) -> Any:
    """Import "package.module:attribute"; an empty attribute returns the module."""
    module_name, _, attribute = path.partition(":")
    module = importlib.import_module(module_name)
    obj = module
    for part in filter(None, attribute.split(".")):
        obj = getattr(obj, part)
    return obj


class RegistryModuleLoader:
    """Loads connector modules from a registry, once per identifier.

    Each identifier maps to a single module instance for the lifetime
    of the loader, so connector state (e.g. security tokens) is shared
    by every resolution that uses the same loader.
    """

    def __init__(self, registry: ConnectorRegistry):
        self.registry = registry
        self._modules: Dict[str, Any] = {}

    async def load(self, identifiers: Sequence[str]) -> List[Any]:
        """Load all identifiers concurrently.

        Raises:
            ResolutionError: If any identifier fails to load
        """
        return list(await asyncio.gather(*(self._load_one(identifier) for identifier in identifiers)))

    async def _load_one(self, identifier: str) -> Any:
        if identifier in self._modules:
            return self._modules[identifier]

        factory = self.registry.get(identifier)
        try:
            if factory is None:
                if ":" not in identifier:
                    raise ResolutionError(f"No connector registered for '{identifier}'", identifier=identifier)
                factory = import_object(identifier)

            module = factory() if callable(factory) else factory
            if inspect.isawaitable(module):
                module = await module
        except ResolutionError:
            raise
        except Exception as e:
            raise ResolutionError(f"Failed to load connector '{identifier}': {e}", identifier=identifier) from e

        if not hasattr(module, "layers"):
            raise ResolutionError(f"Connector '{identifier}' does not declare layers", identifier=identifier)

        logger.debug("Loaded connector %s", identifier)
        # Concurrent loads of one identifier keep the first module stored
        return self._modules.setdefault(identifier, module)
