"""Shared helpers for connector implementations.

URL composition, response shape defaults and failure logging used by
both apply and write connectors.
"""

import logging
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote, urlencode

from .base import ConfigurationError

logger = logging.getLogger(__name__)

# Left unescaped in URI components, on top of alphanumerics and "-_.~"
_URI_COMPONENT_SAFE = "!*'()"


def encode_url_parameters(parameters: Mapping[str, Any]) -> str:
    """Encode query parameters the way browsers encode URI components.

    List and tuple values repeat the key; None values are skipped.
    """
    pairs = [(key, value) for key, value in parameters.items() if value is not None]
    return urlencode(pairs, doseq=True, safe=_URI_COMPONENT_SAFE, quote_via=quote)


def build_url(
    route: str,
    property_bag: Mapping[str, Any],
    parameters: Optional[Mapping[str, Any]] = None,
) -> str:
    """Build a full request url.

    The parts are appended in a fixed order since servers parse them
    positionally: url, route, cache buster, reference, query string.

    Args:
        route: Url suffix, e.g. "/flex/data/"
        property_bag: Mapping with "url" and optional "reference", "cache_key"
        parameters: Query parameters appended to the url

    Returns:
        Complete request url

    Raises:
        ConfigurationError: If route or url is missing
    """
    if not route or not property_bag.get("url"):
        raise ConfigurationError("Not all necessary parameters were passed")

    url = property_bag["url"] + route

    cache_key = property_bag.get("cache_key")
    if cache_key:
        url += "~" + cache_key + "~/"

    reference = property_bag.get("reference")
    if reference:
        url += reference

    if parameters:
        query = encode_url_parameters(parameters)
        if query:
            url += "?" + query

    return url


def get_subset_of_object(source: Mapping[str, Any], keys: Any) -> Dict[str, Any]:
    """Copy the truthy values of the given keys from source."""
    target: Dict[str, Any] = {}
    if isinstance(keys, (list, tuple)):
        for key in keys:
            if source.get(key):
                target[key] = source[key]
    return target


def empty_flex_data_response() -> Dict[str, list]:
    """Create an empty flex data response with all expected properties."""
    return {
        "changes": [],
        "variants": [],
        "variantChanges": [],
        "variantDependentControlChanges": [],
        "variantManagementChanges": [],
    }


def log_and_resolve_default(response: Any, connector_config: Any, function_name: str, error_message: str) -> Any:
    """Log a failed connector call and hand back the given default response.

    Lets aggregating callers keep going when one of several connectors fails.

    Args:
        response: Default value to continue with
        connector_config: ConnectorConfig (or mapping) of the failing connector
        function_name: Name of the called connector function
        error_message: Error reported by the connector

    Returns:
        The response, unchanged
    """
    if isinstance(connector_config, Mapping):
        connector = connector_config.get("connector")
    else:
        connector = getattr(connector_config, "connector", None)
    logger.error("Connector (%s) failed call '%s': %s", connector, function_name, error_message)
    return response
