"""Connectors for remote layered repository (LRep) services.

LrepConnector talks to a full repository serving every layer;
KeyUserConnector talks to the key user service, which only serves the
CUSTOMER layer. Both remember the security token the service hands out
and echo it back on modifying requests.
"""

import json
import logging
from typing import Any, Dict, List, Optional

import httpx

from .base import ALL_LAYERS, BaseConnector, Layer
from .http_client import send_request
from .utils import build_url, empty_flex_data_response

logger = logging.getLogger(__name__)


class LrepConnector(BaseConnector):
    """Connector for a layered repository service."""

    _name = "lrep"
    layers = [ALL_LAYERS]

    ROUTES = {
        "DATA": "/flex/data/",
        "CHANGES": "/changes/",
        "TOKEN": "/actions/getcsrftoken/",
    }

    def __init__(self):
        self.xsrf_token: Optional[str] = None

    def _remember_token(self, token: Optional[str]) -> None:
        if token:
            self.xsrf_token = token

    async def load_flex_data(
        self,
        url: str,
        reference: str,
        cache_key: Optional[str] = None,
        app_version: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        **_: Any,
    ) -> Dict[str, Any]:
        """Load flex data of a reference.

        Args:
            url: Service url configured for the connector
            reference: Flex reference
            cache_key: Cache buster token
            app_version: Application version query parameter
            client: httpx client to send with

        Returns:
            Flex data response; empty lists for anything the service omits
        """
        parameters = {"appVersion": app_version} if app_version else None
        request_url = build_url(
            self.ROUTES["DATA"],
            {"url": url, "reference": reference, "cache_key": cache_key},
            parameters,
        )
        result = await send_request(request_url, "GET", xsrf_token=self.xsrf_token, client=client)
        self._remember_token(result.xsrf_token)

        data = empty_flex_data_response()
        if isinstance(result.response, dict):
            data.update(result.response)
        return data

    async def fetch_token(self, url: str, client: Optional[httpx.AsyncClient] = None) -> Optional[str]:
        """Request a fresh security token from the service."""
        request_url = build_url(self.ROUTES["TOKEN"], {"url": url})
        # No token passed, so the request asks the service for one
        result = await send_request(request_url, "GET", client=client)
        self._remember_token(result.xsrf_token)
        return self.xsrf_token

    async def write(
        self,
        url: str,
        flex_objects: List[Dict[str, Any]],
        client: Optional[httpx.AsyncClient] = None,
        **_: Any,
    ) -> Any:
        """Write flex objects to the service.

        Fetches a token first when none is known yet.

        Returns:
            Parsed JSON response of the service, if any
        """
        if not self.xsrf_token:
            await self.fetch_token(url, client=client)

        request_url = build_url(self.ROUTES["CHANGES"], {"url": url})
        result = await send_request(
            request_url,
            "POST",
            xsrf_token=self.xsrf_token,
            payload=json.dumps(flex_objects),
            content_type="application/json; charset=utf-8",
            client=client,
        )
        self._remember_token(result.xsrf_token)
        logger.debug("Wrote %d flex object(s) to %s", len(flex_objects), request_url)
        return result.response


class KeyUserConnector(LrepConnector):
    """Connector for the key user service (CUSTOMER layer only)."""

    _name = "keyuser"
    layers = [Layer.CUSTOMER.value]

    ROUTES = {
        "DATA": "/flex/keyuser/v1/data/",
        "CHANGES": "/flex/keyuser/v1/changes/",
        "TOKEN": "/flex/keyuser/v1/settings",
    }
