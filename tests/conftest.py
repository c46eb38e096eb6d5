"""Test configuration and fixtures."""

import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from flexconnect.connectors import ConnectorRegistry


class MockService:
    """Records requests and answers them through httpx.MockTransport.

    Responses are queued per path; unmatched paths answer 200 with an
    empty body.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._responses: Dict[str, List[httpx.Response]] = {}
        self.handler: Optional[Callable[[httpx.Request], httpx.Response]] = None

    def respond(
        self,
        path: str,
        status: int = 200,
        json_body: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
        content: Optional[bytes] = None,
    ) -> None:
        """Queue a response for a request path."""
        response_headers = dict(headers or {})
        if json_body is not None:
            response_headers.setdefault("Content-Type", "application/json")
            content = json.dumps(json_body).encode("utf-8")
        self._responses.setdefault(path, []).append(
            httpx.Response(status, headers=response_headers, content=content or b"")
        )

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.handler is not None:
            return self.handler(request)
        queued = self._responses.get(request.url.path)
        if queued:
            return queued.pop(0)
        return httpx.Response(200)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def client(self) -> httpx.AsyncClient:
        """Create a client answered by this service."""
        return httpx.AsyncClient(transport=self.transport, base_url="https://flex.example.com")

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def service() -> MockService:
    """Provide an offline HTTP service."""
    return MockService()


@pytest.fixture
def registry() -> ConnectorRegistry:
    """Provide an empty connector registry."""
    return ConnectorRegistry()
