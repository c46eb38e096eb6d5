"""Generic HTTP request primitive for connectors.

Wraps httpx with the security token handshake the flexibility services
expect:
- Safe requests without a known token ask the server for one ("fetch")
- Modifying requests echo a known token back
- Responses are classified by status; JSON bodies are parsed

There are no retries and no timeouts at this level; one-off clients
follow redirects. Tests pass an httpx.AsyncClient built on
httpx.MockTransport.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

import httpx

from .base import TransportError

logger = logging.getLogger(__name__)

XSRF_TOKEN_HEADER = "X-CSRF-Token"
XSRF_TOKEN_FETCH = "fetch"

SAFE_METHODS = ("GET", "HEAD")
MODIFYING_METHODS = ("POST", "PUT", "DELETE")


@dataclass
class ResponseEnvelope:
    """Result of one successful HTTP exchange."""

    status: int
    xsrf_token: Optional[str] = None
    response: Optional[Any] = None  # parsed JSON, only for JSON responses
    content: Optional[Any] = None  # body materialized per data_type


def _build_headers(method: str, xsrf_token: Optional[str], content_type: Optional[str]) -> dict:
    """Build request headers for the token handshake."""
    headers = {}
    if method in SAFE_METHODS and not xsrf_token:
        headers[XSRF_TOKEN_HEADER] = XSRF_TOKEN_FETCH
    if method in MODIFYING_METHODS and xsrf_token:
        headers[XSRF_TOKEN_HEADER] = xsrf_token
    if content_type:
        headers["Content-Type"] = content_type
    return headers


def _materialize(response: httpx.Response, data_type: str) -> Any:
    """Materialize the response body as the requested data type."""
    if data_type in ("arraybuffer", "blob"):
        return response.content
    if data_type == "json":
        return response.json()
    return response.text


def _to_envelope(response: httpx.Response, data_type: Optional[str]) -> ResponseEnvelope:
    """Classify a response; raise TransportError outside [200, 400)."""
    status = response.status_code
    if not 200 <= status < 400:
        raise TransportError(status, response.reason_phrase)

    envelope = ResponseEnvelope(
        status=status,
        xsrf_token=response.headers.get(XSRF_TOKEN_HEADER),
    )

    try:
        content_type = response.headers.get("Content-Type")
        if content_type and content_type.startswith("application/json"):
            envelope.response = response.json()
        if data_type:
            envelope.content = _materialize(response, data_type)
    except ValueError as e:
        raise TransportError(status, f"Invalid JSON response: {e}")

    return envelope


async def send_request(
    url: str,
    method: Optional[str] = "GET",
    *,
    xsrf_token: Optional[str] = None,
    payload: Optional[Union[bytes, str]] = None,
    content_type: Optional[str] = None,
    data_type: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> ResponseEnvelope:
    """Send one HTTP request and classify the response by status code.

    Args:
        url: Url of the request
        method: HTTP method, case-insensitive (default GET)
        xsrf_token: Known security token of the calling connector
        payload: Request body; nothing is sent when omitted
        content_type: Content type of the request body
        data_type: How to materialize the body into ``content``:
            "text", "document", "arraybuffer", "blob" or "json"
        client: Client to send with; otherwise a one-off client is used,
            which follows redirects and has no timeout

    Returns:
        ResponseEnvelope with status, token and parsed JSON body

    Raises:
        TransportError: On status outside [200, 400), on network failure
            (status 0) or on an unparsable JSON body
    """
    method = (method or "GET").upper()
    headers = _build_headers(method, xsrf_token, content_type)

    logger.debug("%s %s", method, url)
    try:
        if client is not None:
            response = await client.request(method, url, headers=headers, content=payload)
        else:
            async with httpx.AsyncClient(timeout=None, follow_redirects=True) as one_off:
                response = await one_off.request(method, url, headers=headers, content=payload)
    except httpx.HTTPError as e:
        raise TransportError(0, f"Request to {url} failed: {e}")

    return _to_envelope(response, data_type)
