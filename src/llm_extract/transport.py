"""HTTP transport for completion requests.

The transport makes exactly one call per attempt and never raises for
network or envelope problems. A failed call is reported as ``None`` so the
retry controller can treat it like any other failed attempt.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Protocol for objects that deliver one request and return its body."""

    def send(
        self, url: str, headers: dict[str, str], payload: dict[str, Any]
    ) -> dict[str, Any] | None:
        """POST the payload and return the decoded JSON envelope.

        Args:
            url: Endpoint URL.
            headers: Request headers.
            payload: JSON-serialisable request body.

        Returns:
            Decoded response object, or None if the call or decoding failed.

        """
        ...


def build_headers(api_key: str | None) -> dict[str, str]:
    """Build JSON request headers with bearer authorisation.

    The Authorization header is omitted when no key is configured, which is
    what keyless local servers (e.g. Ollama) expect.
    """
    headers = {"Content-Type": "application/json"}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    return headers


class HttpxTransport:
    """Synchronous transport backed by httpx.

    Uses the injected ``httpx.Client`` when given (connection pooling, custom
    proxies, test doubles), otherwise a one-off ``httpx.post`` per call.
    """

    def __init__(self, timeout: float = 60.0, client: httpx.Client | None = None) -> None:
        """Initialise the transport.

        Args:
            timeout: Per-request timeout in seconds.
            client: Optional pre-configured httpx client. The caller owns it
                and is responsible for closing it.

        """
        self._timeout = timeout
        self._client = client

    def send(
        self, url: str, headers: dict[str, str], payload: dict[str, Any]
    ) -> dict[str, Any] | None:
        """POST the payload and return the decoded JSON envelope.

        Args:
            url: Endpoint URL.
            headers: Request headers.
            payload: JSON-serialisable request body.

        Returns:
            Decoded response object, or None on any transport failure.

        """
        body = json.dumps(payload)
        try:
            if self._client is not None:
                response = self._client.post(
                    url, headers=headers, content=body, timeout=self._timeout
                )
            else:
                response = httpx.post(
                    url, headers=headers, content=body, timeout=self._timeout
                )
            response.raise_for_status()
            decoded = response.json()
        except httpx.HTTPError as e:
            logger.warning(f"Request to {url} failed: {e}")
            return None
        except ValueError as e:
            logger.warning(f"Response from {url} is not valid JSON: {e}")
            return None

        if not isinstance(decoded, dict):
            logger.warning(
                f"Response from {url} is not a JSON object: {type(decoded).__name__}"
            )
            return None

        logger.debug(f"Received response from {url}")
        return decoded
