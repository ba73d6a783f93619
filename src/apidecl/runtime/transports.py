"""
REST transport collaborators.

The evaluator sends every resolved Rest/* call through a transport: any
callable taking ``(url, method, body)`` and returning the decoded response.
:class:`HttpxTransport` is the bundled implementation.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from apidecl.core.ir import HttpMethod

logger = logging.getLogger(__name__)


class RestTransport(Protocol):
    """Sends a REST call and returns the decoded response."""

    def __call__(
        self, url: str, method: HttpMethod, body: dict[str, Any] | None = None
    ) -> Any: ...


class HttpxTransport:
    """
    Synchronous JSON transport backed by an httpx client.

    Example::

        with HttpxTransport("http://localhost:8000") as transport:
            evaluator = load_all(Path("data/api"), transport, InMemoryStorage())
            posts = evaluator.evaluate("(Rest/get /users/:id/posts selfMappings)", {"id": 1})
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._client = client or httpx.Client(
            base_url=base_url, timeout=timeout, headers=headers
        )

    def send(
        self, url: str, method: HttpMethod, body: dict[str, Any] | None = None
    ) -> Any:
        """
        Send one request.

        Returns:
            The decoded JSON response, or None for an empty body

        Raises:
            httpx.HTTPStatusError: On a 4xx/5xx response
            httpx.HTTPError: On transport failures
        """
        logger.debug("%s %s", method.value.upper(), url)
        response = self._client.request(method.value.upper(), url, json=body)
        response.raise_for_status()
        if not response.content:
            return None
        return response.json()

    def __call__(
        self, url: str, method: HttpMethod, body: dict[str, Any] | None = None
    ) -> Any:
        return self.send(url, method, body)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpxTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
