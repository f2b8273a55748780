"""
HTTP transport to the engine session.

One synchronous ``httpx.Client`` per process, POSTing GraphQL documents to
the session endpoint with the session token as the basic-auth user name.
"""

from __future__ import annotations

from typing import Any

import httpx

from modrun.core.errors import MissingConfigError, QueryError, TransportError
from modrun.core.settings import ModrunSettings
from modrun.framework.logging import get_logger

log = get_logger(__name__)


class Transport:
    """Executes rendered queries and returns the ``data`` object."""

    def __init__(
        self,
        url: str,
        token: str = "",
        *,
        timeout: float | None = None,
        http_transport: httpx.BaseTransport | None = None,
    ):
        self.url = url
        self._http = httpx.Client(auth=(token, ""), timeout=timeout, transport=http_transport)

    @classmethod
    def from_settings(cls, settings: ModrunSettings) -> Transport:
        if settings.session_port is None:
            raise MissingConfigError("session_port", "Engine session port is not set (MODRUN_SESSION_PORT)")
        return cls(settings.session_url, settings.session_token, timeout=settings.request_timeout)

    def execute(self, query: str) -> dict[str, Any]:
        log.debug("transport.query", query=query)

        try:
            response = self._http.post(self.url, json={"query": query})
        except httpx.HTTPError as e:
            raise TransportError(f"Engine request failed: {e}", cause=e).with_context(query=query) from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        # GraphQL errors come back with a 200 or a 4xx depending on the engine version
        if isinstance(payload, dict) and payload.get("errors"):
            raise QueryError.from_error(payload["errors"][0], query=query)

        if response.is_error:
            raise TransportError(
                f"Engine returned HTTP {response.status_code}",
                response=response,
            ).with_context(query=query)

        if not isinstance(payload, dict):
            raise TransportError("Engine returned a non-JSON response", response=response).with_context(query=query)

        return payload.get("data") or {}

    def close(self) -> None:
        self._http.close()
