"""Shared plumbing for the httpx clients of the external services."""

from __future__ import annotations

import httpx

from netbuild import config


class ServiceClient:
    """Base for clients that talk to one external HTTP service.

    Each call opens its own ``httpx.AsyncClient``. Pass ``transport`` to
    route requests somewhere other than the network (tests use
    ``httpx.MockTransport`` or ``httpx.ASGITransport``).
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = config.REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.transport = transport

    def _url(self, path: str = "") -> str:
        return f"{self.base_url}{path}"

    def _headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            transport=self.transport,
            headers=self._headers(),
        )
