"""Client for the snippet store (GET/POST /snippets, DELETE /snippets/{id})."""

from __future__ import annotations

import logging

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from netbuild import config
from netbuild.errors import FormatError, ServiceError, TransportError
from netbuild.models.snippet import Snippet, SnippetCreate
from netbuild.sdk.base import ServiceClient

log = logging.getLogger("netbuild.sdk.store")

_SNIPPET_LIST = TypeAdapter(list[Snippet])


class SnippetStoreClient(ServiceClient):
    """Talk to the persistence store holding saved topologies."""

    def __init__(
        self,
        base_url: str = config.STORE_URL,
        token: str | None = config.API_TOKEN,
        timeout: float = config.REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(base_url, token=token, timeout=timeout, transport=transport)

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            async with self._client() as client:
                response = await client.request(method, self._url(path), **kwargs)
        except httpx.RequestError as e:
            raise TransportError(f"Failed to connect to snippet store at {self.base_url}: {e}") from e

        if response.is_error:
            raise ServiceError(
                _store_error(response),
                status_code=response.status_code,
                body=response.text,
            )
        return response

    async def list_snippets(self) -> list[Snippet]:
        response = await self._request("GET", "/snippets")
        try:
            return _SNIPPET_LIST.validate_json(response.content)
        except PydanticValidationError as e:
            raise FormatError("Snippet store returned an invalid snippet list.") from e

    async def create_snippet(self, request: SnippetCreate) -> Snippet:
        """store a snippet; the store assigns ``id`` and ``created_at``."""
        response = await self._request("POST", "/snippets", json=request.model_dump())
        try:
            snippet = Snippet.model_validate_json(response.content)
        except PydanticValidationError as e:
            raise FormatError("Snippet store returned an invalid snippet.") from e
        log.info("stored snippet %d (%r)", snippet.id, snippet.title)
        return snippet

    async def delete_snippet(self, snippet_id: int) -> None:
        await self._request("DELETE", f"/snippets/{snippet_id}")
        log.info("deleted snippet %d", snippet_id)


def _store_error(response: httpx.Response) -> str:
    """the store's own message (``msg`` or FastAPI's ``detail``), else the body."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        for key in ("msg", "detail"):
            if isinstance(data.get(key), str) and data[key]:
                return data[key]
    return response.text or f"Snippet store request failed: {response.status_code}"
