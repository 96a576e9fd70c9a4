"""Save, list, delete and reload topologies through the snippet store.

A snippet's content is a JSON envelope ``{"dsl": ..., "reactFlow": ...}``
holding the DSL text and the compiled graph together.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from netbuild.errors import FormatError, ServiceError, ValidationError
from netbuild.models.snippet import Snippet, SnippetCreate
from netbuild.models.topology import Topology
from netbuild.sdk.store import SnippetStoreClient

log = logging.getLogger("netbuild.persistence")


class SnippetEnvelope(BaseModel):
    """the stored content of a snippet."""

    model_config = {"populate_by_name": True}

    dsl: str
    react_flow: dict = Field(alias="reactFlow")


def encode_envelope(dsl: str, topology: Topology) -> str:
    envelope = SnippetEnvelope(dsl=dsl, react_flow=topology.to_graph())
    return envelope.model_dump_json(by_alias=True)


def parse_envelope(content: str) -> tuple[str, Topology]:
    """Read DSL text and a topology back out of snippet content.

    Raises:
        FormatError: the content is not JSON, or lacks ``dsl``/``reactFlow``
    """
    try:
        data = json.loads(content)
    except (TypeError, ValueError) as e:
        raise FormatError("Failed to parse topology data.") from e

    if (
        not isinstance(data, dict)
        or not isinstance(data.get("dsl"), str)
        or not isinstance(data.get("reactFlow"), dict)
    ):
        raise FormatError(
            "Selected topology data is corrupted or in an incompatible format."
        )
    return data["dsl"], Topology.from_graph(data["reactFlow"])


def _created_at(snippet: Snippet) -> datetime:
    # naive timestamps count as UTC so a mixed listing still sorts
    if snippet.created_at.tzinfo is None:
        return snippet.created_at.replace(tzinfo=timezone.utc)
    return snippet.created_at


class PersistenceManager:
    """Store and restore (DSL text, topology) pairs.

    Keeps the listing from the last ``list()`` in ``snippets``, newest first,
    and patches it locally on save and delete.
    """

    def __init__(self, store: SnippetStoreClient) -> None:
        self.store = store
        self.snippets: list[Snippet] = []

    async def save(self, title: str, dsl: str, topology: Topology) -> Snippet:
        """Persist a topology with its DSL text.

        Raises:
            ValidationError: ``title`` or ``dsl`` is empty; nothing is sent
        """
        if not title.strip():
            raise ValidationError("Please enter a title before saving.")
        if not dsl.strip():
            raise ValidationError("Nothing to save: DSL text is empty.")

        request = SnippetCreate(title=title.strip(), content=encode_envelope(dsl, topology))
        snippet = await self.store.create_snippet(request)
        self.snippets.insert(0, snippet)
        return snippet

    async def list(self) -> list[Snippet]:
        """fetch every saved snippet, newest first."""
        snippets = await self.store.list_snippets()
        self.snippets = sorted(snippets, key=_created_at, reverse=True)
        return list(self.snippets)

    async def delete(self, snippet_id: int) -> None:
        """Delete a snippet and drop it from the local listing.

        A snippet the store no longer has (404) counts as already deleted.
        On any other failure the error propagates and the listing is left as
        it was.
        """
        try:
            await self.store.delete_snippet(snippet_id)
        except ServiceError as e:
            if e.status_code != 404:
                raise
            log.info("snippet %d was already gone from the store", snippet_id)
        self.snippets = [s for s in self.snippets if s.id != snippet_id]

    def load(self, snippet: Snippet) -> tuple[str, Topology]:
        dsl, topology = parse_envelope(snippet.content)
        log.info(
            "loaded snippet %d (%r): %d devices, %d links",
            snippet.id, snippet.title, len(topology.devices), len(topology.links),
        )
        return dsl, topology
