"""Persisted topology snippets.

A snippet's ``content`` is an opaque JSON envelope carrying the DSL text and
the compiled graph together, so a reload never has to recompile.
"""

from datetime import datetime

from pydantic import BaseModel


class Snippet(BaseModel):
    """a saved, named topology. Immutable once created."""

    id: int  # assigned by the store
    title: str
    content: str  # JSON: {"dsl": str, "reactFlow": {"nodes": [...], "edges": [...]}}
    created_at: datetime  # assigned by the store


class SnippetCreate(BaseModel):
    """Request model for creating a snippet."""

    title: str
    content: str
