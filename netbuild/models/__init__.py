"""Core data models for netbuild."""

from netbuild.models.snippet import Snippet, SnippetCreate
from netbuild.models.topology import (
    PLACEHOLDER_INTERFACE,
    Device,
    Interface,
    Link,
    Position,
    Topology,
    cascade_delete,
)

__all__ = [
    # Topology
    "Device",
    "Interface",
    "Link",
    "PLACEHOLDER_INTERFACE",
    "Position",
    "Topology",
    "cascade_delete",
    # Snippets
    "Snippet",
    "SnippetCreate",
]
