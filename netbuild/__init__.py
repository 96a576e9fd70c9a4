"""netbuild - keep a network topology's DSL text and graph in step."""

from netbuild.editor import EditingSession, GraphEditor, create_session
from netbuild.errors import (
    BusyError,
    DeviceNotFoundError,
    FormatError,
    NetBuildError,
    ServiceError,
    TransportError,
    ValidationError,
)
from netbuild.models import (
    Device,
    Interface,
    Link,
    Position,
    Snippet,
    Topology,
    cascade_delete,
)
from netbuild.persistence import PersistenceManager
from netbuild.sdk import CompilerBridge, DecodeAdapter, SnippetStoreClient

__all__ = [
    # Models
    "Device",
    "Interface",
    "Link",
    "Position",
    "Snippet",
    "Topology",
    "cascade_delete",
    # Errors
    "NetBuildError",
    "TransportError",
    "ServiceError",
    "FormatError",
    "ValidationError",
    "BusyError",
    "DeviceNotFoundError",
    # Services
    "CompilerBridge",
    "DecodeAdapter",
    "SnippetStoreClient",
    "PersistenceManager",
    # Editing
    "GraphEditor",
    "EditingSession",
    "create_session",
]
