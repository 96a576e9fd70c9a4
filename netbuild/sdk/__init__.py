"""Clients for the external decode, compile and storage services."""

from netbuild.sdk.compiler import CompilerBridge, Conversion
from netbuild.sdk.decoder import DecodeAdapter
from netbuild.sdk.store import SnippetStoreClient

__all__ = [
    "CompilerBridge",
    "Conversion",
    "DecodeAdapter",
    "SnippetStoreClient",
]
