"""Graph editing state and the editing session."""

from netbuild.editor.graph_editor import (
    EditorState,
    GraphEditor,
    RenderEdge,
    RenderNode,
    project,
)
from netbuild.editor.session import EditingSession, create_session

__all__ = [
    "EditingSession",
    "EditorState",
    "GraphEditor",
    "RenderEdge",
    "RenderNode",
    "create_session",
    "project",
]
