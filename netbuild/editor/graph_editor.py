"""Live graph state: one topology, an optional inspected device, and the
node/edge projection the canvas draws.

States:
    empty       no topology loaded
    loaded      a topology is present
    inspecting  a device's detail view is open; the topology is unchanged

A new topology always replaces the old one wholesale. Local edits (delete,
move) patch the projection in place; the patched projection is identical to
what ``project`` would compute from scratch.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

from pydantic import BaseModel

from netbuild.errors import DeviceNotFoundError
from netbuild.models.topology import Device, Position, Topology, cascade_delete

log = logging.getLogger("netbuild.editor.graph")


class EditorState(str, Enum):
    empty = "empty"
    loaded = "loaded"
    inspecting = "inspecting"


class RenderNode(BaseModel):
    """one visual node per device, carrying every device field."""

    id: str
    type: str = "custom"
    position: Position
    data: dict


class RenderEdge(BaseModel):
    """one visual edge per link, drawn as a plain connection."""

    id: str
    source: str
    target: str
    type: str = "straight"
    animated: bool = True


def render_node(device: Device) -> RenderNode:
    return RenderNode(
        id=str(device.id),
        position=device.position,
        data={
            "label": device.name,
            "src": device.image_ref,
            **device.model_dump(),
        },
    )


def project(topology: Topology) -> tuple[list[RenderNode], list[RenderEdge]]:
    """Derive the render nodes and edges, in device and link order."""
    nodes = [render_node(device) for device in topology.devices]
    edges = [
        RenderEdge(id=f"e{index}", source=str(link.source), target=str(link.target))
        for index, link in enumerate(topology.links)
    ]
    return nodes, edges


class GraphEditor:
    """Holds the live topology and keeps its projection current."""

    def __init__(self) -> None:
        self.topology: Topology | None = None
        self.inspected: Device | None = None
        self.nodes: list[RenderNode] = []
        self.edges: list[RenderEdge] = []

    @property
    def state(self) -> EditorState:
        if self.topology is None:
            return EditorState.empty
        if self.inspected is not None:
            return EditorState.inspecting
        return EditorState.loaded

    def replace(self, topology: Topology) -> None:
        """install a new topology, discarding the old one and any inspection."""
        self.topology = topology
        self.inspected = None
        self.nodes, self.edges = project(topology)

    def clear(self) -> None:
        self.topology = None
        self.inspected = None
        self.nodes = []
        self.edges = []

    def _require(self, device_id: int) -> Device:
        device = self.topology.get_device(device_id) if self.topology else None
        if device is None:
            raise DeviceNotFoundError(device_id)
        return device

    def select_device(self, device_id: int) -> Device:
        """Open the detail view of a device. Read-only."""
        self.inspected = self._require(device_id)
        return self.inspected

    def dismiss(self) -> None:
        """close the detail view."""
        self.inspected = None

    def delete_device(
        self,
        device_id: int,
        confirm: Callable[[Device], bool] | None = None,
    ) -> bool:
        """Remove a device and its links.

        ``confirm`` is asked first when given; a falsy answer leaves
        everything as it was. Returns whether the device was removed.
        """
        device = self._require(device_id)
        if confirm is not None and not confirm(device):
            return False

        removed_links = len(self.topology.links_touching(device_id))
        self.topology = cascade_delete(self.topology, device_id)

        node_id = str(device_id)
        self.nodes = [node for node in self.nodes if node.id != node_id]
        kept = [
            edge for edge in self.edges
            if edge.source != node_id and edge.target != node_id
        ]
        self.edges = [
            edge.model_copy(update={"id": f"e{index}"})
            for index, edge in enumerate(kept)
        ]

        if self.inspected is not None and self.inspected.id == device_id:
            self.inspected = None
        log.info("deleted device %d and %d links", device_id, removed_links)
        return True

    def move_device(self, device_id: int, x: float, y: float) -> Device:
        """Place a device at a new canvas position."""
        self._require(device_id)
        position = Position(x=x, y=y)
        devices = [
            device.model_copy(update={"position": position}) if device.id == device_id else device
            for device in self.topology.devices
        ]
        self.topology = Topology(devices=devices, links=self.topology.links)

        # nodes line up with devices one to one, so each keeps its own device
        self.nodes = [
            render_node(device) if device.id == device_id else node
            for device, node in zip(devices, self.nodes)
        ]
        return self.topology.get_device(device_id)
