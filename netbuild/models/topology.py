"""Device, link and topology models.

Every record that crosses a service boundary (decode, compile, load) goes
through ``Device.from_record`` / ``Link.from_record``, so the defaulting
rules live in one place. Construction from a record never fails: missing or
malformed fields fall back to their defaults.
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from netbuild.utils.identifiers import coerce_device_id, coerce_number, format_number


def _text(value: Any, default: str) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return format_number(value)
        except ValueError:
            # ints past the interpreter's int/str conversion digit limit
            return default
    return default


def _mapping(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


class Position(BaseModel):
    """free-form 2D placement on the canvas."""

    model_config = {"frozen": True}

    x: float = 0
    y: float = 0

    def label(self) -> str:
        """the "x y" rendering used when a device has no coordinates label."""
        return f"{format_number(self.x)} {format_number(self.y)}"


class Interface(BaseModel):
    """a device's interface configuration."""

    model_config = {"frozen": True}

    name: str = "N/A"
    ip: str = "N/A"
    bandwidth_mbps: float = 0

    @property
    def is_placeholder(self) -> bool:
        return self == PLACEHOLDER_INTERFACE

    @classmethod
    def from_record(cls, record: Any) -> "Interface":
        if not isinstance(record, dict):
            return PLACEHOLDER_INTERFACE
        bandwidth = record.get("bandwidth", record.get("bandwidth_mbps"))
        return cls(
            name=_text(record.get("name"), "N/A"),
            ip=_text(record.get("ip"), "N/A"),
            bandwidth_mbps=coerce_number(bandwidth),
        )

    def to_record(self) -> dict:
        return {"name": self.name, "ip": self.ip, "bandwidth": self.bandwidth_mbps}


PLACEHOLDER_INTERFACE = Interface()


class Device(BaseModel):
    """a graph vertex: one network device."""

    model_config = {"frozen": True}

    id: int
    name: str = "Unknown"
    image_ref: str = ""  # icon reference, opaque to the core
    position: Position = Field(default_factory=Position)
    device_type: str = "unknown"  # "router", "switch", ...
    coordinates_label: str  # free text, independent of position
    powered_on: bool = False
    interface: Interface = PLACEHOLDER_INTERFACE

    @model_validator(mode="before")
    @classmethod
    def _default_coordinates_label(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("coordinates_label") is not None:
            return data
        position = data.get("position")
        if isinstance(position, dict):
            position = Position(
                x=coerce_number(position.get("x")),
                y=coerce_number(position.get("y")),
            )
        elif not isinstance(position, Position):
            position = Position()
        return {**data, "coordinates_label": position.label()}

    @classmethod
    def from_record(cls, record: Any) -> "Device":
        """Build a device from a graph node record.

        The record has the shape the compile service emits:
        ``{id, data: {label, src, type?, coordinates?, power_on?, interface?},
        position: {x, y}}``. Absent or malformed fields get their defaults;
        a malformed id becomes ``0``.
        """
        record = _mapping(record)
        data = _mapping(record.get("data"))
        raw_position = _mapping(record.get("position"))
        position = Position(
            x=coerce_number(raw_position.get("x")),
            y=coerce_number(raw_position.get("y")),
        )
        coordinates = data.get("coordinates")
        power_on = data.get("power_on")
        return cls(
            id=coerce_device_id(record.get("id")),
            name=_text(data.get("label"), "Unknown"),
            image_ref=_text(data.get("src"), ""),
            position=position,
            device_type=_text(data.get("type"), "unknown"),
            coordinates_label=coordinates if isinstance(coordinates, str) else None,
            powered_on=power_on if isinstance(power_on, bool) else False,
            interface=Interface.from_record(data.get("interface")),
        )

    def to_record(self) -> dict:
        """the graph node record this device was (or would be) built from."""
        return {
            "id": str(self.id),
            "data": {
                "label": self.name,
                "src": self.image_ref,
                "type": self.device_type,
                "coordinates": self.coordinates_label,
                "power_on": self.powered_on,
                "interface": self.interface.to_record(),
            },
            "position": {"x": self.position.x, "y": self.position.y},
        }


class Link(BaseModel):
    """a graph edge, stored as an ordered pair and drawn undirected."""

    model_config = {"frozen": True}

    source: int
    target: int

    @classmethod
    def from_record(cls, record: Any) -> "Link":
        """Build a link from a ``{source, target}`` edge record.

        Endpoints that cannot be read as integers become ``0``, which callers
        must treat as a possibly unresolved reference.
        """
        record = _mapping(record)
        return cls(
            source=coerce_device_id(record.get("source")),
            target=coerce_device_id(record.get("target")),
        )

    def to_record(self) -> dict:
        return {"source": str(self.source), "target": str(self.target)}

    def touches(self, device_id: int) -> bool:
        return self.source == device_id or self.target == device_id


class Topology(BaseModel):
    """the devices and links both the DSL text and the graph describe.

    Lists keep the iteration order the service emitted; that order drives
    the render projection.
    """

    devices: list[Device] = Field(default_factory=list)
    links: list[Link] = Field(default_factory=list)

    @classmethod
    def from_graph(cls, graph: Any) -> "Topology":
        """Build a topology from a ``{nodes: [...], edges: [...]}`` graph.

        Missing or non-list ``nodes``/``edges`` mean an empty list.
        """
        graph = _mapping(graph)
        nodes = graph.get("nodes")
        edges = graph.get("edges")
        if not isinstance(nodes, list):
            nodes = []
        if not isinstance(edges, list):
            edges = []
        return cls(
            devices=[Device.from_record(node) for node in nodes],
            links=[Link.from_record(edge) for edge in edges],
        )

    def to_graph(self) -> dict:
        return {
            "nodes": [device.to_record() for device in self.devices],
            "edges": [link.to_record() for link in self.links],
        }

    @property
    def is_empty(self) -> bool:
        return not self.devices and not self.links

    def get_device(self, device_id: int) -> Device | None:
        for device in self.devices:
            if device.id == device_id:
                return device
        return None

    def device_ids(self) -> list[int]:
        return [device.id for device in self.devices]

    def links_touching(self, device_id: int) -> list[Link]:
        return [link for link in self.links if link.touches(device_id)]

    def dangling_links(self) -> list[Link]:
        """links with an endpoint that resolves to no device."""
        ids = set(self.device_ids())
        return [
            link for link in self.links
            if link.source not in ids or link.target not in ids
        ]

    def is_consistent(self) -> bool:
        """True when device ids are unique and every link resolves."""
        ids = self.device_ids()
        return len(ids) == len(set(ids)) and not self.dangling_links()


def cascade_delete(topology: Topology, device_id: int) -> Topology:
    """Remove a device and every link incident to it.

    Returns a new topology; the input is left untouched. The result never
    holds a link that references ``device_id``.
    """
    return Topology(
        devices=[device for device in topology.devices if device.id != device_id],
        links=[link for link in topology.links if not link.touches(device_id)],
    )
