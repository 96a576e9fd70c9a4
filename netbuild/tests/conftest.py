"""Shared fixtures: sample graphs, a scratch snippet database, service fakes."""

import base64
import zlib

import httpx
import pytest

from cabinet import snippet_db


@pytest.fixture
def graph() -> dict:
    """a three-device graph as the compile service emits it."""
    return {
        "nodes": [
            {
                "id": "1",
                "data": {
                    "label": "R1",
                    "src": "/icons/router.png",
                    "type": "router",
                    "coordinates": "rack 1",
                    "power_on": True,
                    "interface": {"name": "Gi0/0", "ip": "10.0.0.1", "bandwidth": 1000},
                },
                "position": {"x": 100, "y": 50},
            },
            {
                "id": "3",
                "data": {"label": "SW1", "src": "/icons/switch.png", "type": "switch"},
                "position": {"x": 250, "y": 50},
            },
            {
                "id": "5",
                "data": {"label": "PC1", "src": "/icons/pc.png"},
                "position": {"x": 400.5, "y": 120},
            },
        ],
        "edges": [
            {"source": "1", "target": "3"},
            {"source": "3", "target": "5"},
        ],
    }


@pytest.fixture
def pkt_xml() -> str:
    return '<?xml version="1.0"?><PACKETTRACER5><NETWORK/></PACKETTRACER5>'


@pytest.fixture
def decode_body(pkt_xml) -> str:
    """what the decode service answers for ``pkt_xml``: base64 of deflate data."""
    return base64.b64encode(zlib.compress(pkt_xml.encode("utf-8"))).decode("ascii")


@pytest.fixture
def refuse():
    """a MockTransport handler that fails as if the service were down."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return handler


@pytest.fixture
def snippet_store(tmp_path, monkeypatch):
    """point the cabinet at a fresh sqlite file."""
    db_path = tmp_path / "cabinet.db"
    monkeypatch.setattr(snippet_db, "SNIPPET_DB_PATH", db_path)
    snippet_db.init_db()
    return db_path
