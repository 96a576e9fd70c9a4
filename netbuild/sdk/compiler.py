"""Client for the DSL compiler service.

compile:   DSL text -> graph        (POST /reactflow, JSON body)
decompile: decoded XML -> DSL+graph (POST /api/convert, multipart upload)

The service owns the DSL grammar and the XML translation; this module only
enforces the response contract and runs every node/edge through the model
defaulting rules.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from netbuild import config
from netbuild.errors import FormatError, ServiceError, TransportError, ValidationError
from netbuild.models.topology import Topology
from netbuild.sdk.base import ServiceClient

log = logging.getLogger("netbuild.sdk.compiler")

COMPILE_PATH = "/reactflow"
CONVERT_PATH = "/api/convert"


@dataclass(frozen=True)
class Conversion:
    """DSL text together with the topology it describes."""

    dsl: str
    topology: Topology


class CompilerBridge(ServiceClient):
    """Convert between DSL text and topologies through the compiler service."""

    def __init__(
        self,
        base_url: str = config.COMPILER_URL,
        token: str | None = config.API_TOKEN,
        timeout: float = config.REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(base_url, token=token, timeout=timeout, transport=transport)

    async def compile(self, dsl: str) -> Topology:
        """Compile DSL text into a topology.

        Raises:
            ValidationError: ``dsl`` is blank; no request is sent
            TransportError: the service could not be reached
            ServiceError: the service answered with a non-success status
            FormatError: the service answered without graph data
        """
        if not dsl.strip():
            raise ValidationError("Nothing to compile: DSL text is empty.")

        url = self._url(COMPILE_PATH)
        try:
            async with self._client() as client:
                response = await client.post(url, json={"dsl": dsl})
        except httpx.RequestError as e:
            raise TransportError(f"Failed to connect to compiler at {self.base_url}: {e}") from e

        if response.is_error:
            raise ServiceError(
                response.text or f"Compile failed: {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        result = _json_body(response, "Compile")
        graph = result.get("react_flow") if isinstance(result, dict) else None
        if not isinstance(graph, dict):
            raise FormatError("Compile result is missing expected data (react_flow).")

        topology = Topology.from_graph(graph)
        log.info(
            "compiled %d chars of DSL into %d devices, %d links",
            len(dsl), len(topology.devices), len(topology.links),
        )
        return topology

    async def decompile(self, xml: str) -> Conversion:
        """Translate decoded topology XML into DSL text and a topology.

        Raises:
            TransportError: the service could not be reached
            ServiceError: the service answered with a non-success status
            FormatError: the answer lacks ``dsl`` or ``react_flow``
        """
        url = self._url(CONVERT_PATH)
        files = {"file": ("input.xml", xml.encode("utf-8"), "application/xml")}
        try:
            async with self._client() as client:
                response = await client.post(url, files=files)
        except httpx.RequestError as e:
            raise TransportError(f"Failed to connect to compiler at {self.base_url}: {e}") from e

        if response.is_error:
            raise ServiceError(
                _conversion_error(response),
                status_code=response.status_code,
                body=response.text,
            )

        result = _json_body(response, "Conversion")
        if not isinstance(result, dict):
            result = {}
        dsl = result.get("dsl")
        graph = result.get("react_flow")
        if not dsl or not isinstance(dsl, str) or not isinstance(graph, dict):
            raise FormatError(
                "Conversion result is missing expected data (dsl or react_flow)."
            )

        topology = Topology.from_graph(graph)
        log.info(
            "converted XML into %d chars of DSL, %d devices, %d links",
            len(dsl), len(topology.devices), len(topology.links),
        )
        return Conversion(dsl=dsl, topology=topology)


def _json_body(response: httpx.Response, step: str):
    try:
        return response.json()
    except ValueError as e:
        raise FormatError(f"{step} service returned invalid JSON.") from e


def _conversion_error(response: httpx.Response) -> str:
    """the error text of a failed conversion: JSON ``error``, else the body."""
    try:
        data = response.json()
    except ValueError:
        return response.text or "Conversion failed without specific error."
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return f"Conversion failed: {response.status_code}"
