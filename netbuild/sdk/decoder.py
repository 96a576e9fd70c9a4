"""Decode a binary topology file into DSL text and a topology.

Pipeline:
    1. POST the base64 payload to the decode service ({"file", "action": "decode"})
    2. base64-decode the answer, inflate it, read it as UTF-8 XML
    3. hand the XML to the compiler's convert endpoint for DSL + graph

Any failing step aborts the whole pipeline; nothing partial is returned.
"""

from __future__ import annotations

import base64
import binascii
import logging
import zlib

import httpx

from netbuild import config
from netbuild.errors import FormatError, ServiceError, TransportError
from netbuild.sdk.base import ServiceClient
from netbuild.sdk.compiler import CompilerBridge, Conversion

log = logging.getLogger("netbuild.sdk.decoder")


class DecodeAdapter(ServiceClient):
    """Turn binary topology files into DSL text and a topology."""

    def __init__(
        self,
        compiler: CompilerBridge,
        decode_url: str = config.DECODE_URL,
        timeout: float = config.REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        # the decode service is unauthenticated; only the compiler gets the token
        super().__init__(decode_url, token=None, timeout=timeout, transport=transport)
        self.compiler = compiler

    async def decode_to_xml(self, payload: bytes) -> str:
        """Send a binary file to the decode service and return its XML.

        Raises:
            TransportError: the decode service could not be reached
            ServiceError: the decode service answered with a non-success status
            FormatError: the answer is not base64 or not zlib/gzip data
        """
        body = {"file": base64.b64encode(payload).decode("ascii"), "action": "decode"}
        try:
            async with self._client() as client:
                response = await client.post(self._url(), json=body)
        except httpx.RequestError as e:
            raise TransportError(f"Failed to connect to decode service at {self.base_url}: {e}") from e

        if response.is_error:
            raise ServiceError(
                f"Decode failed: {response.status_code} {response.text or response.reason_phrase}",
                status_code=response.status_code,
                body=response.text,
            )

        encoded = "".join(response.text.split())
        try:
            compressed = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise FormatError("Decode service returned invalid data.") from e

        try:
            # zlib or gzip framing, detected from the header
            raw = zlib.decompress(compressed, zlib.MAX_WBITS | 32)
        except zlib.error as e:
            raise FormatError("Decode service returned data that is not valid compressed XML.") from e

        xml = raw.decode("utf-8", errors="replace")
        log.info("decoded %d byte file into %d chars of XML", len(payload), len(xml))
        return xml

    async def decode(self, payload: bytes) -> Conversion:
        """Run the full pipeline: binary file -> XML -> DSL text + topology."""
        xml = await self.decode_to_xml(payload)
        return await self.compiler.decompile(xml)
