"""Line-delimited JSON-RPC envelopes exchanged with the host.

One request per input line, one response per output line:

    -> {"method": "getManifest", "id": 1, "params": null}
    <- {"jsonrpc": "2.0", "id": 1, "result": {"defaultOutput": ..., "prettyName": ...}}
"""

from __future__ import annotations

import json
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

from .config import PROTOCOL_VERSION
from .errors import ProtocolError

RequestId = Union[StrictInt, StrictStr]


class Request(BaseModel):
    """Request envelope received from the host."""

    method: StrictStr
    id: RequestId
    params: Any = None


class Response(BaseModel):
    """Response envelope; result is null for generate."""

    jsonrpc: str = PROTOCOL_VERSION
    id: RequestId
    result: Any = None


class Manifest(BaseModel):
    """Identity advertised in reply to getManifest.

    Optional fields stay off the wire unless set.
    """

    model_config = ConfigDict(populate_by_name=True)

    default_output: str = Field(alias="defaultOutput")
    pretty_name: str = Field(alias="prettyName")
    denylists: dict[str, list[str]] | None = None
    requires_generators: list[str] | None = Field(default=None, alias="requiresGenerators")
    requires_engines: list[str] | None = Field(default=None, alias="requiresEngines")
    version: str | None = None

    def to_result(self) -> dict[str, Any]:
        """The manifest as it goes in the reply, keyed by wire names."""
        return self.model_dump(by_alias=True, exclude_none=True)


def decode_request(line: str) -> Request:
    """Parse one input line into a Request."""
    try:
        payload = json.loads(line)
    except json.JSONDecodeError as exc:
        raise ProtocolError(f"Invalid JSON from host: {exc}") from exc
    try:
        return Request.model_validate(payload)
    except ValidationError as exc:
        raise ProtocolError(f"Malformed request envelope: {exc}") from exc


def encode_response(response: Response) -> str:
    """Serialize a Response as a single newline-terminated line."""
    body = {"jsonrpc": response.jsonrpc, "id": response.id, "result": response.result}
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False) + "\n"
