"""Build Web2Json attestation requests.

Nothing here touches the network or the chain; the builder does not validate
its inputs beyond encoding the type/source identifiers.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Union

from .constants import ATTESTATION_TYPE_NAME, SOURCE_ID_NAME

JsonField = Union[str, Mapping[str, Any], None]


def encode_identifier(name: str) -> str:
    """Encode ``name`` as a right zero-padded bytes32 hex string."""

    raw = name.encode("utf-8")
    if len(raw) > 32:
        raise ValueError(f"identifier {name!r} is longer than 32 bytes")
    return "0x" + raw.ljust(32, b"\x00").hex()


def decode_identifier(value: str | bytes) -> str:
    raw = value if isinstance(value, bytes) else bytes.fromhex(value[2:] if value.startswith("0x") else value)
    return raw.rstrip(b"\x00").decode("utf-8", errors="replace")


def _as_json_text(value: JsonField) -> str:
    if value is None:
        return "{}"
    if isinstance(value, str):
        return value
    return json.dumps(dict(value), separators=(",", ":"), sort_keys=True)


@dataclass(frozen=True)
class RequestBody:
    url: str
    http_method: str = "GET"
    headers: str = "{}"
    query_params: str = "{}"
    body: str = "{}"
    post_process_jq: str = "."
    abi_signature: str = ""

    def to_payload(self) -> Dict[str, str]:
        return {
            "url": self.url,
            "httpMethod": self.http_method,
            "headers": self.headers,
            "queryParams": self.query_params,
            "body": self.body,
            "postProcessJq": self.post_process_jq,
            "abiSignature": self.abi_signature,
        }

    def as_tuple(self) -> tuple[str, ...]:
        return (
            self.url,
            self.http_method,
            self.headers,
            self.query_params,
            self.body,
            self.post_process_jq,
            self.abi_signature,
        )


@dataclass(frozen=True)
class AttestationRequest:
    attestation_type: str
    source_id: str
    request_body: RequestBody
    attestation_type_name: str = ATTESTATION_TYPE_NAME

    def to_payload(self) -> Dict[str, Any]:
        return {
            "attestationType": self.attestation_type,
            "sourceId": self.source_id,
            "requestBody": self.request_body.to_payload(),
        }


def build_request(
    url: str,
    post_process_jq: str,
    abi_signature: str,
    *,
    http_method: str = "GET",
    headers: JsonField = None,
    query_params: JsonField = None,
    body: JsonField = None,
    attestation_type: str = ATTESTATION_TYPE_NAME,
    source_id: str = SOURCE_ID_NAME,
) -> AttestationRequest:
    return AttestationRequest(
        attestation_type=encode_identifier(attestation_type),
        source_id=encode_identifier(source_id),
        attestation_type_name=attestation_type,
        request_body=RequestBody(
            url=url,
            http_method=http_method,
            headers=_as_json_text(headers),
            query_params=_as_json_text(query_params),
            body=_as_json_text(body),
            post_process_jq=post_process_jq,
            abi_signature=abi_signature,
        ),
    )
