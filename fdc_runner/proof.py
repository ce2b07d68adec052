"""Proof model and decoding of the DA layer's raw Web2Json response."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple

from eth_abi import decode
from eth_abi.exceptions import DecodingError
from web3 import Web3

from .constants import HEX_PATTERN, WEB2JSON_RESPONSE_TYPE
from .logging_utils import get_logger
from .request_builder import AttestationRequest, RequestBody, build_request

logger = get_logger("proof")


@dataclass(frozen=True)
class ResponseData:
    attestation_type: str
    source_id: str
    voting_round: int
    lowest_used_timestamp: int
    request_body: RequestBody
    response_body_observation_timestamp: int
    response_body_hash: str
    abi_encoded_data: str
    provider_signatures: Tuple[str, ...] = ()
    decoded: bool = True

    @property
    def provider_count(self) -> int:
        return len(self.provider_signatures)

    def to_state(self) -> Dict[str, Any]:
        return {
            "attestationType": self.attestation_type,
            "sourceId": self.source_id,
            "votingRound": self.voting_round,
            "lowestUsedTimestamp": self.lowest_used_timestamp,
            "requestBody": self.request_body.to_payload(),
            "responseBodyObservationTimestamp": self.response_body_observation_timestamp,
            "responseBodyHash": self.response_body_hash,
            "responseBody": {
                "abiEncodedData": self.abi_encoded_data,
                "usedDataAvailabilityProviderCount": self.provider_count,
                "usedDataAvailabilityProviderSigs": list(self.provider_signatures),
            },
            "decoded": self.decoded,
        }


@dataclass(frozen=True)
class Proof:
    merkle_path: Tuple[str, ...]
    response_data: ResponseData
    response_hex: str = field(default="", repr=False)

    def as_contract_args(self) -> Tuple[Tuple[str, ...], Tuple[Any, ...]]:
        """Return ``(merkleProof, data)`` ready for a contract call expecting the proof struct."""
        data = self.response_data
        return (
            self.merkle_path,
            (
                bytes.fromhex(data.attestation_type[2:]),
                bytes.fromhex(data.source_id[2:]),
                data.voting_round,
                data.lowest_used_timestamp,
                data.request_body.as_tuple(),
                (bytes.fromhex(data.abi_encoded_data[2:]),),
            ),
        )

    def to_state(self) -> Dict[str, Any]:
        return {"merkleProof": list(self.merkle_path), "data": self.response_data.to_state()}


def _raw_bytes(response_hex: str) -> bytes:
    try:
        return bytes.fromhex(response_hex[2:] if response_hex.startswith(("0x", "0X")) else response_hex)
    except ValueError:
        return response_hex.encode("utf-8")


def is_proof_payload(payload: Any) -> bool:
    """True when ``payload`` carries a list of hex ``proofs`` and a hex ``responseHex``."""
    if not isinstance(payload, dict):
        return False
    proofs = payload.get("proofs")
    response_hex = payload.get("responseHex")
    if not isinstance(proofs, list) or not isinstance(response_hex, str):
        return False
    return bool(HEX_PATTERN.match(response_hex)) and all(
        isinstance(p, str) and HEX_PATTERN.match(p) for p in proofs
    )


def decode_response_hex(response_hex: str) -> ResponseData:
    """ABI-decode ``abi.encode(IWeb2Json.Response)`` as published by the DA layer."""
    raw = bytes.fromhex(response_hex[2:] if response_hex.startswith(("0x", "0X")) else response_hex)
    (response,) = decode([WEB2JSON_RESPONSE_TYPE], raw)
    attestation_type, source_id, voting_round, lowest_used, request_fields, response_body = response
    abi_encoded_data = response_body[0]
    return ResponseData(
        attestation_type=Web3.to_hex(attestation_type),
        source_id=Web3.to_hex(source_id),
        voting_round=int(voting_round),
        lowest_used_timestamp=int(lowest_used),
        request_body=RequestBody(*request_fields),
        response_body_observation_timestamp=int(lowest_used),
        response_body_hash=Web3.to_hex(Web3.keccak(abi_encoded_data)),
        abi_encoded_data=Web3.to_hex(abi_encoded_data),
    )


def build_proof(
    proofs: Sequence[str],
    response_hex: str,
    round_id: int,
    request: Optional[AttestationRequest] = None,
) -> Proof:
    """Assemble a :class:`Proof` from a DA-layer success payload.

    Response data comes from decoding ``response_hex``. If it cannot be decoded,
    it is rebuilt from the request-time fields and flagged ``decoded=False``;
    such a proof is not usable for on-chain verification.
    """
    try:
        data = decode_response_hex(response_hex)
    except (DecodingError, ValueError) as exc:
        logger.warning("Could not ABI-decode DA layer response for round %s: %s", round_id, exc)
        if request is None:
            request = build_request("", ".", "")
        data = ResponseData(
            attestation_type=request.attestation_type,
            source_id=request.source_id,
            voting_round=round_id,
            lowest_used_timestamp=0,
            request_body=request.request_body,
            response_body_observation_timestamp=0,
            response_body_hash=Web3.to_hex(Web3.keccak(_raw_bytes(response_hex))),
            abi_encoded_data="0x",
            decoded=False,
        )
    return Proof(merkle_path=tuple(str(p) for p in proofs), response_data=data, response_hex=response_hex)
