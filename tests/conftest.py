"""Shared fixtures: canned HTTP responses and a sample Web2Json request."""

import json
from unittest.mock import MagicMock

import pytest
from eth_abi import encode

from fdc_runner.constants import WEB2JSON_RESPONSE_TYPE
from fdc_runner.request_builder import build_request

GIST_URL = "https://gist.githubusercontent.com/example/raw/gasEmissions.json"
ABI_SIGNATURE = (
    '{"components":[{"internalType":"address","name":"recipientAddress","type":"address"},'
    '{"internalType":"uint256","name":"recipientGas","type":"uint256"},'
    '{"internalType":"uint256","name":"rate","type":"uint256"}],"name":"carbonData","type":"tuple"}'
)


def make_response(status_code, body=None, text=None):
    response = MagicMock()
    response.status_code = status_code
    if text is None:
        text = json.dumps(body) if body is not None else ""
    response.text = text
    if body is not None:
        response.json.return_value = body
    else:
        response.json.side_effect = ValueError("No JSON body")
    return response


@pytest.fixture
def sample_request():
    return build_request(GIST_URL, ".[0]", ABI_SIGNATURE)


@pytest.fixture
def encoded_response(sample_request):
    """abi.encode(IWeb2Json.Response) for round 11111112 carrying a single uint256."""

    abi_encoded_data = (42).to_bytes(32, "big")
    response = (
        bytes.fromhex(sample_request.attestation_type[2:]),
        bytes.fromhex(sample_request.source_id[2:]),
        11111112,
        1_000_000_000,
        sample_request.request_body.as_tuple(),
        (abi_encoded_data,),
    )
    return "0x" + encode([WEB2JSON_RESPONSE_TYPE], [response]).hex(), abi_encoded_data


@pytest.fixture
def proof_body(encoded_response):
    response_hex, _ = encoded_response
    return {"proofs": ["0x" + "11" * 32, "0x" + "22" * 32], "responseHex": response_hex}
