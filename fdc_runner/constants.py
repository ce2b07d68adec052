from __future__ import annotations

import re
from typing import Any, Dict, List


DEFAULT_VERIFIER_URL = "https://fdc-verifiers-mainnet.flare.network"
DEFAULT_DA_LAYER_URL = "https://attestation.flare.network"
DEFAULT_HUB_ADDRESS = "0xc25c749DC27Efb1864Cb3DADa8845B7687eB2d44"
DA_LAYER_PROOF_PATH = "/api/v1/fdc/proof-by-request-round-raw"

ATTESTATION_TYPE_NAME = "Web2Json"
SOURCE_ID_NAME = "PublicWeb2"

DEFAULT_FEE = "0.1"  # native token units (FLR / C2FLR)
DEFAULT_ROUND_DURATION = 90  # seconds
DEFAULT_FIRST_ROUND_TIMESTAMP = 0
DEFAULT_MAX_ATTEMPTS = 20
DEFAULT_POLL_INTERVAL_MS = 15_000
DEFAULT_HTTP_TIMEOUT = 30
NATIVE_DECIMALS = 18

PLACEHOLDER_MARKERS = ("YOUR", "REPLACE", "<", ">")
HEX_PATTERN = re.compile(r"^0[xX](?:[0-9a-fA-F]{2})+$")

# Env keys
VERIFIER_URL_ENV = "FDC_VERIFIER_URL"
VERIFIER_API_KEY_ENV = "FDC_VERIFIER_API_KEY"
DA_LAYER_URL_ENV = "FDC_DA_LAYER_URL"
DA_LAYER_API_KEY_ENV = "DA_LAYER_API_KEY"
HUB_ADDRESS_ENV = "FDC_HUB_ADDRESS"
HUB_ABI_PATH_ENV = "FDC_HUB_ABI_PATH"
FEE_ENV = "FDC_FEE"
MAX_FEE_ENV = "FDC_MAX_FEE"
ROUND_DURATION_ENV = "FDC_ROUND_DURATION"
FIRST_ROUND_TIMESTAMP_ENV = "FDC_FIRST_ROUND_TIMESTAMP"
ROUND_OFFSETS_ENV = "FDC_ROUND_OFFSETS"
MAX_ATTEMPTS_ENV = "DA_LAYER_MAX_ATTEMPTS"
POLL_INTERVAL_ENV = "DA_LAYER_POLL_INTERVAL_MS"
HTTP_TIMEOUT_ENV = "HTTP_TIMEOUT"
CONFIRMATION_TIMEOUT_ENV = "CONFIRMATION_TIMEOUT"
RPC_URL_ENV = "FLARE_RPC_URL"
PRIVATE_KEY_ENV = "PRIVATE_KEY"
GAS_LIMIT_ENV = "GAS_LIMIT"
GAS_PRICE_GWEI_ENV = "GAS_PRICE_GWEI"
LOG_FILE_ENV = "FDC_LOG_FILE"

FDC_HUB_ABI: List[Dict[str, Any]] = [
    {
        "inputs": [{"internalType": "bytes", "name": "_data", "type": "bytes"}],
        "name": "requestAttestation",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function",
    },
    {
        "anonymous": False,
        "inputs": [
            {"indexed": False, "internalType": "bytes", "name": "data", "type": "bytes"},
            {"indexed": False, "internalType": "uint256", "name": "fee", "type": "uint256"},
        ],
        "name": "AttestationRequest",
        "type": "event",
    },
]

# abi.encode(IWeb2Json.Response)
WEB2JSON_RESPONSE_TYPE = (
    "(bytes32,bytes32,uint64,uint64,"
    "(string,string,string,string,string,string,string),"
    "(bytes))"
)


__all__ = [
    "DEFAULT_VERIFIER_URL",
    "DEFAULT_DA_LAYER_URL",
    "DEFAULT_HUB_ADDRESS",
    "DA_LAYER_PROOF_PATH",
    "ATTESTATION_TYPE_NAME",
    "SOURCE_ID_NAME",
    "DEFAULT_FEE",
    "DEFAULT_ROUND_DURATION",
    "DEFAULT_FIRST_ROUND_TIMESTAMP",
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_POLL_INTERVAL_MS",
    "DEFAULT_HTTP_TIMEOUT",
    "NATIVE_DECIMALS",
    "PLACEHOLDER_MARKERS",
    "HEX_PATTERN",
    "FDC_HUB_ABI",
    "WEB2JSON_RESPONSE_TYPE",
]
