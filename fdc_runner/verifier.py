"""Client for the FDC verifier ``prepareRequest`` endpoint."""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from .config import FdcConfig
from .constants import HEX_PATTERN
from .errors import InvalidVerifierResponse, VerifierRequestFailed
from .logging_utils import get_logger
from .request_builder import AttestationRequest

logger = get_logger("verifier")


@dataclass(frozen=True)
class PreparedRequest:
    encoded_request: str
    integrity_code: str

    def to_state(self) -> Dict[str, str]:
        return {"abiEncodedRequest": self.encoded_request, "messageIntegrityCode": self.integrity_code}


def _is_hex(value: Any) -> bool:
    return isinstance(value, str) and bool(HEX_PATTERN.match(value))


class VerifierClient:
    """Posts an attestation request to the verifier. A single attempt, no retries."""

    def __init__(
        self,
        base_url: str,
        *,
        api_key: Optional[str] = None,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: FdcConfig, session: Optional[requests.Session] = None) -> "VerifierClient":
        return cls(
            config.verifier_url,
            api_key=config.verifier_api_key,
            timeout=config.http_timeout,
            session=session,
        )

    def endpoint(self, request: AttestationRequest) -> str:
        return f"{self.base_url}/{request.attestation_type_name}/prepareRequest"

    def prepare(self, request: AttestationRequest) -> PreparedRequest:
        url = self.endpoint(request)
        payload = request.to_payload()
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["X-API-KEY"] = self.api_key
        logger.info("Sending request to verifier %s for %s", url, request.request_body.url)
        logger.debug("Verifier payload: %s", json.dumps(payload))

        try:
            response = self.session.post(url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise VerifierRequestFailed(None, str(exc)) from exc

        body = response.text or ""
        if not 200 <= response.status_code < 300:
            logger.error("Verifier request failed. Status: %s Body: %s", response.status_code, body[:200])
            raise VerifierRequestFailed(response.status_code, body)

        try:
            data = json.loads(body)
        except ValueError as exc:
            raise InvalidVerifierResponse(body) from exc
        if not isinstance(data, dict):
            raise InvalidVerifierResponse(body)

        encoded = data.get("abiEncodedRequest")
        integrity = data.get("messageIntegrityCode")
        if not _is_hex(encoded) or not _is_hex(integrity):
            logger.error("Verifier response missing or malformed fields: %s", body[:200])
            raise InvalidVerifierResponse(body)

        logger.info("Prepared FDC request. MIC: %s", integrity)
        return PreparedRequest(encoded_request=encoded, integrity_code=integrity)
