"""Poll the FDC Data Availability layer until a proof for a request is published."""
from __future__ import annotations

import enum
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence

import requests

from .config import FdcConfig
from .constants import DA_LAYER_PROOF_PATH
from .errors import ProofRetrievalTimeout
from .logging_utils import get_logger
from .proof import Proof, build_proof, is_proof_payload
from .request_builder import AttestationRequest
from .rounds import round_schedule

logger = get_logger("poller")


class PollState(enum.Enum):
    POLLING = "polling"
    PROOF_FOUND = "proof_found"
    NOT_READY = "not_ready"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class PollAttempt:
    number: int
    round_id: int
    state: PollState
    status_code: Optional[int] = None
    detail: str = ""


class ProofPoller:
    """Fixed-interval poller for ``proof-by-request-round-raw``.

    Every attempt is one POST. A 200 carrying both ``proofs`` and
    ``responseHex`` ends the loop; anything else (404, other statuses, bodies
    without those fields, transport errors) is logged and retried until
    ``max_attempts`` is spent.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        max_attempts: int = 20,
        poll_interval_ms: int = 15_000,
        round_offsets: Sequence[int] = (0,),
        timeout: float = 30,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.url = f"{base_url.rstrip('/')}{DA_LAYER_PROOF_PATH}"
        self.api_key = api_key
        self.max_attempts = max_attempts
        self.poll_interval_ms = poll_interval_ms
        self.round_offsets = tuple(round_offsets) or (0,)
        self.timeout = timeout
        self.session = session or requests.Session()
        self.sleep = sleep
        self.state = PollState.POLLING
        self.attempts: list[PollAttempt] = []

    @classmethod
    def from_config(
        cls,
        config: FdcConfig,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> "ProofPoller":
        config.require_da_layer_key()
        return cls(
            config.da_layer_url,
            config.da_layer_api_key or "",
            max_attempts=config.max_attempts,
            poll_interval_ms=config.poll_interval_ms,
            round_offsets=config.round_offsets,
            timeout=config.http_timeout,
            session=session,
            sleep=sleep,
        )

    def retrieve_proof(
        self,
        request_bytes: str,
        round_id: int,
        request: Optional[AttestationRequest] = None,
    ) -> Proof:
        self.state = PollState.POLLING
        self.attempts = []
        rounds = round_schedule(round_id, self.round_offsets)
        logger.info("Polling DA layer for proof. URL: %s, Round: %s", self.url, round_id)

        for number in range(1, self.max_attempts + 1):
            queried_round = next(rounds)
            attempt, payload = self._attempt(number, queried_round, request_bytes)
            self.attempts.append(attempt)
            if attempt.state is PollState.PROOF_FOUND:
                self.state = PollState.PROOF_FOUND
                logger.info("Proof found for round %s on attempt %s.", queried_round, number)
                return build_proof(payload["proofs"], payload["responseHex"], queried_round, request)
            self.state = PollState.NOT_READY
            if number < self.max_attempts:
                self.sleep(self.poll_interval_ms / 1000)

        self.state = PollState.EXHAUSTED
        raise ProofRetrievalTimeout(round_id, self.max_attempts)

    def _attempt(self, number: int, round_id: int, request_bytes: str) -> tuple[PollAttempt, Dict[str, Any]]:
        label = f"{number}/{self.max_attempts}"
        body = {"votingRoundId": str(round_id), "requestBytes": request_bytes}
        headers = {"Content-Type": "application/json", "X-API-KEY": self.api_key}
        try:
            response = self.session.post(self.url, json=body, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Error polling DA layer (attempt %s): %s", label, exc)
            return PollAttempt(number, round_id, PollState.NOT_READY, detail=str(exc)), {}

        status = response.status_code
        if status == 404:
            logger.info("Proof not found yet for round %s (404). Attempt %s.", round_id, label)
            return PollAttempt(number, round_id, PollState.NOT_READY, status), {}
        if status != 200:
            text = (response.text or "")[:200]
            logger.warning("DA layer poll failed status: %s. Body: %s. Attempt %s.", status, text, label)
            return PollAttempt(number, round_id, PollState.NOT_READY, status, text), {}

        try:
            payload = response.json()
        except ValueError:
            payload = None
        if is_proof_payload(payload):
            return PollAttempt(number, round_id, PollState.PROOF_FOUND, status), payload
        logger.info("DA layer response not ready or in unexpected format. Attempt %s.", label)
        return PollAttempt(number, round_id, PollState.NOT_READY, status, "missing proof fields"), {}


def retrieve_proof(
    request_bytes: str,
    round_id: int,
    api_key: str,
    request: Optional[AttestationRequest],
    max_attempts: int,
    poll_interval_ms: int,
    *,
    base_url: str,
    round_offsets: Sequence[int] = (0,),
    timeout: float = 30,
    session: Optional[requests.Session] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Proof:
    poller = ProofPoller(
        base_url,
        api_key,
        max_attempts=max_attempts,
        poll_interval_ms=poll_interval_ms,
        round_offsets=round_offsets,
        timeout=timeout,
        session=session,
        sleep=sleep,
    )
    return poller.retrieve_proof(request_bytes, round_id, request)
