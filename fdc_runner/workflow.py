"""End-to-end FDC attestation workflow.

``prepared → submitted → round_assigned → proof_pending → proof_available``.
Each step consumes the immutable output of the previous one; any error aborts
the run and is re-raised to the caller after the result is marked ``failed``.
"""
from __future__ import annotations

import enum
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import requests
from web3 import Web3

from .config import FdcConfig
from .hub import HubSubmitter, SubmissionReceipt
from .logging_utils import compose_log, get_logger
from .poller import ProofPoller
from .proof import Proof
from .request_builder import AttestationRequest
from .rounds import resolve_round
from .verifier import PreparedRequest, VerifierClient

logger = get_logger("workflow")


class WorkflowPhase(enum.Enum):
    BUILT = "built"
    PREPARED = "prepared"
    SUBMITTED = "submitted"
    ROUND_ASSIGNED = "round_assigned"
    PROOF_PENDING = "proof_pending"
    PROOF_AVAILABLE = "proof_available"
    FAILED = "failed"


@dataclass
class WorkflowResult:
    request: AttestationRequest
    phase: WorkflowPhase = WorkflowPhase.BUILT
    prepared: Optional[PreparedRequest] = None
    receipt: Optional[SubmissionReceipt] = None
    round_id: Optional[int] = None
    proof: Optional[Proof] = None
    error: Optional[str] = None
    phases: list[WorkflowPhase] = field(default_factory=lambda: [WorkflowPhase.BUILT])

    def advance(self, phase: WorkflowPhase) -> None:
        self.phase = phase
        self.phases.append(phase)

    def to_state(self) -> Dict[str, Any]:
        state: Dict[str, Any] = {
            "phase": self.phase.value,
            "request": self.request.to_payload(),
        }
        if self.prepared:
            state["prepared"] = self.prepared.to_state()
        if self.receipt:
            state["receipt"] = self.receipt.to_state()
        if self.round_id is not None:
            state["roundId"] = self.round_id
        if self.proof:
            state["proof"] = self.proof.to_state()
        if self.error:
            state["error"] = self.error
        return state


class AttestationWorkflow:
    def __init__(
        self,
        config: FdcConfig,
        *,
        verifier: Optional[VerifierClient] = None,
        submitter: Optional[HubSubmitter] = None,
        poller: Optional[ProofPoller] = None,
        w3: Optional[Web3] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.verifier = verifier or VerifierClient.from_config(config, session=session)
        self._submitter = submitter
        self._poller = poller
        self._w3 = w3
        self._session = session
        self._sleep = sleep
        self.last_result: Optional[WorkflowResult] = None

    @property
    def submitter(self) -> HubSubmitter:
        if self._submitter is None:
            self._submitter = HubSubmitter.from_config(self.config, w3=self._w3)
        return self._submitter

    @property
    def poller(self) -> ProofPoller:
        if self._poller is None:
            self._poller = ProofPoller.from_config(self.config, session=self._session, sleep=self._sleep)
        return self._poller

    def run(
        self,
        request: AttestationRequest,
        *,
        log: Optional[Callable[[str], None]] = None,
    ) -> WorkflowResult:
        _log = compose_log(logger, log)
        result = WorkflowResult(request=request)
        self.last_result = result
        try:
            if self._submitter is None:
                self.config.require_chain_access()
            if self._poller is None:
                self.config.require_da_layer_key()
            _log("Preparing request with verifier…")
            result.prepared = self.verifier.prepare(request)
            result.advance(WorkflowPhase.PREPARED)

            _log("Submitting request to FdcHub…")
            result.receipt = self.submitter.submit(result.prepared, self.config.fee_wei)
            result.advance(WorkflowPhase.SUBMITTED)

            result.round_id = resolve_round(
                result.receipt.block_timestamp,
                self.config.round_duration,
                self.config.first_round_timestamp,
            )
            result.advance(WorkflowPhase.ROUND_ASSIGNED)
            _log(f"Estimated FDC round ID: {result.round_id}")

            result.advance(WorkflowPhase.PROOF_PENDING)
            _log("Waiting for proof from the DA layer…")
            result.proof = self.poller.retrieve_proof(result.prepared.encoded_request, result.round_id, request)
            result.advance(WorkflowPhase.PROOF_AVAILABLE)
        except Exception as exc:
            result.error = str(exc)
            result.advance(WorkflowPhase.FAILED)
            _log(f"Attestation workflow failed during {result.phases[-2].value}: {exc}")
            raise
        _log("Attestation proof retrieved.")
        return result
