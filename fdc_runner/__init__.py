from __future__ import annotations

from .config import FdcConfig, load_config
from .errors import (
    ConfigError,
    ConfirmationTimeout,
    FdcError,
    InvalidVerifierResponse,
    ProofRetrievalTimeout,
    SimulationFailed,
    TransactionReverted,
    VerifierRequestFailed,
)
from .hub import HubSubmitter, SubmissionReceipt
from .poller import PollState, ProofPoller, retrieve_proof
from .proof import Proof, ResponseData, build_proof, decode_response_hex
from .request_builder import AttestationRequest, RequestBody, build_request, encode_identifier
from .rounds import resolve_round
from .verifier import PreparedRequest, VerifierClient
from .workflow import AttestationWorkflow, WorkflowPhase, WorkflowResult
