"""Error taxonomy for the attestation workflow."""
from __future__ import annotations

from typing import Iterable, Optional


class FdcError(Exception):
    """Base class for every error raised by ``fdc_runner``."""


class ConfigError(FdcError):
    def __init__(self, message: str, missing: Iterable[str] = ()) -> None:
        self.missing = tuple(missing)
        if self.missing:
            message = f"{message}: {', '.join(self.missing)}"
        super().__init__(message)


class VerifierRequestFailed(FdcError):
    """Raised when the verifier answers with a non-success status or cannot be reached."""

    def __init__(self, status: Optional[int], body: str) -> None:
        self.status = status
        self.body = body
        label = f"HTTP {status}" if status is not None else "transport error"
        super().__init__(f"Verifier request failed ({label}): {_truncate(body)}")


class InvalidVerifierResponse(FdcError):
    """Raised when the verifier body lacks a hex ``abiEncodedRequest``/``messageIntegrityCode``."""

    def __init__(self, body: str) -> None:
        self.body = body
        super().__init__(f"Invalid response from verifier: {_truncate(body)}")


class SimulationFailed(FdcError):
    """Raised when the pre-flight call to the hub would revert. Nothing was broadcast."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"requestAttestation simulation failed: {reason}")


class TransactionReverted(FdcError):
    def __init__(self, tx_id: str) -> None:
        self.tx_id = tx_id
        super().__init__(f"Attestation request transaction reverted on-chain: {tx_id}")


class ConfirmationTimeout(FdcError):
    def __init__(self, tx_id: str, waited: float) -> None:
        self.tx_id = tx_id
        self.waited = waited
        super().__init__(f"Transaction {tx_id} not confirmed after {waited:.0f}s")


class ProofRetrievalTimeout(FdcError):
    def __init__(self, round_id: int, attempts: int) -> None:
        self.round_id = round_id
        self.attempts = attempts
        super().__init__(f"Failed to retrieve FDC proof for round {round_id} after {attempts} attempts.")


def _truncate(text: str, limit: int = 200) -> str:
    text = text or ""
    return text if len(text) <= limit else f"{text[:limit]}…"
