"""Submit prepared attestation requests to the FdcHub contract."""
from __future__ import annotations

import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.contract import Contract
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception

from .config import FdcConfig
from .constants import FDC_HUB_ABI
from .errors import ConfigError, ConfirmationTimeout, FdcError, SimulationFailed, TransactionReverted
from .logging_utils import get_logger
from .verifier import PreparedRequest

logger = get_logger("hub")

# Each wait_for_transaction_receipt call is bounded; the loop around it is not.
RECEIPT_WAIT_CHUNK = 120.0
FALLBACK_GAS_LIMIT = 500_000


@dataclass(frozen=True)
class SubmissionReceipt:
    transaction_id: str
    block_timestamp: int
    block_number: int

    def to_state(self) -> Dict[str, Any]:
        return {
            "transactionId": self.transaction_id,
            "blockTimestamp": self.block_timestamp,
            "blockNumber": self.block_number,
        }


def init_web3(rpc_url: Optional[str], label: str = "Flare") -> Web3:
    if not rpc_url:
        raise ConfigError(f"{label} RPC URL is not configured.")
    try:
        w3 = Web3(Web3.HTTPProvider(rpc_url))
        _ = w3.eth.chain_id  # probe connectivity
        return w3
    except Exception as exc:
        raise FdcError(f"Unable to connect to {label} RPC: {exc}") from exc


def load_contract_abi(abi_path: Optional[str]) -> List[Dict[str, Any]]:
    """Load an ABI from a JSON file, or return the built-in FdcHub ABI.

    Foundry/Hardhat artifacts wrap the ABI under an ``abi`` key; plain ABI
    lists are accepted as-is.
    """
    if not abi_path:
        return FDC_HUB_ABI
    path = Path(abi_path).expanduser()
    if not path.is_file():
        raise ConfigError(f"ABI file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"ABI file is not valid JSON: {path} - {exc}") from exc
    if isinstance(data, dict) and isinstance(data.get("abi"), list):
        return data["abi"]
    if isinstance(data, list):
        return data
    raise ConfigError(f"ABI file does not contain a valid ABI (expected dict with 'abi' key or list): {path}")


def _raw_transaction(signed: Any) -> Any:
    raw = getattr(signed, "raw_transaction", None)
    if raw is None:
        raw = getattr(signed, "rawTransaction", None)
    return signed if raw is None else raw


def _revert_reason(exc: Exception) -> str:
    message = getattr(exc, "message", None) or str(exc)
    if "execution reverted:" in message:
        return message.split("execution reverted:", 1)[1].strip()
    return message or exc.__class__.__name__


class HubSubmitter:
    def __init__(
        self,
        w3: Web3,
        account: LocalAccount,
        hub_address: str,
        hub_abi: Optional[List[Dict[str, Any]]] = None,
        *,
        gas_limit: Optional[int] = None,
        gas_price_wei: Optional[int] = None,
        confirmation_timeout: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.w3 = w3
        self.account = account
        self.hub_address = Web3.to_checksum_address(hub_address)
        self.hub_abi = hub_abi or FDC_HUB_ABI
        self.gas_limit = gas_limit
        self.gas_price_wei = gas_price_wei
        self.confirmation_timeout = confirmation_timeout
        self.clock = clock

    @classmethod
    def from_config(cls, config: FdcConfig, w3: Optional[Web3] = None) -> "HubSubmitter":
        config.require_chain_access()
        return cls(
            w3 or init_web3(config.rpc_url),
            Account.from_key(config.private_key),
            config.hub_address,
            load_contract_abi(config.hub_abi_path),
            gas_limit=config.gas_limit,
            gas_price_wei=config.gas_price_wei,
            confirmation_timeout=config.confirmation_timeout,
        )

    def contract(self) -> Contract:
        return self.w3.eth.contract(address=self.hub_address, abi=self.hub_abi)

    def submit(self, prepared: PreparedRequest, fee_wei: int) -> SubmissionReceipt:
        encoded = bytes.fromhex(prepared.encoded_request[2:])
        sender = self.account.address
        call = self.contract().functions.requestAttestation(encoded)
        logger.info(
            "Submitting FDC request to FdcHub at %s with fee %s",
            self.hub_address,
            Web3.from_wei(fee_wei, "ether"),
        )

        try:
            call.call({"from": sender, "value": fee_wei})
        except ContractLogicError as exc:
            raise SimulationFailed(_revert_reason(exc)) from exc
        except (Web3Exception, ValueError) as exc:
            raise SimulationFailed(str(exc)) from exc
        logger.info("FdcHub requestAttestation simulation successful. Submitting transaction…")

        tx = call.build_transaction(
            {
                "from": sender,
                "nonce": self.w3.eth.get_transaction_count(sender),
                "chainId": self.w3.eth.chain_id,
                "value": fee_wei,
            }
        )
        self._apply_gas_values(tx)
        signed = self.account.sign_transaction(tx)
        tx_hash = self.w3.eth.send_raw_transaction(_raw_transaction(signed))
        tx_id = Web3.to_hex(tx_hash)
        logger.info("FDC request transaction sent to hub. Waiting for receipt… Hash: %s", tx_id)

        receipt = self._wait_for_receipt(tx_hash, tx_id)
        if receipt["status"] != 1:
            raise TransactionReverted(tx_id)

        block = self.w3.eth.get_block(receipt["blockHash"])
        result = SubmissionReceipt(
            transaction_id=tx_id,
            block_timestamp=int(block["timestamp"]),
            block_number=int(receipt["blockNumber"]),
        )
        logger.info(
            "FDC request included in block %s at timestamp %s.", result.block_number, result.block_timestamp
        )
        return result

    def _wait_for_receipt(self, tx_hash: Any, tx_id: str) -> Any:
        started = self.clock()
        while True:
            chunk = RECEIPT_WAIT_CHUNK
            if self.confirmation_timeout is not None:
                remaining = self.confirmation_timeout - (self.clock() - started)
                if remaining <= 0:
                    raise ConfirmationTimeout(tx_id, self.clock() - started)
                chunk = min(chunk, remaining)
            try:
                return self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=chunk)
            except TimeExhausted:
                logger.info("Still waiting for confirmation of %s…", tx_id)

    def _apply_gas_values(self, tx: Dict[str, Any]) -> None:
        if self.gas_limit is not None:
            tx["gas"] = self.gas_limit
        if "gas" not in tx:
            try:
                tx["gas"] = int(self.w3.eth.estimate_gas(tx) * 12 // 10)
            except (Web3Exception, ValueError):
                tx["gas"] = FALLBACK_GAS_LIMIT
        if self.gas_price_wei is not None:
            tx["gasPrice"] = self.gas_price_wei
            tx.pop("maxFeePerGas", None)
            tx.pop("maxPriorityFeePerGas", None)
        elif "maxFeePerGas" not in tx and "gasPrice" not in tx:
            tx["gasPrice"] = self.w3.eth.gas_price
