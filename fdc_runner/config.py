"""Single configuration value for the attestation workflow.

Everything the components need (endpoints, hub address, fee, polling budget,
signing settings) is resolved once by :func:`load_config` and handed to each
component at construction time.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional, Tuple

from .constants import (
    CONFIRMATION_TIMEOUT_ENV,
    DA_LAYER_API_KEY_ENV,
    DA_LAYER_URL_ENV,
    DEFAULT_DA_LAYER_URL,
    DEFAULT_FEE,
    DEFAULT_FIRST_ROUND_TIMESTAMP,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_HUB_ADDRESS,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_POLL_INTERVAL_MS,
    DEFAULT_ROUND_DURATION,
    DEFAULT_VERIFIER_URL,
    FEE_ENV,
    FIRST_ROUND_TIMESTAMP_ENV,
    GAS_LIMIT_ENV,
    GAS_PRICE_GWEI_ENV,
    HTTP_TIMEOUT_ENV,
    HUB_ABI_PATH_ENV,
    HUB_ADDRESS_ENV,
    LOG_FILE_ENV,
    MAX_ATTEMPTS_ENV,
    MAX_FEE_ENV,
    POLL_INTERVAL_ENV,
    PRIVATE_KEY_ENV,
    ROUND_DURATION_ENV,
    ROUND_OFFSETS_ENV,
    RPC_URL_ENV,
    VERIFIER_API_KEY_ENV,
    VERIFIER_URL_ENV,
)
from .env_utils import build_environment, resolve_env_value
from .errors import ConfigError
from .limits import check_fee_limit, parse_gas_price, parse_native_amount


@dataclass(frozen=True)
class FdcConfig:
    verifier_url: str = DEFAULT_VERIFIER_URL
    da_layer_url: str = DEFAULT_DA_LAYER_URL
    hub_address: str = DEFAULT_HUB_ADDRESS
    fee_wei: int = 10**17
    da_layer_api_key: Optional[str] = None
    verifier_api_key: Optional[str] = None
    hub_abi_path: Optional[str] = None
    max_fee_wei: Optional[int] = None
    round_duration: int = DEFAULT_ROUND_DURATION
    first_round_timestamp: int = DEFAULT_FIRST_ROUND_TIMESTAMP
    round_offsets: Tuple[int, ...] = (0,)
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    confirmation_timeout: Optional[float] = None
    rpc_url: Optional[str] = None
    private_key: Optional[str] = field(default=None, repr=False)
    gas_limit: Optional[int] = None
    gas_price_wei: Optional[int] = None
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        if self.round_duration <= 0:
            raise ConfigError("round duration must be a positive number of seconds")
        if self.max_attempts <= 0:
            raise ConfigError("max poll attempts must be at least 1")
        if self.poll_interval_ms < 0:
            raise ConfigError("poll interval must not be negative")
        if not self.round_offsets:
            raise ConfigError("at least one round offset is required")
        fee_error = check_fee_limit(self.fee_wei, self.max_fee_wei)
        if fee_error:
            raise ConfigError(fee_error)

    def require_chain_access(self) -> None:
        missing: List[str] = []
        if not self.rpc_url:
            missing.append(RPC_URL_ENV)
        if not self.private_key:
            missing.append(PRIVATE_KEY_ENV)
        if missing:
            raise ConfigError("Configure the following settings before submitting", missing)

    def require_da_layer_key(self) -> None:
        if not self.da_layer_api_key:
            raise ConfigError("Configure the following settings before polling", [DA_LAYER_API_KEY_ENV])


def _parse_int(name: str, value: Optional[str], default: Optional[int]) -> Optional[int]:
    if not value:
        return default
    try:
        return int(value, 0)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from exc


def _parse_float(name: str, value: Optional[str], default: Optional[float]) -> Optional[float]:
    if not value:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {value!r}") from exc


def _parse_offsets(value: Optional[str]) -> Tuple[int, ...]:
    if not value:
        return (0,)
    try:
        return tuple(int(part) for part in value.split(",") if part.strip())
    except ValueError as exc:
        raise ConfigError(f"{ROUND_OFFSETS_ENV} must be comma separated integers, got {value!r}") from exc


def load_config(
    env: Optional[Mapping[str, str]] = None,
    env_file: Optional[Path] = None,
) -> FdcConfig:
    merged = build_environment(env, env_file)

    def get(name: str) -> Optional[str]:
        return resolve_env_value(name, merged)

    max_fee_raw = get(MAX_FEE_ENV)
    return FdcConfig(
        verifier_url=(get(VERIFIER_URL_ENV) or DEFAULT_VERIFIER_URL).rstrip("/"),
        da_layer_url=(get(DA_LAYER_URL_ENV) or DEFAULT_DA_LAYER_URL).rstrip("/"),
        hub_address=get(HUB_ADDRESS_ENV) or DEFAULT_HUB_ADDRESS,
        fee_wei=parse_native_amount(get(FEE_ENV) or DEFAULT_FEE, FEE_ENV),
        da_layer_api_key=get(DA_LAYER_API_KEY_ENV),
        verifier_api_key=get(VERIFIER_API_KEY_ENV),
        hub_abi_path=get(HUB_ABI_PATH_ENV),
        max_fee_wei=parse_native_amount(max_fee_raw, MAX_FEE_ENV) if max_fee_raw else None,
        round_duration=_parse_int(ROUND_DURATION_ENV, get(ROUND_DURATION_ENV), DEFAULT_ROUND_DURATION),
        first_round_timestamp=_parse_int(
            FIRST_ROUND_TIMESTAMP_ENV, get(FIRST_ROUND_TIMESTAMP_ENV), DEFAULT_FIRST_ROUND_TIMESTAMP
        ),
        round_offsets=_parse_offsets(get(ROUND_OFFSETS_ENV)),
        max_attempts=_parse_int(MAX_ATTEMPTS_ENV, get(MAX_ATTEMPTS_ENV), DEFAULT_MAX_ATTEMPTS),
        poll_interval_ms=_parse_int(POLL_INTERVAL_ENV, get(POLL_INTERVAL_ENV), DEFAULT_POLL_INTERVAL_MS),
        http_timeout=_parse_float(HTTP_TIMEOUT_ENV, get(HTTP_TIMEOUT_ENV), DEFAULT_HTTP_TIMEOUT),
        confirmation_timeout=_parse_float(CONFIRMATION_TIMEOUT_ENV, get(CONFIRMATION_TIMEOUT_ENV), None),
        rpc_url=get(RPC_URL_ENV),
        private_key=get(PRIVATE_KEY_ENV),
        gas_limit=_parse_int(GAS_LIMIT_ENV, get(GAS_LIMIT_ENV), None),
        gas_price_wei=parse_gas_price(get(GAS_PRICE_GWEI_ENV)),
        log_file=get(LOG_FILE_ENV),
    )
