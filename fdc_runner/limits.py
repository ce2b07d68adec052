from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional

from .constants import NATIVE_DECIMALS
from .errors import ConfigError


def parse_native_amount(raw: str | int | Decimal, label: str = "fee") -> int:
    """Convert a decimal amount in native token units (e.g. ``"0.1"``) to wei."""

    try:
        amount = raw if isinstance(raw, Decimal) else Decimal(str(raw).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ConfigError(f"{label} must be a numeric value, got {raw!r}") from exc
    if amount < 0:
        raise ConfigError(f"{label} must not be negative")
    wei = amount * (Decimal(10) ** NATIVE_DECIMALS)
    if wei != wei.to_integral_value():
        raise ConfigError(f"{label} has more than {NATIVE_DECIMALS} decimal places")
    return int(wei)


def check_fee_limit(fee_wei: int, max_fee_wei: Optional[int]) -> Optional[str]:
    if max_fee_wei is None:
        return None
    if fee_wei > max_fee_wei:
        return f"attestation fee {fee_wei} wei exceeds configured ceiling {max_fee_wei} wei"
    return None


def parse_gas_price(gwei_value: Optional[str]) -> Optional[int]:
    if not gwei_value:
        return None
    try:
        return int(Decimal(gwei_value) * Decimal(1_000_000_000))
    except (InvalidOperation, ValueError) as exc:
        raise ConfigError(f"gas price must be numeric gwei, got {gwei_value!r}") from exc
