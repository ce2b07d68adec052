from __future__ import annotations

from typing import Iterator, Sequence


def resolve_round(block_timestamp: int, round_duration_seconds: int, first_round_timestamp: int = 0) -> int:
    """Estimate the voting round a request submitted at ``block_timestamp`` falls into.

    ``floor((block_timestamp - first_round_timestamp) / round_duration_seconds)``.
    This is a best-effort seed for proof lookup; the protocol may assign the
    request to a neighbouring round.
    """
    return (int(block_timestamp) - int(first_round_timestamp)) // int(round_duration_seconds)


def round_schedule(round_id: int, offsets: Sequence[int]) -> Iterator[int]:
    """Yield the round to query on each attempt, cycling through ``offsets``."""
    while True:
        for offset in offsets:
            yield round_id + offset
