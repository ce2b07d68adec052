"""Command line entry point: ``run``, ``prepare``, ``round`` and ``proof``."""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from .config import FdcConfig, load_config
from .constants import ATTESTATION_TYPE_NAME, SOURCE_ID_NAME
from .errors import FdcError
from .logging_utils import attach_log_file, get_logger
from .poller import ProofPoller
from .request_builder import AttestationRequest, build_request
from .rounds import resolve_round
from .verifier import VerifierClient
from .workflow import AttestationWorkflow

logger = get_logger("cli")

LOGGED_COMPONENTS = ("cli", "verifier", "hub", "poller", "proof", "workflow")


def _json_arg(value: str) -> Dict[str, Any]:
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as exc:
        raise argparse.ArgumentTypeError(f"not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise argparse.ArgumentTypeError("expected a JSON object")
    return parsed


def _add_request_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--url", required=True, help="Source URL the attestation providers will fetch")
    parser.add_argument("--jq", default=".", help="jq post-processing filter")
    parser.add_argument("--abi-signature", required=True, help="ABI signature (JSON) of the result shape")
    parser.add_argument("--http-method", default="GET")
    parser.add_argument("--headers", type=_json_arg, default=None)
    parser.add_argument("--query-params", type=_json_arg, default=None)
    parser.add_argument("--body", type=_json_arg, default=None)
    parser.add_argument("--attestation-type", default=ATTESTATION_TYPE_NAME)
    parser.add_argument("--source-id", default=SOURCE_ID_NAME)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fdc-runner", description="Flare Data Connector attestation workflow")
    parser.add_argument("--env-file", type=Path, default=None, help="Path to a .env file (default ./.env)")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Prepare, submit and wait for a proof")
    _add_request_arguments(run)

    prepare = sub.add_parser("prepare", help="Only ask the verifier to prepare the request")
    _add_request_arguments(prepare)

    rnd = sub.add_parser("round", help="Resolve the voting round for a block timestamp")
    rnd.add_argument("timestamp", type=int)
    rnd.add_argument("--duration", type=int, default=None)

    proof = sub.add_parser("proof", help="Poll the DA layer for an already submitted request")
    proof.add_argument("request_bytes")
    proof.add_argument("round_id", type=int)
    return parser


def _request_from_args(args: argparse.Namespace) -> AttestationRequest:
    return build_request(
        args.url,
        args.jq,
        args.abi_signature,
        http_method=args.http_method,
        headers=args.headers,
        query_params=args.query_params,
        body=args.body,
        attestation_type=args.attestation_type,
        source_id=args.source_id,
    )


def _dispatch(args: argparse.Namespace, config: FdcConfig) -> Dict[str, Any]:
    if args.command == "round":
        duration = args.duration or config.round_duration
        return {
            "timestamp": args.timestamp,
            "roundDuration": duration,
            "roundId": resolve_round(args.timestamp, duration, config.first_round_timestamp),
        }
    if args.command == "prepare":
        return VerifierClient.from_config(config).prepare(_request_from_args(args)).to_state()
    if args.command == "proof":
        return ProofPoller.from_config(config).retrieve_proof(args.request_bytes, args.round_id).to_state()
    return AttestationWorkflow(config).run(_request_from_args(args)).to_state()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = load_config(env_file=args.env_file)
        if config.log_file:
            attach_log_file(Path(config.log_file), LOGGED_COMPONENTS)
        output = _dispatch(args, config)
    except FdcError as exc:
        logger.error("%s", exc)
        return 1
    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
