"""Unit tests for DA layer proof polling."""

from unittest.mock import MagicMock, call

import pytest
import requests

from fdc_runner.config import FdcConfig
from fdc_runner.errors import ConfigError, ProofRetrievalTimeout
from fdc_runner.poller import PollState, ProofPoller, retrieve_proof

from conftest import make_response

REQUEST_BYTES = "0x" + "0f" * 40
ROUND = 11_111_112


def make_poller(responses, **kwargs):
    session = MagicMock()
    session.post.side_effect = responses
    sleep = MagicMock()
    kwargs.setdefault("max_attempts", 5)
    kwargs.setdefault("poll_interval_ms", 15_000)
    poller = ProofPoller("https://da.example", "api-key", session=session, sleep=sleep, **kwargs)
    return poller, session, sleep


class TestRetrieveProof:
    """Tests for ProofPoller.retrieve_proof()."""

    def test_found_after_n_calls(self, sample_request, proof_body):
        """404 twice then a proof: three calls, two fixed-interval sleeps."""
        responses = [make_response(404, text="not found")] * 2 + [make_response(200, proof_body)]
        poller, session, sleep = make_poller(responses)

        proof = poller.retrieve_proof(REQUEST_BYTES, ROUND, sample_request)

        assert session.post.call_count == 3
        assert sleep.call_args_list == [call(15.0), call(15.0)]
        assert poller.state is PollState.PROOF_FOUND
        assert proof.merkle_path == tuple(proof_body["proofs"])
        assert proof.response_data.voting_round == ROUND

    def test_request_shape(self, proof_body):
        poller, session, _ = make_poller([make_response(200, proof_body)])

        poller.retrieve_proof(REQUEST_BYTES, ROUND)

        args, kwargs = session.post.call_args
        assert args[0] == "https://da.example/api/v1/fdc/proof-by-request-round-raw"
        assert kwargs["json"] == {"votingRoundId": str(ROUND), "requestBytes": REQUEST_BYTES}
        assert kwargs["headers"]["X-API-KEY"] == "api-key"

    def test_always_404_exhausts_budget(self):
        """Should make exactly max_attempts calls and not sleep after the last one."""
        poller, session, sleep = make_poller(None, max_attempts=4)
        session.post.side_effect = None
        session.post.return_value = make_response(404, text="not found")

        with pytest.raises(ProofRetrievalTimeout) as excinfo:
            poller.retrieve_proof(REQUEST_BYTES, ROUND)

        assert excinfo.value.attempts == 4
        assert excinfo.value.round_id == ROUND
        assert session.post.call_count == 4
        assert sleep.call_count == 3
        assert poller.state is PollState.EXHAUSTED

    def test_transient_failures_are_retried(self, proof_body):
        """Network errors, 5xx and incomplete bodies all count as not ready."""
        responses = [
            requests.ConnectionError("reset by peer"),
            make_response(503, text="unavailable"),
            make_response(200, {"status": "pending"}),
            make_response(200, text="not json"),
            make_response(200, {"proofs": [], "responseHex": 12345}),
            make_response(200, {"proofs": "0xdeadbeef", "responseHex": "0xzz"}),
            make_response(200, {"proofs": ["0x12", 7], "responseHex": "0x00"}),
            make_response(200, proof_body),
        ]
        poller, session, sleep = make_poller(responses, max_attempts=10)

        proof = poller.retrieve_proof(REQUEST_BYTES, ROUND)

        assert session.post.call_count == 8
        assert sleep.call_count == 7
        states = [attempt.state for attempt in poller.attempts]
        assert states == [PollState.NOT_READY] * 7 + [PollState.PROOF_FOUND]
        assert poller.attempts[5].detail == "missing proof fields"
        assert proof.merkle_path == tuple(proof_body["proofs"])
        assert poller.attempts[1].status_code == 503

    def test_adjacent_rounds(self, proof_body):
        """Should cycle through configured round offsets, one round per call."""
        responses = [make_response(404, text="")] * 2 + [make_response(200, proof_body)]
        poller, session, _ = make_poller(responses, round_offsets=(0, 1))

        proof = poller.retrieve_proof(REQUEST_BYTES, ROUND - 1)

        queried = [c.kwargs["json"]["votingRoundId"] for c in session.post.call_args_list]
        assert queried == [str(ROUND - 1), str(ROUND), str(ROUND - 1)]
        assert proof.merkle_path == tuple(proof_body["proofs"])

    def test_zero_interval(self, proof_body):
        poller, _, sleep = make_poller(
            [make_response(404, text=""), make_response(200, proof_body)], poll_interval_ms=0
        )

        poller.retrieve_proof(REQUEST_BYTES, ROUND)

        sleep.assert_called_once_with(0.0)


class TestFromConfig:
    def test_requires_api_key(self):
        with pytest.raises(ConfigError):
            ProofPoller.from_config(FdcConfig())

    def test_uses_config_budget(self):
        config = FdcConfig(da_layer_api_key="k", max_attempts=3, poll_interval_ms=500, round_offsets=(0, 1))

        poller = ProofPoller.from_config(config)

        assert poller.max_attempts == 3
        assert poller.poll_interval_ms == 500
        assert poller.round_offsets == (0, 1)


def test_retrieve_proof_function(proof_body):
    session = MagicMock()
    session.post.return_value = make_response(200, proof_body)

    proof = retrieve_proof(
        REQUEST_BYTES, ROUND, "k", None, 2, 10, base_url="https://da.example", session=session, sleep=MagicMock()
    )

    assert session.post.call_count == 1
    assert proof.response_data.decoded


def test_retrieve_proof_function_passes_round_offsets(proof_body):
    session = MagicMock()
    session.post.side_effect = [make_response(404, text=""), make_response(200, proof_body)]

    retrieve_proof(
        REQUEST_BYTES,
        ROUND,
        "k",
        None,
        3,
        10,
        base_url="https://da.example",
        round_offsets=(0, 1),
        timeout=5,
        session=session,
        sleep=MagicMock(),
    )

    queried = [c.kwargs["json"]["votingRoundId"] for c in session.post.call_args_list]
    assert queried == [str(ROUND), str(ROUND + 1)]
    assert session.post.call_args.kwargs["timeout"] == 5
