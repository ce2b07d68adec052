"""Unit tests for request building and identifier encoding."""

import pytest

from fdc_runner.request_builder import build_request, decode_identifier, encode_identifier


class TestEncodeIdentifier:
    """Tests for encode_identifier()."""

    def test_pads_to_bytes32(self):
        """Should right-pad the UTF-8 name with zero bytes."""
        encoded = encode_identifier("Web2Json")

        assert encoded == "0x576562324a736f6e" + "00" * 24
        assert len(encoded) == 66

    def test_rejects_long_names(self):
        """Should refuse names that do not fit in 32 bytes."""
        with pytest.raises(ValueError):
            encode_identifier("x" * 33)

    def test_decode_strips_padding(self):
        assert decode_identifier(encode_identifier("PublicWeb2")) == "PublicWeb2"


class TestBuildRequest:
    """Tests for build_request()."""

    def test_payload_shape(self, sample_request):
        """Should produce the verifier JSON payload."""
        payload = sample_request.to_payload()

        assert payload["attestationType"] == encode_identifier("Web2Json")
        assert payload["sourceId"] == encode_identifier("PublicWeb2")
        body = payload["requestBody"]
        assert body["httpMethod"] == "GET"
        assert body["postProcessJq"] == ".[0]"
        assert body["headers"] == "{}"
        assert body["queryParams"] == "{}"
        assert body["body"] == "{}"
        assert set(body) == {
            "url",
            "httpMethod",
            "headers",
            "queryParams",
            "body",
            "postProcessJq",
            "abiSignature",
        }

    def test_mappings_become_compact_json(self):
        """Should serialize header/query mappings to compact JSON strings."""
        request = build_request(
            "https://api.example.com/data",
            ".value",
            "{}",
            http_method="POST",
            headers={"X-Token": "abc", "Accept": "application/json"},
            query_params="{\"page\":1}",
        )

        assert request.request_body.headers == '{"Accept":"application/json","X-Token":"abc"}'
        assert request.request_body.query_params == '{"page":1}'
        assert request.request_body.http_method == "POST"

    def test_custom_type_name_used_for_endpoint(self):
        request = build_request("https://x", ".", "{}", attestation_type="JsonApi")

        assert request.attestation_type_name == "JsonApi"
        assert request.attestation_type == encode_identifier("JsonApi")

    def test_request_is_immutable(self, sample_request):
        with pytest.raises(AttributeError):
            sample_request.source_id = "0x00"
