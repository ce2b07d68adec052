"""Unit tests for configuration loading."""

import pytest

from fdc_runner.config import FdcConfig, load_config
from fdc_runner.constants import DEFAULT_DA_LAYER_URL, DEFAULT_HUB_ADDRESS, DEFAULT_VERIFIER_URL
from fdc_runner.errors import ConfigError
from fdc_runner.limits import check_fee_limit, parse_native_amount


@pytest.fixture
def no_env_file(tmp_path):
    return tmp_path / "absent.env"


class TestLoadConfig:
    """Tests for load_config()."""

    def test_defaults(self, no_env_file):
        config = load_config(env={}, env_file=no_env_file)

        assert config.verifier_url == DEFAULT_VERIFIER_URL
        assert config.da_layer_url == DEFAULT_DA_LAYER_URL
        assert config.hub_address == DEFAULT_HUB_ADDRESS
        assert config.fee_wei == 10**17
        assert config.round_duration == 90
        assert config.max_attempts == 20
        assert config.poll_interval_ms == 15_000
        assert config.round_offsets == (0,)
        assert config.confirmation_timeout is None
        assert config.rpc_url is None

    def test_env_values(self, no_env_file):
        config = load_config(
            env={
                "FDC_VERIFIER_URL": "https://verifier.example/",
                "FDC_FEE": "0.5",
                "FDC_ROUND_DURATION": "60",
                "FDC_ROUND_OFFSETS": "0, 1, -1",
                "DA_LAYER_MAX_ATTEMPTS": "3",
                "DA_LAYER_POLL_INTERVAL_MS": "250",
                "CONFIRMATION_TIMEOUT": "45",
                "GAS_PRICE_GWEI": "25",
                "GAS_LIMIT": "0x30d40",
            },
            env_file=no_env_file,
        )

        assert config.verifier_url == "https://verifier.example"
        assert config.fee_wei == 5 * 10**17
        assert config.round_duration == 60
        assert config.round_offsets == (0, 1, -1)
        assert config.max_attempts == 3
        assert config.poll_interval_ms == 250
        assert config.confirmation_timeout == 45.0
        assert config.gas_price_wei == 25 * 10**9
        assert config.gas_limit == 200_000

    def test_aliases_and_placeholders(self, no_env_file):
        """Should resolve legacy aliases and ignore placeholder values."""
        config = load_config(
            env={
                "RPC_URL": "https://flare-api.flare.network/ext/C/rpc",
                "X_API_KEY": "da-key",
                "PRIVATE_KEY": "YOUR_PRIVATE_KEY",
            },
            env_file=no_env_file,
        )

        assert config.rpc_url == "https://flare-api.flare.network/ext/C/rpc"
        assert config.da_layer_api_key == "da-key"
        assert config.private_key is None

    def test_env_file_fills_missing_keys(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text('FDC_FEE="0.25"\nDA_LAYER_API_KEY=file-key\n')

        config = load_config(env={"DA_LAYER_API_KEY": "env-key"}, env_file=env_file)

        assert config.fee_wei == 25 * 10**16
        assert config.da_layer_api_key == "env-key"

    def test_fee_above_ceiling(self, no_env_file):
        with pytest.raises(ConfigError):
            load_config(env={"FDC_FEE": "1", "FDC_MAX_FEE": "0.5"}, env_file=no_env_file)

    def test_bad_integer(self, no_env_file):
        with pytest.raises(ConfigError):
            load_config(env={"DA_LAYER_MAX_ATTEMPTS": "many"}, env_file=no_env_file)


class TestFdcConfig:
    @pytest.mark.parametrize(
        "overrides",
        [{"round_duration": 0}, {"max_attempts": 0}, {"poll_interval_ms": -1}, {"round_offsets": ()}],
    )
    def test_validation(self, overrides):
        with pytest.raises(ConfigError):
            FdcConfig(**overrides)

    def test_require_chain_access_lists_missing(self):
        with pytest.raises(ConfigError) as excinfo:
            FdcConfig().require_chain_access()

        assert excinfo.value.missing == ("FLARE_RPC_URL", "PRIVATE_KEY")

    def test_private_key_not_in_repr(self):
        assert "deadbeef" not in repr(FdcConfig(private_key="0xdeadbeef"))


class TestLimits:
    def test_parse_native_amount(self):
        assert parse_native_amount("0.1") == 10**17
        assert parse_native_amount("2") == 2 * 10**18

    def test_parse_rejects_garbage(self):
        with pytest.raises(ConfigError):
            parse_native_amount("ten")
        with pytest.raises(ConfigError):
            parse_native_amount("-1")

    def test_fee_limit(self):
        assert check_fee_limit(10, None) is None
        assert check_fee_limit(10, 10) is None
        assert "exceeds" in check_fee_limit(11, 10)
