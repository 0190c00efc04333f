"""
Tests for settings and the chain registry.
"""

import pytest
from pydantic import ValidationError

from ozean_activity.config import DEFAULT_BRIDGE_TOKENS, Settings
from ozean_activity.errors import ChainConnectionError
from ozean_activity.evm import OZEAN, SEPOLIA, ChainRegistry


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.sepolia_rpc_url == "https://eth-sepolia.g.alchemy.com/v2"
        assert settings.ozean_rpc_url == "https://ozean-testnet.rpc.caldera.xyz/http"
        assert settings.bridge_tokens == DEFAULT_BRIDGE_TOKENS
        assert settings.log_from_block == 0
        assert settings.log_to_block == "latest"
        assert settings.count_unwrap_events is False

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("OZEAN_RPC_URL", "http://ozean.local:8545")
        monkeypatch.setenv("STAKING_CONTRACT_ADDRESS", "0x1234567890123456789012345678901234567890")
        monkeypatch.setenv("LOG_TO_BLOCK", "123456")
        monkeypatch.setenv("BRIDGE_TOKENS", '{"USDC": "0x94a9D9AC8a22534E3FaCa9F4e7F2E2cf85d5E4C8"}')

        settings = Settings(_env_file=None)

        assert settings.ozean_rpc_url == "http://ozean.local:8545"
        assert settings.staking_contract_address == "0x1234567890123456789012345678901234567890"
        assert settings.log_to_block == 123456
        assert list(settings.bridge_tokens) == ["USDC"]

    def test_invalid_contract_address_rejected(self):
        with pytest.raises(ValidationError, match="invalid address"):
            Settings(_env_file=None, bridge_contract_address="0xnothex")

    def test_invalid_bridge_token_rejected(self):
        with pytest.raises(ValidationError, match="bridge token DAI"):
            Settings(_env_file=None, bridge_tokens={"DAI": "0x1234"})

    def test_empty_bridge_tokens_rejected(self):
        with pytest.raises(ValidationError, match="at least one bridge token"):
            Settings(_env_file=None, bridge_tokens={})

    def test_invalid_block_tag_rejected(self):
        with pytest.raises(ValidationError, match="block number or tag"):
            Settings(_env_file=None, log_to_block="tomorrow")

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, rpc_timeout_seconds=0)


class TestChainRegistry:
    """Tests for ChainRegistry."""

    def test_connections_are_reused(self):
        registry = ChainRegistry(Settings(_env_file=None))
        assert registry.get(SEPOLIA) is registry.get(SEPOLIA)

    def test_one_connection_per_network(self):
        settings = Settings(_env_file=None)
        registry = ChainRegistry(settings)

        sepolia = registry.get(SEPOLIA)
        ozean = registry.get(OZEAN)

        assert sepolia is not ozean
        assert sepolia.rpc_url == settings.sepolia_rpc_url
        assert ozean.rpc_url == settings.ozean_rpc_url
        assert registry.networks == (SEPOLIA, OZEAN)

    def test_unknown_network(self):
        registry = ChainRegistry(Settings(_env_file=None))
        with pytest.raises(ChainConnectionError, match="not configured"):
            registry.get("mainnet")

    def test_connection_is_immutable(self):
        connection = ChainRegistry(Settings(_env_file=None)).get(OZEAN)
        with pytest.raises(AttributeError):
            connection.rpc_url = "http://elsewhere"  # type: ignore[misc]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
