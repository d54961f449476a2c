#!/usr/bin/env python3
"""Tests for the configuration module."""

import logging
import os
from unittest.mock import patch

import pytest

from slot_locator.config import (
    DEFAULT_RPC_URL,
    LocatorConfig,
    RpcConfig,
    SearchConfig,
    resolve_api_key,
)


class TestRpcConfig:
    """Tests for RpcConfig."""

    def test_defaults(self):
        """Test the default RPC configuration."""
        config = RpcConfig()

        assert config.rpc_url == DEFAULT_RPC_URL
        assert config.api_key == ""
        assert config.request_timeout == 10.0

    def test_invalid_rpc_url_scheme(self):
        """Test that non-HTTP RPC URL schemes are rejected."""
        with pytest.raises(ValueError, match="Invalid RPC URL scheme"):
            RpcConfig(rpc_url="wss://mainnet.helius-rpc.com")

    def test_missing_rpc_url(self):
        """Test that an empty RPC URL raises an error."""
        with pytest.raises(ValueError, match="RPC URL is required"):
            RpcConfig(rpc_url="")

    def test_request_timeout_validation(self):
        """Test request timeout bounds."""
        with pytest.raises(ValueError, match="Request timeout must be positive"):
            RpcConfig(request_timeout=0)

        with pytest.raises(ValueError, match="Request timeout too long"):
            RpcConfig(request_timeout=121)

    def test_masked_api_key(self):
        """Test that the API key never appears in full."""
        assert RpcConfig(api_key="abcd1234efgh").masked_api_key == "abcd...[MASKED]"
        assert RpcConfig().masked_api_key == "[NOT SET]"


class TestSearchConfig:
    """Tests for SearchConfig."""

    def test_defaults(self):
        """Test the default search configuration."""
        config = SearchConfig()

        assert config.probe_limit == 20
        assert config.final_window == 5
        assert config.search_timeout == 0.0

    def test_probe_limit_validation(self):
        """Test probe limit bounds."""
        with pytest.raises(ValueError, match="Probe limit must be non-negative"):
            SearchConfig(probe_limit=-1)

        with pytest.raises(ValueError, match="Probe limit too high"):
            SearchConfig(probe_limit=1001)

    def test_final_window_validation(self):
        """Test final window bounds."""
        with pytest.raises(ValueError, match="Final window must be non-negative"):
            SearchConfig(final_window=-1)

        with pytest.raises(ValueError, match="Final window too wide"):
            SearchConfig(final_window=101)

    def test_search_timeout_validation(self):
        """Test that a negative deadline is rejected."""
        with pytest.raises(ValueError, match="Search timeout must be non-negative"):
            SearchConfig(search_timeout=-1)


class TestApiKeyResolution:
    """Tests for the argument -> environment -> default key order."""

    @patch.dict(os.environ, {"HELIUS_API_KEY": "env-key"})
    def test_explicit_key_wins(self):
        assert resolve_api_key("cli-key") == "cli-key"

    @patch.dict(os.environ, {"HELIUS_API_KEY": "env-key"})
    def test_environment_key(self):
        assert resolve_api_key(None) == "env-key"

    @patch.dict(os.environ, {}, clear=True)
    def test_default_key(self):
        assert resolve_api_key(None) == ""


class TestLocatorConfig:
    """Tests for LocatorConfig."""

    @patch.dict(os.environ, {}, clear=True)
    def test_from_env_defaults(self):
        """Test loading with no environment variables set."""
        config = LocatorConfig.from_env()

        assert config.rpc == RpcConfig()
        assert config.search == SearchConfig()

    @patch.dict(os.environ, {
        "SOLANA_RPC_URL": "https://api.mainnet-beta.solana.com",
        "HELIUS_API_KEY": "env-key",
        "REQUEST_TIMEOUT": "15",
        "PROBE_LIMIT": "8",
        "FINAL_WINDOW": "3",
        "SEARCH_TIMEOUT": "60"
    }, clear=True)
    def test_from_env_values(self):
        """Test loading every setting from the environment."""
        config = LocatorConfig.from_env()

        assert config.rpc.rpc_url == "https://api.mainnet-beta.solana.com"
        assert config.rpc.api_key == "env-key"
        assert config.rpc.request_timeout == 15.0
        assert config.search.probe_limit == 8
        assert config.search.final_window == 3
        assert config.search.search_timeout == 60.0

    @patch.dict(os.environ, {
        "SOLANA_RPC_URL": "https://env.rpc",
        "HELIUS_API_KEY": "env-key"
    }, clear=True)
    def test_from_env_overrides(self):
        """Test that explicit arguments override the environment."""
        config = LocatorConfig.from_env(api_key="cli-key", rpc_url="https://cli.rpc")

        assert config.rpc.rpc_url == "https://cli.rpc"
        assert config.rpc.api_key == "cli-key"

    @patch.dict(os.environ, {"PROBE_LIMIT": "many"}, clear=True)
    def test_from_env_non_numeric(self):
        """Test that non-numeric values raise ValueError."""
        with pytest.raises(ValueError):
            LocatorConfig.from_env()

    def test_frozen(self):
        """Test that configuration is immutable."""
        config = LocatorConfig(rpc=RpcConfig(), search=SearchConfig())

        with pytest.raises(AttributeError):
            config.rpc = RpcConfig(api_key="other")

    def test_log_config_masks_key(self, caplog):
        """Test that log_config does not leak the API key."""
        config = LocatorConfig(rpc=RpcConfig(api_key="supersecretkey"), search=SearchConfig())

        with caplog.at_level(logging.DEBUG, logger="slot_locator.config"):
            config.log_config()

        assert "supe...[MASKED]" in caplog.text
        assert "supersecretkey" not in caplog.text
