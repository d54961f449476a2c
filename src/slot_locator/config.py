#!/usr/bin/env python3
"""Configuration management for the slot locator.

This module provides type-safe configuration dataclasses with validation.
Configuration is loaded from environment variables with sensible defaults
where appropriate; command-line values override the environment.
"""

import logging
import os
from dataclasses import dataclass
from typing import ClassVar
from urllib.parse import urlparse

# Get logger for this module
logger = logging.getLogger(__name__)

DEFAULT_RPC_URL = "https://mainnet.helius-rpc.com"

# Used when neither --api-key nor HELIUS_API_KEY is given. An empty key means
# requests go out without the x-api-key header.
DEFAULT_API_KEY = ""


def resolve_api_key(explicit: str | None = None) -> str:
    """Resolve the API key: explicit value, then HELIUS_API_KEY, then the default."""
    if explicit:
        return explicit
    if env_key := os.environ.get("HELIUS_API_KEY"):
        return env_key
    return DEFAULT_API_KEY


@dataclass(frozen=True, slots=True)
class RpcConfig:
    """Configuration for the Solana JSON-RPC provider.

    Attributes:
        rpc_url: HTTP(S) JSON-RPC endpoint
        api_key: Credential sent as the x-api-key header (may be empty)
        request_timeout: Per-request timeout in seconds
    """

    rpc_url: str = DEFAULT_RPC_URL
    api_key: str = DEFAULT_API_KEY
    request_timeout: float = 10.0

    def __post_init__(self) -> None:
        """Validate RPC configuration."""
        if not self.rpc_url:
            raise ValueError("RPC URL is required (SOLANA_RPC_URL)")

        parsed = urlparse(self.rpc_url)
        if parsed.scheme not in ('http', 'https'):
            raise ValueError(
                f"Invalid RPC URL scheme: {parsed.scheme}. "
                "Expected http or https"
            )

        if self.request_timeout <= 0:
            raise ValueError(f"Request timeout must be positive, got {self.request_timeout}")
        if self.request_timeout > 120:
            raise ValueError(f"Request timeout too long (max 120s), got {self.request_timeout}")

    @property
    def masked_api_key(self) -> str:
        """API key safe for logs."""
        if not self.api_key:
            return "[NOT SET]"
        return f"{self.api_key[:4]}...[MASKED]"


@dataclass(frozen=True, slots=True)
class SearchConfig:
    """Configuration for the binary search.

    Attributes:
        probe_limit: Neighbouring slots probed when a slot has no block time
        final_window: Slots scanned on each side of the converged window
        search_timeout: Whole-search deadline in seconds (0 disables it)
    """

    probe_limit: int = 20
    final_window: int = 5
    search_timeout: float = 0.0

    MAX_PROBE_LIMIT: ClassVar[int] = 1000
    MAX_FINAL_WINDOW: ClassVar[int] = 100

    def __post_init__(self) -> None:
        """Validate search configuration."""
        if self.probe_limit < 0:
            raise ValueError(f"Probe limit must be non-negative, got {self.probe_limit}")
        if self.probe_limit > self.MAX_PROBE_LIMIT:
            raise ValueError(
                f"Probe limit too high (max {self.MAX_PROBE_LIMIT}), got {self.probe_limit}"
            )

        if self.final_window < 0:
            raise ValueError(f"Final window must be non-negative, got {self.final_window}")
        if self.final_window > self.MAX_FINAL_WINDOW:
            raise ValueError(
                f"Final window too wide (max {self.MAX_FINAL_WINDOW}), got {self.final_window}"
            )

        if self.search_timeout < 0:
            raise ValueError(f"Search timeout must be non-negative, got {self.search_timeout}")


@dataclass(frozen=True, slots=True)
class LocatorConfig:
    """Main configuration for the slot locator.

    Attributes:
        rpc: Configuration for the RPC provider
        search: Configuration for the search algorithm
    """

    rpc: RpcConfig
    search: SearchConfig

    @classmethod
    def from_env(
        cls,
        api_key: str | None = None,
        rpc_url: str | None = None
    ) -> "LocatorConfig":
        """Load configuration from environment variables.

        Args:
            api_key: Explicit API key, takes precedence over HELIUS_API_KEY
            rpc_url: Explicit RPC URL, takes precedence over SOLANA_RPC_URL

        Returns:
            LocatorConfig instance with loaded values

        Raises:
            ValueError: If a variable is not a number or fails validation
        """
        rpc_config = RpcConfig(
            rpc_url=rpc_url or os.environ.get("SOLANA_RPC_URL", DEFAULT_RPC_URL),
            api_key=resolve_api_key(api_key),
            request_timeout=float(os.environ.get("REQUEST_TIMEOUT", "10"))
        )

        search_config = SearchConfig(
            probe_limit=int(os.environ.get("PROBE_LIMIT", "20")),
            final_window=int(os.environ.get("FINAL_WINDOW", "5")),
            search_timeout=float(os.environ.get("SEARCH_TIMEOUT", "0"))
        )

        return cls(rpc=rpc_config, search=search_config)

    def log_config(self) -> None:
        """Log the configuration in a readable format for debugging."""
        logger.debug("=" * 60)
        logger.debug("Slot Locator Configuration")
        logger.debug("=" * 60)

        logger.debug("RPC:")
        logger.debug(f"  URL: {self.rpc.rpc_url}")
        logger.debug(f"  API Key: {self.rpc.masked_api_key}")
        logger.debug(f"  Request Timeout: {self.rpc.request_timeout} seconds")

        logger.debug("Search:")
        logger.debug(f"  Probe Limit: {self.search.probe_limit} slots")
        logger.debug(f"  Final Window: +/-{self.search.final_window} slots")
        if self.search.search_timeout:
            logger.debug(f"  Search Timeout: {self.search.search_timeout} seconds")
        else:
            logger.debug("  Search Timeout: none")

        logger.debug("=" * 60)
