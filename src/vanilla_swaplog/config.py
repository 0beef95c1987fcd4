#!/usr/bin/env python3
"""Configuration management for the Vanilla swap log viewer.

This module provides type-safe configuration dataclasses with validation.
Every endpoint has a fixed default; environment variables may point the
viewer at a different node or subgraph for local testing.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

# Get logger for this module
logger = logging.getLogger(__name__)

DEFAULT_RPC_URL = "https://dmc.mydefichain.com/mainnet"
DEFAULT_EXPLORER_URL = "https://mainnet-dmc.mydefichain.com:8441"
DEFAULT_GRAPH_URL = "https://graph.vanillaswap.org/subgraphs/name/vanillalabs/vanillaswap"
DEFAULT_STORAGE_PATH = "~/.vanillaswaplog/local_storage.json"


def _validate_http_url(url: str, name: str, env_var: str) -> None:
    """Raise ValueError unless url is a non-empty http(s) URL."""
    if not url:
        raise ValueError(f"{name} is required ({env_var})")

    parsed = urlparse(url)
    if parsed.scheme not in ('http', 'https'):
        raise ValueError(
            f"Invalid {name} scheme: {parsed.scheme}. Expected http or https"
        )


@dataclass(frozen=True, slots=True)
class RpcConfig:
    """Configuration for the DMC JSON-RPC node and its block explorer.

    Attributes:
        rpc_url: HTTP(S) JSON-RPC endpoint used for log queries
        explorer_url: Base URL of the block explorer for block and tx links
    """

    rpc_url: str = DEFAULT_RPC_URL
    explorer_url: str = DEFAULT_EXPLORER_URL

    def __post_init__(self) -> None:
        """Validate RPC configuration."""
        _validate_http_url(self.rpc_url, "RPC URL", "RPC_URL")
        _validate_http_url(self.explorer_url, "Explorer URL", "EXPLORER_URL")

        # Link templates append paths, keep the base without a trailing slash
        if self.explorer_url.endswith('/'):
            object.__setattr__(self, 'explorer_url', self.explorer_url.rstrip('/'))


@dataclass(frozen=True, slots=True)
class DirectoryConfig:
    """Configuration for the pair directory subgraph.

    Attributes:
        graph_url: GraphQL endpoint listing the exchange's trading pairs
    """

    graph_url: str = DEFAULT_GRAPH_URL

    def __post_init__(self) -> None:
        """Validate directory configuration."""
        _validate_http_url(self.graph_url, "Graph URL", "GRAPH_URL")


@dataclass(frozen=True, slots=True)
class SwapLogConfig:
    """Main configuration for the swap log viewer.

    Attributes:
        rpc: RPC node and explorer configuration
        directory: Pair directory configuration
        request_timeout: Timeout in seconds for RPC and HTTP requests
        storage_path: JSON file emulating the browser's local storage
    """

    rpc: RpcConfig = field(default_factory=RpcConfig)
    directory: DirectoryConfig = field(default_factory=DirectoryConfig)
    request_timeout: int = 30
    storage_path: str = DEFAULT_STORAGE_PATH

    def __post_init__(self) -> None:
        """Validate viewer configuration."""
        if self.request_timeout <= 0:
            raise ValueError(f"Request timeout must be positive, got {self.request_timeout}")
        if self.request_timeout > 600:
            raise ValueError(f"Request timeout too long (max 600s), got {self.request_timeout}")

        if not self.storage_path:
            raise ValueError("Storage path is required (STORAGE_PATH)")

    @property
    def storage_file(self) -> Path:
        """Storage path with the user directory expanded."""
        return Path(self.storage_path).expanduser()

    @classmethod
    def from_env(cls) -> "SwapLogConfig":
        """Load configuration from environment variables.

        Returns:
            SwapLogConfig instance with loaded values

        Raises:
            ValueError: If an environment variable holds an invalid value
        """
        rpc_config = RpcConfig(
            rpc_url=os.environ.get("RPC_URL", DEFAULT_RPC_URL),
            explorer_url=os.environ.get("EXPLORER_URL", DEFAULT_EXPLORER_URL)
        )

        directory_config = DirectoryConfig(
            graph_url=os.environ.get("GRAPH_URL", DEFAULT_GRAPH_URL)
        )

        timeout_raw = os.environ.get("REQUEST_TIMEOUT", "30")
        try:
            request_timeout = int(timeout_raw)
        except ValueError:
            raise ValueError(
                f"REQUEST_TIMEOUT must be an integer, got {timeout_raw!r}"
            ) from None

        return cls(
            rpc=rpc_config,
            directory=directory_config,
            request_timeout=request_timeout,
            storage_path=os.environ.get("STORAGE_PATH", DEFAULT_STORAGE_PATH)
        )

    def log_config(self) -> None:
        """Log the configuration in a readable format for debugging."""
        logger.info("=" * 60)
        logger.info("Vanilla Swap Log Configuration")
        logger.info("=" * 60)

        logger.info("RPC:")
        logger.info(f"  RPC URL: {self.rpc.rpc_url}")
        logger.info(f"  Explorer: {self.rpc.explorer_url}")

        logger.info("Pair Directory:")
        logger.info(f"  Graph URL: {self.directory.graph_url}")

        logger.info("Settings:")
        logger.info(f"  Request Timeout: {self.request_timeout} seconds")
        logger.info(f"  Storage: {self.storage_file}")

        logger.info("=" * 60)
