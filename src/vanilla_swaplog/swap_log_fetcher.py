"""
Swap log retrieval from the DMC JSON-RPC node.

Fetches the full Swap event history of a pool with a single eth_getLogs
call and decodes it into SwapRecord rows.
"""

import logging
from typing import Any

from web3 import AsyncHTTPProvider, AsyncWeb3, Web3
from web3.types import FilterParams

from .config import SwapLogConfig
from .models import SwapRecord
from .swap_decoder import SwapDecoder
from .utils.notifier import ConsoleNotifier, Notifier

# Get logger for this module
logger = logging.getLogger(__name__)

# keccak("Swap(address,uint256,uint256,uint256,uint256,address)")
SWAP_EVENT_TOPIC = "0xd78ad95fa46c994b6551d0da85fc275fe613ce37657fb8d5e3d130840159d822"

# Indexed sender and recipient are both pinned to this router address
PARTICIPANT_TOPIC = "0x000000000000000000000000e99ca567fb57936ef91c472cbe80f35867fd7323"

SWAP_FILTER_TOPICS = (SWAP_EVENT_TOPIC, PARTICIPANT_TOPIC, PARTICIPANT_TOPIC)


def build_swap_filter(contract_address: str) -> FilterParams:
    """
    Build the eth_getLogs filter for a pool's full Swap history.

    :param contract_address: Pool contract address
    :return: Filter params from block 0 to latest
    """
    return {
        "address": Web3.to_checksum_address(contract_address),
        "fromBlock": 0,
        "toBlock": "latest",
        "topics": list(SWAP_FILTER_TOPICS),
    }


class SwapLogFetcher:
    """
    Fetches and decodes Swap events of a pool.

    fetch_swap_logs never raises: connection, query and decoding failures
    are reported through the notifier and produce an empty list.
    """

    def __init__(
        self,
        config: SwapLogConfig | None = None,
        notify: Notifier | None = None,
        decoder: SwapDecoder | None = None
    ) -> None:
        """
        Initialize the SwapLogFetcher.

        Args:
            config: Viewer configuration (defaults to the fixed endpoints)
            notify: Callback showing errors to the user
            decoder: Swap decoder (a fresh one by default)
        """
        self.config = config or SwapLogConfig()
        self.notify = notify or ConsoleNotifier()
        self.decoder = decoder or SwapDecoder()

        # Setup logging
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _create_web3(self) -> AsyncWeb3:
        """Create an async Web3 client for the configured RPC node."""
        return AsyncWeb3(AsyncHTTPProvider(
            self.config.rpc.rpc_url,
            request_kwargs={'timeout': self.config.request_timeout}
        ))

    async def fetch_swap_logs(self, contract_address: str) -> list[SwapRecord]:
        """
        Fetch and decode the Swap events of a pool.

        Args:
            contract_address: Pool contract address

        Returns:
            Decoded records in RPC order, or an empty list on any failure
        """
        w3: AsyncWeb3 | None = None
        try:
            w3 = self._create_web3()

            if not await w3.is_connected():
                self.logger.error("Failed to connect to DMC RPC")
                self.notify("Failed to connect to DMC RPC")
                return []
            self.logger.info("Connected to DMC RPC")

            filter_params = build_swap_filter(contract_address)
            self.logger.debug(f"Querying logs with filter: {filter_params}")

            logs: list[Any] = list(await w3.eth.get_logs(filter_params))
            self.logger.info(f"Found {len(logs)} logs.")

            records = self.decoder.decode_logs(logs)
            self.decoder.log_metrics()
            return records

        except Exception as e:
            self.logger.error(f"Error fetching data: {e}", exc_info=True)
            self.notify(f"Error fetching data: {e}")
            return []

        finally:
            if w3 is not None:
                await self._disconnect(w3)

    async def _disconnect(self, w3: AsyncWeb3) -> None:
        """Close the provider's HTTP session."""
        try:
            if hasattr(w3, 'provider') and hasattr(w3.provider, 'disconnect'):
                await w3.provider.disconnect()
        except Exception as e:
            self.logger.warning(f"Error during cleanup: {e}")


async def fetch_swap_logs(
    contract_address: str,
    config: SwapLogConfig | None = None,
    notify: Notifier | None = None
) -> list[SwapRecord]:
    """Fetch and decode a pool's Swap events with a one-off fetcher."""
    fetcher = SwapLogFetcher(config=config, notify=notify)
    return await fetcher.fetch_swap_logs(contract_address)
