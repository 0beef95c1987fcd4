"""
VanillaSwap pair directory.

Queries the VanillaSwap subgraph for its trading pairs and formats them
as selector options, keeping the first successful result in a
single-slot cache.
"""

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from .config import DirectoryConfig
from .models import FormattedPairOption, TradingPair

logger = logging.getLogger(__name__)

PAIRS_QUERY = """query queryPairs {
    pairs {
        token0 {symbol}
        token1 {symbol}
        id
    }
}"""


class QueryResultCache:
    """Single-slot cache for the last successful directory query.

    Empty until first populated, never invalidated afterwards.
    """

    def __init__(self) -> None:
        self._value: dict[str, Any] | None = None

    @property
    def is_populated(self) -> bool:
        """Whether a successful result has been stored."""
        return self._value is not None

    def get(self) -> dict[str, Any] | None:
        """The cached result, or None while empty."""
        return self._value

    def set(self, value: dict[str, Any]) -> None:
        """Store a result, replacing any previous one."""
        self._value = value

    async def get_or_populate(
        self,
        loader: Callable[[], Awaitable[dict[str, Any]]]
    ) -> dict[str, Any]:
        """Return the cached value, awaiting loader to fill an empty slot.

        Args:
            loader: Coroutine function producing the value

        Returns:
            The cached or freshly loaded value

        Raises:
            Exception: Whatever the loader raises; the slot stays empty
        """
        if self._value is not None:
            return self._value

        value = await loader()
        self._value = value
        return value


class PairDirectoryClient:
    """Client for the VanillaSwap subgraph listing trading pairs.

    Query failures propagate to the caller; only successful responses
    are cached.
    """

    def __init__(
        self,
        config: DirectoryConfig | None = None,
        cache: QueryResultCache | None = None,
        request_timeout: float = 30.0
    ) -> None:
        """Initialize the directory client.

        Args:
            config: Directory configuration (defaults to the public subgraph)
            cache: Query result cache (a fresh one by default)
            request_timeout: HTTP timeout in seconds
        """
        self.config = config or DirectoryConfig()
        self.cache = cache or QueryResultCache()
        self.request_timeout = request_timeout

    async def _graph_post(self, payload: dict[str, Any]) -> Any:
        """Post a GraphQL request to the subgraph.

        Args:
            payload: GraphQL request body

        Returns:
            JSON response from the subgraph

        Raises:
            httpx.HTTPStatusError: If the request fails
        """
        async with httpx.AsyncClient() as client:
            logger.debug(f"Posting to {self.config.graph_url}: {json.dumps(payload)}")
            response: httpx.Response = await client.post(
                self.config.graph_url,
                json=payload,
                timeout=self.request_timeout
            )
            response.raise_for_status()
            return response.json()

    async def _query_pairs(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "query": PAIRS_QUERY,
            "operationName": "queryPairs",
            "extensions": {}
        }
        result = await self._graph_post(payload)

        # Validate the shape before it can reach the cache
        pairs = result["data"]["pairs"]
        logger.info(f"read {len(pairs)} pool data.")
        return result

    async def fetch_query_result(self) -> dict[str, Any]:
        """Return the raw pairs query result, from cache when available.

        Returns:
            Subgraph response, `{"data": {"pairs": [...]}}`

        Raises:
            httpx.HTTPError: If the request fails
            KeyError: If the response has no `data.pairs`
        """
        if self.cache.is_populated:
            logger.debug("Serving pairs from cache")
        return await self.cache.get_or_populate(self._query_pairs)

    async def list_pairs(self) -> list[TradingPair]:
        """Return every trading pair known to the directory."""
        query_result = await self.fetch_query_result()
        return [TradingPair.from_graph(pair) for pair in query_result["data"]["pairs"]]

    async def list_formatted_pairs(self) -> list[FormattedPairOption]:
        """Return the pairs as "TOKEN0:TOKEN1" selection options."""
        return [FormattedPairOption.from_pair(pair) for pair in await self.list_pairs()]
