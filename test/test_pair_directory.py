#!/usr/bin/env python3
"""Tests for PairDirectoryClient and QueryResultCache.

This module tests the subgraph query, the formatting of pair options
and the single-slot caching of the query result.
"""

import unittest
from unittest.mock import AsyncMock, MagicMock, Mock, patch

import httpx
import pytest

from vanilla_swaplog.config import DirectoryConfig
from vanilla_swaplog.models import FormattedPairOption, TradingPair
from vanilla_swaplog.pair_directory import PAIRS_QUERY, PairDirectoryClient, QueryResultCache

GRAPH_URL = "https://graph.vanillaswap.org/subgraphs/name/vanillalabs/vanillaswap"

PAIRS_RESPONSE = {
    "data": {
        "pairs": [
            {"token0": {"symbol": "WDFI"}, "token1": {"symbol": "USDT"}, "id": "0x1111111111111111111111111111111111111111"},
            {"token0": {"symbol": "BTC"}, "token1": {"symbol": "WDFI"}, "id": "0x2222222222222222222222222222222222222222"},
        ]
    }
}


def mock_async_client(mock_client_class, json_body=None, status_error=None):
    """Wire a patched httpx.AsyncClient to return one response."""
    mock_client = AsyncMock()
    mock_response = MagicMock()
    mock_response.json = MagicMock(return_value=json_body)
    mock_response.raise_for_status = MagicMock(side_effect=status_error)
    mock_client.post = AsyncMock(return_value=mock_response)
    mock_client_class.return_value.__aenter__.return_value = mock_client
    return mock_client


class TestQueryResultCache(unittest.IsolatedAsyncioTestCase):
    """Test cases for QueryResultCache."""

    async def test_starts_empty(self):
        cache = QueryResultCache()
        assert not cache.is_populated
        assert cache.get() is None

    async def test_get_or_populate_loads_once(self):
        cache = QueryResultCache()
        loader = AsyncMock(return_value={"data": {"pairs": []}})

        first = await cache.get_or_populate(loader)
        second = await cache.get_or_populate(loader)

        assert first is second
        loader.assert_awaited_once()
        assert cache.is_populated

    async def test_failed_loader_leaves_cache_empty(self):
        cache = QueryResultCache()
        loader = AsyncMock(side_effect=RuntimeError("boom"))

        with pytest.raises(RuntimeError):
            await cache.get_or_populate(loader)

        assert not cache.is_populated

    async def test_set(self):
        cache = QueryResultCache()
        cache.set(PAIRS_RESPONSE)
        assert cache.get() is PAIRS_RESPONSE


class TestPairDirectoryClient(unittest.IsolatedAsyncioTestCase):
    """Test cases for PairDirectoryClient."""

    def setUp(self):
        """Set up test fixtures."""
        self.cache = QueryResultCache()
        self.client = PairDirectoryClient(cache=self.cache)

    async def test_init_default(self):
        client = PairDirectoryClient()
        assert client.config.graph_url == GRAPH_URL
        assert not client.cache.is_populated

    @patch('vanilla_swaplog.pair_directory.httpx.AsyncClient')
    async def test_list_formatted_pairs(self, mock_client_class):
        """Pairs are formatted as TOKEN0:TOKEN1 with the pool id as value."""
        mock_async_client(mock_client_class, PAIRS_RESPONSE)

        options = await self.client.list_formatted_pairs()

        assert options == [
            FormattedPairOption(text="WDFI:USDT", value="0x1111111111111111111111111111111111111111"),
            FormattedPairOption(text="BTC:WDFI", value="0x2222222222222222222222222222222222222222"),
        ]

    @patch('vanilla_swaplog.pair_directory.httpx.AsyncClient')
    async def test_query_payload(self, mock_client_class):
        mock_client = mock_async_client(mock_client_class, PAIRS_RESPONSE)

        await self.client.fetch_query_result()

        mock_client.post.assert_called_once_with(
            GRAPH_URL,
            json={
                "query": PAIRS_QUERY,
                "operationName": "queryPairs",
                "extensions": {}
            },
            timeout=30.0
        )

    @patch('vanilla_swaplog.pair_directory.httpx.AsyncClient')
    async def test_second_call_served_from_cache(self, mock_client_class):
        """Two calls in a row issue exactly one request."""
        mock_client = mock_async_client(mock_client_class, PAIRS_RESPONSE)

        first = await self.client.list_formatted_pairs()
        second = await self.client.list_formatted_pairs()

        assert first == second
        assert mock_client.post.call_count == 1
        assert self.cache.get() == PAIRS_RESPONSE

    @patch('vanilla_swaplog.pair_directory.httpx.AsyncClient')
    async def test_http_error_propagates(self, mock_client_class):
        mock_async_client(
            mock_client_class,
            status_error=httpx.HTTPStatusError("Server error", request=Mock(), response=Mock())
        )

        with pytest.raises(httpx.HTTPStatusError):
            await self.client.list_formatted_pairs()

        assert not self.cache.is_populated

    @patch('vanilla_swaplog.pair_directory.httpx.AsyncClient')
    async def test_failed_call_is_retried(self, mock_client_class):
        """A failure leaves the cache empty so the next call queries again."""
        mock_client = AsyncMock()
        failing = MagicMock()
        failing.raise_for_status = MagicMock(
            side_effect=httpx.HTTPStatusError("Bad gateway", request=Mock(), response=Mock())
        )
        succeeding = MagicMock()
        succeeding.raise_for_status = MagicMock()
        succeeding.json = MagicMock(return_value=PAIRS_RESPONSE)
        mock_client.post = AsyncMock(side_effect=[failing, succeeding])
        mock_client_class.return_value.__aenter__.return_value = mock_client

        with pytest.raises(httpx.HTTPStatusError):
            await self.client.list_formatted_pairs()
        options = await self.client.list_formatted_pairs()

        assert len(options) == 2
        assert mock_client.post.call_count == 2

    @patch('vanilla_swaplog.pair_directory.httpx.AsyncClient')
    async def test_graphql_errors_are_not_cached(self, mock_client_class):
        mock_async_client(mock_client_class, {"errors": [{"message": "indexer down"}]})

        with pytest.raises(KeyError):
            await self.client.list_formatted_pairs()

        assert not self.cache.is_populated

    @patch('vanilla_swaplog.pair_directory.httpx.AsyncClient')
    async def test_network_error_propagates(self, mock_client_class):
        mock_client = AsyncMock()
        mock_client.post = AsyncMock(side_effect=httpx.ConnectError("connection refused"))
        mock_client_class.return_value.__aenter__.return_value = mock_client

        with pytest.raises(httpx.ConnectError):
            await self.client.list_formatted_pairs()

    async def test_prepopulated_cache_needs_no_network(self):
        self.cache.set(PAIRS_RESPONSE)

        with patch('vanilla_swaplog.pair_directory.httpx.AsyncClient') as mock_client_class:
            pairs = await self.client.list_pairs()

        mock_client_class.assert_not_called()
        assert pairs[1] == TradingPair(
            token0_symbol="BTC",
            token1_symbol="WDFI",
            pool_id="0x2222222222222222222222222222222222222222"
        )

    async def test_custom_endpoint(self):
        client = PairDirectoryClient(config=DirectoryConfig(graph_url="http://localhost:8000/graphql"))
        assert client.config.graph_url == "http://localhost:8000/graphql"
